"""pytest configuration: put ``github/`` on sys.path so the tool packages import
the same way the scripts do when run with ``PYTHONPATH=github``."""

import os
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "github"))

# Keep CI debug settings from leaking into verbose-mode tests.
os.environ.pop("RUNNER_DEBUG", None)


@pytest.fixture(autouse=True)
def _reset_common_state():
    from shared import common

    common.set_verbose_enabled(False)
    common.set_call_timeout(common.DEFAULT_CALL_TIMEOUT)
    yield
    common.set_verbose_enabled(False)
    common.set_call_timeout(common.DEFAULT_CALL_TIMEOUT)
