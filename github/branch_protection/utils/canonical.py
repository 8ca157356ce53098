#
# Copyright 2026 ABSA Group Limited
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#


"""Canonical JSON form and unified diff of branch-protection documents.

Both sides of a comparison go through :func:`canonicalize`, so key order and
array order never show up as a difference.
"""

from __future__ import annotations

import copy
import difflib
import json
from typing import Any

from .models import BranchProtection


def _sort_key(value: Any) -> str:
    return json.dumps(value, sort_keys=True)


def canonicalize(value: Any) -> Any:
    """Recursively sort mapping keys and array elements."""
    if isinstance(value, dict):
        return {key: canonicalize(value[key]) for key in sorted(value)}
    if isinstance(value, list):
        return sorted((canonicalize(item) for item in value), key=_sort_key)
    return value


def comparable_form(protection: BranchProtection) -> Any:
    """Canonical form of *protection* without the deprecated ``contexts`` list."""
    raw = copy.deepcopy(protection.raw)
    rsc = raw.get("required_status_checks")
    if isinstance(rsc, dict):
        rsc.pop("contexts", None)
    return canonicalize(raw)


def render_canonical(protection: BranchProtection) -> str:
    return json.dumps(comparable_form(protection), indent=2, sort_keys=True)


def protection_diff(current: BranchProtection, desired: BranchProtection) -> list[str]:
    """Unified diff of the canonical forms; empty when nothing changes."""
    before = render_canonical(current).splitlines()
    after = render_canonical(desired).splitlines()
    if before == after:
        return []
    return list(difflib.unified_diff(before, after, fromfile="current", tofile="desired", lineterm=""))
