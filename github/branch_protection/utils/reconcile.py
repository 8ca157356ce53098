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


"""Required-check reconciliation – the pure merge of freshly collected CI job
names into an existing branch-protection configuration.

Checks produced by the CI app are replaced wholesale on every run; checks
from other apps (CLA bots, external CI) are preserved unless a fresh CI job
claims the same context.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable

from .models import BranchProtection, CheckEntry


def build_desired_checks(job_names: Iterable[str], app_id: int) -> list[CheckEntry]:
    """Return one check per distinct job name, sorted by context."""
    names = sorted({name for name in job_names if name})
    return [CheckEntry(context=name, app_id=app_id) for name in names]


def merge_required_checks(
    current: Iterable[CheckEntry],
    desired: Iterable[CheckEntry],
    app_id: int,
) -> list[CheckEntry]:
    """Partition *current* by app id and union the non-CI part with *desired*.

    Non-CI checks are kept unless a *desired* check claims their context.
    Duplicates collapse on ``(context, app_id)``.
    """
    desired = list(desired)
    claimed = {check.context for check in desired}
    merged: set[CheckEntry] = set(desired)
    for check in current:
        if check.app_id == app_id or check.context in claimed:
            continue
        merged.add(check)
    return sorted(merged, key=CheckEntry.sort_key)


def reconcile_protection(
    current: BranchProtection,
    desired_checks: Iterable[CheckEntry],
    app_id: int,
) -> BranchProtection:
    """Return the desired protection for *current* given the fresh CI checks."""
    merged = merge_required_checks(current.checks, desired_checks, app_id)
    if current.required_status_checks is None and not merged:
        # Absent and null status checks stay as GitHub returned them.
        return BranchProtection(copy.deepcopy(current.raw))
    return current.with_checks(merged)
