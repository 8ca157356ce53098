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


"""Branch-protection data models.

The GitHub API uses different shapes for reading and writing branch
protection: GET returns ``{enabled: bool}`` wrappers, URL fields and full
actor objects, while PUT expects bare booleans and login/slug lists. The two
shapes are kept as separate types, :class:`BranchProtection` (read) and
:class:`ProtectionUpdate` (write); ``protection_payload.to_update_payload``
maps one onto the other.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

# App id GitHub assigns to checks produced by GitHub Actions.
GITHUB_ACTIONS_APP_ID = 15368


@dataclass(frozen=True)
class CheckEntry:
    """A required status check (``context`` plus the producing app id)."""
    context: str
    app_id: int | None = None

    @classmethod
    def from_api(cls, obj: dict[str, Any]) -> CheckEntry:
        app_id = obj.get("app_id")
        return cls(context=str(obj.get("context") or ""), app_id=None if app_id is None else int(app_id))

    def to_api(self) -> dict[str, Any]:
        return {"context": self.context, "app_id": self.app_id}

    def sort_key(self) -> tuple[str, int]:
        return (self.context, -1 if self.app_id is None else self.app_id)


@dataclass
class PullRequestRef:
    """The subset of a pull request needed to pick the commit to reconcile against."""
    number: int
    base_ref: str
    head_ref: str
    head_sha: str
    merged: bool
    merge_commit_sha: str | None = None

    @classmethod
    def from_api(cls, obj: dict[str, Any]) -> PullRequestRef:
        base = obj.get("base") or {}
        head = obj.get("head") or {}
        return cls(
            number=int(obj.get("number") or 0),
            base_ref=str(base.get("ref") or ""),
            head_ref=str(head.get("ref") or ""),
            head_sha=str(head.get("sha") or ""),
            merged=bool(obj.get("merged")),
            merge_commit_sha=obj.get("merge_commit_sha") or None,
        )

    @property
    def target_commit(self) -> str:
        """Merge commit for merged PRs, head commit otherwise.

        GitHub also fills ``merge_commit_sha`` for open PRs (the test merge),
        so the ``merged`` flag decides.
        """
        if self.merged and self.merge_commit_sha:
            return self.merge_commit_sha
        return self.head_sha


@dataclass
class BranchProtection:
    """Branch protection in the shape returned by ``GET .../protection``."""
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def required_status_checks(self) -> dict[str, Any] | None:
        return self.raw.get("required_status_checks")

    @property
    def checks(self) -> list[CheckEntry]:
        rsc = self.required_status_checks or {}
        return [CheckEntry.from_api(c) for c in rsc.get("checks") or [] if isinstance(c, dict)]

    def with_checks(self, checks: list[CheckEntry]) -> BranchProtection:
        """Return a copy whose required status checks are replaced by *checks*.

        The deprecated ``contexts`` list is dropped since GitHub derives it
        from ``checks``.
        """
        raw = copy.deepcopy(self.raw)
        rsc = raw.get("required_status_checks") or {"strict": False}
        rsc.pop("contexts", None)
        rsc["checks"] = [c.to_api() for c in checks]
        raw["required_status_checks"] = rsc
        return BranchProtection(raw)


@dataclass
class ProtectionUpdate:
    """Branch protection in the shape accepted by ``PUT .../protection``."""
    payload: dict[str, Any]


@dataclass
class ReconcileOutcome:
    """Result of one reconciliation run."""
    pull_request: PullRequestRef
    commit: str
    job_names: list[str]
    current: BranchProtection
    desired: BranchProtection
    diff: list[str]
    applied: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.diff)
