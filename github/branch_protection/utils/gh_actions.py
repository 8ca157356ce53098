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


"""GitHub REST operations via the ``gh`` CLI – pull request lookup, workflow
runs and jobs for a commit, and branch-protection read / replace.

Every function raises a :mod:`shared.errors` subclass on failure.
"""

from __future__ import annotations

from urllib.parse import quote

from shared.common import gh_api, gh_api_lines, vprint
from shared.errors import NotFoundError, TransportError

from .models import BranchProtection, ProtectionUpdate, PullRequestRef


def _branch_path(repo: str, branch: str) -> str:
    return f"repos/{repo}/branches/{quote(branch, safe='')}/protection"


def gh_repo_check(repo: str) -> None:
    """Raise unless *repo* exists and is readable by the caller."""
    try:
        gh_api(f"repos/{repo}", what=f"Access to repository {repo}")
    except NotFoundError as exc:
        raise NotFoundError(f"Unable to access repository {repo}", exc.status_code) from exc


def gh_pr_get(repo: str, number: int) -> PullRequestRef:
    try:
        data = gh_api(f"repos/{repo}/pulls/{int(number)}", what=f"Fetching PR #{number}")
    except NotFoundError as exc:
        raise NotFoundError(f"Pull request #{number} not found in {repo}", exc.status_code) from exc
    if not isinstance(data, dict):
        raise TransportError(f"Unexpected response for PR #{number} in {repo}")
    return PullRequestRef.from_api(data)


def gh_run_ids_for_commit(repo: str, sha: str) -> list[int]:
    """Return the ids of all workflow runs whose head commit is *sha*."""
    lines = gh_api_lines(
        f"repos/{repo}/actions/runs?head_sha={sha}&per_page=100",
        ".workflow_runs[].id",
        what=f"Listing workflow runs for commit {sha}",
    )
    run_ids: list[int] = []
    for line in lines:
        try:
            run_ids.append(int(line))
        except ValueError:
            vprint(f"WARN: ignoring unexpected run id {line!r}")
    return run_ids


def gh_run_job_names(repo: str, run_id: int) -> list[str]:
    """Return the job names of the latest attempt of workflow run *run_id*."""
    return gh_api_lines(
        f"repos/{repo}/actions/runs/{int(run_id)}/jobs?per_page=100",
        ".jobs[].name",
        what=f"Listing jobs for workflow run {run_id}",
    )


def gh_branch_protection_get(repo: str, branch: str) -> BranchProtection:
    try:
        data = gh_api(_branch_path(repo, branch), what=f"Fetching branch protection for {branch}")
    except NotFoundError as exc:
        raise NotFoundError(
            f"Branch protection is not configured for branch {branch} of {repo}",
            exc.status_code,
        ) from exc
    if not isinstance(data, dict):
        raise TransportError(f"Unexpected branch protection response for {branch} of {repo}")
    return BranchProtection(raw=data)


def gh_branch_protection_put(repo: str, branch: str, update: ProtectionUpdate) -> BranchProtection:
    """Replace the branch protection of *branch* and return the stored result."""
    data = gh_api(
        _branch_path(repo, branch),
        method="PUT",
        payload=update.payload,
        what=f"Updating branch protection for {branch}",
    )
    return BranchProtection(raw=data if isinstance(data, dict) else {})
