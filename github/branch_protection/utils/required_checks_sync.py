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


"""Required-check sync orchestration – resolves the PR commit, collects job
names from its workflow runs, reconciles them into the base branch's
protection and either previews or applies the result.

Every step depends on the previous one; the only write is the final PUT.
"""

from __future__ import annotations

from shared.common import log_info, log_warning, vprint
from shared.errors import NoRunsError

from .canonical import protection_diff
from .gh_actions import (
    gh_branch_protection_get,
    gh_branch_protection_put,
    gh_pr_get,
    gh_run_ids_for_commit,
    gh_run_job_names,
)
from .models import PullRequestRef, ReconcileOutcome
from .protection_payload import to_update_payload
from .reconcile import build_desired_checks, reconcile_protection


def resolve_commit(repo: str, pr_number: int) -> tuple[PullRequestRef, str]:
    log_info("Fetching PR details...")
    pr = gh_pr_get(repo, pr_number)
    if not pr.merged:
        log_warning(f"PR #{pr_number} is not merged; continuing anyway with head commit {pr.head_sha}...")
    elif not pr.merge_commit_sha:
        log_warning(f"PR #{pr_number} is merged but its merge commit is unavailable; using head commit {pr.head_sha}...")

    log_info(f"Target branch: {pr.base_ref}")
    log_info(f"PR head branch: {pr.head_ref}")
    log_info(f"PR head commit SHA: {pr.head_sha}")
    if pr.merged and pr.merge_commit_sha:
        log_info(f"PR merge commit SHA: {pr.merge_commit_sha}")
    return pr, pr.target_commit


def collect_job_names(repo: str, commit: str) -> list[str]:
    """Return the sorted union of job names over all workflow runs for *commit*."""
    log_info(f"Listing workflow runs triggered by commit {commit}...")
    run_ids = gh_run_ids_for_commit(repo, commit)
    if not run_ids:
        raise NoRunsError(f"No workflow runs found for commit {commit}.")
    log_info(f"Workflow runs: {', '.join(str(r) for r in run_ids)}")

    # Job names are treated as unique; same-named jobs from different runs collapse.
    names: set[str] = set()
    for run_id in run_ids:
        log_info(f"Listing jobs for workflow run {run_id}...")
        jobs = gh_run_job_names(repo, run_id)
        vprint(f"Jobs in run {run_id}: {', '.join(jobs)}")
        names.update(jobs)

    job_names = sorted(names)
    log_info(f"Jobs: {', '.join(job_names)}")
    return job_names


def sync_required_checks(
    repo: str,
    pr_number: int,
    *,
    app_id: int,
    dry_run: bool = False,
) -> ReconcileOutcome:
    pr, commit = resolve_commit(repo, pr_number)
    job_names = collect_job_names(repo, commit)
    desired_checks = build_desired_checks(job_names, app_id)

    log_info("Fetching current branch protection required status checks...")
    current = gh_branch_protection_get(repo, pr.base_ref)
    desired = reconcile_protection(current, desired_checks, app_id)

    log_info("Comparing branch protection required status checks...")
    outcome = ReconcileOutcome(
        pull_request=pr,
        commit=commit,
        job_names=job_names,
        current=current,
        desired=desired,
        diff=protection_diff(current, desired),
    )
    if not outcome.changed or dry_run:
        return outcome

    log_info("Updating branch protection rules...")
    gh_branch_protection_put(repo, pr.base_ref, to_update_payload(desired))
    outcome.applied = True
    return outcome
