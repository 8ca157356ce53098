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


"""Branch distribution – cherry-picks the current branch onto the default
branch of many repositories and opens a pull request in each.

Per repository:

1. add a remote ``owner-name`` pointing at ``https://github.com/owner/name.git``
   (an existing remote with a different URL is an error);
2. fetch it and create ``owner-name/<branch>`` from ``owner-name/<base>``;
3. cherry-pick the tip of ``<branch>``;
4. push ``HEAD:<branch>`` and run ``gh pr create --fill``.

The first failing repository stops the run. :meth:`BranchDistributor.cleanup`
removes every branch and remote this run created and returns to the
original branch.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from dataclasses import dataclass, field

from shared.common import log_error, log_info, log_success, log_warning, raise_for_gh_result, run_gh, run_git
from shared.errors import GitCommandError, GitHubOpsError
from shared.models import RepoRef


@dataclass
class DistributionResult:
    updated: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def current_branch() -> str:
    res = run_git(["branch", "--show-current"])
    return (res.stdout or "").strip()


def read_repositories(lines: Iterable[str]) -> list[RepoRef]:
    """Parse one ``owner/name`` per line, skipping blank lines."""
    return [RepoRef.parse(line) for line in lines if line.strip()]


class BranchDistributor:
    """Distributes *branch* to repositories; tracks what it created for cleanup."""

    def __init__(self, branch: str, *, base: str = "main", dry_run: bool = False):
        self.branch = branch
        self.base = base
        self.dry_run = dry_run
        self.created_branches: list[str] = []
        self.added_remotes: list[str] = []
        self.result = DistributionResult()

    def working_branch(self, repo: RepoRef) -> str:
        return f"{repo.remote_name}/{self.branch}"

    def ensure_remote(self, repo: RepoRef) -> None:
        res = run_git(["remote", "get-url", repo.remote_name], check=False)
        if res.returncode != 0:
            run_git(["remote", "add", repo.remote_name, repo.https_url])
            self.added_remotes.append(repo.remote_name)
            return
        existing = (res.stdout or "").strip()
        if existing != repo.https_url:
            raise GitCommandError(
                f"Remote {repo.remote_name} URL mismatch: {existing} (expected {repo.https_url})"
            )

    def deploy(self, repo: RepoRef) -> None:
        working = self.working_branch(repo)
        if self.dry_run:
            print(
                f"[DRY-RUN] {repo} - would cherry-pick branch '{self.branch}' to {working}",
                file=sys.stderr,
            )
            return

        log_info(f"Processing {repo}...")
        self.ensure_remote(repo)
        run_git(["fetch", repo.remote_name])

        run_git(["checkout", "-b", working, f"{repo.remote_name}/{self.base}"])
        self.created_branches.append(working)

        res = run_git(["cherry-pick", self.branch], check=False)
        if res.returncode != 0:
            run_git(["cherry-pick", "--abort"], check=False)
            detail = (res.stderr or res.stdout or "").strip()
            raise GitCommandError(f"cherry-pick failed for branch {working}: {detail}")

        run_git(["push", repo.remote_name, f"HEAD:{self.branch}"])

        pr = run_gh(
            ["pr", "create", "--repo", repo.full_name, "--fill", "--head", self.branch, "--base", self.base]
        )
        raise_for_gh_result(pr, f"PR creation in {repo}")
        log_success(f"{repo} (PR created)")

    def distribute(self, repos: Iterable[RepoRef]) -> DistributionResult:
        for repo in repos:
            try:
                self.deploy(repo)
            except GitHubOpsError as exc:
                log_error(f"{repo} ({exc.message})")
                self.result.failed.append(repo.full_name)
                break
            if not self.dry_run:
                self.result.updated.append(repo.full_name)
        return self.result

    def cleanup(self) -> None:
        if not self.created_branches and not self.added_remotes:
            return

        if run_git(["checkout", self.branch], check=False).returncode != 0:
            if run_git(["checkout", self.base], check=False).returncode != 0:
                log_warning(f"Could not check out {self.branch} or {self.base}; leaving HEAD as is")

        for branch in self.created_branches:
            if run_git(["branch", "-D", branch], check=False).returncode != 0:
                log_warning(f"Could not delete branch {branch}")
        for remote in self.added_remotes:
            if run_git(["remote", "remove", remote], check=False).returncode != 0:
                log_warning(f"Could not remove remote {remote}")

        self.created_branches = []
        self.added_remotes = []


def print_results(result: DistributionResult) -> None:
    print(file=sys.stderr)
    print("=== RESULTS ===", file=sys.stderr)
    for repo in result.updated:
        print(f"{repo} updated")
    for repo in result.failed:
        print(f"{repo} failed")
