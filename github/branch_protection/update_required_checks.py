#!/usr/bin/env python3
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


"""Update GitHub branch protection required status checks from the GitHub
Actions jobs triggered by a pull request, preserving non-Actions checks
(e.g. CLA bots).

Run it whenever Actions workflows are added or renamed in a PR so branch
protection follows along.

Commit selection:
- merged PR (recommended): the merge commit;
- unmerged PR: the current head commit (a warning is printed).

Requirements:
- `gh` CLI authenticated with permission to read PRs and Actions runs and to
  administer branch protection on the target repository.

Usage:
    python3 update_required_checks.py --repo owner/repo --pr 123 [--dry-run]

Diagnostics go to stderr; the diff and the final result go to stdout.
"""

from __future__ import annotations

import argparse
import os
import sys

from shared.common import (
    DEFAULT_CALL_TIMEOUT,
    gh_auth_check,
    log_error,
    log_success,
    parse_runner_debug,
    require_gh,
    set_call_timeout,
    set_verbose_enabled,
)
from shared.errors import GitHubOpsError
from shared.models import RepoRef

from branch_protection.utils.gh_actions import gh_repo_check
from branch_protection.utils.models import GITHUB_ACTIONS_APP_ID, ReconcileOutcome
from branch_protection.utils.required_checks_sync import sync_required_checks


def _env_int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise SystemExit(f"ERROR: {key} must be an integer, got {raw!r}")


def _env_float(key: str, default: float) -> float:
    raw = os.environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise SystemExit(f"ERROR: {key} must be a number, got {raw!r}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description=(
            "Update branch protection required status checks based on the GitHub Actions "
            "jobs triggered by a pull request, preserving checks from other apps"
        ),
    )
    p.add_argument("--repo", required=True, help="GitHub repository in owner/repo format")
    p.add_argument(
        "--pr",
        required=True,
        type=int,
        help="Pull request number; merged is recommended, unmerged uses the current head commit",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Show a unified diff of current vs. intended protection and exit without changes",
    )
    p.add_argument(
        "--ci-app-id",
        type=int,
        default=_env_int("CI_APP_ID", GITHUB_ACTIONS_APP_ID),
        help=f"App id whose checks are managed by this script (default: $CI_APP_ID or {GITHUB_ACTIONS_APP_ID})",
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=_env_float("GH_CALL_TIMEOUT", DEFAULT_CALL_TIMEOUT),
        help=f"Timeout in seconds for each gh call (default: $GH_CALL_TIMEOUT or {DEFAULT_CALL_TIMEOUT:g})",
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logs (also enabled when RUNNER_DEBUG=1)",
    )
    return p.parse_args(argv)


def report(outcome: ReconcileOutcome, repo: str, *, dry_run: bool) -> None:
    base = outcome.pull_request.base_ref
    if not outcome.changed:
        log_success("No changes required (required status checks already up to date).")
        print(f"Branch protection for {base} of {repo} is up to date.")
        return

    print("\n".join(outcome.diff))
    if dry_run:
        log_success("[dry-run] No changes applied.")
        return
    print(f"Branch protection updated for branch {base} of repository {repo}.")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    set_verbose_enabled(bool(args.verbose) or parse_runner_debug())
    if args.timeout <= 0:
        raise SystemExit("ERROR: --timeout must be positive")
    set_call_timeout(args.timeout)
    require_gh()

    try:
        repo = RepoRef.parse(args.repo).full_name
        gh_auth_check()
        gh_repo_check(repo)
        outcome = sync_required_checks(
            repo,
            args.pr,
            app_id=args.ci_app_id,
            dry_run=bool(args.dry_run),
        )
    except GitHubOpsError as exc:
        log_error(exc.message)
        return 1

    report(outcome, repo, dry_run=bool(args.dry_run))
    return 0


if __name__ == "__main__":
    sys.exit(main())
