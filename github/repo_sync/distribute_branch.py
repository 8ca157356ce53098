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


"""Push the current branch to multiple repositories and open pull requests.

Reads the repository list from stdin (one ``owner/name`` per line), creates a
temporary branch per repository from its base branch, cherry-picks the tip
of the current branch onto it, pushes, and opens a PR whose title and body
are filled from the commits. Local branches and remotes created by the run
are removed on exit, including on Ctrl-C / SIGTERM.

Usage:
    python3 list_repos.py -p "Icinga/*" | python3 distribute_branch.py
    python3 list_repos.py -p "Icinga/*" | python3 distribute_branch.py --dry-run
"""

from __future__ import annotations

import argparse
import signal
import sys

from shared.common import log_error, parse_runner_debug, set_verbose_enabled
from shared.errors import GitHubOpsError

from repo_sync.utils.distributor import BranchDistributor, current_branch, print_results, read_repositories


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Push the current branch to the repositories read from stdin and create PRs",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Only show what would be done, without changes",
    )
    p.add_argument(
        "--base",
        default="main",
        help="Base branch of the target repositories (default: main)",
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logs (also enabled when RUNNER_DEBUG=1)",
    )
    return p.parse_args(argv)


def _terminate(signum, frame):
    raise SystemExit(128 + signum)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    set_verbose_enabled(bool(args.verbose) or parse_runner_debug())

    try:
        branch = current_branch()
        repositories = read_repositories(sys.stdin)
    except GitHubOpsError as exc:
        log_error(exc.message)
        return 1
    if not branch:
        log_error("Not on a branch (detached HEAD); check out the branch to distribute")
        return 1

    distributor = BranchDistributor(branch, base=args.base, dry_run=bool(args.dry_run))
    signal.signal(signal.SIGTERM, _terminate)
    try:
        result = distributor.distribute(repositories)
    finally:
        print_results(distributor.result)
        distributor.cleanup()

    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
