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


"""List public, non-archived repositories matching ``owner/glob`` patterns.

The output (one ``owner/name`` per line on stdout) is meant to be piped into
``distribute_branch.py``.

Token resolution: $GITHUB_TOKEN, then $GH_TOKEN, then ``gh auth token``.

Usage:
    python3 list_repos.py -p "Icinga/*"
    python3 list_repos.py -p "Icinga/icingaweb*" -p "Icinga/icinga2"
"""

from __future__ import annotations

import argparse
import sys

from shared.common import log_error, parse_runner_debug, set_verbose_enabled, vprint
from shared.errors import ConfigError, GitHubOpsError

from repo_sync.utils.github_client import get_github_client, iter_public_repositories
from repo_sync.utils.repo_filter import filter_repositories, owners_for_patterns


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="List public, non-archived repositories matching owner/glob patterns",
        epilog='Examples: -p "Icinga/*"   -p "Icinga/icingaweb*"',
    )
    p.add_argument(
        "-p",
        "--pattern",
        action="append",
        default=[],
        dest="patterns",
        help='Repository pattern including the owner, e.g. "MyOrg/*" (repeatable)',
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logs (also enabled when RUNNER_DEBUG=1)",
    )
    return p


def list_repositories(patterns: list[str]) -> list[str]:
    owners = owners_for_patterns(patterns)
    gh = get_github_client()
    candidates: list[str] = []
    for owner in owners:
        vprint(f"Listing public repositories of {owner}...")
        candidates.extend(iter_public_repositories(gh, owner))
    return filter_repositories(candidates, patterns)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_verbose_enabled(bool(args.verbose) or parse_runner_debug())

    if not args.patterns:
        log_error("At least one --pattern is required")
        parser.print_help(sys.stderr)
        return 1

    try:
        owners_for_patterns(args.patterns)
    except ConfigError as exc:
        log_error(exc.message)
        parser.print_help(sys.stderr)
        return 1

    try:
        repositories = list_repositories(args.patterns)
    except GitHubOpsError as exc:
        log_error(exc.message)
        return 1

    if not repositories:
        log_error("No repositories found matching the patterns")
        return 1

    for repo in repositories:
        print(repo)
    return 0


if __name__ == "__main__":
    sys.exit(main())
