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


"""Adjust a PHPStan NEON configuration file so ``scanDirectories`` and
``excludePaths`` match the environment (local checkout, CI runner, ...).

The given scan directories are validated, merged with the still-readable
existing ``scanDirectories`` and reduced to their highest-level paths.
Exclude directories are merged into ``excludePaths.analyseAndScan``.

A report of the changes goes to stderr; the updated config goes to stdout
unless ``--inplace`` is given.

Usage:
    python3 adjust_scandirs.py --config=phpstan.neon --scan=dir:dir [--exclude=dir:dir] [--inplace]

The directory separator is ``os.pathsep`` (``:`` on Unix-like systems).
"""

from __future__ import annotations

import argparse
import os
import sys

from shared.errors import ConfigError

from phpstan_config.utils.neon import NeonError, decode_file, encode
from phpstan_config.utils.scandirs import (
    AdjustReport,
    adjust_exclude_paths,
    adjust_scan_directories,
    split_paths,
    validate_scan_dirs,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description=(
            "Adjust PHPStan NEON configuration to set scanDirectories and excludePaths "
            "according to the environment"
        ),
    )
    p.add_argument("--config", required=True, help="Path to phpstan.neon configuration file")
    p.add_argument(
        "--scan",
        required=True,
        help=f"Directories to scan, separated by {os.pathsep!r}",
    )
    p.add_argument(
        "--exclude",
        default="",
        help=f"Directories to exclude from analysis, separated by {os.pathsep!r}",
    )
    p.add_argument(
        "--inplace",
        action="store_true",
        help="Update the configuration file in-place (default: output to stdout)",
    )
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    report = AdjustReport()

    try:
        scan_dirs = split_paths(args.scan)
        if not scan_dirs:
            raise ConfigError("--scan must name at least one directory")
        scan_dirs = validate_scan_dirs(scan_dirs, report)
    except ConfigError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    try:
        config = decode_file(args.config)
        if config is None:
            raise NeonError("Config is empty")
        if not isinstance(config, dict):
            raise NeonError("Config root must be a mapping")
    except (OSError, NeonError) as exc:
        print(f"Error: Failed to decode NEON config: {exc}", file=sys.stderr)
        return 1

    try:
        adjust_scan_directories(config, scan_dirs, report)
        adjust_exclude_paths(config, split_paths(args.exclude))
    except ConfigError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    print(report.render(), file=sys.stderr)

    output = encode(config)
    if args.inplace:
        try:
            with open(args.config, "w", encoding="utf-8") as fh:
                fh.write(output)
        except OSError as exc:
            print(f"Error: Failed to write to {args.config}: {exc}", file=sys.stderr)
            return 1
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
