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


"""PHPStan ``scanDirectories`` / ``excludePaths`` adjustment.

Merges environment-specific scan and exclude directories into a decoded
PHPStan config and records a human-readable report of what happened to each
directory.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from shared.errors import ConfigError


@dataclass
class AdjustReport:
    lines: list[str] = field(default_factory=list)

    def add(self, line: str) -> None:
        self.lines.append(line)

    def render(self) -> str:
        return "\n".join(self.lines)


def split_paths(raw: str | None) -> list[str]:
    """Split an ``os.pathsep``-separated list, dropping empty entries."""
    return [p for p in (raw or "").split(os.pathsep) if p]


def is_readable_dir(path: str) -> bool:
    return os.path.isdir(path) and os.access(path, os.R_OK)


def validate_scan_dirs(paths: Iterable[str], report: AdjustReport) -> list[str]:
    valid: list[str] = []
    for path in paths:
        if not os.path.isdir(path):
            raise ConfigError(f"Directory does not exist: {path}")
        if not os.access(path, os.R_OK):
            raise ConfigError(f"Directory not readable: {path}")
        report.add(f"+ {path}")
        valid.append(path)
    return valid


def reduce_base_paths(paths: Iterable[str]) -> list[str]:
    """Drop every path nested under another path in *paths*.

    ``['/vendor', '/app', '/vendor/app']`` -> ``['/app', '/vendor']``
    """
    result: list[str] = []
    for path in sorted(paths):
        if any(path.startswith(base.rstrip(os.sep) + os.sep) for base in result):
            continue
        result.append(path)
    return result


def unique(items: Iterable[Any]) -> list[Any]:
    seen: list[Any] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


def _parameters(config: dict[str, Any]) -> dict[str, Any]:
    params = config.get("parameters")
    if params is None:
        params = config["parameters"] = {}
    if not isinstance(params, dict):
        raise ConfigError("'parameters' must be a mapping")
    return params


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, dict):
        return list(value.values())
    if isinstance(value, list):
        return value
    return [value]


def adjust_scan_directories(
    config: dict[str, Any],
    scan_dirs: list[str],
    report: AdjustReport,
) -> None:
    """Set ``parameters.scanDirectories`` to the base paths of *scan_dirs* plus the
    still-readable existing entries."""
    params = _parameters(config)
    merged = list(scan_dirs)
    for existing in _as_list(params.get("scanDirectories")):
        existing = str(existing)
        if is_readable_dir(existing):
            merged.append(existing)
            report.add(f"{existing} (unchanged)")
        else:
            report.add(f"- {existing} (not readable)")
    params["scanDirectories"] = unique(reduce_base_paths(merged))


def adjust_exclude_paths(config: dict[str, Any], exclude_dirs: list[str]) -> None:
    """Merge *exclude_dirs* into ``parameters.excludePaths.analyseAndScan``.

    A plain ``excludePaths`` list is PHPStan shorthand for ``analyseAndScan``.
    """
    if not exclude_dirs:
        return
    params = _parameters(config)
    exclude = params.get("excludePaths")
    if exclude is None:
        exclude = {}
    elif isinstance(exclude, list):
        exclude = {"analyseAndScan": exclude}
    elif not isinstance(exclude, dict):
        raise ConfigError("'parameters.excludePaths' must be a list or mapping")

    current = _as_list(exclude.get("analyseAndScan"))
    exclude["analyseAndScan"] = unique(list(current) + list(exclude_dirs))
    params["excludePaths"] = exclude
