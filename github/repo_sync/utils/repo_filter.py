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


"""Repository pattern parsing and matching for ``list_repos.py``.

Patterns are shell-style globs over ``owner/name`` (``Icinga/icingaweb*``,
``MyOrg/*``). Every pattern must name its owner explicitly.
"""

from __future__ import annotations

from collections.abc import Iterable
from fnmatch import fnmatchcase

from shared.errors import ConfigError


def pattern_owner(pattern: str) -> str:
    """Return the owner part of *pattern*, e.g. ``Icinga`` for ``Icinga/icinga*``."""
    owner, sep, rest = (pattern or "").partition("/")
    if not sep or not owner or not rest:
        raise ConfigError(f"Pattern must include organization (e.g., 'Icinga/icingaweb*'): {pattern!r}")
    if any(ch in owner for ch in "*?["):
        raise ConfigError(f"Pattern owner must not contain wildcards: {pattern!r}")
    return owner


def owners_for_patterns(patterns: Iterable[str]) -> list[str]:
    """Distinct owners referenced by *patterns*, in first-seen order."""
    owners: list[str] = []
    for pattern in patterns:
        owner = pattern_owner(pattern)
        if owner not in owners:
            owners.append(owner)
    return owners


def matches_any(full_name: str, patterns: Iterable[str]) -> bool:
    return any(fnmatchcase(full_name, pattern) for pattern in patterns)


def filter_repositories(full_names: Iterable[str], patterns: list[str]) -> list[str]:
    """Unique, sorted repository names that match at least one pattern."""
    return sorted({name for name in full_names if matches_any(name, patterns)})
