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


"""Shared data models."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import ConfigError

_REPO_RE = re.compile(r"^(?P<owner>[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)/(?P<name>[A-Za-z0-9._-]+)$")


@dataclass(frozen=True)
class RepoRef:
    """A GitHub repository in ``owner/name`` form."""
    owner: str
    name: str

    @classmethod
    def parse(cls, value: str) -> RepoRef:
        match = _REPO_RE.match((value or "").strip())
        if match is None:
            raise ConfigError(f"Invalid repository {value!r}; expected owner/name, e.g. octocat/Hello-World")
        return cls(owner=match.group("owner"), name=match.group("name"))

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def remote_name(self) -> str:
        return f"{self.owner}-{self.name}"

    @property
    def https_url(self) -> str:
        return f"https://github.com/{self.full_name}.git"

    def __str__(self) -> str:
        return self.full_name
