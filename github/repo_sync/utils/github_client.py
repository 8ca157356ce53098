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


"""PyGithub access for repository listing."""

from __future__ import annotations

import os
from collections.abc import Iterator

from github import Auth, Github, GithubException, UnknownObjectException

from shared.common import gh_auth_token, vprint
from shared.errors import AuthenticationError, AuthorizationError, NotFoundError, TransportError


def resolve_token() -> str:
    """Token from ``GITHUB_TOKEN`` / ``GH_TOKEN``, falling back to ``gh auth token``."""
    for key in ("GITHUB_TOKEN", "GH_TOKEN"):
        token = os.environ.get(key)
        if token:
            vprint(f"Using token from ${key}")
            return token
    vprint("Using token from gh auth token")
    return gh_auth_token()


def get_github_client(token: str | None = None) -> Github:
    return Github(auth=Auth.Token(token or resolve_token()), timeout=30, retry=3)


def _translate(exc: GithubException, owner: str) -> Exception:
    if exc.status == 401:
        return AuthenticationError(f"GitHub rejected the token while listing {owner}", exc.status)
    if exc.status == 403:
        return AuthorizationError(f"Not allowed to list repositories of {owner}", exc.status)
    if exc.status == 404:
        return NotFoundError(f"Owner {owner} not found", exc.status)
    return TransportError(f"Listing repositories of {owner} failed: {exc}", exc.status)


def iter_public_repositories(gh: Github, owner: str) -> Iterator[str]:
    """Yield ``owner/name`` for every public, non-archived repository of *owner*.

    *owner* is tried as an organization first, then as a user.
    """
    try:
        try:
            repos = gh.get_organization(owner).get_repos(type="public")
            for repo in repos:
                if not repo.archived:
                    yield repo.full_name
            return
        except UnknownObjectException:
            vprint(f"{owner} is not an organization; listing user repositories")

        # /users/{user}/repos has no "public" type filter.
        for repo in gh.get_user(owner).get_repos(type="owner"):
            if not repo.archived and not repo.private:
                yield repo.full_name
    except GithubException as exc:
        raise _translate(exc, owner) from exc
