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


"""Error hierarchy shared by all repository tools.

Failures reported by ``gh api`` are mapped onto these classes by
:func:`shared.common.raise_for_gh_result` using the HTTP status printed in
the ``gh`` diagnostic output. CLI entry points catch :class:`GitHubOpsError`,
print it to stderr and exit non-zero; nothing is retried.
"""

from __future__ import annotations


class GitHubOpsError(Exception):
    """Base class for every error raised by the repository tools."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationError(GitHubOpsError):
    """The caller is not authenticated to the GitHub API."""


class AuthorizationError(GitHubOpsError):
    """Authenticated, but missing permission for a read or write."""


class NotFoundError(GitHubOpsError):
    """Repository, pull request, or branch protection does not exist."""


class ConflictError(GitHubOpsError):
    """Remote state changed between fetch and write."""


class ValidationError(GitHubOpsError):
    """GitHub rejected the request payload (HTTP 422)."""


class TransportError(GitHubOpsError):
    """Network or API failure without a more specific classification."""


class RequestTimeoutError(TransportError):
    """A single ``gh``/``git`` call exceeded the configured timeout."""


class NoRunsError(GitHubOpsError):
    """The resolved commit has no associated workflow runs."""


class GitCommandError(GitHubOpsError):
    """A local ``git`` command exited non-zero."""


class ConfigError(GitHubOpsError):
    """Invalid user input or configuration value."""
