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


"""Shared low-level utilities – logging control, call timeout, and subprocess
wrappers for the ``gh`` and ``git`` CLIs.

Diagnostics go to stderr so stdout stays reserved for the primary result of
each tool (a diff, a repository list, a rewritten config).
"""

from __future__ import annotations

import json
import os
import re
import shutil
import subprocess
import sys
from typing import Any

from .errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    GitCommandError,
    GitHubOpsError,
    NotFoundError,
    RequestTimeoutError,
    TransportError,
    ValidationError,
)

DEFAULT_CALL_TIMEOUT = 60.0

_verbose_enabled = False
_call_timeout = DEFAULT_CALL_TIMEOUT

# gh prints e.g. "gh: Not Found (HTTP 404)" or "HTTP 401: Bad credentials (...)".
_HTTP_STATUS_RE = re.compile(r"HTTP (\d{3})")


def parse_runner_debug() -> bool:
    raw = os.getenv("RUNNER_DEBUG")
    if raw is None or raw == "":
        return False
    if raw not in {"0", "1"}:
        raise SystemExit("ERROR: RUNNER_DEBUG must be '0' or '1' when set")
    return raw == "1"


def set_verbose_enabled(value: bool) -> None:
    global _verbose_enabled
    _verbose_enabled = bool(value)


def set_call_timeout(seconds: float) -> None:
    """Set the timeout applied to every ``gh``/``git`` subprocess call."""
    global _call_timeout
    if seconds <= 0:
        raise ValueError(f"timeout must be positive, got {seconds!r}")
    _call_timeout = float(seconds)


def vprint(msg: str) -> None:
    if _verbose_enabled:
        print(msg, file=sys.stderr)


def log_info(msg: str) -> None:
    print(f"INFO: {msg}", file=sys.stderr)


def log_warning(msg: str) -> None:
    print(f"WARN: {msg}", file=sys.stderr)


def log_success(msg: str) -> None:
    print(f"OK: {msg}", file=sys.stderr)


def log_error(msg: str) -> None:
    print(f"ERROR: {msg}", file=sys.stderr)


def run_cmd(
    cmd: list[str],
    *,
    capture_output: bool = True,
    input_text: str | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess:
    limit = _call_timeout if timeout is None else timeout
    vprint(f"$ {' '.join(cmd)}")
    try:
        return subprocess.run(
            cmd,
            check=False,
            capture_output=capture_output,
            text=True,
            input=input_text,
            timeout=limit,
        )
    except subprocess.TimeoutExpired as exc:
        raise RequestTimeoutError(f"{cmd[0]} call timed out after {limit:g}s: {' '.join(cmd)}") from exc


def require_gh() -> None:
    if shutil.which("gh") is None:
        raise SystemExit("ERROR: gh CLI is required. Install and authenticate (gh auth login).")


def run_gh(
    args: list[str],
    *,
    capture_output: bool = True,
    input_text: str | None = None,
) -> subprocess.CompletedProcess:
    cmd = ["gh"] + args
    try:
        return run_cmd(cmd, capture_output=capture_output, input_text=input_text)
    except FileNotFoundError:
        print("ERROR: gh CLI not found. Install and authenticate gh.", file=sys.stderr)
        raise SystemExit(1)


def run_git(args: list[str], *, check: bool = True) -> subprocess.CompletedProcess:
    """Run ``git`` and raise :class:`GitCommandError` on failure when *check* is set."""
    cmd = ["git"] + args
    try:
        res = run_cmd(cmd)
    except FileNotFoundError:
        print("ERROR: git not found.", file=sys.stderr)
        raise SystemExit(1)
    if check and res.returncode != 0:
        detail = (res.stderr or res.stdout or "").strip()
        raise GitCommandError(f"git {' '.join(args)} failed: {detail}")
    return res


def classify_gh_failure(stderr: str) -> type[GitHubOpsError]:
    """Map ``gh`` diagnostic output to an error class."""
    match = _HTTP_STATUS_RE.search(stderr or "")
    if match is None:
        return TransportError
    status = int(match.group(1))
    if status == 401:
        return AuthenticationError
    if status == 403:
        if "rate limit" in stderr.lower():
            return TransportError
        return AuthorizationError
    if status == 404:
        return NotFoundError
    if status in {409, 412}:
        return ConflictError
    if status == 422:
        return ValidationError
    return TransportError


def raise_for_gh_result(res: subprocess.CompletedProcess, what: str) -> None:
    if res.returncode == 0:
        return
    stderr = (res.stderr or "").strip()
    match = _HTTP_STATUS_RE.search(stderr)
    status = int(match.group(1)) if match else None
    error_cls = classify_gh_failure(stderr)
    raise error_cls(f"{what} failed: {stderr or 'gh exited with status ' + str(res.returncode)}", status)


def gh_api(
    path: str,
    *,
    method: str = "GET",
    payload: dict[str, Any] | None = None,
    what: str | None = None,
) -> Any:
    """Call ``gh api`` and return the parsed JSON response (``None`` for an empty body)."""
    args = ["api", "--method", method, path]
    input_text = None
    if payload is not None:
        args += ["--input", "-"]
        input_text = json.dumps(payload)

    res = run_gh(args, input_text=input_text)
    raise_for_gh_result(res, what or f"{method} {path}")

    out = (res.stdout or "").strip()
    if not out:
        return None
    try:
        return json.loads(out)
    except json.JSONDecodeError as exc:
        raise TransportError(f"{what or path}: could not parse gh api response: {exc}") from exc


def gh_api_lines(path: str, jq: str, *, what: str | None = None) -> list[str]:
    """Call a paginated ``gh api`` endpoint and return the non-empty ``--jq`` output lines."""
    res = run_gh(["api", "--paginate", path, "--jq", jq])
    raise_for_gh_result(res, what or f"GET {path}")
    return [line.strip() for line in (res.stdout or "").splitlines() if line.strip()]


def gh_auth_check() -> None:
    res = run_gh(["auth", "status"])
    if res.returncode != 0:
        raise AuthenticationError("gh is not authenticated. Run: gh auth login")


def gh_auth_token() -> str:
    """Return the token ``gh`` is logged in with."""
    res = run_gh(["auth", "token"])
    token = (res.stdout or "").strip()
    if res.returncode != 0 or not token:
        raise AuthenticationError("gh is not authenticated. Run: gh auth login")
    return token
