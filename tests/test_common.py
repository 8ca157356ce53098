import json
import subprocess

import pytest

from shared import common
from shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    GitCommandError,
    NotFoundError,
    RequestTimeoutError,
    TransportError,
    ValidationError,
)


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(["gh"], returncode, stdout, stderr)


@pytest.mark.parametrize(
    "stderr,want",
    [
        ("HTTP 401: Bad credentials (https://api.github.com/user)", AuthenticationError),
        ("gh: Resource not accessible by integration (HTTP 403)", AuthorizationError),
        ("gh: API rate limit exceeded for user ID 1. (HTTP 403)", TransportError),
        ("gh: Branch not protected (HTTP 404)", NotFoundError),
        ("gh: Conflict (HTTP 409)", ConflictError),
        ("gh: Precondition Failed (HTTP 412)", ConflictError),
        ("gh: Validation Failed (HTTP 422)", ValidationError),
        ("gh: Server Error (HTTP 502)", TransportError),
        ("error connecting to api.github.com", TransportError),
    ],
)
def test_classify_gh_failure(stderr, want):
    assert common.classify_gh_failure(stderr) is want


def test_raise_for_gh_result_keeps_status_code():
    with pytest.raises(NotFoundError) as excinfo:
        common.raise_for_gh_result(_completed(1, stderr="gh: Not Found (HTTP 404)"), "Fetching PR #1")
    assert excinfo.value.status_code == 404
    assert "Fetching PR #1 failed" in excinfo.value.message


def test_raise_for_gh_result_success_is_noop():
    common.raise_for_gh_result(_completed(0, stdout="{}"), "anything")


def test_gh_api_sends_payload_on_stdin(monkeypatch):
    seen = {}

    def fake_run_gh(args, *, capture_output=True, input_text=None):
        seen["args"] = args
        seen["input"] = input_text
        return _completed(0, stdout='{"ok": true}')

    monkeypatch.setattr(common, "run_gh", fake_run_gh)

    result = common.gh_api("repos/o/r/branches/main/protection", method="PUT", payload={"a": 1})

    assert result == {"ok": True}
    assert seen["args"] == ["api", "--method", "PUT", "repos/o/r/branches/main/protection", "--input", "-"]
    assert json.loads(seen["input"]) == {"a": 1}


def test_gh_api_empty_body_returns_none(monkeypatch):
    monkeypatch.setattr(common, "run_gh", lambda args, **kw: _completed(0, stdout=""))
    assert common.gh_api("repos/o/r") is None


def test_gh_api_invalid_json_is_transport_error(monkeypatch):
    monkeypatch.setattr(common, "run_gh", lambda args, **kw: _completed(0, stdout="<html>"))
    with pytest.raises(TransportError):
        common.gh_api("repos/o/r")


def test_gh_api_lines_drops_blank_lines(monkeypatch):
    seen = {}

    def fake_run_gh(args, **kw):
        seen["args"] = args
        return _completed(0, stdout="11\n\n22\n")

    monkeypatch.setattr(common, "run_gh", fake_run_gh)

    assert common.gh_api_lines("repos/o/r/actions/runs", ".workflow_runs[].id") == ["11", "22"]
    assert seen["args"][:2] == ["api", "--paginate"]


def test_run_cmd_timeout_raises_request_timeout(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(common.subprocess, "run", fake_run)
    common.set_call_timeout(5)

    with pytest.raises(RequestTimeoutError) as excinfo:
        common.run_cmd(["gh", "api", "repos/o/r"])
    assert "timed out after 5s" in str(excinfo.value)
    assert isinstance(excinfo.value, TransportError)


def test_run_cmd_passes_configured_timeout(monkeypatch):
    seen = {}

    def fake_run(cmd, **kwargs):
        seen.update(kwargs)
        return _completed()

    monkeypatch.setattr(common.subprocess, "run", fake_run)
    common.set_call_timeout(12.5)
    common.run_cmd(["git", "status"])

    assert seen["timeout"] == 12.5
    assert seen["check"] is False


def test_set_call_timeout_rejects_non_positive():
    with pytest.raises(ValueError):
        common.set_call_timeout(0)


def test_run_git_raises_on_failure(monkeypatch):
    monkeypatch.setattr(common, "run_cmd", lambda cmd, **kw: _completed(128, stderr="fatal: not a git repository"))
    with pytest.raises(GitCommandError) as excinfo:
        common.run_git(["fetch", "origin"])
    assert "not a git repository" in excinfo.value.message


def test_run_git_unchecked_returns_result(monkeypatch):
    monkeypatch.setattr(common, "run_cmd", lambda cmd, **kw: _completed(1))
    assert common.run_git(["checkout", "main"], check=False).returncode == 1


def test_gh_auth_check(monkeypatch):
    monkeypatch.setattr(common, "run_gh", lambda args, **kw: _completed(1, stderr="not logged in"))
    with pytest.raises(AuthenticationError):
        common.gh_auth_check()


@pytest.mark.parametrize("raw,want", [(None, False), ("", False), ("0", False), ("1", True)])
def test_parse_runner_debug(monkeypatch, raw, want):
    if raw is None:
        monkeypatch.delenv("RUNNER_DEBUG", raising=False)
    else:
        monkeypatch.setenv("RUNNER_DEBUG", raw)
    assert common.parse_runner_debug() is want


def test_parse_runner_debug_rejects_other_values(monkeypatch):
    monkeypatch.setenv("RUNNER_DEBUG", "yes")
    with pytest.raises(SystemExit):
        common.parse_runner_debug()


def test_vprint_only_when_verbose(capsys):
    common.vprint("hidden")
    common.set_verbose_enabled(True)
    common.vprint("shown")
    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "shown" in err
