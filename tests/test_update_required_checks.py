import pytest

import branch_protection.update_required_checks as cli
from branch_protection.utils.models import BranchProtection, PullRequestRef, ReconcileOutcome
from shared.errors import AuthenticationError, NoRunsError

PR = PullRequestRef(number=3, base_ref="main", head_ref="feat", head_sha="h", merged=True, merge_commit_sha="m")


def _outcome(diff, applied=False):
    return ReconcileOutcome(
        pull_request=PR,
        commit="m",
        job_names=["build"],
        current=BranchProtection({}),
        desired=BranchProtection({}),
        diff=diff,
        applied=applied,
    )


@pytest.fixture
def stub_gh(monkeypatch):
    calls = {}
    monkeypatch.setattr(cli, "require_gh", lambda: None)
    monkeypatch.setattr(cli, "gh_auth_check", lambda: None)
    monkeypatch.setattr(cli, "gh_repo_check", lambda repo: calls.setdefault("repo", repo))
    return calls


def test_parse_args_defaults(monkeypatch):
    monkeypatch.delenv("CI_APP_ID", raising=False)
    monkeypatch.delenv("GH_CALL_TIMEOUT", raising=False)

    args = cli.parse_args(["--repo", "o/r", "--pr", "12"])

    assert args.pr == 12
    assert args.dry_run is False
    assert args.ci_app_id == 15368
    assert args.timeout == 60.0


def test_parse_args_reads_environment(monkeypatch):
    monkeypatch.setenv("CI_APP_ID", "42")
    monkeypatch.setenv("GH_CALL_TIMEOUT", "5")

    args = cli.parse_args(["--repo", "o/r", "--pr", "1"])

    assert args.ci_app_id == 42
    assert args.timeout == 5.0


def test_invalid_env_app_id_exits(monkeypatch):
    monkeypatch.setenv("CI_APP_ID", "abc")
    with pytest.raises(SystemExit, match="CI_APP_ID"):
        cli.parse_args(["--repo", "o/r", "--pr", "1"])


def test_main_applies_and_reports(stub_gh, monkeypatch, capsys):
    seen = {}

    def fake_sync(repo, pr, *, app_id, dry_run):
        seen.update(repo=repo, pr=pr, app_id=app_id, dry_run=dry_run)
        return _outcome(["--- current", "+++ desired", "@@ -1 +1 @@", "-a", "+b"], applied=True)

    monkeypatch.setattr(cli, "sync_required_checks", fake_sync)

    rc = cli.main(["--repo", "acme/widgets", "--pr", "3", "--ci-app-id", "77"])

    assert rc == 0
    assert seen == {"repo": "acme/widgets", "pr": 3, "app_id": 77, "dry_run": False}
    assert stub_gh["repo"] == "acme/widgets"
    out = capsys.readouterr().out
    assert "+++ desired" in out
    assert "Branch protection updated for branch main of repository acme/widgets." in out


def test_main_dry_run_prints_diff_only(stub_gh, monkeypatch, capsys):
    monkeypatch.setattr(
        cli, "sync_required_checks", lambda repo, pr, *, app_id, dry_run: _outcome(["--- current", "+++ desired"])
    )

    rc = cli.main(["--repo", "acme/widgets", "--pr", "3", "--dry-run"])

    captured = capsys.readouterr()
    assert rc == 0
    assert "--- current" in captured.out
    assert "updated" not in captured.out
    assert "[dry-run] No changes applied." in captured.err


def test_main_up_to_date(stub_gh, monkeypatch, capsys):
    monkeypatch.setattr(cli, "sync_required_checks", lambda repo, pr, *, app_id, dry_run: _outcome([]))

    rc = cli.main(["--repo", "acme/widgets", "--pr", "3"])

    assert rc == 0
    assert capsys.readouterr().out.strip() == "Branch protection for main of acme/widgets is up to date."


def test_main_reports_errors_with_exit_code(stub_gh, monkeypatch, capsys):
    def fail(repo, pr, *, app_id, dry_run):
        raise NoRunsError("No workflow runs found for commit m.")

    monkeypatch.setattr(cli, "sync_required_checks", fail)

    rc = cli.main(["--repo", "acme/widgets", "--pr", "3"])

    assert rc == 1
    assert "ERROR: No workflow runs found for commit m." in capsys.readouterr().err


def test_main_rejects_malformed_repo(stub_gh, capsys):
    rc = cli.main(["--repo", "not-a-repo", "--pr", "3"])

    assert rc == 1
    assert "ERROR:" in capsys.readouterr().err


def test_main_stops_when_not_authenticated(stub_gh, monkeypatch):
    def not_logged_in():
        raise AuthenticationError("gh is not authenticated. Run: gh auth login")

    monkeypatch.setattr(cli, "gh_auth_check", not_logged_in)
    monkeypatch.setattr(cli, "sync_required_checks", lambda *a, **k: pytest.fail("must not sync"))

    assert cli.main(["--repo", "acme/widgets", "--pr", "3"]) == 1


def test_main_rejects_non_positive_timeout(stub_gh):
    with pytest.raises(SystemExit, match="--timeout"):
        cli.main(["--repo", "acme/widgets", "--pr", "3", "--timeout", "0"])
