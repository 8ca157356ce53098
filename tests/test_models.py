import pytest

from branch_protection.utils.models import BranchProtection, CheckEntry, PullRequestRef
from shared.errors import ConfigError
from shared.models import RepoRef


def test_repo_ref_parse():
    repo = RepoRef.parse("Icinga/icingaweb2")
    assert repo.full_name == "Icinga/icingaweb2"
    assert repo.remote_name == "Icinga-icingaweb2"
    assert repo.https_url == "https://github.com/Icinga/icingaweb2.git"


@pytest.mark.parametrize("value", ["", "icinga", "Icinga/", "/repo", "a/b/c", "bad owner/repo"])
def test_repo_ref_parse_rejects_invalid(value):
    with pytest.raises(ConfigError):
        RepoRef.parse(value)


def _pr(**overrides):
    data = {
        "number": 5,
        "merged": False,
        "merge_commit_sha": "testmerge",
        "base": {"ref": "main"},
        "head": {"ref": "feature", "sha": "head1"},
    }
    data.update(overrides)
    return PullRequestRef.from_api(data)


def test_open_pr_targets_head_even_with_test_merge_commit():
    pr = _pr()
    assert pr.target_commit == "head1"


def test_merged_pr_targets_merge_commit():
    pr = _pr(merged=True, merge_commit_sha="merged1")
    assert pr.target_commit == "merged1"
    assert pr.base_ref == "main"
    assert pr.head_ref == "feature"


def test_check_entry_from_api_keeps_null_app_id():
    assert CheckEntry.from_api({"context": "cla", "app_id": None}) == CheckEntry("cla", None)
    assert CheckEntry.from_api({"context": "lint", "app_id": 15368}).app_id == 15368


def test_with_checks_does_not_mutate_original():
    raw = {"required_status_checks": {"strict": True, "contexts": ["a"], "checks": [{"context": "a", "app_id": 1}]}}
    original = BranchProtection(raw)

    updated = original.with_checks([CheckEntry("b", 2)])

    assert raw["required_status_checks"]["checks"] == [{"context": "a", "app_id": 1}]
    assert updated.raw["required_status_checks"] == {"strict": True, "checks": [{"context": "b", "app_id": 2}]}
