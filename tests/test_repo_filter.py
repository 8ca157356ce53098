import pytest

from repo_sync.utils.repo_filter import filter_repositories, matches_any, owners_for_patterns, pattern_owner
from shared.errors import ConfigError


def test_pattern_owner():
    assert pattern_owner("Icinga/icingaweb*") == "Icinga"


@pytest.mark.parametrize("pattern", ["icingaweb*", "/repo", "Icinga/", "", "Ici*/web"])
def test_pattern_owner_rejects_patterns_without_explicit_owner(pattern):
    with pytest.raises(ConfigError):
        pattern_owner(pattern)


def test_owners_for_patterns_dedupes_in_order():
    patterns = ["Icinga/icingaweb*", "Acme/*", "Icinga/icinga2"]
    assert owners_for_patterns(patterns) == ["Icinga", "Acme"]


def test_matches_any_is_case_sensitive_glob():
    assert matches_any("Icinga/icingaweb2", ["Icinga/icingaweb*"])
    assert not matches_any("icinga/icingaweb2", ["Icinga/icingaweb*"])
    assert matches_any("Icinga/icinga2", ["Other/*", "Icinga/icinga?"])


def test_filter_repositories_sorts_and_dedupes():
    names = ["Icinga/icingaweb2", "Icinga/icinga2", "Icinga/docs", "Icinga/icingaweb2"]

    result = filter_repositories(names, ["Icinga/icingaweb*", "Icinga/icinga2"])

    assert result == ["Icinga/icinga2", "Icinga/icingaweb2"]
