from branch_protection.utils.canonical import canonicalize, comparable_form, protection_diff, render_canonical
from branch_protection.utils.models import BranchProtection


def test_canonicalize_sorts_keys_and_arrays_recursively():
    value = {"b": [3, 1, 2], "a": {"z": [{"y": 2, "x": 1}, {"x": 0}], "c": True}}

    result = canonicalize(value)

    assert list(result) == ["a", "b"]
    assert list(result["a"]) == ["c", "z"]
    assert result["b"] == [1, 2, 3]
    assert result["a"]["z"] == [{"x": 0}, {"x": 1, "y": 2}]


def test_comparable_form_drops_deprecated_contexts():
    protection = BranchProtection(
        {"required_status_checks": {"strict": True, "contexts": ["lint"], "checks": [{"context": "lint", "app_id": 1}]}}
    )

    form = comparable_form(protection)

    assert "contexts" not in form["required_status_checks"]
    assert "contexts" in protection.raw["required_status_checks"]


def test_diff_ignores_ordering():
    left = BranchProtection(
        {
            "required_status_checks": {
                "strict": True,
                "checks": [{"context": "a", "app_id": 1}, {"context": "b", "app_id": 2}],
            },
            "lock_branch": {"enabled": False},
        }
    )
    right = BranchProtection(
        {
            "lock_branch": {"enabled": False},
            "required_status_checks": {
                "checks": [{"app_id": 2, "context": "b"}, {"app_id": 1, "context": "a"}],
                "strict": True,
            },
        }
    )

    assert protection_diff(left, right) == []


def test_diff_is_unified_and_shows_changed_app_id():
    current = BranchProtection({"required_status_checks": {"strict": True, "checks": [{"context": "lint", "app_id": 999}]}})
    desired = BranchProtection({"required_status_checks": {"strict": True, "checks": [{"context": "lint", "app_id": 15368}]}})

    diff = protection_diff(current, desired)

    assert diff[0] == "--- current"
    assert diff[1] == "+++ desired"
    assert any(line.startswith("-") and '"app_id": 999' in line for line in diff)
    assert any(line.startswith("+") and '"app_id": 15368' in line for line in diff)


def test_render_canonical_is_stable():
    protection = BranchProtection({"b": 1, "a": [2, 1]})
    assert render_canonical(protection) == '{\n  "a": [\n    1,\n    2\n  ],\n  "b": 1\n}'
