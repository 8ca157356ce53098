import os

import pytest

from phpstan_config.utils.scandirs import (
    AdjustReport,
    adjust_exclude_paths,
    adjust_scan_directories,
    reduce_base_paths,
    split_paths,
    unique,
    validate_scan_dirs,
)
from shared.errors import ConfigError


def test_reduce_base_paths_keeps_only_top_level():
    assert reduce_base_paths(["/vendor", "/app", "/vendor/app"]) == ["/app", "/vendor"]


def test_reduce_base_paths_does_not_treat_name_prefix_as_parent():
    assert reduce_base_paths(["/vendor", "/vendor-bin", "/vendor/x/y"]) == ["/vendor", "/vendor-bin"]


def test_split_paths_drops_empty_entries():
    raw = os.pathsep.join(["a", "", "b"]) + os.pathsep
    assert split_paths(raw) == ["a", "b"]
    assert split_paths("") == []
    assert split_paths(None) == []


def test_unique_keeps_first_occurrence():
    assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_validate_scan_dirs(tmp_path):
    report = AdjustReport()
    lib = tmp_path / "lib"
    lib.mkdir()

    assert validate_scan_dirs([str(lib)], report) == [str(lib)]
    assert report.lines == [f"+ {lib}"]

    with pytest.raises(ConfigError, match="Directory does not exist"):
        validate_scan_dirs([str(tmp_path / "missing")], report)


def test_adjust_scan_directories_merges_and_reports(tmp_path):
    vendor = tmp_path / "vendor"
    (vendor / "lib").mkdir(parents=True)
    shared = tmp_path / "shared"
    shared.mkdir()
    gone = tmp_path / "gone"
    config = {"parameters": {"scanDirectories": [str(vendor / "lib"), str(shared), str(gone)]}}
    report = AdjustReport()

    adjust_scan_directories(config, [str(vendor)], report)

    assert config["parameters"]["scanDirectories"] == [str(shared), str(vendor)]
    assert report.lines == [
        f"{vendor / 'lib'} (unchanged)",
        f"{shared} (unchanged)",
        f"- {gone} (not readable)",
    ]


def test_adjust_scan_directories_creates_parameters(tmp_path):
    config = {}

    adjust_scan_directories(config, [str(tmp_path)], AdjustReport())

    assert config == {"parameters": {"scanDirectories": [str(tmp_path)]}}


def test_adjust_exclude_paths_merges_unique():
    config = {"parameters": {"excludePaths": {"analyseAndScan": ["a", "b"], "analyse": ["c"]}}}

    adjust_exclude_paths(config, ["b", "d"])

    assert config["parameters"]["excludePaths"] == {"analyseAndScan": ["a", "b", "d"], "analyse": ["c"]}


def test_adjust_exclude_paths_converts_plain_list():
    config = {"parameters": {"excludePaths": ["a"]}}

    adjust_exclude_paths(config, ["b"])

    assert config["parameters"]["excludePaths"] == {"analyseAndScan": ["a", "b"]}


def test_adjust_exclude_paths_without_dirs_leaves_config_untouched():
    config = {"parameters": {"level": 1}}

    adjust_exclude_paths(config, [])

    assert config == {"parameters": {"level": 1}}


def test_non_mapping_parameters_is_rejected(tmp_path):
    with pytest.raises(ConfigError, match="parameters"):
        adjust_scan_directories({"parameters": ["x"]}, [str(tmp_path)], AdjustReport())
