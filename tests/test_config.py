from __future__ import annotations

import dataclasses
import os
from pathlib import Path

import pytest

from resources_merge.config import DEFAULT_DELETE_DELAYS, MergeConfiguration, resolve_dir
from resources_merge.config_validator import read_yaml
from resources_merge.exceptions import ConfigurationError, ConfigValidationError, YamlParseError


def test_defaults_resolve_against_build_root(build_root: Path) -> None:
    config = MergeConfiguration.from_mapping({"pattern": "(a)"}, build_root=build_root)

    assert config.origin_dir == build_root / "classes"
    assert config.default_merge_dir == build_root / "generated-resources"
    assert config.merge_dir is None
    assert config.target_filename is None
    assert config.newline_count == 2
    assert config.comment_format is None
    assert config.delete_after_merge is True
    assert config.retry_delete is True
    assert config.use_common_root is True
    assert config.sort_by == "name"
    assert config.line_separator == os.linesep
    assert config.delete_delays == DEFAULT_DELETE_DELAYS
    assert config.exclude_files == frozenset()


def test_explicit_options(build_root: Path, tmp_path: Path) -> None:
    config = MergeConfiguration.from_mapping(
        {
            "pattern": ".*",
            "origin_dir": str(tmp_path / "staging"),
            "merge_dir": "merged",
            "target_filename": "all.txt",
            "exclude_files": ["skip.txt"],
            "newline_count": 0,
            "comment_format": "// %s\n",
            "delete_after_merge": False,
            "retry_delete": False,
            "use_common_root": False,
            "sort_by": "path",
        },
        build_root=build_root,
    )
    assert config.origin_dir == tmp_path / "staging"
    assert config.merge_dir == build_root / "merged"
    assert config.target_filename == "all.txt"
    assert config.exclude_files == frozenset({"skip.txt"})
    assert config.comment_format == "// %s\n"
    assert config.sort_by == "path"


def test_configuration_is_immutable(build_root: Path) -> None:
    config = MergeConfiguration.from_mapping({"pattern": "(a)"}, build_root=build_root)
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.pattern = "(b)"  # type: ignore[misc]


@pytest.mark.parametrize("pattern", ["", None])
def test_empty_pattern_is_rejected(build_root: Path, pattern) -> None:
    with pytest.raises(ConfigurationError, match="pattern cannot be empty"):
        MergeConfiguration.from_mapping({"pattern": pattern}, build_root=build_root)


def test_invalid_regex_is_rejected(build_root: Path) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        MergeConfiguration.from_mapping({"pattern": "(unclosed"}, build_root=build_root)
    assert excinfo.value.context["pattern"] == "(unclosed"


def test_comment_format_needs_one_placeholder(build_root: Path) -> None:
    with pytest.raises(ConfigurationError):
        MergeConfiguration.from_mapping(
            {"pattern": "(a)", "comment_format": "# %s %s\n"}, build_root=build_root
        )


def test_unknown_sort_is_rejected(build_root: Path) -> None:
    with pytest.raises(ConfigurationError, match="Unknown sort_by"):
        MergeConfiguration.from_mapping({"pattern": "(a)", "sort_by": "size"}, build_root=build_root)


def test_resolve_dir_keeps_absolute_paths(tmp_path: Path) -> None:
    assert resolve_dir(tmp_path, "/abs/dir") == Path("/abs/dir")
    assert resolve_dir(tmp_path, None, "classes") == tmp_path / "classes"
    with pytest.raises(ConfigurationError):
        resolve_dir(tmp_path, None)


# =============================================================================
# YAML loading
# =============================================================================


def test_yaml_parse_error_includes_context(tmp_path: Path) -> None:
    bad_yaml = tmp_path / "bad.yaml"
    bad_yaml.write_text("default_strategies: [\n", encoding="utf-8")
    with pytest.raises(YamlParseError) as excinfo:
        read_yaml(bad_yaml)
    assert excinfo.value.code == "yaml_parse_error"
    assert excinfo.value.context["path"] == str(bad_yaml)


def test_config_validation_error_includes_context(tmp_path: Path) -> None:
    invalid = tmp_path / "merge.yaml"
    invalid.write_text(
        "default_strategies:\n  - pattern: ''\n    newline_count: two\n",
        encoding="utf-8",
    )
    with pytest.raises(ConfigValidationError) as excinfo:
        read_yaml(invalid, schema_name="merge_config")
    assert excinfo.value.code == "config_validation_error"
    assert excinfo.value.context["schema"] == "merge_config"
    assert excinfo.value.context["path"] == str(invalid)
    paths = {error["path"] for error in excinfo.value.context["errors"]}
    assert paths == {"default_strategies.0.pattern", "default_strategies.0.newline_count"}


def test_valid_config_passes_schema(tmp_path: Path) -> None:
    valid = tmp_path / "merge.yaml"
    valid.write_text(
        "default_strategies:\n"
        "  - pattern: '.*(message)(_.*)?(\\.properties)'\n"
        "    comment_format: \"# %s\\n\"\n"
        "custom_strategies:\n"
        "  - implementation: my_build.merge:factory\n"
        "    options: {root: resources}\n",
        encoding="utf-8",
    )
    data = read_yaml(valid, schema_name="merge_config")
    assert data["default_strategies"][0]["comment_format"] == "# %s\n"
    assert data["custom_strategies"][0]["options"] == {"root": "resources"}


def test_empty_yaml_is_empty_mapping(tmp_path: Path) -> None:
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert read_yaml(empty, schema_name="merge_config") == {}
