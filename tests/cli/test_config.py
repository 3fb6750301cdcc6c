"""Tests for settings file loading, merging and validation."""

import json
from pathlib import Path

import pytest
import yaml
from hypothesis import given
from hypothesis import strategies as st

from fieldchain.cli.config import ConfigError, load_config, merge_config, validate_config


class TestLoadConfig:
    def test_json(self, tmp_path: Path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"fields": ["sku"], "max_items": 10}))
        assert load_config(path) == {"fields": ["sku"], "max_items": 10}

    def test_yaml(self, tmp_path: Path):
        path = tmp_path / "settings.yaml"
        path.write_text("session_name: importProducts\nfields: [sku, warehouse]\n")
        assert load_config(path) == {"session_name": "importProducts", "fields": ["sku", "warehouse"]}

    def test_auto_detect_yaml(self, tmp_path: Path):
        path = tmp_path / "settings.conf"
        path.write_text("log_level: debug\n")
        assert load_config(path) == {"log_level": "debug"}

    def test_empty_yaml(self, tmp_path: Path):
        path = tmp_path / "settings.yml"
        path.write_text("")
        assert load_config(path) == {}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "settings.yaml"
        path.write_text("fields: [sku\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_config(path)


class TestMergeConfig:
    def test_cli_takes_precedence(self):
        merged = merge_config({"fields": ["sku"], "max_items": 5}, max_items=10)
        assert merged == {"fields": ["sku"], "max_items": 10}

    def test_none_and_empty_fields_ignored(self):
        merged = merge_config({"fields": ["sku"]}, fields=[], session_name=None)
        assert merged == {"fields": ["sku"]}

    def test_base_not_mutated(self):
        base = {"log_level": "info"}
        merge_config(base, log_level="debug")
        assert base == {"log_level": "info"}


class TestValidateConfig:
    def test_valid(self):
        config = {
            "session_name": "importProducts",
            "fields": ["sku", "warehouse"],
            "max_items": 5000,
            "log_level": "info",
            "log_file": "logs/fieldchain.log",
        }
        assert validate_config(config) == []

    def test_empty(self):
        assert validate_config({}) == []

    def test_all_problems_reported(self):
        config = {
            "session_name": "1bad name",
            "fields": ["sku", "", "bad-field"],
            "max_items": -1,
            "log_level": "loud",
            "colour": "blue",
        }
        assert validate_config(config) == [
            "Invalid Input: session_name. Value must match the given regex [A-Za-z][A-Za-z0-9_.-]*.",
            "Invalid Input: fields[1]. It is a mandatory field.",
            "Invalid Input: fields[2]. Value must match the given regex [A-Za-z_][A-Za-z0-9_]*.",
            "Invalid Input: max_items. Value must only contain numbers.",
            "Invalid Input: log_level. Values can only be either [debug, info, warning, error].",
            "Invalid Input: settings. Unknown settings colour.",
        ]

    @pytest.mark.parametrize("level", ["DEBUG", "Info", "WARNING"])
    def test_log_level_is_case_insensitive(self, level):
        assert validate_config({"log_level": level}) == []

    def test_fields_not_a_list(self):
        assert validate_config({"fields": "sku"}) == [
            "Invalid Input: fields. Must be a list of field names."
        ]

    def test_too_many_fields(self):
        errors = validate_config({"fields": [f"f{i}" for i in range(17)]})
        assert errors == ["Invalid Input: fields. List items must not exceed 16."]

    def test_long_session_name_reports_both_rules(self):
        errors = validate_config({"session_name": "x" * 65 + " "})
        assert errors == [
            "Invalid Input: session_name. Value must not exceed allowed 64 characters long.",
            "Value must match the given regex [A-Za-z][A-Za-z0-9_.-]*.",
        ]


@given(
    st.fixed_dictionaries(
        {},
        optional={
            "fields": st.lists(st.from_regex(r"[a-z_][a-z0-9_]{0,10}", fullmatch=True), max_size=5),
            "max_items": st.integers(min_value=0, max_value=100_000),
            "log_level": st.sampled_from(["debug", "info", "warning", "error"]),
        },
    )
)
def test_yaml_round_trip_stays_valid(tmp_path_factory, config):
    """Valid settings written as YAML load back equal and still validate."""
    path = tmp_path_factory.mktemp("cfg") / "settings.yaml"
    path.write_text(yaml.safe_dump(config))

    loaded = load_config(path)

    assert loaded == config
    assert validate_config(loaded) == []
