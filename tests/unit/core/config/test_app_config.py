"""
Tests for EngineConfig and the YAML/environment loader.
"""

from pathlib import Path

import pytest
import yaml
from mindcmd.constants import DEFAULT_KEY_COMMANDS
from mindcmd.core.common.exceptions import ConfigurationError
from mindcmd.core.config.app_config import (
    EngineConfig,
    KeymapConfig,
    LogLevel,
    SuggestionConfig,
    load_config,
)
from pydantic import ValidationError


class TestModels:
    def test_defaults(self) -> None:
        config = EngineConfig()

        assert config.logging.level is LogLevel.INFO
        assert config.logging.log_file is None
        assert config.keymap.commands == DEFAULT_KEY_COMMANDS
        assert config.keymap.numbered_command == "convert-ordered"
        assert config.suggestions.limit == 10
        assert config.suggestions.reported == 3

    def test_level_is_case_insensitive(self) -> None:
        assert EngineConfig(logging={"level": "warning"}).logging.level is LogLevel.WARNING

    @pytest.mark.parametrize("patterns", [{"": "x"}, {"3x": "x"}, {"q": ""}])
    def test_invalid_patterns(self, patterns) -> None:
        with pytest.raises(ValidationError):
            KeymapConfig(patterns=patterns)

    def test_numbered_key_cannot_be_digit(self) -> None:
        with pytest.raises(ValidationError):
            KeymapConfig(numbered_key="5")

    def test_reported_cannot_exceed_limit(self) -> None:
        with pytest.raises(ValidationError):
            SuggestionConfig(limit=2, reported=3)

    def test_from_env(self) -> None:
        config = EngineConfig.from_env(
            {"MINDCMD_LOG_LEVEL": "debug", "MINDCMD_SUGGESTION_LIMIT": "4"}
        )

        assert config.logging.level is LogLevel.DEBUG
        assert config.suggestions.limit == 4

    def test_save_round_trips_through_load(self, tmp_path: Path) -> None:
        path = tmp_path / "saved.yaml"
        original = EngineConfig(suggestions=SuggestionConfig(limit=6, reported=2))

        original.save(path)
        loaded = load_config(path, environ={})

        assert loaded == original


class TestLoadConfig:
    def test_no_file_uses_defaults(self) -> None:
        assert load_config(environ={}) == EngineConfig()

    def test_file_values_merge_into_defaults(self, temp_config_path: Path) -> None:
        config = load_config(temp_config_path, environ={})

        assert config.logging.level is LogLevel.DEBUG
        assert config.keymap.commands["j"] == "move-down"
        # untouched defaults survive the merge
        assert config.keymap.commands["dd"] == "cut"
        assert config.suggestions.limit == 5
        assert config.suggestions.reported == 2

    def test_environment_wins_over_file(self, temp_config_path: Path) -> None:
        config = load_config(
            temp_config_path,
            environ={"MINDCMD_LOG_LEVEL": "ERROR", "MINDCMD_LOG_FILE": "/tmp/m.log"},
        )

        assert config.logging.level is LogLevel.ERROR
        assert config.logging.log_file == "/tmp/m.log"

    def test_bad_env_int_keeps_value(self, temp_config_path: Path) -> None:
        config = load_config(temp_config_path, environ={"MINDCMD_SUGGESTION_LIMIT": "lots"})

        assert config.suggestions.limit == 5

    def test_missing_file_warns(self, tmp_path: Path, caplog) -> None:
        config = load_config(tmp_path / "absent.yaml", environ={})

        assert config == EngineConfig()
        assert "Configuration file not found" in caplog.text

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{}", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Unsupported configuration file format"):
            load_config(path, environ={})

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("keymap: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(path, environ={})

    def test_non_mapping_file(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text(yaml.safe_dump(["a", "b"]), encoding="utf-8")

        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config(path, environ={})

    def test_invalid_values(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump({"suggestions": {"limit": 0}}), encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path, environ={})
        assert exc_info.value.details
