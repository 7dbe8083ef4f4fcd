"""Tests for configuration loading and overrides."""

import dataclasses
from pathlib import Path

import pytest
import yaml

from docwriter.utils.config import (
    APIConfig,
    AppConfig,
    ConfigError,
    DocsConfig,
    LoggingConfig,
    RunConfig,
    apply_overrides,
    load_config,
)


class TestDefaults:
    """Tests for dataclass defaults."""

    def test_api_defaults(self) -> None:
        config = APIConfig()
        assert config.temperature == 0.7
        assert config.connect_timeout == 5.0
        assert config.request_timeout == 30.0
        assert config.max_attempts == 2
        assert config.api_key is None

    def test_docs_defaults(self) -> None:
        config = DocsConfig()
        assert config.class_doc is True
        assert config.public_method_doc is False
        assert config.non_public_method_doc is False

    def test_run_defaults(self) -> None:
        config = RunConfig()
        assert config.max_files_to_change == 1
        assert config.max_errors == 5
        assert config.extensions == (".java",)

    def test_default_construction(self) -> None:
        config = AppConfig()
        assert isinstance(config.api, APIConfig)
        assert isinstance(config.docs, DocsConfig)
        assert isinstance(config.run, RunConfig)
        assert isinstance(config.logging, LoggingConfig)

    def test_immutable(self) -> None:
        config = AppConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.run.max_errors = 10  # type: ignore[misc]

    def test_api_key_not_in_repr(self) -> None:
        assert "secret" not in repr(APIConfig(api_key="secret"))


class TestLoadConfig:
    """Tests for the load_config function."""

    def test_load_default_config(self) -> None:
        config = load_config()
        assert isinstance(config, AppConfig)
        assert config.api.model == "claude-sonnet-4-20250514"
        assert config.run.exclude_patterns == ("target", "build", ".git")

    def test_load_from_explicit_path(self, tmp_path: Path) -> None:
        config_data = {
            "api": {"model": "claude-haiku-4-5-20251001", "max_tokens": 256},
            "docs": {"author": "Jane", "public_method_doc": True},
            "run": {"max_files_to_change": 3, "exclude_patterns": ["gen"]},
            "logging": {"level": "DEBUG"},
        }
        config_file = tmp_path / "test_config.yaml"
        with open(config_file, "w") as f:
            yaml.dump(config_data, f)

        config = load_config(str(config_file))
        assert config.api.model == "claude-haiku-4-5-20251001"
        assert config.api.max_tokens == 256
        assert config.docs.author == "Jane"
        assert config.docs.public_method_doc is True
        assert config.run.max_files_to_change == 3
        assert config.run.exclude_patterns == ("gen",)
        assert config.logging.level == "DEBUG"

    def test_api_key_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
        assert load_config().api.api_key == "env-key"

    def test_api_key_in_file_ignored(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        config_file = tmp_path / "c.yaml"
        config_file.write_text("api:\n  api_key: leaked\n")
        assert load_config(str(config_file)).api.api_key is None

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        config_file = tmp_path / "c.yaml"
        config_file.write_text("docs:\n  colour: blue\n  author: Ann\n")
        assert load_config(str(config_file)).docs.author == "Ann"

    def test_load_nonexistent_returns_defaults(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "nonexistent.yaml"))
        assert config.run == RunConfig()

    def test_load_empty_file_returns_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert load_config(str(config_file)).docs == DocsConfig()

    def test_root_not_mapping(self, tmp_path: Path) -> None:
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_config(str(config_file))

    def test_section_not_mapping(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("run: 5\n")
        with pytest.raises(ConfigError, match="run"):
            load_config(str(config_file))


class TestApplyOverrides:
    """Tests for command-line overrides."""

    def test_overrides_across_sections(self) -> None:
        config = apply_overrides(
            AppConfig(), model="m", author="Zed", max_files_to_change=7, level="DEBUG"
        )
        assert config.api.model == "m"
        assert config.docs.author == "Zed"
        assert config.run.max_files_to_change == 7
        assert config.logging.level == "DEBUG"

    def test_none_values_skipped(self) -> None:
        base = AppConfig()
        assert apply_overrides(base, author=None, class_doc=None) == base

    def test_false_is_applied(self) -> None:
        config = apply_overrides(AppConfig(), class_doc=False)
        assert config.docs.class_doc is False

    def test_input_unchanged(self) -> None:
        base = AppConfig()
        apply_overrides(base, max_errors=1)
        assert base.run.max_errors == 5

    def test_unknown_key(self) -> None:
        with pytest.raises(KeyError):
            apply_overrides(AppConfig(), colour="blue")
