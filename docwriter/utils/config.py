"""Configuration loader for the Javadoc writer.

Loads settings from configs/config.yaml (or an explicit path) into
immutable dataclasses. The configuration is built once at start-up,
optionally overridden by command-line flags, and then passed
explicitly to every component.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "configs" / "config.yaml"

API_KEY_ENV = "ANTHROPIC_API_KEY"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be interpreted."""


@dataclass(frozen=True)
class APIConfig:
    """Configuration for the Anthropic API client.

    The API key is never read from the config file; it comes from the
    ANTHROPIC_API_KEY environment variable and is excluded from repr.
    """

    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 512
    temperature: float = 0.7
    connect_timeout: float = 5.0
    request_timeout: float = 30.0
    max_attempts: int = 2
    rate_limit_rpm: int = 50
    api_key: Optional[str] = field(default=None, repr=False)


@dataclass(frozen=True)
class DocsConfig:
    """Which declarations receive generated documentation."""

    author: str = "DocWriter"
    class_doc: bool = True
    public_method_doc: bool = False
    non_public_method_doc: bool = False


@dataclass(frozen=True)
class RunConfig:
    """Configuration for a batch run over a source tree.

    Attributes:
        src_dir: Root directory scanned recursively for Java files.
        max_files_to_change: Number of files that may be rewritten.
        max_errors: Number of failures tolerated before aborting.
        extensions: File extensions considered source files.
        exclude_patterns: Directory names skipped while collecting.
    """

    src_dir: str = "."
    max_files_to_change: int = 1
    max_errors: int = 5
    extensions: tuple[str, ...] = (".java",)
    exclude_patterns: tuple[str, ...] = ("target", "build", ".git")


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    api: APIConfig = field(default_factory=APIConfig)
    docs: DocsConfig = field(default_factory=DocsConfig)
    run: RunConfig = field(default_factory=RunConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _section(raw: dict, name: str) -> dict:
    """Return a mapping section of the raw config, or an empty one.

    Raises:
        ConfigError: If the section exists but is not a mapping.
    """
    data = raw.get(name) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    return data


def _build(cls: type, data: dict, **extra: Any) -> Any:
    """Instantiate a config dataclass from known keys of a mapping.

    Unknown keys are logged and ignored. List values are stored as
    tuples so that the resulting value stays immutable.
    """
    known = {f.name for f in dataclasses.fields(cls)}
    kwargs = {}
    for key, value in data.items():
        if key not in known or key == "api_key":
            logger.warning("Ignoring unknown config key %s.%s", cls.__name__, key)
            continue
        kwargs[key] = tuple(value) if isinstance(value, list) else value
    kwargs.update(extra)
    return cls(**kwargs)


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load application configuration from a YAML file.

    Reads the YAML config file and constructs a fully typed AppConfig.
    Missing sections and keys fall back to defaults. The API key is
    read from the ANTHROPIC_API_KEY environment variable, never from
    the file.

    Args:
        config_path: Path to the YAML config file. If None, uses the
            packaged configs/config.yaml.

    Returns:
        A fully populated AppConfig instance.

    Raises:
        ConfigError: If the file does not contain a mapping.
        yaml.YAMLError: If the config file contains invalid YAML.
    """
    path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH
    api_key = os.getenv(API_KEY_ENV) or None

    if not path.exists():
        logger.warning("Config file not found at %s, using defaults", path)
        return AppConfig(api=APIConfig(api_key=api_key))

    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping at the root")

    logger.debug("Loaded configuration from %s", path)

    return AppConfig(
        api=_build(APIConfig, _section(raw, "api"), api_key=api_key),
        docs=_build(DocsConfig, _section(raw, "docs")),
        run=_build(RunConfig, _section(raw, "run")),
        logging=_build(LoggingConfig, _section(raw, "logging")),
    )


def apply_overrides(config: AppConfig, **overrides: Any) -> AppConfig:
    """Return a copy of the configuration with explicit overrides applied.

    Keys are looked up in the api, docs, run and logging sections, in
    that order. None values mean "not given" and are skipped.

    Args:
        config: The configuration to start from.
        **overrides: Field names mapped to their new values.

    Returns:
        A new AppConfig; the input is left unchanged.

    Raises:
        KeyError: If a key matches no configuration field.
    """
    sections = {
        "api": config.api,
        "docs": config.docs,
        "run": config.run,
        "logging": config.logging,
    }
    changes: dict[str, dict[str, Any]] = {name: {} for name in sections}

    for key, value in overrides.items():
        if value is None:
            continue
        for name, section in sections.items():
            if key in {f.name for f in dataclasses.fields(section)}:
                changes[name][key] = value
                break
        else:
            raise KeyError(f"Unknown configuration option: {key}")

    return AppConfig(
        **{
            name: dataclasses.replace(section, **changes[name])
            for name, section in sections.items()
        }
    )
