"""
Configuration management for hubtrack.

Provides YAML-based configuration with environment and CLI overrides,
configuration hierarchy (CLI > env > YAML > Defaults), and validation.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_CONFIG_FILE = "~/.hubtrack/config.yaml"
CONFIG_SUFFIXES = (".yaml", ".yml", ".json")

# Checked in order; the first one set wins
HUB_URL_ENV_VARS = ("OPENCODE_HUB_URL", "HUB_API_URL")


class HubSettings(BaseModel):
    """Hub API connection configuration."""

    url: str = Field(
        default="http://localhost:5055/api/hub",
        description="Base URL of the Hub API (start/progress/complete/pending live below it)",
    )
    timeout_seconds: float = Field(
        default=5.0,
        description="Timeout applied to every Hub call; a timed out call is a failure",
    )
    source_agent: str = Field(
        default="opencode",
        description="Agent name reported as sourceAgent on start calls",
    )
    default_target_agent: str = Field(
        default="user",
        description="targetAgent used when the caller does not name one",
    )
    pending_agent: str = Field(
        default="opencode",
        description="Agent whose pending messages hub_check reads by default",
    )

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended."""
        v = v.strip()
        if not v:
            raise ValueError("Hub URL must not be empty")
        return v.rstrip("/")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Validate value is positive."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v


class SummarySettings(BaseModel):
    """Limits applied when text is summarized for the Hub."""

    title_max_length: int = Field(
        default=50,
        description="Maximum length of a summarized user message title",
    )
    assistant_max_length: int = Field(
        default=300,
        description="Maximum length of the accumulated assistant text in a progress update",
    )
    last_request_max_length: int = Field(
        default=100,
        description="Maximum length of the last user request in the completion summary",
    )
    log_preview_length: int = Field(
        default=50,
        description="Maximum length of content previews written to the log",
    )
    max_listed_tools: int = Field(
        default=5,
        description="Number of tool names listed before collapsing into '+N more'",
    )

    @field_validator(
        "title_max_length",
        "assistant_max_length",
        "last_request_max_length",
        "log_preview_length",
    )
    @classmethod
    def validate_room_for_ellipsis(cls, v: int) -> int:
        """A truncation maximum must leave room for the ellipsis."""
        if v <= 3:
            raise ValueError("Maximum length must be greater than 3")
        return v

    @field_validator("max_listed_tools")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate value is positive."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["debug", "info", "warning", "error"] = Field(
        default="debug",
        description="Log level",
    )
    file: str = Field(
        default="/tmp/opencode-plugin-logs/hub-plugin.log",
        description="Tracker log file path",
    )
    max_size_mb: int = Field(
        default=10,
        description="Maximum log file size in MB",
    )
    backup_count: int = Field(
        default=5,
        description="Number of backup log files to keep",
    )

    @field_validator("max_size_mb", "backup_count")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate value is positive."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v


class ServerSettings(BaseModel):
    """HTTP event ingest server configuration."""

    host: str = Field(
        default="127.0.0.1",
        description="Interface the ingest server binds to",
    )
    port: int = Field(
        default=5056,
        description="Port for the ingest server to listen on",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number is in valid range."""
        if not (1024 <= v <= 65535):
            raise ValueError("Port must be between 1024 and 65535")
        return v


class SessionSettings(BaseModel):
    """Session table limits."""

    max_manual_sessions: int = Field(
        default=100,
        description=(
            "Manual sessions (created by hub_start) kept in the session table; "
            "the oldest are dropped beyond this"
        ),
    )

    @field_validator("max_manual_sessions")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate value is positive."""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v


class HubTrackConfig(BaseModel):
    """
    Main configuration for hubtrack.

    Every section has defaults, so an empty or missing file is valid.
    """

    hub: HubSettings = Field(
        default_factory=HubSettings,
        description="Hub API connection configuration",
    )
    summary: SummarySettings = Field(
        default_factory=SummarySettings,
        description="Summary length limits",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )
    server: ServerSettings = Field(
        default_factory=ServerSettings,
        description="HTTP event ingest server configuration",
    )
    sessions: SessionSettings = Field(
        default_factory=SessionSettings,
        description="Session table limits",
    )


def load_yaml(config_file: str) -> dict[str, Any]:
    """
    Read a YAML or JSON config file into a dict.

    A missing or empty file reads as {}.

    Raises:
        ValueError: Unsupported extension, unparsable content, or a
            top level that is not a mapping
    """
    path = Path(config_file).expanduser()
    if not path.is_file():
        return {}

    suffix = path.suffix.lower()
    if suffix not in CONFIG_SUFFIXES:
        raise ValueError(
            f"Unsupported config file extension {suffix!r} "
            f"(expected one of {', '.join(CONFIG_SUFFIXES)}): {path}"
        )

    text = path.read_text()
    if not text.strip():
        return {}

    try:
        data = json.loads(text) if suffix == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        kind = "JSON" if suffix == ".json" else "YAML"
        raise ValueError(f"Invalid {kind} in config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def _set_dotted(config_dict: dict[str, Any], dotted_key: str, value: Any) -> None:
    """Set "section.key" in a nested dict, creating sections as needed."""
    *sections, leaf = dotted_key.split(".")
    node = config_dict
    for section in sections:
        child = node.get(section)
        if not isinstance(child, dict):
            child = node[section] = {}
        node = child
    node[leaf] = value


def apply_cli_overrides(
    config_dict: dict[str, Any],
    cli_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Merge CLI overrides into config_dict in place.

    Keys may be dotted ("hub.url"); None values mean "option not given"
    and are skipped.
    """
    for key, value in (cli_overrides or {}).items():
        if value is not None:
            _set_dotted(config_dict, key, value)
    return config_dict


def apply_env_overrides(
    config_dict: dict[str, Any],
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Set hub.url from the first of HUB_URL_ENV_VARS that is set."""
    env = os.environ if environ is None else environ
    url = next((env[var] for var in HUB_URL_ENV_VARS if env.get(var)), None)
    if url is not None:
        _set_dotted(config_dict, "hub.url", url)
    return config_dict


def write_default_config(config_file: str | None = None, force: bool = False) -> Path:
    """
    Write a config file holding every default, readable only by the owner.

    Args:
        config_file: Destination (default: ~/.hubtrack/config.yaml)
        force: Replace an existing file

    Returns:
        The path written

    Raises:
        FileExistsError: The file exists and force is False
    """
    path = Path(config_file or DEFAULT_CONFIG_FILE).expanduser()
    if path.exists() and not force:
        raise FileExistsError(f"Config file already exists: {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(HubTrackConfig().model_dump(mode="json"), sort_keys=False)
    )
    path.chmod(0o600)
    return path


def load_config(
    config_file: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> HubTrackConfig:
    """
    Build the effective configuration.

    Precedence, highest first: CLI overrides, environment, config file,
    model defaults.

    Args:
        config_file: YAML/JSON file (default: ~/.hubtrack/config.yaml)
        cli_overrides: Dotted-key overrides from the command line
        environ: Environment mapping (default: os.environ)

    Raises:
        ValueError: The file cannot be read or the merged values are invalid
    """
    config_file = config_file or DEFAULT_CONFIG_FILE
    merged = load_yaml(config_file)
    apply_env_overrides(merged, environ)
    apply_cli_overrides(merged, cli_overrides)

    try:
        return HubTrackConfig.model_validate(merged)
    except ValidationError as e:
        raise ValueError(f"Configuration validation failed for {config_file}:\n{e}") from e
