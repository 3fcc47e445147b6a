"""Tests for the configuration system."""

import json
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from hubtrack.config.app import (
    HubSettings,
    HubTrackConfig,
    LoggingSettings,
    ServerSettings,
    SessionSettings,
    SummarySettings,
    apply_cli_overrides,
    apply_env_overrides,
    load_config,
    load_yaml,
    write_default_config,
)

pytestmark = pytest.mark.unit


class TestDefaults:
    def test_hub_defaults(self) -> None:
        config = HubTrackConfig()
        assert config.hub.url == "http://localhost:5055/api/hub"
        assert config.hub.timeout_seconds == 5.0
        assert config.hub.source_agent == "opencode"
        assert config.hub.default_target_agent == "user"
        assert config.hub.pending_agent == "opencode"

    def test_summary_defaults(self) -> None:
        summary = HubTrackConfig().summary
        assert summary.title_max_length == 50
        assert summary.assistant_max_length == 300
        assert summary.last_request_max_length == 100
        assert summary.max_listed_tools == 5

    def test_logging_defaults(self) -> None:
        assert LoggingSettings().file == "/tmp/opencode-plugin-logs/hub-plugin.log"


class TestValidation:
    def test_url_trailing_slash_stripped(self) -> None:
        assert HubSettings(url="http://hub/api/ ").url == "http://hub/api"

    def test_empty_url_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HubSettings(url="  ")

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            HubSettings(timeout_seconds=0)

    def test_max_length_needs_room_for_ellipsis(self) -> None:
        with pytest.raises(ValidationError):
            SummarySettings(title_max_length=3)

    def test_port_range(self) -> None:
        with pytest.raises(ValidationError):
            ServerSettings(port=80)

    def test_manual_session_limit_positive(self) -> None:
        with pytest.raises(ValidationError):
            SessionSettings(max_manual_sessions=0)


class TestLoadYaml:
    def test_missing_file(self, temp_dir: Path) -> None:
        assert load_yaml(str(temp_dir / "nope.yaml")) == {}

    def test_yaml_file(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text("hub:\n  url: http://example/api\n")
        assert load_yaml(str(path)) == {"hub": {"url": "http://example/api"}}

    def test_json_file(self, temp_dir: Path) -> None:
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"summary": {"title_max_length": 80}}))
        assert load_yaml(str(path)) == {"summary": {"title_max_length": 80}}

    def test_empty_file(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text("")
        assert load_yaml(str(path)) == {}

    def test_bad_extension(self, temp_dir: Path) -> None:
        path = temp_dir / "config.toml"
        path.write_text("x = 1")
        with pytest.raises(ValueError, match="extension"):
            load_yaml(str(path))

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text("hub: [unclosed")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_yaml(str(path))


class TestOverrides:
    def test_nested_cli_override(self) -> None:
        result = apply_cli_overrides({"hub": {"timeout_seconds": 2}}, {"hub.url": "http://x"})
        assert result == {"hub": {"timeout_seconds": 2, "url": "http://x"}}

    def test_none_values_skipped(self) -> None:
        assert apply_cli_overrides({}, {"hub.url": None}) == {}

    def test_env_override(self) -> None:
        result = apply_env_overrides({}, {"OPENCODE_HUB_URL": "http://env/api"})
        assert result == {"hub": {"url": "http://env/api"}}

    def test_env_fallback_variable(self) -> None:
        result = apply_env_overrides({}, {"HUB_API_URL": "http://other/api"})
        assert result == {"hub": {"url": "http://other/api"}}

    def test_opencode_variable_wins(self) -> None:
        result = apply_env_overrides(
            {}, {"OPENCODE_HUB_URL": "http://first", "HUB_API_URL": "http://second"}
        )
        assert result["hub"]["url"] == "http://first"


class TestLoadConfig:
    def test_hierarchy(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text(
            yaml.safe_dump({"hub": {"url": "http://yaml/api", "timeout_seconds": 2.5}})
        )

        config = load_config(str(path), environ={"OPENCODE_HUB_URL": "http://env/api"})
        assert config.hub.url == "http://env/api"
        assert config.hub.timeout_seconds == 2.5

        config = load_config(
            str(path),
            cli_overrides={"hub.url": "http://cli/api"},
            environ={"OPENCODE_HUB_URL": "http://env/api"},
        )
        assert config.hub.url == "http://cli/api"

    def test_invalid_config(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text(yaml.safe_dump({"hub": {"timeout_seconds": -1}}))

        with pytest.raises(ValueError, match="Configuration validation failed"):
            load_config(str(path), environ={})

    def test_unknown_top_level_shape(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError, match="mapping"):
            load_config(str(path), environ={})


class TestWriteDefaultConfig:
    def test_writes_defaults(self, temp_dir: Path) -> None:
        path = temp_dir / "sub" / "config.yaml"

        written = write_default_config(str(path))

        assert written == path
        assert path.stat().st_mode & 0o777 == 0o600
        data = yaml.safe_load(path.read_text())
        assert data["hub"]["url"] == "http://localhost:5055/api/hub"
        assert set(data) == {"hub", "summary", "logging", "server", "sessions"}
        assert load_config(str(path), environ={}) == HubTrackConfig()

    def test_refuses_to_overwrite(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text("hub:\n  url: http://mine/api\n")

        with pytest.raises(FileExistsError):
            write_default_config(str(path))

        assert "http://mine/api" in path.read_text()

    def test_force_overwrites(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text("hub:\n  url: http://mine/api\n")

        write_default_config(str(path), force=True)

        assert load_config(str(path), environ={}).hub.url == "http://localhost:5055/api/hub"
