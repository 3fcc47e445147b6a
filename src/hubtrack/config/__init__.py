"""
Configuration package for hubtrack.

Pydantic config models for the Hub connection, summary limits, logging,
the HTTP ingest server and the session table, loaded from YAML with
env/CLI overrides.
"""

from hubtrack.config.app import (
    HubSettings,
    HubTrackConfig,
    LoggingSettings,
    ServerSettings,
    SessionSettings,
    SummarySettings,
    load_config,
    write_default_config,
)

__all__ = [
    "HubSettings",
    "HubTrackConfig",
    "LoggingSettings",
    "ServerSettings",
    "SessionSettings",
    "SummarySettings",
    "load_config",
    "write_default_config",
]
