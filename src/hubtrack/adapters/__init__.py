"""Adapters translating host-specific event payloads into SessionEvent models."""

from hubtrack.adapters.opencode import OpenCodeAdapter

__all__ = ["OpenCodeAdapter"]
