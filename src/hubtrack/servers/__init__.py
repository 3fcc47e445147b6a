"""Servers exposing the tracker to a host process."""
