"""Shared helpers for hubtrack."""
