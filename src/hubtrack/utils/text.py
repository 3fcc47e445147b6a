"""Text helpers shared by summaries and log lines."""

from __future__ import annotations

import re
from collections.abc import Iterable

ELLIPSIS = "..."

_WHITESPACE_RE = re.compile(r"\s+")


def summarize(text: str | None, max_length: int = 200) -> str:
    """
    Collapse whitespace and cut text down to max_length.

    Runs of whitespace become a single space and the ends are trimmed.
    Text longer than max_length is cut so that, with the trailing "...",
    the result is exactly max_length characters.

    Args:
        text: Text to summarize (None and "" give "")
        max_length: Maximum length of the result, ellipsis included

    Returns:
        The normalized, possibly truncated text
    """
    if not text:
        return ""
    cleaned = _WHITESPACE_RE.sub(" ", text).strip()
    if len(cleaned) <= max_length:
        return cleaned
    return cleaned[: max_length - len(ELLIPSIS)] + ELLIPSIS


def format_tool_list(tools: Iterable[str], limit: int = 5) -> str:
    """
    Render tool names as "a, b, c (+N more)".

    Names are sorted so the output does not depend on set ordering.
    """
    names = sorted(tools)
    shown = ", ".join(names[:limit])
    hidden = len(names) - limit
    if hidden > 0:
        return f"{shown} (+{hidden} more)"
    return shown
