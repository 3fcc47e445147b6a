"""hubtrack - Hub task tracking for interactive agent sessions.

Watches OpenCode session lifecycle events and reports each session to the
Hub as a start / progress / complete task, with summaries of the messages
and tools seen along the way. Manual override tools cover the cases the
automatic correlation misses.
"""

__version__ = "0.1.0"
