"""
Session correlation and summarization.

- SessionTracker: turns lifecycle events into Hub start/progress/complete calls
- SessionStore / SessionState: per-session accumulator state
- SessionSummarizer: content strings sent to the Hub
"""

from hubtrack.sessions.state import SessionState, SessionStore
from hubtrack.sessions.summary import SessionSummarizer
from hubtrack.sessions.tracker import SessionTracker

__all__ = [
    "SessionState",
    "SessionStore",
    "SessionSummarizer",
    "SessionTracker",
]
