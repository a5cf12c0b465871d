"""
Session Module - Manages ephemeral matches.

A session represents one match:
- Created when players start a game
- Holds the current committed MatchState
- Serializes operations on that match
- Destroyed when the match ends

No persistence to disk or database.
"""

from .manager import SessionManager, Session, SessionState

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
]
