"""
API Module - Presentation-layer interface.

A UI:
1. Creates a match
2. Submits secrets, guesses and card choices
3. Reads snapshots and replays the returned events

All state is session-scoped and in-memory.
"""

from .schemas import (
    # Requests
    CreateMatchRequest,
    DigitsRequest,
    CardRequest,
    PlayerRequest,
    # Responses
    ActionResponse,
    EndMatchResponse,
    ErrorResponse,
    MatchListResponse,
    MatchSnapshot,
    # Shared
    CardInfo,
    GuessLogInfo,
    PlayerView,
    ReplayEventInfo,
    MatchStatus,
)
from .service import MatchService, build_snapshot

__all__ = [
    # Requests
    "CreateMatchRequest",
    "DigitsRequest",
    "CardRequest",
    "PlayerRequest",
    # Responses
    "ActionResponse",
    "EndMatchResponse",
    "ErrorResponse",
    "MatchListResponse",
    "MatchSnapshot",
    # Shared
    "CardInfo",
    "GuessLogInfo",
    "PlayerView",
    "ReplayEventInfo",
    "MatchStatus",
    # Service
    "MatchService",
    "build_snapshot",
]
