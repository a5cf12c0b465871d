"""
Pydantic Schemas - Request/response models for presentation layers.

These models define the exact contract between a UI and the engine.
A snapshot never reveals a secret before the match is over, and a
viewer only sees card ids of their own hand.

Error Codes:
- INVALID_GUESS_LENGTH / DUPLICATE_DIGITS / INVALID_CHARACTERS: bad digits
- WRONG_PHASE: operation not valid in the current phase
- NOT_YOUR_TURN: the other side's input is expected
- UNKNOWN_CARD / CARD_NOT_IN_HAND / CARD_NOT_OFFERED: bad card choice
- MATCH_NOT_FOUND: match does not exist or has been ended
- INVALID_PLAYER: a player or viewer name other than P1/P2
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.action import ErrorCode


# =============================================================================
# Enums
# =============================================================================

class MatchStatus(str, Enum):
    """Coarse match status for UIs that do not track phases."""
    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """Card information for display."""
    card_id: str
    title: str
    description: str
    category: str

    model_config = {"from_attributes": True}


class GuessLogInfo(BaseModel):
    """One guess of the current round."""
    digits: str
    hit: int = Field(0, ge=0, le=4)
    blow: int = Field(0, ge=0, le=4)


class PlayerView(BaseModel):
    """Per-player state for display."""
    player: str = Field(description="P1 or P2")
    hp: int = Field(100, ge=0, le=100)
    status_summary: str = ""
    logs: list[GuessLogInfo] = Field(default_factory=list)
    hand: list[CardInfo] = Field(default_factory=list)
    hand_count: int = 0
    has_secret: bool = False
    secret: Optional[str] = Field(None, description="Only revealed once the match is over")


class ReplayEventInfo(BaseModel):
    """A replay event, flattened for serialization."""
    sequence: int
    kind: str
    player: str
    target: Optional[str] = None
    amount: int = 0
    hit: int = 0
    blow: int = 0
    card_id: Optional[str] = None
    duration_ms: int = 0
    text: str = ""
    formula: Optional[str] = None


class MatchSnapshot(BaseModel):
    """Complete read-only view of a match."""
    match_id: str
    status: MatchStatus
    phase: str
    current_player: str
    digit_count: int
    card_mode: bool
    current_round: int = 1
    current_turn: int = 1
    total_turns: int = 0
    players: list[PlayerView] = Field(default_factory=list)
    buff_offer: list[CardInfo] = Field(default_factory=list)
    replay_events: list[ReplayEventInfo] = Field(default_factory=list)
    battle_log: list[str] = Field(default_factory=list)
    winner: Optional[str] = None
    is_draw: bool = False
    api_version: str = "v1"


# =============================================================================
# Request Models
# =============================================================================

class CreateMatchRequest(BaseModel):
    """Request to start a new match."""
    digit_count: int = Field(3, ge=3, le=4, description="Length of every secret and guess")
    card_mode: bool = Field(False, description="Enable HP, buff draft and support cards")
    random_seed: Optional[int] = Field(None, description="Seed for reproducible drafts")


class DigitsRequest(BaseModel):
    """Secret or guess submission."""
    player: str = Field(..., pattern="^P[12]$")
    digits: str = Field(..., description="Distinct decimal digits")


class CardRequest(BaseModel):
    """BUFF pick or SUPPORT use."""
    player: str = Field(..., pattern="^P[12]$")
    card_id: str


class PlayerRequest(BaseModel):
    """Hand confirmation or card skip."""
    player: str = Field(..., pattern="^P[12]$")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class ActionResponse(BaseModel):
    """Response after an accepted operation."""
    success: bool = True
    changes: list[str] = Field(default_factory=list)
    events: list[ReplayEventInfo] = Field(default_factory=list)
    match: MatchSnapshot
    api_version: str = "v1"


class MatchListResponse(BaseModel):
    """Response listing active matches."""
    matches: list[str]
    count: int


class EndMatchResponse(BaseModel):
    """Response after ending a match."""
    success: bool
    match_id: str
