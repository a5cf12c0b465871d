"""
Action System - Actions, payloads, error codes and results.

Actions represent the five things a presentation layer can ask for:
1. Set a secret (SETTING phases)
2. Submit a guess
3. Pick a round-start BUFF card, acknowledge the SUPPORT hand
4. Use or skip a SUPPORT card

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Player


class ActionType(Enum):
    """Types of actions in the system."""
    SET_SECRET = "set_secret"
    SUBMIT_GUESS = "submit_guess"

    # Card mode
    SELECT_CARD = "select_card"
    CONFIRM_HAND = "confirm_hand"
    USE_CARD = "use_card"
    SKIP_CARD = "skip_card"


class ErrorCode(str, Enum):
    """Structured error codes for rejected actions."""
    INVALID_GUESS_LENGTH = "INVALID_GUESS_LENGTH"
    DUPLICATE_DIGITS = "DUPLICATE_DIGITS"
    INVALID_CHARACTERS = "INVALID_CHARACTERS"
    WRONG_PHASE = "WRONG_PHASE"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    UNKNOWN_CARD = "UNKNOWN_CARD"
    CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
    CARD_NOT_OFFERED = "CARD_NOT_OFFERED"
    MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
    INVALID_PLAYER = "INVALID_PLAYER"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    Validation happens in the reducer.
    """
    player: Player
    digits: str | None = None
    card_id: str | None = None


@dataclass
class Action:
    """
    A complete action to be applied to the match state.

    Actions are validated before application and applied atomically
    by the reducer.
    """
    action_type: ActionType
    payload: ActionPayload

    @classmethod
    def set_secret(cls, player: Player, digits: str) -> Action:
        """Factory for secret setting."""
        return cls(
            action_type=ActionType.SET_SECRET,
            payload=ActionPayload(player=player, digits=digits),
        )

    @classmethod
    def submit_guess(cls, player: Player, digits: str) -> Action:
        """Factory for guess submission."""
        return cls(
            action_type=ActionType.SUBMIT_GUESS,
            payload=ActionPayload(player=player, digits=digits),
        )

    @classmethod
    def select_card(cls, player: Player, card_id: str) -> Action:
        """Factory for the round-start BUFF pick."""
        return cls(
            action_type=ActionType.SELECT_CARD,
            payload=ActionPayload(player=player, card_id=card_id),
        )

    @classmethod
    def confirm_hand(cls, player: Player) -> Action:
        return cls(
            action_type=ActionType.CONFIRM_HAND,
            payload=ActionPayload(player=player),
        )

    @classmethod
    def use_card(cls, player: Player, card_id: str) -> Action:
        """Factory for spending a SUPPORT card."""
        return cls(
            action_type=ActionType.USE_CARD,
            payload=ActionPayload(player=player, card_id=card_id),
        )

    @classmethod
    def skip_card(cls, player: Player) -> Action:
        return cls(
            action_type=ActionType.SKIP_CARD,
            payload=ActionPayload(player=player),
        )


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Error and error code (if failed)
    - Replay events produced by a turn resolution
    - Human-readable changes (appended to the battle log)
    """
    success: bool
    new_state: Any | None = None  # MatchState
    error: str | None = None
    error_code: ErrorCode | None = None

    state_changes: list[str] = field(default_factory=list)
    events: list[Any] = field(default_factory=list)  # ReplayEvent

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        events: list[Any] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            events=events or [],
        )
