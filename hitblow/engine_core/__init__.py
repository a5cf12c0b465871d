"""
Engine Core - Deterministic match state management and turn resolution.

The engine is the runtime that:
1. Creates a MatchState
2. Validates and applies actions via the reducer (phase state machine)
3. Judges guesses
4. Resolves a turn into HP changes and an ordered replay event list
"""

from .state import (
    Player,
    GamePhase,
    GuessResult,
    GuessLogEntry,
    ModifierState,
    PlayerState,
    MatchState,
    MAX_HP,
)
from .action import Action, ActionType, ActionPayload, ActionResult, ErrorCode
from .judge import judge, validate_digits, digit_sum
from .rng import RandomSource, SeededRandom, generate_secret
from .events import ReplayEvent, EventKind
from .damage import DamageCalculator
from .sequencer import ReplaySequencer, TurnOutcome
from .reducer import (
    Reducer,
    apply_action,
    new_match,
    set_secret,
    submit_guess,
    select_card,
    confirm_hand,
    use_card,
    skip_card,
)

__all__ = [
    "Player",
    "GamePhase",
    "GuessResult",
    "GuessLogEntry",
    "ModifierState",
    "PlayerState",
    "MatchState",
    "MAX_HP",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "judge",
    "validate_digits",
    "digit_sum",
    "RandomSource",
    "SeededRandom",
    "generate_secret",
    "ReplayEvent",
    "EventKind",
    "DamageCalculator",
    "ReplaySequencer",
    "TurnOutcome",
    "Reducer",
    "apply_action",
    "new_match",
    "set_secret",
    "submit_guess",
    "select_card",
    "confirm_hand",
    "use_card",
    "skip_card",
]
