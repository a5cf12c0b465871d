"""
Match State - The aggregate root the engine operates on.

Design principles:
- Single writer: only the reducer mutates a MatchState
- Cloneable: the reducer works on a deep copy and swaps it in on success
- Per-player data is keyed by Player, never duplicated p1/p2 fields
- Observable: read accessors for the presentation layer
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
from copy import deepcopy
from enum import Enum


# =============================================================================
# Constants
# =============================================================================

MAX_HP = 100
HAND_SIZE = 3
BUFF_OFFER_SIZE = 3
BATTLE_LOG_LIMIT = 10
VALID_DIGIT_COUNTS = (3, 4)


def clamp_hp(value: int) -> int:
    """Clamp an HP value into [0, MAX_HP]."""
    return max(0, min(MAX_HP, value))


# =============================================================================
# Enums
# =============================================================================

class Player(Enum):
    """One of the two sides of a match."""
    P1 = "P1"
    P2 = "P2"

    @property
    def opponent(self) -> Player:
        return Player.P2 if self is Player.P1 else Player.P1


class GamePhase(Enum):
    """
    Phases of a match.

    Plain mode only visits SETTING_P1, SETTING_P2, PLAYING and FINISHED.
    """
    SETTING_P1 = "setting_p1"
    SETTING_P2 = "setting_p2"
    CARD_SELECT_P1 = "card_select_p1"  # Round-start buff draft
    CARD_SELECT_P2 = "card_select_p2"
    HAND_CONFIRM_P1 = "hand_confirm_p1"  # Support hand acknowledged
    HAND_CONFIRM_P2 = "hand_confirm_p2"
    PLAYING = "playing"
    CARD_USE_P1 = "card_use_p1"
    WAITING_P2_INPUT = "waiting_p2_input"
    CARD_USE_P2 = "card_use_p2"
    REPLAYING = "replaying"
    FINISHED = "finished"

    @classmethod
    def setting(cls, player: Player) -> GamePhase:
        return cls.SETTING_P1 if player is Player.P1 else cls.SETTING_P2

    @classmethod
    def card_select(cls, player: Player) -> GamePhase:
        return cls.CARD_SELECT_P1 if player is Player.P1 else cls.CARD_SELECT_P2

    @classmethod
    def hand_confirm(cls, player: Player) -> GamePhase:
        return cls.HAND_CONFIRM_P1 if player is Player.P1 else cls.HAND_CONFIRM_P2

    @classmethod
    def card_use(cls, player: Player) -> GamePhase:
        return cls.CARD_USE_P1 if player is Player.P1 else cls.CARD_USE_P2


# =============================================================================
# Value types
# =============================================================================

@dataclass(frozen=True)
class GuessResult:
    """Hit/Blow feedback for one guess."""
    hit: int = 0
    blow: int = 0

    def is_full_match(self, digit_count: int) -> bool:
        return self.hit == digit_count

    def __str__(self) -> str:
        return f"{self.hit}H {self.blow}B"


@dataclass(frozen=True)
class GuessLogEntry:
    """One line of a player's guess history for the current round."""
    player: Player
    digits: str
    hit: int
    blow: int


@dataclass
class ModifierState:
    """
    Single-use combat modifiers of one player.

    Every field is consumed the first time it affects a damage computation
    and force-reset at the end of the turn otherwise.
    """
    attack_bonus: int = 0
    attack_multiplier: float = 1.0
    defense_reduction: int = 0
    defense_multiplier: float = 1.0
    is_invincible: bool = False
    has_counter: bool = False
    hit_bonus: int = 0
    blow_bonus: int = 0

    @property
    def is_default(self) -> bool:
        return self == ModifierState()

    def reset(self) -> None:
        """Restore every field to its default."""
        self.attack_bonus = 0
        self.attack_multiplier = 1.0
        self.defense_reduction = 0
        self.defense_multiplier = 1.0
        self.is_invincible = False
        self.has_counter = False
        self.hit_bonus = 0
        self.blow_bonus = 0

    def describe(self) -> str:
        """Short status line, e.g. 'ATK+5 | COUNTER'."""
        parts = []
        if self.attack_bonus > 0:
            parts.append(f"ATK+{self.attack_bonus}")
        if self.attack_multiplier > 1.0:
            parts.append(f"ATKx{self.attack_multiplier}")
        if self.defense_reduction > 0:
            parts.append(f"DEF-{self.defense_reduction}")
        if self.defense_multiplier < 1.0:
            parts.append(f"DEFx{self.defense_multiplier}")
        if self.is_invincible:
            parts.append("INVINCIBLE")
        if self.has_counter:
            parts.append("COUNTER")
        if self.hit_bonus > 0:
            parts.append(f"HITx{self.hit_bonus}")
        if self.blow_bonus > 0:
            parts.append(f"BLOWx{self.blow_bonus}")
        return " | ".join(parts)


# =============================================================================
# Player and match state
# =============================================================================

@dataclass
class PlayerState:
    """
    Everything the engine tracks for one side.

    `round_buff` holds the BUFF picked at round start until it has been
    revealed by the first replay of the round; `round_heal` is the HP it
    actually restored.
    """
    player: Player
    hp: int = MAX_HP
    secret: str = ""
    pending_guess: str = ""
    logs: list[GuessLogEntry] = field(default_factory=list)
    hand: list[str] = field(default_factory=list)
    modifiers: ModifierState = field(default_factory=ModifierState)

    round_buff: str | None = None
    round_heal: int = 0
    used_card: str | None = None

    def clear_round(self) -> None:
        """Drop everything that only lives for one round. HP is kept."""
        self.secret = ""
        self.pending_guess = ""
        self.logs = []
        self.hand = []
        self.modifiers.reset()
        self.round_buff = None
        self.round_heal = 0
        self.used_card = None


def _default_players() -> dict[Player, PlayerState]:
    return {player: PlayerState(player=player) for player in Player}


@dataclass
class MatchState:
    """
    Complete match state at a point in time.

    This is the canonical state the engine operates on.
    All state changes go through the reducer.
    """
    match_id: str
    digit_count: int = 3
    card_mode: bool = False

    # Phase machine
    phase: GamePhase = GamePhase.SETTING_P1
    current_player: Player = Player.P1
    setup_order: tuple[Player, Player] = (Player.P1, Player.P2)

    # Sides
    players: dict[Player, PlayerState] = field(default_factory=_default_players)

    # Counters
    current_round: int = 1
    current_turn: int = 1
    total_turns: int = 0

    # Outcome
    winner: Player | None = None
    is_draw: bool = False

    # Card draft
    buff_offer: list[str] = field(default_factory=list)

    # Output of the last resolution (ReplayEvent list)
    replay_events: list[Any] = field(default_factory=list)
    battle_log: list[str] = field(default_factory=list)

    # RandomSource used for drafts and hands
    rng: Any = None
    seed: int | None = None

    def player(self, player: Player) -> PlayerState:
        return self.players[player]

    def hp(self, player: Player) -> int:
        return self.players[player].hp

    def secret(self, player: Player) -> str:
        return self.players[player].secret

    def logs(self, player: Player) -> list[GuessLogEntry]:
        return list(self.players[player].logs)

    def hand(self, player: Player) -> list[str]:
        return list(self.players[player].hand)

    def modifiers(self, player: Player) -> ModifierState:
        return self.players[player].modifiers

    def status_summary(self, player: Player) -> str:
        return self.players[player].modifiers.describe()

    @property
    def is_finished(self) -> bool:
        return self.phase == GamePhase.FINISHED

    def add_log(self, message: str) -> None:
        """Append to the battle log, keeping only the most recent lines."""
        self.battle_log.append(message)
        if len(self.battle_log) > BATTLE_LOG_LIMIT:
            self.battle_log = self.battle_log[-BATTLE_LOG_LIMIT:]

    def clone(self) -> MatchState:
        """Deep copy the state."""
        return deepcopy(self)
