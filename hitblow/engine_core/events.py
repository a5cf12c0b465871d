"""
Replay Events - What happened during a turn, in display order.

A resolution produces an ordered list of ReplayEvent. The presentation
layer animates them one by one; the engine never waits on them.
`duration_ms` is only a pacing hint.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum

from .state import Player


class EventKind(Enum):
    """Tag of a replay event."""
    RESULT_REVEAL = "result_reveal"
    CARD_EFFECT = "card_effect"
    ATTACK = "attack"
    DEFENSE = "defense"
    HEAL = "heal"
    BARRIER = "barrier"
    COUNTER = "counter"
    STEAL_HP = "steal_hp"


DEFAULT_DURATIONS_MS: dict[EventKind, int] = {
    EventKind.RESULT_REVEAL: 2000,
    EventKind.CARD_EFFECT: 600,
    EventKind.ATTACK: 2000,
    EventKind.DEFENSE: 800,
    EventKind.HEAL: 1000,
    EventKind.BARRIER: 800,
    EventKind.COUNTER: 800,
    EventKind.STEAL_HP: 1000,
}


@dataclass(frozen=True)
class ReplayEvent:
    """
    A single narration step.

    `player` is the acting side (attacker, healer, card user, guesser);
    `target` is the receiving side for attacks and steals. `formula` is the
    damage breakdown of a full-match attack, e.g. "(2+3+4=9) +5 x2.0".
    """
    kind: EventKind
    player: Player
    target: Player | None = None
    amount: int = 0
    hit: int = 0
    blow: int = 0
    card_id: str | None = None
    sequence: int = 0
    duration_ms: int = 0
    formula: str | None = None

    @classmethod
    def result_reveal(cls, player: Player, hit: int, blow: int) -> ReplayEvent:
        return cls(kind=EventKind.RESULT_REVEAL, player=player, hit=hit, blow=blow)

    @classmethod
    def card_effect(cls, player: Player, card_id: str) -> ReplayEvent:
        return cls(kind=EventKind.CARD_EFFECT, player=player, card_id=card_id)

    @classmethod
    def attack(
        cls, source: Player, target: Player, amount: int, formula: str | None = None
    ) -> ReplayEvent:
        return cls(
            kind=EventKind.ATTACK, player=source, target=target, amount=amount, formula=formula
        )

    @classmethod
    def defense(cls, player: Player) -> ReplayEvent:
        return cls(kind=EventKind.DEFENSE, player=player)

    @classmethod
    def heal(cls, player: Player, amount: int) -> ReplayEvent:
        return cls(kind=EventKind.HEAL, player=player, amount=amount)

    @classmethod
    def barrier(cls, player: Player) -> ReplayEvent:
        return cls(kind=EventKind.BARRIER, player=player)

    @classmethod
    def counter(cls, player: Player) -> ReplayEvent:
        return cls(kind=EventKind.COUNTER, player=player)

    @classmethod
    def steal_hp(cls, source: Player, target: Player, amount: int) -> ReplayEvent:
        return cls(kind=EventKind.STEAL_HP, player=source, target=target, amount=amount)

    def describe(self) -> str:
        """One-line narration, used by the CLI and the battle log."""
        name = self.player.value
        if self.kind == EventKind.RESULT_REVEAL:
            return f"{name}: {self.hit}H {self.blow}B"
        if self.kind == EventKind.CARD_EFFECT:
            return f"{name} plays {self.card_id}"
        if self.kind == EventKind.ATTACK:
            if self.target == self.player:
                return f"{name} takes {self.amount} self damage"
            text = f"{name} -> {self.target.value}: {self.amount} damage"
            return f"{text} [{self.formula}]" if self.formula else text
        if self.kind == EventKind.DEFENSE:
            return f"{name} defends"
        if self.kind == EventKind.HEAL:
            return f"{name} heals {self.amount} HP"
        if self.kind == EventKind.BARRIER:
            return f"{name} is shielded"
        if self.kind == EventKind.COUNTER:
            return f"{name} counters"
        return f"{name} steals {self.amount} HP from {self.target.value}"


def sequence_events(events: list[ReplayEvent]) -> list[ReplayEvent]:
    """Stamp order indexes and default durations onto a built list."""
    return [
        replace(
            event,
            sequence=index,
            duration_ms=event.duration_ms or DEFAULT_DURATIONS_MS[event.kind],
        )
        for index, event in enumerate(events)
    ]
