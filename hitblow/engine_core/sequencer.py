"""
Replay Sequencer - Resolves a turn once both guesses are in.

Produces, in order:
1. Round-start BUFF reveals (first turn of a round only)
2. SUPPORT card reveals (Steal HP executes here)
3. Result reveal for P1, then P2
4. P1's action (attack, defense, barrier, counter)
5. P2's action

The sequencer mutates the working copy it is given and reports what the
reducer needs to commit the phase transition. It never waits on time.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..catalog import CardEffect, get_card
from .damage import DamageCalculator, change_hp
from .events import ReplayEvent, sequence_events
from .judge import judge
from .state import MatchState, Player, GamePhase, GuessLogEntry, GuessResult

logger = logging.getLogger(__name__)


@dataclass
class TurnOutcome:
    """What a resolved turn leaves behind for the reducer."""
    events: list[ReplayEvent] = field(default_factory=list)
    results: dict[Player, GuessResult] = field(default_factory=dict)
    deduced: set[Player] = field(default_factory=set)  # Sides whose secret was guessed

    @property
    def round_over(self) -> bool:
        return bool(self.deduced)


@dataclass
class ReplaySequencer:
    """Builds the event list of a turn and applies its HP changes."""
    calculator: DamageCalculator

    def run(self, state: MatchState) -> TurnOutcome:
        for player in Player:
            side = state.player(player)
            if not side.secret or not side.pending_guess:
                raise ValueError(f"Cannot resolve turn: {player.value} has no secret or guess")

        events: list[ReplayEvent] = []
        if state.card_mode:
            events.extend(self._buff_reveals(state))
            events.extend(self._support_reveals(state))

        results = {
            player: judge(state.secret(player.opponent), state.player(player).pending_guess)
            for player in Player
        }
        for player in Player:
            events.append(
                ReplayEvent.result_reveal(player, results[player].hit, results[player].blow)
            )

        for player in Player:
            side = state.player(player)
            result = results[player]
            side.logs.append(
                GuessLogEntry(
                    player=player,
                    digits=side.pending_guess,
                    hit=result.hit,
                    blow=result.blow,
                )
            )
            state.total_turns += 1
            if state.card_mode:
                events.extend(self.calculator.resolve(state, player, results))

        deduced = {
            player.opponent
            for player in Player
            if results[player].is_full_match(state.digit_count)
        }
        if not state.card_mode:
            self._settle_plain(state, results)

        logger.debug(
            "Turn %d.%d resolved: P1 %s, P2 %s",
            state.current_round, state.current_turn,
            results[Player.P1], results[Player.P2],
        )
        return TurnOutcome(events=sequence_events(events), results=results, deduced=deduced)

    def _buff_reveals(self, state: MatchState) -> list[ReplayEvent]:
        events: list[ReplayEvent] = []
        for player in Player:
            side = state.player(player)
            card = get_card(side.round_buff) if side.round_buff else None
            if card is None:
                continue
            events.append(ReplayEvent.card_effect(player, card.id))
            if card.effect == CardEffect.HEAL:
                events.append(ReplayEvent.heal(player, side.round_heal))
            elif card.effect in (
                CardEffect.DEFENSE_REDUCTION,
                CardEffect.DEFENSE_MULTIPLIER,
                CardEffect.INVINCIBLE,
            ):
                events.append(ReplayEvent.defense(player))
            side.round_buff = None
            side.round_heal = 0
        return events

    def _support_reveals(self, state: MatchState) -> list[ReplayEvent]:
        events: list[ReplayEvent] = []
        for player in Player:
            card = get_card(state.player(player).used_card or "")
            if card is None:
                continue
            events.append(ReplayEvent.card_effect(player, card.id))
            if card.effect == CardEffect.COUNTER:
                events.append(ReplayEvent.counter(player))
            elif card.effect == CardEffect.INVINCIBLE:
                events.append(ReplayEvent.barrier(player))
            elif card.effect == CardEffect.STEAL_HP:
                target = player.opponent
                amount = min(int(card.value), state.hp(target))
                change_hp(state, target, -amount)
                change_hp(state, player, amount)
                events.append(ReplayEvent.steal_hp(player, target, amount))
        return events

    def _settle_plain(self, state: MatchState, results: dict[Player, GuessResult]) -> None:
        """Plain mode: the first full match wins, a shared one is a draw."""
        correct = [p for p in Player if results[p].is_full_match(state.digit_count)]
        if len(correct) == 2:
            state.is_draw = True
        elif correct:
            state.winner = correct[0]
        else:
            return
        state.phase = GamePhase.FINISHED
