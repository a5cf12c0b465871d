"""
Damage Calculator - Turns a judged guess into HP changes.

Rules, per acting player (P1 resolves before P2):
1. Hit/Blow bonus = hit * hit_bonus + blow * blow_bonus, consumed when used
2. 0 Hit 0 Blow: no damage
3. Full match:
   - both players full-matched this turn: each takes the digit sum of
     their own secret, ignoring every modifier
   - otherwise (digit_sum(own secret) + attack_bonus) * attack_multiplier,
     truncated, plus the bonus. A defender counter reflects the attack
     (without the bonus) back onto the attacker.
4. Partial match: only the bonus, if any, is dealt

Every HP change is clamped to [0, MAX_HP] and followed by a knockout check.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .events import ReplayEvent
from .judge import digit_sum
from .state import MatchState, ModifierState, Player, GuessResult, GamePhase, clamp_hp

logger = logging.getLogger(__name__)


def change_hp(state: MatchState, player: Player, delta: int) -> int:
    """
    Apply an HP delta with clamping, then check for knockouts.

    Returns the delta actually applied.
    """
    side = state.player(player)
    before = side.hp
    side.hp = clamp_hp(before + delta)
    check_knockouts(state)
    return side.hp - before


def check_knockouts(state: MatchState) -> None:
    """
    Declare the winner once a side reaches 0 HP.

    Both sides at 0 in the same resolution is a draw.
    """
    p1_down = state.hp(Player.P1) <= 0
    p2_down = state.hp(Player.P2) <= 0
    if p1_down and p2_down:
        state.winner = None
        state.is_draw = True
    elif p1_down:
        state.winner = Player.P2
    elif p2_down:
        state.winner = Player.P1
    else:
        return
    state.phase = GamePhase.FINISHED


@dataclass
class DamageCalculator:
    """
    Resolves one player's action of a turn against the match state.

    Stateless - all state is in MatchState. Mutates the state it is given
    (the reducer hands it a working copy) and returns the replay events.
    """
    digit_count: int

    def resolve(
        self,
        state: MatchState,
        attacker: Player,
        results: dict[Player, GuessResult],
    ) -> list[ReplayEvent]:
        result = results[attacker]
        mods = state.modifiers(attacker)
        bonus = self._consume_bonus(mods, result)

        if result.hit == 0 and result.blow == 0:
            logger.debug("%s: no damage (0H 0B)", attacker.value)
            return []

        if result.is_full_match(self.digit_count):
            if all(r.is_full_match(self.digit_count) for r in results.values()):
                return self._mutual_correct(state, attacker)
            return self._full_match_attack(state, attacker, bonus)

        if bonus > 0:
            return self._strike(state, attacker, bonus)
        return []

    def attack_damage(self, state: MatchState, attacker: Player) -> int:
        """Damage a full match would deal right now, before defense."""
        mods = state.modifiers(attacker)
        base = digit_sum(state.secret(attacker))
        return int((base + mods.attack_bonus) * mods.attack_multiplier)

    def attack_formula(self, state: MatchState, attacker: Player) -> str:
        """Breakdown of attack_damage, e.g. '(2+3+4=9) +5 x2.0'."""
        mods = state.modifiers(attacker)
        secret = state.secret(attacker)
        text = f"({'+'.join(secret)}={digit_sum(secret)})"
        if mods.attack_bonus > 0:
            text += f" +{mods.attack_bonus}"
        if mods.attack_multiplier > 1.0:
            text += f" x{mods.attack_multiplier}"
        return text

    def _consume_bonus(self, mods: ModifierState, result: GuessResult) -> int:
        bonus = 0
        if mods.hit_bonus > 0 and result.hit > 0:
            bonus += result.hit * mods.hit_bonus
            mods.hit_bonus = 0
        if mods.blow_bonus > 0 and result.blow > 0:
            bonus += result.blow * mods.blow_bonus
            mods.blow_bonus = 0
        return bonus

    def _mutual_correct(self, state: MatchState, player: Player) -> list[ReplayEvent]:
        damage = digit_sum(state.secret(player))
        change_hp(state, player, -damage)
        logger.debug("%s: mutual correct, %d self damage", player.value, damage)
        return [ReplayEvent.attack(player, player, damage)]

    def _full_match_attack(
        self, state: MatchState, attacker: Player, bonus: int
    ) -> list[ReplayEvent]:
        damage = self.attack_damage(state, attacker)
        formula = self.attack_formula(state, attacker)
        mods = state.modifiers(attacker)
        mods.attack_bonus = 0
        mods.attack_multiplier = 1.0

        defender = attacker.opponent
        defender_mods = state.modifiers(defender)
        if defender_mods.has_counter:
            defender_mods.has_counter = False
            change_hp(state, attacker, -damage)
            logger.debug("%s counters %d damage", defender.value, damage)
            return [
                ReplayEvent.counter(defender),
                ReplayEvent.attack(defender, attacker, damage, formula),
            ]

        if bonus > 0:
            formula += f" +{bonus} bonus"
        return self._strike(state, attacker, damage + bonus, formula)

    def _strike(
        self, state: MatchState, attacker: Player, amount: int, formula: str | None = None
    ) -> list[ReplayEvent]:
        """Deal `amount` to the opponent through their defensive modifiers."""
        defender = attacker.opponent
        defender_mods = state.modifiers(defender)

        if defender_mods.is_invincible:
            defender_mods.is_invincible = False
            logger.debug("%s blocks %d damage", defender.value, amount)
            return [ReplayEvent.barrier(defender)]

        events: list[ReplayEvent] = []
        if defender_mods.defense_reduction > 0 or defender_mods.defense_multiplier != 1.0:
            amount = max(
                0,
                int((amount - defender_mods.defense_reduction) * defender_mods.defense_multiplier),
            )
            defender_mods.defense_reduction = 0
            defender_mods.defense_multiplier = 1.0
            events.append(ReplayEvent.defense(defender))

        change_hp(state, defender, -amount)
        logger.debug("%s -> %s: %d damage", attacker.value, defender.value, amount)
        events.append(ReplayEvent.attack(attacker, defender, amount, formula))
        return events
