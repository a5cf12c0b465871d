"""
Tests for turn resolution in card mode.

Tests:
- Replay event order and timing
- Support card reveals (Steal HP executes here)
- Round transitions and setup order
- Knockouts
"""

import pytest

from ..engine_core import (
    DamageCalculator,
    EventKind,
    GamePhase,
    ReplaySequencer,
    confirm_hand,
    select_card,
    submit_guess,
)
from ..engine_core.events import DEFAULT_DURATIONS_MS
from .conftest import P1, P2, play_card_turn, start_card_match, step


def kinds(events):
    return [e.kind for e in events]


class TestEventOrder:
    """Buff reveals, support reveals, results, then P1 and P2 actions."""

    def test_first_turn_order(self, card_match):
        result = play_card_turn(card_match, "456", "132", p1_card="counter", p2_card="hit_bonus")
        events = result.events

        assert kinds(events) == [
            EventKind.CARD_EFFECT, EventKind.HEAL,
            EventKind.CARD_EFFECT, EventKind.HEAL,
            EventKind.CARD_EFFECT, EventKind.COUNTER,
            EventKind.CARD_EFFECT,
            EventKind.RESULT_REVEAL, EventKind.RESULT_REVEAL,
            EventKind.ATTACK, EventKind.ATTACK,
        ]
        assert [e.sequence for e in events] == list(range(len(events)))
        assert events[0].card_id == "heal_small"
        assert events[4].card_id == "counter" and events[4].player == P1
        assert events[6].card_id == "hit_bonus" and events[6].player == P2
        assert (events[7].player, events[7].hit, events[7].blow) == (P1, 3, 0)
        assert (events[8].player, events[8].hit, events[8].blow) == (P2, 1, 2)
        assert events[9].describe() == "P1 -> P2: 6 damage [(1+2+3=6)]"
        assert events[10].describe() == "P2 -> P1: 5 damage"

        state = result.new_state
        assert state.hp(P1) == 95
        assert state.hp(P2) == 94

    def test_durations(self, card_match):
        events = play_card_turn(card_match, "789", "789").events
        for event in events:
            assert event.duration_ms == DEFAULT_DURATIONS_MS[event.kind]
        assert events[-1].duration_ms == 2000

    def test_buffs_revealed_only_on_first_turn(self, card_match):
        state = play_card_turn(card_match, "789", "789").new_state
        events = play_card_turn(state, "780", "780").events
        assert kinds(events) == [EventKind.RESULT_REVEAL, EventKind.RESULT_REVEAL]

    def test_defense_buff_reveal(self):
        state = start_card_match("123", "456", p1_buff="defense_small")
        events = play_card_turn(state, "789", "789").events
        assert kinds(events)[:2] == [EventKind.CARD_EFFECT, EventKind.DEFENSE]
        assert events[0].card_id == "defense_small"

    def test_heal_reveal_amount(self):
        state = start_card_match("123", "456", p2_buff="heal_medium")
        state.player(P2).hp = 50
        state.player(P2).round_heal = 20
        events = play_card_turn(state, "789", "789").events
        heals = [e for e in events if e.kind == EventKind.HEAL]
        assert heals[1].player == P2 and heals[1].amount == 20

    def test_invincible_support(self, card_match):
        result = play_card_turn(card_match, "456", "789", p2_card="invincible")
        support = [e for e in result.events if e.kind == EventKind.BARRIER]
        assert len(support) == 2
        assert result.new_state.hp(P2) == 100

    def test_missing_guess_raises(self, card_match):
        sequencer = ReplaySequencer(calculator=DamageCalculator(digit_count=3))
        with pytest.raises(ValueError):
            sequencer.run(card_match.clone())


class TestStealHp:
    """Steal HP moves HP between the sides before results are shown."""

    def test_steal(self):
        state = start_card_match("123", "456", p1_hand=["steal_hp"])
        state.player(P1).hp = 50

        result = play_card_turn(state, "789", "789", p1_card="steal_hp")
        steal = [e for e in result.events if e.kind == EventKind.STEAL_HP]

        assert len(steal) == 1
        assert steal[0].amount == 10
        assert steal[0].describe() == "P1 steals 10 HP from P2"
        assert result.new_state.hp(P1) == 60
        assert result.new_state.hp(P2) == 90
        first_result = kinds(result.events).index(EventKind.RESULT_REVEAL)
        assert result.events.index(steal[0]) < first_result

    def test_steal_capped_by_target_hp(self):
        state = start_card_match("123", "456", p1_hand=["steal_hp"])
        state.player(P1).hp = 50
        state.player(P2).hp = 4

        result = play_card_turn(state, "789", "789", p1_card="steal_hp")
        state = result.new_state

        assert state.hp(P2) == 0
        assert state.hp(P1) == 54
        assert state.phase == GamePhase.FINISHED
        assert state.winner == P1


class TestTurnEnd:
    """Single-use effects do not survive the turn."""

    def test_unconsumed_modifiers_are_cleared(self):
        state = start_card_match("123", "456", p1_buff="attack_medium")
        assert state.modifiers(P1).attack_bonus == 10

        state = play_card_turn(state, "789", "789", p2_card="invincible").new_state

        assert state.modifiers(P1).is_default
        assert state.modifiers(P2).is_default
        assert state.player(P2).used_card is None
        assert state.player(P2).pending_guess == ""
        assert state.status_summary(P2) == ""

    def test_hand_persists_between_turns(self, card_match):
        state = play_card_turn(card_match, "789", "789", p1_card="counter").new_state
        assert state.hand(P1) == ["invincible", "hit_bonus"]
        assert state.current_turn == 2
        assert state.total_turns == 2


class TestRounds:
    """A deduced secret ends the round and restarts setup."""

    def test_p1_deduces(self, card_match):
        state = play_card_turn(card_match, "456", "789").new_state

        assert state.current_round == 2
        assert state.current_turn == 1
        assert state.phase == GamePhase.SETTING_P1
        assert state.current_player == P1
        assert state.hp(P2) == 94
        for player in (P1, P2):
            assert state.secret(player) == ""
            assert state.logs(player) == []
            assert state.hand(player) == []
            assert state.modifiers(player).is_default

    def test_surviving_secret_sets_first(self, card_match):
        state = play_card_turn(card_match, "789", "123").new_state

        assert state.phase == GamePhase.SETTING_P2
        assert state.current_player == P2
        assert state.setup_order == (P2, P1)

        state = step(submit_guess(state, P2, "987"))
        assert state.phase == GamePhase.CARD_SELECT_P2
        state = step(select_card(state, P2, "attack_small"))
        state = step(confirm_hand(state, P2))
        assert state.phase == GamePhase.SETTING_P1

        state = step(submit_guess(state, P1, "654"))
        state = step(select_card(state, P1, "attack_small"))
        state = step(confirm_hand(state, P1))
        assert state.phase == GamePhase.PLAYING
        assert state.current_player == P1

    def test_mutual_deduction(self, card_match):
        state = play_card_turn(card_match, "456", "123").new_state

        # Each side pays its own digit sum
        assert state.hp(P1) == 94
        assert state.hp(P2) == 85
        assert state.current_round == 2
        assert state.phase == GamePhase.SETTING_P1

    def test_round_logged(self, card_match):
        state = play_card_turn(card_match, "456", "789").new_state
        assert state.battle_log[-1] == "Round 2 begins"


class TestKnockout:
    """HP reaching 0 finishes the match instead of starting a round."""

    def test_knockout(self, card_match):
        card_match.player(P2).hp = 6
        state = play_card_turn(card_match, "456", "789").new_state
        assert state.phase == GamePhase.FINISHED
        assert state.winner == P1
        assert state.current_round == 1

    def test_double_knockout(self, card_match):
        card_match.player(P1).hp = 6
        card_match.player(P2).hp = 15
        state = play_card_turn(card_match, "456", "123").new_state
        assert state.is_draw
        assert state.winner is None
        assert state.phase == GamePhase.FINISHED
        assert state.battle_log[-1] == "Draw"
