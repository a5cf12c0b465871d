"""
Pytest fixtures for Hit & Blow tests.
"""

import pytest

from ..engine_core import (
    ActionResult,
    MatchState,
    Player,
    new_match,
    submit_guess,
    select_card,
    confirm_hand,
    use_card,
    skip_card,
)

P1 = Player.P1
P2 = Player.P2


class ScriptedRandom:
    """RandomSource that always takes the first k items in catalog order."""

    def sample(self, population, k):
        return list(population)[:k]

    def shuffle(self, items):
        pass


def step(result: ActionResult) -> MatchState:
    """Unwrap a successful result."""
    assert result.success, f"{result.error_code}: {result.error}"
    return result.new_state


def start_card_match(
    p1_secret: str,
    p2_secret: str,
    digit_count: int = 3,
    p1_buff: str = "heal_small",
    p2_buff: str = "heal_small",
    p1_hand: list[str] | None = None,
    p2_hand: list[str] | None = None,
) -> MatchState:
    """
    Drive a card-mode match through setup into PLAYING.

    Heal buffs at full HP change nothing, so the default leaves every
    modifier at rest for turn 1.
    """
    state = new_match(digit_count=digit_count, card_mode=True, rng=ScriptedRandom(), match_id="test_match")
    for player, secret, buff, hand in (
        (P1, p1_secret, p1_buff, p1_hand),
        (P2, p2_secret, p2_buff, p2_hand),
    ):
        state = step(submit_guess(state, player, secret))
        state.buff_offer = [buff]
        state = step(select_card(state, player, buff))
        if hand is not None:
            state.player(player).hand = list(hand)
        state = step(confirm_hand(state, player))
    return state


def play_card_turn(
    state: MatchState,
    p1_guess: str,
    p2_guess: str,
    p1_card: str | None = None,
    p2_card: str | None = None,
) -> ActionResult:
    """Play one card-mode turn; returns the resolving result."""
    state = step(submit_guess(state, P1, p1_guess))
    state = step(use_card(state, P1, p1_card) if p1_card else skip_card(state, P1))
    state = step(submit_guess(state, P2, p2_guess))
    result = use_card(state, P2, p2_card) if p2_card else skip_card(state, P2)
    assert result.success, f"{result.error_code}: {result.error}"
    return result


def play_plain_turn(state: MatchState, p1_guess: str, p2_guess: str) -> ActionResult:
    state = step(submit_guess(state, P1, p1_guess))
    result = submit_guess(state, P2, p2_guess)
    assert result.success, f"{result.error_code}: {result.error}"
    return result


@pytest.fixture
def plain_match() -> MatchState:
    """A plain-mode match with secrets 123 (P1) and 456 (P2), in PLAYING."""
    state = new_match(digit_count=3, card_mode=False, rng=ScriptedRandom(), match_id="plain_match")
    state = step(submit_guess(state, P1, "123"))
    state = step(submit_guess(state, P2, "456"))
    return state


@pytest.fixture
def card_match() -> MatchState:
    """A card-mode match with secrets 123 (P1) and 456 (P2), in PLAYING."""
    return start_card_match("123", "456")


@pytest.fixture
def fresh_card_match() -> MatchState:
    """A card-mode match waiting for P1's secret."""
    return new_match(digit_count=3, card_mode=True, rng=ScriptedRandom(), match_id="fresh_match")
