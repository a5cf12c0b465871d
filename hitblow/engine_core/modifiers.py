"""
Modifier Store - Applies card effects to per-player ModifierState.

BUFF cards take effect the moment they are picked. SUPPORT cards either
arm a flag or bonus for the current turn, or (Steal HP) are queued and
executed when the turn resolves. Nothing survives the end of a turn:
clear_one_time_effects() resets every field.
"""

from __future__ import annotations
import logging

from ..catalog import CardDefinition, CardEffect, CardCategory, cards_in_category
from .damage import change_hp
from .state import MatchState, Player, HAND_SIZE, BUFF_OFFER_SIZE

logger = logging.getLogger(__name__)


def offer_buff_cards(state: MatchState) -> list[str]:
    """Draw the round-start BUFF offer (3 distinct cards)."""
    buffs = cards_in_category(CardCategory.BUFF)
    return [card.id for card in state.rng.sample(buffs, BUFF_OFFER_SIZE)]


def deal_support_hand(state: MatchState) -> list[str]:
    """Draw a fresh 3-card SUPPORT hand."""
    supports = cards_in_category(CardCategory.SUPPORT)
    return [card.id for card in state.rng.sample(supports, HAND_SIZE)]


def apply_buff_card(state: MatchState, player: Player, card: CardDefinition) -> str:
    """
    Apply a BUFF card immediately.

    Returns a human-readable description of the change.
    """
    side = state.player(player)
    mods = side.modifiers

    if card.effect == CardEffect.ATTACK_BONUS:
        mods.attack_bonus = int(card.value)
        change = f"attack +{mods.attack_bonus}"
    elif card.effect == CardEffect.ATTACK_MULTIPLIER:
        mods.attack_multiplier = float(card.value)
        change = f"attack x{mods.attack_multiplier}"
    elif card.effect == CardEffect.DEFENSE_REDUCTION:
        mods.defense_reduction = int(card.value)
        change = f"defense -{mods.defense_reduction}"
    elif card.effect == CardEffect.DEFENSE_MULTIPLIER:
        mods.defense_multiplier = float(card.value)
        change = f"defense x{mods.defense_multiplier}"
    elif card.effect == CardEffect.INVINCIBLE:
        mods.is_invincible = True
        change = "invincible"
    elif card.effect == CardEffect.HEAL:
        side.round_heal = change_hp(state, player, int(card.value))
        change = f"healed {side.round_heal} HP"
    else:
        raise ValueError(f"{card.id} is not a BUFF card")

    side.round_buff = card.id
    logger.debug("%s buff %s: %s", player.value, card.id, change)
    return f"{player.value} picks {card.title}: {change}"


def use_support_card(state: MatchState, player: Player, card: CardDefinition) -> str:
    """
    Spend a SUPPORT card from the hand.

    The card is removed from the hand and recorded as this turn's used
    card so the replay can reveal it. Steal HP is executed by the
    sequencer at resolution time.
    """
    side = state.player(player)
    mods = side.modifiers

    if card.effect == CardEffect.COUNTER:
        mods.has_counter = True
        change = "counter ready"
    elif card.effect == CardEffect.INVINCIBLE:
        mods.is_invincible = True
        change = "invincible"
    elif card.effect == CardEffect.HIT_BONUS:
        mods.hit_bonus = int(card.value)
        change = f"hit x{mods.hit_bonus}"
    elif card.effect == CardEffect.BLOW_BONUS:
        mods.blow_bonus = int(card.value)
        change = f"blow x{mods.blow_bonus}"
    elif card.effect == CardEffect.STEAL_HP:
        change = f"steal {int(card.value)} HP"
    else:
        raise ValueError(f"{card.id} is not a SUPPORT card")

    side.hand.remove(card.id)
    side.used_card = card.id
    logger.debug("%s uses %s: %s", player.value, card.id, change)
    return f"{player.value} uses {card.title}: {change}"


def clear_one_time_effects(state: MatchState) -> None:
    """End of turn: every unconsumed modifier is lost, not banked."""
    for side in state.players.values():
        side.modifiers.reset()
        side.used_card = None
