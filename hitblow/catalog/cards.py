"""
Card Catalog - The fixed set of 14 battle cards.

Card structure:
- Category: BUFF (drafted at round start, applies immediately) or
  SUPPORT (dealt as a 3-card hand, at most one per turn)
- Effect kind plus a numeric value
- Display title and description for the presentation layer
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class CardCategory(Enum):
    """When a card is obtained and played."""
    BUFF = "buff"
    SUPPORT = "support"


class CardEffect(Enum):
    """What a card does when applied."""
    ATTACK_BONUS = "attack_bonus"
    ATTACK_MULTIPLIER = "attack_multiplier"
    DEFENSE_REDUCTION = "defense_reduction"
    DEFENSE_MULTIPLIER = "defense_multiplier"
    INVINCIBLE = "invincible"
    HEAL = "heal"
    COUNTER = "counter"
    HIT_BONUS = "hit_bonus"
    BLOW_BONUS = "blow_bonus"
    STEAL_HP = "steal_hp"


@dataclass(frozen=True)
class CardDefinition:
    """A catalog entry. Cards in hands and offers are referenced by id."""
    id: str
    title: str
    description: str
    category: CardCategory
    effect: CardEffect
    value: float = 0

    @property
    def is_buff(self) -> bool:
        return self.category == CardCategory.BUFF

    @property
    def is_support(self) -> bool:
        return self.category == CardCategory.SUPPORT


# ============================================================================
# BUFF cards
# ============================================================================

ATTACK_SMALL = CardDefinition(
    id="attack_small",
    title="Attack S",
    description="Next attack +5 damage",
    category=CardCategory.BUFF,
    effect=CardEffect.ATTACK_BONUS,
    value=5,
)

ATTACK_MEDIUM = CardDefinition(
    id="attack_medium",
    title="Attack M",
    description="Next attack +10 damage",
    category=CardCategory.BUFF,
    effect=CardEffect.ATTACK_BONUS,
    value=10,
)

ATTACK_LARGE = CardDefinition(
    id="attack_large",
    title="Attack L",
    description="Next attack x2",
    category=CardCategory.BUFF,
    effect=CardEffect.ATTACK_MULTIPLIER,
    value=2.0,
)

DEFENSE_SMALL = CardDefinition(
    id="defense_small",
    title="Defense S",
    description="Next damage taken -5",
    category=CardCategory.BUFF,
    effect=CardEffect.DEFENSE_REDUCTION,
    value=5,
)

DEFENSE_MEDIUM = CardDefinition(
    id="defense_medium",
    title="Defense M",
    description="Next damage taken halved",
    category=CardCategory.BUFF,
    effect=CardEffect.DEFENSE_MULTIPLIER,
    value=0.5,
)

DEFENSE_LARGE = CardDefinition(
    id="defense_large",
    title="Defense L",
    description="Next damage taken nullified",
    category=CardCategory.BUFF,
    effect=CardEffect.INVINCIBLE,
)

HEAL_SMALL = CardDefinition(
    id="heal_small",
    title="Heal S",
    description="Restore 10 HP",
    category=CardCategory.BUFF,
    effect=CardEffect.HEAL,
    value=10,
)

HEAL_MEDIUM = CardDefinition(
    id="heal_medium",
    title="Heal M",
    description="Restore 20 HP",
    category=CardCategory.BUFF,
    effect=CardEffect.HEAL,
    value=20,
)

HEAL_LARGE = CardDefinition(
    id="heal_large",
    title="Heal L",
    description="Restore 30 HP",
    category=CardCategory.BUFF,
    effect=CardEffect.HEAL,
    value=30,
)


# ============================================================================
# SUPPORT cards
# ============================================================================

COUNTER = CardDefinition(
    id="counter",
    title="Counter",
    description="Reflect the opponent's next attack",
    category=CardCategory.SUPPORT,
    effect=CardEffect.COUNTER,
)

INVINCIBLE = CardDefinition(
    id="invincible",
    title="Invincible",
    description="Nullify the next damage this turn",
    category=CardCategory.SUPPORT,
    effect=CardEffect.INVINCIBLE,
)

HIT_BONUS = CardDefinition(
    id="hit_bonus",
    title="Hit Bonus",
    description="This turn, deal 5 damage per Hit",
    category=CardCategory.SUPPORT,
    effect=CardEffect.HIT_BONUS,
    value=5,
)

BLOW_BONUS = CardDefinition(
    id="blow_bonus",
    title="Blow Bonus",
    description="This turn, deal 3 damage per Blow",
    category=CardCategory.SUPPORT,
    effect=CardEffect.BLOW_BONUS,
    value=3,
)

STEAL_HP = CardDefinition(
    id="steal_hp",
    title="Steal HP",
    description="Take 10 HP from the opponent",
    category=CardCategory.SUPPORT,
    effect=CardEffect.STEAL_HP,
    value=10,
)


# Catalog order is stable; drafts sample from these tuples
BUFF_CARDS: tuple[CardDefinition, ...] = (
    ATTACK_SMALL, ATTACK_MEDIUM, ATTACK_LARGE,
    DEFENSE_SMALL, DEFENSE_MEDIUM, DEFENSE_LARGE,
    HEAL_SMALL, HEAL_MEDIUM, HEAL_LARGE,
)

SUPPORT_CARDS: tuple[CardDefinition, ...] = (
    COUNTER, INVINCIBLE, HIT_BONUS, BLOW_BONUS, STEAL_HP,
)

CARD_CATALOG: dict[str, CardDefinition] = {
    card.id: card for card in BUFF_CARDS + SUPPORT_CARDS
}


def get_card(card_id: str) -> CardDefinition | None:
    """Look up a card definition by id."""
    return CARD_CATALOG.get(card_id)


def cards_in_category(category: CardCategory) -> list[CardDefinition]:
    return [card for card in CARD_CATALOG.values() if card.category == category]
