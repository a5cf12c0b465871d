"""
Catalog - The fixed card set of the battle mode.

Nine BUFF cards are drafted three-at-a-time at round start; five SUPPORT
cards are dealt three-at-a-time as a per-round hand.
"""

from .cards import (
    CardCategory,
    CardEffect,
    CardDefinition,
    BUFF_CARDS,
    SUPPORT_CARDS,
    CARD_CATALOG,
    get_card,
    cards_in_category,
)

__all__ = [
    "CardCategory",
    "CardEffect",
    "CardDefinition",
    "BUFF_CARDS",
    "SUPPORT_CARDS",
    "CARD_CATALOG",
    "get_card",
    "cards_in_category",
]
