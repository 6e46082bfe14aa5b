"""
Catalog - Static card definitions.

The catalog is an external collaborator of the duel engine:
the engine only reads card attributes (category, attack,
defense, level) through get_card_by_id().
"""

from .definitions import CardDefinition, CardCategory, CreatureStats, Rarity
from .catalog import CardCatalog, default_catalog, get_card_by_id
from .creatures import CREATURE_CARDS
from .effects import EFFECT_CARDS, TRAP_CARDS

__all__ = [
    "CardDefinition",
    "CardCategory",
    "CreatureStats",
    "Rarity",
    "CardCatalog",
    "default_catalog",
    "get_card_by_id",
    "CREATURE_CARDS",
    "EFFECT_CARDS",
    "TRAP_CARDS",
]
