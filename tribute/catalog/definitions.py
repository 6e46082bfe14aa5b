"""
Card Definitions - Immutable card data consumed by the duel engine.

A definition is the abstract card; the engine places copies of it
as CardInstances. The category tag decides which attribute set exists:
only creatures carry CreatureStats.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class CardCategory(Enum):
    """Top-level card categories."""
    CREATURE = "creature"
    EFFECT = "effect"
    TRAP = "trap"


class Rarity(Enum):
    COMMON = "common"
    RARE = "rare"
    SUPER_RARE = "super_rare"
    ULTRA_RARE = "ultra_rare"
    SECRET_RARE = "secret_rare"


@dataclass(frozen=True)
class CreatureStats:
    """Battle attributes of a creature card."""
    attack: int
    defense: int
    level: int


@dataclass(frozen=True)
class CardDefinition:
    """
    A card as printed.

    Note: creature-only attributes live in `creature`, which is None
    for effect and trap cards. Switch on `category` instead of probing.
    """
    id: str
    name: str
    category: CardCategory
    description: str
    rarity: Rarity = Rarity.COMMON
    creature: CreatureStats | None = None
    effect_text: str | None = None

    @property
    def is_creature(self) -> bool:
        return self.category == CardCategory.CREATURE

    @property
    def attack(self) -> int:
        return self._stats().attack

    @property
    def defense(self) -> int:
        return self._stats().defense

    @property
    def level(self) -> int:
        return self._stats().level

    def _stats(self) -> CreatureStats:
        if self.category != CardCategory.CREATURE or self.creature is None:
            raise ValueError(f"Card {self.id} is not a creature")
        return self.creature


# =============================================================================
# Helpers for authoring card tables
# =============================================================================

def creature(
    id: str,
    name: str,
    level: int,
    attack: int,
    defense: int,
    description: str,
    rarity: Rarity = Rarity.COMMON,
) -> CardDefinition:
    """Build a creature definition."""
    if not 1 <= level <= 12:
        raise ValueError(f"Creature {id} has invalid level {level}")
    if attack < 0 or defense < 0:
        raise ValueError(f"Creature {id} has negative stats")
    return CardDefinition(
        id=id,
        name=name,
        category=CardCategory.CREATURE,
        description=description,
        rarity=rarity,
        creature=CreatureStats(attack=attack, defense=defense, level=level),
    )


def effect_card(
    id: str,
    name: str,
    description: str,
    effect_text: str,
    rarity: Rarity = Rarity.COMMON,
) -> CardDefinition:
    """Build an effect (spell) definition."""
    return CardDefinition(
        id=id,
        name=name,
        category=CardCategory.EFFECT,
        description=description,
        rarity=rarity,
        effect_text=effect_text,
    )


def trap_card(
    id: str,
    name: str,
    description: str,
    rarity: Rarity = Rarity.COMMON,
) -> CardDefinition:
    """Build a trap-like definition."""
    return CardDefinition(
        id=id,
        name=name,
        category=CardCategory.TRAP,
        description=description,
        rarity=rarity,
        effect_text=description,
    )
