"""
Card Catalog - Read-only lookup from card id to definition.

The engine consumes the catalog through get_card_by_id(); it never
mutates it. Deck construction lives here because it only needs the
card tables and a random source.
"""

from __future__ import annotations
import random
from dataclasses import dataclass, field

from .definitions import CardDefinition, CardCategory
from .creatures import CREATURE_CARDS
from .effects import EFFECT_CARDS, TRAP_CARDS


MIN_DECK_CREATURES = 15


@dataclass
class CardCatalog:
    """
    Immutable card table.

    Usage:
        catalog = CardCatalog.default()
        card = catalog.get_card_by_id("dark_magician")
    """
    cards: list[CardDefinition] = field(default_factory=list)
    _by_id: dict[str, CardDefinition] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        for card in self.cards:
            if card.id in self._by_id:
                raise ValueError(f"Duplicate card id: {card.id}")
            self._by_id[card.id] = card

    @classmethod
    def default(cls) -> CardCatalog:
        """The built-in creature, effect and trap tables."""
        return cls(cards=[*CREATURE_CARDS, *EFFECT_CARDS, *TRAP_CARDS])

    def get_card_by_id(self, card_id: str) -> CardDefinition | None:
        """Get a card definition, or None if the id is unknown."""
        return self._by_id.get(card_id)

    def __contains__(self, card_id: str) -> bool:
        return card_id in self._by_id

    def __len__(self) -> int:
        return len(self.cards)

    def by_category(self, category: CardCategory) -> list[CardDefinition]:
        return [c for c in self.cards if c.category == category]

    def creatures_by_level(self, level: int) -> list[CardDefinition]:
        return [c for c in self.by_category(CardCategory.CREATURE) if c.level == level]

    def search(self, text: str) -> list[CardDefinition]:
        """Case-insensitive search over names and descriptions."""
        term = text.lower()
        return [
            c for c in self.cards
            if term in c.name.lower() or term in c.description.lower()
        ]

    def build_random_deck(self, size: int = 40, rng: random.Random | None = None) -> list[str]:
        """
        Build a shuffled deck of card ids.

        At least 15 creatures (or 40% of the deck if larger), about 35%
        effect cards, and trap cards for the rest.
        """
        rng = rng or random.Random()
        creatures = self.by_category(CardCategory.CREATURE)
        effects = self.by_category(CardCategory.EFFECT)
        traps = self.by_category(CardCategory.TRAP)
        if not creatures:
            raise ValueError("Catalog has no creatures to build a deck from")

        creature_count = min(size, max(MIN_DECK_CREATURES, int(size * 0.4)))
        effect_count = min(size - creature_count, int(size * 0.35)) if effects else 0
        trap_count = size - creature_count - effect_count if traps else 0
        # Top up with creatures when a category is missing
        creature_count = size - effect_count - trap_count

        deck = [rng.choice(creatures).id for _ in range(creature_count)]
        deck.extend(rng.choice(effects).id for _ in range(effect_count))
        deck.extend(rng.choice(traps).id for _ in range(trap_count))
        rng.shuffle(deck)
        return deck


_DEFAULT_CATALOG: CardCatalog | None = None


def default_catalog() -> CardCatalog:
    """Shared instance of the built-in catalog."""
    global _DEFAULT_CATALOG
    if _DEFAULT_CATALOG is None:
        _DEFAULT_CATALOG = CardCatalog.default()
    return _DEFAULT_CATALOG


def get_card_by_id(card_id: str) -> CardDefinition | None:
    """Look up a card in the built-in catalog."""
    return default_catalog().get_card_by_id(card_id)
