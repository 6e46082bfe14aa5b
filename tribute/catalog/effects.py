"""
Effect and Trap Cards - Non-creature catalog entries.

The engine only places creatures; these cards sit in decks and hands
and can be discarded, but have no activation semantics.
"""

from .definitions import CardDefinition, Rarity, effect_card, trap_card


EFFECT_CARDS: list[CardDefinition] = [
    effect_card(
        "pot_of_greed", "Pot of Greed",
        "Draw 2 cards.",
        "Draw 2 cards from your deck.",
        Rarity.RARE,
    ),
    effect_card(
        "mystical_space_typhoon", "Mystical Space Typhoon",
        "Target 1 Spell/Trap on the field; destroy it.",
        "Target 1 Spell/Trap card on the field; destroy it.",
    ),
    effect_card(
        "dark_hole", "Dark Hole",
        "Destroy all monsters on the field.",
        "Destroy all monsters on the field.",
        Rarity.RARE,
    ),
    effect_card(
        "raigeki", "Raigeki",
        "Destroy all monsters your opponent controls.",
        "Destroy all monsters your opponent controls.",
        Rarity.SUPER_RARE,
    ),
    effect_card(
        "monster_reborn", "Monster Reborn",
        "Target 1 monster in either GY; Special Summon it.",
        "Target 1 monster in either GY; Special Summon it.",
        Rarity.ULTRA_RARE,
    ),
    effect_card(
        "swords_of_revealing_light", "Swords of Revealing Light",
        "Your opponent cannot declare an attack for 3 turns.",
        "After this card's activation, your opponent cannot declare an attack for 3 turns.",
        Rarity.RARE,
    ),
    effect_card(
        "heavy_storm", "Heavy Storm",
        "Destroy all Spell and Trap cards on the field.",
        "Destroy all Spell and Trap cards on the field.",
        Rarity.RARE,
    ),
    effect_card(
        "fissure", "Fissure",
        "Destroy the 1 face-up monster with the lowest ATK your opponent controls.",
        "Destroy the 1 face-up monster with the lowest ATK your opponent controls.",
    ),
    effect_card(
        "book_of_moon", "Book of Moon",
        "Target 1 face-up monster on the field; change it to face-down Defense Position.",
        "Target 1 face-up monster on the field; change it to face-down Defense Position.",
    ),
    effect_card(
        "graceful_charity", "Graceful Charity",
        "Draw 3 cards, then discard 2 cards.",
        "Draw 3 cards, then discard 2 cards.",
        Rarity.RARE,
    ),
]


TRAP_CARDS: list[CardDefinition] = [
    trap_card(
        "mirror_force", "Mirror Force",
        "When an opponent's monster declares an attack: Destroy all Attack "
        "Position monsters your opponent controls.",
        Rarity.ULTRA_RARE,
    ),
    trap_card(
        "trap_hole", "Trap Hole",
        "When your opponent Normal or Flip Summons a monster with 1000 or "
        "more ATK: Destroy that monster.",
    ),
    trap_card(
        "magic_cylinder", "Magic Cylinder",
        "When an opponent's monster declares an attack: Target the attacking "
        "monster; negate the attack, and if you do, inflict damage to your "
        "opponent equal to its ATK.",
        Rarity.RARE,
    ),
    trap_card(
        "sakuretsu_armor", "Sakuretsu Armor",
        "When an opponent's monster declares an attack: Target the attacking "
        "monster; destroy that target.",
    ),
    trap_card(
        "torrential_tribute", "Torrential Tribute",
        "When a monster(s) is Summoned: Destroy all monsters on the field.",
        Rarity.SUPER_RARE,
    ),
    trap_card(
        "dimensional_prison", "Dimensional Prison",
        "When an opponent's monster declares an attack: Target the attacking "
        "monster; banish that target.",
        Rarity.RARE,
    ),
    trap_card(
        "compulsory_evacuation_device", "Compulsory Evacuation Device",
        "Target 1 monster on the field; return that target to the hand.",
    ),
]
