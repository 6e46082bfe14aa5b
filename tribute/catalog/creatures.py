"""
Creature Cards - Static creature table.

Levels 1-4 summon without tribute, 5-6 need one, 7+ need two.
"""

from .definitions import CardDefinition, Rarity, creature


# ============================================================================
# Level 1-4 (no tribute)
# ============================================================================

KURIBOH = creature(
    "kuriboh", "Kuriboh", 1, 300, 200,
    "A small furball that sacrifices itself to shield its master.",
)

MAN_EATER_BUG = creature(
    "man_eater_bug", "Man-Eater Bug", 2, 450, 600,
    "A carnivorous insect that lurks face-down.",
)

MYSTICAL_ELF = creature(
    "mystical_elf", "Mystical Elf", 4, 800, 2000,
    "A delicate elf that lacks offense but has a terrific defense.",
)

SILVER_FANG = creature(
    "silver_fang", "Silver Fang", 3, 1200, 800,
    "A snow wolf that is beautiful to behold, yet fierce in battle.",
)

EMBER_LANCER = creature(
    "ember_lancer", "Ember Lancer", 3, 1600, 1200,
    "A young lancer whose spear burns with a quick, bright flame.",
)

GIANT_SOLDIER_OF_STONE = creature(
    "giant_soldier_of_stone", "Giant Soldier of Stone", 3, 1300, 2000,
    "A giant warrior made of stone. A punch from it can shatter a wall.",
)

BEAVER_WARRIOR = creature(
    "beaver_warrior", "Beaver Warrior", 4, 1200, 1500,
    "What this creature lacks in size it makes up for in defense.",
)

CELTIC_GUARDIAN = creature(
    "celtic_guardian", "Celtic Guardian", 4, 1400, 1200,
    "An elf who learned to wield a sword, he baffles enemies with lightning-swift attacks.",
)

FERAL_IMP = creature(
    "feral_imp", "Feral Imp", 4, 1300, 1400,
    "A playful little fiend that lurks in the dark.",
)

ALEXANDRITE_DRAGON = creature(
    "alexandrite_dragon", "Alexandrite Dragon", 4, 2000, 100,
    "Many of the gems on its scales are as rare as the dragon itself.",
    Rarity.RARE,
)

GEMINI_ELF = creature(
    "gemini_elf", "Gemini Elf", 4, 1900, 900,
    "Elf twins that alternate their attacks.",
    Rarity.RARE,
)

LA_JINN = creature(
    "la_jinn", "La Jinn the Mystical Genie of the Lamp", 4, 1800, 1000,
    "A genie of the lamp that is at the beck and call of its master.",
    Rarity.RARE,
)

VORSE_RAIDER = creature(
    "vorse_raider", "Vorse Raider", 4, 1900, 1200,
    "This wicked Beast-Warrior does every horrid thing imaginable.",
)

GAMMA_THE_MAGNET_WARRIOR = creature(
    "gamma_the_magnet_warrior", "Gamma The Magnet Warrior", 4, 1500, 1800,
    "A warrior bound by magnetism to his brothers.",
)

WINGED_DRAGON = creature(
    "winged_dragon", "Winged Dragon, Guardian of the Fortress #1", 4, 1400, 1200,
    "A dragon commonly found guarding mountain fortresses.",
)

DARK_ELF = creature(
    "dark_elf", "Dark Elf", 4, 2000, 800,
    "An elf who wields dark powers at a heavy cost.",
    Rarity.RARE,
)

NEO_THE_MAGIC_SWORDSMAN = creature(
    "neo_the_magic_swordsman", "Neo the Magic Swordsman", 4, 1700, 1000,
    "A swordsman who has mastered the arts of magic.",
)

# ============================================================================
# Level 5-6 (one tribute)
# ============================================================================

SUMMONED_SKULL = creature(
    "summoned_skull", "Summoned Skull", 6, 2500, 1200,
    "A fiend with dark powers for confusing the enemy.",
    Rarity.ULTRA_RARE,
)

CURSE_OF_DRAGON = creature(
    "curse_of_dragon", "Curse of Dragon", 5, 2000, 1500,
    "A wicked dragon that taps into dark forces to execute a powerful attack.",
    Rarity.SUPER_RARE,
)

JINZO = creature(
    "jinzo", "Jinzo", 6, 2400, 1500,
    "An android that jams trap circuitry on the field.",
    Rarity.ULTRA_RARE,
)

# ============================================================================
# Level 7+ (two tributes)
# ============================================================================

GAIA_THE_FIERCE_KNIGHT = creature(
    "gaia_the_fierce_knight", "Gaia The Fierce Knight", 7, 2300, 2100,
    "A knight whose horse travels faster than the wind.",
    Rarity.ULTRA_RARE,
)

DARK_MAGICIAN = creature(
    "dark_magician", "Dark Magician", 7, 2500, 2100,
    "The ultimate wizard in terms of attack and defense.",
    Rarity.ULTRA_RARE,
)

RED_EYES_BLACK_DRAGON = creature(
    "red_eyes_black_dragon", "Red-Eyes Black Dragon", 7, 2400, 2000,
    "A ferocious dragon with a deadly attack.",
    Rarity.ULTRA_RARE,
)

BLUE_EYES_WHITE_DRAGON = creature(
    "blue_eyes_white_dragon", "Blue-Eyes White Dragon", 8, 3000, 2500,
    "This legendary dragon is a powerful engine of destruction.",
    Rarity.SECRET_RARE,
)

BUSTER_BLADER = creature(
    "buster_blader", "Buster Blader", 7, 2600, 2300,
    "A legendary swordsman who hunts dragons.",
    Rarity.SUPER_RARE,
)


CREATURE_CARDS: list[CardDefinition] = [
    KURIBOH,
    MAN_EATER_BUG,
    MYSTICAL_ELF,
    SILVER_FANG,
    EMBER_LANCER,
    GIANT_SOLDIER_OF_STONE,
    BEAVER_WARRIOR,
    CELTIC_GUARDIAN,
    FERAL_IMP,
    ALEXANDRITE_DRAGON,
    GEMINI_ELF,
    LA_JINN,
    VORSE_RAIDER,
    GAMMA_THE_MAGNET_WARRIOR,
    WINGED_DRAGON,
    SUMMONED_SKULL,
    DARK_ELF,
    CURSE_OF_DRAGON,
    GAIA_THE_FIERCE_KNIGHT,
    JINZO,
    NEO_THE_MAGIC_SWORDSMAN,
    DARK_MAGICIAN,
    RED_EYES_BLACK_DRAGON,
    BLUE_EYES_WHITE_DRAGON,
    BUSTER_BLADER,
]
