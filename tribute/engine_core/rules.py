"""
Duel Rules - Numeric constants of a duel.

The defaults are the standard duel. A custom DuelRules can be passed
when creating a duel; it travels with the DuelState so a loaded
state keeps the rules it was created with.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any


def _default_slots() -> tuple[str, ...]:
    return tuple(f"monster_{i}" for i in range(1, 6))


@dataclass(frozen=True)
class DuelRules:
    """Per-duel rule constants."""
    starting_life_points: int = 8000
    opening_hand_size: int = 5
    deck_size: int = 40
    max_hand_size: int = 6

    # Field slots that hold creatures, in placement order
    creature_slots: tuple[str, ...] = field(default_factory=_default_slots)

    # Level thresholds for tribute summons
    one_tribute_level: int = 5
    two_tribute_level: int = 7

    def tributes_required(self, level: int) -> int:
        """Number of tributes a normal summon of this level costs."""
        if level >= self.two_tribute_level:
            return 2
        if level >= self.one_tribute_level:
            return 1
        return 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["creature_slots"] = list(self.creature_slots)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DuelRules:
        values = dict(data)
        if "creature_slots" in values:
            values["creature_slots"] = tuple(values["creature_slots"])
        return cls(**values)
