"""
Duel Setup - Builds a fresh, active DuelState.

Usage:
    state = create_duel(seed=42)
    state = create_duel(decks={Side.PLAYER_1: [...], Side.PLAYER_2: [...]})

Decks are ordered top first. The opening hand is dealt from the top,
then the starting side enters its draw phase (skipping the first draw).
"""

from __future__ import annotations
import logging
import random
import uuid

from ..catalog import CardCatalog, default_catalog
from .rules import DuelRules
from .state import (
    DuelState, SideState, CardInstance, DuelStatus, Phase, Side, ZoneType,
)
from .phases import PhaseManager

logger = logging.getLogger(__name__)


DEFAULT_NAMES = {
    Side.PLAYER_1: "Player 1",
    Side.PLAYER_2: "AI Duelist",
}


def create_duel(
    seed: int | None = None,
    names: dict[Side, str] | None = None,
    rules: DuelRules | None = None,
    catalog: CardCatalog | None = None,
    decks: dict[Side, list[str]] | None = None,
    starting_side: Side = Side.PLAYER_1,
    game_id: str | None = None,
) -> DuelState:
    """
    Create a new duel ready for its first action.

    Sides without an explicit deck get a random one from the catalog,
    shuffled with random.Random(seed).

    Raises ValueError if a deck names a card the catalog does not know.
    """
    rules = rules or DuelRules()
    catalog = catalog or default_catalog()
    names = {**DEFAULT_NAMES, **(names or {})}
    decks = decks or {}
    rng = random.Random(seed)

    state = DuelState(
        game_id=game_id or f"duel_{uuid.uuid4().hex[:12]}",
        current_side=starting_side,
        starting_side=starting_side,
        phase=Phase.DRAW,
        turn_number=1,
        rules=rules,
        metadata={"seed": seed} if seed is not None else {},
    )

    for side in Side:
        deck = list(decks[side]) if side in decks else catalog.build_random_deck(rules.deck_size, rng)
        unknown = [card_id for card_id in deck if card_id not in catalog]
        if unknown:
            raise ValueError(f"Unknown card ids in {side.value} deck: {unknown}")
        state.sides[side] = _build_side(state, side, names[side], deck, rules)

    state.set_status(DuelStatus.ACTIVE)
    state.log(
        starting_side,
        "duel_start",
        f"Duel started: {names[Side.PLAYER_1]} vs {names[Side.PLAYER_2]}",
        starting_side=starting_side.value,
    )
    PhaseManager(state).run_phase_entry_effects()

    logger.info("Created duel %s (seed=%s)", state.game_id, seed)
    return state


def _build_side(
    state: DuelState,
    side: Side,
    name: str,
    deck: list[str],
    rules: DuelRules,
) -> SideState:
    side_state = SideState(
        side=side,
        name=name,
        life_points=rules.starting_life_points,
        field_slots={slot: None for slot in rules.creature_slots},
    )
    for card_id in deck:
        instance = CardInstance(
            instance_id=state.new_instance_id(card_id),
            card_id=card_id,
            owner=side,
            controller=side,
        )
        state.instances[instance.instance_id] = instance
        side_state.deck.append(instance.instance_id)

    for _ in range(min(rules.opening_hand_size, len(side_state.deck))):
        instance_id = side_state.deck.pop(0)
        state.instances[instance_id].zone = ZoneType.HAND
        side_state.hand.append(instance_id)

    return side_state
