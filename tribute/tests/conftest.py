"""
Pytest fixtures for Tribute tests.
"""

import pytest

from ..catalog import CardCatalog, default_catalog
from ..engine_core.action import Action
from ..engine_core.engine import DuelEngine
from ..engine_core.setup import create_duel
from ..engine_core.state import CardInstance, DuelState, Phase, Side, Stance, ZoneType


# Non-creature card used to pad hands and decks
FILLER = "pot_of_greed"


def build_deck(hand=(), draws=(), size=12) -> list[str]:
    """Deck whose first five cards become the opening hand."""
    opening = list(hand) + [FILLER] * (5 - len(hand))
    rest = list(draws) + [FILLER] * max(0, size - 5 - len(draws))
    return opening + rest


@pytest.fixture
def catalog() -> CardCatalog:
    """The built-in card catalog."""
    return default_catalog()


@pytest.fixture
def new_engine(catalog):
    """
    Factory for an engine with known hands.

    The duel starts in player1's draw phase of turn 1.
    """
    def _new(p1_hand=(), p2_hand=(), p1_draws=(), p2_draws=()) -> DuelEngine:
        state = create_duel(
            decks={
                Side.PLAYER_1: build_deck(p1_hand, p1_draws),
                Side.PLAYER_2: build_deck(p2_hand, p2_draws),
            },
            catalog=catalog,
            game_id="test_duel",
        )
        return DuelEngine(state=state, catalog=catalog)

    return _new


@pytest.fixture
def engine(new_engine) -> DuelEngine:
    """An engine with filler-only hands."""
    return new_engine()


@pytest.fixture
def place_creature():
    """
    Put a creature straight onto a side's field.

    Placed on turn 0 by default, so it is able to attack on turn 1.
    """
    def _place(
        state: DuelState,
        side: Side,
        card_id: str,
        stance: Stance = Stance.ATTACK,
        turn_placed: int = 0,
    ) -> CardInstance:
        side_state = state.sides[side]
        slot = side_state.empty_slot()
        instance = CardInstance(
            instance_id=state.new_instance_id(card_id),
            card_id=card_id,
            owner=side,
            controller=side,
            zone=ZoneType.FIELD,
            field_slot=slot,
            stance=stance,
            face_up=not stance.is_face_down,
            turn_placed=turn_placed,
        )
        state.instances[instance.instance_id] = instance
        side_state.field_slots[slot] = instance.instance_id
        return instance

    return _place


@pytest.fixture
def advance_to():
    """Advance the side to act until the duel reaches a phase."""
    def _advance(engine: DuelEngine, phase: Phase, limit: int = 20):
        for _ in range(limit):
            if engine.state.phase == phase:
                return
            result = engine.process_action(Action.advance_phase(engine.state.current_side))
            assert result.success, result.message
        raise AssertionError(f"Did not reach {phase.value}")

    return _advance
