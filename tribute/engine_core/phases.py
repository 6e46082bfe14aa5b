"""
Phase Manager - The per-turn phase state machine.

draw -> standby -> main1 -> battle -> main2 -> end -> (swap side) -> draw

The manager owns phase advancement, the automatic effects on entering
a phase (draw, hand limit), and the end-phase discard that resolves a
hand limit obligation. It never decides the winner.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .state import DuelState, Phase, Side, Stance, ZoneType
from .action import ActionKind, ActionResult, ErrorCode

logger = logging.getLogger(__name__)


NEXT_PHASE: dict[Phase, Phase] = {
    Phase.DRAW: Phase.STANDBY,
    Phase.STANDBY: Phase.MAIN_1,
    Phase.MAIN_1: Phase.BATTLE,
    Phase.BATTLE: Phase.MAIN_2,
    Phase.MAIN_2: Phase.END,
    Phase.END: Phase.DRAW,
}

MAIN_PHASE_ACTIONS = [
    ActionKind.NORMAL_SUMMON,
    ActionKind.SET_CREATURE,
    ActionKind.FLIP_SUMMON,
    ActionKind.CHANGE_STANCE,
    ActionKind.ADVANCE_PHASE,
]


@dataclass
class PhaseManager:
    """
    Advances phases on a shared DuelState.

    Callers check can_advance() before advance(); advance() itself
    always succeeds.
    """
    state: DuelState

    def can_advance(self) -> bool:
        """Whether the current phase may be left now."""
        if self.state.phase == Phase.BATTLE and self.has_pending_attacks():
            return False
        # Pending effects must resolve first
        if self.state.chain_stack:
            return False
        return True

    def has_pending_attacks(self) -> bool:
        """Whether the side to act still has a creature able to attack."""
        turn = self.state.turn_number
        return any(
            creature.stance == Stance.ATTACK
            and creature.can_attack
            and not creature.has_attacked
            and creature.turn_placed != turn
            for creature in self.state.field_creatures(self.state.current_side)
        )

    def advance(self) -> Phase:
        """Move to the next phase, swapping sides when leaving the end phase."""
        current = self.state.phase
        next_phase = NEXT_PHASE[current]
        if current == Phase.END:
            self._switch_turn()
        self.state.phase = next_phase
        self.state.touch()
        return next_phase

    def _switch_turn(self):
        """Hand the turn to the other side and reset its per-turn flags."""
        state = self.state
        state.current_side = state.current_side.opponent
        state.turn_number += 1

        # The side that just ended keeps no obligation into the next turn
        state.sides[state.current_side.opponent].discard_required = 0
        state.current.reset_turn_flags()
        for creature in state.field_creatures(state.current_side):
            creature.reset_turn_flags()

        logger.info(
            "Turn %d: %s to act", state.turn_number, state.current.name
        )

    def run_phase_entry_effects(self) -> list[str]:
        """
        Apply the automatic effects of the phase just entered.

        Returns human-readable changes.
        """
        phase = self.state.phase
        if phase == Phase.DRAW:
            return self._run_draw()
        if phase == Phase.END:
            return self._run_end()
        # standby, main and battle phases have no automatic effects
        return []

    def is_first_turn_of_starting_side(self) -> bool:
        return (
            self.state.turn_number == 1
            and self.state.current_side == self.state.starting_side
        )

    def _run_draw(self) -> list[str]:
        state = self.state
        side = state.current
        if self.is_first_turn_of_starting_side():
            return [f"{side.name} skips the first draw"]

        if not side.may_draw:
            return []
        if not side.deck:
            logger.info("%s has no cards left to draw", side.name)
            return [f"{side.name} has no cards left to draw"]

        instance_id = side.deck.pop(0)
        side.hand.append(instance_id)
        side.may_draw = False
        instance = state.instances[instance_id]
        instance.zone = ZoneType.HAND

        state.log(
            side.side,
            "draw_card",
            f"{side.name} drew a card",
            card_id=instance.card_id,
            instance_id=instance_id,
        )
        return [f"{side.name} drew a card"]

    def _run_end(self) -> list[str]:
        side = self.state.current
        limit = self.state.rules.max_hand_size
        excess = len(side.hand) - limit
        if excess <= 0:
            return []

        # The caller chooses which cards to discard
        side.discard_required = excess
        self.state.log(
            side.side,
            "hand_limit",
            f"{side.name} must discard {excess} card(s) down to {limit}",
            discard_required=excess,
        )
        return [f"{side.name} must discard {excess} card(s)"]

    def available_action_kinds(self) -> list[ActionKind]:
        """Action kinds legal in the current phase."""
        phase = self.state.phase
        if phase in (Phase.MAIN_1, Phase.MAIN_2):
            return list(MAIN_PHASE_ACTIONS)
        if phase == Phase.BATTLE:
            return [ActionKind.DECLARE_ATTACK, ActionKind.ADVANCE_PHASE]
        if phase == Phase.END and self.state.current.discard_required > 0:
            return [ActionKind.DISCARD, ActionKind.ADVANCE_PHASE]
        return [ActionKind.ADVANCE_PHASE]

    def discard(self, side: Side, card_ref: str | None) -> ActionResult:
        """Discard a card from hand toward the hand limit."""
        state = self.state
        side_state = state.sides[side]
        if side_state.discard_required <= 0:
            return ActionResult.failure(
                "No discard is required", ErrorCode.ILLEGAL_TIMING
            )

        instance = state.find_in_hand(side, card_ref)
        if not instance:
            return ActionResult.failure("Card not in hand", ErrorCode.NOT_IN_HAND)

        side_state.hand.remove(instance.instance_id)
        side_state.discard.append(instance.instance_id)
        instance.zone = ZoneType.DISCARD
        side_state.discard_required -= 1

        state.log(
            side,
            "discard",
            f"{side_state.name} discarded a card for the hand limit",
            card_id=instance.card_id,
            instance_id=instance.instance_id,
        )
        return ActionResult.ok(
            f"Discarded {instance.card_id}",
            detail={
                "instance_id": instance.instance_id,
                "discard_required": side_state.discard_required,
            },
        )
