"""
Action Generator - Generates all legal actions from a duel state.

The action generator is used by:
1. External decision-makers to enumerate possible moves
2. UIs to show available actions
3. Validation (is this action in legal_actions?)

Design: Generates Action objects, not just action kinds.
This ensures all generated actions are fully specified.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..catalog import CardCatalog, default_catalog
from .state import DuelState, CardInstance, Side, Stance
from .action import Action, ActionKind
from .phases import PhaseManager


@dataclass
class ActionGenerator:
    """
    Generates legal actions for the side to act.

    Mirrors the checks of the managers without mutating the state.
    """
    catalog: CardCatalog

    def generate(self, state: DuelState) -> list[Action]:
        """
        Generate all legal actions for the current side.

        Returns a list of fully-specified Action objects.
        """
        if not state.is_active:
            return []

        phases = PhaseManager(state)
        side = state.current_side
        kinds = phases.available_action_kinds()
        actions = []

        if ActionKind.NORMAL_SUMMON in kinds:
            actions.extend(self._generate_summon_actions(state, side))
        if ActionKind.SET_CREATURE in kinds:
            actions.extend(self._generate_set_actions(state, side))
        if ActionKind.FLIP_SUMMON in kinds:
            actions.extend(self._generate_flip_actions(state, side))
        if ActionKind.CHANGE_STANCE in kinds:
            actions.extend(self._generate_stance_actions(state, side))
        if ActionKind.DECLARE_ATTACK in kinds:
            actions.extend(self._generate_attack_actions(state, side))
        if ActionKind.DISCARD in kinds:
            actions.extend(
                Action.discard(side, instance_id) for instance_id in state.sides[side].hand
            )

        if phases.can_advance():
            actions.append(Action.advance_phase(side))

        return actions

    def _hand_creatures(self, state: DuelState, side: Side) -> list[str]:
        """Distinct creature card ids in hand, in hand order."""
        seen = []
        for instance_id in state.sides[side].hand:
            card_id = state.instances[instance_id].card_id
            card = self.catalog.get_card_by_id(card_id)
            if card and card.is_creature and card_id not in seen:
                seen.append(card_id)
        return seen

    def _generate_summon_actions(self, state: DuelState, side: Side) -> list[Action]:
        side_state = state.sides[side]
        if side_state.normal_summoned:
            return []

        available = len(state.field_creatures(side))
        has_slot = side_state.empty_slot() is not None
        actions = []
        for card_id in self._hand_creatures(state, side):
            tributes = state.rules.tributes_required(self.catalog.get_card_by_id(card_id).level)
            if tributes > available:
                continue
            if tributes == 0 and not has_slot:
                continue
            actions.append(Action.normal_summon(side, card_id, Stance.ATTACK))
            actions.append(Action.normal_summon(side, card_id, Stance.DEFENSE))
        return actions

    def _generate_set_actions(self, state: DuelState, side: Side) -> list[Action]:
        side_state = state.sides[side]
        if side_state.normal_summoned or side_state.empty_slot() is None:
            return []
        return [Action.set_creature(side, card_id) for card_id in self._hand_creatures(state, side)]

    def _generate_flip_actions(self, state: DuelState, side: Side) -> list[Action]:
        return [
            Action.flip_summon(side, creature.instance_id)
            for creature in state.field_creatures(side)
            if not creature.face_up
            and creature.stance is not None
            and creature.stance.is_face_down
            and creature.can_change_stance
        ]

    def _generate_stance_actions(self, state: DuelState, side: Side) -> list[Action]:
        actions = []
        for creature in state.field_creatures(side):
            if creature.stance not in (Stance.ATTACK, Stance.DEFENSE):
                continue
            if not creature.can_change_stance or creature.has_attacked:
                continue
            target = Stance.DEFENSE if creature.stance == Stance.ATTACK else Stance.ATTACK
            actions.append(Action.change_stance(side, creature.instance_id, target))
        return actions

    def _generate_attack_actions(self, state: DuelState, side: Side) -> list[Action]:
        attackers = [c for c in state.field_creatures(side) if self._can_attack(state, c)]
        defenders = state.field_creatures(side.opponent)

        actions = []
        for attacker in attackers:
            if not defenders:
                actions.append(Action.declare_attack(side, attacker.instance_id))
                continue
            for defender in defenders:
                actions.append(
                    Action.declare_attack(side, attacker.instance_id, defender.instance_id)
                )
        return actions

    def _can_attack(self, state: DuelState, creature: CardInstance) -> bool:
        return (
            creature.stance == Stance.ATTACK
            and creature.can_attack
            and not creature.has_attacked
            and creature.turn_placed != state.turn_number
        )


def legal_actions(state: DuelState, catalog: CardCatalog | None = None) -> list[Action]:
    """
    Convenience function to get legal actions.

    Creates an ActionGenerator and generates actions.
    """
    generator = ActionGenerator(catalog=catalog or default_catalog())
    return generator.generate(state)


def is_legal(state: DuelState, action: Action, catalog: CardCatalog | None = None) -> bool:
    """Check if a specific action is legal."""
    for a in legal_actions(state, catalog):
        if (
            a.kind == action.kind
            and a.side == action.side
            and a.payload.card_id == action.payload.card_id
            and a.payload.target_instance_id == action.payload.target_instance_id
            and a.payload.stance == action.payload.stance
        ):
            return True
    return False
