"""
Summoning Manager - Places creatures from hand onto the field.

Supports:
- Normal summon (face-up, attack or defense), with tribute costs
- Set (face-down defense, never tributes)
- Flip summon (face-down field creature turns face-up in attack)

Every operation validates completely before it mutates anything.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..catalog import CardCatalog, CardDefinition
from .state import DuelState, CardInstance, Side, Stance, ZoneType
from .action import ActionResult, ErrorCode

logger = logging.getLogger(__name__)


@dataclass
class SummoningManager:
    """
    Summons creatures on a shared DuelState.

    Each placement creates a new instance id for the card; the hand
    instance it came from is retired.
    """
    state: DuelState
    catalog: CardCatalog

    def normal_summon(
        self,
        side: Side,
        card_ref: str | None,
        stance: Stance = Stance.ATTACK,
    ) -> ActionResult:
        """Normal summon a creature face-up, paying tributes by level."""
        if stance not in (Stance.ATTACK, Stance.DEFENSE):
            return ActionResult.failure(
                "Normal summon stance must be attack or defense",
                ErrorCode.INVALID_STANCE,
            )

        instance, card, error = self._resolve_hand_creature(side, card_ref)
        if error:
            return error

        tributes_required = self.state.rules.tributes_required(card.level)
        available = self.state.field_creatures(side)
        if len(available) < tributes_required:
            return ActionResult.failure(
                f"Need {tributes_required} tribute(s) for Level {card.level} creature",
                ErrorCode.INSUFFICIENT_TRIBUTES,
            )

        # Tributes free their slots before the new creature is placed
        if tributes_required == 0 and self.state.sides[side].empty_slot() is None:
            return ActionResult.failure("No empty field slots", ErrorCode.NO_EMPTY_SLOT)

        tributes = available[:tributes_required]
        for tribute in tributes:
            self._tribute(tribute)

        placed = self._place(side, instance, stance, face_up=True)
        side_state = self.state.sides[side]
        side_state.normal_summoned = True

        self.state.log(
            side,
            "normal_summon",
            f"{side_state.name} Normal Summoned {card.name} in {stance.value} position",
            card_id=card.id,
            instance_id=placed.instance_id,
            stance=stance.value,
            level=card.level,
            field_slot=placed.field_slot,
            tributes=[t.instance_id for t in tributes],
        )
        logger.info("%s normal summoned %s", side_state.name, placed.instance_id)

        return ActionResult.ok(
            f"Successfully summoned {card.name}",
            detail={
                "instance_id": placed.instance_id,
                "field_slot": placed.field_slot,
                "tributes": [t.instance_id for t in tributes],
            },
        )

    def set_creature(self, side: Side, card_ref: str | None) -> ActionResult:
        """Set a creature face-down in defense position."""
        instance, card, error = self._resolve_hand_creature(side, card_ref)
        if error:
            return error

        if self.state.sides[side].empty_slot() is None:
            return ActionResult.failure("No empty field slots", ErrorCode.NO_EMPTY_SLOT)

        placed = self._place(side, instance, Stance.FACE_DOWN_DEFENSE, face_up=False)
        side_state = self.state.sides[side]
        side_state.normal_summoned = True

        self.state.log(
            side,
            "set_creature",
            f"{side_state.name} Set a creature face-down",
            card_id=card.id,
            instance_id=placed.instance_id,
            stance=Stance.FACE_DOWN_DEFENSE.value,
            field_slot=placed.field_slot,
        )
        logger.info("%s set %s", side_state.name, placed.instance_id)

        return ActionResult.ok(
            "Successfully set creature face-down",
            detail={"instance_id": placed.instance_id, "field_slot": placed.field_slot},
        )

    def flip_summon(self, side: Side, instance_id: str | None) -> ActionResult:
        """
        Flip a face-down creature face-up into attack position.

        The flip uses the creature's one stance change for the turn. Its
        can_attack flag is left alone, so a creature set on an earlier
        turn may still attack after flipping.
        """
        instance = self.state.get_instance(instance_id)
        if not instance or not instance.on_field:
            return ActionResult.failure("Invalid creature", ErrorCode.INSTANCE_NOT_FOUND)
        if instance.controller != side:
            return ActionResult.failure("Not your creature", ErrorCode.NOT_CONTROLLER)
        if instance.face_up or not (instance.stance and instance.stance.is_face_down):
            return ActionResult.failure("Creature is not face-down", ErrorCode.INVALID_STANCE)
        if not instance.can_change_stance:
            return ActionResult.failure(
                "Cannot change position this turn", ErrorCode.ALREADY_USED
            )

        card = self.catalog.get_card_by_id(instance.card_id)
        if card is None or not card.is_creature:
            return ActionResult.failure("Invalid creature card", ErrorCode.INVALID_CARD)

        instance.face_up = True
        instance.stance = Stance.ATTACK
        instance.can_change_stance = False

        side_state = self.state.sides[side]
        self.state.log(
            side,
            "flip_summon",
            f"{side_state.name} Flip Summoned {card.name}",
            card_id=card.id,
            instance_id=instance.instance_id,
            attack=card.attack,
            defense=card.defense,
        )
        logger.info("%s flip summoned %s", side_state.name, instance.instance_id)

        return ActionResult.ok(
            f"Successfully flip summoned {card.name}",
            detail={"instance_id": instance.instance_id},
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _resolve_hand_creature(
        self, side: Side, card_ref: str | None
    ) -> tuple[CardInstance | None, CardDefinition | None, ActionResult | None]:
        """Checks shared by normal summon and set."""
        instance = self.state.find_in_hand(side, card_ref)
        card_id = instance.card_id if instance else card_ref
        card = self.catalog.get_card_by_id(card_id) if card_id else None

        if card is None or not card.is_creature:
            return None, None, ActionResult.failure(
                "Invalid creature card", ErrorCode.INVALID_CARD
            )
        if instance is None:
            return None, None, ActionResult.failure("Card not in hand", ErrorCode.NOT_IN_HAND)
        if self.state.sides[side].normal_summoned:
            return None, None, ActionResult.failure(
                "Already normal summoned this turn", ErrorCode.ALREADY_SUMMONED
            )
        return instance, card, None

    def _tribute(self, tribute: CardInstance):
        self.state.send_to_discard(tribute.instance_id)
        owner = self.state.sides[tribute.owner]
        self.state.log(
            tribute.controller,
            "tribute",
            f"{owner.name} tributed a creature",
            card_id=tribute.card_id,
            instance_id=tribute.instance_id,
        )

    def _place(
        self,
        side: Side,
        hand_instance: CardInstance,
        stance: Stance,
        face_up: bool,
    ) -> CardInstance:
        """Move a hand card to the first empty slot as a new instance."""
        state = self.state
        side_state = state.sides[side]
        slot = side_state.empty_slot()

        side_state.hand.remove(hand_instance.instance_id)
        del state.instances[hand_instance.instance_id]

        placed = CardInstance(
            instance_id=state.new_instance_id(hand_instance.card_id),
            card_id=hand_instance.card_id,
            owner=hand_instance.owner,
            controller=side,
            zone=ZoneType.FIELD,
            field_slot=slot,
            stance=stance,
            face_up=face_up,
            turn_placed=state.turn_number,
            has_attacked=False,
            # Defense-position entries never attack on the turn they arrive
            can_attack=stance == Stance.ATTACK,
            can_change_stance=False,
        )
        state.instances[placed.instance_id] = placed
        side_state.field_slots[slot] = placed.instance_id
        return placed
