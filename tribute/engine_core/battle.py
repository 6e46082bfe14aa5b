"""
Battle Manager - Resolves declared attacks and stance changes.

Battle math:
- Defender in attack stance: ATK vs ATK. The lower one is destroyed and
  its side loses the difference; a tie destroys both with no damage.
- Defender in defense stance: ATK vs DEF. Higher ATK destroys the
  defender with no damage; lower ATK costs the attacking side the
  difference; a tie does nothing.
- Direct attack: only when the opponent has no field creatures.

A face-down defender stays face-down after battle.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import logging

from ..catalog import CardCatalog
from .state import DuelState, CardInstance, DuelStatus, Phase, Side, Stance
from .action import ActionResult, ErrorCode

logger = logging.getLogger(__name__)


@dataclass
class BattleOutcome:
    """Numeric result of one attack."""
    outcome: str  # "attacker_wins", "defender_wins", "draw"
    damage: int = 0
    damaged_side: Side | None = None
    destroyed: list[str] = field(default_factory=list)
    message: str = ""


@dataclass
class BattleManager:
    """Resolves combat on a shared DuelState."""
    state: DuelState
    catalog: CardCatalog

    def declare_attack(self, attacker_id: str | None, target_id: str | None = None) -> ActionResult:
        """
        Attack with a field creature of the side to act.

        No target means a direct attack on the opponent's life points.
        """
        state = self.state
        if state.phase != Phase.BATTLE:
            return ActionResult.failure("Not in battle phase", ErrorCode.ILLEGAL_TIMING)

        attacker = state.get_instance(attacker_id)
        if not attacker or not attacker.on_field or attacker.destroyed:
            return ActionResult.failure("Invalid attacker", ErrorCode.INSTANCE_NOT_FOUND)

        error = self._validate_attacker(attacker)
        if error:
            return error

        attacker_card = self.catalog.get_card_by_id(attacker.card_id)
        if attacker_card is None or not attacker_card.is_creature:
            return ActionResult.failure("Invalid attacker card", ErrorCode.INVALID_CARD)

        if target_id is None:
            return self._direct_attack(attacker)

        defender = state.get_instance(target_id)
        if (
            not defender
            or not defender.on_field
            or defender.destroyed
            or defender.controller != attacker.controller.opponent
        ):
            return ActionResult.failure("Invalid attack target", ErrorCode.INVALID_TARGET)

        defender_card = self.catalog.get_card_by_id(defender.card_id)
        if defender_card is None or not defender_card.is_creature:
            return ActionResult.failure("Invalid target card", ErrorCode.INVALID_CARD)

        return self._creature_battle(attacker, defender)

    def _validate_attacker(self, attacker: CardInstance) -> ActionResult | None:
        if attacker.controller != self.state.current_side:
            return ActionResult.failure("Not your creature", ErrorCode.NOT_CONTROLLER)
        if attacker.stance != Stance.ATTACK:
            return ActionResult.failure(
                "Creature must be in face-up attack position", ErrorCode.INVALID_STANCE
            )
        if not attacker.can_attack or attacker.has_attacked:
            return ActionResult.failure("Creature cannot attack", ErrorCode.ALREADY_USED)
        if attacker.turn_placed == self.state.turn_number:
            return ActionResult.failure("Cannot attack on summon turn", ErrorCode.ILLEGAL_TIMING)
        return None

    # =========================================================================
    # Resolution
    # =========================================================================

    def _direct_attack(self, attacker: CardInstance) -> ActionResult:
        state = self.state
        attacking_side = attacker.controller
        defending_side = attacking_side.opponent

        if state.field_creatures(defending_side):
            return ActionResult.failure(
                "Cannot attack directly while opponent has creatures",
                ErrorCode.DIRECT_ATTACK_BLOCKED,
            )

        card = self.catalog.get_card_by_id(attacker.card_id)
        damage = card.attack
        self._deal_damage(defending_side, damage)
        attacker.has_attacked = True

        state.log(
            attacking_side,
            "direct_attack",
            f"{card.name} attacks directly for {damage} damage",
            card_id=card.id,
            instance_id=attacker.instance_id,
            damage=damage,
            attack=card.attack,
            target_side=defending_side.value,
        )
        logger.info("%s attacks directly for %d", attacker.instance_id, damage)

        winner = self._check_win()
        return ActionResult.ok(
            f"Direct attack successful! {damage} damage dealt",
            detail=self._detail(
                BattleOutcome("attacker_wins", damage, defending_side),
                winner,
            ),
        )

    def _creature_battle(self, attacker: CardInstance, defender: CardInstance) -> ActionResult:
        state = self.state
        attacker_card = self.catalog.get_card_by_id(attacker.card_id)
        defender_card = self.catalog.get_card_by_id(defender.card_id)
        defender_stance = defender.stance

        if defender_stance.is_attack:
            result = self._attack_vs_attack(attacker, defender, attacker_card, defender_card)
            defense_value = None
        else:
            result = self._attack_vs_defense(attacker, defender, attacker_card, defender_card)
            defense_value = defender_card.defense

        if result.damaged_side is not None:
            self._deal_damage(result.damaged_side, result.damage)
        attacker.has_attacked = True
        for instance_id in result.destroyed:
            state.send_to_discard(instance_id)

        state.log(
            attacker.controller,
            "battle",
            result.message,
            card_id=attacker_card.id,
            instance_id=attacker.instance_id,
            target_instance_id=defender.instance_id,
            damage=result.damage,
            attack=attacker_card.attack,
            defender_card_id=defender_card.id,
            defender_stance=defender_stance.value,
            defender_attack=defender_card.attack if defense_value is None else None,
            defender_defense=defense_value,
            outcome=result.outcome,
            destroyed=list(result.destroyed),
        )
        logger.info(
            "%s attacks %s: %s", attacker.instance_id, defender.instance_id, result.outcome
        )

        winner = self._check_win()
        return ActionResult.ok(result.message, detail=self._detail(result, winner))

    def _attack_vs_attack(self, attacker, defender, attacker_card, defender_card) -> BattleOutcome:
        atk, other = attacker_card.attack, defender_card.attack
        if atk > other:
            return BattleOutcome(
                "attacker_wins",
                damage=atk - other,
                damaged_side=defender.controller,
                destroyed=[defender.instance_id],
                message=f"{attacker_card.name} destroys {defender_card.name}! {atk - other} damage dealt",
            )
        if atk < other:
            return BattleOutcome(
                "defender_wins",
                damage=other - atk,
                damaged_side=attacker.controller,
                destroyed=[attacker.instance_id],
                message=f"{defender_card.name} destroys {attacker_card.name}! {other - atk} damage dealt",
            )
        return BattleOutcome(
            "draw",
            destroyed=[attacker.instance_id, defender.instance_id],
            message="Both creatures are destroyed in battle!",
        )

    def _attack_vs_defense(self, attacker, defender, attacker_card, defender_card) -> BattleOutcome:
        atk, defense = attacker_card.attack, defender_card.defense
        if atk > defense:
            return BattleOutcome(
                "attacker_wins",
                destroyed=[defender.instance_id],
                message=f"{attacker_card.name} destroys a creature in defense position",
            )
        if atk < defense:
            return BattleOutcome(
                "defender_wins",
                damage=defense - atk,
                damaged_side=attacker.controller,
                message=f"The defender holds! {defense - atk} damage dealt to attacker",
            )
        return BattleOutcome("draw", message="No damage dealt - equal ATK and DEF")

    def _deal_damage(self, side: Side, amount: int):
        side_state = self.state.sides[side]
        side_state.life_points = max(0, side_state.life_points - amount)

    def _check_win(self) -> Side | None:
        """
        Finish the duel if a side is at 0 life points.

        Both sides at 0 in the same resolution is a draw with no winner.
        """
        state = self.state
        down = [side for side in Side if state.sides[side].life_points <= 0]
        if not down:
            return None

        state.winner = down[0].opponent if len(down) == 1 else None
        state.set_status(DuelStatus.FINISHED)
        logger.info("Duel %s finished, winner=%s", state.game_id, state.winner)
        return state.winner

    def _detail(self, result: BattleOutcome, winner: Side | None) -> dict[str, Any]:
        return {
            "outcome": result.outcome,
            "damage": result.damage,
            "damaged_side": result.damaged_side.value if result.damaged_side else None,
            "destroyed": list(result.destroyed),
            "life_points": {
                side.value: self.state.sides[side].life_points for side in Side
            },
            "game_over": self.state.status == DuelStatus.FINISHED,
            "winner": winner.value if winner else None,
        }

    # =========================================================================
    # Stance changes
    # =========================================================================

    def change_stance(self, side: Side, instance_id: str | None, new_stance: Stance | None) -> ActionResult:
        """Switch a face-up creature between attack and defense, once per turn."""
        instance = self.state.get_instance(instance_id)
        if not instance or not instance.on_field:
            return ActionResult.failure("Invalid creature", ErrorCode.INSTANCE_NOT_FOUND)
        if instance.controller != side:
            return ActionResult.failure("Not your creature", ErrorCode.NOT_CONTROLLER)
        if new_stance not in (Stance.ATTACK, Stance.DEFENSE):
            return ActionResult.failure(
                "Stance must be attack or defense", ErrorCode.INVALID_STANCE
            )
        if instance.stance is None or instance.stance.is_face_down:
            return ActionResult.failure(
                "Face-down creatures change position by flip summon", ErrorCode.INVALID_STANCE
            )
        if instance.stance == new_stance:
            return ActionResult.failure(
                f"Creature is already in {new_stance.value} position", ErrorCode.INVALID_STANCE
            )
        if not instance.can_change_stance:
            return ActionResult.failure(
                "Cannot change position this turn", ErrorCode.ALREADY_USED
            )
        if instance.has_attacked:
            return ActionResult.failure(
                "Cannot change position after attacking", ErrorCode.ALREADY_USED
            )

        previous = instance.stance
        instance.stance = new_stance
        instance.can_change_stance = False

        self.state.log(
            side,
            "change_position",
            f"{self.state.sides[side].name} changed a creature to {new_stance.value} position",
            card_id=instance.card_id,
            instance_id=instance.instance_id,
            from_stance=previous.value,
            to_stance=new_stance.value,
        )
        logger.info("%s -> %s", instance.instance_id, new_stance.value)

        return ActionResult.ok(
            f"Changed to {new_stance.value} position",
            detail={"instance_id": instance.instance_id, "stance": new_stance.value},
        )
