"""
Duel Engine - The facade external actors talk to.

The engine owns exactly one DuelState and binds the phase, summoning
and battle managers to it. All state changes go through
process_action().

Design principles:
- Rejections are results, never exceptions
- Common preconditions (status, turn, timing, payload shape) are checked
  here once; rule-specific checks live in the managers
- A handler fault rolls the state back and is reported as HANDLER_ERROR
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import logging

from ..catalog import CardCatalog, default_catalog
from .rules import DuelRules
from .state import DuelState, DuelStatus, Phase, Side, Stance
from .action import Action, ActionKind, ActionResult, ErrorCode
from .phases import PhaseManager
from .summoning import SummoningManager
from .battle import BattleManager
from .action_generator import ActionGenerator
from .setup import create_duel

logger = logging.getLogger(__name__)


# Payload fields each action kind cannot do without
REQUIRED_FIELDS: dict[ActionKind, tuple[str, ...]] = {
    ActionKind.ADVANCE_PHASE: (),
    ActionKind.NORMAL_SUMMON: ("card_id",),
    ActionKind.SET_CREATURE: ("card_id",),
    ActionKind.FLIP_SUMMON: ("target_instance_id",),
    ActionKind.DECLARE_ATTACK: ("card_id",),
    ActionKind.CHANGE_STANCE: ("target_instance_id", "stance"),
    ActionKind.DISCARD: ("card_id",),
}


@dataclass
class SideSummary:
    name: str
    life_points: int
    hand_size: int
    deck_size: int
    field_creatures: int
    discard_size: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "life_points": self.life_points,
            "hand_size": self.hand_size,
            "deck_size": self.deck_size,
            "field_creatures": self.field_creatures,
            "discard_size": self.discard_size,
        }


@dataclass
class DuelSummary:
    """Read-only projection of a duel for rendering layers."""
    game_id: str
    status: DuelStatus
    turn_number: int
    phase: Phase
    current_side: Side
    winner: Side | None
    sides: dict[Side, SideSummary] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "game_id": self.game_id,
            "status": self.status.value,
            "turn_number": self.turn_number,
            "phase": self.phase.value,
            "current_side": self.current_side.value,
            "winner": self.winner.value if self.winner else None,
            "sides": {side.value: s.to_dict() for side, s in self.sides.items()},
        }


class DuelEngine:
    """
    Facade over one duel.

    Usage:
        engine = DuelEngine(seed=7)
        result = engine.process_action(Action.advance_phase(Side.PLAYER_1))
        print(engine.summary().to_dict())
    """

    def __init__(
        self,
        state: DuelState | dict[str, Any] | None = None,
        catalog: CardCatalog | None = None,
        rules: DuelRules | None = None,
        seed: int | None = None,
    ):
        self.catalog = catalog or default_catalog()
        if state is None:
            state = create_duel(seed=seed, rules=rules, catalog=self.catalog)
        self.load_state(state)

    # =========================================================================
    # State access
    # =========================================================================

    def get_state(self) -> DuelState:
        """
        The current state.

        Callers must treat it as read-only; use clone() for a private copy.
        """
        return self.state

    def load_state(self, state: DuelState | dict[str, Any]):
        """
        Adopt a previously produced state and rebind the managers to it.

        Raises ValueError for a malformed state dict.
        """
        if isinstance(state, dict):
            state = DuelState.from_dict(state)
        self.state = state
        self.phases = PhaseManager(state)
        self.summoning = SummoningManager(state, self.catalog)
        self.battle = BattleManager(state, self.catalog)
        self.generator = ActionGenerator(self.catalog)

    @property
    def is_game_over(self) -> bool:
        return self.state.status == DuelStatus.FINISHED

    @property
    def winner(self) -> Side | None:
        return self.state.winner

    def summary(self) -> DuelSummary:
        state = self.state
        return DuelSummary(
            game_id=state.game_id,
            status=state.status,
            turn_number=state.turn_number,
            phase=state.phase,
            current_side=state.current_side,
            winner=state.winner,
            sides={
                side: SideSummary(
                    name=s.name,
                    life_points=s.life_points,
                    hand_size=len(s.hand),
                    deck_size=len(s.deck),
                    field_creatures=len(state.field_creatures(side)),
                    discard_size=len(s.discard),
                )
                for side, s in state.sides.items()
            },
        )

    def available_action_kinds(self) -> list[ActionKind]:
        """Action kinds the side to act may submit in the current phase."""
        if not self.state.is_active:
            return []
        return self.phases.available_action_kinds()

    def legal_actions(self) -> list[Action]:
        """Fully specified actions the side to act may submit now."""
        return self.generator.generate(self.state)

    # =========================================================================
    # Action processing
    # =========================================================================

    def process_action(self, action: Action | dict[str, Any]) -> ActionResult:
        """
        Apply one action.

        Accepts an Action or a raw record such as
        {"side": "player1", "kind": "normal_summon", "card_id": "dark_elf"}.
        """
        if isinstance(action, dict):
            kind = action.get("kind")
            if kind is not None and not isinstance(kind, str):
                return self._reject_record("Action kind must be a string", ErrorCode.MALFORMED_ACTION)
            if kind not in {k.value for k in ActionKind}:
                return self._reject_record(f"Unknown action kind: {kind}", ErrorCode.UNKNOWN_ACTION)
            try:
                action = Action.from_dict(action)
            except ValueError as e:
                return self._reject_record(str(e), ErrorCode.MALFORMED_ACTION)

        error = self._validate_action(action)
        if error:
            logger.debug("Rejected %s: %s", action.kind.value, error.message)
            return error

        handler = self._get_handler(action.kind)
        if not handler:
            return ActionResult.failure(
                f"No handler for action kind: {action.kind.value}",
                ErrorCode.UNKNOWN_ACTION,
            )

        snapshot = self.state.clone()
        try:
            result = handler(action)
        except Exception:
            logger.exception("Handler for %s failed", action.kind.value)
            self.load_state(snapshot)
            return ActionResult.failure(
                f"Internal error while handling {action.kind.value}",
                ErrorCode.HANDLER_ERROR,
            )

        if not result.success:
            logger.debug("Rejected %s: %s", action.kind.value, result.message)
        return result

    def _reject_record(self, message: str, code: ErrorCode) -> ActionResult:
        logger.debug("Rejected raw action: %s", message)
        return ActionResult.failure(message, code)

    def _validate_action(self, action: Action) -> ActionResult | None:
        """Checks common to every action kind."""
        state = self.state
        if state.status == DuelStatus.FINISHED:
            return ActionResult.failure("Game is over", ErrorCode.GAME_NOT_ACTIVE)
        if state.status != DuelStatus.ACTIVE:
            return ActionResult.failure("Game has not started", ErrorCode.GAME_NOT_ACTIVE)

        if action.side is None:
            return ActionResult.failure("Action has no side", ErrorCode.MALFORMED_ACTION)
        if action.side != state.current_side:
            return ActionResult.failure(
                f"Not {state.sides[action.side].name}'s turn", ErrorCode.NOT_YOUR_TURN
            )

        if action.kind not in self.phases.available_action_kinds():
            return ActionResult.failure(
                f"Cannot {action.kind.value} during {state.phase.value} phase",
                ErrorCode.ILLEGAL_TIMING,
            )

        for name in REQUIRED_FIELDS.get(action.kind, ()):
            if getattr(action.payload, name) is None:
                return ActionResult.failure(
                    f"{action.kind.value} requires {name}", ErrorCode.MALFORMED_ACTION
                )
        return None

    def _get_handler(self, kind: ActionKind):
        handlers = {
            ActionKind.ADVANCE_PHASE: self._handle_advance_phase,
            ActionKind.NORMAL_SUMMON: self._handle_normal_summon,
            ActionKind.SET_CREATURE: self._handle_set_creature,
            ActionKind.FLIP_SUMMON: self._handle_flip_summon,
            ActionKind.DECLARE_ATTACK: self._handle_declare_attack,
            ActionKind.CHANGE_STANCE: self._handle_change_stance,
            ActionKind.DISCARD: self._handle_discard,
        }
        return handlers.get(kind)

    def _handle_advance_phase(self, action: Action) -> ActionResult:
        state = self.state
        if not self.phases.can_advance():
            if state.chain_stack:
                return ActionResult.failure(
                    "Pending effects must resolve first", ErrorCode.CANNOT_ADVANCE
                )
            return ActionResult.failure(
                "Creatures can still attack this battle phase", ErrorCode.CANNOT_ADVANCE
            )

        previous = state.phase
        previous_side = state.current_side
        new_phase = self.phases.advance()
        state.log(
            previous_side,
            "phase_change",
            f"{previous.value} -> {new_phase.value}",
            from_phase=previous.value,
            to_phase=new_phase.value,
            turn_number=state.turn_number,
        )
        changes = self.phases.run_phase_entry_effects()

        return ActionResult.ok(
            f"Advanced to {new_phase.value} phase",
            detail={
                "previous_phase": previous.value,
                "phase": new_phase.value,
                "turn_number": state.turn_number,
                "current_side": state.current_side.value,
                "changes": changes,
            },
        )

    def _handle_normal_summon(self, action: Action) -> ActionResult:
        payload = action.payload
        return self.summoning.normal_summon(
            action.side, payload.card_id, payload.stance or Stance.ATTACK
        )

    def _handle_set_creature(self, action: Action) -> ActionResult:
        return self.summoning.set_creature(action.side, action.payload.card_id)

    def _handle_flip_summon(self, action: Action) -> ActionResult:
        return self.summoning.flip_summon(action.side, action.payload.target_instance_id)

    def _handle_declare_attack(self, action: Action) -> ActionResult:
        payload = action.payload
        return self.battle.declare_attack(payload.card_id, payload.target_instance_id)

    def _handle_change_stance(self, action: Action) -> ActionResult:
        payload = action.payload
        return self.battle.change_stance(
            action.side, payload.target_instance_id, payload.stance
        )

    def _handle_discard(self, action: Action) -> ActionResult:
        return self.phases.discard(action.side, action.payload.card_id)
