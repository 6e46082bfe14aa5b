"""
Action System - Actions, payloads, and results.

An external actor (human UI, bot, remote agent) submits one Action at a
time to the DuelEngine. Every action produces an ActionResult; rule
violations are results with success=False, never exceptions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Side, Stance


class ActionKind(Enum):
    """Kinds of actions a side can submit."""
    ADVANCE_PHASE = "advance_phase"
    NORMAL_SUMMON = "normal_summon"
    SET_CREATURE = "set_creature"
    FLIP_SUMMON = "flip_summon"
    DECLARE_ATTACK = "declare_attack"
    CHANGE_STANCE = "change_stance"
    DISCARD = "discard"  # Resolve an end-phase hand limit obligation


class ErrorCode(str, Enum):
    """Machine-readable rejection reasons."""
    # Illegal timing
    GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    ILLEGAL_TIMING = "ILLEGAL_TIMING"
    CANNOT_ADVANCE = "CANNOT_ADVANCE"

    # Resources
    INVALID_CARD = "INVALID_CARD"
    NOT_IN_HAND = "NOT_IN_HAND"
    NO_EMPTY_SLOT = "NO_EMPTY_SLOT"
    INSUFFICIENT_TRIBUTES = "INSUFFICIENT_TRIBUTES"

    # State consistency
    INSTANCE_NOT_FOUND = "INSTANCE_NOT_FOUND"
    NOT_CONTROLLER = "NOT_CONTROLLER"
    ALREADY_SUMMONED = "ALREADY_SUMMONED"
    ALREADY_USED = "ALREADY_USED"
    INVALID_STANCE = "INVALID_STANCE"
    INVALID_TARGET = "INVALID_TARGET"
    DIRECT_ATTACK_BLOCKED = "DIRECT_ATTACK_BLOCKED"

    # Contract
    MALFORMED_ACTION = "MALFORMED_ACTION"
    UNKNOWN_ACTION = "UNKNOWN_ACTION"
    HANDLER_ERROR = "HANDLER_ERROR"


@dataclass
class ActionPayload:
    """
    Parameters of an action.

    Different action kinds read different fields:
    - normal_summon / set_creature / discard: card_id (card id or hand instance id)
    - declare_attack: card_id is the attacker instance, target_instance_id optional
    - flip_summon / change_stance: target_instance_id, plus stance for change_stance
    """
    side: Side | None = None
    card_id: str | None = None
    target_instance_id: str | None = None
    stance: Stance | None = None
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class Action:
    """
    A complete action to be applied to the duel state.

    Actions are:
    - Validated before application
    - Applied atomically by one manager
    - Recorded in the duel's action log when they succeed
    """
    kind: ActionKind
    payload: ActionPayload
    timestamp: float | None = None
    action_id: str | None = None

    @property
    def side(self) -> Side | None:
        return self.payload.side

    @classmethod
    def advance_phase(cls, side: Side) -> Action:
        """Factory for phase advance."""
        return cls(kind=ActionKind.ADVANCE_PHASE, payload=ActionPayload(side=side))

    @classmethod
    def normal_summon(cls, side: Side, card_id: str, stance: Stance = Stance.ATTACK) -> Action:
        """Factory for a face-up normal summon."""
        return cls(
            kind=ActionKind.NORMAL_SUMMON,
            payload=ActionPayload(side=side, card_id=card_id, stance=stance),
        )

    @classmethod
    def set_creature(cls, side: Side, card_id: str) -> Action:
        """Factory for a face-down set."""
        return cls(
            kind=ActionKind.SET_CREATURE,
            payload=ActionPayload(side=side, card_id=card_id),
        )

    @classmethod
    def flip_summon(cls, side: Side, instance_id: str) -> Action:
        """Factory for flipping a face-down creature face-up."""
        return cls(
            kind=ActionKind.FLIP_SUMMON,
            payload=ActionPayload(side=side, target_instance_id=instance_id),
        )

    @classmethod
    def declare_attack(cls, side: Side, attacker_id: str, target_id: str | None = None) -> Action:
        """Factory for an attack. No target means a direct attack."""
        return cls(
            kind=ActionKind.DECLARE_ATTACK,
            payload=ActionPayload(side=side, card_id=attacker_id, target_instance_id=target_id),
        )

    @classmethod
    def change_stance(cls, side: Side, instance_id: str, stance: Stance) -> Action:
        """Factory for a stance change."""
        return cls(
            kind=ActionKind.CHANGE_STANCE,
            payload=ActionPayload(side=side, target_instance_id=instance_id, stance=stance),
        )

    @classmethod
    def discard(cls, side: Side, card_id: str) -> Action:
        """Factory for discarding a card from hand."""
        return cls(
            kind=ActionKind.DISCARD,
            payload=ActionPayload(side=side, card_id=card_id),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Action:
        """
        Parse a raw action record.

        Accepts {"side", "kind", "card_id", "target_instance_id", "stance"}.
        Raises ValueError on unknown enum values, missing fields or
        fields of the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError("Action must be a mapping")
        try:
            kind = ActionKind(data["kind"])
            side = Side(data["side"])
        except KeyError as e:
            raise ValueError(f"Action missing field: {e}") from e
        for name in ("card_id", "target_instance_id"):
            if data.get(name) is not None and not isinstance(data[name], str):
                raise ValueError(f"Action field {name} must be a string")
        params = data.get("params") or {}
        if not isinstance(params, dict):
            raise ValueError("Action params must be a mapping")
        stance = data.get("stance")
        return cls(
            kind=kind,
            payload=ActionPayload(
                side=side,
                card_id=data.get("card_id"),
                target_instance_id=data.get("target_instance_id"),
                stance=Stance(stance) if stance else None,
                params=dict(params),
            ),
            action_id=data.get("action_id"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "side": self.payload.side.value if self.payload.side else None,
            "card_id": self.payload.card_id,
            "target_instance_id": self.payload.target_instance_id,
            "stance": self.payload.stance.value if self.payload.stance else None,
        }


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - A human-readable message
    - Structured detail (new instance id, damage, destroyed cards, ...)
    - An error code when rejected
    """
    success: bool
    message: str
    detail: dict[str, Any] | None = None
    error_code: ErrorCode | None = None

    @classmethod
    def failure(cls, message: str, error_code: ErrorCode | None = None) -> ActionResult:
        """Create a rejection."""
        return cls(success=False, message=message, error_code=error_code)

    @classmethod
    def ok(cls, message: str, detail: dict[str, Any] | None = None) -> ActionResult:
        """Create a success result."""
        return cls(success=True, message=message, detail=detail)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "detail": self.detail,
            "error_code": self.error_code.value if self.error_code else None,
        }
