"""
Duel State - The single mutable aggregate the engine operates on.

Design principles:
- One owner: a DuelEngine holds the state, managers hold a reference
- Serializable: to_dict()/from_dict() preserve the full structure
- Every card is a CardInstance; side zones hold instance ids
- Per-turn flags live in small explicit records, reset in one place
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy
from enum import Enum
from typing import Any
import time

from .rules import DuelRules


class Side(Enum):
    """The two duelists."""
    PLAYER_1 = "player1"
    PLAYER_2 = "player2"

    @property
    def opponent(self) -> Side:
        return Side.PLAYER_2 if self is Side.PLAYER_1 else Side.PLAYER_1


class Phase(Enum):
    """Turn phases, in order."""
    DRAW = "draw"
    STANDBY = "standby"
    MAIN_1 = "main1"
    BATTLE = "battle"
    MAIN_2 = "main2"
    END = "end"


class ZoneType(Enum):
    """Where a card instance currently is."""
    DECK = "deck"
    HAND = "hand"
    FIELD = "field"
    DISCARD = "discard"
    REMOVED = "removed"
    EXTRA_DECK = "extra_deck"


class Stance(Enum):
    """Battle posture of a field creature."""
    ATTACK = "attack"
    DEFENSE = "defense"
    FACE_DOWN_ATTACK = "face_down_attack"
    FACE_DOWN_DEFENSE = "face_down_defense"

    @property
    def is_face_down(self) -> bool:
        return self in (Stance.FACE_DOWN_ATTACK, Stance.FACE_DOWN_DEFENSE)

    @property
    def is_attack(self) -> bool:
        return self in (Stance.ATTACK, Stance.FACE_DOWN_ATTACK)


class DuelStatus(Enum):
    """Overall duel status. Only moves forward."""
    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


_STATUS_ORDER = [DuelStatus.WAITING, DuelStatus.ACTIVE, DuelStatus.FINISHED]


@dataclass
class CardInstance:
    """
    A placed or held copy of a card.

    Note: This is a runtime instance, not the definition.
    The definition lives in the CardCatalog under card_id.
    """
    instance_id: str
    card_id: str
    owner: Side
    controller: Side
    zone: ZoneType = ZoneType.DECK
    field_slot: str | None = None
    stance: Stance | None = None
    face_up: bool = True
    counters: dict[str, int] = field(default_factory=dict)
    destroyed: bool = False
    turn_placed: int | None = None

    # Turn-scoped flags, reset when the controller's turn starts
    has_attacked: bool = False
    can_attack: bool = True
    can_change_stance: bool = True

    @property
    def on_field(self) -> bool:
        return self.zone == ZoneType.FIELD and self.field_slot is not None

    def reset_turn_flags(self):
        self.has_attacked = False
        self.can_attack = True
        self.can_change_stance = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "card_id": self.card_id,
            "owner": self.owner.value,
            "controller": self.controller.value,
            "zone": self.zone.value,
            "field_slot": self.field_slot,
            "stance": self.stance.value if self.stance else None,
            "face_up": self.face_up,
            "counters": dict(self.counters),
            "destroyed": self.destroyed,
            "turn_placed": self.turn_placed,
            "has_attacked": self.has_attacked,
            "can_attack": self.can_attack,
            "can_change_stance": self.can_change_stance,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CardInstance:
        stance = data.get("stance")
        return cls(
            instance_id=data["instance_id"],
            card_id=data["card_id"],
            owner=Side(data["owner"]),
            controller=Side(data.get("controller", data["owner"])),
            zone=ZoneType(data.get("zone", ZoneType.DECK.value)),
            field_slot=data.get("field_slot"),
            stance=Stance(stance) if stance else None,
            face_up=data.get("face_up", True),
            counters=dict(data.get("counters", {})),
            destroyed=data.get("destroyed", False),
            turn_placed=data.get("turn_placed"),
            has_attacked=data.get("has_attacked", False),
            can_attack=data.get("can_attack", True),
            can_change_stance=data.get("can_change_stance", True),
        )


@dataclass
class SideState:
    """
    State for a single side.

    Zones hold instance ids. The first deck entry is the top card.
    """
    side: Side
    name: str
    life_points: int = 8000

    deck: list[str] = field(default_factory=list)
    hand: list[str] = field(default_factory=list)
    field_slots: dict[str, str | None] = field(default_factory=dict)  # slot -> instance id
    discard: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    extra_deck: list[str] = field(default_factory=list)

    # Per-turn flags
    normal_summoned: bool = False
    may_draw: bool = True

    # Cards still to discard down to the hand limit
    discard_required: int = 0

    def empty_slot(self) -> str | None:
        """First empty field slot in slot order."""
        for slot, occupant in self.field_slots.items():
            if occupant is None:
                return slot
        return None

    def field_instance_ids(self) -> list[str]:
        """Occupied field slots' instance ids, in slot order."""
        return [iid for iid in self.field_slots.values() if iid is not None]

    def reset_turn_flags(self):
        self.normal_summoned = False
        self.may_draw = True
        self.discard_required = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "side": self.side.value,
            "name": self.name,
            "life_points": self.life_points,
            "deck": list(self.deck),
            "hand": list(self.hand),
            "field": dict(self.field_slots),
            "discard": list(self.discard),
            "removed": list(self.removed),
            "extra_deck": list(self.extra_deck),
            "normal_summoned": self.normal_summoned,
            "may_draw": self.may_draw,
            "discard_required": self.discard_required,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SideState:
        return cls(
            side=Side(data["side"]),
            name=data["name"],
            life_points=data["life_points"],
            deck=list(data.get("deck", [])),
            hand=list(data.get("hand", [])),
            field_slots=dict(data.get("field", {})),
            discard=list(data.get("discard", [])),
            removed=list(data.get("removed", [])),
            extra_deck=list(data.get("extra_deck", [])),
            normal_summoned=data.get("normal_summoned", False),
            may_draw=data.get("may_draw", True),
            discard_required=data.get("discard_required", 0),
        )


@dataclass
class LogEntry:
    """One entry of the duel's append-only action log."""
    entry_id: int
    side: Side
    kind: str  # "normal_summon", "direct_attack", "draw_card", ...
    description: str
    timestamp: float
    card_id: str | None = None
    instance_id: str | None = None
    target_instance_id: str | None = None
    damage: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entry_id": self.entry_id,
            "side": self.side.value,
            "kind": self.kind,
            "description": self.description,
            "timestamp": self.timestamp,
            "card_id": self.card_id,
            "instance_id": self.instance_id,
            "target_instance_id": self.target_instance_id,
            "damage": self.damage,
            "metadata": deepcopy(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LogEntry:
        return cls(
            entry_id=data["entry_id"],
            side=Side(data["side"]),
            kind=data["kind"],
            description=data["description"],
            timestamp=data["timestamp"],
            card_id=data.get("card_id"),
            instance_id=data.get("instance_id"),
            target_instance_id=data.get("target_instance_id"),
            damage=data.get("damage"),
            metadata=deepcopy(data.get("metadata", {})),
        )


@dataclass
class DuelState:
    """
    Complete duel state at a point in time.

    This is the canonical state that the managers operate on.
    All changes happen in response to a single action.
    """
    game_id: str
    sides: dict[Side, SideState] = field(default_factory=dict)
    instances: dict[str, CardInstance] = field(default_factory=dict)

    current_side: Side = Side.PLAYER_1
    starting_side: Side = Side.PLAYER_1
    phase: Phase = Phase.DRAW
    turn_number: int = 1
    status: DuelStatus = DuelStatus.WAITING
    winner: Side | None = None

    # History
    action_log: list[LogEntry] = field(default_factory=list)

    # Pending effects, resolved last-in-first-out
    chain_stack: list[str] = field(default_factory=list)

    rules: DuelRules = field(default_factory=DuelRules)
    instance_seq: int = 0

    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def current(self) -> SideState:
        """State of the side to act."""
        return self.sides[self.current_side]

    @property
    def is_active(self) -> bool:
        return self.status == DuelStatus.ACTIVE

    def side_state(self, side: Side) -> SideState:
        return self.sides[side]

    def get_instance(self, instance_id: str | None) -> CardInstance | None:
        if instance_id is None:
            return None
        return self.instances.get(instance_id)

    def field_creatures(self, side: Side) -> list[CardInstance]:
        """Non-destroyed creatures on a side's field, in slot order."""
        creatures = []
        for iid in self.sides[side].field_instance_ids():
            instance = self.instances.get(iid)
            if instance and instance.on_field and not instance.destroyed:
                creatures.append(instance)
        return creatures

    def find_in_hand(self, side: Side, ref: str | None) -> CardInstance | None:
        """
        Resolve a hand reference: an instance id, or else a card id
        (first matching copy in hand order).
        """
        if not ref:
            return None
        hand = self.sides[side].hand
        if ref in hand:
            return self.instances.get(ref)
        for iid in hand:
            instance = self.instances.get(iid)
            if instance and instance.card_id == ref:
                return instance
        return None

    def instances_of(self, side: Side) -> list[str]:
        """Every instance id held by a side, across all its zones."""
        s = self.sides[side]
        return [
            *s.deck,
            *s.hand,
            *s.field_instance_ids(),
            *s.discard,
            *s.removed,
            *s.extra_deck,
        ]

    # =========================================================================
    # Mutation helpers (called by the managers only)
    # =========================================================================

    def new_instance_id(self, card_id: str) -> str:
        """Allocate an instance id that is never reused in this duel."""
        self.instance_seq += 1
        return f"{card_id}#{self.instance_seq}"

    def send_to_discard(self, instance_id: str):
        """Move a field instance to its owner's discard pile."""
        instance = self.instances[instance_id]
        controller = self.sides[instance.controller]
        if instance.field_slot and controller.field_slots.get(instance.field_slot) == instance_id:
            controller.field_slots[instance.field_slot] = None
        self.sides[instance.owner].discard.append(instance_id)

        instance.zone = ZoneType.DISCARD
        instance.field_slot = None
        instance.stance = None
        instance.face_up = True
        instance.destroyed = True

    def set_status(self, status: DuelStatus):
        """Advance the status; it never moves backwards."""
        if _STATUS_ORDER.index(status) < _STATUS_ORDER.index(self.status):
            raise ValueError(f"Cannot move duel from {self.status.value} to {status.value}")
        self.status = status

    def log(
        self,
        side: Side,
        kind: str,
        description: str,
        **details: Any,
    ) -> LogEntry:
        """Append an entry to the action log."""
        now = time.time()
        entry = LogEntry(
            entry_id=len(self.action_log) + 1,
            side=side,
            kind=kind,
            description=description,
            timestamp=now,
            card_id=details.pop("card_id", None),
            instance_id=details.pop("instance_id", None),
            target_instance_id=details.pop("target_instance_id", None),
            damage=details.pop("damage", None),
            metadata=details,
        )
        self.action_log.append(entry)
        self.updated_at = now
        return entry

    def touch(self):
        self.updated_at = time.time()

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Structural, JSON-compatible representation."""
        return {
            "game_id": self.game_id,
            "sides": {side.value: s.to_dict() for side, s in self.sides.items()},
            "instances": {iid: inst.to_dict() for iid, inst in self.instances.items()},
            "current_side": self.current_side.value,
            "starting_side": self.starting_side.value,
            "phase": self.phase.value,
            "turn_number": self.turn_number,
            "status": self.status.value,
            "winner": self.winner.value if self.winner else None,
            "action_log": [entry.to_dict() for entry in self.action_log],
            "chain_stack": list(self.chain_stack),
            "rules": self.rules.to_dict(),
            "instance_seq": self.instance_seq,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "metadata": deepcopy(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DuelState:
        """
        Rebuild a state produced by to_dict().

        Raises ValueError if the data is not a well-formed duel state.
        """
        try:
            sides = {Side(k): SideState.from_dict(v) for k, v in data["sides"].items()}
            instances = {
                iid: CardInstance.from_dict(inst)
                for iid, inst in data.get("instances", {}).items()
            }
            winner = data.get("winner")
            state = cls(
                game_id=data["game_id"],
                sides=sides,
                instances=instances,
                current_side=Side(data["current_side"]),
                starting_side=Side(data.get("starting_side", Side.PLAYER_1.value)),
                phase=Phase(data["phase"]),
                turn_number=data["turn_number"],
                status=DuelStatus(data["status"]),
                winner=Side(winner) if winner else None,
                action_log=[LogEntry.from_dict(e) for e in data.get("action_log", [])],
                chain_stack=list(data.get("chain_stack", [])),
                rules=DuelRules.from_dict(data.get("rules", {})),
                instance_seq=data.get("instance_seq", 0),
                created_at=data.get("created_at", time.time()),
                updated_at=data.get("updated_at", time.time()),
                metadata=deepcopy(data.get("metadata", {})),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed duel state: {e}") from e

        if set(state.sides) != set(Side):
            raise ValueError("Duel state must contain both sides")
        for iid in (i for side in Side for i in state.instances_of(side)):
            if iid not in state.instances:
                raise ValueError(f"Zone references unknown instance {iid}")
        return state

    def clone(self) -> DuelState:
        """Deep copy the state."""
        return deepcopy(self)
