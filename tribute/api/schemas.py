"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients and the duel engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- CARD_NOT_FOUND: Card id is not in the catalog
- INVALID_ACTION: Action record could not be parsed
- INVALID_STATE: Submitted duel state is malformed
- VALIDATION_ERROR: Request body failed validation
- INTERNAL_ERROR: Unexpected server fault

A rejected game action is not an error: it returns 200 with success=false.
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    FINISHED = "finished"


class SideName(str, Enum):
    PLAYER_1 = "player1"
    PLAYER_2 = "player2"


class ActionKindName(str, Enum):
    """Kinds of actions a client can submit."""
    ADVANCE_PHASE = "advance_phase"
    NORMAL_SUMMON = "normal_summon"
    SET_CREATURE = "set_creature"
    FLIP_SUMMON = "flip_summon"
    DECLARE_ATTACK = "declare_attack"
    CHANGE_STANCE = "change_stance"
    DISCARD = "discard"


class StanceName(str, Enum):
    ATTACK = "attack"
    DEFENSE = "defense"
    FACE_DOWN_ATTACK = "face_down_attack"
    FACE_DOWN_DEFENSE = "face_down_defense"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    CARD_NOT_FOUND = "CARD_NOT_FOUND"
    INVALID_ACTION = "INVALID_ACTION"
    INVALID_STATE = "INVALID_STATE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """Card definition for display."""
    card_id: str
    name: str
    category: str = Field(description="creature, effect, trap")
    description: str
    rarity: str
    level: Optional[int] = None
    attack: Optional[int] = None
    defense: Optional[int] = None
    effect_text: Optional[str] = None


class SideSummaryInfo(BaseModel):
    """Public counts for one side."""
    side: SideName
    name: str
    life_points: int
    hand_size: int
    deck_size: int
    field_creatures: int
    discard_size: int


class ActionInfo(BaseModel):
    """A fully specified action."""
    side: SideName
    kind: ActionKindName
    card_id: Optional[str] = Field(
        None, description="Hand card (id or instance id), or the attacker instance id"
    )
    target_instance_id: Optional[str] = Field(
        None, description="Attack target, or the creature to flip or change stance"
    )
    stance: Optional[StanceName] = None


# =============================================================================
# Request Models
# =============================================================================

class CreateDuelRequest(BaseModel):
    """Request to start a new duel."""
    seed: Optional[int] = Field(None, description="Seed for reproducible decks")
    player1_name: str = Field("Player 1", description="Display name for player1")
    player2_name: str = Field("AI Duelist", description="Display name for player2")


class ActionRequest(ActionInfo):
    """One action submitted by the side to act."""


class LoadStateRequest(BaseModel):
    """A duel state previously returned by GET /state."""
    state: dict[str, Any] = Field(..., description="Structural duel state")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SummaryResponse(BaseModel):
    """Derived, read-only view of a duel."""
    session_id: str
    game_id: str
    status: SessionStatus
    turn_number: int
    phase: str
    current_side: SideName
    winner: Optional[SideName] = None
    sides: list[SideSummaryInfo] = Field(default_factory=list)
    api_version: str = "v1"


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    created_at: float = 0.0
    summary: SummaryResponse
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class DuelStateResponse(BaseModel):
    """Full structural duel state."""
    session_id: str
    state: dict[str, Any]
    api_version: str = "v1"


class ActionResultResponse(BaseModel):
    """Outcome of one submitted action."""
    session_id: str
    success: bool
    message: str
    error_code: Optional[str] = Field(
        None, description="Engine rejection code, e.g. NOT_YOUR_TURN"
    )
    detail: Optional[dict[str, Any]] = None
    summary: SummaryResponse
    api_version: str = "v1"


class LegalActionsResponse(BaseModel):
    """What the side to act may do now."""
    session_id: str
    current_side: SideName
    phase: str
    available_kinds: list[ActionKindName] = Field(default_factory=list)
    actions: list[ActionInfo] = Field(default_factory=list)
    api_version: str = "v1"


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    active_sessions: int = 0
