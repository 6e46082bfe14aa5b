"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions
3. Formats responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateDuelRequest,
    ActionRequest,
    LoadStateRequest,
    # Responses
    SessionResponse,
    SummaryResponse,
    DuelStateResponse,
    ActionResultResponse,
    LegalActionsResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    SideSummaryInfo,
    ActionInfo,
    # Enums
    SessionStatus,
    ErrorCode,
)
from ..catalog import CardCatalog, default_catalog
from ..engine_core.action import Action
from ..engine_core.state import Side
from ..session import DuelSessionManager, DuelSession, SessionState

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Start a duel
        session_response = service.create_duel(CreateDuelRequest(seed=1))

        # Submit an action
        result = service.submit_action(session_id, ActionRequest(...))
    """
    session_manager: DuelSessionManager = field(default_factory=DuelSessionManager)
    catalog: CardCatalog = field(default_factory=default_catalog)

    # Idle sessions older than this are dropped when a new duel starts
    session_ttl: float = 3600

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_duel(self, request: CreateDuelRequest) -> SessionResponse:
        """Create a session with a freshly dealt duel."""
        removed = self.session_manager.cleanup_stale_sessions(self.session_ttl)
        if removed:
            logger.info("Dropped %d stale session(s)", removed)

        session = self.session_manager.create_session(
            seed=request.seed,
            names={
                Side.PLAYER_1: request.player1_name,
                Side.PLAYER_2: request.player2_name,
            },
        )
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def list_sessions(self) -> list[str]:
        return [s.session_id for s in self.session_manager.list_sessions()]

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    # =========================================================================
    # Duel state
    # =========================================================================

    def get_state(self, session_id: str) -> DuelStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return DuelStateResponse(session_id=session_id, state=session.snapshot().to_dict())

    def load_state(
        self, session_id: str, request: LoadStateRequest
    ) -> SessionResponse | ErrorResponse:
        """Replace a session's duel with a saved state."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        try:
            session.replace_state(request.state)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_STATE)
        return self._session_to_response(session)

    def get_summary(self, session_id: str) -> SummaryResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._summary(session)

    # =========================================================================
    # Actions
    # =========================================================================

    def get_legal_actions(self, session_id: str) -> LegalActionsResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        legal = session.legal_actions()
        return LegalActionsResponse(
            session_id=session_id,
            current_side=legal.current_side.value,
            phase=legal.phase.value,
            available_kinds=[k.value for k in legal.kinds],
            actions=[ActionInfo(**a.to_dict()) for a in legal.actions],
        )

    def submit_action(
        self, session_id: str, request: ActionRequest
    ) -> ActionResultResponse | ErrorResponse:
        """
        Submit one action.

        Engine rejections come back as success=false, not as errors.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        try:
            action = Action.from_dict(request.model_dump(mode="json"))
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_ACTION)

        result = session.submit(action)
        return ActionResultResponse(
            session_id=session_id,
            success=result.success,
            message=result.message,
            error_code=result.error_code.value if result.error_code else None,
            detail=result.detail,
            summary=self._summary(session),
        )

    # =========================================================================
    # Catalog
    # =========================================================================

    def get_card(self, card_id: str) -> CardInfo | ErrorResponse:
        card = self.catalog.get_card_by_id(card_id)
        if card is None:
            return ErrorResponse(
                error=f"Card {card_id} not found",
                error_code=ErrorCode.CARD_NOT_FOUND,
            )
        return CardInfo(
            card_id=card.id,
            name=card.name,
            category=card.category.value,
            description=card.description,
            rarity=card.rarity.value,
            level=card.level if card.is_creature else None,
            attack=card.attack if card.is_creature else None,
            defense=card.defense if card.is_creature else None,
            effect_text=card.effect_text,
        )

    def active_session_count(self) -> int:
        return len(self.session_manager.list_active_sessions())

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _status(self, session: DuelSession) -> SessionStatus:
        if session.state == SessionState.ACTIVE:
            return SessionStatus.ACTIVE
        return SessionStatus.FINISHED

    def _summary(self, session: DuelSession) -> SummaryResponse:
        summary = session.summary()
        return SummaryResponse(
            session_id=session.session_id,
            game_id=summary.game_id,
            status=self._status(session),
            turn_number=summary.turn_number,
            phase=summary.phase.value,
            current_side=summary.current_side.value,
            winner=summary.winner.value if summary.winner else None,
            sides=[
                SideSummaryInfo(side=side.value, **s.to_dict())
                for side, s in summary.sides.items()
            ],
        )

    def _session_to_response(self, session: DuelSession) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=self._status(session),
            created_at=session.created_at,
            summary=self._summary(session),
        )
