"""
FastAPI Application - REST API for the duel engine.

Endpoints:
    POST   /api/v1/duels                    Start a duel session
    GET    /api/v1/duels                    List sessions
    GET    /api/v1/duels/{id}               Get session status
    DELETE /api/v1/duels/{id}               End session
    GET    /api/v1/duels/{id}/state         Full duel state
    PUT    /api/v1/duels/{id}/state         Replace duel state
    GET    /api/v1/duels/{id}/summary       Summary projection
    GET    /api/v1/duels/{id}/actions       Legal actions for the side to act
    POST   /api/v1/duels/{id}/actions       Submit one action
    GET    /api/v1/cards/{card_id}          Catalog lookup
    GET    /health                          Health check

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Union
import logging
import os

from .. import __version__

# Environment configuration
TRIBUTE_ENV = os.getenv("TRIBUTE_ENV", "development")
TRIBUTE_LOG_LEVEL = os.getenv("TRIBUTE_LOG_LEVEL", "INFO")
TRIBUTE_SESSION_TTL = float(os.getenv("TRIBUTE_SESSION_TTL", "3600"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    logging.basicConfig(
        level=TRIBUTE_LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from fastapi import FastAPI, Query, Request
    from fastapi.exceptions import RequestValidationError
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    from .service import APIService
    from .schemas import (
        # Request models
        CreateDuelRequest,
        ActionRequest,
        LoadStateRequest,
        # Response models
        SessionResponse,
        SummaryResponse,
        DuelStateResponse,
        ActionResultResponse,
        LegalActionsResponse,
        ErrorResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        CardInfo,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Tribute Duel Engine API",
        description="""
Trading card duel engine - two sides, five creature slots, 8000 life points.

## Playing a duel

1. `POST /api/v1/duels` deals a new duel
2. `GET /api/v1/duels/{id}/actions` lists what the side to act may do
3. `POST /api/v1/duels/{id}/actions` submits one action

A rejected action is a normal outcome: the response is 200 with
`success=false` and an engine `error_code` such as `NOT_YOUR_TURN`.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `CARD_NOT_FOUND` | Card id not in the catalog |
| `INVALID_ACTION` | Action record could not be parsed |
| `INVALID_STATE` | Submitted duel state is malformed |
| `VALIDATION_ERROR` | Request body failed validation |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(session_ttl=TRIBUTE_SESSION_TTL)

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: dict | None = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_to_response(error: ErrorResponse) -> JSONResponse:
        status_code = {
            ErrorCode.SESSION_NOT_FOUND: 404,
            ErrorCode.CARD_NOT_FOUND: 404,
            ErrorCode.INTERNAL_ERROR: 500,
        }.get(error.error_code, 400)
        return make_error_response(error.error_code, error.error, status_code, error.details)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status_code=422,
            details={"errors": [str(e.get("msg")) for e in exc.errors()]},
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return make_error_response(
            ErrorCode.INTERNAL_ERROR,
            "Internal server error",
            status_code=500,
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/duels",
        response_model=SessionResponse,
        responses={422: {"model": ErrorResponse}},
        tags=["Duels"],
        summary="Start a new duel",
    )
    async def create_duel(body: CreateDuelRequest) -> SessionResponse:
        """
        Deal a new duel: random 40-card decks, five-card hands,
        player1 to act in the draw phase of turn 1.
        """
        return api_service.create_duel(body)

    @app.get(
        "/api/v1/duels",
        response_model=SessionListResponse,
        tags=["Duels"],
        summary="List sessions",
    )
    async def list_duels() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/duels/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Duels"],
        summary="Get session status",
    )
    async def get_duel(session_id: str) -> Union[SessionResponse, JSONResponse]:
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.delete(
        "/api/v1/duels/{session_id}",
        response_model=EndSessionResponse,
        tags=["Duels"],
        summary="End a duel session",
    )
    async def end_duel(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a session and release its duel."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # State Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/duels/{session_id}/state",
        response_model=DuelStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["State"],
        summary="Get the full duel state",
    )
    async def get_state(session_id: str) -> Union[DuelStateResponse, JSONResponse]:
        """The structural duel state; PUT it back to resume later."""
        response = api_service.get_state(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.put(
        "/api/v1/duels/{session_id}/state",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Malformed duel state"},
            404: {"model": ErrorResponse},
        },
        tags=["State"],
        summary="Replace the duel state",
    )
    async def put_state(
        session_id: str, body: LoadStateRequest
    ) -> Union[SessionResponse, JSONResponse]:
        response = api_service.load_state(session_id, body)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.get(
        "/api/v1/duels/{session_id}/summary",
        response_model=SummaryResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["State"],
        summary="Get the duel summary",
    )
    async def get_summary(session_id: str) -> Union[SummaryResponse, JSONResponse]:
        response = api_service.get_summary(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    # =========================================================================
    # Action Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/duels/{session_id}/actions",
        response_model=LegalActionsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Actions"],
        summary="List legal actions",
    )
    async def get_actions(session_id: str) -> Union[LegalActionsResponse, JSONResponse]:
        response = api_service.get_legal_actions(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.post(
        "/api/v1/duels/{session_id}/actions",
        response_model=ActionResultResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Unparseable action"},
            404: {"model": ErrorResponse},
        },
        tags=["Actions"],
        summary="Submit one action",
    )
    async def submit_action(
        session_id: str, body: ActionRequest
    ) -> Union[ActionResultResponse, JSONResponse]:
        """
        Submit one action for the side to act.

        **Request Body:**
        ```json
        {"side": "player1", "kind": "normal_summon", "card_id": "dark_elf", "stance": "attack"}
        ```
        """
        response = api_service.submit_action(session_id, body)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    # =========================================================================
    # Catalog Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/cards/{card_id}",
        response_model=CardInfo,
        responses={404: {"model": ErrorResponse}},
        tags=["Catalog"],
        summary="Look up a card",
    )
    async def get_card(card_id: str) -> Union[CardInfo, JSONResponse]:
        response = api_service.get_card(card_id)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    # =========================================================================
    # System Endpoints
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="tribute-engine",
            version=__version__,
            active_sessions=api_service.active_session_count(),
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Tribute Duel Engine API",
            "version": __version__,
            "environment": TRIBUTE_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn tribute.api.app:app
app = create_app()
