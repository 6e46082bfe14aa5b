"""
API Module - HTTP interface to the duel engine.

Exposes the engine via REST API. A client:
1. Starts a duel session
2. Reads the summary and the legal actions
3. Submits one action at a time
4. Saves and restores the full duel state when it needs to

All state is session-scoped and in-memory.
"""

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
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateDuelRequest",
    "ActionRequest",
    "LoadStateRequest",
    # Responses
    "SessionResponse",
    "SummaryResponse",
    "DuelStateResponse",
    "ActionResultResponse",
    "LegalActionsResponse",
    "ErrorResponse",
    # Shared
    "CardInfo",
    "SideSummaryInfo",
    "ActionInfo",
    # Service
    "APIService",
    "create_app",
]
