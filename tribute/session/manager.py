"""
Session Manager - Creates and manages duel sessions.

The duel engine is single-threaded and assumes one caller at a time.
A web server handles requests concurrently, so every operation that
reads or mutates a session's duel runs under that session's lock.

PERSISTENCE RULES:
- NO database
- A session lives in memory until ended or expired
- A duel can be resumed by loading a saved state into a session
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import threading
import time
import uuid

from ..catalog import CardCatalog
from ..engine_core.engine import DuelEngine, DuelSummary
from ..engine_core.action import Action, ActionKind, ActionResult
from ..engine_core.rules import DuelRules
from ..engine_core.setup import create_duel
from ..engine_core.state import DuelState, Phase, Side

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a duel session."""
    ACTIVE = "active"  # Duel in progress
    FINISHED = "finished"  # Duel has a result, session still readable
    ENDED = "ended"  # Removed from the manager


@dataclass
class LegalActionSet:
    """What the side to act may do, with the phase and side it applies to."""
    phase: Phase
    current_side: Side
    kinds: list[ActionKind] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)


@dataclass
class DuelSession:
    """
    One duel behind a lock.

    Use submit(), snapshot() and replace_state() instead of touching
    the engine directly from concurrent code.
    """
    session_id: str
    engine: DuelEngine
    created_at: float
    last_activity: float
    ended: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def state(self) -> SessionState:
        if self.ended:
            return SessionState.ENDED
        if self.engine.is_game_over:
            return SessionState.FINISHED
        return SessionState.ACTIVE

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    def submit(self, action: Action | dict[str, Any]) -> ActionResult:
        """Apply one action to the duel."""
        with self.lock:
            result = self.engine.process_action(action)
            self.last_activity = time.time()
            return result

    def snapshot(self) -> DuelState:
        """Private copy of the current duel state."""
        with self.lock:
            return self.engine.get_state().clone()

    def summary(self) -> DuelSummary:
        with self.lock:
            return self.engine.summary()

    def legal_actions(self) -> LegalActionSet:
        """Available action kinds and legal actions, read in one locked step."""
        with self.lock:
            state = self.engine.get_state()
            return LegalActionSet(
                phase=state.phase,
                current_side=state.current_side,
                kinds=self.engine.available_action_kinds(),
                actions=self.engine.legal_actions(),
            )

    def replace_state(self, state: DuelState | dict[str, Any]):
        """
        Adopt a saved state.

        Raises ValueError for a malformed state; the old state is kept then.
        """
        if isinstance(state, dict):
            state = DuelState.from_dict(state)
        with self.lock:
            self.engine.load_state(state)
            self.last_activity = time.time()


class DuelSessionManager:
    """
    Manages duel sessions.

    Responsibilities:
    - Create sessions with a fresh or loaded duel
    - Track sessions by id
    - Clean up ended and idle sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, catalog: CardCatalog | None = None, rules: DuelRules | None = None):
        self.catalog = catalog
        self.rules = rules
        self._sessions: dict[str, DuelSession] = {}
        self._lock = threading.Lock()

    def create_session(
        self,
        seed: int | None = None,
        names: dict[Side, str] | None = None,
        state: DuelState | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> DuelSession:
        """
        Create a new duel session.

        Args:
            seed: Seed for deck shuffling, for reproducible duels
            names: Display names per side
            state: An existing duel state to resume instead of a new duel
            metadata: Free-form data kept with the session

        Returns:
            New DuelSession ready for actions
        """
        session_id = str(uuid.uuid4())
        if state is None:
            state = create_duel(
                seed=seed,
                names=names,
                rules=self.rules,
                catalog=self.catalog,
                game_id=f"duel_{session_id[:8]}",
            )
        engine = DuelEngine(state=state, catalog=self.catalog)

        now = time.time()
        session = DuelSession(
            session_id=session_id,
            engine=engine,
            created_at=now,
            last_activity=now,
            metadata=dict(metadata or {}),
        )
        with self._lock:
            self._sessions[session_id] = session

        logger.info("Created session %s for duel %s", session_id, state.game_id)
        return session

    def get_session(self, session_id: str) -> DuelSession | None:
        """Get a session by ID."""
        with self._lock:
            return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop it from memory.

        Returns False if there was no such session.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if not session:
            return False

        session.ended = True
        session.metadata["end_reason"] = reason
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_sessions(self) -> list[DuelSession]:
        with self._lock:
            return list(self._sessions.values())

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose duel is still in progress."""
        return [s.session_id for s in self.list_sessions() if s.is_active()]

    def cleanup_stale_sessions(self, max_age_seconds: float = 3600) -> int:
        """
        End sessions idle for longer than max_age_seconds.

        Returns the number of sessions removed.
        """
        cutoff = time.time() - max_age_seconds
        stale = [
            s.session_id for s in self.list_sessions()
            if s.last_activity < cutoff
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return len(stale)

