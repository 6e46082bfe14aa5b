"""
Session Module - Manages in-memory duel sessions.

A session represents one duel:
- Created when a client starts a duel
- Owns exactly one DuelEngine
- Serializes action submission with a per-session lock
- Dropped when ended or idle for too long

Sessions are EPHEMERAL: nothing is written to disk. Clients that need
to resume a duel keep its state dict and load it into a new session.
"""

from .manager import DuelSessionManager, DuelSession, LegalActionSet, SessionState

__all__ = [
    "DuelSessionManager",
    "DuelSession",
    "LegalActionSet",
    "SessionState",
]
