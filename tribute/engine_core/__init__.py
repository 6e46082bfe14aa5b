"""
Engine Core - Deterministic duel state management and rule enforcement.

The engine is the runtime that:
1. Builds a DuelState for a new duel
2. Advances the turn through its phases
3. Validates and applies summons, attacks and stance changes
4. Generates legal actions
5. Decides the winner
"""

from .rules import DuelRules
from .state import (
    DuelState, SideState, CardInstance, LogEntry,
    Side, Phase, ZoneType, Stance, DuelStatus,
)
from .action import Action, ActionKind, ActionPayload, ActionResult, ErrorCode
from .phases import PhaseManager
from .summoning import SummoningManager
from .battle import BattleManager
from .action_generator import ActionGenerator, legal_actions, is_legal
from .setup import create_duel
from .engine import DuelEngine, DuelSummary, SideSummary

__all__ = [
    "DuelRules",
    "DuelState",
    "SideState",
    "CardInstance",
    "LogEntry",
    "Side",
    "Phase",
    "ZoneType",
    "Stance",
    "DuelStatus",
    "Action",
    "ActionKind",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "PhaseManager",
    "SummoningManager",
    "BattleManager",
    "ActionGenerator",
    "legal_actions",
    "is_legal",
    "create_duel",
    "DuelEngine",
    "DuelSummary",
    "SideSummary",
]
