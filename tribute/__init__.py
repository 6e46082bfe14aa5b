"""
Tribute - Trading Card Duel Engine

A deterministic, rules-driven engine for two-sided creature card duels.
External actors (a UI, a bot, a remote agent) submit one action at a
time; the engine provides:
- Duel state management
- Phase progression and turn handover
- Summoning with tribute costs
- Battle resolution and win detection
- Legal action generation
"""

__version__ = "0.1.0"
