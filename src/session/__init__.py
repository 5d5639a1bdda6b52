"""Game session state machine for Shape Grid."""

from .models import (
    SessionState,
    GameConfig,
    ResolutionOutcome,
    GameResult,
)
from .scheduler import Scheduler, ManualScheduler, AsyncioScheduler, TimerHandle
from .game import GameSession

__all__ = [
    "SessionState",
    "GameConfig",
    "ResolutionOutcome",
    "GameResult",
    "Scheduler",
    "ManualScheduler",
    "AsyncioScheduler",
    "TimerHandle",
    "GameSession",
]
