"""
Pydantic models for the session layer.

Configuration, per-answer outcomes and the final game result. The
GameSession state machine itself lives in game.py.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, model_validator

from ..generator.levels import validate_level_tiers
from ..generator.models import SHAPES, Symbol


# Type aliases
SessionState = Literal["idle", "active", "resolving", "transition", "complete"]


class GameConfig(BaseModel):
    """Configuration for a play-through."""
    total_levels: int = Field(default=100, ge=1)
    points_per_correct: int = 10
    points_per_wrong: int = Field(default=-5, le=0)
    time_limit: int = Field(default=15, ge=1)  # Countdown ticks per puzzle
    tick_interval: float = Field(default=1.0, gt=0)
    correct_settle_delay: float = Field(default=1.5, ge=0)
    wrong_settle_delay: float = Field(default=2.0, ge=0)
    symbols: List[Symbol] = Field(default_factory=lambda: list(SHAPES))
    seed: Optional[int] = None
    auto_advance: bool = True

    @model_validator(mode="after")
    def _check_symbols(self) -> "GameConfig":
        if len(set(self.symbols)) != len(self.symbols):
            raise ValueError("Symbols must be unique")
        validate_level_tiers(self.symbols)
        return self

    def settle_delay(self, correct: bool) -> float:
        """Pause before advancing, longer after a wrong answer."""
        return self.correct_settle_delay if correct else self.wrong_settle_delay


class ResolutionOutcome(BaseModel):
    """
    Result of resolving one puzzle.

    Emitted twice: once when the answer is accepted (level_advanced False)
    and again after the settle delay with the transition filled in.
    """
    level: int
    selected: Optional[Symbol] = None
    correct_answer: Symbol
    correct: bool
    timed_out: bool = False
    score: int
    display_score: int
    time_remaining: int = 0
    level_advanced: bool = False
    next_level: Optional[int] = None
    game_complete: bool = False
    final_score: Optional[int] = None
    accuracy: Optional[int] = None


class GameResult(BaseModel):
    """Summary of a play-through."""
    config: GameConfig
    state: SessionState
    levels_completed: int = 0
    score: int = 0
    final_score: int = 0
    correct_answers: int = 0
    total_questions: int = 0
    accuracy: int = 0
    history: List[ResolutionOutcome] = Field(default_factory=list)
    started_at: str = ""
    ended_at: str = ""
    duration_seconds: float = 0.0
