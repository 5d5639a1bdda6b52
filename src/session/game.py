import json
import logging
import math
import random
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from ..generator.models import Puzzle, Symbol
from ..generator.puzzle import create_puzzle
from .models import GameConfig, GameResult, ResolutionOutcome, SessionState
from .scheduler import ManualScheduler, Scheduler


logger = logging.getLogger(__name__)


class GameSession(BaseModel):
    """
    State machine for one play-through.

    Owns the level counter, score, accuracy counters, the current puzzle,
    the countdown and the settle delay that follows each answer. Time only
    moves through the injected scheduler.

    States:
        idle -> active -> resolving -> transition -> active ... -> complete

    Attributes:
        config: Game configuration
        state: Current state machine state
        level: Current 1-based level
        score: Raw score (may be negative)
        correct_answers: Puzzles answered correctly
        total_questions: Puzzles loaded so far
        current_puzzle: The puzzle on screen
        is_processing: True from answer acceptance until the settle delay ends
        time_remaining: Countdown ticks left for the current puzzle
        history: Outcome of every resolved puzzle
        on_tick: Called with the remaining ticks after each countdown tick
        on_answer: Called as soon as an answer (or timeout) is accepted
        on_resolved: Called after the settle delay with the level transition

    Listeners and callers receive copies of outcomes; history holds the
    originals.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    config: GameConfig = Field(default_factory=GameConfig)
    state: SessionState = "idle"
    level: int = 1
    score: int = 0
    correct_answers: int = 0
    total_questions: int = 0
    current_puzzle: Optional[Puzzle] = None
    is_processing: bool = False
    time_remaining: int = 0
    history: List[ResolutionOutcome] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

    on_tick: Optional[Callable[[int], None]] = Field(default=None, exclude=True)
    on_answer: Optional[Callable[[ResolutionOutcome], None]] = Field(default=None, exclude=True)
    on_resolved: Optional[Callable[[ResolutionOutcome], None]] = Field(default=None, exclude=True)

    _scheduler: Any = None
    _rng: random.Random = None
    _timer: Any = None
    _settle: Any = None

    def model_post_init(self, __context) -> None:
        """Initialize the random source and default scheduler."""
        self._rng = random.Random(self.config.seed)
        if self._scheduler is None:
            self._scheduler = ManualScheduler()

    @classmethod
    def create(
        cls,
        config: Optional[GameConfig] = None,
        scheduler: Optional[Scheduler] = None,
        **config_kwargs: Any
    ) -> "GameSession":
        """
        Factory method to create a session bound to a scheduler.

        Args:
            config: Optional GameConfig instance
            scheduler: Scheduler for the countdown and settle delay
                (defaults to a ManualScheduler)
            **config_kwargs: Config parameters if config not provided

        Returns:
            An idle GameSession; call start() to begin
        """
        if config is None:
            config = GameConfig(**config_kwargs)

        session = cls(config=config)
        if scheduler is not None:
            session._scheduler = scheduler
        return session

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def total_levels(self) -> int:
        return self.config.total_levels

    @property
    def display_score(self) -> int:
        """Score as shown to the player, never below zero."""
        return max(0, self.score)

    @property
    def accuracy(self) -> int:
        """Percentage of loaded puzzles answered correctly, rounded half up."""
        if self.total_questions == 0:
            return 0
        return math.floor(100 * self.correct_answers / self.total_questions + 0.5)

    @property
    def is_complete(self) -> bool:
        return self.state == "complete"

    def start(self) -> None:
        """Reset all counters and load the level 1 puzzle."""
        self._cancel_timer()
        self._cancel_settle()

        self.level = 1
        self.score = 0
        self.correct_answers = 0
        self.total_questions = 0
        self.current_puzzle = None
        self.is_processing = False
        self.time_remaining = 0
        self.history = []
        self.started_at = datetime.now()
        self.ended_at = None
        self.state = "idle"

        logger.info("Starting game: %d levels", self.total_levels)
        self.load_puzzle()

    def restart(self) -> None:
        """Start over, typically from the complete state."""
        self.start()

    def load_puzzle(self) -> Puzzle:
        """
        Generate the current level's puzzle and start its countdown.

        Returns:
            The new puzzle

        Raises:
            ValueError: If called while a puzzle is active, resolving or the game is complete
            GenerationError: If the grid could not be generated
        """
        if self.state not in ("idle", "transition"):
            raise ValueError(f"Cannot load a puzzle in state '{self.state}'")

        puzzle = create_puzzle(self.level, rng=self._rng, symbols=self.config.symbols)

        self.current_puzzle = puzzle
        self.total_questions += 1
        self.state = "active"
        self._start_timer()

        logger.debug(
            "Level %d/%d loaded (%dx%d)",
            self.level, self.total_levels, puzzle.grid_size, puzzle.grid_size,
        )
        return puzzle

    def submit_answer(self, selected: Optional[Symbol]) -> Optional[ResolutionOutcome]:
        """
        Resolve the current puzzle with a selected symbol.

        None stands for a timeout and always scores as wrong. Ignored while
        an earlier answer is still being processed, or when no puzzle is
        active.

        Args:
            selected: The chosen symbol, or None on timeout

        Returns:
            A copy of the recorded outcome, or None if the call was ignored
        """
        if self.is_processing or self.state != "active":
            logger.debug("Ignoring answer %r in state '%s'", selected, self.state)
            return None

        self.is_processing = True
        self._cancel_timer()
        self.state = "resolving"

        puzzle = self.current_puzzle
        correct = selected is not None and selected == puzzle.correct_answer

        if correct:
            self.score += self.config.points_per_correct
            self.correct_answers += 1
        else:
            self.score += self.config.points_per_wrong

        puzzle.reveal()

        outcome = ResolutionOutcome(
            level=self.level,
            selected=selected,
            correct_answer=puzzle.correct_answer,
            correct=correct,
            timed_out=selected is None,
            score=self.score,
            display_score=self.display_score,
            time_remaining=self.time_remaining,
        )
        self.history.append(outcome)

        if self.on_answer:
            self.on_answer(outcome.model_copy())

        self._settle = self._scheduler.call_later(
            self.config.settle_delay(correct),
            lambda: self._finish_resolution(outcome),
        )
        return outcome.model_copy()

    def _finish_resolution(self, outcome: ResolutionOutcome) -> None:
        """Advance the level once the settle delay has passed."""
        self._settle = None
        self.is_processing = False
        self.level += 1

        outcome.level_advanced = True

        if self.level > self.total_levels:
            self.state = "complete"
            self.ended_at = datetime.now()
            outcome.game_complete = True
            outcome.final_score = self.display_score
            outcome.accuracy = self.accuracy
            logger.info(
                "Game complete: score %d, accuracy %d%%",
                self.display_score, self.accuracy,
            )
        else:
            self.state = "transition"
            outcome.next_level = self.level
            logger.debug("Advancing to level %d", self.level)

        if self.on_resolved:
            self.on_resolved(outcome.model_copy())

        if self.state == "transition" and self.config.auto_advance:
            self.load_puzzle()

    def _start_timer(self) -> None:
        self._cancel_timer()
        self.time_remaining = self.config.time_limit
        self._schedule_tick(self.current_puzzle)

    def _schedule_tick(self, puzzle: Puzzle) -> None:
        self._timer = self._scheduler.call_later(
            self.config.tick_interval, lambda: self._tick(puzzle)
        )

    def _tick(self, puzzle: Puzzle) -> None:
        # A tick belongs to the puzzle that scheduled it
        if self.state != "active" or self.is_processing or puzzle is not self.current_puzzle:
            return
        self._timer = None

        self.time_remaining -= 1
        if self.on_tick:
            self.on_tick(self.time_remaining)

        if self.time_remaining <= 0:
            logger.debug("Level %d timed out", self.level)
            self.submit_answer(None)
        else:
            self._schedule_tick(puzzle)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _cancel_settle(self) -> None:
        if self._settle is not None:
            self._settle.cancel()
            self._settle = None

    def get_state(self) -> Dict:
        """
        Get a read-only snapshot of the session.

        Returns:
            Dictionary containing session state
        """
        puzzle = self.current_puzzle
        return {
            "state": self.state,
            "level": self.level,
            "total_levels": self.total_levels,
            "score": self.score,
            "display_score": self.display_score,
            "correct_answers": self.correct_answers,
            "total_questions": self.total_questions,
            "accuracy": self.accuracy,
            "is_processing": self.is_processing,
            "time_remaining": self.time_remaining,
            "puzzle": {
                "grid": [list(row) for row in puzzle.grid],
                "grid_size": puzzle.grid_size,
                "hidden_cell": list(puzzle.hidden_cell),
                "answer_options": list(puzzle.answer_options),
            } if puzzle else None,
        }

    def get_result(self) -> GameResult:
        """
        Get the play-through summary.

        Returns:
            GameResult with counters, history and timing
        """
        ended_at = self.ended_at or datetime.now()
        duration = (ended_at - self.started_at).total_seconds() if self.started_at else 0.0

        return GameResult(
            config=self.config,
            state=self.state,
            levels_completed=sum(1 for o in self.history if o.level_advanced),
            score=self.score,
            final_score=self.display_score,
            correct_answers=self.correct_answers,
            total_questions=self.total_questions,
            accuracy=self.accuracy,
            history=self.history,
            started_at=self.started_at.isoformat() if self.started_at else "",
            ended_at=ended_at.isoformat(),
            duration_seconds=duration,
        )

    def save_result(self, path: str | Path) -> None:
        """
        Save the play-through summary to a JSON file.

        Args:
            path: Path to save the result file
        """
        result = self.get_result()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            json.dump(result.model_dump(), f, indent=2, default=str)
