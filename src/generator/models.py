"""Data models for puzzle generation."""

from typing import List, Optional, NamedTuple
from pydantic import BaseModel, Field


# Type aliases
Symbol = str
Grid = List[List[Symbol]]

# Default shape alphabet
SHAPES: List[Symbol] = [
    "circle", "triangle", "square", "cross", "star", "diamond", "hexagon"
]

ANSWER_OPTION_COUNT = 4


class ConfigurationError(ValueError):
    """Raised when grid parameters cannot produce a valid puzzle."""


class GenerationError(RuntimeError):
    """Raised when backtracking cannot complete a Latin square."""


class Cell(NamedTuple):
    """A (row, col) coordinate on the grid."""
    row: int
    col: int


class LevelParameters(BaseModel):
    """Grid size and hint count for a level tier."""
    grid_size: int = Field(..., ge=1)
    hint_count: int = Field(..., ge=0)


class Puzzle(BaseModel):
    """
    A playable puzzle derived from one solved grid.

    Attributes:
        level: Level the puzzle was generated for
        grid: Puzzle grid with hint cells filled and all other cells None
        grid_size: Side length N of the grid
        hint_count: Number of hint cells shown
        hidden_cell: The cell whose symbol must be guessed
        correct_answer: Symbol at hidden_cell in the solution
        answer_options: Correct answer plus distractors, in display order
        solution: The full source grid
        revealed: Whether the hidden cell has been filled in
    """

    level: int = Field(default=1, ge=1)
    grid: List[List[Optional[Symbol]]]
    grid_size: int
    hint_count: int
    hidden_cell: Cell
    correct_answer: Symbol
    answer_options: List[Symbol]
    solution: Grid
    revealed: bool = False

    @property
    def hint_cells(self) -> List[Cell]:
        """Cells pre-filled as clues (excludes a revealed hidden cell)."""
        return [
            Cell(r, c)
            for r, row in enumerate(self.grid)
            for c, symbol in enumerate(row)
            if symbol is not None and Cell(r, c) != self.hidden_cell
        ]

    @property
    def symbols_in_solution(self) -> List[Symbol]:
        """Distinct symbols used by the solution, in first-seen order."""
        seen: List[Symbol] = []
        for row in self.solution:
            for symbol in row:
                if symbol not in seen:
                    seen.append(symbol)
        return seen

    def reveal(self) -> None:
        """Fill the hidden cell with the correct answer."""
        row, col = self.hidden_cell
        self.grid[row][col] = self.correct_answer
        self.revealed = True
