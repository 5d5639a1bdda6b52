import logging
import random
from typing import List, Optional, Sequence

from .grid import generate_grid
from .levels import level_parameters
from .models import ANSWER_OPTION_COUNT, SHAPES, Cell, ConfigurationError, Puzzle, Symbol


logger = logging.getLogger(__name__)


def create_puzzle(
    level: int,
    rng: Optional[random.Random] = None,
    symbols: Sequence[Symbol] = SHAPES,
) -> Puzzle:
    """
    Build a playable puzzle for a level.

    Generates a solved grid, hides one random cell, reveals `hint_count`
    other cells as clues and builds the answer options from symbols that
    actually appear in the solution.

    Args:
        level: 1-based level number
        rng: Random source; a fresh unseeded one is used if omitted
        symbols: Symbol pool for the grid

    Returns:
        A new Puzzle

    Raises:
        ValueError: If level is below 1
        ConfigurationError: If the level's parameters cannot fit the grid
        GenerationError: If the grid could not be generated
    """
    rng = rng or random.Random()
    params = level_parameters(level)
    size = params.grid_size

    if params.hint_count + 1 > size * size:
        raise ConfigurationError(
            f"Hint count {params.hint_count} leaves no hidden cell on a {size}x{size} grid"
        )

    solution = generate_grid(size, symbols, rng)

    positions = [Cell(r, c) for r in range(size) for c in range(size)]
    rng.shuffle(positions)

    hidden_cell = positions[0]
    correct_answer = solution[hidden_cell.row][hidden_cell.col]

    grid: List[List[Optional[Symbol]]] = [[None] * size for _ in range(size)]
    for cell in positions[1:1 + params.hint_count]:
        grid[cell.row][cell.col] = solution[cell.row][cell.col]

    # Distractors only come from this grid's symbols, never the full alphabet
    in_solution = list(dict.fromkeys(symbol for row in solution for symbol in row))
    distractors = [s for s in in_solution if s != correct_answer]
    rng.shuffle(distractors)
    distractors = distractors[:ANSWER_OPTION_COUNT - 1]

    if len(distractors) < ANSWER_OPTION_COUNT - 1:
        raise ConfigurationError(
            f"A {size}x{size} grid cannot supply {ANSWER_OPTION_COUNT - 1} distractors"
        )

    answer_options = [correct_answer] + distractors
    rng.shuffle(answer_options)

    logger.debug(
        "Level %d puzzle: %dx%d, hidden %s, %d hints",
        level, size, size, tuple(hidden_cell), params.hint_count,
    )

    return Puzzle(
        level=level,
        grid=grid,
        grid_size=size,
        hint_count=params.hint_count,
        hidden_cell=hidden_cell,
        correct_answer=correct_answer,
        answer_options=answer_options,
        solution=solution,
    )
