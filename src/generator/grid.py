"""Latin square generation by randomized backtracking."""

import logging
import random
from typing import List, Optional, Sequence

from .models import Cell, ConfigurationError, GenerationError, Grid, Symbol


logger = logging.getLogger(__name__)


def _is_legal(grid: List[List[Optional[Symbol]]], cell: Cell, symbol: Symbol) -> bool:
    """A symbol is legal if it is absent from the cell's row and column."""
    if symbol in grid[cell.row]:
        return False
    return all(row[cell.col] != symbol for row in grid)


def _fill(
    grid: List[List[Optional[Symbol]]],
    symbols: Sequence[Symbol],
    index: int,
    rng: random.Random,
) -> bool:
    """Fill cells from `index` onwards in row-major order; False when exhausted."""
    size = len(grid)
    if index == size * size:
        return True

    cell = Cell(index // size, index % size)
    candidates = list(symbols)
    rng.shuffle(candidates)

    for symbol in candidates:
        if not _is_legal(grid, cell, symbol):
            continue
        grid[cell.row][cell.col] = symbol
        if _fill(grid, symbols, index + 1, rng):
            return True
        grid[cell.row][cell.col] = None

    return False


def generate_grid(
    size: int,
    symbols: Sequence[Symbol],
    rng: Optional[random.Random] = None,
) -> Grid:
    """
    Generate a random Latin square.

    Picks `size` distinct symbols from the pool, then fills the grid cell by
    cell, backtracking whenever a cell has no legal candidate left.

    Args:
        size: Side length of the grid
        symbols: Symbol pool to draw from (must hold at least `size` distinct symbols)
        rng: Random source; a fresh unseeded one is used if omitted

    Returns:
        A fully filled size x size grid

    Raises:
        ConfigurationError: If size is invalid for the pool
        GenerationError: If no fill exists for the chosen symbols
    """
    pool = list(dict.fromkeys(symbols))
    if size < 1:
        raise ConfigurationError(f"Grid size must be >= 1, got {size}")
    if size > len(pool):
        raise ConfigurationError(
            f"Grid size {size} exceeds symbol pool size ({len(pool)})"
        )

    rng = rng or random.Random()
    chosen = rng.sample(pool, size)
    return fill_grid(size, chosen, rng)


def fill_grid(size: int, symbols: Sequence[Symbol], rng: random.Random) -> Grid:
    """
    Fill an empty size x size grid using exactly the given symbols.

    Raises:
        GenerationError: If backtracking exhausts every candidate
    """
    grid: List[List[Optional[Symbol]]] = [[None] * size for _ in range(size)]

    if not _fill(grid, symbols, 0, rng):
        raise GenerationError(
            f"Could not fill a {size}x{size} grid with {len(symbols)} symbols"
        )

    logger.debug("Generated %dx%d grid from %s", size, size, list(symbols))
    return grid


def is_latin_square(grid: Sequence[Sequence[Optional[Symbol]]]) -> bool:
    """Check that the grid is square, fully filled and has no repeats in any row or column."""
    size = len(grid)
    if size == 0 or any(len(row) != size for row in grid):
        return False

    for row in grid:
        if None in row or len(set(row)) != size:
            return False

    for col in range(size):
        column = [grid[r][col] for r in range(size)]
        if len(set(column)) != size:
            return False

    return len({symbol for row in grid for symbol in row}) == size
