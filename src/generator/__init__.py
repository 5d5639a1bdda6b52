"""Puzzle generation for Shape Grid."""

from .models import (
    Symbol,
    Grid,
    Cell,
    LevelParameters,
    Puzzle,
    ConfigurationError,
    GenerationError,
    SHAPES,
    ANSWER_OPTION_COUNT,
)
from .levels import LEVEL_TIERS, level_parameters, validate_level_tiers
from .grid import generate_grid, fill_grid, is_latin_square
from .puzzle import create_puzzle

__all__ = [
    # Models
    "Symbol",
    "Grid",
    "Cell",
    "LevelParameters",
    "Puzzle",
    "ConfigurationError",
    "GenerationError",
    "SHAPES",
    "ANSWER_OPTION_COUNT",
    # Level table
    "LEVEL_TIERS",
    "level_parameters",
    "validate_level_tiers",
    # Grid generation
    "generate_grid",
    "fill_grid",
    "is_latin_square",
    # Puzzles
    "create_puzzle",
]
