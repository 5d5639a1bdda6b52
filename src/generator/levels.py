from typing import List, Optional, Sequence, Tuple

from .models import ANSWER_OPTION_COUNT, ConfigurationError, LevelParameters, Symbol


# (last level of tier, parameters); None covers every level after the last bound
LEVEL_TIERS: List[Tuple[Optional[int], LevelParameters]] = [
    (30, LevelParameters(grid_size=4, hint_count=5)),
    (70, LevelParameters(grid_size=5, hint_count=6)),
    (None, LevelParameters(grid_size=4, hint_count=5)),  # Back to 4x4 for the final stretch
]


def level_parameters(level: int) -> LevelParameters:
    """
    Look up the grid size and hint count for a level.

    Args:
        level: 1-based level number

    Returns:
        LevelParameters for the tier containing the level

    Raises:
        ValueError: If level is below 1
    """
    if level < 1:
        raise ValueError(f"Level must be >= 1, got {level}")

    for last_level, params in LEVEL_TIERS:
        if last_level is None or level <= last_level:
            return params

    raise ConfigurationError(f"No level tier covers level {level}")


def validate_level_tiers(
    symbols: Sequence[Symbol],
    tiers: Optional[List[Tuple[Optional[int], LevelParameters]]] = None,
) -> None:
    """
    Check that every tier can produce a valid puzzle from the given alphabet.

    Raises:
        ConfigurationError: On the first tier that cannot
    """
    tiers = LEVEL_TIERS if tiers is None else tiers
    alphabet_size = len(set(symbols))

    if not tiers or tiers[-1][0] is not None:
        raise ConfigurationError("Level tiers must end with an open-ended tier")

    for _, params in tiers:
        size = params.grid_size
        if size > alphabet_size:
            raise ConfigurationError(
                f"Grid size {size} exceeds alphabet size ({alphabet_size})"
            )
        if size < ANSWER_OPTION_COUNT:
            raise ConfigurationError(
                f"Grid size {size} cannot supply {ANSWER_OPTION_COUNT} distinct answer options"
            )
        if params.hint_count + 1 > size * size:
            raise ConfigurationError(
                f"Hint count {params.hint_count} leaves no hidden cell on a {size}x{size} grid"
            )
