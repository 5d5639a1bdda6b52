from typing import Dict, List, Optional, Sequence

from ..generator.models import Puzzle, Symbol


SYMBOL_GLYPHS: Dict[str, str] = {
    "circle": "●",
    "triangle": "▲",
    "square": "■",
    "cross": "✚",
    "star": "★",
    "diamond": "◆",
    "hexagon": "⬢",
}


def glyph(symbol: Optional[Symbol]) -> str:
    """Map a symbol to a single display character."""
    if symbol is None:
        return "."
    return SYMBOL_GLYPHS.get(symbol, symbol[:1].upper())


def render_grid(grid: Sequence[Sequence[Optional[Symbol]]], hidden: Optional[tuple] = None) -> str:
    """Render the grid to a string, marking the hidden cell with '?'."""
    lines = []
    for r, row in enumerate(grid):
        cells = []
        for c, symbol in enumerate(row):
            if hidden is not None and (r, c) == tuple(hidden) and symbol is None:
                cells.append("?")
            else:
                cells.append(glyph(symbol))
        lines.append(" ".join(cells))
    return "\n".join(lines)


def render_options(options: Sequence[Symbol]) -> str:
    """Render answer options numbered from 1, matching the answer keys."""
    return "  ".join(f"[{i}] {glyph(s)} {s}" for i, s in enumerate(options, start=1))


def render_puzzle(puzzle: Puzzle) -> str:
    """Render the puzzle grid followed by its answer options."""
    parts: List[str] = [
        render_grid(puzzle.grid, puzzle.hidden_cell),
        "",
        render_options(puzzle.answer_options),
    ]
    return "\n".join(parts)


def parse_choice(raw: str, options: Sequence[Symbol]) -> Optional[Symbol]:
    """
    Turn player input into a symbol.

    Accepts an option number (1-based) or a symbol name. Returns None for
    anything unrecognised.
    """
    raw = raw.strip().lower()
    if raw.isdigit():
        index = int(raw) - 1
        if 0 <= index < len(options):
            return options[index]
        return None
    for option in options:
        if option.lower() == raw:
            return option
    return None
