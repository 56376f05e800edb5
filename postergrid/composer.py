"""Text-to-grid composer for contribution posters.

Lays out a text string as 5x7 glyphs stamped left to right into a
7-row intensity grid.

Composition algorithm:
1. Normalize text (uppercase, unsupported characters -> space, max 80 chars)
2. Start a column cursor at 0
3. For each character, stamp every lit glyph pixel that fits inside the
   column bound with intensity 1
4. Advance the cursor by glyph width + spacing; stop once it reaches the
   column bound

Text that does not fit is clipped silently. Text mode only ever produces
intensities 0 and 1.
"""

from __future__ import annotations

import re

import structlog

from .config import (
    DEFAULT_COLUMNS,
    DEFAULT_SPACING,
    GRID_ROWS,
    MAX_COLUMNS,
    MAX_TEXT_LENGTH,
    MIN_COLUMNS,
)
from .font import GLYPH_HEIGHT, GLYPH_WIDTH, glyph_for

logger = structlog.get_logger(__name__)

Grid = list[list[int]]

_UNSUPPORTED = re.compile(r"[^A-Z0-9 ]")


def empty_grid(rows: int, columns: int) -> Grid:
    """Create an all-zero grid of the given shape."""
    return [[0] * columns for _ in range(rows)]


def grid_shape(grid: Grid) -> tuple[int, int]:
    """Return (rows, cols) of a grid; cols is taken from the first row."""
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    return rows, cols


def clamp_columns(columns: int) -> int:
    """Clamp a requested column count to [MIN_COLUMNS, MAX_COLUMNS]."""
    return min(MAX_COLUMNS, max(MIN_COLUMNS, columns))


def normalize_text(text: str) -> str:
    """Uppercase, blank out unsupported characters, truncate to 80 chars."""
    return _UNSUPPORTED.sub(" ", text.upper())[:MAX_TEXT_LENGTH]


def text_to_grid(
    text: str,
    columns: int = DEFAULT_COLUMNS,
    rows: int = GRID_ROWS,
    spacing: int = DEFAULT_SPACING,
) -> Grid:
    """Rasterize text into an intensity grid.

    Args:
        text: Raw user text.
        columns: Grid width. Callers clamp this with clamp_columns().
        rows: Grid height (7 for posters).
        spacing: Empty columns between consecutive glyphs.

    Returns:
        A rows x columns grid with 1 for lit glyph pixels, 0 elsewhere.
    """
    normalized = normalize_text(text)
    grid = empty_grid(rows, columns)
    glyph_rows = min(GLYPH_HEIGHT, rows)

    cursor = 0
    stamped = 0
    for char in normalized:
        glyph = glyph_for(char)
        for r, c in glyph.set_cells():
            target = cursor + c
            if r < glyph_rows and target < columns:
                grid[r][target] = 1

        stamped += 1
        cursor += GLYPH_WIDTH + spacing
        if cursor >= columns:
            break

    logger.debug(
        "grid_composed",
        characters=len(normalized),
        stamped=stamped,
        columns=columns,
        rows=rows,
    )
    return grid
