"""Fixed 5x7 bitmap font used to stamp text into the poster grid.

Each glyph is defined as seven row strings of five "0"/"1" characters and
parsed once into an immutable boolean bitmap. Only A-Z, 0-9 and space are
supported; every other character resolves to the blank glyph.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

GLYPH_WIDTH = 5
GLYPH_HEIGHT = 7


@dataclass(frozen=True)
class Glyph:
    """A single character bitmap.

    Attributes:
        char: The character this glyph draws.
        bitmap: GLYPH_HEIGHT rows of GLYPH_WIDTH booleans (True = lit).
    """

    char: str
    bitmap: tuple[tuple[bool, ...], ...]

    def set_cells(self) -> list[tuple[int, int]]:
        """All lit (row, col) positions in row-major order."""
        return [
            (r, c)
            for r, row in enumerate(self.bitmap)
            for c, lit in enumerate(row)
            if lit
        ]


def _glyph(char: str, *rows: str) -> Glyph:
    """Parse row strings into a Glyph."""
    if len(rows) != GLYPH_HEIGHT or any(len(r) != GLYPH_WIDTH for r in rows):
        raise ValueError(f"Glyph '{char}' must be {GLYPH_HEIGHT}x{GLYPH_WIDTH}")
    return Glyph(char=char, bitmap=tuple(tuple(bit == "1" for bit in row) for row in rows))


BLANK_GLYPH = _glyph(" ", *(["00000"] * GLYPH_HEIGHT))

_GLYPHS = [
    BLANK_GLYPH,
    _glyph("A", "01110", "10001", "10001", "11111", "10001", "10001", "10001"),
    _glyph("B", "11110", "10001", "10001", "11110", "10001", "10001", "11110"),
    _glyph("C", "01110", "10001", "10000", "10000", "10000", "10001", "01110"),
    _glyph("D", "11100", "10010", "10001", "10001", "10001", "10010", "11100"),
    _glyph("E", "11111", "10000", "10000", "11110", "10000", "10000", "11111"),
    _glyph("F", "11111", "10000", "10000", "11110", "10000", "10000", "10000"),
    _glyph("G", "01110", "10001", "10000", "10111", "10001", "10001", "01111"),
    _glyph("H", "10001", "10001", "10001", "11111", "10001", "10001", "10001"),
    _glyph("I", "01110", "00100", "00100", "00100", "00100", "00100", "01110"),
    _glyph("J", "00111", "00010", "00010", "00010", "00010", "10010", "01100"),
    _glyph("K", "10001", "10010", "10100", "11000", "10100", "10010", "10001"),
    _glyph("L", "10000", "10000", "10000", "10000", "10000", "10000", "11111"),
    _glyph("M", "10001", "11011", "10101", "10101", "10001", "10001", "10001"),
    _glyph("N", "10001", "10001", "11001", "10101", "10011", "10001", "10001"),
    _glyph("O", "01110", "10001", "10001", "10001", "10001", "10001", "01110"),
    _glyph("P", "11110", "10001", "10001", "11110", "10000", "10000", "10000"),
    _glyph("Q", "01110", "10001", "10001", "10001", "10101", "10010", "01101"),
    _glyph("R", "11110", "10001", "10001", "11110", "10100", "10010", "10001"),
    _glyph("S", "01111", "10000", "10000", "01110", "00001", "00001", "11110"),
    _glyph("T", "11111", "00100", "00100", "00100", "00100", "00100", "00100"),
    _glyph("U", "10001", "10001", "10001", "10001", "10001", "10001", "01110"),
    _glyph("V", "10001", "10001", "10001", "10001", "10001", "01010", "00100"),
    _glyph("W", "10001", "10001", "10001", "10101", "10101", "10101", "01010"),
    _glyph("X", "10001", "10001", "01010", "00100", "01010", "10001", "10001"),
    _glyph("Y", "10001", "10001", "10001", "01010", "00100", "00100", "00100"),
    _glyph("Z", "11111", "00001", "00010", "00100", "01000", "10000", "11111"),
    _glyph("0", "01110", "10001", "10011", "10101", "11001", "10001", "01110"),
    _glyph("1", "00100", "01100", "00100", "00100", "00100", "00100", "01110"),
    _glyph("2", "01110", "10001", "00001", "00010", "00100", "01000", "11111"),
    _glyph("3", "11111", "00010", "00100", "00010", "00001", "10001", "01110"),
    _glyph("4", "00010", "00110", "01010", "10010", "11111", "00010", "00010"),
    _glyph("5", "11111", "10000", "11110", "00001", "00001", "10001", "01110"),
    _glyph("6", "00110", "01000", "10000", "11110", "10001", "10001", "01110"),
    _glyph("7", "11111", "00001", "00010", "00100", "01000", "01000", "01000"),
    _glyph("8", "01110", "10001", "10001", "01110", "10001", "10001", "01110"),
    _glyph("9", "01110", "10001", "10001", "01111", "00001", "00010", "01100"),
]

# Read-only character -> glyph table
GLYPHS: Mapping[str, Glyph] = MappingProxyType({g.char: g for g in _GLYPHS})

SUPPORTED_CHARACTERS = frozenset(GLYPHS)


def glyph_for(char: str) -> Glyph:
    """Look up the glyph for a single character.

    Lookup is case-insensitive. Unsupported characters resolve to
    BLANK_GLYPH.

    Args:
        char: A single character.

    Returns:
        The matching Glyph, or BLANK_GLYPH.
    """
    return GLYPHS.get(char.upper(), BLANK_GLYPH)
