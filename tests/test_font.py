"""Tests for the 5x7 bitmap font."""

import pytest

from postergrid.font import (
    BLANK_GLYPH,
    GLYPH_HEIGHT,
    GLYPH_WIDTH,
    GLYPHS,
    SUPPORTED_CHARACTERS,
    glyph_for,
)


class TestGlyphTable:
    def test_covers_letters_digits_and_space(self):
        expected = set("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789 ")
        assert SUPPORTED_CHARACTERS == expected

    def test_every_glyph_is_7x5(self):
        for glyph in GLYPHS.values():
            assert len(glyph.bitmap) == GLYPH_HEIGHT
            assert all(len(row) == GLYPH_WIDTH for row in glyph.bitmap)

    def test_every_visible_glyph_has_lit_pixels(self):
        for char, glyph in GLYPHS.items():
            if char != " ":
                assert glyph.set_cells(), f"Glyph {char!r} is empty"

    def test_space_is_blank(self):
        assert glyph_for(" ") is BLANK_GLYPH
        assert BLANK_GLYPH.set_cells() == []

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            GLYPHS["A"] = BLANK_GLYPH  # type: ignore[index]


class TestGlyphLookup:
    def test_known_glyph(self):
        h = glyph_for("H")
        assert h.char == "H"
        # H: both vertical bars, crossbar on row 3
        lit = set(h.set_cells())
        assert {(0, 0), (0, 4)} <= lit
        assert (0, 2) not in lit
        assert all((3, c) in lit for c in range(GLYPH_WIDTH))

    def test_lookup_is_case_insensitive(self):
        assert glyph_for("a") is glyph_for("A")

    @pytest.mark.parametrize("char", ["!", "-", "é", "\n", "#"])
    def test_unsupported_characters_are_blank(self, char):
        assert glyph_for(char) is BLANK_GLYPH

    def test_set_cells_row_major(self):
        cells = glyph_for("I").set_cells()
        assert cells[:3] == [(0, 1), (0, 2), (0, 3)]
        assert cells == sorted(cells)
