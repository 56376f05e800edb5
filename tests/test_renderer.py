"""Tests for poster SVG/PNG rendering."""

import io
import math
import re

from PIL import Image

from postergrid.composer import text_to_grid
from postergrid.design import build_design
from postergrid.palette import DEFAULT_PALETTE, hex_to_rgb
from postergrid.renderer import (
    canvas_size,
    cell_origin,
    default_gap,
    render_design_png,
    render_design_svg,
    render_png,
    render_svg,
)

BACKGROUND = "#f8fafc"


def _open(png_bytes):
    return Image.open(io.BytesIO(png_bytes)).convert("RGB")


class TestGeometry:
    def test_canvas_size(self):
        assert canvas_size(7, 53, 12, 3) == (53 * 15 + 3, 7 * 15 + 3)

    def test_cell_origin(self):
        assert cell_origin(0, 0, 12, 3) == (3, 3)
        assert cell_origin(2, 5, 12, 3) == (5 * 15 + 3, 2 * 15 + 3)

    def test_default_gap(self):
        assert default_gap(12) == 3
        assert default_gap(10) == 3  # 2.5 rounds half up
        assert default_gap(2) == 1


class TestRenderSVG:
    def test_produces_svg_document(self):
        svg = render_svg(text_to_grid("HI", columns=20), DEFAULT_PALETTE, BACKGROUND)
        assert svg.startswith("<?xml")
        assert "<svg" in svg
        assert svg.endswith("</svg>")
        assert "xmlns" in svg

    def test_one_rect_per_cell_plus_background(self):
        grid = text_to_grid("HI", columns=20)
        svg = render_svg(grid, DEFAULT_PALETTE, BACKGROUND, cell_size=10, gap=2)
        assert svg.count("<rect") == 7 * 20 + 1
        assert svg.count('rx="2"') == 7 * 20

    def test_dimensions(self):
        svg = render_svg([[0, 1, 2]], DEFAULT_PALETTE, BACKGROUND, cell_size=10, gap=2)
        assert 'width="38"' in svg
        assert 'height="14"' in svg
        assert 'viewBox="0 0 38 14"' in svg

    def test_cell_positions_and_colors(self):
        svg = render_svg([[0, 4]], DEFAULT_PALETTE, BACKGROUND, cell_size=10, gap=2)
        first = (
            f'<rect x="2" y="2" width="10" height="10" '
            f'rx="2" ry="2" fill="{DEFAULT_PALETTE[0]}"/>'
        )
        second = (
            f'<rect x="14" y="2" width="10" height="10" '
            f'rx="2" ry="2" fill="{DEFAULT_PALETTE[4]}"/>'
        )
        assert first in svg
        assert second in svg

    def test_background_rect(self):
        svg = render_svg([[0]], DEFAULT_PALETTE, "#020617")
        assert 'fill="#020617"' in svg

    def test_levels_above_four_clamp(self):
        svg = render_svg([[9]], DEFAULT_PALETTE, BACKGROUND)
        assert DEFAULT_PALETTE[4] in svg

    def test_colors_are_escaped(self):
        palette = ('"><script>', "#111111", "#222222", "#333333", "#444444")
        svg = render_svg([[0]], palette, "a&b")
        assert "<script>" not in svg
        assert "&quot;&gt;&lt;script&gt;" in svg
        assert 'fill="a&amp;b"' in svg

    def test_fractional_cell_size(self):
        svg = render_svg([[0]], DEFAULT_PALETTE, BACKGROUND, cell_size=7.5, gap=1)
        assert 'width="7.5"' in svg
        assert 'rx="1.5"' in svg

    def test_empty_grid_is_noop(self):
        assert render_svg([], DEFAULT_PALETTE, BACKGROUND) is None
        assert render_svg([[]], DEFAULT_PALETTE, BACKGROUND) is None


class TestRenderPNG:
    def test_produces_png(self):
        png_bytes = render_png(text_to_grid("HI", columns=20), DEFAULT_PALETTE, BACKGROUND)
        assert png_bytes[:4] == b"\x89PNG"

    def test_size_matches_geometry(self):
        grid = text_to_grid("HELLO", columns=53)
        img = _open(render_png(grid, DEFAULT_PALETTE, BACKGROUND, cell_size=12, gap=3))
        assert img.size == canvas_size(7, 53, 12, 3)

    def test_pixel_colors(self):
        img = _open(render_png([[0, 4]], DEFAULT_PALETTE, BACKGROUND, cell_size=10, gap=2))
        assert img.size == (26, 14)
        assert img.getpixel((0, 0)) == hex_to_rgb(BACKGROUND)
        assert img.getpixel((12, 5)) == hex_to_rgb(BACKGROUND)  # gap column
        assert img.getpixel((2, 2)) == hex_to_rgb(DEFAULT_PALETTE[0])
        assert img.getpixel((11, 11)) == hex_to_rgb(DEFAULT_PALETTE[0])
        assert img.getpixel((14, 2)) == hex_to_rgb(DEFAULT_PALETTE[4])
        assert img.getpixel((25, 13)) == hex_to_rgb(BACKGROUND)

    def test_accepts_three_digit_colors(self):
        palette = ("#fff", "#111111", "#222222", "#333333", "#000")
        img = _open(render_png([[0, 4]], palette, "#abc", cell_size=8, gap=1))
        assert img.getpixel((0, 0)) == (0xAA, 0xBB, 0xCC)
        assert img.getpixel((1, 1)) == (255, 255, 255)
        assert img.getpixel((10, 1)) == (0, 0, 0)

    def test_fractional_geometry_rounds_each_edge(self):
        # cell 14.5, gap 4: second cell spans x = 22.5 .. 37.0
        img = _open(render_png([[0, 4]], DEFAULT_PALETTE, BACKGROUND, cell_size=14.5, gap=4))
        assert img.size == (41, 23)  # 41.0 x 22.5
        assert img.getpixel((22, 10)) == hex_to_rgb(BACKGROUND)
        assert img.getpixel((23, 10)) == hex_to_rgb(DEFAULT_PALETTE[4])
        assert img.getpixel((36, 10)) == hex_to_rgb(DEFAULT_PALETTE[4])
        assert img.getpixel((37, 10)) == hex_to_rgb(BACKGROUND)
        assert img.getpixel((4, 4)) == hex_to_rgb(DEFAULT_PALETTE[0])
        assert img.getpixel((18, 18)) == hex_to_rgb(DEFAULT_PALETTE[0])
        assert img.getpixel((19, 19)) == hex_to_rgb(BACKGROUND)

    def test_huge_integer_levels_clamp(self):
        img = _open(render_png([[10**400]], DEFAULT_PALETTE, BACKGROUND, cell_size=8, gap=1))
        assert img.getpixel((1, 1)) == hex_to_rgb(DEFAULT_PALETTE[4])

    def test_empty_grid_is_noop(self):
        assert render_png([], DEFAULT_PALETTE, BACKGROUND) is None
        assert render_png([[], []], DEFAULT_PALETTE, BACKGROUND) is None


class TestRenderDesign:
    def test_svg_and_png_share_geometry(self):
        design = build_design("HI", text_to_grid("HI", columns=20), 12, DEFAULT_PALETTE, BACKGROUND)
        svg = render_design_svg(design)
        img = _open(render_design_png(design))
        width, height = (int(v) for v in re.search(r'viewBox="0 0 (\S+) (\S+)"', svg).groups())
        assert img.size == (width, height)

    def test_fractional_cell_size_matches_svg(self):
        grid = text_to_grid("HI", columns=20)
        design = build_design("HI", grid, 14.5, DEFAULT_PALETTE, BACKGROUND)
        svg = render_design_svg(design)
        img = _open(render_design_png(design))

        width, height = (float(v) for v in re.search(r'viewBox="0 0 (\S+) (\S+)"', svg).groups())
        assert img.size == (math.floor(width + 0.5), math.floor(height + 0.5))

        # Every lit cell's SVG origin (rounded) is the first lit pixel in the PNG
        lit = hex_to_rgb(DEFAULT_PALETTE[1])
        origins = re.findall(rf'<rect x="(\S+)" y="(\S+)" [^>]*fill="{DEFAULT_PALETTE[1]}"', svg)
        assert origins
        for x, y in origins:
            px, py = math.floor(float(x) + 0.5), math.floor(float(y) + 0.5)
            assert img.getpixel((px, py)) == lit
            assert img.getpixel((px - 1, py)) != lit

    def test_oversized_cell_size_is_clamped(self):
        design = build_design("HI", [[0, 1]], 20000, DEFAULT_PALETTE, BACKGROUND)
        img = _open(render_design_png(design))
        # clamped to 24 with the default gap of 6
        assert img.size == canvas_size(1, 2, 24, 6) == (66, 36)
        assert 'viewBox="0 0 66 36"' in render_design_svg(design)

    def test_undersized_cell_size_is_clamped(self):
        design = build_design("HI", [[0, 1]], 0.5, DEFAULT_PALETTE, BACKGROUND)
        assert 'width="8" height="8"' in render_design_svg(design)
