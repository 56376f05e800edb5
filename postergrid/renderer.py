"""SVG and PNG rendering for poster grids.

Both emitters share the same geometry so the two outputs line up pixel
for pixel:

- canvas width  = cols * (cell_size + gap) + gap
- canvas height = rows * (cell_size + gap) + gap
- cell (row, col) origin = (col * (cell_size + gap) + gap,
                            row * (cell_size + gap) + gap)

The PNG emitter rounds each edge to the nearest pixel after computing
it in this geometry, so fractional cell sizes land where the SVG puts
them (within half a pixel).

Design documents are rendered at a cell size clamped to 8-24, since an
imported document may carry any positive cellSize.

Cell colors come from color_for_level(), so out-of-range intensities are
clamped here rather than rejected upstream.

An empty grid (zero rows or zero columns) renders nothing: both emitters
return None.
"""

from __future__ import annotations

import io
import math
from html import escape

import numpy as np
import structlog
from PIL import Image

from .composer import Grid, grid_shape
from .config import clamp_cell_size
from .design import DesignDocument
from .palette import Palette, color_for_level, hex_to_rgb

logger = structlog.get_logger(__name__)

# Rounded-corner radius as a fraction of cell size (SVG only)
CORNER_RADIUS_RATIO = 0.2


def default_gap(cell_size: float) -> int:
    """Gap between cells used when the caller does not pick one."""
    return max(1, math.floor(cell_size * 0.25 + 0.5))


def canvas_size(rows: int, cols: int, cell_size: float, gap: float) -> tuple[float, float]:
    """(width, height) of the full poster canvas."""
    return (cols * (cell_size + gap) + gap, rows * (cell_size + gap) + gap)


def cell_origin(row: int, col: int, cell_size: float, gap: float) -> tuple[float, float]:
    """Top-left (x, y) of a cell."""
    return (col * (cell_size + gap) + gap, row * (cell_size + gap) + gap)


def _px(value: float) -> int:
    """Nearest pixel edge (round half up)."""
    return math.floor(value + 0.5)


def _fmt(value: float) -> str:
    """Format a coordinate without a trailing '.0'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def render_svg(
    grid: Grid,
    palette: Palette,
    background: str,
    cell_size: float = 12,
    gap: float | None = None,
) -> str | None:
    """Render a grid as an SVG document.

    Args:
        grid: Intensity grid.
        palette: Five level colors.
        background: Background fill color.
        cell_size: Cell edge length.
        gap: Space between cells; defaults to default_gap(cell_size).

    Returns:
        Complete SVG document as a string, or None for an empty grid.
    """
    rows, cols = grid_shape(grid)
    if rows == 0 or cols == 0:
        return None

    if gap is None:
        gap = default_gap(cell_size)
    width, height = canvas_size(rows, cols, cell_size, gap)
    radius = _fmt(round(cell_size * CORNER_RADIUS_RATIO, 2))
    size = _fmt(cell_size)

    svg_parts: list[str] = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{_fmt(width)}" height="{_fmt(height)}" '
        f'viewBox="0 0 {_fmt(width)} {_fmt(height)}" '
        f'role="img" aria-label="Contribution poster">',
        f'  <rect x="0" y="0" width="{_fmt(width)}" height="{_fmt(height)}" '
        f'fill="{escape(background, quote=True)}"/>',
    ]

    for row_idx, row in enumerate(grid):
        for col_idx, level in enumerate(row):
            x, y = cell_origin(row_idx, col_idx, cell_size, gap)
            fill = escape(color_for_level(level, palette), quote=True)
            svg_parts.append(
                f'  <rect x="{_fmt(x)}" y="{_fmt(y)}" '
                f'width="{size}" height="{size}" '
                f'rx="{radius}" ry="{radius}" fill="{fill}"/>'
            )

    svg_parts.append("</svg>")
    svg_content = "\n".join(svg_parts)

    logger.debug("svg_rendered", rows=rows, cols=cols, cell_size=cell_size, gap=gap)
    return svg_content


def render_png(
    grid: Grid,
    palette: Palette,
    background: str,
    cell_size: float = 12,
    gap: float | None = None,
) -> bytes | None:
    """Render a grid as a PNG image.

    Paints the background, then one filled square per cell in row-major
    order. Edges are computed in the shared geometry and then rounded
    to whole pixels.

    Args:
        grid: Intensity grid.
        palette: Five level colors.
        background: Background fill color.
        cell_size: Cell edge length in pixels.
        gap: Space between cells; defaults to default_gap(cell_size).

    Returns:
        PNG image bytes, or None for an empty grid.
    """
    rows, cols = grid_shape(grid)
    if rows == 0 or cols == 0:
        return None

    if gap is None:
        gap = default_gap(cell_size)
    width, height = (max(1, _px(v)) for v in canvas_size(rows, cols, cell_size, gap))

    canvas = np.empty((height, width, 3), dtype=np.uint8)
    canvas[:, :] = hex_to_rgb(background)

    # Resolve each palette color once
    rgb_cache: dict[str, tuple[int, int, int]] = {}
    for row_idx, row in enumerate(grid):
        for col_idx, level in enumerate(row):
            color = color_for_level(level, palette)
            if color not in rgb_cache:
                rgb_cache[color] = hex_to_rgb(color)
            x, y = cell_origin(row_idx, col_idx, cell_size, gap)
            canvas[_px(y) : _px(y + cell_size), _px(x) : _px(x + cell_size)] = rgb_cache[color]

    buf = io.BytesIO()
    Image.fromarray(canvas).save(buf, format="PNG")
    png_bytes = buf.getvalue()

    logger.debug(
        "png_rendered", rows=rows, cols=cols, width=width, height=height, bytes=len(png_bytes)
    )
    return png_bytes


def render_design_svg(design: DesignDocument, gap: float | None = None) -> str | None:
    """Render a design document as SVG at its clamped cell size."""
    cell_size = clamp_cell_size(design.cell_size)
    return render_svg(design.grid, design.palette, design.background, cell_size, gap)


def render_design_png(design: DesignDocument, gap: float | None = None) -> bytes | None:
    """Render a design document as PNG at its clamped cell size."""
    cell_size = clamp_cell_size(design.cell_size)
    return render_png(design.grid, design.palette, design.background, cell_size, gap)
