#!/usr/bin/env python3
"""Basic usage example for postergrid.

Composes a text poster, builds a custom palette, saves the design as
JSON, loads it back, and renders PNG and SVG files.

Usage:
    python examples/basic_usage.py
"""

from pathlib import Path

from postergrid.calendar import ContributionCalendar
from postergrid.composer import text_to_grid
from postergrid.config import DARK_BACKGROUND, LIGHT_BACKGROUND
from postergrid.design import deserialize_design, serialize_design
from postergrid.palette import DEFAULT_PALETTE, build_palette_from_endpoints, palette_to_param
from postergrid.renderer import render_design_png, render_design_svg, render_png

OUT_DIR = Path("poster-output")


def example_text_poster():
    """Compose text into a grid and print it as ASCII."""
    print("=" * 60)
    print("Example 1: Text Poster")
    print("=" * 60)

    grid = text_to_grid("HELLO 2026", columns=53)
    for row in grid:
        print("  " + "".join("#" if v else "." for v in row))
    print()
    return grid


def example_design_roundtrip(grid):
    """Save a design document, load it back, and render it."""
    print("=" * 60)
    print("Example 2: Design Document Roundtrip")
    print("=" * 60)

    palette = build_palette_from_endpoints("#161b22", "#f778ba")
    print(f"  Palette:     {', '.join(palette)}")
    print(f"  Share link:  /poster.svg?palette={palette_to_param(palette)}&dark=1")

    document = serialize_design("HELLO 2026", grid, 12, palette, DARK_BACKGROUND)
    result = deserialize_design(document)
    print(f"  Loaded:      {result.ok}")
    print(f"  Shape:       {result.design.rows} x {result.design.cols}")

    OUT_DIR.mkdir(exist_ok=True)
    (OUT_DIR / "poster-design.json").write_text(document)
    (OUT_DIR / "poster.png").write_bytes(render_design_png(result.design))
    (OUT_DIR / "poster.svg").write_text(render_design_svg(result.design))
    print(f"  Wrote:       {OUT_DIR}/poster-design.json, poster.png, poster.svg")
    print()


def example_calendar_poster():
    """Turn a (tiny) contribution calendar into a PNG."""
    print("=" * 60)
    print("Example 3: Calendar Poster")
    print("=" * 60)

    levels = ["NONE", "FIRST_QUARTILE", "SECOND_QUARTILE", "THIRD_QUARTILE", "FOURTH_QUARTILE"]
    payload = {
        "totalContributions": 0,
        "weeks": [
            {
                "contributionDays": [
                    {"contributionLevel": levels[(week + day) % 5], "weekday": day}
                    for day in range(7)
                ]
            }
            for week in range(20)
        ],
    }
    calendar = ContributionCalendar.model_validate(payload)
    png_bytes = render_png(calendar.to_grid(), DEFAULT_PALETTE, LIGHT_BACKGROUND, cell_size=10)

    OUT_DIR.mkdir(exist_ok=True)
    (OUT_DIR / "calendar.png").write_bytes(png_bytes)
    print(f"  Weeks:       {len(calendar.weeks)}")
    print(f"  PNG size:    {len(png_bytes)} bytes")
    print()


if __name__ == "__main__":
    grid = example_text_poster()
    example_design_roundtrip(grid)
    example_calendar_poster()
