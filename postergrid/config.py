"""Shared constants and logging setup for postergrid.

Grid bounds and sizing limits mirror what the poster editor enforces:
text mode always produces 7 rows and between 20 and 53 columns (one
year of weekly columns at most).
"""

from __future__ import annotations

import logging
import os

import structlog

SERVICE_NAME = "postergrid"
SERVICE_VERSION = "0.1.0"

# Grid shape
GRID_ROWS = 7
MIN_COLUMNS = 20
MAX_COLUMNS = 53
DEFAULT_COLUMNS = 53

# Text input
MAX_TEXT_LENGTH = 80
DEFAULT_TEXT = "HELLO 2026"
DEFAULT_SPACING = 1

# Cell sizing (pixels)
MIN_CELL_SIZE = 8
MAX_CELL_SIZE = 24
DEFAULT_CELL_SIZE = 12

# Poster backgrounds
LIGHT_BACKGROUND = "#f8fafc"
DARK_BACKGROUND = "#020617"

# Design document schema version written by serialize_design()
DESIGN_SCHEMA_VERSION = 1

LOG_LEVEL_ENV = "POSTERGRID_LOG_LEVEL"


def clamp_cell_size(value: float) -> float:
    """Clamp a requested cell size to the supported range."""
    return min(MAX_CELL_SIZE, max(MIN_CELL_SIZE, value))


def configure_logging(level: str | None = None) -> None:
    """Configure structlog for console output.

    Args:
        level: Log level name. Falls back to $POSTERGRID_LOG_LEVEL, then INFO.
    """
    name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        numeric = logging.INFO

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
    )
