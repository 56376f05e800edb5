"""Design document codec.

A design document is the portable JSON form of a whole poster:

    {
      "text": "HELLO",
      "grid": [[0, 1, ...], ...],
      "rows": 7,
      "cols": 53,
      "cellSize": 12,
      "theme": {"level1": "#ebedf0", ..., "level5": "#216e39",
                "background": "#f8fafc"},
      "createdAt": "2026-01-01T00:00:00.000Z",
      "version": 1
    }

Field names are part of the exchange format and must not change.
"version" is optional on import so documents written by other tools
still load.

Validation stops at the first failing rule and reports one message.
Decoding returns a tagged DesignResult instead of raising, so callers
decide whether a failure is shown to the user or silently discarded.

Grid cells are only required to be non-negative; values above 4 are
stored as-is and clamped at render time. Theme colors must be strict
6-digit hex even though palette interpolation accepts 3-digit hex.
"""

from __future__ import annotations

import json
import math
import sys
from dataclasses import dataclass
from datetime import datetime, timezone

import structlog

from .composer import Grid, grid_shape
from .config import DESIGN_SCHEMA_VERSION
from .palette import Palette, is_hex6

logger = structlog.get_logger(__name__)

THEME_FIELDS = ("level1", "level2", "level3", "level4", "level5", "background")


@dataclass(frozen=True)
class DesignTheme:
    """Five level colors plus the poster background."""

    level1: str
    level2: str
    level3: str
    level4: str
    level5: str
    background: str

    @classmethod
    def from_palette(cls, palette: Palette, background: str) -> DesignTheme:
        return cls(*palette, background=background)

    @property
    def palette(self) -> Palette:
        return (self.level1, self.level2, self.level3, self.level4, self.level5)

    def to_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in THEME_FIELDS}


@dataclass(frozen=True)
class DesignDocument:
    """A validated poster design.

    Attributes:
        text: Source text (empty for calendar posters).
        grid: Intensity grid, rows x cols.
        rows: Grid height, equal to len(grid).
        cols: Grid width, equal to len(grid[0]).
        cell_size: Cell edge length in pixels.
        theme: Palette and background colors.
        created_at: ISO-8601 creation timestamp, as stored.
        version: Schema version, or None for unversioned documents.
    """

    text: str
    grid: Grid
    rows: int
    cols: int
    cell_size: float
    theme: DesignTheme
    created_at: str
    version: int | None = DESIGN_SCHEMA_VERSION

    @property
    def palette(self) -> Palette:
        return self.theme.palette

    @property
    def background(self) -> str:
        return self.theme.background

    def to_dict(self) -> dict:
        """Dict in exchange-format field order and spelling."""
        data: dict = {
            "text": self.text,
            "grid": self.grid,
            "rows": self.rows,
            "cols": self.cols,
            "cellSize": self.cell_size,
            "theme": self.theme.to_dict(),
            "createdAt": self.created_at,
        }
        if self.version is not None:
            data["version"] = self.version
        return data

    @classmethod
    def from_dict(cls, data: dict) -> DesignDocument:
        """Build from an already-validated dict."""
        theme = data["theme"]
        return cls(
            text=data["text"],
            grid=[list(row) for row in data["grid"]],
            rows=int(data["rows"]),
            cols=int(data["cols"]),
            cell_size=data["cellSize"],
            theme=DesignTheme(**{name: theme[name] for name in THEME_FIELDS}),
            created_at=data["createdAt"],
            version=data.get("version"),
        )


@dataclass
class ValidationResult:
    """Outcome of validate_design().

    Attributes:
        ok: True if every rule passed.
        error: Message for the first failing rule, or None.
    """

    ok: bool
    error: str | None = None


@dataclass
class DesignResult:
    """Outcome of deserialize_design().

    Attributes:
        design: The decoded document, or None if decoding failed.
        error: Failure message, or None on success.
    """

    design: DesignDocument | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.design is not None


def _utc_timestamp() -> str:
    """Current UTC time as '2026-01-01T12:00:00.000Z'."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_design(
    text: str,
    grid: Grid,
    cell_size: float,
    palette: Palette,
    background: str,
) -> DesignDocument:
    """Assemble a DesignDocument; rows/cols come from the grid itself."""
    rows, cols = grid_shape(grid)
    return DesignDocument(
        text=text,
        grid=[list(row) for row in grid],
        rows=rows,
        cols=cols,
        cell_size=cell_size,
        theme=DesignTheme.from_palette(palette, background),
        created_at=_utc_timestamp(),
    )


def serialize_design(
    text: str,
    grid: Grid,
    cell_size: float,
    palette: Palette,
    background: str,
) -> str:
    """Serialize a poster to design-document JSON (2-space indent).

    Args:
        text: Source text.
        grid: Intensity grid.
        cell_size: Cell edge length in pixels.
        palette: Five level colors.
        background: Background color.

    Returns:
        JSON document text.
    """
    design = build_design(text, grid, cell_size, palette, background)
    logger.debug("design_serialized", rows=design.rows, cols=design.cols)
    return json.dumps(design.to_dict(), indent=2)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite_number(value: object) -> bool:
    """Number that is not NaN or infinite. Ints are always finite, even past float range."""
    if not _is_number(value):
        return False
    return isinstance(value, int) or math.isfinite(value)


def _is_positive_int(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return value.is_integer() and value > 0
    return isinstance(value, int) and value > 0


def _parses_as_date(value: str) -> bool:
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True


def _fail(message: str) -> ValidationResult:
    return ValidationResult(ok=False, error=message)


def validate_design(candidate: object) -> ValidationResult:
    """Check a decoded JSON value against the design schema.

    Rules run in a fixed order and the first failure is reported.

    Args:
        candidate: Any JSON-decoded value.

    Returns:
        ValidationResult with ok=True, or the first error message.
    """
    if not isinstance(candidate, dict):
        return _fail("Design must be an object.")

    if not isinstance(candidate.get("text"), str):
        return _fail("text must be a string.")

    grid = candidate.get("grid")
    if not isinstance(grid, list) or not grid or not all(isinstance(row, list) for row in grid):
        return _fail("grid must be a non-empty 2D array.")
    width = len(grid[0])
    if any(len(row) != width for row in grid):
        return _fail("grid must be rectangular.")
    for row in grid:
        for cell in row:
            if not _is_finite_number(cell) or cell < 0:
                return _fail("grid values must be non-negative numbers.")

    rows = candidate.get("rows")
    if not _is_positive_int(rows):
        return _fail("rows must be a positive integer.")
    cols = candidate.get("cols")
    if not _is_positive_int(cols):
        return _fail("cols must be a positive integer.")
    if len(grid) != rows:
        return _fail("rows does not match grid height.")
    if width != cols:
        return _fail("cols does not match grid width.")

    cell_size = candidate.get("cellSize")
    if (
        not _is_finite_number(cell_size)
        or cell_size <= 0
        or cell_size > sys.float_info.max
    ):
        return _fail("cellSize must be a positive number.")

    theme = candidate.get("theme")
    if not isinstance(theme, dict):
        return _fail("theme is required.")
    if not all(is_hex6(theme.get(name)) for name in THEME_FIELDS):
        return _fail("theme colors must be valid hex values.")

    created_at = candidate.get("createdAt")
    if not isinstance(created_at, str) or not _parses_as_date(created_at):
        return _fail("createdAt must be a valid ISO date string.")

    if "version" in candidate:
        version = candidate["version"]
        if isinstance(version, bool) or not isinstance(version, int) or not (
            1 <= version <= DESIGN_SCHEMA_VERSION
        ):
            return _fail(f"version must be an integer between 1 and {DESIGN_SCHEMA_VERSION}.")

    return ValidationResult(ok=True)


def deserialize_design(document: str) -> DesignResult:
    """Parse and validate design-document JSON.

    Args:
        document: JSON text.

    Returns:
        DesignResult holding the document, or the parse/validation error.
    """
    try:
        parsed = json.loads(document)
    except ValueError as e:
        logger.info("design_rejected", reason="invalid_json")
        return DesignResult(design=None, error=f"Design is not valid JSON: {e}")

    result = validate_design(parsed)
    if not result.ok:
        logger.info("design_rejected", reason=result.error)
        return DesignResult(design=None, error=result.error)

    design = DesignDocument.from_dict(parsed)
    logger.debug("design_loaded", rows=design.rows, cols=design.cols)
    return DesignResult(design=design)
