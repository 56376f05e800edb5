"""postergrid microservice -- FastAPI application.

Endpoints:
    POST /grid/text         -- Compose a text grid
    POST /grid/calendar     -- Convert a contribution calendar to a grid
    POST /palette/gradient  -- Build a 5-step palette from two endpoints
    POST /design            -- Build and serialize a design document
    POST /design/validate   -- Validate a design document
    POST /render/png        -- Render a design document to PNG
    POST /render/svg        -- Render a design document to SVG
    GET  /poster.png        -- Render a share link to PNG
    GET  /poster.svg        -- Render a share link to SVG
    GET  /health            -- Health check

This layer only adapts HTTP to the pure grid/palette/design/render
functions; it holds no state.
"""

from __future__ import annotations

from urllib.parse import urlencode

import structlog
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import Response
from pydantic import BaseModel, Field

from .calendar import ContributionCalendar
from .composer import Grid, clamp_columns, grid_shape, text_to_grid
from .config import (
    DARK_BACKGROUND,
    DEFAULT_CELL_SIZE,
    DEFAULT_COLUMNS,
    DEFAULT_SPACING,
    DEFAULT_TEXT,
    GRID_ROWS,
    LIGHT_BACKGROUND,
    MAX_CELL_SIZE,
    MAX_COLUMNS,
    MIN_COLUMNS,
    SERVICE_NAME,
    SERVICE_VERSION,
    clamp_cell_size,
    configure_logging,
)
from .design import DesignDocument, deserialize_design, serialize_design
from .palette import (
    DEFAULT_PALETTE,
    PALETTE_SIZE,
    Palette,
    build_palette_from_endpoints,
    palette_to_param,
    parse_palette_param,
)
from .renderer import render_design_png, render_design_svg, render_png, render_svg

configure_logging()

logger = structlog.get_logger(__name__)

app = FastAPI(
    title=SERVICE_NAME,
    description="Contribution-style poster grids from text or activity calendars",
    version=SERVICE_VERSION,
)


# --------------------------------------------------------------------------
# Request / Response models
# --------------------------------------------------------------------------


class TextGridRequest(BaseModel):
    """Request body for /grid/text."""

    text: str = Field(..., max_length=10_000, examples=[DEFAULT_TEXT])
    columns: int = Field(
        default=DEFAULT_COLUMNS,
        ge=MIN_COLUMNS,
        le=MAX_COLUMNS,
        description="Grid width in cells",
    )
    spacing: int = Field(default=DEFAULT_SPACING, ge=0, le=5)


class GridResponse(BaseModel):
    """A grid and its shape."""

    rows: int
    cols: int
    grid: list[list[int]]


class GradientRequest(BaseModel):
    """Request body for /palette/gradient."""

    inactive: str = Field(..., examples=["#ebedf0"])
    active: str = Field(..., examples=["#216e39"])


class PaletteResponse(BaseModel):
    palette: list[str]


class DesignRequest(BaseModel):
    """Request body for /design.

    When grid is omitted it is composed from text and columns.
    """

    text: str = Field(default=DEFAULT_TEXT)
    grid: list[list[int | float]] | None = Field(
        default=None,
        description="Explicit intensity grid (e.g. from /grid/calendar)",
    )
    columns: int = Field(default=DEFAULT_COLUMNS, ge=MIN_COLUMNS, le=MAX_COLUMNS)
    cell_size: float = Field(default=DEFAULT_CELL_SIZE, gt=0)
    palette: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PALETTE),
        min_length=PALETTE_SIZE,
        max_length=PALETTE_SIZE,
    )
    dark: bool = Field(default=False, description="Use the dark poster background")


class ValidateResponse(BaseModel):
    ok: bool


class HealthResponse(BaseModel):
    """Response body for /health."""

    status: str
    service: str
    version: str


# --------------------------------------------------------------------------
# Helpers
# --------------------------------------------------------------------------


def _background(dark: bool) -> str:
    return DARK_BACKGROUND if dark else LIGHT_BACKGROUND


def _as_palette(colors: list[str]) -> Palette:
    return (colors[0], colors[1], colors[2], colors[3], colors[4])


async def _load_design(request: Request) -> DesignDocument:
    """Decode a design document from the raw request body or raise 422."""
    body = await request.body()
    result = deserialize_design(body.decode("utf-8", errors="replace"))
    if result.design is None:
        raise HTTPException(status_code=422, detail=result.error)
    return result.design


def _share_link_grid(text: str, columns: int) -> Grid:
    return text_to_grid(text, columns=clamp_columns(columns), rows=GRID_ROWS)


def _share_link(request: DesignRequest) -> str:
    """Path and query that redraw a text design through GET /poster.svg."""
    query = urlencode(
        {
            "text": request.text,
            "columns": request.columns,
            "cellSize": f"{request.cell_size:g}",
            "palette": palette_to_param(_as_palette(request.palette)),
            "dark": "1" if request.dark else "0",
        }
    )
    return f"/poster.svg?{query}"


# --------------------------------------------------------------------------
# Endpoints
# --------------------------------------------------------------------------


@app.post("/grid/text", response_model=GridResponse)
async def grid_from_text(request: TextGridRequest) -> GridResponse:
    """Compose a 7-row grid from text."""
    grid = text_to_grid(request.text, columns=request.columns, spacing=request.spacing)
    rows, cols = grid_shape(grid)
    return GridResponse(rows=rows, cols=cols, grid=grid)


@app.post("/grid/calendar", response_model=GridResponse)
async def grid_from_calendar(calendar: ContributionCalendar) -> GridResponse:
    """Convert a contribution calendar into a 7 x weeks grid."""
    grid = calendar.to_grid()
    logger.info(
        "calendar_converted",
        weeks=len(calendar.weeks),
        total_contributions=calendar.total_contributions,
    )
    return GridResponse(rows=GRID_ROWS, cols=len(calendar.weeks), grid=grid)


@app.post("/palette/gradient", response_model=PaletteResponse)
async def palette_gradient(request: GradientRequest) -> PaletteResponse:
    """Interpolate a 5-step palette between two colors."""
    try:
        palette = build_palette_from_endpoints(request.inactive, request.active)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return PaletteResponse(palette=list(palette))


@app.post(
    "/design",
    response_class=Response,
    responses={
        200: {"content": {"application/json": {}}, "description": "Design document"},
        422: {"description": "Invalid input"},
    },
)
async def create_design(request: DesignRequest) -> Response:
    """Build a design document from text (or an explicit grid) and styling.

    Text designs also get a Link header pointing at the equivalent share
    link, which /poster.svg renders identically while cellSize is 8-24.
    """
    if request.grid is not None:
        grid = request.grid
        if not grid or not grid[0]:
            raise HTTPException(status_code=422, detail="grid must be a non-empty 2D array.")
    else:
        grid = text_to_grid(request.text, columns=request.columns)

    document = serialize_design(
        request.text,
        grid,
        request.cell_size,
        _as_palette(request.palette),
        _background(request.dark),
    )

    # Run the import rules on our own output so bad palettes surface here
    result = deserialize_design(document)
    if result.design is None:
        raise HTTPException(status_code=422, detail=result.error)

    headers = {}
    if request.grid is None:
        headers["Link"] = f'<{_share_link(request)}>; rel="alternate"; type="image/svg+xml"'
    return Response(content=document, media_type="application/json", headers=headers)


@app.post("/design/validate", response_model=ValidateResponse)
async def validate_design_endpoint(request: Request) -> ValidateResponse:
    """Validate a design document posted as the raw request body."""
    await _load_design(request)
    return ValidateResponse(ok=True)


@app.post(
    "/render/png",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}, "description": "PNG poster"},
        422: {"description": "Invalid design document"},
    },
)
async def render_png_endpoint(
    request: Request,
    gap: float | None = Query(default=None, ge=0, le=MAX_CELL_SIZE),
) -> Response:
    """Render a posted design document to PNG."""
    design = await _load_design(request)
    try:
        png_bytes = render_design_png(design, gap=gap)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error("render_png_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Rendering failed")

    if png_bytes is None:
        return Response(status_code=204)
    return Response(content=png_bytes, media_type="image/png")


@app.post(
    "/render/svg",
    response_class=Response,
    responses={
        200: {"content": {"image/svg+xml": {}}, "description": "SVG poster"},
        422: {"description": "Invalid design document"},
    },
)
async def render_svg_endpoint(
    request: Request,
    gap: float | None = Query(default=None, ge=0, le=MAX_CELL_SIZE),
) -> Response:
    """Render a posted design document to SVG."""
    design = await _load_design(request)
    svg_content = render_design_svg(design, gap=gap)
    if svg_content is None:
        return Response(status_code=204)
    return Response(content=svg_content, media_type="image/svg+xml")


@app.get("/poster.svg", response_class=Response)
async def poster_svg(
    text: str = DEFAULT_TEXT,
    columns: int = DEFAULT_COLUMNS,
    cell_size: float = Query(default=DEFAULT_CELL_SIZE, alias="cellSize"),
    palette: str | None = None,
    dark: str = "0",
) -> Response:
    """Render share-link state to SVG.

    columns and cellSize are clamped to 20-53 and 8-24; an unparseable
    palette falls back to the default palette.
    """
    grid = _share_link_grid(text, columns)
    svg_content = render_svg(
        grid,
        parse_palette_param(palette) or DEFAULT_PALETTE,
        _background(dark == "1"),
        clamp_cell_size(cell_size),
    )
    return Response(content=svg_content, media_type="image/svg+xml")


@app.get("/poster.png", response_class=Response)
async def poster_png(
    text: str = DEFAULT_TEXT,
    columns: int = DEFAULT_COLUMNS,
    cell_size: float = Query(default=DEFAULT_CELL_SIZE, alias="cellSize"),
    palette: str | None = None,
    dark: str = "0",
) -> Response:
    """Render share-link state to PNG (same parameters as /poster.svg)."""
    grid = _share_link_grid(text, columns)
    png_bytes = render_png(
        grid,
        parse_palette_param(palette) or DEFAULT_PALETTE,
        _background(dark == "1"),
        clamp_cell_size(cell_size),
    )
    return Response(content=png_bytes, media_type="image/png")


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for Docker and load balancer probes."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
    )
