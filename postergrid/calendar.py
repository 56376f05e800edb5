"""Activity-calendar adapter.

Maps a day-level contribution calendar (weeks of day records, as returned
by a code-hosting contributions API) onto the same 7-row grid shape that
the text composer produces: one column per week, one row per weekday.

Fetching the calendar is the caller's job; this module only consumes the
already-received payload.
"""

from __future__ import annotations

from enum import Enum

import structlog
from pydantic import BaseModel, ConfigDict, Field

from .composer import Grid, empty_grid
from .config import GRID_ROWS

logger = structlog.get_logger(__name__)


class ContributionLevel(str, Enum):
    """Ordinal activity label for a single day."""

    NONE = "NONE"
    FIRST_QUARTILE = "FIRST_QUARTILE"
    SECOND_QUARTILE = "SECOND_QUARTILE"
    THIRD_QUARTILE = "THIRD_QUARTILE"
    FOURTH_QUARTILE = "FOURTH_QUARTILE"


LEVEL_VALUES: dict[ContributionLevel, int] = {
    ContributionLevel.NONE: 0,
    ContributionLevel.FIRST_QUARTILE: 1,
    ContributionLevel.SECOND_QUARTILE: 2,
    ContributionLevel.THIRD_QUARTILE: 3,
    ContributionLevel.FOURTH_QUARTILE: 4,
}


def level_value(level: ContributionLevel | str) -> int:
    """Intensity (0-4) for an ordinal label."""
    return LEVEL_VALUES[ContributionLevel(level)]


class CalendarDay(BaseModel):
    """One day of activity. Accepts both short and upstream field names."""

    model_config = ConfigDict(populate_by_name=True)

    count: int = Field(default=0, alias="contributionCount")
    level: ContributionLevel = Field(alias="contributionLevel")
    date: str = ""
    weekday: int = Field(description="Row index, 0 = Sunday")


class CalendarWeek(BaseModel):
    """Up to seven day records."""

    model_config = ConfigDict(populate_by_name=True)

    days: list[CalendarDay] = Field(default_factory=list, alias="contributionDays")


class ContributionCalendar(BaseModel):
    """A full calendar payload, weeks in chronological order."""

    model_config = ConfigDict(populate_by_name=True)

    total_contributions: int = Field(default=0, alias="totalContributions")
    weeks: list[CalendarWeek] = Field(default_factory=list)

    def to_grid(self) -> Grid:
        """Convert this calendar to an intensity grid."""
        return weeks_to_grid(self.weeks)


def weeks_to_grid(weeks: list[CalendarWeek]) -> Grid:
    """Place each day's intensity at [weekday][week_index].

    Days whose weekday falls outside 0-6 are skipped. Cells with no day
    record stay 0.

    Args:
        weeks: Calendar weeks in chronological order.

    Returns:
        A 7 x len(weeks) grid.
    """
    grid = empty_grid(GRID_ROWS, len(weeks))
    skipped = 0

    for week_index, week in enumerate(weeks):
        for day in week.days:
            if 0 <= day.weekday < GRID_ROWS:
                grid[day.weekday][week_index] = level_value(day.level)
            else:
                skipped += 1

    if skipped:
        logger.debug("calendar_days_skipped", skipped=skipped)
    logger.debug("calendar_grid_built", weeks=len(weeks))
    return grid
