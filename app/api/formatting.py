"""
Display formatting for calculator results.
"""

import math
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from app.config import get_settings

T = TypeVar("T")


@dataclass(frozen=True)
class SchedulePreview(Generic[T]):
    """The first rows of a schedule and how many were left out."""

    rows: List[T]
    omitted: int

    @property
    def note(self) -> str:
        if not self.omitted:
            return ""
        return f"Showing first {len(self.rows)} periods; {self.omitted} more not shown"


def preview_schedule(schedule: List[T], limit: Optional[int] = None) -> SchedulePreview:
    """Cap a schedule at ``limit`` rows (settings.schedule_preview_rows by default)."""
    if limit is None:
        limit = get_settings().schedule_preview_rows
    rows = schedule[:limit]
    return SchedulePreview(rows=rows, omitted=len(schedule) - len(rows))


def format_currency(value: float, decimals: int = 2) -> str:
    """Format as en-US currency, e.g. -1234.5 -> '-$1,234.50'."""
    if math.isinf(value) or math.isnan(value):
        return str(value)
    symbol = get_settings().currency_symbol
    sign = "-" if value < 0 and round(abs(value), decimals) != 0 else ""
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"


def format_percent(value: float, decimals: int = 2) -> str:
    """Format a decimal rate as a percentage, e.g. 0.1832 -> '18.32%'."""
    return f"{value * 100:.{decimals}f}%"
