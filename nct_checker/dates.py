"""
Parsing of raw booking-day values and the cutoff window check.

Разбор значений вида "07/05/2026 00:00:00" и проверка окна в N дней.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional


DATE_RE = re.compile(r"(\d{2})/(\d{2})/(\d{4})")


def parse_slot_date(raw: Optional[str]) -> Optional[date]:
    """
    Parse ``DD/MM/YYYY[ HH:MM:SS]`` into a date; time of day is ignored.

    Returns None for anything that does not match or is not a real calendar day.
    """
    if not raw:
        return None
    match = DATE_RE.search(raw)
    if not match:
        return None
    day, month, year = (int(g) for g in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


@dataclass(frozen=True)
class CutoffWindow:
    """Inclusive upper bound ``now + days``; there is no lower bound."""

    now: datetime
    days: int = 14

    @property
    def cutoff(self) -> datetime:
        return self.now + timedelta(days=self.days)

    def includes(self, value: date) -> bool:
        return _midnight(value) <= self.cutoff

    def days_until(self, value: date) -> int:
        delta = _midnight(value) - self.now
        return math.ceil(delta.total_seconds() / 86400)


def _midnight(value: date) -> datetime:
    return datetime(value.year, value.month, value.day)


__all__ = ["CutoffWindow", "parse_slot_date"]
