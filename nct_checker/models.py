"""
Pydantic models for NCT availability checks.

Pydantic-модели для слотов, результатов по центрам и шагов формы.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict


class Slot(BaseModel):
    """Single appointment opening within the cutoff window."""

    model_config = ConfigDict(frozen=True)

    center: str
    date: dt.date

    @property
    def display_date(self) -> str:
        # формат вида "Thu May 07 2026"
        return self.date.strftime("%a %b %d %Y")

    def __str__(self) -> str:
        return f"{self.center}: {self.display_date}"


class CenterStatus(str, Enum):
    FOUND = "found"
    OUT_OF_WINDOW = "out_of_window"
    NO_DATES = "no_dates"
    UNPARSEABLE = "unparseable"
    FAILED = "failed"


class CenterResult(BaseModel):
    """Outcome of probing one center."""

    model_config = ConfigDict(frozen=True)

    center: str
    status: CenterStatus
    raw_value: Optional[str] = None
    slot: Optional[Slot] = None
    reason: Optional[str] = None


class StepStatus(str, Enum):
    DONE = "done"
    SKIPPED = "skipped"


class StepOutcome(BaseModel):
    """Result of a single form-flow step."""

    model_config = ConfigDict(frozen=True)

    name: str
    status: StepStatus
    detail: Optional[str] = None


def slots_from(results: Iterable[CenterResult]) -> List[Slot]:
    """Collect slots in probe order."""
    return [r.slot for r in results if r.slot is not None]


__all__ = [
    "CenterResult",
    "CenterStatus",
    "Slot",
    "StepOutcome",
    "StepStatus",
    "slots_from",
]
