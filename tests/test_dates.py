from __future__ import annotations

from datetime import date, datetime

import pytest

from nct_checker.dates import CutoffWindow, parse_slot_date


NOW = datetime(2026, 5, 1, 10, 30)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("07/05/2026 00:00:00", date(2026, 5, 7)),
        ("07/05/2026", date(2026, 5, 7)),
        ("31/12/2026 09:15:00", date(2026, 12, 31)),
        ("01/01/2027 00:00:00", date(2027, 1, 1)),
        ("29/02/2028 00:00:00", date(2028, 2, 29)),
    ],
)
def test_parse_day_month_year(raw, expected):
    assert parse_slot_date(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [None, "", "2026-05-07", "7/5/2026", "tomorrow", "31/02/2026 00:00:00", "07/13/2026"],
)
def test_unusable_values(raw):
    assert parse_slot_date(raw) is None


def test_cutoff_is_inclusive():
    window = CutoffWindow(now=NOW, days=14)
    assert window.cutoff == datetime(2026, 5, 15, 10, 30)
    assert window.includes(date(2026, 5, 15))
    assert not window.includes(date(2026, 5, 16))


def test_past_dates_qualify():
    window = CutoffWindow(now=NOW, days=14)
    assert window.includes(date(2026, 4, 1))
    assert window.includes(date(2026, 5, 1))


def test_zero_day_window():
    window = CutoffWindow(now=NOW, days=0)
    assert window.includes(date(2026, 5, 1))
    assert not window.includes(date(2026, 5, 2))


def test_days_until():
    window = CutoffWindow(now=NOW, days=14)
    assert window.days_until(date(2026, 5, 20)) == 19
    assert window.days_until(date(2026, 5, 2)) == 1
