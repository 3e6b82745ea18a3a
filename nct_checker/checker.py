"""
Single availability run over the configured NCT centres.

Один прогон проверки:
- проход формы до выбора центра
- последовательный опрос центров (общая страница, поэтому не параллельно)
- фильтр по окну в N дней, отчёт и уведомление в Slack
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Sequence

from .browser import NCTBrowser
from .config import Settings
from .dates import CutoffWindow, parse_slot_date
from .models import CenterResult, CenterStatus, Slot, StepStatus, slots_from
from .notify import notify_slack, print_summary

logger = logging.getLogger(__name__)


ProbeFunc = Callable[[str], Awaitable[Optional[str]]]


def classify(center: str, raw_value: Optional[str], window: CutoffWindow) -> CenterResult:
    """Turn the raw first-day value of a centre into a result."""
    if raw_value is None:
        logger.info("%s: no available slots", center)
        return CenterResult(center=center, status=CenterStatus.NO_DATES)

    slot_date = parse_slot_date(raw_value)
    if slot_date is None:
        logger.warning("%s: unusable date value %r", center, raw_value)
        return CenterResult(center=center, status=CenterStatus.UNPARSEABLE, raw_value=raw_value)

    slot = Slot(center=center, date=slot_date)
    if window.includes(slot_date):
        logger.info("%s: slot within %s days: %s", center, window.days, slot.display_date)
        return CenterResult(center=center, status=CenterStatus.FOUND, raw_value=raw_value, slot=slot)

    logger.info("%s: slot is %s days away: %s", center, window.days_until(slot_date), slot.display_date)
    return CenterResult(center=center, status=CenterStatus.OUT_OF_WINDOW, raw_value=raw_value)


async def check_centers(
    probe: ProbeFunc,
    centers: Sequence[str],
    window: CutoffWindow,
) -> List[CenterResult]:
    """
    Probe every centre in order.

    A failing centre is recorded as FAILED and the loop moves on.
    """
    results: List[CenterResult] = []
    for center in centers:
        logger.info("Checking availability for: %s", center)
        try:
            raw_value = await probe(center)
        except Exception as e:  # noqa: BLE001
            logger.error("Error checking %s: %s", center, e)
            results.append(CenterResult(center=center, status=CenterStatus.FAILED, reason=str(e)))
            continue
        results.append(classify(center, raw_value, window))
    return results


async def run_check(settings: Settings, now: Optional[datetime] = None) -> List[CenterResult]:
    """Drive the browser through the form and probe all centres."""
    window = CutoffWindow(now=now or datetime.now(), days=settings.monitor.window_days)
    logger.info("Cutoff: %s (%s days)", window.cutoff.isoformat(timespec="minutes"), window.days)

    async with NCTBrowser(settings).session() as nct:
        outcomes = await nct.open_center_selection()
        skipped = [o.name for o in outcomes if o.status is StepStatus.SKIPPED]
        if skipped:
            logger.info("Skipped optional form steps: %s", ", ".join(skipped))
        return await check_centers(nct.probe, settings.monitor.centers, window)


async def run(settings: Settings) -> List[Slot]:
    """
    Run one full check bounded by the overall timeout, then report.

    Navigation errors and asyncio.TimeoutError propagate to the caller.
    """
    results = await asyncio.wait_for(run_check(settings), timeout=settings.browser.run_timeout)
    slots = slots_from(results)
    print_summary(slots, settings.monitor.window_days)
    if slots:
        await notify_slack(settings, slots)
    return slots


__all__ = ["check_centers", "classify", "run", "run_check"]
