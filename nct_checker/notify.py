"""
Console summary and Slack webhook notification.

Вывод итогов в консоль и уведомление в Slack (только из GitHub Actions,
чтобы не спамить общий канал при ручной отладке).
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

import aiohttp

from .config import Settings
from .models import Slot

logger = logging.getLogger(__name__)


WEBHOOK_TIMEOUT = aiohttp.ClientTimeout(total=10)


def format_summary(slots: Sequence[Slot], window_days: int = 14) -> str:
    if not slots:
        return f"❌ No slots available within {window_days} days from current date."
    lines = [f"🎉 Available slots found within {window_days} days:"]
    lines.extend(f"  - {slot}" for slot in slots)
    return "\n".join(lines)


def print_summary(slots: Sequence[Slot], window_days: int = 14) -> None:
    print()
    print(format_summary(slots, window_days))


def build_slack_text(slots: Sequence[Slot], window_days: int = 14) -> str:
    lines: List[str] = [f"🎉 NCT slots within {window_days} days:"]
    lines.extend(f"• {slot}" for slot in slots)
    return "\n".join(lines)


async def notify_slack(
    settings: Settings,
    slots: Sequence[Slot],
    session: Optional[aiohttp.ClientSession] = None,
) -> bool:
    """
    Post found slots to the Slack webhook.

    Sends only when a webhook is set, slots were found and the run is automated.
    Delivery errors are logged, never raised. Returns True if Slack accepted it.
    """
    webhook = settings.slack_webhook_url
    logger.info(
        "Slack: webhook=%s, slots=%s, automated=%s",
        bool(webhook),
        len(slots),
        settings.automated,
    )
    if not webhook or not slots or not settings.automated:
        logger.info("Slack: skipping notification")
        return False

    payload = {"text": build_slack_text(slots, settings.monitor.window_days)}
    own_session = session is None
    if session is None:
        session = aiohttp.ClientSession(timeout=WEBHOOK_TIMEOUT)
    try:
        async with session.post(webhook, json=payload) as resp:
            if 200 <= resp.status < 300:
                logger.info("Slack: notification sent")
                return True
            logger.warning("Slack: failed with status %s: %s", resp.status, resp.reason)
            return False
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error("Slack: error sending notification: %s", e)
        return False
    finally:
        if own_session:
            await session.close()


__all__ = ["build_slack_text", "format_summary", "notify_slack", "print_summary"]
