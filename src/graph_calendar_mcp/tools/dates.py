from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def current_date(args: dict[str, Any], clock: Clock = utc_now) -> str:
    """Describe "now" and the dates one day and one week ahead, from a single clock reading."""
    now = clock()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)

    tomorrow = now + timedelta(days=1)
    next_week = now + timedelta(days=7)

    return "\n".join([
        f"📆 Today: {now.date().isoformat()}",
        f"🕒 Time: {now.strftime('%H:%M')} UTC",
        f"📌 Weekday: {now.strftime('%A')}",
        f"➡️ Tomorrow: {tomorrow.date().isoformat()}",
        f"🗓️ Next week: {next_week.date().isoformat()}",
        f"ISO: {now.isoformat(timespec='seconds').replace('+00:00', 'Z')}",
    ])
