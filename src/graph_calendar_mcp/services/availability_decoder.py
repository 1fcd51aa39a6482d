from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class AvailabilityCode(str, Enum):
    FREE = "0"
    TENTATIVE = "1"
    BUSY = "2"
    OUT_OF_OFFICE = "3"
    UNKNOWN = "?"

    @classmethod
    def from_char(cls, char: str) -> AvailabilityCode:
        if char in _RECOGNISED:
            return cls(char)
        return cls.UNKNOWN

    @property
    def label(self) -> str:
        return _LABELS[self]


_RECOGNISED = frozenset("0123")

_LABELS = {
    AvailabilityCode.FREE: "✅ Available",
    AvailabilityCode.TENTATIVE: "🟡 Tentative",
    AvailabilityCode.BUSY: "❌ Busy",
    AvailabilityCode.OUT_OF_OFFICE: "🔒 OOF",
    AvailabilityCode.UNKNOWN: "❓ Unknown",
}


@dataclass(frozen=True)
class AvailabilitySlot:
    start_of_slot: str  # HH:MM
    status: AvailabilityCode

    def render(self) -> str:
        return f"• {self.start_of_slot}: {self.status.label}"


def extract_availability_view(response: dict[str, Any]) -> str | None:
    """Return the availability string of the first schedule entry, if any."""
    schedules = response.get("value")
    if not isinstance(schedules, list) or not schedules:
        return None
    first = schedules[0]
    if not isinstance(first, dict):
        return None
    view = first.get("availabilityView")
    return view if isinstance(view, str) and view else None


def decode_availability(
    raw_codes: str | None,
    start_hour: int,
    interval_minutes: int = 30,
    start_minute: int = 0,
) -> list[AvailabilitySlot] | None:
    """
    Decode a per-interval status string into an ordered list of slots.

    Slot ``i`` starts ``start_minute + i * interval_minutes`` minutes after
    ``start_hour:00``. For a 30-minute interval anchored on the hour this gives
    HH:00 for even indices and HH:30 for odd ones. Every character yields one slot,
    unrecognised characters decode as UNKNOWN.

    Args:
        raw_codes: One status character per interval, or None.
        start_hour: Hour of the query's wall-clock start, as supplied by the caller.
        interval_minutes: Length of each interval in minutes.
        start_minute: Minute of the query's wall-clock start.

    Returns:
        The slots in input order, or None when there is no data to decode.
    """
    if not raw_codes:
        return None
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be positive")

    slots = []
    for index, char in enumerate(raw_codes):
        offset = start_minute + index * interval_minutes
        hour = (start_hour + offset // 60) % 24
        minute = offset % 60
        status = AvailabilityCode.from_char(char)
        slots.append(AvailabilitySlot(f"{hour:02d}:{minute:02d}", status))
    return slots


def render_availability_report(email: str, date: str, slots: list[AvailabilitySlot]) -> str:
    lines = "\n".join(slot.render() for slot in slots)
    return f"📅 Availability for **{email}** on {date}:\n\n{lines}"


def render_no_data(email: str) -> str:
    return f"⚠️ No availability data returned for {email}."
