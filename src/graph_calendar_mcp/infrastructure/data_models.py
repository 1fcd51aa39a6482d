"""
Request-scoped value objects shared by the tools and the schedule client.
"""

from dataclasses import dataclass
from datetime import datetime

DEFAULT_INTERVAL_MINUTES = 30


@dataclass(frozen=True)
class TimeRange:
    start: datetime
    end: datetime
    time_zone: str = "UTC"

    def __post_init__(self) -> None:
        if not self.start < self.end:
            raise ValueError("start must be earlier than end")

    def start_iso(self) -> str:
        return _iso(self.start)

    def end_iso(self) -> str:
        return _iso(self.end)


@dataclass(frozen=True)
class AvailabilityQuery:
    subject_identity: str
    range: TimeRange
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES

    def __post_init__(self) -> None:
        if self.interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")


@dataclass(frozen=True)
class EventRequest:
    subject_identity: str
    subject: str
    body_html: str
    range: TimeRange


def _iso(value: datetime) -> str:
    # Wall-clock value in the range's time zone; the zone travels separately
    return value.replace(tzinfo=None).isoformat(timespec="seconds")
