from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

from graph_calendar_mcp.auth.graph_token import TokenProvider
from graph_calendar_mcp.infrastructure.data_models import (
    AvailabilityQuery,
    EventRequest,
    TimeRange,
)
from graph_calendar_mcp.infrastructure.platform_manager import create_logger
from graph_calendar_mcp.mcp.errors import SchemaViolation
from graph_calendar_mcp.services.availability_decoder import (
    decode_availability,
    extract_availability_view,
    render_availability_report,
    render_no_data,
)
from graph_calendar_mcp.services.schedule_client import ScheduleClient
from graph_calendar_mcp.tools.dates import Clock, utc_now

UTC = "UTC"
FORWARD_WINDOW = timedelta(hours=1)

logger = create_logger(logger_name="graph-calendar-mcp")


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise SchemaViolation(["date"], f"Invalid date '{value}': expected YYYY-MM-DD") from e


def _parse_iso(field: str, value: str) -> datetime:
    # Make it RFC 3339-friendly for fromisoformat
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise SchemaViolation([field], f"Invalid {field} '{value}': expected ISO 8601") from e


def _fetch_slots_report(
    tokens: TokenProvider,
    client: ScheduleClient,
    query: AvailabilityQuery,
    report_date: str,
) -> str:
    token = tokens.acquire()
    data = client.fetch_availability(query, token)

    view = extract_availability_view(data)
    start = query.range.start
    slots = decode_availability(view, start.hour, query.interval_minutes, start.minute)
    if slots is None:
        logger.info(f"No availability data for {query.subject_identity}")
        return render_no_data(query.subject_identity)

    return render_availability_report(query.subject_identity, report_date, slots)


def availability_graph(
    args: dict[str, Any],
    *,
    tokens: TokenProvider,
    client: ScheduleClient,
    interval_minutes: int = 30,
) -> str:
    """Availability of one user between two UTC wall-clock times on one date."""
    email = args["email"]
    day = _parse_date(args["date"])
    start_hour, start_minute = (int(part) for part in args["startTime"].split(":"))
    end_hour, end_minute = (int(part) for part in args["endTime"].split(":"))

    start = datetime(day.year, day.month, day.day, start_hour, start_minute, tzinfo=timezone.utc)
    end = datetime(day.year, day.month, day.day, end_hour, end_minute, tzinfo=timezone.utc)
    if not start < end:
        raise SchemaViolation(
            ["startTime", "endTime"], "Invalid time range: startTime must be before endTime"
        )

    query = AvailabilityQuery(email, TimeRange(start, end, UTC), interval_minutes)
    return _fetch_slots_report(tokens, client, query, day.isoformat())


def availability_now(
    args: dict[str, Any],
    *,
    tokens: TokenProvider,
    client: ScheduleClient,
    interval_minutes: int = 30,
    clock: Clock = utc_now,
) -> str:
    """Availability of one user over the hour starting at the current interval."""
    now = clock()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)

    # Floor to the interval boundary so slot labels line up with the returned codes
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    elapsed = (now - midnight) // timedelta(minutes=interval_minutes)
    start = midnight + elapsed * timedelta(minutes=interval_minutes)
    end = start + FORWARD_WINDOW

    query = AvailabilityQuery(args["email"], TimeRange(start, end, UTC), interval_minutes)
    window = f"{start.date().isoformat()}, {start:%H:%M}-{end:%H:%M} UTC"
    return _fetch_slots_report(tokens, client, query, window)


def create_calendar_event(
    args: dict[str, Any],
    *,
    tokens: TokenProvider,
    client: ScheduleClient,
) -> str:
    email = args["email"]
    subject = args["subject"]
    time_zone = args.get("timeZone") or UTC
    start = _parse_iso("startDateTime", args["startDateTime"])
    end = _parse_iso("endDateTime", args["endDateTime"])

    if (start.tzinfo is None) != (end.tzinfo is None):
        raise SchemaViolation(
            ["startDateTime", "endDateTime"],
            "startDateTime and endDateTime must both include or both omit a UTC offset",
        )
    if start.tzinfo is not None:
        # Explicit offsets win over timeZone: send the instants as UTC wall-clock times
        start = start.astimezone(timezone.utc)
        end = end.astimezone(timezone.utc)
        time_zone = UTC
    if not start < end:
        raise SchemaViolation(
            ["startDateTime", "endDateTime"], "startDateTime must be before endDateTime"
        )

    event_range = TimeRange(start, end, time_zone)
    request = EventRequest(email, subject, args.get("content") or "", event_range)

    token = tokens.acquire()
    created = client.create_event(request, token)
    logger.info(f"Event created for {email}")

    text = f'✅ Event created successfully for {email} with subject "{subject}".'
    if created.get("id"):
        text += f"\nEvent ID: {created['id']}"
    if created.get("webLink"):
        text += f"\nLink: {created['webLink']}"
    return text
