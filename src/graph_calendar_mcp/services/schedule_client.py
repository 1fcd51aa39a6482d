from __future__ import annotations

from typing import Any
from urllib.parse import quote

import requests

from graph_calendar_mcp.app.config import MCPSettings
from graph_calendar_mcp.infrastructure.data_models import AvailabilityQuery, EventRequest
from graph_calendar_mcp.infrastructure.platform_manager import create_logger
from graph_calendar_mcp.mcp.errors import RemoteRequestFailure

_TIMEOUT = 30.0

logger = create_logger(logger_name="graph-calendar-mcp")


class ScheduleClient:
    """
    Thin client for the remote calendar API: one free/busy query and one event insert.

    Every call sends exactly one request, authenticated with the bearer token it is given.
    Non-success responses raise RemoteRequestFailure and are never interpreted as data.
    Without an injected session each call opens its own, since handlers run concurrently
    in the server's threadpool.
    """

    def __init__(
        self,
        base_url: str = "https://graph.microsoft.com/v1.0",
        *,
        timeout: float = _TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session

    @classmethod
    def from_settings(cls, settings: MCPSettings) -> ScheduleClient:
        return cls(settings.graph_base_url, timeout=settings.request_timeout)

    def fetch_availability(self, query: AvailabilityQuery, token: str) -> dict[str, Any]:
        """Fetch the schedule of a single subject over the query's window."""
        subject = query.subject_identity
        body = {
            "schedules": [subject],
            "startTime": {
                "dateTime": query.range.start_iso(),
                "timeZone": query.range.time_zone,
            },
            "endTime": {
                "dateTime": query.range.end_iso(),
                "timeZone": query.range.time_zone,
            },
            "availabilityViewInterval": query.interval_minutes,
        }
        path = f"/users/{quote(subject, safe='@')}/calendar/getSchedule"
        return self._post(path, body, token)

    def create_event(self, request: EventRequest, token: str) -> dict[str, Any]:
        """Create one calendar entry. Not idempotent: repeating the call duplicates the event."""
        event = {
            "subject": request.subject,
            "body": {"contentType": "HTML", "content": request.body_html},
            "start": {"dateTime": request.range.start_iso(), "timeZone": request.range.time_zone},
            "end": {"dateTime": request.range.end_iso(), "timeZone": request.range.time_zone},
        }
        path = f"/users/{quote(request.subject_identity, safe='@')}/events"
        return self._post(path, event, token)

    def _post(self, path: str, body: dict[str, Any], token: str) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            if self._session is not None:
                resp = self._session.post(url, json=body, headers=headers, timeout=self._timeout)
            else:
                with requests.Session() as session:
                    resp = session.post(url, json=body, headers=headers, timeout=self._timeout)
        except requests.RequestException as e:
            logger.error(f"Remote request failed ({path}): {e.__class__.__name__}")
            raise RemoteRequestFailure(0, str(e)) from e

        if not resp.ok:
            logger.error(f"Remote request returned {resp.status_code} ({path})")
            raise RemoteRequestFailure(resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError as e:
            raise RemoteRequestFailure(resp.status_code, "Response body is not JSON") from e

        return data if isinstance(data, dict) else {"value": data}
