from datetime import datetime, timezone
from unittest.mock import patch

import pytest
import requests

from graph_calendar_mcp.infrastructure.data_models import (
    AvailabilityQuery,
    EventRequest,
    TimeRange,
)
from graph_calendar_mcp.mcp.errors import RemoteRequestFailure
from graph_calendar_mcp.services.schedule_client import ScheduleClient
from tests.conftest import http_response

RANGE = TimeRange(
    datetime(2025, 7, 9, 9, 0, tzinfo=timezone.utc),
    datetime(2025, 7, 9, 17, 0, tzinfo=timezone.utc),
)


def test_fetch_availability_returns_payload(schedule_client, session):
    data = schedule_client.fetch_availability(AvailabilityQuery("a@b.com", RANGE), "tok")

    assert data == {"value": [{"availabilityView": "0022"}]}
    assert session.post.call_args.kwargs["timeout"] == 30.0


def test_non_success_status_is_not_interpreted(schedule_client, session):
    session.post.return_value = http_response(
        500, {"value": [{"availabilityView": "0000"}]}, text="server exploded"
    )

    with pytest.raises(RemoteRequestFailure) as exc_info:
        schedule_client.fetch_availability(AvailabilityQuery("a@b.com", RANGE), "tok")

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == "server exploded"
    assert "500" in str(exc_info.value)


def test_non_json_success_body_is_a_failure(schedule_client, session):
    session.post.return_value = http_response(200, None, text="<html>")

    with pytest.raises(RemoteRequestFailure):
        schedule_client.fetch_availability(AvailabilityQuery("a@b.com", RANGE), "tok")


def test_transport_error_becomes_remote_failure(schedule_client, session):
    session.post.side_effect = requests.Timeout("read timed out")

    with pytest.raises(RemoteRequestFailure) as exc_info:
        schedule_client.create_event(EventRequest("a@b.com", "Sync", "", RANGE), "tok")

    assert exc_info.value.status_code == 0
    assert "read timed out" in str(exc_info.value)


def test_each_create_event_call_sends_one_request(schedule_client, session):
    session.post.return_value = http_response(201, {"id": "1"})
    request = EventRequest("a@b.com", "Sync", "<b>hi</b>", RANGE)

    schedule_client.create_event(request, "tok")
    schedule_client.create_event(request, "tok")

    assert session.post.call_count == 2


def test_time_range_requires_start_before_end():
    with pytest.raises(ValueError):
        TimeRange(RANGE.end, RANGE.start)


def test_query_requires_positive_interval():
    with pytest.raises(ValueError):
        AvailabilityQuery("a@b.com", RANGE, 0)


def test_each_call_uses_its_own_session_when_none_is_injected():
    client = ScheduleClient("https://graph.example.test/v1.0")
    query = AvailabilityQuery("a@b.com", RANGE)

    with patch(
        "graph_calendar_mcp.services.schedule_client.requests.Session"
    ) as session_factory:
        opened = session_factory.return_value.__enter__.return_value
        opened.post.return_value = http_response(200, {"value": []})

        client.fetch_availability(query, "tok")
        client.fetch_availability(query, "tok")

    assert session_factory.call_count == 2
    assert session_factory.return_value.__exit__.call_count == 2
    assert opened.post.call_count == 2
