import os
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

# Credentials must exist before any module loads settings
os.environ.setdefault("TENANT_ID", "test-tenant")
os.environ.setdefault("CLIENT_ID", "test-client")
os.environ.setdefault("CLIENT_SECRET", "test-secret")

from graph_calendar_mcp.app.config import config  # noqa: E402
from graph_calendar_mcp.mcp.router import build_registry  # noqa: E402
from graph_calendar_mcp.mcp.registry import ToolRegistry  # noqa: E402
from graph_calendar_mcp.services.schedule_client import ScheduleClient  # noqa: E402

FROZEN_NOW = datetime(2025, 1, 1, 0, 0, tzinfo=timezone.utc)


class FakeTokens:
    """Token provider double that counts acquisitions."""

    def __init__(self, token: str = "test-token", error: Exception | None = None) -> None:
        self.token = token
        self.error = error
        self.calls = 0

    def acquire(self) -> str:
        self.calls += 1
        if self.error:
            raise self.error
        return self.token


def http_response(status_code: int = 200, payload: Any = None, text: str | None = None) -> MagicMock:
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    if payload is None:
        resp.json.side_effect = ValueError("No JSON")
    else:
        resp.json.return_value = payload
    resp.text = text if text is not None else ("" if payload is None else str(payload))
    return resp


@pytest.fixture(autouse=True)
def reset_config() -> Iterator[None]:
    config.reset()
    yield
    config.reset()


@pytest.fixture
def tokens() -> FakeTokens:
    return FakeTokens()


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock(spec=requests.Session)
    session.post.return_value = http_response(200, {"value": [{"availabilityView": "0022"}]})
    return session


@pytest.fixture
def schedule_client(session: MagicMock) -> ScheduleClient:
    return ScheduleClient("https://graph.example.test/v1.0", session=session)


@pytest.fixture
def registry(tokens: FakeTokens, schedule_client: ScheduleClient) -> ToolRegistry:
    return build_registry(tokens, schedule_client, clock=lambda: FROZEN_NOW)
