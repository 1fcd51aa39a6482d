from __future__ import annotations

from functools import partial
from typing import Any

from graph_calendar_mcp.auth.graph_token import GraphTokenProvider, TokenProvider
from graph_calendar_mcp.app.config import MCPSettings
from graph_calendar_mcp.mcp.registry import ToolHandler, ToolRegistry, ToolResult
from graph_calendar_mcp.mcp.schemas import (
    AVAILABILITY_GRAPH,
    AVAILABILITY_NOW,
    CREATE_EVENT,
    CURRENT_DATE,
    LIST,
)
from graph_calendar_mcp.services.schedule_client import ScheduleClient
from graph_calendar_mcp.tools.calendar import (
    availability_graph,
    availability_now,
    create_calendar_event,
)
from graph_calendar_mcp.tools.dates import Clock, current_date, utc_now

ALL_TOOLS = (AVAILABILITY_GRAPH, AVAILABILITY_NOW, CREATE_EVENT, CURRENT_DATE)


def build_registry(
    tokens: TokenProvider,
    client: ScheduleClient,
    *,
    tools: tuple[str, ...] | list[str] = ALL_TOOLS,
    interval_minutes: int = 30,
    clock: Clock = utc_now,
) -> ToolRegistry:
    """
    Build the tool registry, registering only the named tools.

    Args:
        tokens: Source of bearer tokens for the remote service.
        client: Schedule client used by the calendar tools.
        tools: Names of the tools to register, in listing order.
        interval_minutes: Availability interval length.
        clock: Source of the current UTC instant.

    Raises:
        ValueError: If a tool name is unknown or listed twice.
    """
    handlers: dict[str, ToolHandler] = {
        AVAILABILITY_GRAPH: partial(
            availability_graph, tokens=tokens, client=client, interval_minutes=interval_minutes
        ),
        AVAILABILITY_NOW: partial(
            availability_now,
            tokens=tokens,
            client=client,
            interval_minutes=interval_minutes,
            clock=clock,
        ),
        CREATE_EVENT: partial(create_calendar_event, tokens=tokens, client=client),
        CURRENT_DATE: partial(current_date, clock=clock),
    }

    registry = ToolRegistry()
    for name in tools:
        if name not in handlers:
            raise ValueError(f"Unknown tool: {name}")
        spec = LIST[name]
        registry.register(spec["name"], spec["description"], spec["input_schema"], handlers[name])
    return registry


def build_registry_from_settings(settings: MCPSettings) -> ToolRegistry:
    return build_registry(
        GraphTokenProvider.from_settings(settings),
        ScheduleClient.from_settings(settings),
        interval_minutes=settings.availability_interval,
    )


def list_tools(registry: ToolRegistry) -> list[dict[str, Any]]:
    return registry.list_tools()


def call_tool(registry: ToolRegistry, name: str, args: dict[str, Any]) -> ToolResult:
    return registry.dispatch(name, args)
