import json
from typing import Any

from graph_calendar_mcp.app.main import INTERNAL_ERROR, create_response, jsonrpc_error, process
from graph_calendar_mcp.infrastructure.platform_manager import create_logger
from graph_calendar_mcp.mcp.registry import ToolRegistry

logger = create_logger(logger_name="graph-calendar-mcp")


def mcp_handler(event: dict[str, Any], registry: ToolRegistry) -> dict[str, Any]:
    """Entry point for one HTTP event. Unhandled defects become a JSON-RPC internal error."""
    try:
        result = process(event, registry)
        # Type assertion: process() returns dict[str, Any] as declared
        assert isinstance(result, dict)
        return result
    except Exception:
        logger.exception("Error handling MCP request")
        body = jsonrpc_error(INTERNAL_ERROR, "Internal server error")
        return create_response(500, json.dumps(body))
