import json
from typing import Any

from graph_calendar_mcp.infrastructure.platform_manager import create_logger
from graph_calendar_mcp.mcp.manifest import manifest
from graph_calendar_mcp.mcp.registry import ToolRegistry
from graph_calendar_mcp.mcp.router import call_tool, list_tools

MCP_PATH = "/mcp"

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
METHOD_NOT_ALLOWED = -32000

logger = create_logger(logger_name="graph-calendar-mcp")


class InvalidParams(Exception):
    pass


def create_response(
    status_code: int,
    body: str,
    content_type: str = "application/json",
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """
    Create a standard HTTP response.

    Args:
        status_code (int): HTTP status code.
        body (str): Response body.
        content_type (str, optional): Content-Type header. Defaults to "application/json".
        headers (dict[str, str] | None, optional): Additional headers. Defaults to None.

    Returns:
        dict: Standardized response dictionary.
    """
    response_headers = {"Content-Type": content_type}
    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "body": body,
        "headers": response_headers,
        "isBase64Encoded": False,
    }


def jsonrpc_error(code: int, message: str, request_id: Any = None) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": request_id}


def _jsonrpc_result(result: Any, request_id: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "result": result, "id": request_id}


def _call_params(params: Any) -> tuple[str, dict[str, Any]]:
    if not isinstance(params, dict):
        raise InvalidParams("params must be an object")
    name = params.get("name")
    if not isinstance(name, str) or not name:
        raise InvalidParams("Missing tool name")
    arguments = params.get("arguments")
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise InvalidParams("arguments must be an object")
    return name, arguments


def handle_message(message: Any, registry: ToolRegistry) -> dict[str, Any] | None:
    """
    Handle one JSON-RPC message. Returns the response object, or None for notifications.
    """
    if (
        not isinstance(message, dict)
        or message.get("jsonrpc") != "2.0"
        or not isinstance(message.get("method"), str)
    ):
        request_id = message.get("id") if isinstance(message, dict) else None
        return jsonrpc_error(INVALID_REQUEST, "Invalid Request", request_id)

    method = message["method"]
    if "id" not in message:
        logger.info(f"Notification received: {method}")
        return None

    request_id = message["id"]
    params = message.get("params")
    logger.info(f"JSON-RPC request: {method}")

    if method == "initialize":
        requested = params.get("protocolVersion") if isinstance(params, dict) else None
        return _jsonrpc_result(manifest(requested), request_id)

    elif method == "ping":
        return _jsonrpc_result({}, request_id)

    elif method == "tools/list":
        return _jsonrpc_result({"tools": list_tools(registry)}, request_id)

    elif method == "tools/call":
        try:
            name, arguments = _call_params(params)
        except InvalidParams as e:
            return jsonrpc_error(INVALID_PARAMS, f"Invalid params: {e}", request_id)

        result = call_tool(registry, name, arguments)
        if result.is_error:
            logger.error(f"Tool call {name} returned an error ({result.error_kind})")
        return _jsonrpc_result(result.to_dict(), request_id)

    logger.error(f"Method not found: {method}")
    return jsonrpc_error(METHOD_NOT_FOUND, "Method not found", request_id)


def process(event: dict[str, Any], registry: ToolRegistry) -> dict[str, Any]:
    """Process the incoming HTTP event."""

    # Get the route key and split it into method and route
    route_key = event.get("routeKey", "")
    method, _, route = route_key.partition(" ")
    logger.info(f"Processing request: {method} {route}")

    if route != MCP_PATH:
        logger.error("No route found")
        return create_response(404, "Not Found", "text/plain")

    if method in ("GET", "DELETE"):
        logger.info(f"Rejecting {method} request")
        error = jsonrpc_error(METHOD_NOT_ALLOWED, "Method not allowed.")
        return create_response(405, json.dumps(error), headers={"Allow": "POST"})

    if method != "POST":
        logger.error("Invalid method")
        return create_response(404, "Not Found", "text/plain")

    body = event.get("body") or b""
    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        logger.error("Request body is not valid JSON")
        return create_response(400, json.dumps(jsonrpc_error(PARSE_ERROR, "Parse error")))

    if isinstance(payload, list):
        if not payload:
            error = jsonrpc_error(INVALID_REQUEST, "Invalid Request")
            return create_response(400, json.dumps(error))
        responses = [r for r in (handle_message(m, registry) for m in payload) if r is not None]
        if not responses:
            return create_response(202, "")
        return create_response(200, json.dumps(responses))

    response = handle_message(payload, registry)
    if response is None:
        return create_response(202, "")
    return create_response(200, json.dumps(response))
