# Run with: graph-calendar-mcp
# or:       uvicorn --factory graph_calendar_mcp.fast_api_server.server:create_app --port 3000
#
# Requires TENANT_ID, CLIENT_ID and CLIENT_SECRET in the environment.

import base64
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from graph_calendar_mcp import __version__
from graph_calendar_mcp.app.config import get_settings
from graph_calendar_mcp.handler import mcp_handler
from graph_calendar_mcp.infrastructure.platform_manager import create_logger
from graph_calendar_mcp.mcp.registry import ToolRegistry
from graph_calendar_mcp.mcp.router import build_registry_from_settings


def _lambda_to_fastapi_response(lambda_resp: dict[str, Any]) -> Response:
    """
    Convert a Lambda-style proxy response into a FastAPI Response.

    Args:
        lambda_resp (dict): A dict like:
            {
                "statusCode": int,
                "headers": {"Content-Type": str, ...},
                "body": str,
                "isBase64Encoded": bool
            }

    Returns:
        Response: A FastAPI-compatible Response object.
    """
    status_code = lambda_resp.get("statusCode", 200)
    headers = dict(lambda_resp.get("headers", {}))
    content_type = headers.pop("Content-Type", "text/plain")
    body = lambda_resp.get("body", "")

    if lambda_resp.get("isBase64Encoded", False):
        body = base64.b64decode(body)

    # 202 Accepted carries no body
    if status_code == 202:
        return Response(status_code=status_code, headers=headers)

    return Response(content=body, status_code=status_code, media_type=content_type, headers=headers)


async def _process_request(request: Request) -> Response:
    """Convert a FastAPI request to a Lambda-style event and run it through the handler."""
    body = await request.body()
    method = request.method
    path = request.url.path
    routeKey = f"{method} {path}"

    event = {
        "routeKey": routeKey,
        "raw_path": path,
        "body": body,
        "isBase64Encoded": False,
        "headers": request.headers,
        "requestContext": {"routeKey": routeKey, "http": {"method": method, "path": path}},
    }
    registry: ToolRegistry = request.app.state.registry
    # Tool calls block on remote I/O; keep them off the event loop
    lambda_response = await run_in_threadpool(mcp_handler, event, registry)
    return _lambda_to_fastapi_response(lambda_response)


def create_app(registry: ToolRegistry | None = None) -> FastAPI:
    """
    Create the HTTP app. Without an explicit registry, settings are loaded from the
    environment and a missing credential fails here, at startup.
    """
    if registry is None:
        settings = get_settings()
        create_logger(logger_name="graph-calendar-mcp", log_level=settings.log_level)
        registry = build_registry_from_settings(settings)

    fastapi_app = FastAPI(title="Graph Calendar MCP Service", version=__version__)
    fastapi_app.state.registry = registry

    fastapi_app.add_api_route("/mcp", _process_request, methods=["POST", "GET", "DELETE"])

    @fastapi_app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    return fastapi_app


def main() -> None:
    settings = get_settings()
    logger = create_logger(logger_name="graph-calendar-mcp", log_level=settings.log_level)
    fastapi_app = create_app()
    logger.info(f"MCP Streamable HTTP Server listening on port {settings.port}")
    uvicorn.run(fastapi_app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
