from graph_calendar_mcp import __version__

SUPPORTED_PROTOCOL_VERSIONS = ("2025-06-18", "2025-03-26", "2024-11-05")


def manifest(requested_version: str | None = None) -> dict[str, object]:
    """Result of the `initialize` request for a stateless, tools-only server."""
    if requested_version in SUPPORTED_PROTOCOL_VERSIONS:
        protocol_version = requested_version
    else:
        protocol_version = SUPPORTED_PROTOCOL_VERSIONS[0]
    return {
        "protocolVersion": protocol_version,
        "capabilities": {"tools": {"listChanged": False}},
        "serverInfo": {"name": "graph-calendar-mcp", "version": __version__},
        "instructions": (
            "Calendar tools backed by Microsoft Graph. Times are UTC. "
            "Call get-current-date to resolve relative dates first."
        ),
    }
