from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced through a tool result."""

    SCHEMA_VIOLATION = "schema_violation"
    AUTH_FAILURE = "auth_failure"
    REMOTE_REQUEST_FAILURE = "remote_request_failure"
    UNKNOWN_TOOL = "unknown_tool"
    INTERNAL = "internal"


class ToolError(Exception):
    """Base class for failures a tool invocation can end in."""

    kind: ErrorKind = ErrorKind.INTERNAL


class SchemaViolation(ToolError):
    kind = ErrorKind.SCHEMA_VIOLATION

    def __init__(self, fields: list[str], message: str) -> None:
        self.fields = fields
        super().__init__(message)


class AuthFailure(ToolError):
    kind = ErrorKind.AUTH_FAILURE


class RemoteRequestFailure(ToolError):
    """The remote service answered with a non-success status, or could not be reached."""

    kind = ErrorKind.REMOTE_REQUEST_FAILURE

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        if status_code:
            message = f"Graph API error ({status_code}): {body}"
        else:
            message = f"Graph API request failed: {body}"
        super().__init__(message)


class UnknownTool(ToolError):
    kind = ErrorKind.UNKNOWN_TOOL

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Method not found: unknown tool '{name}'")
