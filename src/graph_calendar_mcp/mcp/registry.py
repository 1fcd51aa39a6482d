from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError

from graph_calendar_mcp.infrastructure.platform_manager import create_logger
from graph_calendar_mcp.mcp.errors import ErrorKind, SchemaViolation, ToolError, UnknownTool

FAILURE_PREFIX = "❌ "

ToolHandler = Callable[[dict[str, Any]], str | list[str]]

logger = create_logger(logger_name="graph-calendar-mcp")


@dataclass(frozen=True)
class ToolResult:
    """Uniform outcome of one tool invocation: either content blocks or a failure message."""

    content: list[dict[str, str]]
    is_error: bool = False
    error_kind: ErrorKind | None = None

    @classmethod
    def success(cls, texts: str | list[str]) -> ToolResult:
        if isinstance(texts, str):
            texts = [texts]
        return cls(content=[{"type": "text", "text": text} for text in texts])

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> ToolResult:
        return cls(
            content=[{"type": "text", "text": f"{FAILURE_PREFIX}{message}"}],
            is_error=True,
            error_kind=kind,
        )

    @property
    def text(self) -> str:
        return "\n".join(block["text"] for block in self.content)

    def to_dict(self) -> dict[str, Any]:
        return {"content": list(self.content), "isError": self.is_error}


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    input_schema: dict[str, Any]
    handler: ToolHandler
    validator: Draft7Validator = field(repr=False, compare=False)


class ToolRegistry:
    """
    Named, schema-validated tools and the dispatcher that runs them.

    Built once at startup and passed to the transport layer. Registering the same
    name twice is a configuration error raised immediately.
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(
        self,
        name: str,
        description: str,
        input_schema: dict[str, Any],
        handler: ToolHandler,
    ) -> ToolRegistry:
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")
        Draft7Validator.check_schema(input_schema)
        validator = Draft7Validator(input_schema, format_checker=Draft7Validator.FORMAT_CHECKER)
        self._tools[name] = Tool(name, description, input_schema, handler, validator)
        return self

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def list_tools(self) -> list[dict[str, Any]]:
        return [
            {"name": t.name, "description": t.description, "inputSchema": t.input_schema}
            for t in self._tools.values()
        ]

    def dispatch(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """
        Validate and run one invocation. Never raises: every failure becomes a failure result.
        """
        # Validating
        try:
            tool = self._tools.get(name)
            if tool is None:
                raise UnknownTool(name)
            args = self._validate(tool, arguments if arguments is not None else {})
        except ToolError as e:
            logger.error(f"Rejected call to {name} ({e.kind.value}): {e}")
            return ToolResult.failure(e.kind, str(e))

        # Executing
        logger.info(f"Dispatching tool: {name}")
        try:
            output = tool.handler(args)
        except ToolError as e:
            logger.error(f"Tool {name} failed ({e.kind.value}): {e}")
            return ToolResult.failure(e.kind, f"{name} failed: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error in tool {name}")
            return ToolResult.failure(ErrorKind.INTERNAL, f"{name} failed unexpectedly: {e}")

        return ToolResult.success(output)

    def _validate(self, tool: Tool, arguments: Any) -> dict[str, Any]:
        if not isinstance(arguments, dict):
            raise SchemaViolation(["arguments"], "Invalid arguments: expected an object")

        errors = sorted(tool.validator.iter_errors(arguments), key=lambda e: list(e.path))
        if errors:
            fields = _offending_fields(errors)
            details = "; ".join(_describe(e) for e in errors)
            raise SchemaViolation(fields, f"Invalid arguments for {tool.name}: {details}")

        # Fill declared defaults for optional properties the caller left out
        args = dict(arguments)
        for prop, spec in tool.input_schema.get("properties", {}).items():
            if prop not in args and "default" in spec:
                args[prop] = spec["default"]
        return args


def _offending_fields(errors: list[JsonSchemaValidationError]) -> list[str]:
    fields: list[str] = []
    for error in errors:
        for name in _error_fields(error):
            if name not in fields:
                fields.append(name)
    return fields


def _error_fields(error: JsonSchemaValidationError) -> list[str]:
    if error.validator == "required" and isinstance(error.instance, dict):
        return [name for name in error.validator_value if name not in error.instance]
    if error.absolute_path:
        return [str(error.absolute_path[0])]
    return ["arguments"]


def _describe(error: JsonSchemaValidationError) -> str:
    fields = ", ".join(_error_fields(error))
    if error.validator == "required":
        return f"missing required field(s): {fields}"
    return f"{fields}: {error.message}"
