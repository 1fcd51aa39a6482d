from dataclasses import dataclass

from graph_calendar_mcp.infrastructure.platform_manager import get_parameters

# Constants
DEFAULT_PORT = 3000
DEFAULT_GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
DEFAULT_AUTHORITY_HOST = "https://login.microsoftonline.com"
DEFAULT_GRAPH_SCOPE = "https://graph.microsoft.com/.default"
DEFAULT_REQUEST_TIMEOUT = 30.0  # Seconds
DEFAULT_AVAILABILITY_INTERVAL = 30  # Minutes
MIN_AVAILABILITY_INTERVAL = 5
MAX_AVAILABILITY_INTERVAL = 1440


@dataclass(frozen=True)
class MCPSettings:
    """MCP configuration settings loaded from the environment."""

    # App-only credentials
    tenant_id: str
    client_id: str
    client_secret: str

    # Server settings
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    # Remote service settings
    graph_base_url: str = DEFAULT_GRAPH_BASE_URL
    authority_host: str = DEFAULT_AUTHORITY_HOST
    graph_scope: str = DEFAULT_GRAPH_SCOPE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    availability_interval: int = DEFAULT_AVAILABILITY_INTERVAL


class Config:
    """Singleton configuration manager for the calendar MCP."""

    _instance = None
    _settings = None

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get_settings(self) -> MCPSettings:
        """Get MCP settings, loading from the environment if not already cached."""
        if self._settings is None:
            self._settings = self._load_settings()
        return self._settings

    def reset(self) -> None:
        """Drop the cached settings so the next call reloads them."""
        self._settings = None

    def _load_settings(self) -> MCPSettings:
        """Load settings from environment variables."""
        # Credentials (secret)
        secrets = get_parameters(["tenant_id", "client_id", "client_secret"])

        # Server and remote service parameters (not secret)
        params = get_parameters(
            [
                "port",
                "log_level",
                "graph_base_url",
                "authority_host",
                "graph_scope",
                "request_timeout",
                "availability_interval",
            ]
        )

        settings = MCPSettings(
            tenant_id=secrets.get("tenant_id") or "",
            client_id=secrets.get("client_id") or "",
            client_secret=secrets.get("client_secret") or "",
            port=_as_int("port", params.get("port"), DEFAULT_PORT),
            log_level=(params.get("log_level") or "INFO").upper(),
            graph_base_url=(params.get("graph_base_url") or DEFAULT_GRAPH_BASE_URL).rstrip("/"),
            authority_host=(params.get("authority_host") or DEFAULT_AUTHORITY_HOST).rstrip("/"),
            graph_scope=params.get("graph_scope") or DEFAULT_GRAPH_SCOPE,
            request_timeout=_as_float(
                "request_timeout", params.get("request_timeout"), DEFAULT_REQUEST_TIMEOUT
            ),
            availability_interval=_as_int(
                "availability_interval",
                params.get("availability_interval"),
                DEFAULT_AVAILABILITY_INTERVAL,
            ),
        )

        # Validate settings
        self._validate_settings(settings)

        return settings

    def _validate_settings(self, settings: MCPSettings) -> None:
        """Validate that all required settings have valid values."""
        required_fields = ["tenant_id", "client_id", "client_secret"]

        for field in required_fields:
            if not getattr(settings, field):
                raise ValueError(f"Configuration value is invalid: {field.upper()}")

        if not 0 < settings.port < 65536:
            raise ValueError("Configuration value is invalid: PORT")

        if settings.request_timeout <= 0:
            raise ValueError("Configuration value is invalid: REQUEST_TIMEOUT")

        interval = settings.availability_interval
        if not MIN_AVAILABILITY_INTERVAL <= interval <= MAX_AVAILABILITY_INTERVAL:
            raise ValueError("Configuration value is invalid: AVAILABILITY_INTERVAL")


def _as_int(name: str, value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"Configuration value is invalid: {name.upper()}") from e


def _as_float(name: str, value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"Configuration value is invalid: {name.upper()}") from e


# Create singleton instance
config = Config()


def get_settings() -> MCPSettings:
    """Get MCP settings from the singleton config."""
    return config.get_settings()
