from __future__ import annotations

from typing import Any, Protocol

import msal
import requests

from graph_calendar_mcp.app.config import MCPSettings
from graph_calendar_mcp.infrastructure.platform_manager import create_logger
from graph_calendar_mcp.mcp.errors import AuthFailure

logger = create_logger(logger_name="graph-calendar-mcp")


class TokenProvider(Protocol):
    def acquire(self) -> str: ...


class GraphTokenProvider:
    """
    Acquire app-only bearer tokens with the OAuth 2.0 client-credentials grant.

    The exchange and the token cache are delegated to an MSAL confidential client,
    which hands back a cached token until it is close to expiry.

    Args:
        tenant_id (str): Directory (tenant) identifier.
        client_id (str): Application (client) identifier.
        client_secret (str): Application secret.
        authority_host (str): Base URL of the token authority.
        scope (str): Scope requested for the token.
        timeout (float): Timeout in seconds for requests made by MSAL.
        app (msal.ConfidentialClientApplication | None): Prebuilt client, mainly for tests.
    """

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        *,
        authority_host: str = "https://login.microsoftonline.com",
        scope: str = "https://graph.microsoft.com/.default",
        timeout: float = 30.0,
        app: msal.ConfidentialClientApplication | None = None,
    ) -> None:
        self._authority = f"{authority_host.rstrip('/')}/{tenant_id}"
        self._client_id = client_id
        self._client_secret = client_secret
        self._scope = scope
        self._timeout = timeout
        self._app = app

    @classmethod
    def from_settings(cls, settings: MCPSettings) -> GraphTokenProvider:
        return cls(
            settings.tenant_id,
            settings.client_id,
            settings.client_secret,
            authority_host=settings.authority_host,
            scope=settings.graph_scope,
            timeout=settings.request_timeout,
        )

    def _application(self) -> msal.ConfidentialClientApplication:
        # Built on first use: MSAL contacts the authority while constructing the client
        if self._app is None:
            self._app = msal.ConfidentialClientApplication(
                self._client_id,
                client_credential=self._client_secret,
                authority=self._authority,
                timeout=self._timeout,
            )
        return self._app

    def acquire(self) -> str:
        """
        Return a bearer token, exchanging the client credentials when MSAL has none cached.

        Raises:
            AuthFailure: If the exchange fails or yields no usable token.
        """
        try:
            result: dict[str, Any] = self._application().acquire_token_for_client(
                scopes=[self._scope]
            )
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Token request failed: {e.__class__.__name__}")
            raise AuthFailure(f"Failed to acquire access token: {e}") from e

        token = result.get("access_token") if isinstance(result, dict) else None
        if isinstance(token, str) and token:
            return token

        description = ""
        if isinstance(result, dict):
            description = result.get("error_description") or result.get("error") or ""
        logger.error("Token response did not contain an access token")
        raise AuthFailure(f"Failed to acquire access token. {description}".rstrip())
