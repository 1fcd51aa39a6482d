from unittest.mock import MagicMock, patch

import pytest
import requests

from graph_calendar_mcp.app.config import get_settings
from graph_calendar_mcp.auth.graph_token import GraphTokenProvider
from graph_calendar_mcp.mcp.errors import AuthFailure

SCOPE = "https://graph.microsoft.com/.default"


@pytest.fixture
def msal_app():
    app = MagicMock()
    app.acquire_token_for_client.return_value = {
        "access_token": "abc",
        "expires_in": 3599,
        "token_type": "Bearer",
    }
    return app


def _provider(app=None) -> GraphTokenProvider:
    return GraphTokenProvider(
        "tenant-1",
        "client-1",
        "secret-1",
        authority_host="https://login.example.test/",
        timeout=12.5,
        app=app,
    )


def test_client_credentials_exchange(msal_app):
    assert _provider(msal_app).acquire() == "abc"

    msal_app.acquire_token_for_client.assert_called_once_with(scopes=[SCOPE])


def test_confidential_client_built_once_with_tenant_authority(msal_app):
    with patch(
        "graph_calendar_mcp.auth.graph_token.msal.ConfidentialClientApplication",
        return_value=msal_app,
    ) as factory:
        provider = _provider()
        factory.assert_not_called()

        provider.acquire()
        provider.acquire()

    factory.assert_called_once_with(
        "client-1",
        client_credential="secret-1",
        authority="https://login.example.test/tenant-1",
        timeout=12.5,
    )
    assert msal_app.acquire_token_for_client.call_count == 2


def test_rejected_exchange_raises_auth_failure(msal_app):
    msal_app.acquire_token_for_client.return_value = {
        "error": "invalid_client",
        "error_description": "AADSTS7000215: Invalid secret.",
    }

    with pytest.raises(AuthFailure) as exc_info:
        _provider(msal_app).acquire()

    assert str(exc_info.value).startswith("Failed to acquire access token.")
    assert "AADSTS7000215" in str(exc_info.value)
    assert "secret-1" not in str(exc_info.value)


def test_missing_access_token_raises_auth_failure(msal_app):
    msal_app.acquire_token_for_client.return_value = {"token_type": "Bearer"}

    with pytest.raises(AuthFailure, match="Failed to acquire access token."):
        _provider(msal_app).acquire()


def test_transport_error_raises_auth_failure(msal_app):
    msal_app.acquire_token_for_client.side_effect = requests.Timeout("timed out")

    with pytest.raises(AuthFailure, match="timed out"):
        _provider(msal_app).acquire()


def test_authority_discovery_failure_raises_auth_failure(msal_app):
    with patch(
        "graph_calendar_mcp.auth.graph_token.msal.ConfidentialClientApplication",
        side_effect=ValueError("Unable to get authority configuration"),
    ):
        with pytest.raises(AuthFailure, match="authority configuration"):
            _provider().acquire()


def test_from_settings_uses_configured_authority(monkeypatch):
    monkeypatch.setenv("TENANT_ID", "test-tenant")
    monkeypatch.delenv("AUTHORITY_HOST", raising=False)

    provider = GraphTokenProvider.from_settings(get_settings())

    assert provider._authority == "https://login.microsoftonline.com/test-tenant"
