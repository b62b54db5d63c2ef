# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_openid

import os
from typing import Any
from unittest.mock import patch

import httpx
import pytest
from pydantic import ValidationError

from coreason_openid.compliance import LoggingComplianceListener
from coreason_openid.config import OpenIdSettings
from coreason_openid.configuration import OpenIdConfiguration


def test_settings_loading() -> None:
    """Test loading settings from environment variables."""
    with patch.dict(
        os.environ,
        {
            "COREASON_OIDC_PROVIDER": "https://idp.example",
            "COREASON_OIDC_CLIENT_ID": "cid",
            "COREASON_OIDC_CLIENT_SECRET": "secret",
            "COREASON_OIDC_SCOPES": '["openid", "profile"]',
        },
    ):
        settings = OpenIdSettings()

    assert settings.provider == "https://idp.example"
    assert settings.client_id == "cid"
    assert settings.client_secret is not None
    assert settings.client_secret.get_secret_value() == "secret"
    assert settings.scopes == ["openid", "profile"]
    assert settings.authorization_endpoint is None
    assert settings.token_endpoint is None
    assert settings.http_timeout == 5.0
    assert settings.max_response_bytes == 1_000_000
    assert settings.restrict_to_public_networks is False


def test_settings_case_insensitive() -> None:
    with patch.dict(os.environ, {"coreason_oidc_provider": "https://lower.example"}):
        settings = OpenIdSettings()

    assert settings.provider == "https://lower.example"


def test_settings_provider_required() -> None:
    with patch.dict(os.environ, {}, clear=True):
        with pytest.raises(ValidationError):
            OpenIdSettings()


@pytest.mark.parametrize("provider", ["", "   "])
def test_settings_provider_not_blank(provider: str) -> None:
    with pytest.raises(ValidationError, match="Provider was not configured"):
        OpenIdSettings(provider=provider)


def test_settings_provider_stripped() -> None:
    assert OpenIdSettings(provider="  https://idp.example/ ").provider == "https://idp.example/"


def test_settings_blank_endpoints_unset() -> None:
    settings = OpenIdSettings(provider="https://idp.example", authorization_endpoint=" ", token_endpoint="")
    assert settings.authorization_endpoint is None
    assert settings.token_endpoint is None


@pytest.mark.parametrize(("field", "value"), [("http_timeout", 0), ("max_response_bytes", -1)])
def test_settings_limits_positive(field: str, value: Any) -> None:
    with pytest.raises(ValidationError):
        OpenIdSettings(provider="https://idp.example", **{field: value})


def test_from_settings_trusted_endpoints() -> None:
    settings = OpenIdSettings(
        provider="https://idp.example",
        authorization_endpoint="https://idp.example/auth",
        token_endpoint="https://idp.example/token",
        client_id="cid",
        client_secret="secret",
        scopes=["openid", "email"],
    )

    config = OpenIdConfiguration.from_settings(settings)

    assert config.authorization_endpoint == "https://idp.example/auth"
    assert config.token_endpoint == "https://idp.example/token"
    assert config.client_id == "cid"
    assert config.client_secret is not None
    assert config.client_secret.get_secret_value() == "secret"
    assert config.scopes == ["openid", "email"]


def test_from_settings_discovers(idp_transport: Any, discovery_payload: dict[str, Any]) -> None:
    transport, handler = idp_transport(httpx.Response(200, json=discovery_payload))
    settings = OpenIdSettings(provider="https://idp.example/", scopes=["openid"])
    listener = LoggingComplianceListener()

    config = OpenIdConfiguration.from_settings(settings, transport=transport, compliance_listener=listener)

    assert str(handler.requests[0].url) == "https://idp.example/.well-known/openid-configuration"
    assert config.token_endpoint == "https://idp.example/token"
    assert config.scopes == ["openid"]
    # The configured provider keeps its trailing slash, so the advertised issuer differs
    assert len(listener.violations) == 1
