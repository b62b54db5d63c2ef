# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_openid

"""
Environment-driven settings for the coreason-openid package.
"""

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from coreason_openid.transport import DEFAULT_MAX_RESPONSE_BYTES


class OpenIdSettings(BaseSettings):
    """
    Relying Party settings, read from `COREASON_OIDC_*` environment variables.

    Attributes:
        provider (str): The OpenID Provider base URL (e.g. https://auth.coreason.com).
        authorization_endpoint (str | None): Pre-configured authorization endpoint. Discovered when unset.
        token_endpoint (str | None): Pre-configured token endpoint. Discovered when unset.
        client_id (str | None): The OAuth 2.0 Client Identifier.
        client_secret (SecretStr | None): The client secret shared with the provider.
        scopes (list[str]): Scopes to request, in order. JSON list in the environment.
        http_timeout (float): Timeout in seconds for the discovery request.
        max_response_bytes (int): Largest discovery document accepted.
        restrict_to_public_networks (bool): Refuse to fetch discovery from private or loopback addresses.
    """

    model_config = SettingsConfigDict(
        env_prefix="COREASON_OIDC_",
        case_sensitive=False,
    )

    provider: str
    authorization_endpoint: str | None = None
    token_endpoint: str | None = None
    client_id: str | None = None
    client_secret: SecretStr | None = None
    scopes: list[str] = Field(default_factory=list)
    http_timeout: float = Field(default=5.0, gt=0, description="Timeout in seconds for the discovery request.")
    max_response_bytes: int = Field(default=DEFAULT_MAX_RESPONSE_BYTES, gt=0)
    restrict_to_public_networks: bool = False

    @field_validator("provider")
    @classmethod
    def require_provider(cls, v: str) -> str:
        """
        Strips surrounding whitespace and rejects an empty provider.
        """
        v = v.strip()
        if not v:
            raise ValueError("Provider was not configured")
        return v

    @field_validator("authorization_endpoint", "token_endpoint")
    @classmethod
    def blank_as_unset(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v
