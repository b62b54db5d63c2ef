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
OpenIdConfiguration: the Relying Party's view of a single OpenID Provider.
"""

from collections.abc import Iterator, Sequence
from functools import partial
from typing import Any, overload

import anyio
import httpx
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, SecretStr, computed_field, model_validator

from coreason_openid.compliance import ISSUER_MISMATCH, SpecComplianceListener
from coreason_openid.config import OpenIdSettings
from coreason_openid.discovery import fetch_discovery_document
from coreason_openid.exceptions import MissingDiscoveryFieldError, ProviderNotConfiguredError
from coreason_openid.transport import DEFAULT_MAX_RESPONSE_BYTES
from coreason_openid.utils.logger import logger


class ScopeView(Sequence[str]):
    """
    Read-only, live view over a configuration's scopes.
    """

    __slots__ = ("_scopes",)

    def __init__(self, scopes: list[str]) -> None:
        self._scopes = scopes

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[str]: ...

    def __getitem__(self, index: int | slice) -> str | Sequence[str]:
        if isinstance(index, slice):
            return tuple(self._scopes[index])
        return self._scopes[index]

    def __len__(self) -> int:
        return len(self._scopes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._scopes)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (ScopeView, list, tuple)):
            return list(self) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ScopeView({self._scopes!r})"


class OpenIdConfiguration(BaseModel):
    """
    Holds the configuration for an OpenID Connect Relying Party.

    Instances are frozen; only the scopes can grow, through `add_scopes`.
    Use `build`, `build_async` or `from_settings` to create one so that the
    endpoints are discovered when they were not supplied.

    Attributes:
        provider (str): The OpenID Provider URL as supplied by the caller.
        authorization_endpoint (str): Where authorization requests are sent.
        token_endpoint (str): Where token requests are sent.
        client_id (str | None): OAuth 2.0 Client Identifier valid at the provider.
        client_secret (SecretStr | None): Secret known only by the client and the provider.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: str = Field(..., min_length=1, description="The OpenID Provider URL.")
    authorization_endpoint: str = Field(..., min_length=1, description="The authorization endpoint URL.")
    token_endpoint: str = Field(..., min_length=1, description="The token endpoint URL.")
    client_id: str | None = Field(default=None, description="The OAuth 2.0 Client Identifier.")
    client_secret: SecretStr | None = Field(default=None, description="The client secret. Protected from logging.")

    _scopes: list[str] = PrivateAttr(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def accept_dumped_issuer(cls, data: Any) -> Any:
        """
        Lets `model_dump` output validate again. `issuer` is derived, so a
        supplied value is dropped when it equals `provider` and refused otherwise.
        """
        if isinstance(data, dict) and "issuer" in data:
            data = dict(data)
            if data.pop("issuer") != data.get("provider"):
                raise ValueError("issuer is derived from provider and must equal it")
        return data

    @computed_field  # type: ignore[prop-decorator]
    @property
    def issuer(self) -> str:
        """The trusted issuer identity, always the configured provider."""
        return self.provider

    @property
    def scopes(self) -> ScopeView:
        return ScopeView(self._scopes)

    def add_scopes(self, *scopes: str | None) -> None:
        """
        Appends scopes in call order. Duplicates are kept; `None` entries are skipped.

        Not safe for concurrent use; callers must serialize appends.
        """
        self._scopes.extend(scope for scope in scopes if scope is not None)

    @classmethod
    async def build_async(
        cls,
        provider: str | None,
        authorization_endpoint: str | None = None,
        token_endpoint: str | None = None,
        client_id: str | None = None,
        client_secret: str | SecretStr | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        compliance_listener: SpecComplianceListener | None = None,
        http_timeout: float = 5.0,
        max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES,
        restrict_to_public_networks: bool = False,
    ) -> "OpenIdConfiguration":
        """
        Creates a configuration, discovering the endpoints when either is missing.

        When both endpoints are supplied they are trusted as-is and no request is
        made. Otherwise both are taken from the provider's discovery document.

        Args:
            provider: The URL of the OpenID Provider.
            authorization_endpoint: The provider's authorization endpoint, if known.
            token_endpoint: The provider's token endpoint, if known.
            client_id: OAuth 2.0 Client Identifier valid at the provider.
            client_secret: The client secret known only by the client and the provider.
            client: HTTP client for the discovery request (optional). It must belong to the
                running event loop and is left open.
            transport: Transport for the builder-owned client, used when `client` is not given.
            compliance_listener: Notified when the discovered issuer does not match the provider.
            http_timeout: Discovery timeout in seconds when no client is given.
            max_response_bytes: Largest discovery document accepted.
            restrict_to_public_networks: Refuse discovery against private or loopback addresses.
                Cannot be combined with `transport`.

        Returns:
            OpenIdConfiguration: A fully populated configuration.

        Raises:
            ProviderNotConfiguredError: If `provider` is missing. Raised before any I/O.
            InvalidIdentityProviderError: If the discovery document cannot be fetched or parsed.
            MissingDiscoveryFieldError: If a required endpoint is absent from the document.
        """
        if not provider:
            raise ProviderNotConfiguredError()

        if not authorization_endpoint or not token_endpoint:
            document = await fetch_discovery_document(
                provider,
                client,
                transport=transport,
                http_timeout=http_timeout,
                max_response_bytes=max_response_bytes,
                restrict_to_public_networks=restrict_to_public_networks,
            )

            if not document.authorization_endpoint:
                raise MissingDiscoveryFieldError("authorization_endpoint")
            if not document.token_endpoint:
                raise MissingDiscoveryFieldError("token_endpoint")

            authorization_endpoint = document.authorization_endpoint
            token_endpoint = document.token_endpoint

            if document.issuer is not None and document.issuer != provider:
                details = f"Discovered issuer '{document.issuer}' does not match provider '{provider}'"
                logger.warning(f"The provider in the metadata is not correct. {details}")
                if compliance_listener is not None:
                    compliance_listener.on_spec_compliance_violation(ISSUER_MISMATCH, details)

        return cls(
            provider=provider,
            authorization_endpoint=authorization_endpoint,
            token_endpoint=token_endpoint,
            client_id=client_id,
            client_secret=client_secret,
        )

    @classmethod
    def build(
        cls,
        provider: str | None,
        authorization_endpoint: str | None = None,
        token_endpoint: str | None = None,
        client_id: str | None = None,
        client_secret: str | SecretStr | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        compliance_listener: SpecComplianceListener | None = None,
        http_timeout: float = 5.0,
        max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES,
        restrict_to_public_networks: bool = False,
    ) -> "OpenIdConfiguration":
        """
        Blocking facade over `build_async`.

        Each call runs in its own event loop, so an `httpx.AsyncClient` cannot be
        shared across calls; the discovery client is created and closed inside
        the loop. Pass `transport` to control how it connects. Must not be called
        from inside a running event loop.
        """
        if not provider:
            raise ProviderNotConfiguredError()

        return anyio.run(
            partial(
                cls.build_async,
                provider,
                authorization_endpoint,
                token_endpoint,
                client_id,
                client_secret,
                transport=transport,
                compliance_listener=compliance_listener,
                http_timeout=http_timeout,
                max_response_bytes=max_response_bytes,
                restrict_to_public_networks=restrict_to_public_networks,
            )
        )

    @classmethod
    def from_settings(
        cls,
        settings: OpenIdSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        compliance_listener: SpecComplianceListener | None = None,
    ) -> "OpenIdConfiguration":
        """
        Creates a configuration from `OpenIdSettings` and applies its scopes.
        """
        config = cls.build(
            settings.provider,
            settings.authorization_endpoint,
            settings.token_endpoint,
            settings.client_id,
            settings.client_secret,
            transport=transport,
            compliance_listener=compliance_listener,
            http_timeout=settings.http_timeout,
            max_response_bytes=settings.max_response_bytes,
            restrict_to_public_networks=settings.restrict_to_public_networks,
        )
        config.add_scopes(*settings.scopes)
        return config
