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
OpenID Connect Discovery: locating and retrieving the provider metadata document.
"""

import httpx
from opentelemetry import trace
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.trace import Status, StatusCode
from pydantic import ValidationError

from coreason_openid.exceptions import CoreasonOpenIdError, InvalidIdentityProviderError
from coreason_openid.models_internal import DiscoveryDocument
from coreason_openid.transport import DEFAULT_MAX_RESPONSE_BYTES, SafeHTTPTransport, fetch_json_document
from coreason_openid.utils.logger import logger

CONFIG_PATH = "/.well-known/openid-configuration"

tracer = trace.get_tracer(__name__)


def discovery_url(provider: str) -> str:
    """
    Builds the discovery document URL for a provider.

    Exactly one trailing slash is stripped before the well-known path is appended,
    so `https://idp.example/` and `https://idp.example` resolve to the same URL.

    Args:
        provider: The OpenID Provider base URL.

    Returns:
        str: The URL of the provider's discovery document.
    """
    if provider.endswith("/"):
        provider = provider[:-1]
    return provider + CONFIG_PATH


def _create_client(
    http_timeout: float, restrict_to_public_networks: bool, transport: httpx.AsyncBaseTransport | None
) -> httpx.AsyncClient:
    if restrict_to_public_networks:
        transport = SafeHTTPTransport()
    client = httpx.AsyncClient(transport=transport, timeout=http_timeout)
    HTTPXClientInstrumentor().instrument_client(client)
    return client


async def fetch_discovery_document(
    provider: str,
    client: httpx.AsyncClient | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    http_timeout: float = 5.0,
    max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES,
    restrict_to_public_networks: bool = False,
) -> DiscoveryDocument:
    """
    Fetches and parses the provider's discovery document.

    A single request is made; there are no retries.

    Args:
        provider: The OpenID Provider base URL.
        client: HTTP client to use (optional). If not provided, a transient client is created and closed.
        transport: Transport for the transient client (optional). Ignored when `client` is given.
        http_timeout: Timeout in seconds for the transient client.
        max_response_bytes: Largest document accepted.
        restrict_to_public_networks: Use `SafeHTTPTransport` for the transient client.

    Returns:
        DiscoveryDocument: The parsed metadata. Required fields are not checked here.

    Raises:
        InvalidIdentityProviderError: If the document cannot be fetched, decoded or is not a JSON object.
        ValueError: If a custom transport is combined with `restrict_to_public_networks`.
    """
    if client is None and transport is not None and restrict_to_public_networks:
        raise ValueError("transport cannot be combined with restrict_to_public_networks")

    with tracer.start_as_current_span("openid.discovery") as span:
        try:
            url = discovery_url(provider)
            span.set_attribute("http.url", url)

            if client is None:
                async with _create_client(http_timeout, restrict_to_public_networks, transport) as transient:
                    data = await fetch_json_document(transient, url, max_response_bytes)
            else:
                data = await fetch_json_document(client, url, max_response_bytes)

            logger.debug(f"discovery document {data}")
            document = DiscoveryDocument.model_validate(data)
        except (httpx.HTTPError, httpx.InvalidURL, CoreasonOpenIdError, ValidationError) as e:
            logger.error(f"OIDC discovery failed for {provider}: {e}")
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise InvalidIdentityProviderError(provider, e) from e

        span.set_status(Status(StatusCode.OK))
        return document
