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
HTTP transport helpers: bounded JSON retrieval and DNS-pinned SSRF protection.
"""

import ipaddress
import json
import socket
from typing import Any

import anyio
import httpx

from coreason_openid.exceptions import DiscoveryDocumentError, OversizedResponseError, SecurityError
from coreason_openid.utils.logger import logger

DEFAULT_MAX_RESPONSE_BYTES = 1_000_000


async def fetch_json_document(
    client: httpx.AsyncClient,
    url: str,
    max_bytes: int = DEFAULT_MAX_RESPONSE_BYTES,
) -> Any:
    """
    Performs a GET request and decodes the body as JSON, refusing oversized bodies.

    Args:
        client: The async HTTP client to issue the request with.
        url: The URL to fetch.
        max_bytes: Upper bound on the response body size.

    Returns:
        Any: The decoded JSON value.

    Raises:
        httpx.HTTPError: On transport failure or a non-2xx status.
        OversizedResponseError: If the body exceeds `max_bytes`.
        DiscoveryDocumentError: If the body is not valid JSON or nests too deeply to decode.
    """
    async with client.stream("GET", url, follow_redirects=True) as response:
        response.raise_for_status()

        content_length = response.headers.get("Content-Length")
        if content_length and content_length.isdigit() and int(content_length) > max_bytes:
            raise OversizedResponseError(f"Response from {url} declares {content_length} bytes (limit {max_bytes})")

        content = bytearray()
        async for chunk in response.aiter_bytes():
            content.extend(chunk)
            if len(content) > max_bytes:
                raise OversizedResponseError(f"Response from {url} exceeds {max_bytes} bytes")

    try:
        return json.loads(content)
    except (ValueError, RecursionError) as e:
        # RecursionError: nesting deeper than the decoder stack
        raise DiscoveryDocumentError(f"Invalid JSON response from {url}: {e}") from e


_BLOCKED_CATEGORIES = (
    ("loopback", "is_loopback"),
    ("link-local", "is_link_local"),
    ("multicast", "is_multicast"),
    ("reserved", "is_reserved"),
    ("private", "is_private"),
)


def address_block_reason(address: ipaddress.IPv4Address | ipaddress.IPv6Address) -> str | None:
    """
    Names the non-public range an address falls in, or returns None for a public address.
    """
    for label, attribute in _BLOCKED_CATEGORIES:
        if getattr(address, attribute):
            return label
    return None


async def resolve_public_address(hostname: str) -> str:
    """
    Resolves a discovery host to a single public address.

    IP literals are checked directly. Hostnames are resolved once and the first
    public address is chosen; non-public ones are skipped.

    Raises:
        SecurityError: If no public address is available for the host.
    """
    try:
        literal = ipaddress.ip_address(hostname)
    except ValueError:
        literal = None

    if literal is not None:
        reason = address_block_reason(literal)
        if reason is not None:
            logger.warning(f"Refusing discovery request to {hostname}: {reason} address")
            raise SecurityError(f"Access to {hostname} is blocked ({reason} address)")
        return str(literal)

    try:
        addr_infos = await anyio.to_thread.run_sync(socket.getaddrinfo, hostname, None, 0, socket.SOCK_STREAM)
    except socket.gaierror as e:
        logger.error(f"DNS resolution failed for {hostname}: {e}")
        raise SecurityError(f"DNS resolution failed for {hostname}") from e

    skipped: list[str] = []
    for *_, sockaddr in addr_infos:
        try:
            address = ipaddress.ip_address(sockaddr[0])
        except ValueError:
            continue
        reason = address_block_reason(address)
        if reason is None:
            return str(address)
        skipped.append(f"{address} ({reason})")

    logger.warning(f"Refusing discovery request to {hostname}: no public address among {skipped}")
    raise SecurityError(f"No valid public IP found for {hostname}: {', '.join(skipped) or 'no addresses'}")


class SafeHTTPTransport(httpx.AsyncHTTPTransport):
    """
    An async transport that refuses discovery requests to internal networks.

    Each request is pinned to the address chosen by `resolve_public_address`,
    with the original Host header and TLS SNI kept, so the connection goes to
    the address that was checked rather than one a second lookup returns.
    """

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        hostname = request.url.host
        address = await resolve_public_address(hostname)
        if address != hostname:
            self._pin(request, address)
        return await super().handle_async_request(request)

    @staticmethod
    def _pin(request: httpx.Request, address: str) -> None:
        hostname = request.url.host
        request.extensions["sni_hostname"] = hostname
        if "Host" not in request.headers:
            request.headers["Host"] = request.url.netloc.decode("ascii")
        request.url = request.url.copy_with(host=address)
        logger.debug(f"Discovery host {hostname} pinned to {address}")
