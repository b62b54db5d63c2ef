# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_openid

import socket
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import MagicMock, patch

import httpx
import pytest

from coreason_openid.utils.logger import logger

PROVIDER = "https://idp.example"


@pytest.fixture(autouse=True)
def mock_dns_resolution() -> Generator[MagicMock, None, None]:
    """
    Globally patches socket.getaddrinfo to return a safe public IP by default,
    so no test depends on real DNS. Tests exercising blocked ranges
    configure this mock's return value.
    """
    safe_response = [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("8.8.8.8", 443))]

    with patch("socket.getaddrinfo", return_value=safe_response) as mock:
        yield mock


@pytest.fixture
def discovery_payload() -> dict[str, Any]:
    return {
        "issuer": PROVIDER,
        "authorization_endpoint": "https://idp.example/auth",
        "token_endpoint": "https://idp.example/token",
        "jwks_uri": "https://idp.example/jwks",
    }


class RecordingHandler:
    """MockTransport handler that records requests and replays a fixed response."""

    def __init__(self, response: httpx.Response | Exception) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def mock_idp() -> Callable[[httpx.Response | Exception], tuple[httpx.AsyncClient, RecordingHandler]]:
    """
    Factory returning an AsyncClient backed by httpx.MockTransport and its recording handler.
    """

    def _factory(response: httpx.Response | Exception) -> tuple[httpx.AsyncClient, RecordingHandler]:
        handler = RecordingHandler(response)
        return httpx.AsyncClient(transport=httpx.MockTransport(handler)), handler

    return _factory


@pytest.fixture
def idp_transport() -> Callable[[httpx.Response | Exception], tuple[httpx.MockTransport, RecordingHandler]]:
    """
    Factory returning a MockTransport and its recording handler, for the blocking builder
    which creates its own client inside its event loop.
    """

    def _factory(response: httpx.Response | Exception) -> tuple[httpx.MockTransport, RecordingHandler]:
        handler = RecordingHandler(response)
        return httpx.MockTransport(handler), handler

    return _factory


@pytest.fixture
def log_messages() -> Generator[list[Any], None, None]:
    """Captures loguru records emitted during the test."""
    messages: list[Any] = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{message}")
    yield messages
    logger.remove(handler_id)
