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
Custom exceptions for the coreason-openid package.
"""


class CoreasonOpenIdError(Exception):
    """Base exception for all coreason-openid errors."""


class OpenIdConfigurationError(CoreasonOpenIdError):
    """
    Raised when an OpenID Connect configuration cannot be constructed.
    Matches the expected startup usage: `except OpenIdConfigurationError:`.
    """


class ProviderNotConfiguredError(OpenIdConfigurationError):
    """Raised when no identity provider URL was supplied."""

    def __init__(self, message: str = "Provider was not configured") -> None:
        super().__init__(message)


class InvalidIdentityProviderError(OpenIdConfigurationError):
    """
    Raised when the discovery document could not be fetched or parsed.

    Attributes:
        provider (str): The identity provider URL as supplied by the caller.
        cause (BaseException): The underlying transport or parse failure.
    """

    def __init__(self, provider: str, cause: BaseException) -> None:
        super().__init__(f"Invalid identity provider {provider}: {cause}")
        self.provider = provider
        self.cause = cause


class MissingDiscoveryFieldError(OpenIdConfigurationError):
    """
    Raised when a required endpoint is absent from the discovery document.

    Attributes:
        field (str): The name of the missing discovery field.
    """

    def __init__(self, field: str) -> None:
        super().__init__(f"Discovery document does not contain '{field}'")
        self.field = field


class DiscoveryDocumentError(CoreasonOpenIdError):
    """Raised when the discovery response body is not valid JSON."""


class OversizedResponseError(CoreasonOpenIdError):
    """Raised when an HTTP response is too large."""


class SecurityError(CoreasonOpenIdError):
    """Raised when a request targets a prohibited network address."""
