# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_openid

import pytest

from coreason_openid.exceptions import (
    CoreasonOpenIdError,
    DiscoveryDocumentError,
    InvalidIdentityProviderError,
    MissingDiscoveryFieldError,
    OpenIdConfigurationError,
    OversizedResponseError,
    ProviderNotConfiguredError,
    SecurityError,
)


@pytest.mark.parametrize(
    "exc_type",
    [
        OpenIdConfigurationError,
        ProviderNotConfiguredError,
        InvalidIdentityProviderError,
        MissingDiscoveryFieldError,
        DiscoveryDocumentError,
        OversizedResponseError,
        SecurityError,
    ],
)
def test_hierarchy(exc_type: type[Exception]) -> None:
    assert issubclass(exc_type, CoreasonOpenIdError)


def test_construction_errors_share_a_base() -> None:
    for exc_type in (ProviderNotConfiguredError, InvalidIdentityProviderError, MissingDiscoveryFieldError):
        assert issubclass(exc_type, OpenIdConfigurationError)


def test_field_and_discovery_errors_are_distinct() -> None:
    assert not issubclass(MissingDiscoveryFieldError, InvalidIdentityProviderError)
    assert not issubclass(InvalidIdentityProviderError, MissingDiscoveryFieldError)


def test_provider_not_configured_message() -> None:
    assert str(ProviderNotConfiguredError()) == "Provider was not configured"


def test_invalid_identity_provider_carries_cause() -> None:
    cause = ValueError("bad json")
    err = InvalidIdentityProviderError("https://idp.example", cause)

    assert err.provider == "https://idp.example"
    assert err.cause is cause
    assert str(err) == "Invalid identity provider https://idp.example: bad json"


def test_missing_field_names_field() -> None:
    err = MissingDiscoveryFieldError("token_endpoint")

    assert err.field == "token_endpoint"
    assert "token_endpoint" in str(err)
