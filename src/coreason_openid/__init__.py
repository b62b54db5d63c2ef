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
OpenID Connect Relying Party configuration with provider metadata discovery.
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .compliance import (
    ISSUER_MISMATCH,
    ComplianceReference,
    LoggingComplianceListener,
    SpecComplianceListener,
    SpecReference,
)
from .config import OpenIdSettings
from .configuration import OpenIdConfiguration, ScopeView
from .exceptions import (
    CoreasonOpenIdError,
    InvalidIdentityProviderError,
    MissingDiscoveryFieldError,
    OpenIdConfigurationError,
    ProviderNotConfiguredError,
)

__all__ = [
    "ISSUER_MISMATCH",
    "ComplianceReference",
    "CoreasonOpenIdError",
    "InvalidIdentityProviderError",
    "LoggingComplianceListener",
    "MissingDiscoveryFieldError",
    "OpenIdConfiguration",
    "OpenIdConfigurationError",
    "OpenIdSettings",
    "ProviderNotConfiguredError",
    "ScopeView",
    "SpecComplianceListener",
    "SpecReference",
]
