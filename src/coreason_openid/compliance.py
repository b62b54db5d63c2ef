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
Listener contract for protocol compliance violations.
"""

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from coreason_openid.utils.logger import logger


@runtime_checkable
class SpecReference(Protocol):
    """
    A reference to a specific place in a protocol specification.
    """

    @property
    def name(self) -> str:
        """The unique name for this reference."""
        ...

    @property
    def url(self) -> str:
        """The URL of the specification, down to the section where possible."""
        ...

    @property
    def description(self) -> str:
        """The specification detail this reference is about."""
        ...


@runtime_checkable
class SpecComplianceListener(Protocol):
    """
    Notification sink for specification deviations.

    Implementations must return nothing and should not raise.
    """

    def on_spec_compliance_violation(self, reference: SpecReference, details: str) -> None:
        """
        Called when a violation of a specification has been detected.

        Args:
            reference: The reference to the specification being violated.
            details: The detail of the violation.
        """
        ...


class ComplianceReference(BaseModel):
    """
    Immutable `SpecReference` implementation.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique name of the reference.", examples=["OIDC_DISCOVERY_ISSUER_MISMATCH"])
    url: str = Field(..., description="Link to the specification section.")
    description: str = Field(..., description="Human-readable summary of the requirement.")


ISSUER_MISMATCH = ComplianceReference(
    name="OIDC_DISCOVERY_ISSUER_MISMATCH",
    url="https://openid.net/specs/openid-connect-discovery-1_0.html#ProviderConfigurationValidation",
    description=(
        "The issuer value returned MUST be identical to the Issuer URL that was used "
        "as the prefix to /.well-known/openid-configuration to retrieve the configuration information."
    ),
)


class LoggingComplianceListener:
    """
    Logs every violation at WARNING level and keeps them for later inspection.
    """

    def __init__(self) -> None:
        self._violations: list[tuple[SpecReference, str]] = []

    @property
    def violations(self) -> tuple[tuple[SpecReference, str], ...]:
        return tuple(self._violations)

    def on_spec_compliance_violation(self, reference: SpecReference, details: str) -> None:
        self._violations.append((reference, details))
        logger.warning(f"Spec compliance violation {reference.name} ({reference.url}): {details}")
