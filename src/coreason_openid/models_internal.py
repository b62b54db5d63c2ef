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
Internal data models for the coreason-openid package.
These are not exposed in the public API.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DiscoveryDocument(BaseModel):
    """
    OIDC Provider Metadata from .well-known/openid-configuration.

    Every field is optional here; presence of the required endpoints is
    checked by the configuration builder so it can name the missing field.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Kept as sent so that a wrong-typed issuer still compares unequal to the provider
    issuer: Any = Field(default=None, description="The issuer identifier advertised by the provider.")
    authorization_endpoint: str | None = Field(default=None, description="The authorization endpoint URL.")
    token_endpoint: str | None = Field(default=None, description="The token endpoint URL.")

    @field_validator("authorization_endpoint", "token_endpoint", mode="before")
    @classmethod
    def drop_non_strings(cls, v: Any) -> str | None:
        """
        Treats endpoint values of the wrong JSON type as absent.
        """
        return v if isinstance(v, str) else None
