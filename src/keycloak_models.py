"""Pydantic models for Keycloak payloads.

The group API itself passes group JSON through untouched. These models are
used where a typed shape helps: parsing the token endpoint response, and
letting callers build a group payload with validation before creating it.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GroupRepresentation(BaseModel):
    """Represents a Keycloak group.

    Example JSON from Keycloak API:
    {
        "id": "499b7073-fe1f-4b7a-a8ab-f401d9b6b8ec",
        "name": "engineering",
        "path": "/engineering",
        "attributes": {"cost-center": ["42"]},
        "realmRoles": [],
        "clientRoles": {},
        "subGroups": []
    }
    """

    model_config = ConfigDict(
        # Keycloak adds fields between versions; keep whatever it sends
        extra="allow",
        populate_by_name=True,
    )

    name: str
    id: str | None = None
    path: str | None = None
    attributes: dict[str, list[str]] | None = None
    realm_roles: list[str] | None = Field(default=None, alias="realmRoles")
    client_roles: dict[str, list[str]] | None = Field(default=None, alias="clientRoles")
    sub_groups: list["GroupRepresentation"] | None = Field(default=None, alias="subGroups")

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON body Keycloak expects."""
        return self.model_dump(by_alias=True, exclude_none=True)


class TokenResponse(BaseModel):
    """Represents an OAuth2 token response.

    Example JSON:
    {
        "access_token": "eyJhbGciOiJSUzI1NiIs...",
        "expires_in": 300,
        "refresh_expires_in": 0,
        "token_type": "Bearer",
        "not-before-policy": 0,
        "scope": "profile email"
    }
    """

    model_config = ConfigDict(extra="allow")

    access_token: str
    expires_in: int
    refresh_expires_in: int = 0
    token_type: str
    scope: str | None = None
