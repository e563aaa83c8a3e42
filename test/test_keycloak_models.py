"""Tests for the Keycloak pydantic models."""

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from keycloak_models import GroupRepresentation, TokenResponse


def test_group_representation_from_keycloak_json():
    group = GroupRepresentation.model_validate(
        {
            "id": "g-1",
            "name": "engineering",
            "path": "/engineering",
            "realmRoles": ["developer"],
            "subGroups": [{"id": "g-2", "name": "backend", "path": "/engineering/backend"}],
            "access": {"view": True},
        }
    )

    assert group.realm_roles == ["developer"]
    assert group.sub_groups[0].name == "backend"
    # Unknown fields are kept
    assert group.model_extra == {"access": {"view": True}}


def test_group_representation_payload_uses_camel_case_and_drops_none():
    group = GroupRepresentation(name="engineering", realm_roles=["developer"])

    assert group.to_payload() == {"name": "engineering", "realmRoles": ["developer"]}


def test_group_representation_requires_name():
    with pytest.raises(ValidationError):
        GroupRepresentation(path="/nameless")


def test_token_response_optional_fields():
    token = TokenResponse.model_validate(
        {"access_token": "abc", "expires_in": 60, "token_type": "Bearer", "not-before-policy": 0}
    )

    assert token.refresh_expires_in == 0
    assert token.scope is None
