"""Tests for group membership operations."""

import sys
from pathlib import Path

import pytest
import requests
import responses
from responses import matchers

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from client import KeycloakClient
from exceptions import KeycloakAPIError, KeycloakConfigError, KeycloakConnectionError

BASE_URL = "http://localhost:8080"
MEMBERS_URL = f"{BASE_URL}/admin/realms/master/groups/group-1/members"
MEMBERSHIP_URL = f"{BASE_URL}/admin/realms/master/users/user-1/groups/group-1"


@pytest.fixture
def members():
    client = KeycloakClient(base_url=BASE_URL, access_token="test-token")
    return client.groups.members


@responses.activate
def test_find_members(members):
    users = [{"id": "user-1", "username": "john.doe", "enabled": True}]
    responses.get(
        MEMBERS_URL,
        json=users,
        status=200,
        match=[matchers.query_param_matcher({"first": "0", "max": "50"})],
    )

    assert members.find("master", "group-1", {"first": "0", "max": "50"}) == users
    assert responses.calls[0].request.headers["Authorization"] == "Bearer test-token"


@responses.activate
def test_find_members_of_unknown_group(members):
    responses.get(MEMBERS_URL, json={"error": "Could not find group by id"}, status=404)

    with pytest.raises(KeycloakAPIError) as exc_info:
        members.find("master", "group-1")

    assert exc_info.value.status_code == 404
    assert exc_info.value.body == {"error": "Could not find group by id"}


@responses.activate
def test_add_member(members):
    responses.put(MEMBERSHIP_URL, status=204)

    assert members.add("master", "group-1", "user-1") is None
    assert responses.calls[0].request.method == "PUT"


@responses.activate
def test_add_member_unknown_user(members):
    responses.put(MEMBERSHIP_URL, json={"error": "User not found"}, status=404)

    with pytest.raises(KeycloakAPIError) as exc_info:
        members.add("master", "group-1", "user-1")

    assert exc_info.value.status_code == 404


@responses.activate
def test_remove_member(members):
    responses.delete(MEMBERSHIP_URL, status=204)

    members.remove("master", "group-1", "user-1")

    assert responses.calls[0].request.method == "DELETE"


@responses.activate
def test_remove_member_network_error(members):
    responses.delete(MEMBERSHIP_URL, body=requests.exceptions.ConnectionError("Connection reset"))

    with pytest.raises(KeycloakConnectionError):
        members.remove("master", "group-1", "user-1")


@pytest.mark.parametrize(
    "realm, group_id, user_id, missing",
    [
        ("", "group-1", "user-1", "realm"),
        ("master", "", "user-1", "group_id"),
        ("master", "group-1", "", "user_id"),
    ],
)
def test_add_member_requires_all_parameters(members, realm, group_id, user_id, missing):
    with pytest.raises(KeycloakConfigError, match=f"{missing} parameter cannot be empty"):
        members.add(realm, group_id, user_id)
