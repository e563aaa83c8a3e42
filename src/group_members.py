"""Group membership operations of the Keycloak Admin REST API."""

import logging
from typing import TYPE_CHECKING, Any, Mapping

from exceptions import KeycloakConfigError

if TYPE_CHECKING:
    from client import KeycloakClient

logger = logging.getLogger(__name__)


def _require(**params: str) -> None:
    for name, value in params.items():
        if not value:
            raise KeycloakConfigError(f"{name} parameter cannot be empty")


class GroupMembersAPI:
    """List, add and remove the members of a group."""

    def __init__(self, client: "KeycloakClient"):
        self.client = client

    def find(self, realm: str, group_id: str, options: Mapping[str, Any] | None = None) -> Any:
        """List the users that belong to a group.

        Args:
            realm: The name of the realm, e.g. "master"
            group_id: The id of the group
            options: Query parameters forwarded verbatim (first, max,
                briefRepresentation)

        Returns:
            The decoded JSON body, a list of user objects
        """
        _require(realm=realm, group_id=group_id)
        endpoint = f"/admin/realms/{realm}/groups/{group_id}/members"
        return self.client.request_json("GET", endpoint, 200, params=dict(options or {}))

    def add(self, realm: str, group_id: str, user_id: str) -> None:
        """Make a user a member of a group. Keycloak answers 204 even if it already was."""
        _require(realm=realm, group_id=group_id, user_id=user_id)
        endpoint = f"/admin/realms/{realm}/users/{user_id}/groups/{group_id}"
        self.client.request("PUT", endpoint, 204)
        logger.info(f"Added user {user_id} to group {group_id} in realm '{realm}'")

    def remove(self, realm: str, group_id: str, user_id: str) -> None:
        """Remove a user from a group."""
        _require(realm=realm, group_id=group_id, user_id=user_id)
        endpoint = f"/admin/realms/{realm}/users/{user_id}/groups/{group_id}"
        self.client.request("DELETE", endpoint, 204)
        logger.info(f"Removed user {user_id} from group {group_id} in realm '{realm}'")
