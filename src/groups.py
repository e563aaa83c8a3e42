"""Group operations of the Keycloak Admin REST API.

Group JSON is passed through exactly as Keycloak sends it; the server owns
the schema and the hierarchy (subGroups), this module only moves documents.
"""

import logging
from typing import TYPE_CHECKING, Any, Mapping

from exceptions import KeycloakAPIError, KeycloakConfigError
from group_members import GroupMembersAPI
from keycloak_models import GroupRepresentation

if TYPE_CHECKING:
    from client import KeycloakClient

logger = logging.getLogger(__name__)


def group_id_from_location(location: str | None) -> str | None:
    """Return everything after the last "/" of a Location header, or None if that is empty.

    e.g. https://<host>/auth/admin/realms/<realm>/groups/499b7073-fe1f-4b7a-a8ab-f401d9b6b8ec
    """
    if not location:
        return None
    return location.rsplit("/", 1)[-1] or None


class GroupsAPI:
    """Find and create groups in a realm.

    Holds a reference to the KeycloakClient it was created with and reads
    its base URL and token on every call.

    Attributes:
        client: The client context requests are sent through
        members: Group membership operations bound to the same client
    """

    def __init__(self, client: "KeycloakClient"):
        self.client = client
        self.members = GroupMembersAPI(client)

    def find(self, realm: str, options: Mapping[str, Any] | None = None) -> Any:
        """Find groups, or a single group when options carries an ``id``.

        A truthy ``options["id"]`` targets ``/groups/{id}`` and drops every
        other option. Otherwise all options are sent as query parameters;
        this includes ``groupId``, which Keycloak does not treat as an id.
        Prefer find_all() or find_by_id() in new code.

        Args:
            realm: The name of the realm (not the realm id), e.g. "master"
            options: Query parameters, or {"id": ...} to fetch one group

        Returns:
            A list of group objects, or one group object when an id is given
        """
        options = dict(options or {})
        group_id = options.get("id")
        if group_id:
            return self.find_by_id(realm, group_id)
        return self.find_all(realm, options)

    def find_all(self, realm: str, params: Mapping[str, Any] | None = None) -> Any:
        """Get the group hierarchy of a realm.

        Args:
            realm: The name of the realm, e.g. "master"
            params: Query parameters forwarded verbatim (search, first, max,
                briefRepresentation, ...)

        Returns:
            The decoded JSON body, normally a list of group objects

        Raises:
            KeycloakConfigError: If realm is empty
            KeycloakConnectionError: If Keycloak could not be reached
            KeycloakAPIError: If Keycloak does not answer 200
        """
        if not realm:
            raise KeycloakConfigError("realm parameter cannot be empty")

        endpoint = f"/admin/realms/{realm}/groups"
        return self.client.request_json("GET", endpoint, 200, params=dict(params or {}))

    def find_by_id(self, realm: str, group_id: str) -> Any:
        """Get a single group by its id."""
        if not realm:
            raise KeycloakConfigError("realm parameter cannot be empty")
        if not group_id:
            raise KeycloakConfigError("group_id parameter cannot be empty")

        endpoint = f"/admin/realms/{realm}/groups/{group_id}"
        return self.client.request_json("GET", endpoint, 200)

    def create(self, realm: str, group: Mapping[str, Any] | GroupRepresentation) -> Any:
        """Create a top-level group and return it as Keycloak stored it.

        Keycloak answers 201 with an empty body and the new group's URL in
        the Location header, so the group is fetched again by the id found
        there. A create therefore costs two round trips.

        Args:
            realm: The name of the realm, e.g. "master"
            group: The group representation; ``name`` must be unique in the
                realm. A plain mapping is sent unchanged.

        Returns:
            The created group object, as returned by find_by_id()

        Raises:
            KeycloakConfigError: If realm is empty
            KeycloakConnectionError: If Keycloak could not be reached
            KeycloakAPIError: If Keycloak does not answer 201, or the 201
                response carries no usable Location header
        """
        if not realm:
            raise KeycloakConfigError("realm parameter cannot be empty")

        if isinstance(group, GroupRepresentation):
            payload = group.to_payload()
        else:
            payload = dict(group)

        endpoint = f"/admin/realms/{realm}/groups/"
        response = self.client.request("POST", endpoint, 201, json=payload)

        location = response.headers.get("Location")
        group_id = group_id_from_location(location)
        if group_id is None:
            logger.error(f"Group created in realm '{realm}' but Location header is unusable: {location!r}")
            raise KeycloakAPIError(
                f"POST {endpoint} returned no group id in the Location header",
                status_code=response.status_code,
                body=location,
            )

        logger.info(f"Created group '{payload.get('name')}' ({group_id}) in realm '{realm}'")
        return self.find_by_id(realm, group_id)
