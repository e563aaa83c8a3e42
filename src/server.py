"""Keycloak groups MCP server.

Exposes the group operations of the Keycloak Admin API as MCP tools:
- Finding groups and fetching one group by id
- Creating a group
- Listing, adding and removing group members

Configuration comes from the environment (or a .env file):
KEYCLOAK_URL, CLIENT_ID, CLIENT_SECRET and optionally KEYCLOAK_AUTH_REALM.
"""

import logging
import os
import sys
from typing import Any

from dotenv import load_dotenv
from fastmcp import FastMCP

from client import KeycloakClient
from exceptions import KeycloakConfigError, KeycloakError
from keycloak_models import GroupRepresentation

logger = logging.getLogger(__name__)

mcp = FastMCP("keycloak-groups")

load_dotenv()

# Set by main() before the server starts handling tool calls
keycloak_client: KeycloakClient | None = None


def validate_environment() -> tuple[str, str, str, str]:
    """Validate that all required environment variables are set.

    Returns:
        Tuple of (keycloak_url, client_id, client_secret, auth_realm)

    Raises:
        KeycloakConfigError: If any required environment variable is missing or empty
    """
    keycloak_url = os.getenv("KEYCLOAK_URL", "").strip()
    client_id = os.getenv("CLIENT_ID", "").strip()
    client_secret = os.getenv("CLIENT_SECRET", "").strip()
    auth_realm = os.getenv("KEYCLOAK_AUTH_REALM", "").strip() or "master"

    missing = []
    if not keycloak_url:
        missing.append("KEYCLOAK_URL")
    if not client_id:
        missing.append("CLIENT_ID")
    if not client_secret:
        missing.append("CLIENT_SECRET")

    if missing:
        raise KeycloakConfigError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Please check your .env file."
        )

    return keycloak_url, client_id, client_secret, auth_realm


def build_client() -> KeycloakClient:
    """Create a KeycloakClient from the environment."""
    keycloak_url, client_id, client_secret, auth_realm = validate_environment()
    return KeycloakClient(
        base_url=keycloak_url,
        client_id=client_id,
        client_secret=client_secret,
        realm=auth_realm,
    )


def _client() -> KeycloakClient:
    if keycloak_client is None:
        raise KeycloakConfigError("Keycloak client is not initialized")
    return keycloak_client


# =============================================================================
# MCP Tool Definitions
# =============================================================================


@mcp.tool()
def find_groups(
    realm: str,
    search: str | None = None,
    first: int | None = None,
    max_results: int | None = None,
) -> Any:
    """Find the groups of a realm.

    Groups are returned as a hierarchy: each top-level group lists its
    children under "subGroups".

    Args:
        realm: The name of the realm (e.g., "master")
        search: Only return groups whose name contains this text
        first: Index of the first group to return (for paging)
        max_results: Maximum number of groups to return

    Example response:
        [
            {"id": "499b7073-...", "name": "engineering", "path": "/engineering", "subGroups": []}
        ]
    """
    params: dict[str, Any] = {}
    if search is not None:
        params["search"] = search
    if first is not None:
        params["first"] = first
    if max_results is not None:
        params["max"] = max_results

    try:
        groups = _client().groups.find_all(realm, params)
        logger.info(f"Retrieved {len(groups or [])} groups from realm '{realm}'")
        return groups
    except KeycloakError as e:
        logger.error(f"Failed to find groups in realm '{realm}': {e}")
        raise


@mcp.tool()
def get_group(realm: str, group_id: str) -> Any:
    """Get a single group by its id (UUID, not its name)."""
    try:
        return _client().groups.find_by_id(realm, group_id)
    except KeycloakError as e:
        logger.error(f"Failed to get group '{group_id}' in realm '{realm}': {e}")
        raise


@mcp.tool()
def create_group(realm: str, name: str, attributes: dict[str, list[str]] | None = None) -> Any:
    """Create a top-level group and return it as Keycloak stored it.

    Args:
        realm: The realm to create the group in
        name: The group name, unique within the realm
        attributes: Optional attributes, e.g. {"cost-center": ["42"]}

    Raises:
        KeycloakAPIError: With status 409 if a group with that name exists
    """
    group = GroupRepresentation(name=name, attributes=attributes)
    try:
        return _client().groups.create(realm, group)
    except KeycloakError as e:
        logger.error(f"Failed to create group '{name}' in realm '{realm}': {e}")
        raise


@mcp.tool()
def get_group_members(realm: str, group_id: str, first: int | None = None, max_results: int | None = None) -> Any:
    """List the users that are members of a group."""
    options: dict[str, Any] = {}
    if first is not None:
        options["first"] = first
    if max_results is not None:
        options["max"] = max_results

    try:
        members = _client().groups.members.find(realm, group_id, options)
        logger.info(f"Retrieved {len(members or [])} members of group '{group_id}' in realm '{realm}'")
        return members
    except KeycloakError as e:
        logger.error(f"Failed to list members of group '{group_id}' in realm '{realm}': {e}")
        raise


@mcp.tool()
def add_group_member(realm: str, group_id: str, user_id: str) -> str:
    """Add a user (by user id) to a group (by group id)."""
    try:
        _client().groups.members.add(realm, group_id, user_id)
    except KeycloakError as e:
        logger.error(f"Failed to add user '{user_id}' to group '{group_id}': {e}")
        raise
    return f"User {user_id} added to group {group_id}"


@mcp.tool()
def remove_group_member(realm: str, group_id: str, user_id: str) -> str:
    """Remove a user (by user id) from a group (by group id)."""
    try:
        _client().groups.members.remove(realm, group_id, user_id)
    except KeycloakError as e:
        logger.error(f"Failed to remove user '{user_id}' from group '{group_id}': {e}")
        raise
    return f"User {user_id} removed from group {group_id}"


def main() -> None:
    """Start the MCP server over stdio."""
    global keycloak_client

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        keycloak_client = build_client()
    except KeycloakConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    logger.info("Keycloak client initialized successfully")

    logger.info("Starting Keycloak groups MCP server...")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
