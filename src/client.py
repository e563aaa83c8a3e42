"""Keycloak Admin API client context.

KeycloakClient holds the two things every admin call needs: the server's
base URL and a bearer access token. The token is either handed in by the
caller or fetched once with the OAuth2 client credentials grant. It is never
refreshed behind the caller's back; when it expires, requests fail with 401
and the caller decides what to do (e.g. call authenticate() again).

All HTTP traffic goes through KeycloakClient.request(), which maps the
outcome onto exactly two failure modes:
- the transport failed -> KeycloakConnectionError
- the status code was not the expected one -> KeycloakAPIError (with body)
"""

import logging
import time
from typing import Any

import requests
from pydantic import ValidationError

from exceptions import (
    KeycloakAPIError,
    KeycloakAuthError,
    KeycloakConfigError,
    KeycloakConnectionError,
)
from groups import GroupsAPI
from keycloak_models import TokenResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


def decode_body(response: requests.Response) -> Any:
    """Return the JSON body of a response, its text if it isn't JSON, or None if empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class KeycloakClient:
    """Client context for the Keycloak Admin REST API.

    Attributes:
        base_url: The base URL of the Keycloak server
        client_id: The OAuth2 client ID (optional when access_token is given)
        client_secret: The OAuth2 client secret (optional when access_token is given)
        realm: The realm to authenticate against (default: "master")
        access_token: The current bearer token (None until authenticated)
        token_expiry: Unix timestamp when the current token expires (0 if unknown).
            Informational only; the client never refreshes on expiry
        timeout: Seconds to wait for each HTTP request
        groups: Group operations bound to this client

    Example:
        >>> client = KeycloakClient(
        ...     base_url="http://localhost:8080",
        ...     client_id="admin-cli",
        ...     client_secret="secret",
        ... )
        >>> client.authenticate()
        >>> groups = client.groups.find_all("master", {"search": "eng"})
    """

    def __init__(
        self,
        base_url: str,
        client_id: str | None = None,
        client_secret: str | None = None,
        realm: str = "master",
        access_token: str | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
    ):
        """Initialize the Keycloak client.

        Args:
            base_url: The base URL of the Keycloak server (e.g., "http://localhost:8080")
            client_id: The OAuth2 client ID for authentication
            client_secret: The OAuth2 client secret for authentication
            realm: The realm to authenticate against (default: "master")
            access_token: A bearer token obtained elsewhere
            timeout: Seconds to wait for each request, None to wait forever

        Raises:
            KeycloakConfigError: If a required parameter is empty
        """
        if not base_url:
            raise KeycloakConfigError("base_url cannot be empty")
        if not realm:
            raise KeycloakConfigError("realm cannot be empty")
        if not access_token:
            if not client_id:
                raise KeycloakConfigError("client_id cannot be empty")
            if not client_secret:
                raise KeycloakConfigError("client_secret cannot be empty")

        self.base_url = base_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.realm = realm
        self.access_token: str | None = access_token
        self.token_expiry: float = 0
        self.timeout = timeout
        self.groups = GroupsAPI(self)

    def _get_access_token(self) -> str:
        """Obtain a new access token with the client credentials grant.

        Returns:
            The access token string

        Raises:
            KeycloakAuthError: If authentication fails for any reason
        """
        token_endpoint = f"{self.base_url}/realms/{self.realm}/protocol/openid-connect/token"

        client_credentials = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }

        try:
            response = requests.post(token_endpoint, data=client_credentials, timeout=self.timeout)
            response.raise_for_status()
            token_data = TokenResponse.model_validate(response.json())
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to obtain access token: {e}")
            raise KeycloakAuthError(f"Authentication failed: {e}") from e
        except (ValueError, ValidationError) as e:
            logger.error(f"Failed to parse token response: {e}")
            raise KeycloakAuthError(f"Invalid token response format: {e}") from e

        self.token_expiry = time.time() + token_data.expires_in
        return token_data.access_token

    def authenticate(self) -> str:
        """Fetch a token with the stored client credentials and keep it.

        Returns:
            The new access token

        Raises:
            KeycloakAuthError: If no credentials are configured or the grant fails
        """
        if not self.client_id or not self.client_secret:
            raise KeycloakAuthError("No client credentials configured to authenticate with")
        self.access_token = self._get_access_token()
        logger.info(f"Authenticated client '{self.client_id}' against realm '{self.realm}'")
        return self.access_token

    def _ensure_token(self) -> str:
        # First use fetches a token; an existing one is used as-is, expired or not.
        if not self.access_token:
            if not self.client_id or not self.client_secret:
                raise KeycloakAuthError("Not authenticated: no access token and no client credentials")
            self.authenticate()
        return self.access_token

    def request(
        self,
        method: str,
        endpoint: str,
        expected_status: int,
        **kwargs: Any,
    ) -> requests.Response:
        """Make an authenticated request to the Keycloak Admin API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API path (e.g., "/admin/realms/master/groups")
            expected_status: The only status code treated as success
            **kwargs: Additional arguments to pass to requests.request()

        Returns:
            The response, whose status code equals expected_status

        Raises:
            KeycloakAuthError: If no token is held and none can be fetched
            KeycloakConnectionError: If the request could not be completed
            KeycloakAPIError: If the server answered with any other status
        """
        token = self._ensure_token()

        url = f"{self.base_url}{endpoint}"
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {token}"

        if "timeout" not in kwargs:
            kwargs["timeout"] = self.timeout

        logger.debug(f"{method} {url}")
        try:
            response = requests.request(method, url, headers=headers, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {method} {url}: {e}")
            raise KeycloakConnectionError(f"Failed to communicate with Keycloak: {e}", error=e) from e

        if response.status_code != expected_status:
            body = decode_body(response)
            logger.error(f"Keycloak API error: {method} {url} returned {response.status_code}: {body}")
            raise KeycloakAPIError(
                f"{method} {endpoint} returned {response.status_code}, expected {expected_status}",
                status_code=response.status_code,
                body=body,
            )

        return response

    def request_json(self, method: str, endpoint: str, expected_status: int, **kwargs: Any) -> Any:
        """Same as request(), but return the decoded response body."""
        return decode_body(self.request(method, endpoint, expected_status, **kwargs))
