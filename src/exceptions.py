"""Custom exceptions for the Keycloak groups client.

Every error raised by this package derives from KeycloakError, so callers
can catch all of them with a single except clause. Failures of a request
fall into exactly two categories: the transport failed
(KeycloakConnectionError) or the server answered with a status code the
operation did not expect (KeycloakAPIError).
"""

from typing import Any


class KeycloakError(Exception):
    """Base exception for all Keycloak-related errors."""

    pass


class KeycloakAuthError(KeycloakError):
    """Raised when no usable access token is available.

    Examples:
        - Invalid client credentials
        - Token endpoint unreachable
        - Malformed token response
        - Request attempted before authenticating
    """

    pass


class KeycloakConnectionError(KeycloakError):
    """Raised when the HTTP request itself fails (DNS, connection, TLS, timeout).

    The original requests exception is kept on ``error`` and is also the
    ``__cause__`` of this exception.
    """

    def __init__(self, message: str, error: Exception):
        super().__init__(message)
        self.error = error


class KeycloakAPIError(KeycloakError):
    """Raised when Keycloak answers with an unexpected status code.

    No distinction is made between 404, 409, 401 and friends; inspect
    ``status_code`` and ``body`` to tell them apart.
    """

    def __init__(self, message: str, status_code: int | None = None, body: Any = None):
        """Initialize the API error.

        Args:
            message: Human-readable error description
            status_code: HTTP status code of the response
            body: The decoded response body (JSON if possible, else text)
        """
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class KeycloakConfigError(KeycloakError):
    """Raised when there's a configuration error.

    Examples:
        - Missing environment variables
        - Empty required parameters
    """

    pass
