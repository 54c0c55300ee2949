"""
OAuth 1.0a exception classes.

This module defines the exception hierarchy for the authorization flow.
Each flow error carries a stable ``code`` (useful for logging and for
callers that switch on the failure kind) and a user-facing ``description``.

Transport failures are not wrapped: ``requests.RequestException``
propagates unchanged so callers keep the network detail.
"""

CONNECTION_PROBLEM = "There was a problem connecting with your provider's OAuth service."


class OAuth1Error(Exception):
    """Base exception for all OAuth 1.0a errors."""

    code = "oauth1Error"
    description = CONNECTION_PROBLEM

    def __init__(self, message: str = ""):
        super().__init__(message or self.description)


class ConfigurationError(OAuth1Error):
    """OAuth configuration error (missing or invalid configuration)."""

    code = "configuration"
    description = "The OAuth client is not configured correctly."


class TokenStorageError(OAuth1Error):
    """Credential store operation failed (file I/O error)."""

    code = "tokenStorage"
    description = "The OAuth token could not be stored."


class InvalidTokenError(OAuth1Error):
    """Request-token response was malformed or missing fields."""

    code = "invalidToken"


class InvalidAuthorizeURLError(OAuth1Error):
    """The user authorization URL could not be constructed."""

    code = "invalidAuthorizeURL"


class InvalidVerifierError(OAuth1Error):
    """Authorization redirect was missing the token or verifier."""

    code = "invalidVerifier"


class InvalidAccessTokenError(OAuth1Error):
    """Access-token response was malformed or missing fields."""

    code = "invalidAccessToken"


class AuthorizationCancelledError(OAuth1Error):
    """The user dismissed the interactive authorization step."""

    code = "cancelled"
    description = "You cancelled authorization with your provider's OAuth service."


class AuthorizationInProgressError(OAuth1Error):
    """An authorization flow is already running on this coordinator."""

    code = "authorizationInProgress"
    description = "Authorization is already in progress."
