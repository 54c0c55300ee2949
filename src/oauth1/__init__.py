"""
OAuth 1.0a client module.

This module implements the three-legged OAuth 1.0a flow (request token →
user authorization → access token) and PLAINTEXT request signing for
every later API call.

Public API:
    OAuth1Config: Client configuration
    OAuthCoordinator: High-level OAuth interface
    OAuth1Auth: requests auth hook signing with the held token
    AuthRequest: Provider endpoints for one authorization attempt
    Token: Token/secret pair
    FileCredentialStore / MemoryCredentialStore: Token persistence
    BrowserAuthorizationPresenter: Browser + local redirect receiver
    RequestsTransport: requests-based HTTP transport

Exceptions:
    OAuth1Error: Base exception
    ConfigurationError: Configuration error
    TokenStorageError: Storage operation failed
    InvalidTokenError: Malformed request-token response
    InvalidAuthorizeURLError: Authorize URL could not be built
    InvalidVerifierError: Redirect missing token or verifier
    InvalidAccessTokenError: Malformed access-token response
    AuthorizationCancelledError: User dismissed authorization
    AuthorizationInProgressError: A flow is already running
"""

from .auth_server import AuthorizationPresenter, BrowserAuthorizationPresenter
from .config import OAuth1Config, SignatureMethod
from .coordinator import OAuth1Auth, OAuthCoordinator
from .exceptions import (
    AuthorizationCancelledError,
    AuthorizationInProgressError,
    ConfigurationError,
    InvalidAccessTokenError,
    InvalidAuthorizeURLError,
    InvalidTokenError,
    InvalidVerifierError,
    OAuth1Error,
    TokenStorageError,
)
from .models import AuthorizeResponse, AuthRequest, RequestTokenResponse
from .token_storage import (
    CredentialStore,
    FileCredentialStore,
    MemoryCredentialStore,
    Token,
)
from .transport import HTTPTransport, RequestsTransport

__all__ = [
    # Configuration
    "OAuth1Config",
    "SignatureMethod",
    # Models
    "AuthRequest",
    "AuthorizeResponse",
    "RequestTokenResponse",
    "Token",
    # Collaborators
    "CredentialStore",
    "FileCredentialStore",
    "MemoryCredentialStore",
    "AuthorizationPresenter",
    "BrowserAuthorizationPresenter",
    "HTTPTransport",
    "RequestsTransport",
    # Coordinator
    "OAuthCoordinator",
    "OAuth1Auth",
    # Exceptions
    "OAuth1Error",
    "ConfigurationError",
    "TokenStorageError",
    "InvalidTokenError",
    "InvalidAuthorizeURLError",
    "InvalidVerifierError",
    "InvalidAccessTokenError",
    "AuthorizationCancelledError",
    "AuthorizationInProgressError",
]
