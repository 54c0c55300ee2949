"""
OAuth coordinator for high-level OAuth 1.0a operations.

This module provides the main interface applications use. It drives the
three-legged authorization flow, holds the resulting access token, signs
outgoing requests with it and publishes authentication state changes.
"""

import logging
import threading
from typing import Callable, List, Optional, TypeVar

import requests
from requests.auth import AuthBase

from .auth_server import AuthorizationPresenter, BrowserAuthorizationPresenter
from .config import OAuth1Config
from .exceptions import AuthorizationInProgressError, OAuth1Error, TokenStorageError
from .headers import build_headers
from .models import Authenticated, AuthRequest
from .token_exchange import TokenExchange
from .token_storage import CredentialStore, FileCredentialStore, Token
from .transport import HTTPTransport, RequestsTransport

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")
AuthStateListener = Callable[[bool], None]


class OAuth1Auth(AuthBase):
    """
    requests auth hook that signs every request with the coordinator's token.

    Example:
        session.get(url, auth=coordinator.auth)
    """

    def __init__(self, coordinator: "OAuthCoordinator"):
        self.coordinator = coordinator

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        return self.coordinator.authorize_request(request)


class OAuthCoordinator:
    """
    High-level coordinator for OAuth 1.0a operations.

    Token state is guarded by a lock that is never held across network
    calls or the interactive step, so ``authorize_request``, ``logout`` and
    ``is_authenticated`` stay usable while a flow is pending. At most one
    authorization flow runs at a time.

    Example:
        coordinator = OAuthCoordinator()
        if not coordinator.is_authenticated:
            coordinator.start_authorization(AuthRequest(
                request_url="https://provider/oauth/request_token",
                authorize_url="https://provider/oauth/authorize",
                access_token_url="https://provider/oauth/access_token",
            ))
        response = requests.get(api_url, auth=coordinator.auth)
    """

    def __init__(
        self,
        config: Optional[OAuth1Config] = None,
        store: Optional[CredentialStore] = None,
        transport: Optional[HTTPTransport] = None,
        presenter: Optional[AuthorizationPresenter] = None,
    ):
        """
        Initialize OAuth coordinator.

        Any persisted token is loaded from the credential store.

        Args:
            config: OAuth configuration (loads from environment if not provided)
            store: Credential store (file-based store if not provided)
            transport: HTTP transport (requests session if not provided)
            presenter: Interactive presenter (browser presenter if not provided)
        """
        self.config = config or OAuth1Config.from_env()
        self.store = store or FileCredentialStore(self.config.token_path)
        self.transport = transport or RequestsTransport(
            self.config.session, timeout=self.config.request_timeout
        )
        self.presenter = presenter or BrowserAuthorizationPresenter(self.config)
        self.exchange = TokenExchange(self.config, self.transport)

        self._lock = threading.Lock()
        # Orders persistence and notifications the same way as mutations
        self._publish_lock = threading.RLock()
        self._listeners: List[AuthStateListener] = []
        self._in_flight = False
        self._token: Optional[Token] = self._load_token()

    def _load_token(self) -> Optional[Token]:
        try:
            token = self.store.get(self.config.credential_key)
        except TokenStorageError as e:
            logger.warning(f"Could not load persisted token: {e}")
            return None

        if token is not None:
            logger.info("Loaded persisted OAuth token")
        return token

    @property
    def token(self) -> Optional[Token]:
        """Token used to authorize requests, or None."""
        with self._lock:
            return self._token

    @property
    def is_authenticated(self) -> bool:
        """Whether an access token is currently held."""
        with self._lock:
            return self._token is not None

    @property
    def in_progress(self) -> bool:
        """Whether an authorization flow is currently running."""
        with self._lock:
            return self._in_flight

    @property
    def auth(self) -> OAuth1Auth:
        """requests auth hook bound to this coordinator."""
        return OAuth1Auth(self)

    def subscribe(self, listener: AuthStateListener) -> Callable[[], None]:
        """
        Register a listener for authentication state changes.

        The listener is called with True when a token is installed and
        False when it is cleared.

        Returns:
            Callable that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, authenticated: bool) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(authenticated)
            except Exception:
                logger.exception("Authentication state listener failed")

    def _set_token(self, token: Optional[Token]) -> None:
        """Install or clear the token, then persist and publish the change."""
        key = self.config.credential_key
        with self._publish_lock:
            with self._lock:
                self._token = token

            try:
                if token is not None:
                    self.store.set(token, key)
                else:
                    self.store.remove(key)
            except TokenStorageError as e:
                logger.warning(f"Token persistence failed, keeping in-memory state: {e}")

            self._publish(token is not None)

    def start_authorization(
        self,
        auth_request: AuthRequest,
        presenter: Optional[AuthorizationPresenter] = None,
    ) -> Token:
        """
        Run the complete OAuth 1.0a authorization flow.

        This orchestrates:
        1. Request token from the provider
        2. User authorization through the presenter
        3. Access token exchange
        4. Installing, persisting and publishing the new token

        Args:
            auth_request: Provider endpoints and presenter anchor
            presenter: Presenter for this attempt (defaults to the coordinator's)

        Returns:
            The new access token

        Raises:
            AuthorizationInProgressError: If a flow is already running
            OAuth1Error: If any step fails (subclass names the failure)
            requests.RequestException: On network failure
        """
        with self._lock:
            if self._in_flight:
                logger.warning("Authorization already in progress")
                raise AuthorizationInProgressError()
            self._in_flight = True

        try:
            token_response = self.exchange.request_token(auth_request)
            authorize_response = self.exchange.present_authorization(
                auth_request, token_response, presenter or self.presenter
            )
            token = self.exchange.access_token(auth_request, authorize_response)

            self._set_token(token)
            logger.info("Authorization complete, token saved")
            return token
        except OAuth1Error as e:
            logger.error(f"Authorization failed ({e.code}): {e}")
            raise
        except requests.RequestException as e:
            logger.error(f"Network error during authorization: {e}")
            raise
        finally:
            with self._lock:
                self._in_flight = False

    def authorize_request(self, request: RequestT) -> RequestT:
        """
        Fill out Authorization and User-Agent headers for a gated endpoint.

        Signs with whatever token is currently held (or an empty temporary
        token when there is none). Safe to call while a flow is running.

        Args:
            request: requests.Request or PreparedRequest to sign in place

        Returns:
            The same request
        """
        with self._lock:
            token = self._token
        return build_headers(request, self.config, Authenticated(), token)

    def logout(self) -> None:
        """
        Remove the held token and its persisted copy.

        Safe to call at any time. A flow still running afterwards will
        install its token when it completes.
        """
        self._set_token(None)
        logger.info("Logged out, token removed")

    def get_status(self) -> dict:
        """
        Get current authorization status for diagnostics.

        Returns:
            Dictionary with:
            - authenticated: bool
            - in_progress: bool
            - token_key: str (if authenticated)
            - credential_key: str
        """
        with self._lock:
            token = self._token
            in_flight = self._in_flight

        status = {
            "authenticated": token is not None,
            "in_progress": in_flight,
            "credential_key": self.config.credential_key,
        }
        if token is not None:
            status["token_key"] = token.key
        return status
