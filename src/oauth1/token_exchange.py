"""
Token exchange steps of the three-legged OAuth 1.0a flow.

This module implements the individual network steps:
- Request token (temporary credentials)
- User authorization (delegated to an interactive presenter)
- Access token (token credentials)

Each step builds a request, signs it for its phase, sends it through the
transport and validates the provider's form-encoded answer. Parse failures
are normalized into the error taxonomy; transport errors propagate as-is.
"""

import logging
from typing import List, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests

from .auth_server import AuthorizationPresenter
from .config import OAuth1Config
from .exceptions import (
    InvalidAccessTokenError,
    InvalidAuthorizeURLError,
    InvalidTokenError,
    InvalidVerifierError,
)
from .headers import build_headers
from .models import (
    AuthorizeResponse,
    AuthRequest,
    HTTPContentType,
    HTTPMethod,
    RequestingAccessToken,
    RequestingToken,
    RequestTokenResponse,
)
from .token_storage import Token
from .transport import HTTPTransport

logger = logging.getLogger(__name__)


def parse_query_items(body: bytes) -> List[Tuple[str, str]]:
    """
    Parse an ``application/x-www-form-urlencoded`` body.

    Raises:
        UnicodeDecodeError: If the body is not UTF-8
    """
    return parse_qsl(body.decode("utf-8"), keep_blank_values=True)


class TokenExchange:
    """
    Runs the network steps of the handshake.

    Stateless apart from its configuration and transport; the coordinator
    owns every piece of token state.
    """

    def __init__(self, config: OAuth1Config, transport: HTTPTransport):
        """
        Initialize token exchange.

        Args:
            config: OAuth configuration
            transport: HTTP transport used to reach the provider
        """
        self.config = config
        self.transport = transport

    def request_token(self, auth_request: AuthRequest) -> RequestTokenResponse:
        """
        Obtain a temporary request token.

        Args:
            auth_request: Provider endpoints

        Returns:
            RequestTokenResponse with token, secret and callback confirmation

        Raises:
            InvalidTokenError: If the response is malformed
            requests.RequestException: On network failure
        """
        logger.info("Requesting OAuth request token")

        http_request = requests.Request(HTTPMethod.GET.value, auth_request.request_url)
        build_headers(
            http_request,
            self.config,
            RequestingToken(),
            token=None,
            content_type=HTTPContentType.URL_ENCODED,
        )

        body, _ = self.transport.send(http_request)

        try:
            response = RequestTokenResponse.from_query_items(parse_query_items(body))
        except (UnicodeDecodeError, ValueError) as e:
            logger.error(f"Could not decode request token response: {e}")
            raise InvalidTokenError(f"Could not decode request token response: {e}") from e

        if response is None:
            logger.error("Request token response is missing required fields")
            raise InvalidTokenError("Request token response is missing required fields")

        if not response.callback_confirmed:
            logger.warning("Provider did not confirm the OAuth callback")

        logger.info("Received OAuth request token")
        return response

    def build_authorize_url(
        self, auth_request: AuthRequest, token_response: RequestTokenResponse
    ) -> str:
        """
        Build the user authorization URL.

        Appends ``oauth_token`` to the configured authorize URL.

        Raises:
            InvalidAuthorizeURLError: If the authorize URL is not absolute
        """
        try:
            parts = urlsplit(auth_request.authorize_url)
        except ValueError as e:
            raise InvalidAuthorizeURLError(f"Invalid authorize URL: {e}") from e

        if not parts.scheme or not parts.netloc:
            logger.error(f"Authorize URL is not absolute: {auth_request.authorize_url!r}")
            raise InvalidAuthorizeURLError(
                f"Authorize URL is not absolute: {auth_request.authorize_url!r}"
            )

        query = parse_qsl(parts.query, keep_blank_values=True)
        query.append(("oauth_token", token_response.token))

        url = urlunsplit(parts._replace(query=urlencode(query)))
        logger.debug(f"Generated authorize URL: {url}")
        return url

    def present_authorization(
        self,
        auth_request: AuthRequest,
        token_response: RequestTokenResponse,
        presenter: AuthorizationPresenter,
    ) -> AuthorizeResponse:
        """
        Let the user authorize the request token.

        Args:
            auth_request: Provider endpoints and presenter anchor
            token_response: Result of the request-token step
            presenter: Interactive presenter showing the consent page

        Returns:
            AuthorizeResponse carrying the request token secret forward

        Raises:
            InvalidAuthorizeURLError: If the authorize URL cannot be built
            AuthorizationCancelledError: If the user dismissed the step
            InvalidVerifierError: If the redirect lacks token or verifier
        """
        url = self.build_authorize_url(auth_request, token_response)

        logger.info("Presenting authorization page to user")
        redirect_url = presenter.present(
            url, self.config.callback_scheme, auth_request.anchor
        )

        try:
            items = parse_qsl(urlsplit(redirect_url).query, keep_blank_values=True)
        except (TypeError, ValueError) as e:
            logger.error(f"Could not parse authorization redirect: {e}")
            raise InvalidVerifierError(f"Could not parse authorization redirect: {e}") from e

        response = AuthorizeResponse.from_query_items(items, token_response.token_secret)
        if response is None:
            logger.error("Authorization redirect is missing oauth_token or oauth_verifier")
            raise InvalidVerifierError(
                "Authorization redirect is missing oauth_token or oauth_verifier"
            )

        logger.info("User authorized request token")
        return response

    def access_token(
        self, auth_request: AuthRequest, authorize_response: AuthorizeResponse
    ) -> Token:
        """
        Exchange the authorized request token for an access token.

        Raises:
            InvalidAccessTokenError: If the response is malformed
            requests.RequestException: On network failure
        """
        logger.info("Exchanging request token for access token")

        http_request = requests.Request(
            HTTPMethod.POST.value, auth_request.access_token_url
        )
        build_headers(
            http_request,
            self.config,
            RequestingAccessToken(authorize_response),
            token=None,
            content_type=HTTPContentType.URL_ENCODED,
        )

        body, _ = self.transport.send(http_request)

        try:
            token = Token.from_query_items(parse_query_items(body))
        except (UnicodeDecodeError, ValueError) as e:
            logger.error(f"Could not decode access token response: {e}")
            raise InvalidAccessTokenError(
                f"Could not decode access token response: {e}"
            ) from e

        if token is None:
            logger.error("Access token response is missing required fields")
            raise InvalidAccessTokenError(
                "Access token response is missing required fields"
            )

        logger.info("Received OAuth access token")
        return token
