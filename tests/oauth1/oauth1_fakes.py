"""Fake collaborators for OAuth 1.0a tests."""

from typing import List, Optional, Tuple, Union
from unittest import mock

import requests

from src.oauth1.auth_server import AuthorizationPresenter
from src.oauth1.exceptions import AuthorizationCancelledError
from src.oauth1.transport import HTTPTransport

REQUEST_TOKEN_BODY = (
    b"oauth_token=request_token&oauth_token_secret=request_secret"
    b"&oauth_callback_confirmed=true"
)
ACCESS_TOKEN_BODY = b"oauth_token=access_key&oauth_token_secret=access_secret"
REDIRECT_URL = (
    "http://localhost:8765/oauth/callback?oauth_token=request_token&oauth_verifier=verifier_123"
)


class FakeTransport(HTTPTransport):
    """Transport replaying queued bodies (or raising queued exceptions)."""

    def __init__(self, responses: Optional[List[Union[bytes, Exception]]] = None):
        self.responses = list(responses or [])
        self.requests: List[requests.Request] = []

    def send(self, request: requests.Request) -> Tuple[bytes, requests.Response]:
        self.requests.append(request)
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        response = mock.Mock(spec=requests.Response)
        response.status_code = 200
        response.content = result
        return result, response


class FakePresenter(AuthorizationPresenter):
    """Presenter returning a canned redirect, or cancelling."""

    def __init__(self, redirect_url: Optional[str] = REDIRECT_URL, error: Exception = None):
        self.redirect_url = redirect_url
        self.error = error
        self.calls = []

    def present(self, url, callback_scheme, anchor=None):
        self.calls.append((url, callback_scheme, anchor))
        if self.error is not None:
            raise self.error
        if self.redirect_url is None:
            raise AuthorizationCancelledError()
        return self.redirect_url
