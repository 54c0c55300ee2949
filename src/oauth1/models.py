"""
Value types flowing through the OAuth 1.0a handshake.

All types are immutable and short-lived: an ``AuthRequest`` lives for one
authorization attempt, the response types are consumed by the next step,
and an ``AuthPhase`` only exists for the duration of one signing operation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple, Union

QueryItems = Iterable[Tuple[str, str]]


def first_values(items: QueryItems) -> Dict[str, str]:
    """Collapse query items into a dict, keeping the first value per name."""
    values: Dict[str, str] = {}
    for name, value in items:
        values.setdefault(name, value)
    return values


def _parse_bool(value: str) -> Optional[bool]:
    if value == "true":
        return True
    if value == "false":
        return False
    return None


class HTTPContentType(str, Enum):
    URL_ENCODED = "application/x-www-form-urlencoded; charset=utf-8"


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class AuthRequest:
    """
    Provider endpoints for one authorization attempt.

    Attributes:
        request_url: Temporary credential (request token) endpoint
        authorize_url: Resource owner authorization endpoint
        access_token_url: Token credential (access token) endpoint
        anchor: Opaque handle the presenter anchors itself to (window,
            terminal, etc.); resolved by the caller
    """

    request_url: str
    authorize_url: str
    access_token_url: str
    anchor: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class RequestTokenResponse:
    """Parsed response of the request-token endpoint."""

    token: str
    token_secret: str = field(repr=False)
    callback_confirmed: bool = False

    @classmethod
    def from_query_items(cls, items: QueryItems) -> Optional["RequestTokenResponse"]:
        """
        Parse a request-token response.

        Returns:
            RequestTokenResponse, or None if oauth_token, oauth_token_secret or
            a boolean oauth_callback_confirmed is missing
        """
        values = first_values(items)
        try:
            token = values["oauth_token"]
            token_secret = values["oauth_token_secret"]
            confirmed = _parse_bool(values["oauth_callback_confirmed"])
        except KeyError:
            return None

        if confirmed is None:
            return None
        return cls(token=token, token_secret=token_secret, callback_confirmed=confirmed)


@dataclass(frozen=True)
class AuthorizeResponse:
    """
    Parsed authorization redirect.

    ``token_secret`` is carried over from the request-token step, never
    read from the redirect.
    """

    token: str
    token_secret: str = field(repr=False)
    verifier: str = ""

    @classmethod
    def from_query_items(
        cls, items: QueryItems, token_secret: str
    ) -> Optional["AuthorizeResponse"]:
        values = first_values(items)
        try:
            return cls(
                token=values["oauth_token"],
                token_secret=token_secret,
                verifier=values["oauth_verifier"],
            )
        except KeyError:
            return None


@dataclass(frozen=True)
class RequestingToken:
    """First phase: asking for a temporary request token."""


@dataclass(frozen=True)
class RequestingAccessToken:
    """Second phase: exchanging the verified request token."""

    authorize_response: AuthorizeResponse


@dataclass(frozen=True)
class Authenticated:
    """Signing a request with the held access token."""


AuthPhase = Union[RequestingToken, RequestingAccessToken, Authenticated]
