"""
Header builder for signed OAuth 1.0a requests.

Assembles the ``Authorization``, ``User-Agent`` and optional
``Content-Type`` headers and writes them onto an outgoing request.
"""

import logging
from typing import Iterable, Optional, Tuple, TypeVar

from .config import OAuth1Config
from .models import AuthPhase, HTTPContentType
from .signature import generate_parameters, percent_encode
from .token_storage import Token

logger = logging.getLogger(__name__)

# Parameters whose values are percent-encoded when generated
PRE_ENCODED_PARAMETERS = frozenset({"oauth_callback"})

RequestT = TypeVar("RequestT")


def format_authorization_header(parameters: Iterable[Tuple[str, str]]) -> str:
    """
    Render OAuth parameters as an Authorization header value.

    Pairs are sorted by name (then value) so the output is deterministic.

    Example:
        >>> format_authorization_header([("oauth_version", "1.0"), ("oauth_nonce", "n")])
        'OAuth oauth_nonce="n", oauth_version="1.0"'
    """
    rendered = []
    for name, value in sorted(parameters):
        if name not in PRE_ENCODED_PARAMETERS:
            value = percent_encode(value)
        rendered.append(f'{name}="{value}"')
    return "OAuth " + ", ".join(rendered)


def build_headers(
    request: RequestT,
    config: OAuth1Config,
    phase: AuthPhase,
    token: Optional[Token],
    content_type: Optional[HTTPContentType] = None,
) -> RequestT:
    """
    Sign ``request`` in place.

    Works with anything exposing a mutable ``headers`` mapping, such as
    ``requests.Request`` and ``requests.PreparedRequest``.

    Args:
        request: Outgoing request to mutate
        config: Client configuration
        phase: Authorization phase that decides the extra OAuth parameters
        token: Held access token, or None to sign with a temporary token
        content_type: Optional Content-Type header

    Returns:
        The same request, for chaining
    """
    if request.headers is None:
        request.headers = {}

    if content_type is not None:
        request.headers["Content-Type"] = content_type.value
    request.headers["User-Agent"] = config.user_agent

    parameters = generate_parameters(phase, token, config)
    request.headers["Authorization"] = format_authorization_header(parameters)

    logger.debug(f"Signed request to {getattr(request, 'url', None)}")
    return request
