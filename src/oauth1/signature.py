"""
Signature engine for OAuth 1.0a requests.

Pure functions that turn a token, the consumer secret and the configured
signature method into an ``oauth_signature``, and into the full OAuth
parameter set for a given authorization phase.
"""

import logging
import time
import uuid
from typing import List, Optional, Tuple
from urllib.parse import quote

from .config import OAuth1Config, SignatureMethod
from .models import AuthPhase, Authenticated, RequestingAccessToken, RequestingToken
from .token_storage import Token

logger = logging.getLogger(__name__)

OAUTH_VERSION = "1.0"

# Characters left alone when encoding the callback URL (RFC 3986 host set)
CALLBACK_SAFE_CHARACTERS = "!$&'()*+,;=:[]"

Parameters = List[Tuple[str, str]]


def percent_encode(value: str) -> str:
    """Percent-encode everything outside the RFC 3986 unreserved set."""
    return quote(value, safe="~")


def encode_callback(callback_url: str) -> str:
    """Percent-encode a callback URL for the oauth_callback parameter."""
    return quote(callback_url, safe=CALLBACK_SAFE_CHARACTERS)


def signature(
    token: Token,
    consumer_secret: str,
    method: SignatureMethod = SignatureMethod.PLAINTEXT,
    encode: bool = True,
) -> str:
    """
    Compute the oauth_signature for a token.

    Args:
        token: Token whose secret is part of the signing key
        consumer_secret: The consumer secret
        method: Signature method (only PLAINTEXT)
        encode: Percent-encode both secrets before joining them. Disable to
            reproduce providers that expect the raw concatenation.

    Returns:
        ``<consumer_secret>&<token_secret>``
    """
    if method is not SignatureMethod.PLAINTEXT:
        raise ValueError(f"Unsupported signature method: {method!r}")

    if encode:
        return f"{percent_encode(consumer_secret)}&{percent_encode(token.secret)}"

    logger.debug("Signing with unencoded secrets (raw PLAINTEXT concatenation)")
    return f"{consumer_secret}&{token.secret}"


def temporary_token(phase: AuthPhase) -> Token:
    """
    Token used for signing while no real token is held.

    The access-token phase keeps the request token's secret so it flows
    unchanged into the signature.
    """
    if isinstance(phase, RequestingAccessToken):
        return Token(key="", secret=phase.authorize_response.token_secret)
    return Token(key="", secret="")


def generate_nonce() -> str:
    return str(uuid.uuid4()).upper()


def generate_parameters(
    phase: AuthPhase,
    current_token: Optional[Token],
    config: OAuth1Config,
    nonce: Optional[str] = None,
    timestamp: Optional[int] = None,
) -> Parameters:
    """
    Build the OAuth protocol parameters for one signed request.

    A fresh nonce and timestamp are generated on every call unless given
    explicitly.

    Args:
        phase: Current authorization phase
        current_token: Held access token, or None if not authenticated.
            Only used by the Authenticated phase.
        config: Client configuration
        nonce: Override the generated nonce
        timestamp: Override the current Unix time

    Returns:
        List of (name, value) pairs, values not yet header-encoded
        (except oauth_callback, which is already percent-encoded)
    """
    # Handshake phases always sign with the temporary token so the request
    # token secret reaches the access-token signature unchanged.
    if isinstance(phase, Authenticated) and current_token is not None:
        signing_token = current_token
    else:
        signing_token = temporary_token(phase)

    if timestamp is None:
        timestamp = int(time.time())

    parameters: Parameters = [
        ("oauth_consumer_key", config.consumer_key),
        ("oauth_nonce", nonce or generate_nonce()),
        (
            "oauth_signature",
            signature(
                signing_token,
                config.consumer_secret,
                config.signature_method,
                encode=config.encode_signature_components,
            ),
        ),
        ("oauth_signature_method", config.signature_method.value),
        ("oauth_timestamp", str(timestamp)),
        ("oauth_version", OAUTH_VERSION),
    ]

    if isinstance(phase, RequestingToken):
        parameters.append(("oauth_callback", encode_callback(config.callback_url)))
    elif isinstance(phase, RequestingAccessToken):
        parameters.append(("oauth_token", phase.authorize_response.token))
        parameters.append(("oauth_verifier", phase.authorize_response.verifier))
    elif isinstance(phase, Authenticated):
        parameters.append(("oauth_token", signing_token.key))
    else:
        raise TypeError(f"Unknown authorization phase: {phase!r}")

    logger.debug(
        f"Generated OAuth parameters for {type(phase).__name__}: "
        f"{[name for name, _ in parameters]}"
    )
    return parameters
