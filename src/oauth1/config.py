"""
OAuth 1.0a client configuration.

This module provides configuration management for the OAuth 1.0a client.
Configuration can be loaded from environment variables or provided
programmatically. Once constructed it is immutable and owned by the
coordinator for its lifetime.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from urllib.parse import urlparse

import requests

from .exceptions import ConfigurationError

DEFAULT_TOKEN_FILE = "~/.oauth1/tokens.json"


class SignatureMethod(str, Enum):
    """Signature methods supported by the signing engine."""

    # the only signature method currently supported
    PLAINTEXT = "PLAINTEXT"


@dataclass(frozen=True)
class OAuth1Config:
    """
    Configuration for an OAuth 1.0a consumer.

    Attributes:
        consumer_key: Consumer key issued by the provider
        consumer_secret: Consumer secret issued by the provider
        user_agent: User-Agent sent with every signed request
        signature_method: Signature method (only PLAINTEXT)
        credential_key: Key the access token is stored under
        token_file: Path of the file-based credential store
        callback_host: Host of the local redirect receiver
        callback_port: Port of the local redirect receiver
        callback_path: URL path of the local redirect receiver
        redirect_uri: Explicit oauth_callback URL (overrides host/port/path)
        request_timeout: Seconds before a provider request times out
        authorization_timeout: Seconds to wait for the user to finish consent
        encode_signature_components: Percent-encode the consumer secret and
            token secret before joining them into the PLAINTEXT signature
        session: requests session used to reach the provider
    """

    # Required - from the provider's developer portal
    consumer_key: str
    consumer_secret: str = field(repr=False)
    user_agent: str = "oauth1-client"

    signature_method: SignatureMethod = SignatureMethod.PLAINTEXT

    # Credential storage
    credential_key: str = "credentials"
    token_file: str = DEFAULT_TOKEN_FILE

    # Callback configuration
    callback_host: str = "localhost"
    callback_port: int = 8765
    callback_path: str = "/oauth/callback"
    redirect_uri: Optional[str] = None

    request_timeout: float = 30.0
    authorization_timeout: int = 300

    encode_signature_components: bool = True

    session: Optional[requests.Session] = field(
        default=None, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.consumer_key:
            raise ConfigurationError("consumer_key cannot be empty")

        if not self.consumer_secret:
            raise ConfigurationError("consumer_secret cannot be empty")

        if not self.credential_key:
            raise ConfigurationError("credential_key cannot be empty")

        if not isinstance(self.signature_method, SignatureMethod):
            raise ConfigurationError(
                f"Unsupported signature method: {self.signature_method!r}"
            )

        if not isinstance(self.callback_port, int) or not (
            1 <= self.callback_port <= 65535
        ):
            raise ConfigurationError(
                f"callback_port must be between 1 and 65535, got {self.callback_port}"
            )

        if self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")

        if self.authorization_timeout <= 0:
            raise ConfigurationError("authorization_timeout must be positive")

        if not urlparse(self.callback_url).scheme:
            raise ConfigurationError(
                f"callback URL must have a scheme, got {self.callback_url!r}"
            )

    @property
    def callback_url(self) -> str:
        """
        URL the provider redirects to once the user has authorized.

        Returns:
            ``redirect_uri`` when set, otherwise the local receiver URL
            (e.g., http://localhost:8765/oauth/callback)
        """
        if self.redirect_uri:
            return self.redirect_uri
        return f"http://{self.callback_host}:{self.callback_port}{self.callback_path}"

    @property
    def callback_scheme(self) -> str:
        """Scheme of the callback URL, handed to the authorization presenter."""
        return urlparse(self.callback_url).scheme

    @property
    def token_path(self) -> str:
        """Token file path with ``~`` expanded."""
        return os.path.expanduser(self.token_file)

    @classmethod
    def from_env(cls) -> "OAuth1Config":
        """
        Load configuration from environment variables.

        Required environment variables:
            OAUTH1_CONSUMER_KEY: Consumer key
            OAUTH1_CONSUMER_SECRET: Consumer secret

        Optional environment variables:
            OAUTH1_USER_AGENT: User-Agent header (default: oauth1-client)
            OAUTH1_CREDENTIAL_KEY: Storage key (default: credentials)
            OAUTH1_TOKEN_FILE: Token file path (default: ~/.oauth1/tokens.json)
            OAUTH1_CALLBACK_HOST: Local receiver host (default: localhost)
            OAUTH1_CALLBACK_PORT: Local receiver port (default: 8765)
            OAUTH1_CALLBACK_PATH: Local receiver path (default: /oauth/callback)
            OAUTH1_CALLBACK_URL: Explicit oauth_callback URL

        Returns:
            OAuth1Config instance

        Raises:
            ConfigurationError: If required environment variables are missing
                or a value cannot be parsed
        """
        consumer_key = os.environ.get("OAUTH1_CONSUMER_KEY")
        consumer_secret = os.environ.get("OAUTH1_CONSUMER_SECRET")

        if not consumer_key or not consumer_secret:
            raise ConfigurationError(
                "Missing OAuth consumer credentials. Set environment variables:\n"
                "  OAUTH1_CONSUMER_KEY=your_consumer_key\n"
                "  OAUTH1_CONSUMER_SECRET=your_consumer_secret"
            )

        port = os.environ.get("OAUTH1_CALLBACK_PORT", "8765")
        try:
            callback_port = int(port)
        except ValueError as e:
            raise ConfigurationError(
                f"OAUTH1_CALLBACK_PORT must be an integer, got {port!r}"
            ) from e

        return cls(
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            user_agent=os.environ.get("OAUTH1_USER_AGENT", "oauth1-client"),
            credential_key=os.environ.get("OAUTH1_CREDENTIAL_KEY", "credentials"),
            token_file=os.environ.get("OAUTH1_TOKEN_FILE", DEFAULT_TOKEN_FILE),
            callback_host=os.environ.get("OAUTH1_CALLBACK_HOST", "localhost"),
            callback_port=callback_port,
            callback_path=os.environ.get("OAUTH1_CALLBACK_PATH", "/oauth/callback"),
            redirect_uri=os.environ.get("OAUTH1_CALLBACK_URL") or None,
        )
