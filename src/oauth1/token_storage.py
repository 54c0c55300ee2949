"""
Token model and credential storage for the OAuth 1.0a client.

This module provides the immutable ``Token`` value and the credential
stores the coordinator persists it with. The coordinator only ever uses
one fixed key, so a store holds at most one active token per key.

Tokens are stored in plaintext JSON with user-only permissions (600).
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .exceptions import TokenStorageError
from .models import QueryItems, first_values

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    """
    An OAuth token/secret pair.

    The same shape is used for the temporary request token and for the
    long-lived access token; only the context gives it its role.

    Attributes:
        key: The oauth_token value
        secret: The oauth_token_secret value
    """

    key: str
    secret: str = field(repr=False)

    @classmethod
    def from_query_items(cls, items: QueryItems) -> Optional["Token"]:
        """
        Build a token from a parsed query-item list.

        The first occurrence of each name wins; ordering is irrelevant.

        Args:
            items: (name, value) pairs from a form-encoded provider response

        Returns:
            Token if both oauth_token and oauth_token_secret are present,
            None otherwise
        """
        values = first_values(items)
        try:
            return cls(key=values["oauth_token"], secret=values["oauth_token_secret"])
        except KeyError:
            return None

    def to_dict(self) -> dict:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the token
        """
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Token":
        """
        Create a Token from a dictionary.

        Raises:
            KeyError: If required fields are missing
            TypeError: If fields have wrong types
        """
        key = data["key"]
        secret = data["secret"]
        if not isinstance(key, str) or not isinstance(secret, str):
            raise TypeError("token key and secret must be strings")
        return cls(key=key, secret=secret)


class CredentialStore(ABC):
    """
    Persists a token under a key.

    Implementations raise ``TokenStorageError`` when a write fails; the
    coordinator tolerates and logs those failures.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Token]:
        """Return the token stored under ``key``, or None if there is none."""

    @abstractmethod
    def set(self, token: Token, key: str) -> None:
        """Add or replace the token stored under ``key``."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove the token stored under ``key`` (no-op if absent)."""


class MemoryCredentialStore(CredentialStore):
    """In-process credential store; nothing survives the process."""

    def __init__(self) -> None:
        self._tokens: Dict[str, Token] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Token]:
        with self._lock:
            return self._tokens.get(key)

    def set(self, token: Token, key: str) -> None:
        with self._lock:
            self._tokens[key] = token

    def remove(self, key: str) -> None:
        with self._lock:
            self._tokens.pop(key, None)


class FileCredentialStore(CredentialStore):
    """
    File-based credential store (plaintext JSON).

    The file maps each credential key to a ``{"key", "secret"}`` object.
    Every write rewrites the whole file and re-applies 600 permissions.
    """

    def __init__(self, token_file: str):
        """
        Initialize credential storage.

        Args:
            token_file: Path to token storage file (e.g., ~/.oauth1/tokens.json)
        """
        self.token_file = Path(token_file).expanduser()
        self._lock = threading.Lock()

    def _ensure_directory(self) -> None:
        """Create parent directory if needed."""
        self.token_file.parent.mkdir(parents=True, exist_ok=True)

    def _set_secure_permissions(self) -> None:
        """Set file permissions to user-only read/write (600)."""
        try:
            self.token_file.chmod(0o600)
            logger.debug(f"Set secure permissions (600) on {self.token_file}")
        except (OSError, PermissionError) as e:
            logger.warning(f"Could not set secure permissions: {e}")

    def _read_all(self) -> Dict[str, dict]:
        """
        Read every stored entry.

        Returns:
            Mapping of credential key to raw token dict; empty if the file is
            missing or unreadable
        """
        if not self.token_file.exists():
            logger.debug(f"No token file found at {self.token_file}")
            return {}

        try:
            with open(self.token_file, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(
                f"Invalid token file at {self.token_file}, "
                f"will need re-authorization: {e}"
            )
            return {}
        except (IOError, OSError) as e:
            logger.warning(f"Could not read token file: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Unexpected token file layout at {self.token_file}")
            return {}
        return data

    def _write_all(self, entries: Dict[str, dict]) -> None:
        try:
            self._ensure_directory()
            with open(self.token_file, "w") as f:
                json.dump(entries, f, indent=2)
        except (IOError, OSError) as e:
            logger.error(f"Failed to save tokens: {e}")
            raise TokenStorageError(f"Failed to save tokens: {e}") from e

        self._set_secure_permissions()

    def get(self, key: str) -> Optional[Token]:
        """
        Load the token stored under ``key``.

        Returns:
            Token if present and valid, None otherwise

        Notes:
            - Returns None if the file doesn't exist (normal on first run)
            - Returns None if the entry is corrupted (logs warning)
        """
        with self._lock:
            entry = self._read_all().get(key)

        if entry is None:
            return None

        try:
            token = Token.from_dict(entry)
        except (KeyError, TypeError) as e:
            logger.warning(f"Invalid token entry {key!r} in {self.token_file}: {e}")
            return None

        logger.debug(f"Token {key!r} loaded from {self.token_file}")
        return token

    def set(self, token: Token, key: str) -> None:
        """
        Save ``token`` under ``key``, keeping other entries.

        Raises:
            TokenStorageError: If the file cannot be written
        """
        with self._lock:
            entries = self._read_all()
            entries[key] = token.to_dict()
            self._write_all(entries)

        logger.info(f"Token {key!r} saved to {self.token_file}")

    def remove(self, key: str) -> None:
        """
        Remove the entry stored under ``key``.

        The file itself is deleted once it holds no entries.

        Raises:
            TokenStorageError: If the file cannot be rewritten or deleted
        """
        with self._lock:
            entries = self._read_all()
            if key not in entries:
                logger.debug(f"No token {key!r} in {self.token_file}")
                return

            del entries[key]
            if entries:
                self._write_all(entries)
            else:
                try:
                    self.token_file.unlink()
                except (OSError, PermissionError) as e:
                    logger.error(f"Failed to delete token file: {e}")
                    raise TokenStorageError(f"Failed to delete token file: {e}") from e

        logger.info(f"Token {key!r} removed from {self.token_file}")
