"""
HTTP transport used to reach the OAuth provider.

The core only needs ``send(request) -> (body, response)``. Network errors
are ``requests.RequestException`` and propagate unchanged.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple

import requests

logger = logging.getLogger(__name__)


class HTTPTransport(ABC):
    """Executes a signed request and returns the raw response body."""

    @abstractmethod
    def send(self, request: requests.Request) -> Tuple[bytes, requests.Response]:
        """
        Send ``request``.

        Returns:
            Tuple of (body bytes, response)

        Raises:
            requests.RequestException: On network failure
        """


class RequestsTransport(HTTPTransport):
    """Transport backed by a ``requests.Session``."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 30.0):
        """
        Initialize transport.

        Args:
            session: Session to send with (a new one is created if omitted)
            timeout: Seconds before a request times out
        """
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, request: requests.Request) -> Tuple[bytes, requests.Response]:
        prepared = self.session.prepare_request(request)
        logger.debug(f"{prepared.method} {prepared.url}")

        response = self.session.send(prepared, timeout=self.timeout)

        # Status codes are not errors here; an error body simply fails to parse
        if not response.ok:
            logger.warning(
                f"Provider responded {response.status_code} for {prepared.method} "
                f"{prepared.url}"
            )
        return response.content, response
