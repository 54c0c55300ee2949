"""
Interactive authorization presenters.

A presenter shows the provider's consent page to the user and returns the
URL the provider redirected to afterwards. The default implementation
opens the system browser and runs a short-lived local HTTP server to catch
the redirect.

IMPORTANT: The local server is designed for single-user, desktop use. It
runs only while a presentation is pending and shuts down as soon as the
redirect arrives, the user denies access, or the wait times out.
"""

import logging
import threading
import webbrowser
from abc import ABC, abstractmethod
from typing import Any, Optional

from flask import Flask, Response, request
from werkzeug.serving import BaseWSGIServer, make_server

from .config import OAuth1Config
from .exceptions import AuthorizationCancelledError, ConfigurationError

logger = logging.getLogger(__name__)

RESULT_PAGE = """<html>
<head><title>{title}</title></head>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: 50px auto; padding: 20px;">
    <h1 style="color: {color};">{title}</h1>
    <p>{message}</p>
    <p style="margin-top: 30px; color: #666;">You can close this window.</p>
</body>
</html>"""


class AuthorizationPresenter(ABC):
    """Presents the provider's consent page and returns the redirect URL."""

    @abstractmethod
    def present(self, url: str, callback_scheme: str, anchor: Any = None) -> str:
        """
        Present ``url`` to the user.

        Args:
            url: Provider authorize URL including oauth_token
            callback_scheme: Scheme of the URL the provider redirects to
            anchor: Caller-supplied handle the presentation attaches to

        Returns:
            The full redirect URL

        Raises:
            AuthorizationCancelledError: If the user dismissed the step
        """


class BrowserAuthorizationPresenter(AuthorizationPresenter):
    """
    Opens the consent page in a browser and catches the redirect locally.

    The ``anchor`` passed to ``present`` may name a browser registered with
    the ``webbrowser`` module (e.g. "firefox"); None uses the default one.

    Only one presentation may be pending per presenter.
    """

    def __init__(self, config: OAuth1Config, open_browser: bool = True):
        """
        Initialize presenter.

        Args:
            config: OAuth configuration with callback host/port/path
            open_browser: Whether to open the browser automatically

        Raises:
            ConfigurationError: If the callback URL is not http(s), since
                the local server could never receive the redirect
        """
        if config.callback_scheme not in ("http", "https"):
            raise ConfigurationError(
                f"Browser presenter cannot receive {config.callback_scheme!r} callbacks"
            )

        self.config = config
        self.open_browser = open_browser
        self.app = Flask(__name__)
        self.app.logger.setLevel(logging.WARNING)  # Suppress Flask logs

        self.redirect_url: Optional[str] = None
        self.cancelled = False
        self._done = threading.Event()
        self._pending = threading.Lock()

        self.app.add_url_rule(
            self.config.callback_path,
            "oauth_callback",
            self._handle_callback,
            methods=["GET"],
        )

    def cancel(self) -> None:
        """
        Abort the pending presentation.

        Safe to call from another thread; ``present`` then raises
        AuthorizationCancelledError. Has no effect when nothing is pending.
        """
        if not self._pending.locked():
            return
        logger.info("Authorization cancelled by caller")
        self.cancelled = True
        self._done.set()

    def _reset(self) -> None:
        self.redirect_url = None
        self.cancelled = False
        self._done.clear()

    def _handle_callback(self) -> Response:
        """Handle the provider redirect."""
        logger.info("Received OAuth redirect")

        denied = request.args.get("denied") or request.args.get("error")
        if denied:
            logger.warning("User denied authorization")
            self.cancelled = True
            self._done.set()
            return Response(
                RESULT_PAGE.format(
                    title="Authorization Cancelled",
                    color="#d32f2f",
                    message="Access was not granted to the application.",
                ),
                status=200,
                content_type="text/html",
            )

        self.redirect_url = request.url
        self._done.set()

        if "oauth_verifier" not in request.args:
            logger.error("OAuth redirect is missing oauth_verifier")
            return Response(
                RESULT_PAGE.format(
                    title="Authorization Failed",
                    color="#d32f2f",
                    message="No verifier was received from the provider.",
                ),
                status=400,
                content_type="text/html",
            )

        return Response(
            RESULT_PAGE.format(
                title="Authorization Successful",
                color="#4caf50",
                message="Your application has been authorized.",
            ),
            status=200,
            content_type="text/html",
        )

    def _make_server(self) -> BaseWSGIServer:
        return make_server(
            self.config.callback_host,
            self.config.callback_port,
            self.app,
            threaded=True,
        )

    def _open(self, url: str, anchor: Any) -> None:
        if not self.open_browser:
            print(f"Authorize the application by visiting:\n\n  {url}\n")
            return

        try:
            browser = webbrowser.get(anchor) if anchor else webbrowser.get()
            browser.open(url)
        except webbrowser.Error as e:
            logger.warning(f"Could not open browser automatically: {e}")
            print(f"Could not open a browser. Visit this URL to authorize:\n\n  {url}\n")

    def present(self, url: str, callback_scheme: str, anchor: Any = None) -> str:
        if callback_scheme not in ("http", "https"):
            raise ConfigurationError(
                f"Browser presenter cannot receive {callback_scheme!r} callbacks"
            )

        if not self._pending.acquire(blocking=False):
            raise RuntimeError("A presentation is already pending on this presenter")

        server: Optional[BaseWSGIServer] = None
        thread: Optional[threading.Thread] = None
        try:
            self._reset()
            server = self._make_server()
            thread = threading.Thread(target=server.serve_forever, daemon=True)
            thread.start()
            logger.info(
                f"Listening for OAuth redirect on {self.config.callback_host}:"
                f"{self.config.callback_port}{self.config.callback_path}"
            )

            self._open(url, anchor)

            timeout = self.config.authorization_timeout
            try:
                received = self._done.wait(timeout=timeout)
            except KeyboardInterrupt as e:
                logger.warning("Authorization interrupted by user")
                raise AuthorizationCancelledError() from e

            if not received:
                logger.warning(f"Timeout waiting for redirect after {timeout}s")
                raise AuthorizationCancelledError(
                    f"No redirect received within {timeout} seconds"
                )

            if self.cancelled or self.redirect_url is None:
                raise AuthorizationCancelledError()

            return self.redirect_url
        finally:
            if server is not None:
                server.shutdown()
                server.server_close()
            if thread is not None:
                thread.join(timeout=5)
            self._pending.release()
            logger.debug("OAuth redirect listener stopped")
