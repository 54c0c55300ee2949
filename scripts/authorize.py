#!/usr/bin/env python3
"""
OAuth 1.0a Authorization Script

This script runs the three-legged OAuth 1.0a flow against a provider,
opening the consent page in a browser and catching the redirect on a
local port. The resulting access token is saved to the token file and
picked up by every later OAuthCoordinator.

Usage:
    # Run authorization flow
    python scripts/authorize.py

    # Show current authorization status
    python scripts/authorize.py --status

    # Remove the stored token
    python scripts/authorize.py --logout

Prerequisites:
    - Environment variables must be set:
        export OAUTH1_CONSUMER_KEY="your_consumer_key"
        export OAUTH1_CONSUMER_SECRET="your_consumer_secret"
        export OAUTH1_REQUEST_TOKEN_URL="https://provider/oauth/request_token"
        export OAUTH1_AUTHORIZE_URL="https://provider/oauth/authorize"
        export OAUTH1_ACCESS_TOKEN_URL="https://provider/oauth/access_token"
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import requests

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.oauth1.auth_server import BrowserAuthorizationPresenter
from src.oauth1.coordinator import OAuthCoordinator
from src.oauth1.exceptions import (
    AuthorizationCancelledError,
    ConfigurationError,
    OAuth1Error,
)
from src.oauth1.models import AuthRequest

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def auth_request_from_env(browser: str = None) -> AuthRequest:
    """
    Build the provider endpoints from environment variables.

    Raises:
        ConfigurationError: If an endpoint variable is missing
    """
    names = ("OAUTH1_REQUEST_TOKEN_URL", "OAUTH1_AUTHORIZE_URL", "OAUTH1_ACCESS_TOKEN_URL")
    missing = [name for name in names if not os.environ.get(name)]
    if missing:
        raise ConfigurationError(f"Missing provider endpoints: {', '.join(missing)}")

    return AuthRequest(
        request_url=os.environ["OAUTH1_REQUEST_TOKEN_URL"],
        authorize_url=os.environ["OAUTH1_AUTHORIZE_URL"],
        access_token_url=os.environ["OAUTH1_ACCESS_TOKEN_URL"],
        anchor=browser,
    )


def authorize(open_browser: bool = True, browser: str = None, force: bool = False) -> int:
    """
    Run the authorization flow.

    Returns:
        Exit code (0 for success, 1 for failure, 2 for configuration error)
    """
    try:
        coordinator = OAuthCoordinator()
        auth_request = auth_request_from_env(browser)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    if coordinator.is_authenticated and not force:
        logger.info("Already authorized. Use --force to authorize again.")
        return 0

    presenter = BrowserAuthorizationPresenter(coordinator.config, open_browser=open_browser)

    logger.info("Starting OAuth authorization flow...")
    try:
        token = coordinator.start_authorization(auth_request, presenter=presenter)
    except AuthorizationCancelledError:
        logger.warning("Authorization cancelled")
        return 1
    except OAuth1Error as e:
        logger.error(f"Authorization failed: {e.description} ({e.code})")
        return 1
    except requests.RequestException as e:
        logger.error(f"Network error: {e}")
        return 1

    logger.info(f"Authorization successful, token {token.key!r}")
    logger.info(f"Token saved to: {coordinator.config.token_path}")
    return 0


def logout() -> int:
    """
    Remove the stored token.

    Returns:
        Exit code (0 for success, 2 for configuration error)
    """
    try:
        coordinator = OAuthCoordinator()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    if not coordinator.is_authenticated:
        logger.info("No authorization found to remove")
        return 0

    coordinator.logout()
    logger.info("Logged out. Run this script again to re-authorize.")
    return 0


def status() -> int:
    """
    Display authorization status.

    Returns:
        Exit code (0 if authorized, 1 if not, 2 for configuration error)
    """
    try:
        coordinator = OAuthCoordinator()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    info = coordinator.get_status()
    if info["authenticated"]:
        print(f"AUTHORIZED (token {info['token_key']!r})")
        return 0

    print("NOT AUTHORIZED")
    return 1


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="OAuth 1.0a authorization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run authorization flow
  python scripts/authorize.py

  # Authorize in a specific browser
  python scripts/authorize.py --browser firefox

  # Remove the stored token
  python scripts/authorize.py --logout
        """,
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true", help="Show authorization status")
    group.add_argument("--logout", action="store_true", help="Remove the stored token")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Authorize again even if a token is stored",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Don't automatically open browser (display URL only)",
    )
    parser.add_argument("--browser", help="Browser name registered with webbrowser")

    args = parser.parse_args()

    if args.status:
        return status()
    if args.logout:
        return logout()
    return authorize(
        open_browser=not args.no_browser, browser=args.browser, force=args.force
    )


if __name__ == "__main__":
    sys.exit(main())
