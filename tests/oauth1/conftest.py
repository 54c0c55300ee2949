"""Shared fixtures for OAuth 1.0a tests."""

import pytest

from oauth1_fakes import ACCESS_TOKEN_BODY, REQUEST_TOKEN_BODY, FakePresenter, FakeTransport
from src.oauth1.config import OAuth1Config
from src.oauth1.models import AuthRequest
from src.oauth1.token_storage import MemoryCredentialStore


@pytest.fixture
def config(tmp_path):
    """Create test OAuth config."""
    return OAuth1Config(
        consumer_key="OAuthTheyTest",
        consumer_secret="shhh",
        user_agent="oauth1-tests",
        token_file=str(tmp_path / "tokens.json"),
    )


@pytest.fixture
def auth_request():
    """Provider endpoints for a test flow."""
    return AuthRequest(
        request_url="https://provider.example/oauth/request_token",
        authorize_url="https://provider.example/oauth/authorize",
        access_token_url="https://provider.example/oauth/access_token",
    )


@pytest.fixture
def store():
    """In-memory credential store."""
    return MemoryCredentialStore()


@pytest.fixture
def transport():
    """Transport answering a full successful handshake."""
    return FakeTransport([REQUEST_TOKEN_BODY, ACCESS_TOKEN_BODY])


@pytest.fixture
def presenter():
    """Presenter returning a valid redirect."""
    return FakePresenter()
