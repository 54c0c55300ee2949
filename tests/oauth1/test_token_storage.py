"""Tests for the token model and credential stores."""

import json
import stat
from unittest import mock

import pytest

from src.oauth1.exceptions import TokenStorageError
from src.oauth1.signature import signature
from src.oauth1.token_storage import FileCredentialStore, MemoryCredentialStore, Token


class TestToken:
    """Tests for Token dataclass."""

    def test_from_query_items(self):
        """Token is built from oauth_token and oauth_token_secret."""
        token = Token.from_query_items(
            [("oauth_token", "key"), ("oauth_token_secret", "secret")]
        )

        assert token == Token(key="key", secret="secret")

    def test_from_query_items_ignores_ordering_and_extras(self):
        token = Token.from_query_items(
            [
                ("user_id", "42"),
                ("oauth_token_secret", "secret"),
                ("screen_name", "someone"),
                ("oauth_token", "key"),
            ]
        )

        assert token == Token(key="key", secret="secret")

    @pytest.mark.parametrize(
        "items",
        [
            [("oauth_token", "key")],
            [("oauth_token_secret", "secret")],
            [],
        ],
    )
    def test_from_query_items_missing_fields(self, items):
        assert Token.from_query_items(items) is None

    def test_parsed_token_signs_like_constructed_token(self):
        """A token parsed from query items signs the same as the token it came from."""
        original = Token(key="key", secret="secret")
        parsed = Token.from_query_items(
            [("oauth_token", original.key), ("oauth_token_secret", original.secret)]
        )

        assert signature(parsed, "shhh") == signature(original, "shhh")

    def test_dict_round_trip(self):
        token = Token(key="key", secret="secret")

        assert Token.from_dict(token.to_dict()) == token

    def test_from_dict_rejects_wrong_types(self):
        with pytest.raises(TypeError):
            Token.from_dict({"key": 1, "secret": "secret"})

    def test_secret_hidden_from_repr(self):
        assert "hidden" not in repr(Token(key="key", secret="hidden"))


class TestMemoryCredentialStore:
    """Tests for MemoryCredentialStore."""

    def test_set_get_remove(self):
        store = MemoryCredentialStore()
        token = Token(key="key", secret="secret")

        store.set(token, "credentials")
        assert store.get("credentials") == token

        store.remove("credentials")
        assert store.get("credentials") is None

    def test_remove_missing_key_is_noop(self):
        MemoryCredentialStore().remove("missing")


class TestFileCredentialStore:
    """Tests for FileCredentialStore."""

    @pytest.fixture
    def store(self, tmp_path):
        return FileCredentialStore(str(tmp_path / "nested" / "tokens.json"))

    def test_get_without_file_returns_none(self, store):
        assert store.get("credentials") is None
        assert store.token_file.exists() is False

    def test_set_creates_file_with_secure_permissions(self, store):
        store.set(Token(key="key", secret="secret"), "credentials")

        assert store.token_file.exists()
        mode = stat.S_IMODE(store.token_file.stat().st_mode)
        assert mode == 0o600

    def test_set_then_get(self, store):
        token = Token(key="key", secret="secret")
        store.set(token, "credentials")

        assert store.get("credentials") == token
        assert FileCredentialStore(str(store.token_file)).get("credentials") == token

    def test_set_replaces_existing_token(self, store):
        store.set(Token(key="old", secret="old"), "credentials")
        store.set(Token(key="new", secret="new"), "credentials")

        assert store.get("credentials") == Token(key="new", secret="new")

    def test_entries_are_keyed(self, store):
        store.set(Token(key="a", secret="1"), "first")
        store.set(Token(key="b", secret="2"), "second")

        data = json.loads(store.token_file.read_text())
        assert data == {
            "first": {"key": "a", "secret": "1"},
            "second": {"key": "b", "secret": "2"},
        }

    def test_remove_keeps_other_entries(self, store):
        store.set(Token(key="a", secret="1"), "first")
        store.set(Token(key="b", secret="2"), "second")

        store.remove("first")

        assert store.get("first") is None
        assert store.get("second") == Token(key="b", secret="2")

    def test_remove_last_entry_deletes_file(self, store):
        store.set(Token(key="a", secret="1"), "credentials")

        store.remove("credentials")

        assert store.token_file.exists() is False

    def test_remove_missing_key_is_noop(self, store):
        store.remove("credentials")

        assert store.token_file.exists() is False

    def test_corrupted_file_returns_none(self, store):
        store.token_file.parent.mkdir(parents=True)
        store.token_file.write_text("{ not json")

        assert store.get("credentials") is None

    def test_invalid_entry_returns_none(self, store):
        store.token_file.parent.mkdir(parents=True)
        store.token_file.write_text(json.dumps({"credentials": {"key": "only"}}))

        assert store.get("credentials") is None

    def test_write_failure_raises_storage_error(self, store):
        with mock.patch("builtins.open", side_effect=OSError("disk full")):
            with pytest.raises(TokenStorageError, match="Failed to save tokens"):
                store.set(Token(key="key", secret="secret"), "credentials")
