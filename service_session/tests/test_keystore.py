"""
Unit tests for secret resolvers.
"""

import json
import pytest

from service_session.app.keystore import (
    FileSecretResolver,
    SecretCipher,
    SecretNotFoundError,
    StaticSecretResolver,
    build_secret_resolver,
    secret_key,
)
from shared.config import get_config


@pytest.fixture
def secrets_file(tmp_path):
    """Plain secrets file."""
    path = tmp_path / "secrets.json"
    path.write_text(json.dumps({"1:2": "secret", "3:4": "another"}))
    return str(path)


class TestStaticSecretResolver:
    """Test cases for StaticSecretResolver."""

    def test_tuple_keys(self):
        resolver = StaticSecretResolver({(1, 2): "secret"})
        assert resolver(1, 2) == "secret"

    def test_string_keys(self):
        resolver = StaticSecretResolver({"10:20": "secret"})
        assert resolver(10, 20) == "secret"

    def test_missing_pair(self):
        resolver = StaticSecretResolver({(1, 2): "secret"})

        with pytest.raises(SecretNotFoundError) as exc_info:
            resolver(2, 1)

        assert isinstance(exc_info.value, LookupError)
        assert exc_info.value.source_id == 2
        assert exc_info.value.manager_id == 1

    def test_copy_is_isolated(self):
        """Later changes to the source mapping are not seen."""
        source = {(1, 2): "secret"}
        resolver = StaticSecretResolver(source)
        source[(1, 2)] = "changed"

        assert resolver(1, 2) == "secret"

    def test_secret_key(self):
        assert secret_key(1, 2) == "1:2"


class TestFileSecretResolver:
    """Test cases for FileSecretResolver."""

    def test_plain_file(self, secrets_file):
        resolver = FileSecretResolver(secrets_file)

        assert resolver(1, 2) == "secret"
        assert resolver(3, 4) == "another"
        assert len(resolver) == 2

    def test_encrypted_file(self, tmp_path):
        cipher = SecretCipher("master-key")
        path = tmp_path / "secrets.enc.json"
        path.write_text(json.dumps({"1:2": cipher.encrypt("secret")}))

        resolver = FileSecretResolver(str(path), master_key="master-key")
        assert resolver(1, 2) == "secret"

    def test_wrong_master_key(self, tmp_path):
        path = tmp_path / "secrets.enc.json"
        path.write_text(json.dumps({"1:2": SecretCipher("master-key").encrypt("secret")}))

        with pytest.raises(ValueError):
            FileSecretResolver(str(path), master_key="wrong-key")

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "secrets.json"
        path.write_text("[]")

        with pytest.raises(ValueError):
            FileSecretResolver(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FileSecretResolver(str(tmp_path / "absent.json"))


class TestSecretCipher:
    """Test cases for SecretCipher."""

    def test_round_trip(self):
        cipher = SecretCipher("master-key")
        encrypted = cipher.encrypt("secret")

        assert encrypted != "secret"
        assert SecretCipher("master-key").decrypt(encrypted) == "secret"

    def test_requires_master_key(self):
        with pytest.raises(ValueError):
            SecretCipher("")


class TestBuildSecretResolver:
    """Test cases for build_secret_resolver."""

    def test_inline_secrets(self):
        config = get_config("session", 8020, secrets={"1:2": "secret"})

        resolver = build_secret_resolver(config)
        assert resolver(1, 2) == "secret"

    def test_secrets_file(self, secrets_file):
        config = get_config("session", 8020, secrets_file=secrets_file)

        resolver = build_secret_resolver(config)
        assert isinstance(resolver, FileSecretResolver)
        assert resolver(3, 4) == "another"
