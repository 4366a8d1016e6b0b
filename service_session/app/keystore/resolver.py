"""
Secret resolvers for session tokens.
"""

import base64
import json
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from shared.config import BaseConfig
from shared.logging import get_logger

logger = get_logger("session.keystore")

SecretKey = Union[str, Tuple[int, int]]


class SecretNotFoundError(LookupError):
    """No secret is configured for a (source, manager) pair."""

    def __init__(self, source_id: int, manager_id: int):
        self.source_id = source_id
        self.manager_id = manager_id
        super().__init__(f"no secret for srcID:{source_id} managerID:{manager_id}")


def secret_key(source_id: int, manager_id: int) -> str:
    """Key under which a pair's secret is stored."""
    return f"{int(source_id)}:{int(manager_id)}"


def _normalize(secrets: Mapping[SecretKey, str]) -> Mapping[str, str]:
    normalized: Dict[str, str] = {}
    for key, value in secrets.items():
        if isinstance(key, tuple):
            key = secret_key(*key)
        else:
            source_id, _, manager_id = str(key).partition(":")
            key = secret_key(int(source_id), int(manager_id))
        normalized[key] = value
    return MappingProxyType(normalized)


class SecretCipher:
    """
    Encrypts and decrypts stored secrets with a key derived from a master key.
    """

    def __init__(self, master_key: str, salt: bytes = b"session_secret_salt"):
        """
        Args:
            master_key: Master key for encryption/decryption
            salt: PBKDF2 salt; must match the one used to encrypt
        """
        if not master_key:
            raise ValueError("Master key is required")

        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=100000,
        )
        key = base64.urlsafe_b64encode(kdf.derive(master_key.encode()))
        self._fernet = Fernet(key)

    def encrypt(self, secret: str) -> str:
        return self._fernet.encrypt(secret.encode()).decode()

    def decrypt(self, encrypted_secret: str) -> str:
        return self._fernet.decrypt(encrypted_secret.encode()).decode()


class StaticSecretResolver:
    """Resolve secrets from an in-memory mapping.

    Keys are ``(source_id, manager_id)`` tuples or ``"source_id:manager_id"``
    strings. The mapping is copied and frozen on construction.
    """

    def __init__(self, secrets: Mapping[SecretKey, str]):
        self._secrets = _normalize(secrets)

    def __call__(self, source_id: int, manager_id: int) -> str:
        secret = self._secrets.get(secret_key(source_id, manager_id))
        if secret is None:
            raise SecretNotFoundError(source_id, manager_id)
        return secret

    def __len__(self) -> int:
        return len(self._secrets)


class FileSecretResolver(StaticSecretResolver):
    """
    Resolve secrets from a JSON file of ``{"<source_id>:<manager_id>": secret}``.

    The file is read once. When a master key is given, every value is a
    Fernet token produced by ``SecretCipher.encrypt`` and is decrypted on load.
    """

    def __init__(self, path: str, master_key: Optional[str] = None):
        self.path = path
        with open(path, "r") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError(f"Secrets file {path} must contain a JSON object")

        if master_key:
            cipher = SecretCipher(master_key)
            try:
                raw = {key: cipher.decrypt(value) for key, value in raw.items()}
            except InvalidToken as e:
                logger.error("Failed to decrypt secrets file", path=path)
                raise ValueError(f"Secrets file {path} cannot be decrypted with the master key") from e

        super().__init__(raw)
        logger.info("Loaded session secrets", path=path, count=len(self), encrypted=bool(master_key))


def build_secret_resolver(config: BaseConfig) -> StaticSecretResolver:
    """Build the resolver described by configuration."""
    if config.secrets_file:
        return FileSecretResolver(config.secrets_file, config.master_key)
    return StaticSecretResolver(config.secrets)
