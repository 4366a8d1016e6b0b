"""
Secret resolvers.

A resolver maps a (source id, manager id) pair to the secret its session
tokens are signed with, raising when no secret is available.
"""

from .resolver import (
    FileSecretResolver,
    SecretCipher,
    SecretNotFoundError,
    StaticSecretResolver,
    build_secret_resolver,
    secret_key,
)

__all__ = [
    "FileSecretResolver",
    "SecretCipher",
    "SecretNotFoundError",
    "StaticSecretResolver",
    "build_secret_resolver",
    "secret_key",
]
