# Vault Module
"""
One-time secret storage built on ECIES:
- Passphrase-derived receiver keys
- Ephemeral sender keys per secret
- Snowflake-style ids
- Memory and SQLite cryptogram stores

Secrets are destroyed after the first successful read.
"""

from .errors import VaultError, SecretNotFound, PayloadError
from .payload import SecretPayload, SUPPORTED_CONTENT_TYPES
from .ids import FlakeIdGenerator
from .store import CryptogramStore, MemoryStore, SQLiteStore
from .vault import SecretVault, passphrase_key

__all__ = [
    'VaultError',
    'SecretNotFound',
    'PayloadError',
    'SecretPayload',
    'SUPPORTED_CONTENT_TYPES',
    'FlakeIdGenerator',
    'CryptogramStore',
    'MemoryStore',
    'SQLiteStore',
    'SecretVault',
    'passphrase_key',
]
