"""
Secret Vault

One-time secret sharing on top of ECIES:
- seal(): passphrase -> receiver key, encrypt payload with an ephemeral
  sender key, store the cryptogram under a fresh id
- open(): fetch, decrypt with the passphrase-derived key, then destroy

The receiver's key is derived from the passphrase on both sides, so no
public key is ever transported; only the sender's ephemeral public key
travels inside the cryptogram.

A failed decryption leaves the cryptogram in place: a wrong passphrase
must not destroy the secret for its intended reader.
"""

import logging
from typing import Optional, Union

from ..ecies import AuthenticationFailed, PrivateKey, decrypt, encrypt_ephemeral
from ..integration.event_logger import EventLogger
from .errors import SecretNotFound
from .ids import FlakeIdGenerator
from .payload import SecretPayload
from .store import CryptogramStore


logger = logging.getLogger(__name__)

Passphrase = Union[str, bytes]


def passphrase_key(passphrase: Passphrase) -> PrivateKey:
    """
    Derive the receiver key from a passphrase.

    The UTF-8 bytes are used directly as the private scalar.

    Raises:
        InvalidKeyLength: If the passphrase is shorter than 32 bytes
    """
    if isinstance(passphrase, str):
        passphrase = passphrase.encode('utf-8')
    return PrivateKey.from_bytes(passphrase)


class SecretVault:
    """
    Seal-once, open-once secret storage.

    Example:
        >>> vault = SecretVault(MemoryStore())
        >>> secret_id = vault.seal(SecretPayload("text/plain", b"hi"), passphrase)
        >>> vault.open(secret_id, passphrase).secret
        b'hi'
    """

    def __init__(self, store: CryptogramStore,
                 ids: Optional[FlakeIdGenerator] = None,
                 events: Optional[EventLogger] = None):
        """
        Args:
            store: Persistence for cryptograms
            ids: Id source; a new FlakeIdGenerator if None
            events: Audit trail; a new EventLogger if None
        """
        self._store = store
        self._ids = ids or FlakeIdGenerator()
        self._events = events or EventLogger()

    @property
    def events(self) -> EventLogger:
        return self._events

    def seal(self, payload: SecretPayload, passphrase: Passphrase) -> int:
        """
        Encrypt and store a payload.

        Args:
            payload: Secret and its content type
            passphrase: Caller-supplied passphrase (at least 32 bytes)

        Returns:
            Id under which the cryptogram is stored

        Raises:
            PayloadError: If the payload fails validation
            InvalidKeyLength: If the passphrase is too short
        """
        payload.validate()
        receiver_key = passphrase_key(passphrase)

        cryptogram = encrypt_ephemeral(receiver_key.public_key, payload.to_json())
        secret_id = self._store.insert(self._ids.next(), cryptogram)

        self._events.log_sealed(secret_id, len(cryptogram), payload.content_type)
        return secret_id

    def open(self, secret_id: int, passphrase: Passphrase) -> SecretPayload:
        """
        Decrypt a stored secret and destroy it.

        Raises:
            SecretNotFound: If no cryptogram is stored under secret_id
            AuthenticationFailed: On a wrong passphrase or tampering; the
                cryptogram is kept
            PayloadError: If the decrypted payload cannot be decoded
        """
        receiver_key = passphrase_key(passphrase)

        try:
            cryptogram = self._store.select(secret_id)
        except SecretNotFound:
            self._events.log_not_found(secret_id)
            raise

        try:
            plaintext = decrypt(receiver_key, cryptogram)
        except AuthenticationFailed:
            self._events.log_decrypt_failed(secret_id)
            raise

        payload = SecretPayload.from_json(plaintext)

        if not self._store.delete(secret_id):
            # Raced with another reader that opened it first
            self._events.log_not_found(secret_id)
            raise SecretNotFound("secret not found")

        self._events.log_opened(secret_id)
        return payload

    def discard(self, secret_id: int) -> bool:
        """Destroy a stored secret without reading it."""
        removed = self._store.delete(secret_id)
        logger.info(f"Secret {secret_id} discarded: {removed}")
        return removed
