"""
Integration tests for Unus.

Tests end-to-end workflows combining multiple modules.
"""

import json
import logging

import pytest

from unus.ecies import (
    AuthenticationFailed, Cryptogram, decrypt, encrypt_ephemeral, from_bytes
)
from unus.integration.event_logger import EventLogger, EventType, SecurityEvent
from unus.vault import (
    SecretPayload, SecretNotFound, SQLiteStore, MemoryStore, SecretVault
)


PASSPHRASE = b"01234567890123456789012345678901"
WRONG_PASSPHRASE = b"11234567890123456789012345678901"


class TestPassphraseWorkflow:
    """Passphrase-derived receiver key with an ephemeral sender."""

    def test_passphrase_roundtrip(self):
        """The receiver recovers the exact JSON document."""
        plaintext = b'{"ContentType":"text/plain","Secret":"hi"}'
        receiver = from_bytes(PASSPHRASE)

        cryptogram = encrypt_ephemeral(receiver.public_key, plaintext)

        assert decrypt(from_bytes(PASSPHRASE), cryptogram) == plaintext

    def test_neighbouring_passphrase_fails(self):
        """A passphrase differing in one character cannot decrypt."""
        plaintext = b'{"ContentType":"text/plain","Secret":"hi"}'
        cryptogram = encrypt_ephemeral(from_bytes(PASSPHRASE).public_key, plaintext)

        with pytest.raises(AuthenticationFailed):
            decrypt(from_bytes(WRONG_PASSPHRASE), cryptogram)

    def test_hex_transport(self):
        """Cryptograms survive a hex round trip."""
        receiver = from_bytes(PASSPHRASE)
        blob = encrypt_ephemeral(receiver.public_key, b"over the wire")

        received = Cryptogram.from_hex(Cryptogram.from_bytes(blob).to_hex())

        assert decrypt(receiver, received.to_bytes()) == b"over the wire"


class TestVaultWorkflow:
    """Seal, persist, open and destroy."""

    def test_sqlite_survives_restart(self, tmp_path):
        """A secret sealed before a restart opens after it, exactly once."""
        db_path = str(tmp_path / "unus.db")
        payload = SecretPayload("application/json", b'{"api_key": "abc"}')

        with SQLiteStore(db_path) as store:
            secret_id = SecretVault(store).seal(payload, PASSPHRASE)

        with SQLiteStore(db_path) as store:
            vault = SecretVault(store)
            assert vault.open(secret_id, PASSPHRASE) == payload

        with SQLiteStore(db_path) as store:
            with pytest.raises(SecretNotFound):
                SecretVault(store).open(secret_id, PASSPHRASE)

    def test_many_secrets_isolated(self):
        """Each secret opens only with its own passphrase."""
        vault = SecretVault(MemoryStore())
        passphrases = [bytes([65 + i]) * 32 for i in range(3)]
        ids = [vault.seal(SecretPayload("text/plain", p[:1]), p) for p in passphrases]

        assert len(set(ids)) == 3

        with pytest.raises(AuthenticationFailed):
            vault.open(ids[0], passphrases[1])

        for secret_id, passphrase in zip(ids, passphrases):
            assert vault.open(secret_id, passphrase).secret == passphrase[:1]


class TestAuditTrail:
    """Vault activity recorded by the event logger."""

    def test_events_for_secret_lifecycle(self):
        """Seal, failed open, open and re-open are all recorded."""
        vault = SecretVault(MemoryStore())
        secret_id = vault.seal(SecretPayload("text/plain", b"x"), PASSPHRASE)

        with pytest.raises(AuthenticationFailed):
            vault.open(secret_id, WRONG_PASSPHRASE)
        vault.open(secret_id, PASSPHRASE)
        with pytest.raises(SecretNotFound):
            vault.open(secret_id, PASSPHRASE)

        types = [e.event_type for e in vault.events.get_secret_events(secret_id)]
        assert types == [
            EventType.SECRET_SEALED,
            EventType.DECRYPT_FAILED,
            EventType.SECRET_OPENED,
            EventType.SECRET_NOT_FOUND,
        ]

    def test_callbacks_notified(self):
        """Registered callbacks receive every event."""
        events = EventLogger()
        seen = []
        events.add_callback(seen.append)

        vault = SecretVault(MemoryStore(), events=events)
        vault.seal(SecretPayload("text/plain", b"x"), PASSPHRASE)

        assert [e.event_type for e in seen] == [EventType.SECRET_SEALED]

        events.remove_callback(seen.append)
        events.log_opened(1)
        assert len(seen) == 1

    def test_failing_callback_does_not_break_vault(self):
        """A broken listener does not stop sealing."""
        events = EventLogger()

        def broken(event):
            raise RuntimeError("listener down")

        events.add_callback(broken)
        vault = SecretVault(MemoryStore(), events=events)
        secret_id = vault.seal(SecretPayload("text/plain", b"x"), PASSPHRASE)

        assert vault.open(secret_id, PASSPHRASE).secret == b"x"

    def test_export_import(self):
        """Exported trails can be parsed back."""
        events = EventLogger(clock=lambda: 1_700_000_000)
        events.log_sealed(7, size=161, content_type="text/plain")
        events.log_decrypt_failed(7)

        restored = EventLogger.import_log(events.export_log())

        assert [e.event_type for e in restored] == [
            EventType.SYSTEM_START, EventType.SECRET_SEALED, EventType.DECRYPT_FAILED
        ]
        assert restored[1].details == {"size": 161, "content_type": "text/plain"}
        assert all(e.timestamp == 1_700_000_000 for e in restored)

    def test_event_json(self):
        """Events serialize to compact JSON."""
        event = SecurityEvent(EventType.SECRET_OPENED, 0, secret_id=9)
        document = json.loads(event.to_json())
        assert document["type"] == "secret_opened"
        assert document["secret_id"] == 9
        assert "secret:9" in str(event)

    def test_no_secrets_in_logs(self, caplog):
        """Passphrases and plaintext never reach the log output."""
        caplog.set_level(logging.DEBUG, logger="unus")
        vault = SecretVault(MemoryStore())
        secret_id = vault.seal(SecretPayload("text/plain", b"top-secret-value"), PASSPHRASE)

        with pytest.raises(AuthenticationFailed):
            vault.open(secret_id, WRONG_PASSPHRASE)
        vault.open(secret_id, PASSPHRASE)

        assert "decrypt_failed" in caplog.text
        assert "top-secret-value" not in caplog.text
        assert PASSPHRASE.decode() not in caplog.text
        assert WRONG_PASSPHRASE.decode() not in caplog.text
