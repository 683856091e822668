"""
Security tests for Unus.

Tests specifically for security-related scenarios:
- Single-bit tampering of tag, ciphertext and sender key
- Wrong receiver keys / passphrases
- Uniform failure signal (no oracle on the failing stage)
- Tag verified before any cipher key is derived
- Truncated and malformed cryptograms
"""

import os

import pytest

from unus.ecies import (
    AuthenticationFailed, TruncatedCryptogram, decrypt, encrypt,
    encrypt_ephemeral, from_bytes, generate
)
from unus.ecies import protocol
from unus.ecies.cryptogram import (
    TAG_OFFSET, AES_SALT_OFFSET, HMAC_SALT_OFFSET, IV_OFFSET, CIPHERTEXT_OFFSET
)
from unus.ecies.kdf import KDF


PASSPHRASE = b"01234567890123456789012345678901"
MESSAGE = b"Sensitive data that must not be modified"


@pytest.fixture(scope="module")
def receiver():
    return from_bytes(PASSPHRASE)


@pytest.fixture(scope="module")
def cryptogram(receiver):
    return encrypt_ephemeral(receiver.public_key, MESSAGE)


def flip(data: bytes, byte_pos: int, bit_pos: int) -> bytes:
    modified = bytearray(data)
    modified[byte_pos] ^= (1 << bit_pos)
    return bytes(modified)


class TestTamperDetection:
    """Single bit flips must never yield altered plaintext."""

    def test_untampered_decrypts(self, receiver, cryptogram):
        """Sanity check: the unmodified cryptogram decrypts."""
        assert decrypt(receiver, cryptogram) == MESSAGE

    @pytest.mark.parametrize("byte_pos", [0, 1, 15, 31])
    def test_tag_bit_flip(self, receiver, cryptogram, byte_pos):
        """Flipping a tag bit fails authentication."""
        for bit_pos in (0, 7):
            with pytest.raises(AuthenticationFailed):
                decrypt(receiver, flip(cryptogram, TAG_OFFSET + byte_pos, bit_pos))

    @pytest.mark.parametrize("offset", [0, 1, 16, -1])
    def test_ciphertext_bit_flip(self, receiver, cryptogram, offset):
        """Flipping a ciphertext bit fails authentication."""
        pos = CIPHERTEXT_OFFSET + offset if offset >= 0 else len(cryptogram) + offset
        for bit_pos in (0, 3, 7):
            with pytest.raises(AuthenticationFailed):
                decrypt(receiver, flip(cryptogram, pos, bit_pos))

    @pytest.mark.parametrize("byte_pos,bit_pos", [(0, 0), (0, 2), (5, 4), (32, 7)])
    def test_sender_key_bit_flip(self, receiver, cryptogram, byte_pos, bit_pos):
        """A modified sender key fails authentication, whether or not it decodes."""
        with pytest.raises(AuthenticationFailed):
            decrypt(receiver, flip(cryptogram, byte_pos, bit_pos))

    def test_hmac_salt_bit_flip(self, receiver, cryptogram):
        """A modified MAC salt derives the wrong MAC key."""
        hmac_salt_pos = AES_SALT_OFFSET + 16
        with pytest.raises(AuthenticationFailed):
            decrypt(receiver, flip(cryptogram, hmac_salt_pos, 0))

    def test_appended_block_rejected(self, receiver, cryptogram):
        """Extending the ciphertext fails authentication."""
        with pytest.raises(AuthenticationFailed):
            decrypt(receiver, cryptogram + b"\x00" * 16)

    def test_dropped_block_rejected(self, receiver):
        """Removing a ciphertext block fails authentication."""
        cryptogram = encrypt_ephemeral(receiver.public_key, b"a" * 40)
        with pytest.raises(AuthenticationFailed):
            decrypt(receiver, cryptogram[:-16])


class TestVerificationOrder:
    """The MAC key is derived and checked before any decryption work."""

    @pytest.fixture
    def spies(self, monkeypatch):
        salts = []
        decrypted = []
        real_derive = KDF.derive
        real_aes_decrypt = protocol.aes_decrypt

        def derive(kdf, salt):
            salts.append(bytes(salt))
            return real_derive(kdf, salt)

        def aes_decrypt(key, iv, ciphertext):
            decrypted.append(ciphertext)
            return real_aes_decrypt(key, iv, ciphertext)

        monkeypatch.setattr(KDF, "derive", derive)
        monkeypatch.setattr(protocol, "aes_decrypt", aes_decrypt)
        return salts, decrypted

    def test_bad_tag_stops_before_cipher_key(self, receiver, cryptogram, spies):
        """A bad tag derives only the MAC key and never decrypts."""
        salts, decrypted = spies

        with pytest.raises(AuthenticationFailed):
            decrypt(receiver, flip(cryptogram, TAG_OFFSET, 0))

        assert salts == [cryptogram[HMAC_SALT_OFFSET:IV_OFFSET]]
        assert decrypted == []

    def test_bad_sender_key_costs_one_derivation(self, receiver, cryptogram, spies):
        """An undecodable sender key is rejected like a bad tag."""
        salts, decrypted = spies

        with pytest.raises(AuthenticationFailed):
            decrypt(receiver, b"\x02" + b"\xff" * 32 + cryptogram[33:])

        assert salts == [cryptogram[HMAC_SALT_OFFSET:IV_OFFSET]]
        assert decrypted == []

    def test_valid_cryptogram_mac_key_first(self, receiver, cryptogram, spies):
        """On success the MAC key is derived before the cipher key."""
        salts, decrypted = spies

        assert decrypt(receiver, cryptogram) == MESSAGE

        assert salts == [cryptogram[HMAC_SALT_OFFSET:IV_OFFSET],
                         cryptogram[AES_SALT_OFFSET:HMAC_SALT_OFFSET]]
        assert len(decrypted) == 1


class TestWrongKey:
    """Decryption with any other key must fail."""

    def test_wrong_passphrase(self, cryptogram):
        """A passphrase differing in one character fails."""
        wrong = from_bytes(b"11234567890123456789012345678901")
        with pytest.raises(AuthenticationFailed):
            decrypt(wrong, cryptogram)

    def test_random_keys(self, cryptogram):
        """Random private keys fail."""
        for _ in range(3):
            with pytest.raises(AuthenticationFailed):
                decrypt(generate(), cryptogram)

    def test_sender_cannot_decrypt_with_own_key(self):
        """The sender's key is not the receiver's key."""
        sender = generate()
        receiver = generate()
        cryptogram = encrypt(sender, receiver.public_key, b"for receiver only")
        with pytest.raises(AuthenticationFailed):
            decrypt(sender, cryptogram)


class TestUniformFailure:
    """Failures must not reveal where decryption stopped."""

    def _failure(self, receiver, data):
        with pytest.raises(AuthenticationFailed) as exc_info:
            decrypt(receiver, data)
        return exc_info.value

    def test_same_signal_for_all_stages(self, receiver, cryptogram):
        """Bad point, bad tag and wrong key raise identical errors."""
        bad_point = b"\x02" + b"\xff" * 32 + cryptogram[33:]
        bad_tag = flip(cryptogram, TAG_OFFSET, 0)
        wrong_key = generate()

        errors = [
            self._failure(receiver, bad_point),
            self._failure(receiver, bad_tag),
            self._failure(wrong_key, cryptogram),
        ]

        assert len({str(e) for e in errors}) == 1
        assert len({type(e) for e in errors}) == 1

    def test_no_chained_cause(self, receiver, cryptogram):
        """Decompression failures do not leak the underlying error."""
        bad_point = b"\x04" + cryptogram[1:]
        error = self._failure(receiver, bad_point)
        assert error.__cause__ is None
        assert error.__suppress_context__


class TestMalformedCryptogram:
    """Malformed input handling."""

    def test_truncated_prefix(self, receiver, cryptogram):
        """Input shorter than 113 bytes is truncated."""
        with pytest.raises(TruncatedCryptogram):
            decrypt(receiver, cryptogram[:112])
        with pytest.raises(TruncatedCryptogram):
            decrypt(receiver, b"")

    def test_empty_ciphertext(self, receiver, cryptogram):
        """A prefix with no ciphertext cannot authenticate."""
        with pytest.raises(AuthenticationFailed):
            decrypt(receiver, cryptogram[:CIPHERTEXT_OFFSET])

    def test_misaligned_ciphertext(self, receiver, cryptogram):
        """Ciphertext not a multiple of 16 bytes cannot authenticate."""
        with pytest.raises(AuthenticationFailed):
            decrypt(receiver, cryptogram[:-1])

    def test_random_bytes(self, receiver):
        """Random data of plausible length is rejected."""
        with pytest.raises(AuthenticationFailed):
            decrypt(receiver, os.urandom(CIPHERTEXT_OFFSET + 32))
