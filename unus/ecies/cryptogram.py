"""
Cryptogram Codec

Fixed-order binary layout:
    [sender_public_key (33) | tag (32) | aes_salt (16) | hmac_salt (16) | iv (16) | ciphertext]

The variable-length ciphertext is always last, so no length prefix is
needed: everything after the 113-byte prefix is ciphertext.
"""

from dataclasses import dataclass

from .errors import TruncatedCryptogram
from .kdf import SALT_SIZE
from .keys import COMPRESSED_KEY_SIZE
from .mac import TAG_SIZE
from .symmetric import BLOCK_SIZE


# Field offsets
PUBLIC_KEY_OFFSET = 0
TAG_OFFSET = PUBLIC_KEY_OFFSET + COMPRESSED_KEY_SIZE    # 33
AES_SALT_OFFSET = TAG_OFFSET + TAG_SIZE                 # 65
HMAC_SALT_OFFSET = AES_SALT_OFFSET + SALT_SIZE          # 81
IV_OFFSET = HMAC_SALT_OFFSET + SALT_SIZE                # 97
CIPHERTEXT_OFFSET = IV_OFFSET + BLOCK_SIZE              # 113

PREFIX_SIZE = CIPHERTEXT_OFFSET


@dataclass(frozen=True)
class Cryptogram:
    """
    Container for the serialized parts of one ECIES message.

    Holds no keys; the sender public key is in compressed form.
    """
    sender_public_key: bytes    # 33 bytes
    tag: bytes                  # 32 bytes
    aes_salt: bytes             # 16 bytes
    hmac_salt: bytes            # 16 bytes
    iv: bytes                   # 16 bytes
    ciphertext: bytes           # Variable length

    def __post_init__(self):
        sizes = (
            ("sender_public_key", COMPRESSED_KEY_SIZE),
            ("tag", TAG_SIZE),
            ("aes_salt", SALT_SIZE),
            ("hmac_salt", SALT_SIZE),
            ("iv", BLOCK_SIZE),
        )
        for name, size in sizes:
            if len(getattr(self, name)) != size:
                raise ValueError(f"{name} must be {size} bytes")

    def to_bytes(self) -> bytes:
        """Serialize in fixed field order."""
        return (
            self.sender_public_key +
            self.tag +
            self.aes_salt +
            self.hmac_salt +
            self.iv +
            self.ciphertext
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> 'Cryptogram':
        """
        Split a serialized cryptogram at the fixed offsets.

        Raises:
            TruncatedCryptogram: If data is shorter than the 113-byte prefix
        """
        if len(data) < PREFIX_SIZE:
            raise TruncatedCryptogram(
                f"cryptogram must be at least {PREFIX_SIZE} bytes, got {len(data)}"
            )

        data = bytes(data)
        return cls(
            sender_public_key=data[PUBLIC_KEY_OFFSET:TAG_OFFSET],
            tag=data[TAG_OFFSET:AES_SALT_OFFSET],
            aes_salt=data[AES_SALT_OFFSET:HMAC_SALT_OFFSET],
            hmac_salt=data[HMAC_SALT_OFFSET:IV_OFFSET],
            iv=data[IV_OFFSET:CIPHERTEXT_OFFSET],
            ciphertext=data[CIPHERTEXT_OFFSET:],
        )

    def to_hex(self) -> str:
        """Serialize to hex string."""
        return self.to_bytes().hex()

    @classmethod
    def from_hex(cls, hex_str: str) -> 'Cryptogram':
        """Deserialize from hex string."""
        return cls.from_bytes(bytes.fromhex(hex_str))


def encode(cryptogram: Cryptogram) -> bytes:
    return cryptogram.to_bytes()


def decode(data: bytes) -> Cryptogram:
    return Cryptogram.from_bytes(data)
