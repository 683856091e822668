"""
Symmetric Cipher Layer

AES-256-CBC with PKCS#7 padding and a fresh random IV per call.

Padding always adds between 1 and 16 bytes, each equal to the pad length;
a block-aligned plaintext gets a full block of padding.

Decryption does not authenticate. Callers must verify the MAC tag over
the ciphertext before calling aes_decrypt().
"""

import secrets
from typing import Callable, Tuple

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import EntropyFailure


# Constants
AES_KEY_SIZE = 32       # 256 bits
BLOCK_SIZE = 16         # AES block / IV size in bytes

EntropySource = Callable[[int], bytes]


def read_entropy(n: int) -> bytes:
    """
    Read n bytes from the operating system CSPRNG.

    Raises:
        EntropyFailure: If the random source is unavailable
    """
    try:
        return secrets.token_bytes(n)
    except OSError as e:
        raise EntropyFailure("entropy source failed") from e


def draw(entropy: EntropySource, n: int) -> bytes:
    """
    Draw exactly n bytes from an entropy source.

    Any failure of the source, or a short read, is reported as
    EntropyFailure.
    """
    try:
        data = entropy(n)
    except EntropyFailure:
        raise
    except Exception as e:
        raise EntropyFailure("entropy source failed") from e

    if not isinstance(data, (bytes, bytearray)) or len(data) != n:
        raise EntropyFailure("not enough entropy")
    return bytes(data)


def pad(message: bytes) -> bytes:
    """Append PKCS#7 padding up to the next 16-byte boundary."""
    padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
    return padder.update(message) + padder.finalize()


def unpad(message: bytes) -> bytes:
    """
    Strip PKCS#7 padding.

    Raises:
        ValueError: If the final byte does not describe valid padding
    """
    unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder()
    return unpadder.update(message) + unpadder.finalize()


def aes_encrypt(key: bytes, plaintext: bytes,
                entropy: EntropySource = read_entropy) -> Tuple[bytes, bytes]:
    """
    Encrypt plaintext with AES-256-CBC.

    Args:
        key: 256-bit (32-byte) key
        plaintext: Data to encrypt, any length (including empty)
        entropy: Random source for the IV

    Returns:
        Tuple of (ciphertext, iv)
    """
    if len(key) != AES_KEY_SIZE:
        raise ValueError(f"Key must be {AES_KEY_SIZE} bytes")

    iv = draw(entropy, BLOCK_SIZE)
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(pad(plaintext)) + encryptor.finalize()

    return ciphertext, iv


def aes_decrypt(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """
    Decrypt AES-256-CBC ciphertext and remove padding.

    Args:
        key: 256-bit (32-byte) key
        iv: 16-byte initialization vector
        ciphertext: Non-empty multiple of the block size

    Returns:
        Original plaintext

    Raises:
        ValueError: If the ciphertext is misaligned or the padding is invalid
    """
    if len(key) != AES_KEY_SIZE:
        raise ValueError(f"Key must be {AES_KEY_SIZE} bytes")
    if not ciphertext or len(ciphertext) % BLOCK_SIZE:
        raise ValueError("Ciphertext is not a whole number of blocks")

    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    return unpad(padded)
