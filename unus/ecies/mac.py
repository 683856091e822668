"""
Authentication Layer

HMAC-SHA256 over the ciphertext bytes only (encrypt-then-MAC).
The MAC key is derived independently from the cipher key.
"""

import hashlib
import hmac


TAG_SIZE = 32   # HMAC-SHA256 output


def compute_tag(mac_key: bytes, ciphertext: bytes) -> bytes:
    """Compute HMAC-SHA256 of the ciphertext."""
    return hmac.new(mac_key, ciphertext, hashlib.sha256).digest()


def verify_tag(expected_tag: bytes, computed_tag: bytes) -> bool:
    """Compare two tags in constant time."""
    return hmac.compare_digest(expected_tag, computed_tag)
