"""
Key Derivation Function

PBKDF2-HMAC stretching of a shared secret (or any seed) into fixed-length
symmetric keys. One ECDH output is split into independent cipher and MAC
keys by deriving twice with two different random salts.

Iteration count is a protocol constant: both sides must use the same value
or decryption fails authentication.
"""

from dataclasses import dataclass, field

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .symmetric import EntropySource, draw, read_entropy


# PBKDF2 configuration
KDF_ITERATIONS = 310_000
KDF_ALGORITHM = hashes.SHA256()
KDF_LENGTH = 32             # 256-bit output keys
SALT_SIZE = 16              # 128-bit salt per derived key

# Defaults for standalone use with random key material
DEFAULT_ITERATIONS = 3_000_000
DEFAULT_KEY_SIZE = 32


@dataclass(frozen=True)
class KDFParameters:
    """
    Immutable PBKDF2 parameters.

    Misconfiguration is a programmer error and raises ValueError
    at construction time.
    """
    hash: hashes.HashAlgorithm
    key_material: bytes = field(repr=False)
    iterations: int
    length: int

    def __post_init__(self):
        if not isinstance(self.hash, hashes.HashAlgorithm):
            raise ValueError("hash must be a cryptography HashAlgorithm instance")
        if not self.key_material:
            raise ValueError("key_material must not be empty")
        if self.iterations < 1:
            raise ValueError("iterations must be positive")
        if self.length < 1:
            raise ValueError("length must be positive")


class KDF:
    """
    PBKDF2 key derivation bound to one set of parameters.

    Derivation is deterministic per (parameters, salt) pair. Nothing is
    cached between calls.

    Example:
        >>> kdf = KDF(protocol_parameters(shared_secret))
        >>> aes_key = kdf.derive(aes_salt)
        >>> mac_key = kdf.derive(hmac_salt)
    """

    def __init__(self, params: KDFParameters):
        self._params = params

    @property
    def params(self) -> KDFParameters:
        return self._params

    def derive(self, salt: bytes) -> bytes:
        """
        Derive a key from the configured key material and the given salt.

        Args:
            salt: Per-key random salt

        Returns:
            params.length derived bytes
        """
        kdf = PBKDF2HMAC(
            algorithm=self._params.hash,
            length=self._params.length,
            salt=salt,
            iterations=self._params.iterations,
        )
        return kdf.derive(self._params.key_material)


def derive(params: KDFParameters, salt: bytes) -> bytes:
    """Derive one key from params and salt."""
    return KDF(params).derive(salt)


def protocol_parameters(shared_secret: bytes) -> KDFParameters:
    """KDF parameters used by the ECIES protocol for a given shared secret."""
    return KDFParameters(
        hash=KDF_ALGORITHM,
        key_material=shared_secret,
        iterations=KDF_ITERATIONS,
        length=KDF_LENGTH,
    )


def default_parameters(entropy: EntropySource = read_entropy) -> KDFParameters:
    """
    KDF parameters keyed with fresh random material.

    Intended for deriving standalone keys that are not tied to an
    ECDH exchange.
    """
    return KDFParameters(
        hash=KDF_ALGORITHM,
        key_material=draw(entropy, DEFAULT_KEY_SIZE),
        iterations=DEFAULT_ITERATIONS,
        length=KDF_LENGTH,
    )
