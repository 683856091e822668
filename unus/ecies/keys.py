"""
Elliptic-Curve Key Model

Immutable P-256 key types:
- PublicKey: curve + affine point, validated on construction
- PrivateKey: secret scalar + the public key derived from it

Key generation, scalar-base multiplication and SEC1 point compression go
through the cryptography library. Diffie-Hellman agreement needs the full
(x, y) of d·Q, so it uses the hand-built curve arithmetic.

Passphrase keys:
    PrivateKey.from_bytes() uses the supplied bytes directly as the scalar,
    without hashing or stretching. Low-entropy passphrases therefore map
    predictably to keys; existing cryptograms depend on this mapping.
"""

import hashlib
from dataclasses import dataclass
from typing import Dict

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from ..core_crypto.p256 import P256, Curve, int_to_bytes, is_on_curve, scalar_mult
from .errors import EntropyFailure, InvalidKey, InvalidKeyLength, KeyAgreementFailed


# Constants
CURVE = P256
SCALAR_SIZE = 32            # 256-bit private scalar
COMPRESSED_KEY_SIZE = 33    # sign byte + x-coordinate
SHARED_SECRET_SIZE = 32     # SHA-256 output

_EC_CURVES: Dict[str, ec.EllipticCurve] = {
    P256.name: ec.SECP256R1(),
}


def _ec_curve(curve: Curve) -> ec.EllipticCurve:
    """Map a curve to its cryptography-library counterpart."""
    try:
        return _EC_CURVES[curve.name]
    except (AttributeError, KeyError):
        raise InvalidKey("unsupported curve") from None


@dataclass(frozen=True)
class PublicKey:
    """EC public key: a point on a named curve."""
    curve: Curve
    x: int
    y: int

    def __post_init__(self):
        if not isinstance(self.curve, Curve) or not is_on_curve(self.curve, self.x, self.y):
            raise InvalidKey("invalid key")

    def compress(self) -> bytes:
        """Encode as a 33-byte SEC1 compressed point."""
        numbers = ec.EllipticCurvePublicNumbers(self.x, self.y, _ec_curve(self.curve))
        try:
            public_key = numbers.public_key()
        except ValueError:
            raise InvalidKey("invalid key") from None

        return public_key.public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint
        )

    @classmethod
    def decompress(cls, curve: Curve, data: bytes) -> 'PublicKey':
        """
        Decode a 33-byte compressed point onto the given curve.

        Raises:
            InvalidKey: If the encoding is malformed or the point is not
                on the curve
        """
        if len(data) != COMPRESSED_KEY_SIZE or data[0] not in (0x02, 0x03):
            raise InvalidKey("invalid key")

        try:
            public_key = ec.EllipticCurvePublicKey.from_encoded_point(
                _ec_curve(curve), bytes(data)
            )
        except ValueError:
            raise InvalidKey("invalid key") from None

        numbers = public_key.public_numbers()
        return cls(curve, numbers.x, numbers.y)


class PrivateKey:
    """
    EC private key.

    Holds the secret scalar and owns the public key derived from it, so the
    pair is always consistent. The scalar is only exposed through
    to_bytes().
    """

    __slots__ = ("_d", "_public_key")

    def __init__(self, d: int, curve: Curve = CURVE):
        """
        Initialize from a raw scalar.

        Args:
            d: Private scalar; reduced modulo the group order for all
               curve operations
            curve: Curve to derive the public key on

        Raises:
            InvalidKey: If the scalar reduces to zero
        """
        scalar = d % curve.n
        if scalar == 0:
            raise InvalidKey("invalid key")

        derived = ec.derive_private_key(scalar, _ec_curve(curve))
        numbers = derived.public_key().public_numbers()

        self._d = d
        self._public_key = PublicKey(curve, numbers.x, numbers.y)

    @classmethod
    def generate(cls, curve: Curve = CURVE) -> 'PrivateKey':
        """
        Generate a fresh key pair from the system CSPRNG.

        Raises:
            EntropyFailure: If the library cannot produce a key
        """
        ec_curve = _ec_curve(curve)
        try:
            private_key = ec.generate_private_key(ec_curve)
        except Exception as e:
            raise EntropyFailure("key generation failed") from e
        return cls(private_key.private_numbers().private_value, curve)

    @classmethod
    def from_bytes(cls, k: bytes, curve: Curve = CURVE) -> 'PrivateKey':
        """
        Use k directly as the private scalar (big-endian).

        Raises:
            InvalidKeyLength: If k is shorter than 32 bytes
            InvalidKey: If k reduces to zero modulo the group order
        """
        if len(k) < SCALAR_SIZE:
            raise InvalidKeyLength("key bytes must be at least 256-bits")

        return cls(int.from_bytes(k, "big"), curve)

    @property
    def curve(self) -> Curve:
        return self._public_key.curve

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    def to_bytes(self) -> bytes:
        """
        Scalar as minimal big-endian bytes, leading zeros stripped.

        Intended for passphrase-derived keys. A generated scalar below
        2^248 encodes to fewer than 32 bytes and is not accepted back by
        from_bytes().
        """
        return int_to_bytes(self._d)

    def compress(self) -> bytes:
        """Compressed encoding of this key's public point."""
        return self._public_key.compress()

    def agree(self, public_key: PublicKey) -> bytes:
        """
        Diffie-Hellman key agreement.

        Computes d·Q and returns SHA-256(x || y) of the result, where x and
        y are minimal big-endian encodings. The output is NOT suitable as
        a symmetric key; pass it through the KDF.

        Both keys are re-validated here regardless of construction-time
        checks. The reason for a validation failure is not exposed.

        Raises:
            KeyAgreementFailed: If curves differ or either point is invalid
        """
        ours = self._public_key
        if (not isinstance(public_key, PublicKey)
                or public_key.curve != ours.curve
                or not is_on_curve(public_key.curve, public_key.x, public_key.y)
                or not is_on_curve(ours.curve, ours.x, ours.y)):
            raise KeyAgreementFailed("unable to validate keys")

        point = scalar_mult(ours.curve, self._d, (public_key.x, public_key.y))
        if point is None:
            raise KeyAgreementFailed("unable to validate keys")

        x, y = point
        return hashlib.sha256(int_to_bytes(x) + int_to_bytes(y)).digest()

    def __eq__(self, other) -> bool:
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self._d == other._d and self._public_key == other._public_key

    def __hash__(self) -> int:
        return hash(self._public_key)

    def __repr__(self) -> str:
        return f"PrivateKey(curve={self.curve.name!r})"


def generate() -> PrivateKey:
    """Generate a fresh P-256 private key."""
    return PrivateKey.generate()


def from_bytes(k: bytes) -> PrivateKey:
    """Build a P-256 private key from raw scalar bytes."""
    return PrivateKey.from_bytes(k)


def compress(public_key: PublicKey) -> bytes:
    """Compress a public key to 33 bytes."""
    return public_key.compress()


def decompress(curve: Curve, data: bytes) -> PublicKey:
    """Decompress 33 bytes onto curve."""
    return PublicKey.decompress(curve, data)


def agree(private_key: PrivateKey, public_key: PublicKey) -> bytes:
    """ECDH shared secret of private_key and public_key."""
    return private_key.agree(public_key)
