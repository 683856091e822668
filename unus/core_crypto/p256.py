"""
NIST P-256 Curve Arithmetic

Implements the affine-coordinate group law for short Weierstrass curves
y^2 = x^3 + ax + b over a prime field, specialised to P-256 (secp256r1):
- On-curve membership test
- Point addition and doubling
- Montgomery-ladder scalar multiplication

The point at infinity is represented as None.

Note: The ladder performs the same sequence of group operations for every
      scalar, but Python integer arithmetic is not constant-time. It is
      used where the full (x, y) result of a variable-base multiplication
      is required, which the cryptography library does not expose.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


Point = Optional[Tuple[int, int]]


@dataclass(frozen=True)
class Curve:
    """Domain parameters of a short Weierstrass curve."""
    name: str
    p: int      # Field prime
    a: int
    b: int
    gx: int     # Generator
    gy: int
    n: int      # Group order

    @property
    def generator(self) -> Tuple[int, int]:
        return (self.gx, self.gy)

    @property
    def byte_size(self) -> int:
        """Size of a field element / scalar in bytes."""
        return (self.p.bit_length() + 7) // 8


# SEC 2 v2.0, section 2.4.2
P256 = Curve(
    name="P-256",
    p=0xFFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFF,
    a=0xFFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFC,
    b=0x5AC635D8AA3A93E7B3EBBD55769886BC651D06B0CC53B0F63BCE3C3E27D2604B,
    gx=0x6B17D1F2E12C4247F8BCE6E563A440F277037D812DEB33A0F4A13945D898C296,
    gy=0x4FE342E2FE1A7F9B8EE7EB4A7C0F9E162BCE33576B315ECECBB6406837BF51F5,
    n=0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551,
)


def mod_inverse(a: int, m: int) -> int:
    """
    Compute modular multiplicative inverse using the iterative
    Extended Euclidean Algorithm.

    Raises:
        ValueError: If a has no inverse modulo m
    """
    a %= m
    if a == 0:
        raise ValueError("No modular inverse exists")

    old_r, r = a, m
    old_s, s = 1, 0
    while r:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, old_s - q * s

    if old_r != 1:
        raise ValueError("No modular inverse exists")
    return old_s % m


def is_on_curve(curve: Curve, x: int, y: int) -> bool:
    """
    Check that (x, y) is a valid affine point of the curve.

    Coordinates must be reduced field elements and satisfy
    y^2 = x^3 + ax + b (mod p).
    """
    if x is None or y is None:
        return False
    if not (0 <= x < curve.p and 0 <= y < curve.p):
        return False
    return (y * y - (x * x * x + curve.a * x + curve.b)) % curve.p == 0


def point_double(curve: Curve, point: Point) -> Point:
    """Compute 2P."""
    if point is None:
        return None

    x, y = point
    if y == 0:
        return None

    p = curve.p
    slope = (3 * x * x + curve.a) * mod_inverse(2 * y, p) % p
    x3 = (slope * slope - 2 * x) % p
    y3 = (slope * (x - x3) - y) % p
    return (x3, y3)


def point_add(curve: Curve, p1: Point, p2: Point) -> Point:
    """Compute P1 + P2."""
    if p1 is None:
        return p2
    if p2 is None:
        return p1

    x1, y1 = p1
    x2, y2 = p2
    p = curve.p

    if x1 == x2:
        if (y1 + y2) % p == 0:
            return None  # P + (-P)
        return point_double(curve, p1)

    slope = (y2 - y1) * mod_inverse(x2 - x1, p) % p
    x3 = (slope * slope - x1 - x2) % p
    y3 = (slope * (x1 - x3) - y1) % p
    return (x3, y3)


def scalar_mult(curve: Curve, k: int, point: Point) -> Point:
    """
    Compute kP with a Montgomery ladder.

    The scalar is reduced modulo the group order first, so any
    non-negative integer is accepted. Every bit position up to the bit
    length of n costs one addition and one doubling, whatever the
    scalar's value.
    """
    k %= curve.n
    if k == 0 or point is None:
        return None

    r0, r1 = None, point    # invariant: r1 = r0 + P
    for i in reversed(range(curve.n.bit_length())):
        if (k >> i) & 1:
            r0, r1 = point_add(curve, r0, r1), point_double(curve, r1)
        else:
            r0, r1 = point_double(curve, r0), point_add(curve, r0, r1)
    return r0


def int_to_bytes(value: int) -> bytes:
    """
    Minimal big-endian encoding of a non-negative integer.

    Zero encodes as the empty string; leading zero bytes are never emitted.
    """
    return value.to_bytes((value.bit_length() + 7) // 8, "big")
