"""
ECIES error taxonomy.

Every failure is terminal for the current operation; nothing here is
retried internally.
"""


class EciesError(Exception):
    """Base class for all ECIES failures."""


class InvalidKeyLength(EciesError):
    """Key material is shorter than the curve's scalar size."""


class InvalidKey(EciesError):
    """Point is not on the curve, or the curve is wrong."""


class KeyAgreementFailed(EciesError):
    """Key validation failed during Diffie-Hellman agreement."""


class TruncatedCryptogram(EciesError):
    """Input is shorter than the fixed cryptogram prefix."""


class AuthenticationFailed(EciesError):
    """
    Tag mismatch.

    Raised identically for tampering and for a wrong key so that callers
    cannot tell which one occurred.
    """


class EntropyFailure(EciesError):
    """The random source failed or returned too few bytes."""
