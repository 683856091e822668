"""Errors raised by the secret vault."""


class VaultError(Exception):
    """Base class for vault failures."""


class SecretNotFound(VaultError):
    """No cryptogram is stored under the requested id."""


class PayloadError(VaultError):
    """Payload is oversize, has an unsupported content type, or cannot be decoded."""
