# ECIES Module
"""
Elliptic-Curve Integrated Encryption Scheme over NIST P-256:
- ECDH key agreement (SHA-256 of the shared point)
- PBKDF2-HMAC-SHA256 key derivation (310,000 iterations)
- AES-256-CBC with PKCS#7 padding
- HMAC-SHA256 encrypt-then-MAC

Cryptogram format: [sender_pub (33) | tag (32) | aes_salt (16) | hmac_salt (16) | iv (16) | ciphertext]

Security features:
- Tag verified before any decryption work
- Independent cipher and MAC keys from separate salts
- Fresh salts and IV per message
- Curve validation at construction and again at agreement
"""

from .errors import (
    EciesError,
    InvalidKeyLength,
    InvalidKey,
    KeyAgreementFailed,
    TruncatedCryptogram,
    AuthenticationFailed,
    EntropyFailure,
)
from .keys import (
    CURVE,
    PublicKey,
    PrivateKey,
    generate,
    from_bytes,
    compress,
    decompress,
    agree,
)
from .kdf import KDF, KDFParameters, derive
from .cryptogram import Cryptogram
from .symmetric import read_entropy
from .protocol import encrypt, encrypt_ephemeral, decrypt

__all__ = [
    'EciesError',
    'InvalidKeyLength',
    'InvalidKey',
    'KeyAgreementFailed',
    'TruncatedCryptogram',
    'AuthenticationFailed',
    'EntropyFailure',
    'CURVE',
    'PublicKey',
    'PrivateKey',
    'generate',
    'from_bytes',
    'compress',
    'decompress',
    'agree',
    'KDF',
    'KDFParameters',
    'derive',
    'Cryptogram',
    'read_entropy',
    'encrypt',
    'encrypt_ephemeral',
    'decrypt',
]
