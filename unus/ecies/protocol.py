"""
ECIES Protocol

Composes key agreement, PBKDF2, AES-256-CBC and HMAC-SHA256 into:
- encrypt(sender_private_key, receiver_public_key, plaintext)
- encrypt_ephemeral(receiver_public_key, plaintext)
- decrypt(receiver_private_key, cryptogram)

Encryption flow:
1. ECDH agreement -> shared secret
2. Random AES salt -> cipher key -> AES-CBC encrypt (random IV)
3. Random HMAC salt -> MAC key -> tag over ciphertext
4. Compress sender public key, encode cryptogram

Decryption derives and checks the MAC key BEFORE the cipher key is
computed; no decryption work happens on unauthenticated input. An
unusable sender key is rejected only after the MAC-key derivation.

Every call is stateless and derives fresh keys; nothing is cached.
"""

import logging

from .cryptogram import Cryptogram
from .errors import AuthenticationFailed, InvalidKey, KeyAgreementFailed
from .kdf import KDF, SALT_SIZE, protocol_parameters
from .keys import CURVE, SHARED_SECRET_SIZE, PrivateKey, PublicKey
from .mac import compute_tag, verify_tag
from .symmetric import BLOCK_SIZE, EntropySource, aes_decrypt, aes_encrypt, draw, read_entropy


logger = logging.getLogger(__name__)

_AUTH_FAILED = "invalid key or cryptogram"


def encrypt(sender_private_key: PrivateKey,
            receiver_public_key: PublicKey,
            plaintext: bytes,
            entropy: EntropySource = read_entropy) -> bytes:
    """
    ECIES-encrypt plaintext from sender to receiver.

    Args:
        sender_private_key: Sender's key; its public half travels in
            the cryptogram
        receiver_public_key: Receiver's public key
        plaintext: Message to encrypt (any length)
        entropy: Random source for salts and IV

    Returns:
        Serialized cryptogram

    Raises:
        KeyAgreementFailed: If either key fails validation
        EntropyFailure: If the random source fails
    """
    shared_secret = sender_private_key.agree(receiver_public_key)
    kdf = KDF(protocol_parameters(shared_secret))

    aes_salt = draw(entropy, SALT_SIZE)
    aes_key = kdf.derive(aes_salt)
    ciphertext, iv = aes_encrypt(aes_key, plaintext, entropy)

    hmac_salt = draw(entropy, SALT_SIZE)
    mac_key = kdf.derive(hmac_salt)
    tag = compute_tag(mac_key, ciphertext)

    cryptogram = Cryptogram(
        sender_public_key=sender_private_key.compress(),
        tag=tag,
        aes_salt=aes_salt,
        hmac_salt=hmac_salt,
        iv=iv,
        ciphertext=ciphertext,
    )

    data = cryptogram.to_bytes()
    logger.debug(f"Encrypted {len(plaintext)} bytes into {len(data)}-byte cryptogram")
    return data


def encrypt_ephemeral(receiver_public_key: PublicKey,
                      plaintext: bytes,
                      entropy: EntropySource = read_entropy) -> bytes:
    """
    ECIES-encrypt using a freshly generated sender key pair.

    Only the ephemeral public key is kept (inside the cryptogram); the
    ephemeral private key is discarded when this call returns.

    The ephemeral key always comes from the library CSPRNG; entropy is
    used for the salts and IV only.
    """
    if isinstance(receiver_public_key, PublicKey):
        curve = receiver_public_key.curve
    else:
        curve = CURVE
    ephemeral_key = PrivateKey.generate(curve)
    return encrypt(ephemeral_key, receiver_public_key, plaintext, entropy)


def decrypt(receiver_private_key: PrivateKey, data: bytes) -> bytes:
    """
    Verify and decrypt a serialized cryptogram.

    Decompression, agreement and tag failures all raise the same
    AuthenticationFailed so the failing stage is not revealed. A sender
    key that fails decompression or agreement still costs one MAC-key
    derivation, so it takes as long to reject as a bad tag.

    Args:
        receiver_private_key: Receiver's private key
        data: Serialized cryptogram

    Returns:
        Original plaintext

    Raises:
        TruncatedCryptogram: If data is shorter than the fixed prefix
        AuthenticationFailed: On tampering, wrong key or malformed content
    """
    cryptogram = Cryptogram.from_bytes(data)

    # Reject impossible ciphertext lengths before any key work
    if not cryptogram.ciphertext or len(cryptogram.ciphertext) % BLOCK_SIZE:
        logger.warning("Cryptogram rejected: authentication failed")
        raise AuthenticationFailed(_AUTH_FAILED)

    try:
        sender_public_key = PublicKey.decompress(
            receiver_private_key.curve, cryptogram.sender_public_key
        )
        shared_secret = receiver_private_key.agree(sender_public_key)
        key_rejected = False
    except (InvalidKey, KeyAgreementFailed):
        shared_secret = bytes(SHARED_SECRET_SIZE)
        key_rejected = True

    kdf = KDF(protocol_parameters(shared_secret))

    # STEP 1: Verify tag BEFORE deriving the cipher key
    mac_key = kdf.derive(cryptogram.hmac_salt)
    expected_tag = compute_tag(mac_key, cryptogram.ciphertext)
    if not verify_tag(expected_tag, cryptogram.tag) or key_rejected:
        logger.warning("Cryptogram rejected: authentication failed")
        raise AuthenticationFailed(_AUTH_FAILED) from None

    # STEP 2: Now decrypt (integrity verified)
    aes_key = kdf.derive(cryptogram.aes_salt)
    try:
        plaintext = aes_decrypt(aes_key, cryptogram.iv, cryptogram.ciphertext)
    except ValueError:
        logger.warning("Cryptogram rejected: authentication failed")
        raise AuthenticationFailed(_AUTH_FAILED) from None

    logger.debug(f"Decrypted {len(data)}-byte cryptogram into {len(plaintext)} bytes")
    return plaintext
