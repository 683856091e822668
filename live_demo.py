#!/usr/bin/env python
"""
╔══════════════════════════════════════════════════════════════════════════════╗
║                            UNUS LIVE DEMO                                    ║
║                   One-Time Secret Sharing over ECIES                         ║
╚══════════════════════════════════════════════════════════════════════════════╝

Walks through:
- Deriving a receiver key from a passphrase
- Encrypting with an ephemeral sender key
- The cryptogram layout
- Tamper and wrong-passphrase rejection
- Sealing and opening a secret exactly once
"""

import tempfile
import os

from unus import config
from unus.ecies import AuthenticationFailed, Cryptogram, decrypt, encrypt_ephemeral, from_bytes
from unus.integration.event_logger import EventLogger
from unus.vault import SecretNotFound, SecretPayload, SecretVault, SQLiteStore


PASSPHRASE = b"01234567890123456789012345678901"
WRONG_PASSPHRASE = b"11234567890123456789012345678901"


def print_header(title):
    """Print a formatted section header"""
    print("\n" + "═" * 70)
    print(f"  {title}")
    print("═" * 70)


def print_step(step_num, description):
    """Print a numbered step"""
    print(f"\n  [{step_num}] {description}")


def pause(message="Press ENTER to continue..."):
    """Pause for presenter to explain"""
    print(f"\n  [PAUSE] {message}")
    input()


def main():
    config.configure_logging()

    print("\n" * 2)
    print("╔" + "═" * 68 + "╗")
    print("║" + "UNUS - ONE-TIME SECRET SHARING".center(68) + "║")
    print("╚" + "═" * 68 + "╝")

    pause("Press ENTER to begin the demonstration...")

    print_header("PART 1: ECIES")

    print_step("1.1", "Receiver Key from Passphrase")
    receiver = from_bytes(PASSPHRASE)
    print(f"  Passphrase length: {len(PASSPHRASE)} bytes")
    print(f"  Compressed public key: {receiver.public_key.compress().hex()}")
    pause()

    print_step("1.2", "Encrypting with an Ephemeral Sender Key")
    plaintext = b'{"ContentType":"text/plain","Secret":"hi"}'
    blob = encrypt_ephemeral(receiver.public_key, plaintext)
    cryptogram = Cryptogram.from_bytes(blob)
    print(f"  Plaintext:  {len(plaintext)} bytes")
    print(f"  Cryptogram: {len(blob)} bytes")
    print(f"  - Sender key: {cryptogram.sender_public_key.hex()[:32]}...")
    print(f"  - HMAC tag:   {cryptogram.tag.hex()[:32]}...")
    print(f"  - AES salt:   {cryptogram.aes_salt.hex()}")
    print(f"  - HMAC salt:  {cryptogram.hmac_salt.hex()}")
    print(f"  - IV:         {cryptogram.iv.hex()}")
    print(f"  - Ciphertext: {len(cryptogram.ciphertext)} bytes")
    pause()

    print_step("1.3", "Decrypting")
    print(f"  Recovered: {decrypt(from_bytes(PASSPHRASE), blob).decode()}")

    print_step("1.4", "Wrong Passphrase and Tampering")
    try:
        decrypt(from_bytes(WRONG_PASSPHRASE), blob)
    except AuthenticationFailed as e:
        print(f"  [X] Wrong passphrase rejected: {e}")

    tampered = bytearray(blob)
    tampered[-1] ^= 1
    try:
        decrypt(receiver, bytes(tampered))
    except AuthenticationFailed as e:
        print(f"  [X] Tampered ciphertext rejected: {e}")
    pause()

    print_header("PART 2: SECRET VAULT")

    events = EventLogger()
    with tempfile.TemporaryDirectory() as tmp:
        with SQLiteStore(os.path.join(tmp, "demo.db")) as store:
            vault = SecretVault(store, events=events)

            print_step("2.1", "Sealing a Secret")
            secret_id = vault.seal(SecretPayload("text/plain", b"launch code 0000"), PASSPHRASE)
            print(f"  Secret id: {secret_id}")

            print_step("2.2", "Opening with the Wrong Passphrase")
            try:
                vault.open(secret_id, WRONG_PASSPHRASE)
            except AuthenticationFailed:
                print("  [X] Rejected; the secret is still stored")

            print_step("2.3", "Opening with the Right Passphrase")
            payload = vault.open(secret_id, PASSPHRASE)
            print(f"  [OK] {payload.content_type}: {payload.secret.decode()}")

            print_step("2.4", "Opening Again")
            try:
                vault.open(secret_id, PASSPHRASE)
            except SecretNotFound:
                print("  [X] Secret already destroyed")
    pause()

    print_header("PART 3: AUDIT TRAIL")
    for event in events.get_all_events():
        print(f"  {event}")

    print("\n\n" + "═" * 70)
    print("  DEMONSTRATION COMPLETE!")
    print("═" * 70)


if __name__ == "__main__":
    main()
