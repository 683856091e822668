"""
Unus - Main Entry Point
One-time secret sharing over ECIES (P-256, PBKDF2, AES-256-CBC, HMAC-SHA256).
"""

from . import config
from .vault import MemoryStore, SecretPayload, SecretVault


DEMO_PASSPHRASE = "correct-horse-battery-staple-demo"


def main():
    """Main entry point for Unus."""
    config.configure_logging()

    print("=" * 50)
    print("Welcome to Unus")
    print("=" * 50)
    print("\nAvailable modules:")
    print("  - Core Crypto (P-256 arithmetic)")
    print("  - ECIES (keys, KDF, AES-CBC, HMAC, cryptogram codec)")
    print("  - Vault (seal once, open once)")
    print("  - Integration (audit events)")

    vault = SecretVault(MemoryStore())
    secret_id = vault.seal(SecretPayload("text/plain", b"hello, world"), DEMO_PASSPHRASE)
    payload = vault.open(secret_id, DEMO_PASSPHRASE)

    print(f"\nSelf-check: sealed and opened secret {secret_id}: {payload.secret!r}")
    print("\n")


if __name__ == "__main__":
    main()
