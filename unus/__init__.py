"""
Unus - one-time secret sharing.

A sender encrypts a payload so that only the holder of a shared passphrase
can decrypt it; the stored cryptogram is destroyed once it has been read.
"""

__version__ = "0.1.0"
