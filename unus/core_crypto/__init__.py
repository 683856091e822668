# Core Cryptography Module
"""
Hand-built cryptographic arithmetic:
- NIST P-256 field and point operations
"""
