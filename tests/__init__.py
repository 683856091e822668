# Unus Test Suite
"""
Test suite including:
- Unit tests (curve arithmetic, ECIES components)
- Security tests (tampering, wrong keys, malformed input)
- Integration tests (vault end to end)

Run with: pytest
"""
