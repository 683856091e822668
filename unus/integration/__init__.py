# Integration Module
"""
Audit logging for vault activity.

Events carry secret ids only; passphrases and plaintext are never logged.
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues."""
    from . import event_logger
    return getattr(event_logger, name)

__all__ = [
    'EventType',
    'SecurityEvent',
    'EventLogger',
    'create_event_logger',
]
