"""
Event Logger Module

Audit trail for vault activity. Every security-relevant action is recorded
as a SecurityEvent, kept in memory, handed to registered callbacks, and
forwarded to the standard logging system.

Features:
- Seal / open events keyed by secret id
- Failed decryption attempts (without distinguishing the cause)
- Lookups of unknown or already-destroyed secrets
- JSON export/import of the trail

Passphrases, keys and plaintext are never recorded.
"""

import json
import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

EVENT_VERSION = "1.0"
NODE_NAME = "unus"


# ============================================================================
# Event Types
# ============================================================================

class EventType(Enum):
    """Types of security events that can be logged."""

    # Vault events
    SECRET_SEALED = "secret_sealed"
    SECRET_OPENED = "secret_opened"
    SECRET_NOT_FOUND = "secret_not_found"
    DECRYPT_FAILED = "decrypt_failed"

    # System events
    SYSTEM_START = "system_start"


# Events that indicate a possible attack or misuse
WARNING_EVENTS = frozenset({EventType.SECRET_NOT_FOUND, EventType.DECRYPT_FAILED})


# ============================================================================
# Event Structure
# ============================================================================

@dataclass
class SecurityEvent:
    """Represents a security event in the audit trail."""
    event_type: EventType
    timestamp: int  # Unix timestamp
    secret_id: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': EVENT_VERSION,
            'type': self.event_type.value,
            'secret_id': self.secret_id,
            'time': self.timestamp,
            'details': self.details,
        }

    def to_json(self) -> str:
        """Compact JSON representation."""
        return json.dumps(self.to_dict(), separators=(',', ':'))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SecurityEvent':
        return cls(
            event_type=EventType(data['type']),
            timestamp=data['time'],
            secret_id=data.get('secret_id'),
            details=data.get('details', {}),
        )

    def __str__(self) -> str:
        dt = datetime.fromtimestamp(self.timestamp, tz=timezone.utc)
        target = f"secret:{self.secret_id}" if self.secret_id is not None else "system"
        return f"[{dt.strftime('%Y-%m-%d %H:%M:%S')}] {self.event_type.value} | {target}"


# ============================================================================
# Event Logger
# ============================================================================

class EventLogger:
    """
    In-memory security audit trail.

    Example:
        >>> events = EventLogger()
        >>> events.log_sealed(42, size=128)
        >>> events.get_events_by_type(EventType.SECRET_SEALED)[0].secret_id
        42
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        """
        Initialize the event logger.

        Args:
            clock: Source of Unix timestamps
        """
        self._clock = clock
        self._events: List[SecurityEvent] = []
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[SecurityEvent], None]] = []

        self._add_event(EventType.SYSTEM_START, details={'node': NODE_NAME})

    def _add_event(self, event_type: EventType, secret_id: Optional[int] = None,
                   details: Optional[Dict[str, Any]] = None) -> SecurityEvent:
        """Record an event and notify listeners."""
        event = SecurityEvent(
            event_type=event_type,
            timestamp=int(self._clock()),
            secret_id=secret_id,
            details=details or {},
        )

        with self._lock:
            self._events.append(event)
            callbacks = list(self._callbacks)

        level = logging.WARNING if event_type in WARNING_EVENTS else logging.INFO
        logger.log(level, f"Security event: {event.to_json()}")

        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                # Listeners must not break auditing
                logger.exception(f"Event callback {callback!r} failed")

        return event

    def add_callback(self, callback: Callable[[SecurityEvent], None]) -> None:
        """Add a callback to be notified of new events."""
        with self._lock:
            self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[SecurityEvent], None]) -> None:
        """Remove a callback."""
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    # ========================================================================
    # Vault Events
    # ========================================================================

    def log_sealed(self, secret_id: int, size: int,
                   content_type: Optional[str] = None) -> SecurityEvent:
        """
        Log a newly stored secret.

        Args:
            secret_id: Storage id of the cryptogram
            size: Cryptogram size in bytes
            content_type: Declared content type of the secret
        """
        details = {'size': size}
        if content_type:
            details['content_type'] = content_type
        return self._add_event(EventType.SECRET_SEALED, secret_id, details)

    def log_opened(self, secret_id: int) -> SecurityEvent:
        """Log a secret that was read and destroyed."""
        return self._add_event(EventType.SECRET_OPENED, secret_id)

    def log_not_found(self, secret_id: int) -> SecurityEvent:
        """Log a lookup of an unknown or already-opened secret."""
        return self._add_event(EventType.SECRET_NOT_FOUND, secret_id)

    def log_decrypt_failed(self, secret_id: int) -> SecurityEvent:
        """Log a failed decryption (wrong passphrase or tampering)."""
        return self._add_event(EventType.DECRYPT_FAILED, secret_id)

    # ========================================================================
    # Queries
    # ========================================================================

    def get_all_events(self) -> List[SecurityEvent]:
        with self._lock:
            return list(self._events)

    def get_events_by_type(self, event_type: EventType) -> List[SecurityEvent]:
        return [e for e in self.get_all_events() if e.event_type == event_type]

    def get_secret_events(self, secret_id: int) -> List[SecurityEvent]:
        """All events concerning one secret, oldest first."""
        return [e for e in self.get_all_events() if e.secret_id == secret_id]

    def get_recent_events(self, count: int = 10) -> List[SecurityEvent]:
        return self.get_all_events()[-count:]

    def export_log(self) -> str:
        """Export the full trail as a JSON array."""
        return json.dumps([e.to_dict() for e in self.get_all_events()])

    @staticmethod
    def import_log(json_str: str) -> List[SecurityEvent]:
        """Parse a trail produced by export_log()."""
        return [SecurityEvent.from_dict(d) for d in json.loads(json_str)]


def create_event_logger() -> EventLogger:
    """Create a new event logger."""
    return EventLogger()
