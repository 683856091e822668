"""
Cryptogram Storage

Opaque ciphertext blobs keyed by integer id. Backends:
- MemoryStore: dict guarded by a lock (tests, single process)
- SQLiteStore: single-table SQLite database
"""

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from typing import Dict

from .errors import SecretNotFound


logger = logging.getLogger(__name__)

CREATE_STORAGE = """
    CREATE TABLE IF NOT EXISTS secrets (
        id INTEGER NOT NULL PRIMARY KEY,
        data BLOB NOT NULL)"""
INSERT_CRYPTOGRAM = "INSERT INTO secrets (id, data) VALUES (?, ?)"
SELECT_CRYPTOGRAM = "SELECT data FROM secrets WHERE id = (?) LIMIT 1"
DELETE_CRYPTOGRAM = "DELETE FROM secrets WHERE id = (?)"


class CryptogramStore(ABC):
    """Interface the vault needs from persistence."""

    @abstractmethod
    def insert(self, secret_id: int, cryptogram: bytes) -> int:
        """Store a cryptogram and return its id."""

    @abstractmethod
    def select(self, secret_id: int) -> bytes:
        """
        Fetch a cryptogram.

        Raises:
            SecretNotFound: If nothing is stored under secret_id
        """

    @abstractmethod
    def delete(self, secret_id: int) -> bool:
        """Delete a cryptogram; returns True if one was removed."""

    def close(self) -> None:
        """Release resources held by the store."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class MemoryStore(CryptogramStore):
    """In-process store."""

    def __init__(self):
        self._data: Dict[int, bytes] = {}
        self._lock = threading.Lock()

    def insert(self, secret_id: int, cryptogram: bytes) -> int:
        with self._lock:
            if secret_id in self._data:
                raise ValueError(f"id {secret_id} already in use")
            self._data[secret_id] = bytes(cryptogram)
        return secret_id

    def select(self, secret_id: int) -> bytes:
        with self._lock:
            try:
                return self._data[secret_id]
            except KeyError:
                raise SecretNotFound("secret not found") from None

    def delete(self, secret_id: int) -> bool:
        with self._lock:
            return self._data.pop(secret_id, None) is not None

    def __len__(self) -> int:
        return len(self._data)


class SQLiteStore(CryptogramStore):
    """
    SQLite-backed store.

    Creates the secrets table on first connect. Each write runs in its own
    transaction.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._lock = threading.Lock()
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.execute(CREATE_STORAGE)
        self.conn.commit()
        logger.info(f"Cryptogram store opened at {db_path}")

    def insert(self, secret_id: int, cryptogram: bytes) -> int:
        with self._lock, self.conn:
            try:
                self.conn.execute(INSERT_CRYPTOGRAM, (secret_id, sqlite3.Binary(cryptogram)))
            except sqlite3.IntegrityError as e:
                raise ValueError(f"id {secret_id} already in use") from e
        return secret_id

    def select(self, secret_id: int) -> bytes:
        with self._lock:
            row = self.conn.execute(SELECT_CRYPTOGRAM, (secret_id,)).fetchone()
        if row is None:
            raise SecretNotFound("secret not found")
        return bytes(row[0])

    def delete(self, secret_id: int) -> bool:
        with self._lock, self.conn:
            cursor = self.conn.execute(DELETE_CRYPTOGRAM, (secret_id,))
        return cursor.rowcount > 0

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None
            logger.info(f"Cryptogram store at {self.db_path} closed")
