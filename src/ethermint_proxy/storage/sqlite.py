"""
SQLite database implementation for hash translation storage.

This module provides persistent storage for the translation mapping:

- Native -> canonical hashes, keyed by native hash
- Canonical -> native hashes, keyed by canonical hash
- The synchronization checkpoint (last synced height)

Hashes are stored as raw 32-byte BLOBs. The checkpoint is stored as a
decimal string so it stays readable with the sqlite3 shell.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ethermint_proxy.types import Hash32, StoreError

from .namespaces import CANONICAL_TO_NATIVE, CHECKPOINTS, NATIVE_TO_CANONICAL

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"
"""Special path selecting an in-memory database."""


class SQLiteDatabase:
    """
    SQLite implementation of the Database protocol.

    Stores the translation mapping in a single SQLite file.

    One connection is shared by the writer and all readers. A lock serializes
    access to it, and every write runs inside one explicit transaction, so a
    reader either sees a whole pair or none of it. The lock is only held for
    the duration of a single statement group, never across network calls.
    """

    def __init__(self, path: Path | str) -> None:
        """
        Initialize SQLite database.

        Creates database file and tables if they don't exist.

        Args:
            path: Path to SQLite database file.
                  Use ":memory:" for in-memory database.

        Raises:
            StoreError: If the database cannot be opened or initialized.
        """
        self._path = Path(path) if isinstance(path, str) else path
        self._lock = threading.Lock()
        self._closed = False

        in_memory = str(self._path) == MEMORY_PATH
        if not in_memory:
            self._path.parent.mkdir(parents=True, exist_ok=True)

        try:
            # isolation_level=None disables the sqlite3 module's implicit
            # transactions. Transactions are opened explicitly in _transaction().
            #
            # The check_same_thread=False flag allows the connection to be used
            # from worker threads. The lock above serializes that use.
            self._conn = sqlite3.connect(
                str(self._path),
                check_same_thread=False,
                isolation_level=None,
            )

            # Row factory enables dict-like access: row["column_name"].
            self._conn.row_factory = sqlite3.Row

            if not in_memory:
                # Write-ahead logging keeps committed data durable across a
                # crash and lets external readers proceed during a write.
                self._conn.execute("PRAGMA journal_mode=WAL")
                self._conn.execute("PRAGMA synchronous=FULL")

            self._init_schema()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to open database at {self._path}: {e}") from e

        logger.debug("Opened translation store at %s", self._path)

    def _init_schema(self) -> None:
        """Create tables if they don't exist."""
        with self._transaction() as cursor:
            # Each direction gets its own table keyed by the lookup hash.
            #
            # This gives O(1) primary-key lookups both ways without a secondary index.
            cursor.execute(NATIVE_TO_CANONICAL.CREATE_TABLE)
            cursor.execute(CANONICAL_TO_NATIVE.CREATE_TABLE)

            # Checkpoints use a key-value pattern for singleton values.
            cursor.execute(CHECKPOINTS.CREATE_TABLE)

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Cursor]:
        """
        Run a group of statements as one transaction.

        Commits on normal exit. Rolls back on any exception and re-raises it.
        """
        cursor = self._conn.cursor()

        # IMMEDIATE takes the write lock up front.
        #
        # A writer that would only fail at COMMIT time fails here instead,
        # before any statement has run.
        cursor.execute("BEGIN IMMEDIATE")
        try:
            yield cursor
        except BaseException:
            # Some failures (RAISE(ROLLBACK), disk I/O) already ended the transaction.
            if self._conn.in_transaction:
                cursor.execute("ROLLBACK")
            raise
        else:
            cursor.execute("COMMIT")
        finally:
            cursor.close()

    def _check_open(self) -> None:
        if self._closed:
            raise StoreError("Database is closed")

    # -------------------------------------------------------------------------
    # Translation Operations
    # -------------------------------------------------------------------------

    def put_translation(self, number: int, native_hash: Hash32, canonical_hash: Hash32) -> bool:
        """Atomically record both directions of a hash pair."""
        with self._lock:
            self._check_open()
            try:
                with self._transaction() as cursor:
                    # INSERT OR REPLACE makes re-driven writes idempotent.
                    #
                    # Without reorgs, a hash always maps to the same counterpart,
                    # so replacing a row rewrites identical data.
                    cursor.execute(
                        f"""
                        INSERT OR REPLACE INTO {NATIVE_TO_CANONICAL.TABLE_NAME}
                            (native_hash, canonical_hash)
                        VALUES (?, ?)
                        """,
                        (bytes(native_hash), bytes(canonical_hash)),
                    )
                    cursor.execute(
                        f"""
                        INSERT OR REPLACE INTO {CANONICAL_TO_NATIVE.TABLE_NAME}
                            (canonical_hash, native_hash)
                        VALUES (?, ?)
                        """,
                        (bytes(canonical_hash), bytes(native_hash)),
                    )

                    # Advance the checkpoint only when this block extends the
                    # contiguous prefix. Out-of-order writes keep their pair
                    # but leave the checkpoint where it is.
                    current = self._read_checkpoint(cursor)
                    expected = 0 if current is None else current + 1
                    if number != expected:
                        logger.debug(
                            "Stored pair for block %d without advancing checkpoint %s",
                            number,
                            current,
                        )
                        return False

                    cursor.execute(
                        f"""
                        INSERT OR REPLACE INTO {CHECKPOINTS.TABLE_NAME} (key, data)
                        VALUES (?, ?)
                        """,
                        (CHECKPOINTS.KEY_HEIGHT, str(number).encode("ascii")),
                    )
                    return True
            except sqlite3.Error as e:
                raise StoreError(f"Failed to commit translation for block {number}: {e}") from e

    def get_canonical(self, native_hash: Hash32) -> Hash32 | None:
        """Retrieve the canonical hash recorded for a native hash."""
        row = self._fetch_one(
            f"SELECT canonical_hash FROM {NATIVE_TO_CANONICAL.TABLE_NAME} WHERE native_hash = ?",
            (bytes(native_hash),),
        )
        if row is None:
            return None
        return Hash32(row["canonical_hash"])

    def get_native(self, canonical_hash: Hash32) -> Hash32 | None:
        """Retrieve the native hash recorded for a canonical hash."""
        row = self._fetch_one(
            f"SELECT native_hash FROM {CANONICAL_TO_NATIVE.TABLE_NAME} WHERE canonical_hash = ?",
            (bytes(canonical_hash),),
        )
        if row is None:
            return None
        return Hash32(row["native_hash"])

    # -------------------------------------------------------------------------
    # Checkpoint Operations
    # -------------------------------------------------------------------------

    def get_checkpoint(self) -> int | None:
        """Retrieve the last synced height."""
        with self._lock:
            self._check_open()
            try:
                cursor = self._conn.cursor()
                try:
                    return self._read_checkpoint(cursor)
                finally:
                    cursor.close()
            except sqlite3.Error as e:
                raise StoreError(f"Failed to read checkpoint: {e}") from e

    @staticmethod
    def _read_checkpoint(cursor: sqlite3.Cursor) -> int | None:
        cursor.execute(
            f"SELECT data FROM {CHECKPOINTS.TABLE_NAME} WHERE key = ?",
            (CHECKPOINTS.KEY_HEIGHT,),
        )
        row = cursor.fetchone()
        if row is None:
            return None

        raw = bytes(row["data"])
        try:
            return int(raw.decode("ascii"))
        except (UnicodeDecodeError, ValueError) as e:
            raise StoreError(f"Corrupt checkpoint value: {raw!r}") from e

    def _fetch_one(self, query: str, params: tuple[object, ...]) -> sqlite3.Row | None:
        """Run a single-row read under the connection lock."""
        with self._lock:
            self._check_open()
            try:
                cursor = self._conn.cursor()
                try:
                    cursor.execute(query, params)
                    return cursor.fetchone()
                finally:
                    cursor.close()
            except sqlite3.Error as e:
                raise StoreError(f"Failed to read translation: {e}") from e

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def path(self) -> Path:
        """Location of the database file."""
        return self._path

    @property
    def is_closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    def close(self) -> None:
        """
        Close database connection.

        Waits for any in-flight transaction to finish first. Safe to call twice.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._conn.close()
        logger.debug("Closed translation store at %s", self._path)

    def __enter__(self) -> SQLiteDatabase:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
