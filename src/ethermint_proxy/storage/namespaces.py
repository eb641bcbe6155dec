"""
Database namespace definitions for storage tables.

Defines table names and schema constants for SQLite storage.
Each namespace represents a logical grouping of related data.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NativeToCanonicalNamespace:
    """
    Namespace for the native -> canonical direction.

    Answers "which canonical hash does this native hash correspond to?",
    needed to rewrite parent hashes in headers returned upstream.
    """

    TABLE_NAME: str = "native_to_canonical"
    """Table name for the native -> canonical direction."""

    CREATE_TABLE: str = """
        CREATE TABLE IF NOT EXISTS native_to_canonical (
            native_hash BLOB PRIMARY KEY,
            canonical_hash BLOB NOT NULL
        )
    """
    """SQL to create the native -> canonical table."""


@dataclass(frozen=True, slots=True)
class CanonicalToNativeNamespace:
    """
    Namespace for the canonical -> native direction.

    Answers "which native hash must the upstream be asked for?",
    needed to serve lookups by canonical hash.
    """

    TABLE_NAME: str = "canonical_to_native"
    """Table name for the canonical -> native direction."""

    CREATE_TABLE: str = """
        CREATE TABLE IF NOT EXISTS canonical_to_native (
            canonical_hash BLOB PRIMARY KEY,
            native_hash BLOB NOT NULL
        )
    """
    """SQL to create the canonical -> native table."""


@dataclass(frozen=True, slots=True)
class CheckpointNamespace:
    """
    Namespace for synchronization progress.

    Uses a key-value pattern with fixed keys.
    """

    TABLE_NAME: str = "checkpoints"
    """Table name for checkpoint storage."""

    KEY_HEIGHT: str = "height"
    """Key for the last synced height, stored as a decimal string."""

    CREATE_TABLE: str = """
        CREATE TABLE IF NOT EXISTS checkpoints (
            key TEXT PRIMARY KEY,
            data BLOB NOT NULL
        )
    """
    """SQL to create checkpoints table."""


# Singleton instances for convenient access
NATIVE_TO_CANONICAL = NativeToCanonicalNamespace()
CANONICAL_TO_NATIVE = CanonicalToNativeNamespace()
CHECKPOINTS = CheckpointNamespace()

ALL_NAMESPACES = [NATIVE_TO_CANONICAL, CANONICAL_TO_NATIVE, CHECKPOINTS]
"""All namespace definitions for schema initialization."""
