"""
Storage module for the persistent hash translation mapping.

Provides a database abstraction and the translation store built on it.
Uses SQLite for simplicity and correctness.
"""

from .database import Database
from .namespaces import (
    CanonicalToNativeNamespace,
    CheckpointNamespace,
    NativeToCanonicalNamespace,
)
from .sqlite import SQLiteDatabase
from .translation import HashTranslationStore

__all__ = [
    "Database",
    "SQLiteDatabase",
    "HashTranslationStore",
    "NativeToCanonicalNamespace",
    "CanonicalToNativeNamespace",
    "CheckpointNamespace",
]
