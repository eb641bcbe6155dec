"""
Synchronizer for the hash translation mapping.

What Is Sync?
-------------
The proxy can only translate hashes it has recorded. Sync is the process of
walking the upstream chain and recording each block's native/canonical pair,
first in bulk at startup, then one block at a time as new blocks appear.
"""

from __future__ import annotations

__all__ = [
    # Main service
    "SyncService",
    "SyncProgress",
    # States
    "SyncState",
    # Configuration constants
    "POLL_INTERVAL",
    "REQUEST_TIMEOUT",
    "PROGRESS_LOG_EVERY",
]

from .config import POLL_INTERVAL, PROGRESS_LOG_EVERY, REQUEST_TIMEOUT
from .service import SyncProgress, SyncService
from .states import SyncState
