"""
Synchronizer configuration constants.

Operational parameters for synchronization: poll cadence, timeouts, and logging.
"""

from __future__ import annotations

from typing import Final

POLL_INTERVAL: Final[float] = 4.0
"""Seconds between steady-state polls. Roughly one block interval upstream."""

REQUEST_TIMEOUT: Final[float] = 10.0
"""Timeout for individual upstream requests in seconds."""

PROGRESS_LOG_EVERY: Final[int] = 100
"""Catch-up logs a progress line after this many committed blocks."""
