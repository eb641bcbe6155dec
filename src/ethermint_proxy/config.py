"""
Process-wide configuration for the ethermint proxy.

Each setting can be overridden through an environment variable. Values are
read once, at import. Command-line flags take precedence over both.
"""

import os
from typing import Final

from ethermint_proxy.sync.config import POLL_INTERVAL as _SYNC_POLL_INTERVAL
from ethermint_proxy.sync.config import REQUEST_TIMEOUT as _SYNC_REQUEST_TIMEOUT

DEFAULT_UPSTREAM_URL: Final = "http://ethermint0:8545"
"""JSON-RPC endpoint of the upstream node inside the devnet."""

DEFAULT_DATABASE_PATH: Final = "proxy.db"
"""SQLite file holding the translation mapping."""

DEFAULT_PORT: Final = 8080
"""Port the JSON-RPC front end listens on."""

DEFAULT_POLL_INTERVAL: Final = _SYNC_POLL_INTERVAL
"""Seconds between steady-state polls."""

DEFAULT_REQUEST_TIMEOUT: Final = _SYNC_REQUEST_TIMEOUT
"""Per-request timeout for upstream calls, in seconds."""


def _env_positive_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"Invalid {name} environment variable: '{raw}'") from None
    if value <= 0:
        raise ValueError(f"Invalid {name} environment variable: '{raw}' must be positive")
    return value


def _env_port(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"Invalid {name} environment variable: '{raw}'") from None
    if not 0 < value < 65536:
        raise ValueError(f"Invalid {name} environment variable: '{raw}' is not a TCP port")
    return value


UPSTREAM_URL = os.environ.get("PROXY_UPSTREAM_URL", DEFAULT_UPSTREAM_URL)
"""Upstream JSON-RPC endpoint."""

DATABASE_PATH = os.environ.get("PROXY_DATABASE_PATH", DEFAULT_DATABASE_PATH)
"""Translation store location. Use ":memory:" for a throwaway store."""

PORT = _env_port("PROXY_PORT", DEFAULT_PORT)
"""JSON-RPC listen port."""

POLL_INTERVAL = _env_positive_float("PROXY_POLL_INTERVAL", DEFAULT_POLL_INTERVAL)
"""Steady-state poll interval in seconds."""

REQUEST_TIMEOUT = _env_positive_float("PROXY_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)
"""Upstream request timeout in seconds."""
