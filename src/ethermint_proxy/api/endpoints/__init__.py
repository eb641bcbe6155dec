"""API endpoint handlers."""

from . import eth, health, metrics, rpc

__all__ = [
    "eth",
    "health",
    "metrics",
    "rpc",
]
