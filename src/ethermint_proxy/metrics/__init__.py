"""
Metrics module for observability.

Provides counters, gauges, and histograms for tracking synchronization and
query traffic. Exposes metrics in Prometheus text format.
"""

from .registry import (
    REGISTRY,
    blocks_synced,
    generate_metrics,
    poll_errors,
    rpc_request_time,
    rpc_requests,
    synced_height,
    translation_lookups,
)

__all__ = [
    "REGISTRY",
    "blocks_synced",
    "generate_metrics",
    "poll_errors",
    "rpc_request_time",
    "rpc_requests",
    "synced_height",
    "translation_lookups",
]
