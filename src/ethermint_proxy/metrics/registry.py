"""
Metric registry using prometheus_client.

Provides pre-defined metrics for the proxy.
Exposes metrics in Prometheus text format via the /metrics endpoint.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Create a dedicated registry for proxy metrics.
#
# Using a dedicated registry avoids pollution from default Python process metrics.
REGISTRY = CollectorRegistry()

# -----------------------------------------------------------------------------
# Synchronization
# -----------------------------------------------------------------------------

synced_height = Gauge(
    "proxy_synced_height",
    "Highest block number whose translation pair is committed",
    registry=REGISTRY,
)

blocks_synced = Counter(
    "proxy_blocks_synced_total",
    "Translation pairs committed by this process",
    registry=REGISTRY,
)

poll_errors = Counter(
    "proxy_poll_errors_total",
    "Steady-state polls that failed with an upstream error",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Translation
# -----------------------------------------------------------------------------

translation_lookups = Counter(
    "proxy_translation_lookups_total",
    "Hash translation lookups",
    ["direction", "result"],
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# RPC Front Door
# -----------------------------------------------------------------------------

rpc_requests = Counter(
    "proxy_rpc_requests_total",
    "JSON-RPC calls served",
    ["method"],
    registry=REGISTRY,
)

rpc_request_time = Histogram(
    "proxy_rpc_request_seconds",
    "JSON-RPC call duration",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Prometheus text format output as bytes.
    """
    return generate_latest(REGISTRY)
