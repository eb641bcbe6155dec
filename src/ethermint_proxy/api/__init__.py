"""
API server module for canonical-chain clients.

Provides HTTP endpoints for:
- / - JSON-RPC 2.0 header queries in the canonical hash namespace
- /health - Health check endpoint
- /metrics - Prometheus metrics endpoint
"""

from .server import MAX_BODY_SIZE, ApiServer, ApiServerConfig

__all__ = [
    "MAX_BODY_SIZE",
    "ApiServer",
    "ApiServerConfig",
]
