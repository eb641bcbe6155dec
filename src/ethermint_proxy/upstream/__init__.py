"""
Client for the upstream chain node.

The only component that talks to the network on the read side of the proxy.
"""

from .client import DEFAULT_TIMEOUT, UpstreamChain, UpstreamClient

__all__ = [
    "DEFAULT_TIMEOUT",
    "UpstreamChain",
    "UpstreamClient",
]
