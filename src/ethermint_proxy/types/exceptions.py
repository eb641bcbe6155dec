"""
Exception hierarchy for the proxy.

Control flow branches on exception type, never on message text.

::

    ProxyError
    ├── UpstreamError
    │   ├── NotFoundError
    │   └── TransportError
    ├── StoreError
    └── SyncError
"""

from __future__ import annotations


class ProxyError(Exception):
    """
    Base exception for all proxy errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class UpstreamError(ProxyError):
    """Base class for failures reported by or while reaching the upstream node."""


class NotFoundError(UpstreamError):
    """
    The upstream node has no such block.

    During steady-state polling this only means the next block has not been
    produced yet.
    """


class TransportError(UpstreamError):
    """
    The upstream node could not be reached or returned an unusable answer.

    Attributes:
        code: JSON-RPC error code, when the upstream returned an error object.
    """

    def __init__(self, message: str, *, code: int | None = None) -> None:
        self.code = code
        super().__init__(message)


class StoreError(ProxyError):
    """
    A store read, write or commit failed.

    The mapping can no longer be trusted to be complete, so the synchronizer
    never continues past one of these.
    """


class SyncError(ProxyError):
    """
    The startup catch-up walk was aborted.

    Attributes:
        height: Block number whose fetch failed, or None if the head query failed.
    """

    def __init__(self, message: str, *, height: int | None = None) -> None:
        self.height = height
        super().__init__(message)
