"""Reusable type definitions for the proxy."""

from .base import CamelModel, FrozenModel
from .exceptions import (
    NotFoundError,
    ProxyError,
    StoreError,
    SyncError,
    TransportError,
    UpstreamError,
)
from .hash import ZERO_HASH, Hash32
from .header import HashPair, Header
from .quantity import (
    BLOCK_TAGS,
    BlockId,
    BlockTag,
    HexQuantity,
    encode_block_id,
    encode_quantity,
    parse_block_id,
    parse_quantity,
)

__all__ = [
    # Core types
    "Hash32",
    "ZERO_HASH",
    "HashPair",
    "Header",
    "CamelModel",
    "FrozenModel",
    # Quantities
    "BLOCK_TAGS",
    "BlockId",
    "BlockTag",
    "HexQuantity",
    "encode_block_id",
    "encode_quantity",
    "parse_block_id",
    "parse_quantity",
    # Exceptions
    "ProxyError",
    "UpstreamError",
    "NotFoundError",
    "TransportError",
    "StoreError",
    "SyncError",
]
