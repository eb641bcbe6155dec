"""
JSON-RPC quantities and block selectors.

Canonical-chain JSON-RPC encodes integers as `0x`-prefixed hex strings
without leading zeros ("quantities"). Block-number parameters additionally
accept a small set of named tags.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Final, Literal, TypeAlias, get_args

from pydantic import BeforeValidator, PlainSerializer

BlockTag: TypeAlias = Literal["latest", "pending", "earliest"]
"""Named block selectors understood by the upstream node."""

BLOCK_TAGS: Final[frozenset[str]] = frozenset(get_args(BlockTag))
"""All accepted block tags."""

BlockId: TypeAlias = int | BlockTag
"""A block selector: either an explicit number or a tag."""

_HEX_QUANTITY = re.compile(r"0[xX][0-9a-fA-F]+")
_DECIMAL = re.compile(r"[0-9]+")


def parse_quantity(value: Any) -> int:
    """
    Parse a JSON-RPC quantity.

    Accepts a non-negative int or a `0x`-prefixed hex string.

    Raises:
        ValueError: If the value is not a valid non-negative quantity.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid quantity: {value!r}")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and _HEX_QUANTITY.fullmatch(value):
        number = int(value[2:], 16)
    else:
        raise ValueError(f"Invalid quantity: {value!r}")
    if number < 0:
        raise ValueError(f"Quantity must be non-negative, got {number}")
    return number


def encode_quantity(value: int) -> str:
    """Render an integer as a minimal `0x` quantity."""
    return hex(value)


HexQuantity = Annotated[
    int,
    BeforeValidator(parse_quantity),
    PlainSerializer(encode_quantity, return_type=str),
]
"""Integer field that reads and writes JSON-RPC quantities."""


def parse_block_id(value: Any) -> BlockId:
    """
    Parse a block selector from a request parameter.

    Accepts an int, a hex quantity, a decimal string, or a block tag.

    Raises:
        ValueError: If the value cannot be interpreted as a block selector.
    """
    if isinstance(value, str):
        if value in BLOCK_TAGS:
            return value  # type: ignore[return-value]
        if _DECIMAL.fullmatch(value):
            return int(value)
    return parse_quantity(value)


def encode_block_id(block_id: BlockId) -> str:
    """Render a block selector as a JSON-RPC parameter."""
    if isinstance(block_id, str):
        return block_id
    return encode_quantity(block_id)
