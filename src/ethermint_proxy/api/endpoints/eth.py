"""Canonical-chain block query methods."""

from __future__ import annotations

from typing import Any

from ethermint_proxy.api.jsonrpc import INVALID_PARAMS, MethodHandler, RpcError
from ethermint_proxy.query import QueryService
from ethermint_proxy.types import BlockId, Hash32, parse_block_id


async def get_block_by_number(query: QueryService, params: list[Any]) -> dict[str, object]:
    """
    Handle `eth_getBlockByNumber(number, fullTx)`.

    Params:
        - number (string): Hex quantity or block tag ("latest", "pending", "earliest").
        - fullTx (boolean, optional): Accepted for compatibility. Only headers are returned.

    Result: Header object with `parentHash` in the canonical namespace,
        or null if the block does not exist.
    """
    block_id = _block_id_param(params)
    _full_tx_param(params)
    header = await query.get_header_by_number(block_id)
    return header.to_json()


async def get_block_by_hash(query: QueryService, params: list[Any]) -> dict[str, object]:
    """
    Handle `eth_getBlockByHash(hash, fullTx)`.

    Params:
        - hash (string): 32-byte block hash, canonical or native, 0x-prefixed hex.
        - fullTx (boolean, optional): Accepted for compatibility. Only headers are returned.

    Result: Header object with `parentHash` in the canonical namespace,
        or null if the block does not exist.
    """
    block_hash = _hash_param(params)
    _full_tx_param(params)
    header = await query.get_header_by_hash(block_hash)
    return header.to_json()


def _block_id_param(params: list[Any]) -> BlockId:
    if not params:
        raise RpcError(INVALID_PARAMS, "missing value for required argument 0")
    try:
        return parse_block_id(params[0])
    except ValueError as e:
        raise RpcError(INVALID_PARAMS, f"invalid argument 0: {e}") from e


def _hash_param(params: list[Any]) -> Hash32:
    if not params:
        raise RpcError(INVALID_PARAMS, "missing value for required argument 0")
    if not isinstance(params[0], str):
        raise RpcError(INVALID_PARAMS, "invalid argument 0: hash must be a hex string")
    try:
        return Hash32(params[0])
    except ValueError as e:
        raise RpcError(INVALID_PARAMS, f"invalid argument 0: {e}") from e


def _full_tx_param(params: list[Any]) -> bool:
    if len(params) > 2:
        raise RpcError(INVALID_PARAMS, f"too many arguments, want at most 2, got {len(params)}")
    if len(params) < 2:
        return False
    if not isinstance(params[1], bool):
        raise RpcError(INVALID_PARAMS, "invalid argument 1: fullTx must be a boolean")
    return params[1]


METHODS: dict[str, MethodHandler] = {
    "eth_getBlockByNumber": get_block_by_number,
    "eth_getBlockByHash": get_block_by_hash,
}
"""JSON-RPC methods served by the proxy."""
