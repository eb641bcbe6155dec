"""
JSON-RPC client for the upstream chain node.

The upstream node is the source of truth for block data. It already serves
both identifiers of a block: `eth_getBlockByNumber` returns the canonical
hash in `hash` and the native hash in `tm_hash`. Headers fetched from it
still link to their parent by native hash.

Failure model:

- A `null` result means the block does not exist (yet): NotFoundError
- Anything else that prevents a usable answer: TransportError

Retry policy is left to callers.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Final, Protocol

import httpx
from pydantic import ValidationError

from ethermint_proxy.types import (
    BlockId,
    Hash32,
    HashPair,
    Header,
    NotFoundError,
    TransportError,
    encode_block_id,
    parse_quantity,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Final = 10.0
"""HTTP request timeout in seconds."""

JSONRPC_VERSION: Final = "2.0"
"""JSON-RPC protocol version sent with every request."""


class UpstreamChain(Protocol):
    """
    The upstream calls the synchronizer and query service depend on.

    Any object with these coroutines can stand in for the real client.
    """

    async def current_height(self) -> int:
        """Number of the latest block."""
        ...

    async def block_hash_pair(self, block_id: BlockId) -> HashPair:
        """Both identifiers of a block."""
        ...

    async def header_by_number(self, block_id: BlockId) -> Header:
        """Raw header of a block, selected by number or tag."""
        ...

    async def header_by_hash(self, native_hash: Hash32) -> Header:
        """Raw header of a block, selected by native hash."""
        ...


class UpstreamClient:
    """
    Async JSON-RPC 2.0 client over HTTP.

    One pooled `httpx.AsyncClient` is shared by all calls.
    Every call is bounded by the configured timeout.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            url: JSON-RPC endpoint of the upstream node (e.g., "http://ethermint0:8545").
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (mock transports in tests).
        """
        self.url = url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._ids = itertools.count(1)

    async def close(self) -> None:
        """Release pooled connections."""
        await self._client.aclose()

    async def __aenter__(self) -> UpstreamClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def call(self, method: str, *params: Any) -> Any:
        """
        Perform a single JSON-RPC call.

        Args:
            method: JSON-RPC method name.
            *params: Positional parameters.

        Returns:
            The `result` member of the response. May be None.

        Raises:
            TransportError: On network failure, timeout, HTTP error status,
                undecodable body, or a JSON-RPC error object.
        """
        request_id = next(self._ids)
        payload = {
            "jsonrpc": JSONRPC_VERSION,
            "id": request_id,
            "method": method,
            "params": list(params),
        }

        try:
            response = await self._client.post(self.url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as exc:
            raise TransportError(f"Timed out calling {method} on {self.url}") from exc
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"HTTP error {exc.response.status_code} calling {method}: "
                f"{exc.response.text[:200]}"
            ) from exc
        except httpx.RequestError as exc:
            raise TransportError(f"Network error calling {method} on {self.url}: {exc}") from exc
        except ValueError as exc:
            raise TransportError(f"Undecodable response to {method}: {exc}") from exc

        if not isinstance(body, dict):
            raise TransportError(f"Malformed response to {method}: {body!r}")

        error = body.get("error")
        if error is not None:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message") if isinstance(error, dict) else error
            raise TransportError(f"{method} failed: {message}", code=code)

        return body.get("result")

    async def current_height(self) -> int:
        """
        Fetch the number of the latest block.

        Raises:
            TransportError: If the call fails or returns a malformed number.
        """
        result = await self.call("eth_blockNumber")
        try:
            return parse_quantity(result)
        except ValueError as exc:
            raise TransportError(f"Malformed block number: {result!r}") from exc

    async def block_hash_pair(self, block_id: BlockId) -> HashPair:
        """
        Fetch both identifiers of a block.

        Args:
            block_id: Block number or tag ("latest", "pending").

        Raises:
            NotFoundError: If the block does not exist yet.
            TransportError: If the call fails or the block lacks either hash.
        """
        # Full transactions are requested because the upstream only attaches
        # `tm_hash` to the full block form.
        block = await self._get_block_by_number(block_id, full=True)
        try:
            return HashPair.model_validate(block)
        except ValidationError as exc:
            raise TransportError(f"Block {block_id} lacks a hash pair: {exc}") from exc

    async def header_by_number(self, block_id: BlockId) -> Header:
        """
        Fetch a raw header by number or tag.

        The returned `parentHash` is a native hash.

        Raises:
            NotFoundError: If the block does not exist.
            TransportError: If the call fails or the header is malformed.
        """
        block = await self._get_block_by_number(block_id, full=False)
        return _parse_header(block, f"block {block_id}")

    async def header_by_hash(self, native_hash: Hash32) -> Header:
        """
        Fetch a raw header by native hash.

        Raises:
            NotFoundError: If no block has this hash.
            TransportError: If the call fails or the header is malformed.
        """
        block = await self.call("eth_getBlockByHash", native_hash.to_hex(), False)
        if block is None:
            raise NotFoundError(f"Block {native_hash.to_hex()} not found")
        return _parse_header(block, f"block {native_hash.to_hex()}")

    async def _get_block_by_number(self, block_id: BlockId, *, full: bool) -> Any:
        block = await self.call("eth_getBlockByNumber", encode_block_id(block_id), full)
        if block is None:
            raise NotFoundError(f"Block {block_id} not found")
        return block


def _parse_header(block: Any, what: str) -> Header:
    try:
        return Header.model_validate(block)
    except ValidationError as exc:
        raise TransportError(f"Malformed header for {what}: {exc}") from exc
