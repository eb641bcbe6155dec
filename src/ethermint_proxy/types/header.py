"""
Block data models exchanged with the upstream node and with clients.

The execution layer links headers by native hash: a header's `parentHash`
as returned upstream is the native hash of its parent. Canonical-namespace
callers expect the canonical hash there instead, so headers are rewritten
before they leave the proxy.
"""

from __future__ import annotations

from pydantic import Field

from .base import FrozenModel
from .hash import ZERO_HASH, Hash32
from .quantity import HexQuantity

ZERO_ADDRESS = "0x" + "00" * 20
"""The zero account address."""


class HashPair(FrozenModel):
    """
    The two identifiers of a single block.

    Parsed directly from the upstream `eth_getBlockByNumber` response, which
    carries the canonical hash in `hash` and the native hash in `tm_hash`.
    """

    number: HexQuantity
    """Block number."""

    canonical_hash: Hash32 = Field(alias="hash")
    """Hash assigned by the execution layer."""

    native_hash: Hash32 = Field(alias="tm_hash")
    """Hash assigned by the consensus layer."""


class Header(FrozenModel):
    """
    Execution-layer block header in the canonical JSON-RPC shape.

    Body fields (transactions, uncles, size) are not part of the model and
    are dropped when parsing a full block. Fields the upstream must always
    send are required, so a truncated block fails validation instead of
    being served with zeroed roots.
    """

    parent_hash: Hash32
    sha3_uncles: Hash32
    miner: str = ZERO_ADDRESS
    state_root: Hash32
    transactions_root: Hash32
    receipts_root: Hash32
    logs_bloom: str
    difficulty: HexQuantity
    number: HexQuantity
    gas_limit: HexQuantity
    gas_used: HexQuantity
    timestamp: HexQuantity
    extra_data: str
    mix_hash: Hash32 = ZERO_HASH
    nonce: str = "0x0000000000000000"

    base_fee_per_gas: HexQuantity | None = None
    """Added by EIP-1559. Absent on legacy headers."""

    hash: Hash32 | None = None
    """Block hash as reported upstream."""

    def with_parent_hash(self, parent_hash: Hash32) -> Header:
        """Return a copy of this header with `parentHash` replaced."""
        return self.model_copy(update={"parent_hash": parent_hash})

    def to_json(self) -> dict[str, object]:
        """Render the header as a JSON-RPC result object."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
