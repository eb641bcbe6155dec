"""In-memory stand-in for the upstream chain node."""

from __future__ import annotations

from dataclasses import dataclass, field

from ethermint_proxy.types import (
    BlockId,
    Hash32,
    HashPair,
    Header,
    NotFoundError,
    UpstreamError,
)

from .builders import make_header, make_pair, native_hash


@dataclass
class FakeUpstream:
    """
    Synthetic chain with blocks `[0, head)`.

    Failures can be scripted per block number. Each scripted failure is
    raised once, then the block behaves normally.
    """

    head: int = 0
    """Number of produced blocks. The newest block is `head - 1`."""

    failures: dict[int, UpstreamError] = field(default_factory=dict)
    """One-shot errors raised by `block_hash_pair`, keyed by block number."""

    head_error: UpstreamError | None = None
    """Error raised by `current_height`, if set."""

    pair_requests: list[int] = field(default_factory=list)
    """Block numbers passed to `block_hash_pair`, in call order."""

    hash_requests: list[Hash32] = field(default_factory=list)
    """Hashes passed to `header_by_hash`, in call order."""

    def produce(self, count: int = 1) -> None:
        """Extend the chain by `count` blocks."""
        self.head += count

    def _resolve(self, block_id: BlockId) -> int:
        if block_id == "earliest":
            return 0
        if isinstance(block_id, str):
            return self.head - 1
        return block_id

    async def current_height(self) -> int:
        if self.head_error is not None:
            raise self.head_error
        return self.head

    async def block_hash_pair(self, block_id: BlockId) -> HashPair:
        number = self._resolve(block_id)
        self.pair_requests.append(number)
        if number in self.failures:
            raise self.failures.pop(number)
        if not 0 <= number < self.head:
            raise NotFoundError(f"block {number} not found")
        return make_pair(number)

    async def header_by_number(self, block_id: BlockId) -> Header:
        number = self._resolve(block_id)
        if not 0 <= number < self.head:
            raise NotFoundError(f"block {number} not found")
        return make_header(number)

    async def header_by_hash(self, native: Hash32) -> Header:
        self.hash_requests.append(native)
        for number in range(self.head):
            if native_hash(number) == native:
                return make_header(number)
        raise NotFoundError(f"block {native} not found")
