"""
Canonical-namespace header queries.

Headers come from the upstream node with `parentHash` set to the parent's
native hash. Canonical clients walk the chain through `parentHash`, so each
header is rewritten to carry the parent's canonical hash before it is
returned.

Lookup misses are never errors:

- No canonical hash for a parent: the parent predates recorded history
  (e.g. the genesis parent). The raw value is kept.
- No native hash for a requested hash: the caller supplied a native hash
  already. It is forwarded as is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ethermint_proxy.storage import HashTranslationStore
from ethermint_proxy.types import BlockId, Hash32, Header
from ethermint_proxy.upstream import UpstreamChain

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QueryService:
    """
    Read-only query front end over the translation store and upstream.

    Safe to share between concurrent requests and to use while the
    synchronizer is writing. Each call reads the store independently.
    """

    store: HashTranslationStore
    """Translation store (read-only use)."""

    upstream: UpstreamChain
    """Source of raw headers."""

    async def get_header_by_number(self, block_id: BlockId) -> Header:
        """
        Return the canonical view of a header selected by number or tag.

        Raises:
            UpstreamError: If the upstream fetch fails. NotFoundError if the
                block does not exist.
        """
        header = await self.upstream.header_by_number(block_id)
        return self._rewrite_parent(header)

    async def get_header_by_hash(self, block_hash: Hash32) -> Header:
        """
        Return the canonical view of a header selected by hash.

        Accepts either namespace: a canonical hash is translated to its
        native counterpart first, anything unrecorded is used unchanged.

        Raises:
            UpstreamError: If the upstream fetch fails. NotFoundError if no
                block has the hash.
        """
        native_hash = self.store.to_native(block_hash)
        if native_hash != block_hash:
            logger.debug("Resolved canonical %s to native %s", block_hash, native_hash)

        header = await self.upstream.header_by_hash(native_hash)
        return self._rewrite_parent(header)

    def _rewrite_parent(self, header: Header) -> Header:
        parent_hash = self.store.to_canonical(header.parent_hash)
        if parent_hash == header.parent_hash:
            return header
        return header.with_parent_hash(parent_hash)
