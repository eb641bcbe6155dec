"""
Bidirectional hash translation store.

The Problem
-----------
Every block has two identifiers. The consensus layer names it by its native
hash; the execution layer re-derives the same block under a canonical hash.
Clients only speak the canonical namespace, but the execution layer links
headers by native hash. Answering a canonical query therefore needs a
durable two-way dictionary between the namespaces.

Invariants
----------
- For every block below the checkpoint both directions are recorded.
- Both directions of a pair are written together or not at all.
- The checkpoint only ever moves forward, one block at a time, and only in
  the transaction that commits that block's pair.

The synchronizer is the only writer. Query paths are read-only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ethermint_proxy import metrics
from ethermint_proxy.types import Hash32

from .database import Database

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class HashTranslationStore:
    """
    Owns the translation mapping and the synchronization checkpoint.

    Thin policy layer over a `Database`: the database guarantees atomicity,
    this class adds the passthrough policy for misses and keeps metrics.
    """

    database: Database
    """Backing database. Opened and closed by the node."""

    def put(self, number: int, native_hash: Hash32, canonical_hash: Hash32) -> bool:
        """
        Commit a block's translation pair.

        Args:
            number: Block number.
            native_hash: Hash assigned by the consensus layer.
            canonical_hash: Hash assigned by the execution layer.

        Returns:
            True if the checkpoint advanced to `number`.

        Raises:
            StoreError: If the commit failed. Prior state is untouched.
        """
        advanced = self.database.put_translation(number, native_hash, canonical_hash)
        if advanced:
            metrics.synced_height.set(float(number))
        return advanced

    def lookup_canonical(self, native_hash: Hash32) -> Hash32 | None:
        """
        Translate a native hash to its canonical counterpart.

        Returns:
            The canonical hash, or None if the pair was never recorded.
        """
        result = self.database.get_canonical(native_hash)
        _count_lookup("native_to_canonical", result)
        return result

    def lookup_native(self, canonical_hash: Hash32) -> Hash32 | None:
        """
        Translate a canonical hash to its native counterpart.

        Returns:
            The native hash, or None if the pair was never recorded.
        """
        result = self.database.get_native(canonical_hash)
        _count_lookup("canonical_to_native", result)
        return result

    def checkpoint(self) -> int | None:
        """
        Last synced height.

        Returns:
            Highest block number with a committed pair, or None before the first sync.
        """
        return self.database.get_checkpoint()

    def to_canonical(self, block_hash: Hash32) -> Hash32:
        """
        Rewrite a hash into the canonical namespace.

        A miss is not an error: the hash either predates recorded history
        (e.g. the genesis parent) or is already canonical. It is returned as is.
        """
        canonical = self.lookup_canonical(block_hash)
        return block_hash if canonical is None else canonical

    def to_native(self, block_hash: Hash32) -> Hash32:
        """
        Rewrite a hash into the native namespace.

        A miss means the caller already supplied a native hash, so it is
        returned as is.
        """
        native = self.lookup_native(block_hash)
        return block_hash if native is None else native


def _count_lookup(direction: str, result: Hash32 | None) -> None:
    metrics.translation_lookups.labels(
        direction=direction,
        result="miss" if result is None else "hit",
    ).inc()
