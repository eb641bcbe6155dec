"""
Abstract database interface for hash translation storage.

Defines the Protocol that all database implementations must follow.
Uses structural subtyping for flexibility.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ethermint_proxy.types import Hash32


class Database(Protocol):
    """
    Protocol for translation storage.

    All database implementations must provide these methods.
    Uses structural subtyping - any class with matching methods satisfies the protocol.

    Storage Organization
    --------------------
    - Native -> canonical: Indexed by native hash
    - Canonical -> native: Indexed by canonical hash
    - Checkpoint: Last block number whose pair is committed

    Every method is transactional. A reader never observes one direction of
    a pair without the other.
    """

    # -------------------------------------------------------------------------
    # Translation Operations
    # -------------------------------------------------------------------------

    def put_translation(self, number: int, native_hash: Hash32, canonical_hash: Hash32) -> bool:
        """
        Atomically record both directions of a block's hash pair.

        The checkpoint advances to `number` in the same transaction when
        `number` directly follows it (or is 0 on an empty store).

        Args:
            number: Block number of the pair.
            native_hash: Hash assigned by the consensus layer.
            canonical_hash: Hash assigned by the execution layer.

        Returns:
            True if the checkpoint advanced.

        Raises:
            StoreError: If the transaction could not be committed.
                Nothing from the failed call is visible afterwards.
        """
        ...

    def get_canonical(self, native_hash: Hash32) -> Hash32 | None:
        """
        Retrieve the canonical hash recorded for a native hash.

        Returns:
            Canonical hash if recorded, None otherwise.
        """
        ...

    def get_native(self, canonical_hash: Hash32) -> Hash32 | None:
        """
        Retrieve the native hash recorded for a canonical hash.

        Returns:
            Native hash if recorded, None otherwise.
        """
        ...

    # -------------------------------------------------------------------------
    # Checkpoint Operations
    # -------------------------------------------------------------------------

    def get_checkpoint(self) -> int | None:
        """
        Retrieve the last synced height.

        Returns:
            Highest contiguously committed block number, or None before the first sync.
        """
        ...

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close database connection and release resources."""
        ...

    def __enter__(self) -> Database:
        """Context manager entry."""
        ...

    def __exit__(self, *args: object) -> None:
        """Context manager exit. Closes the database."""
        ...
