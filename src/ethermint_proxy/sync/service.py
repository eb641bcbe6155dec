"""
Synchronizer that keeps the translation mapping current.

The Core Problem
----------------
The upstream node keeps producing blocks while the proxy is down, and keeps
producing them while the proxy serves queries. The mapping must end up with
every block from genesis to the tip, in order, without holes, and must
survive restarts at any point.

How It Works
------------
Two phases share one commit path:

1. **Catch-up walk**: read the checkpoint, ask the upstream for its head once,
   and commit every block in ``[checkpoint + 1, head)``. Any upstream failure
   aborts startup. Retrying is the process supervisor's job.
2. **Steady-state polling**: every tick, ask for the block after the last
   committed one. "Not found" just means it has not been produced yet. Other
   upstream failures are reported and the next tick retries. At most one block
   is consumed per tick, so the proxy never races ahead of production.

State Machine
-------------
::

    UNINITIALIZED --> CATCHING_UP --> STEADY

Store failures are fatal in both phases: once a commit cannot be verified the
mapping may have a hole, so the service stops rather than continue past it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from ethermint_proxy import metrics
from ethermint_proxy.storage import HashTranslationStore
from ethermint_proxy.types import (
    HashPair,
    NotFoundError,
    SyncError,
    TransportError,
    UpstreamError,
)
from ethermint_proxy.upstream import UpstreamChain

from .config import POLL_INTERVAL, PROGRESS_LOG_EVERY
from .states import SyncState

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SyncProgress:
    """
    Current synchronization progress.

    Provides a snapshot of sync state for monitoring and logging.
    """

    state: SyncState
    """Current sync state machine state."""

    height: int | None = None
    """Last committed block number."""

    head_at_start: int | None = None
    """Upstream head reported when the catch-up walk began."""

    blocks_committed: int = 0
    """Translation pairs committed this session."""

    poll_errors: int = 0
    """Steady-state polls that failed with a non-NotFound upstream error."""


@dataclass(slots=True)
class SyncService:
    """
    Sole writer of the translation mapping.

    Owns the in-memory height. Nothing else mutates it. Other components
    observe it through `height` and `get_progress()`.
    """

    store: HashTranslationStore
    """Translation store that receives every committed pair."""

    upstream: UpstreamChain
    """Source of block hash pairs."""

    poll_interval: float = POLL_INTERVAL
    """Seconds between steady-state polls."""

    _state: SyncState = field(default=SyncState.UNINITIALIZED)
    """Current sync state."""

    _height: int | None = field(default=None)
    """Last committed block number."""

    _head_at_start: int | None = field(default=None)
    """Head reported by the upstream when catch-up began."""

    _blocks_committed: int = field(default=0)
    """Counter for committed pairs."""

    _poll_errors: int = field(default=0)
    """Counter for failed steady-state polls."""

    _running: bool = field(default=False)
    """Whether run() is active."""

    _stop_event: asyncio.Event = field(default_factory=asyncio.Event)
    """Set when shutdown is requested. Interrupts the poll wait."""

    @property
    def state(self) -> SyncState:
        """Current sync state."""
        return self._state

    @property
    def height(self) -> int | None:
        """Last committed block number, or None if nothing is committed."""
        return self._height

    @property
    def is_running(self) -> bool:
        """Check if the service loop is currently running."""
        return self._running

    @property
    def next_height(self) -> int:
        """Number of the next block to commit."""
        return 0 if self._height is None else self._height + 1

    def get_progress(self) -> SyncProgress:
        """
        Get current sync progress.

        Returns:
            Snapshot of sync state for monitoring.
        """
        return SyncProgress(
            state=self._state,
            height=self._height,
            head_at_start=self._head_at_start,
            blocks_committed=self._blocks_committed,
            poll_errors=self._poll_errors,
        )

    async def run(self) -> None:
        """
        Catch up, then poll until stopped.

        Raises:
            SyncError: If the catch-up walk fails.
            StoreError: If any commit fails.
        """
        self._running = True
        try:
            await self.catch_up()

            while not await self._wait_or_stop(self.poll_interval):
                await self.poll_once()
        finally:
            self._running = False

        logger.info("Synchronizer stopped at height %s", self._height)

    def stop(self) -> None:
        """
        Request graceful shutdown.

        The catch-up walk stops before its next block and the poll loop wakes
        up immediately. A commit already in progress always completes.
        """
        self._stop_event.set()

    async def catch_up(self) -> int:
        """
        Backfill the mapping from the checkpoint to the current head.

        Returns:
            The head height queried at the start of the walk.

        Raises:
            SyncError: If the head query or any block fetch fails.
            StoreError: If any commit fails.
        """
        self._transition_to(SyncState.CATCHING_UP)

        checkpoint = self.store.checkpoint()
        self._height = checkpoint
        start = self.next_height

        try:
            head = await self.upstream.current_height()
        except UpstreamError as e:
            raise SyncError(f"Could not query upstream head: {e.message}") from e
        self._head_at_start = head

        logger.info("Walking chain from height %d to head %d", start, head)

        for number in range(start, head):
            if self._stop_event.is_set():
                logger.info("Catch-up interrupted at height %s", self._height)
                return head

            try:
                pair = await self._fetch_pair(number)
            except UpstreamError as e:
                raise SyncError(
                    f"Catch-up failed at block {number}: {e.message}",
                    height=number,
                ) from e

            self._commit(number, pair)

            committed = number - start + 1
            if committed % PROGRESS_LOG_EVERY == 0:
                logger.info("Catch-up progress: height %d of %d", number, head)

        self._transition_to(SyncState.STEADY)
        logger.info("Caught up: height=%s head=%d", self._height, head)
        return head

    async def poll_once(self) -> bool:
        """
        Try to commit the next block.

        Returns:
            True if a block was committed, False if the tick was skipped.

        Raises:
            RuntimeError: If called before the catch-up walk completed.
            StoreError: If the commit fails.
        """
        if self._state != SyncState.STEADY:
            raise RuntimeError(f"Cannot poll in state {self._state.name}")

        number = self.next_height
        try:
            pair = await self._fetch_pair(number)
        except NotFoundError:
            # The next block has not been produced yet. Expected on most ticks.
            logger.debug("Block %d not produced yet", number)
            return False
        except UpstreamError as e:
            self._poll_errors += 1
            metrics.poll_errors.inc()
            logger.warning("Polling block %d failed, retrying next tick: %s", number, e.message)
            return False

        self._commit(number, pair)
        return True

    async def _fetch_pair(self, number: int) -> HashPair:
        pair = await self.upstream.block_hash_pair(number)
        if pair.number != number:
            raise TransportError(f"Asked for block {number}, upstream returned {pair.number}")
        return pair

    def _commit(self, number: int, pair: HashPair) -> None:
        """
        The single write path shared by both phases.

        The in-memory height only moves after the store confirms the commit.
        """
        self.store.put(number, pair.native_hash, pair.canonical_hash)

        self._height = number
        self._blocks_committed += 1
        metrics.blocks_synced.inc()

        logger.debug(
            "height: %d native: %s canonical: %s",
            number,
            pair.native_hash,
            pair.canonical_hash,
        )

    async def _wait_or_stop(self, timeout: float) -> bool:
        """
        Sleep for `timeout` seconds unless shutdown is requested first.

        Returns:
            True if shutdown was requested.
        """
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=timeout)
        except TimeoutError:
            return False
        return True

    def _transition_to(self, new_state: SyncState) -> None:
        """
        Transition to a new sync state.

        Args:
            new_state: Target state.

        Raises:
            ValueError: If transition is not allowed.
        """
        if not self._state.can_transition_to(new_state):
            raise ValueError(f"Invalid state transition: {self._state.name} -> {new_state.name}")

        logger.debug("Sync state %s -> %s", self._state.name, new_state.name)
        self._state = new_state
