"""Synchronizer state machine."""

from __future__ import annotations

from enum import Enum, auto


class SyncState(Enum):
    """
    Synchronizer states representing the current phase.

    State Machine Diagram
    ---------------------
    ::

        UNINITIALIZED --> CATCHING_UP --> STEADY

    The Lifecycle
    -------------
    1. **UNINITIALIZED**: Service constructed, nothing fetched yet
    2. **CATCHING_UP**: Walking from the checkpoint to the head seen at startup
    3. **STEADY**: Polling for one new block per tick

    There is no way back. A gap found while STEADY (for example after an
    operator skipped a block) requires a manual resync.
    """

    UNINITIALIZED = auto()
    """Constructed but not started. The checkpoint has not been read."""

    CATCHING_UP = auto()
    """
    Backfilling the mapping from the checkpoint to the startup head.

    Any upstream failure in this state aborts startup.
    """

    STEADY = auto()
    """
    Following the chain one block per tick.

    Upstream failures in this state are reported and the next tick retries.
    """

    def can_transition_to(self, target: SyncState) -> bool:
        """
        Check if transition to target state is valid.

        Args:
            target: The proposed target state.

        Returns:
            True if the transition is allowed by the state machine rules.
        """
        return target in _VALID_TRANSITIONS.get(self, set())


_VALID_TRANSITIONS: dict[SyncState, set[SyncState]] = {
    SyncState.UNINITIALIZED: {SyncState.CATCHING_UP},
    SyncState.CATCHING_UP: {SyncState.STEADY},
    SyncState.STEADY: set(),
}
"""Valid state transitions for the synchronizer state machine."""
