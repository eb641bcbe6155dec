"""
Proxy node orchestrator.

Wires together all services and runs them with structured concurrency.

The Node opens the translation store once, connects to the upstream chain
node, and runs the synchronizer alongside the JSON-RPC front end until a
shutdown is requested or the synchronizer fails.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from dataclasses import dataclass, field
from pathlib import Path

from ethermint_proxy.api import ApiServer, ApiServerConfig
from ethermint_proxy.config import (
    DEFAULT_DATABASE_PATH,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_UPSTREAM_URL,
)
from ethermint_proxy.query import QueryService
from ethermint_proxy.storage import Database, HashTranslationStore, SQLiteDatabase
from ethermint_proxy.sync import SyncService
from ethermint_proxy.upstream import UpstreamClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NodeConfig:
    """
    Configuration for a proxy node.

    Provides all parameters needed to wire a node.
    """

    upstream_url: str = DEFAULT_UPSTREAM_URL
    """JSON-RPC endpoint of the upstream node."""

    database_path: Path | str = DEFAULT_DATABASE_PATH
    """
    Path to the SQLite database file holding the translation mapping.

    On restart, synchronization resumes from the stored checkpoint.

    Use \":memory:\" for in-memory database (testing only).
    """

    api_config: ApiServerConfig | None = field(default_factory=ApiServerConfig)
    """Optional API server configuration. If None, API server is disabled."""

    poll_interval: float = DEFAULT_POLL_INTERVAL
    """Seconds between steady-state polls."""

    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    """Per-request timeout for upstream calls, in seconds."""


@dataclass(slots=True)
class Node:
    """
    Proxy node orchestrator.

    Owns the process-wide resources. The store and the upstream client are
    released exactly once, whichever way `run()` exits.
    """

    database: Database
    """Store handle shared by the synchronizer and query service."""

    upstream: UpstreamClient
    """Pooled connection to the upstream node."""

    sync_service: SyncService
    """Sole writer of the translation mapping."""

    query_service: QueryService
    """Read path used by the API server."""

    api_server: ApiServer | None = field(default=None)
    """Optional JSON-RPC front end."""

    _shutdown: asyncio.Event = field(default_factory=asyncio.Event)
    """Event signaling shutdown request."""

    _closed: bool = field(default=False)
    """Whether resources were released."""

    @classmethod
    def from_config(cls, config: NodeConfig) -> Node:
        """
        Create a fully-wired node.

        Raises:
            StoreError: If the database cannot be opened.
        """
        database = SQLiteDatabase(config.database_path)
        store = HashTranslationStore(database)
        upstream = UpstreamClient(config.upstream_url, timeout=config.request_timeout)

        sync_service = SyncService(
            store=store,
            upstream=upstream,
            poll_interval=config.poll_interval,
        )
        query_service = QueryService(store=store, upstream=upstream)

        api_server = None
        if config.api_config is not None:
            api_server = ApiServer(
                config=config.api_config,
                query_service=query_service,
                progress_getter=sync_service.get_progress,
            )

        return cls(
            database=database,
            upstream=upstream,
            sync_service=sync_service,
            query_service=query_service,
            api_server=api_server,
        )

    async def run(self, *, install_signal_handlers: bool = True) -> None:
        """
        Run all services until shutdown.

        Returns when shutdown is requested. Raises if a service fails.

        Args:
            install_signal_handlers: Whether to handle SIGINT/SIGTERM.
                Disable for testing or non-main threads.

        Raises:
            ExceptionGroup: Wrapping SyncError if the catch-up walk fails,
                or StoreError if a commit fails.
        """
        if install_signal_handlers:
            self._install_signal_handlers()

        # The finally block releases the store and the client on every exit path.
        try:
            # Queries are served during catch-up. Unsynced parents pass through.
            if self.api_server is not None:
                await self.api_server.start()

            async with asyncio.TaskGroup() as tg:
                tg.create_task(self._run_sync())
                if self.api_server is not None:
                    tg.create_task(self.api_server.run())
                tg.create_task(self._wait_shutdown())
        finally:
            await self._release()

    async def _run_sync(self) -> None:
        """Run the synchronizer, then release the other services."""
        try:
            await self.sync_service.run()
        finally:
            # Normal exit means shutdown was requested. A failure must not
            # leave the API server or the watcher running.
            self._shutdown.set()

    def _install_signal_handlers(self) -> None:
        """
        Install signal handlers for graceful shutdown.

        Handles SIGINT (Ctrl+C) and SIGTERM (process termination).

        Silently ignores errors if handlers cannot be installed.
        This happens in non-main threads or embedded contexts.
        """
        try:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, self._shutdown.set)
        except (ValueError, RuntimeError):
            # Cannot add handlers outside main thread.
            pass

    async def _wait_shutdown(self) -> None:
        """
        Wait for shutdown signal then stop services.

        Runs alongside the services.
        """
        await self._shutdown.wait()
        logger.info("Shutdown requested")

        self.sync_service.stop()
        if self.api_server is not None:
            await self.api_server.aclose()

    async def _release(self) -> None:
        if self._closed:
            return
        self._closed = True

        if self.api_server is not None:
            await self.api_server.aclose()
        await self.upstream.close()
        self.database.close()

    def stop(self) -> None:
        """
        Request graceful shutdown.

        Signals the node to stop all services and exit.
        """
        self._shutdown.set()

    @property
    def is_running(self) -> bool:
        """Check if node is currently running."""
        return not self._shutdown.is_set()
