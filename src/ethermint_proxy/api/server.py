"""
API server for canonical-chain queries, health and metrics.

Provides HTTP endpoints for:
- POST / - JSON-RPC 2.0 (eth_getBlockByNumber, eth_getBlockByHash)
- GET /health - Health check endpoint
- GET /metrics - Prometheus metrics endpoint
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Final

from aiohttp import web

from ethermint_proxy.query import QueryService
from ethermint_proxy.sync import SyncProgress

from .app_keys import PROGRESS_GETTER, QUERY_SERVICE
from .routes import GET_ROUTES, POST_ROUTES

logger = logging.getLogger(__name__)

MAX_BODY_SIZE: Final = 512 * 1024
"""Largest accepted request body in bytes."""


def _no_progress() -> SyncProgress | None:
    """Default progress getter that returns None."""
    return None


@dataclass(frozen=True, slots=True)
class ApiServerConfig:
    """Configuration for the API server."""

    host: str = "0.0.0.0"
    """Host address to bind to."""

    port: int = 8080
    """Port to listen on."""

    enabled: bool = True
    """Whether the API server is enabled."""


@dataclass(slots=True)
class ApiServer:
    """
    HTTP front end answering canonical-chain clients.

    Uses aiohttp to handle HTTP protocol details efficiently.
    """

    config: ApiServerConfig
    """Server configuration."""

    query_service: QueryService
    """Query service backing the JSON-RPC methods."""

    progress_getter: Callable[[], SyncProgress | None] = _no_progress
    """Callable that returns the synchronizer's current progress."""

    _runner: web.AppRunner | None = field(default=None, init=False)
    """The aiohttp application runner."""

    _site: web.TCPSite | None = field(default=None, init=False)
    """The TCP site for the server."""

    @property
    def is_running(self) -> bool:
        """Whether the server is accepting connections."""
        return self._runner is not None

    def create_app(self) -> web.Application:
        """Build the aiohttp application with all routes registered."""
        app = web.Application(client_max_size=MAX_BODY_SIZE)
        app[QUERY_SERVICE] = self.query_service
        app[PROGRESS_GETTER] = self.progress_getter
        app.add_routes(
            [web.get(path, handler) for path, handler in GET_ROUTES.items()]
            + [web.post(path, handler) for path, handler in POST_ROUTES.items()]
        )
        return app

    async def start(self) -> None:
        """Start the API server in the background."""
        if not self.config.enabled:
            logger.info("API server is disabled")
            return

        self._runner = web.AppRunner(self.create_app())
        await self._runner.setup()

        self._site = web.TCPSite(self._runner, self.config.host, self.config.port)
        await self._site.start()

        logger.info("API server listening on %s:%d", self.config.host, self.config.port)

    async def run(self) -> None:
        """
        Run the API server until shutdown.

        This method blocks until stop() is called. A server already started
        with start() keeps its listener.
        """
        if self._runner is None:
            await self.start()

        # Keep running until stopped
        while self._runner is not None:
            await asyncio.sleep(1)

    def stop(self) -> None:
        """Request graceful shutdown."""
        if self._runner is not None:
            asyncio.create_task(self.aclose())

    async def aclose(self) -> None:
        """Gracefully stop the server."""
        if self._runner:
            runner = self._runner
            self._runner = None
            self._site = None
            await runner.cleanup()
            logger.info("API server stopped")
