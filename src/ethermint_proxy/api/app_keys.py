"""Typed keys for state shared between the server and its handlers."""

from __future__ import annotations

from collections.abc import Callable

from aiohttp import web

from ethermint_proxy.query import QueryService
from ethermint_proxy.sync import SyncProgress

QUERY_SERVICE = web.AppKey("query_service", QueryService)
"""Query service backing the JSON-RPC methods."""

PROGRESS_GETTER = web.AppKey("progress_getter", Callable[[], SyncProgress | None])
"""Callable returning the synchronizer's current progress, if it is running."""
