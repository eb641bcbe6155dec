"""Shared fixtures for API server tests."""

from __future__ import annotations

import itertools
from collections.abc import AsyncGenerator

import pytest

from ethermint_proxy.api import ApiServer, ApiServerConfig
from ethermint_proxy.query import QueryService
from ethermint_proxy.sync import SyncService

_ports = itertools.count(18545)


@pytest.fixture
async def server(
    query_service: QueryService,
    sync_service: SyncService,
) -> AsyncGenerator[ApiServer, None]:
    """Running API server bound to localhost on a fresh port."""
    config = ApiServerConfig(host="127.0.0.1", port=next(_ports))
    api_server = ApiServer(
        config=config,
        query_service=query_service,
        progress_getter=sync_service.get_progress,
    )

    await api_server.start()
    yield api_server
    await api_server.aclose()


@pytest.fixture
def base_url(server: ApiServer) -> str:
    """Root URL of the running server."""
    return f"http://{server.config.host}:{server.config.port}"
