"""Tests for the node orchestrator."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from ethermint_proxy.api import ApiServer, ApiServerConfig
from ethermint_proxy.node import Node, NodeConfig
from ethermint_proxy.query import QueryService
from ethermint_proxy.storage import HashTranslationStore, SQLiteDatabase
from ethermint_proxy.sync import SyncService, SyncState
from ethermint_proxy.types import SyncError, TransportError
from ethermint_proxy.upstream import UpstreamClient
from tests.ethermint_proxy.helpers import FakeUpstream


def _unused_client() -> UpstreamClient:
    """Client that is only ever closed."""
    return UpstreamClient(
        "http://upstream.invalid",
        transport=httpx.MockTransport(lambda request: httpx.Response(500)),
    )


def _make_node(upstream: FakeUpstream, *, port: int | None = None) -> Node:
    database = SQLiteDatabase(":memory:")
    store = HashTranslationStore(database)
    sync_service = SyncService(store=store, upstream=upstream, poll_interval=0.01)
    query_service = QueryService(store=store, upstream=upstream)

    api_server = None
    if port is not None:
        api_server = ApiServer(
            config=ApiServerConfig(host="127.0.0.1", port=port),
            query_service=query_service,
            progress_getter=sync_service.get_progress,
        )

    return Node(
        database=database,
        upstream=_unused_client(),
        sync_service=sync_service,
        query_service=query_service,
        api_server=api_server,
    )


class TestNodeConfig:
    """Tests for node configuration defaults."""

    def test_defaults(self) -> None:
        """Defaults target the devnet upstream and a local database."""
        config = NodeConfig()

        assert config.upstream_url == "http://ethermint0:8545"
        assert config.database_path == "proxy.db"
        assert config.api_config == ApiServerConfig()
        assert config.poll_interval == 4.0
        assert config.request_timeout == 10.0


class TestFromConfig:
    """Tests for wiring a node from configuration."""

    async def test_wires_services(self) -> None:
        """Services share one store and one upstream client."""
        node = Node.from_config(
            NodeConfig(database_path=":memory:", poll_interval=1.5, request_timeout=2.0)
        )

        try:
            assert node.sync_service.store is node.query_service.store
            assert node.sync_service.upstream is node.upstream
            assert node.query_service.upstream is node.upstream
            assert node.sync_service.poll_interval == 1.5
            assert node.api_server is not None
            assert node.api_server.query_service is node.query_service
        finally:
            await node.upstream.close()
            node.database.close()

    async def test_api_disabled(self) -> None:
        """No API server is built without an API configuration."""
        node = Node.from_config(NodeConfig(database_path=":memory:", api_config=None))

        try:
            assert node.api_server is None
        finally:
            await node.upstream.close()
            node.database.close()


class TestRun:
    """Tests for running and stopping the node."""

    async def test_stop_releases_resources(self) -> None:
        """A requested shutdown stops services and closes the store once."""
        upstream = FakeUpstream(head=3)
        node = _make_node(upstream)

        task = asyncio.create_task(node.run(install_signal_handlers=False))
        async with asyncio.timeout(2.0):
            while node.sync_service.state != SyncState.STEADY:
                await asyncio.sleep(0.005)

        assert node.is_running
        node.stop()
        await asyncio.wait_for(task, timeout=3.0)

        assert not node.is_running
        assert isinstance(node.database, SQLiteDatabase)
        assert node.database.is_closed
        assert node.sync_service.height == 2

    async def test_catch_up_failure_propagates(self) -> None:
        """A failed startup escapes run() and still releases resources."""
        upstream = FakeUpstream(head=3, head_error=TransportError("connection refused"))
        node = _make_node(upstream, port=18690)

        with pytest.raises(ExceptionGroup) as exc_info:
            await asyncio.wait_for(node.run(install_signal_handlers=False), timeout=3.0)

        assert exc_info.group_contains(SyncError)
        assert isinstance(node.database, SQLiteDatabase)
        assert node.database.is_closed
        assert node.api_server is not None
        assert not node.api_server.is_running

    async def test_serves_queries_while_syncing(self) -> None:
        """The API answers while the synchronizer runs."""
        upstream = FakeUpstream(head=3)
        node = _make_node(upstream, port=18691)

        task = asyncio.create_task(node.run(install_signal_handlers=False))
        try:
            async with asyncio.timeout(2.0):
                while node.sync_service.state != SyncState.STEADY:
                    await asyncio.sleep(0.005)

            async with httpx.AsyncClient() as client:
                response = await client.get("http://127.0.0.1:18691/health")

            assert response.json()["sync"] == {"state": "STEADY", "height": 2}
        finally:
            node.stop()
            await asyncio.wait_for(task, timeout=3.0)
