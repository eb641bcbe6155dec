"""Tests for JSON-RPC dispatch independent of HTTP."""

from __future__ import annotations

import json
from typing import Any

from ethermint_proxy.api.jsonrpc import (
    DEFAULT_ERROR_CODE,
    INTERNAL_ERROR,
    handle_body,
)
from ethermint_proxy.query import QueryService
from ethermint_proxy.types import TransportError


async def _echo(query: QueryService, params: list[Any]) -> Any:
    return params


async def _upstream_down(query: QueryService, params: list[Any]) -> Any:
    raise TransportError("connection refused")


async def _bug(query: QueryService, params: list[Any]) -> Any:
    raise RuntimeError("unexpected")


METHODS = {"echo": _echo, "down": _upstream_down, "bug": _bug}


async def _handle(query_service: QueryService, payload: Any) -> Any:
    return await handle_body(json.dumps(payload).encode(), query_service, METHODS)


class TestHandlerFailures:
    """Tests for how handler exceptions are reported."""

    async def test_result_returned(self, query_service: QueryService) -> None:
        """A handler's return value becomes the result."""
        response = await _handle(
            query_service, {"jsonrpc": "2.0", "id": 1, "method": "echo", "params": [1]}
        )
        assert response == {"jsonrpc": "2.0", "id": 1, "result": [1]}

    async def test_null_params_allowed(self, query_service: QueryService) -> None:
        """A null params member is treated as no params."""
        response = await _handle(
            query_service, {"jsonrpc": "2.0", "id": 1, "method": "echo", "params": None}
        )
        assert response["result"] == []

    async def test_upstream_failure_is_server_error(self, query_service: QueryService) -> None:
        """Proxy failures map to the default server error code."""
        response = await _handle(query_service, {"jsonrpc": "2.0", "id": 2, "method": "down"})

        assert response["error"]["code"] == DEFAULT_ERROR_CODE
        assert "connection refused" in response["error"]["message"]

    async def test_unexpected_exception_is_internal_error(
        self, query_service: QueryService
    ) -> None:
        """Bugs are contained and reported without details."""
        response = await _handle(query_service, {"jsonrpc": "2.0", "id": 3, "method": "bug"})

        assert response["error"] == {"code": INTERNAL_ERROR, "message": "internal error"}

    async def test_failure_in_batch_isolated(self, query_service: QueryService) -> None:
        """One failing call does not affect the others."""
        response = await _handle(
            query_service,
            [
                {"jsonrpc": "2.0", "id": 1, "method": "bug"},
                {"jsonrpc": "2.0", "id": 2, "method": "echo", "params": ["x"]},
            ],
        )

        assert response[0]["error"]["code"] == INTERNAL_ERROR
        assert response[1]["result"] == ["x"]
