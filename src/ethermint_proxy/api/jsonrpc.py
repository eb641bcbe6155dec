"""
JSON-RPC 2.0 envelope handling.

Decodes single and batch requests, dispatches each call to a method handler,
and encodes results and errors. Method semantics live in `endpoints`.

Error codes are the standard JSON-RPC 2.0 codes. Application failures use
-32000, the default server error code of canonical-chain nodes.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Final

from aiohttp import web

from ethermint_proxy import metrics
from ethermint_proxy.query import QueryService
from ethermint_proxy.types import NotFoundError, ProxyError

logger = logging.getLogger(__name__)

# =============================================================================
# ERROR CODES
# =============================================================================

PARSE_ERROR: Final = -32700
"""Body is not valid JSON."""

INVALID_REQUEST: Final = -32600
"""JSON is not a valid request object."""

METHOD_NOT_FOUND: Final = -32601
"""Method does not exist or is not served by the proxy."""

INVALID_PARAMS: Final = -32602
"""Parameters are missing or malformed."""

INTERNAL_ERROR: Final = -32603
"""Unexpected failure inside the proxy."""

DEFAULT_ERROR_CODE: Final = -32000
"""Application failure, e.g. the upstream could not be reached."""

JSONRPC_VERSION: Final = "2.0"
"""Protocol version accepted and emitted."""

MethodHandler = Callable[[QueryService, list[Any]], Awaitable[Any]]
"""Coroutine serving one method given the query service and positional params."""


class RpcError(Exception):
    """
    Error to be reported to the caller as a JSON-RPC error object.

    Raised by method handlers for caller mistakes such as bad params.
    """

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)


def error_response(request_id: Any, code: int, message: str) -> dict[str, Any]:
    """Build a JSON-RPC error response object."""
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": code, "message": message},
    }


def result_response(request_id: Any, result: Any) -> dict[str, Any]:
    """Build a JSON-RPC success response object."""
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


async def handle_body(
    raw: bytes,
    query: QueryService,
    methods: Mapping[str, MethodHandler],
) -> Any:
    """
    Process a raw request body.

    Args:
        raw: Request body bytes.
        query: Query service passed to method handlers.
        methods: Method name to handler mapping.

    Returns:
        The response payload: an object, a list for batches, or None when
        every call was a notification.
    """
    try:
        body = json.loads(raw)
    except ValueError:
        return error_response(None, PARSE_ERROR, "parse error")

    if isinstance(body, list):
        if not body:
            return error_response(None, INVALID_REQUEST, "empty batch")

        # Calls in a batch are independent. Serve them concurrently.
        responses = await asyncio.gather(*(dispatch(item, query, methods) for item in body))
        answered = [r for r in responses if r is not None]
        return answered or None

    return await dispatch(body, query, methods)


async def dispatch(
    call: Any,
    query: QueryService,
    methods: Mapping[str, MethodHandler],
) -> dict[str, Any] | None:
    """
    Serve one request object.

    Returns:
        The response object, or None for a notification.
    """
    if not isinstance(call, dict):
        return error_response(None, INVALID_REQUEST, "invalid request")

    request_id = call.get("id")
    is_notification = "id" not in call
    method = call.get("method")

    if call.get("jsonrpc") != JSONRPC_VERSION or not isinstance(method, str):
        return error_response(request_id, INVALID_REQUEST, "invalid request")

    params = call.get("params", [])
    if params is None:
        params = []
    if not isinstance(params, list):
        return error_response(request_id, INVALID_PARAMS, "params must be an array")

    handler = methods.get(method)
    if handler is None:
        response = error_response(
            request_id,
            METHOD_NOT_FOUND,
            f"the method {method} does not exist/is not available",
        )
        return None if is_notification else response

    metrics.rpc_requests.labels(method=method).inc()
    with metrics.rpc_request_time.time():
        response = await _invoke(handler, method, request_id, params, query)

    return None if is_notification else response


async def _invoke(
    handler: MethodHandler,
    method: str,
    request_id: Any,
    params: list[Any],
    query: QueryService,
) -> dict[str, Any]:
    try:
        result = await handler(query, params)
    except RpcError as e:
        return error_response(request_id, e.code, e.message)
    except NotFoundError:
        # Canonical-chain nodes answer lookups of unknown blocks with null.
        return result_response(request_id, None)
    except ProxyError as e:
        logger.warning("%s failed: %s", method, e.message)
        return error_response(request_id, DEFAULT_ERROR_CODE, e.message)
    except Exception:
        # A request must never take the server down.
        logger.exception("Unexpected failure serving %s", method)
        return error_response(request_id, INTERNAL_ERROR, "internal error")

    return result_response(request_id, result)


def json_response(payload: Any) -> web.Response:
    """Encode a JSON-RPC payload as an HTTP response."""
    if payload is None:
        return web.Response(status=200)
    return web.json_response(payload)
