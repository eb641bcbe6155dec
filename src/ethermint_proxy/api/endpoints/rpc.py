"""JSON-RPC endpoint handler."""

from __future__ import annotations

from aiohttp import web

from ethermint_proxy.api.app_keys import QUERY_SERVICE
from ethermint_proxy.api.jsonrpc import handle_body, json_response

from .eth import METHODS


async def handle(request: web.Request) -> web.Response:
    """
    Handle a JSON-RPC request or batch posted to the root path.

    Response: JSON-RPC response object, an array of them for batches, or an
        empty body when every call was a notification.

    Status Codes:
        200 OK: Always, for any well-formed HTTP request. Failures are
            reported inside the JSON-RPC envelope.
        413 Request Entity Too Large: Body exceeds the size limit.
    """
    raw = await request.read()
    payload = await handle_body(raw, request.app[QUERY_SERVICE], METHODS)
    return json_response(payload)
