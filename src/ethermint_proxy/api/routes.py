"""API route definitions."""

from collections.abc import Awaitable, Callable

from aiohttp import web

from .endpoints import health, metrics, rpc

Handler = Callable[[web.Request], Awaitable[web.Response]]

GET_ROUTES: dict[str, Handler] = {
    "/health": health.handle,
    "/metrics": metrics.handle,
}
"""Read-only HTTP routes mapped to their handlers."""

POST_ROUTES: dict[str, Handler] = {
    "/": rpc.handle,
}
"""JSON-RPC routes mapped to their handlers."""
