"""Metrics endpoint handler."""

from aiohttp import web

from ethermint_proxy.metrics import generate_metrics

CHARSET = "utf-8"
"""Character encoding for Prometheus metrics."""


async def handle(_request: web.Request) -> web.Response:
    """
    Handle metrics request.

    Response: Prometheus text format (text/plain; version=0.0.4)

    Status Codes:
        200 OK: Metrics returned.
    """
    return web.Response(
        body=generate_metrics(),
        content_type="text/plain; version=0.0.4",
        charset=CHARSET,
    )
