"""Health endpoint handler."""

from __future__ import annotations

from typing import Final

from aiohttp import web

from ethermint_proxy.api.app_keys import PROGRESS_GETTER

STATUS_HEALTHY: Final = "healthy"
"""Fixed healthy status returned by the health endpoint."""

SERVICE_NAME: Final = "ethermint-proxy"
"""Fixed service identifier returned by the health endpoint."""


async def handle(request: web.Request) -> web.Response:
    """
    Handle health check request.

    Returns server health status and a summary of synchronization progress.

    Response: JSON object with fields:
        - status (string): Always healthy when the endpoint is reachable.
        - service (string): Fixed identifier "ethermint-proxy".
        - sync (object): `state` name and last committed `height`,
          both null when the synchronizer is not attached.

    Status Codes:
        200 OK: Server is running.
    """
    progress_getter = request.app.get(PROGRESS_GETTER)
    progress = progress_getter() if progress_getter else None

    return web.json_response(
        {
            "status": STATUS_HEALTHY,
            "service": SERVICE_NAME,
            "sync": {
                "state": progress.state.name if progress else None,
                "height": progress.height if progress else None,
            },
        }
    )
