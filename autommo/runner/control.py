"""HTTP control surface: toggle the worker and scrape its metrics."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, generate_latest

if TYPE_CHECKING:
    from autommo.config import EnabledFlag


def create_app(enabled: EnabledFlag, registry: CollectorRegistry = REGISTRY) -> FastAPI:
    app = FastAPI(title="AutoMmo Worker")

    @app.get("/enable", summary="Enable the worker")
    async def enable() -> dict[str, bool]:
        enabled.set(True)
        return {"enabled": True}

    @app.get("/disable", summary="Disable the worker")
    async def disable() -> dict[str, bool]:
        enabled.set(False)
        return {"enabled": False}

    @app.get("/metrics", summary="Prometheus metrics")
    async def metrics() -> Response:
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    return app
