"""Agregador de rotas: registra as APIs expostas em um APIRouter.

FastApiRouter implementa RouterProtocol: recebe a lista declarativa de
rotas produzida pelo núcleo e cria um endpoint FastAPI por rota.

Uso:
    from api.routes import FastApiRouter

    router = FastApiRouter()
    await router.register(routes)
    app.include_router(router.api_router)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from fastapi import APIRouter

from api.routes.exposure.endpoint import build_endpoint
from app.protocols.router import RouteSpec

logger = logging.getLogger(__name__)


class FastApiRouter:
    """Adaptador de rotas sobre um APIRouter do FastAPI."""

    def __init__(self, api_router: APIRouter | None = None, tags: Sequence[str] = ("api",)) -> None:
        self.api_router = api_router or APIRouter()
        self._tags = list(tags)

    async def register(self, routes: Sequence[RouteSpec]) -> None:
        """Cria um endpoint por rota, na ordem recebida."""
        for route in routes:
            options = route.request_options
            self.api_router.add_api_route(
                route.path,
                build_endpoint(route),
                methods=[route.method],
                name=route.name,
                summary=options.description,
                description=options.notes,
                tags=self._tags,
            )
            logger.debug(
                "route_registered",
                extra={"method": route.method, "path": route.path},
            )
