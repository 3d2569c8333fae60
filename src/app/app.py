"""Entrypoint da aplicação Exposer.

Transforma as opções de um serviço (grupos de APIs) em uma aplicação ASGI
(FastAPI) com uma rota por API exposta mais a rota de descoberta.

Uso (programático):
    app = await expose(ServiceOptions(name="calc", version="1.0.0", groups=[...]))

Uso (serviço de exemplo):
    python -m app.app
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from fastapi import APIRouter, FastAPI

from api.routes import FastApiRouter
from api.routes.exposure import register_exception_handlers
from app.bootstrap import initialize_app, validate_runtime_settings
from app.services.descriptors import extract_apis
from app.services.handler import build_routes
from config.logging import get_logger
from config.settings import ServerSettings, get_server_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from app.domain.api import Exposure
    from app.domain.options import ServiceOptions
    from app.protocols.router import RouterProtocol

logger = get_logger(__name__)


async def register_exposure(
    options: ServiceOptions,
    router: RouterProtocol,
    settings: ServerSettings | None = None,
) -> Exposure:
    """Extrai as APIs e registra todas as rotas no router informado.

    Erros de registro (opções, grupos, schemas) abortam antes de qualquer
    rota ser registrada.

    Returns:
        Exposure com descritores e checksum da superfície exposta.
    """
    settings = settings or get_server_settings()
    exposure = await extract_apis(options)
    routes = build_routes(
        exposure,
        name=options.name,
        version=options.version,
        base_path=options.base_path,
        max_bytes=settings.max_payload_bytes,
    )
    await router.register(routes)
    return exposure


async def expose(
    options: ServiceOptions,
    router: FastApiRouter | None = None,
    settings: ServerSettings | None = None,
) -> FastAPI:
    """Cria a aplicação FastAPI que expõe as APIs do serviço.

    Args:
        options: Opções do serviço.
        router: Adaptador de rotas (novo APIRouter se omitido).
        settings: Settings do servidor (lidas do ambiente se omitidas).

    Raises:
        ConfigurationError: Opções ou metadados de API inválidos.
        GroupInitError: Falha no init de algum grupo.
    """
    router = router or FastApiRouter()
    exposure = await register_exposure(options, router, settings)
    fastapi_app = create_app(options.name, options.version, router.api_router)
    fastapi_app.state.exposure = exposure
    return fastapi_app


def create_app(name: str, version: str, api_router: APIRouter) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("app_starting", extra={"service": name, "version": version})
        yield
        logger.info("app_shutting_down", extra={"service": name})

    fastapi_app = FastAPI(title=name, version=version, lifespan=lifespan)
    register_exception_handlers(fastapi_app)
    fastapi_app.include_router(api_router)

    logger.info("app_configured", extra={"service": name})
    return fastapi_app


async def serve(options: ServiceOptions, settings: ServerSettings | None = None) -> None:
    """Expõe o serviço e o executa com uvicorn até o shutdown."""
    settings = settings or get_server_settings()
    fastapi_app = await expose(options, settings=settings)
    config = uvicorn.Config(
        fastapi_app,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
    await uvicorn.Server(config).serve()


def main() -> None:
    """Entrypoint para execução direta (serviço de exemplo `calc`)."""
    from app.services.samples import sample_service_options

    initialize_app()
    validate_runtime_settings()
    settings = get_server_settings()

    logger.info(
        "Starting exposer sample service",
        extra={"host": settings.host, "port": settings.port},
    )
    asyncio.run(serve(sample_service_options(base_path=settings.base_path), settings))


if __name__ == "__main__":
    main()
