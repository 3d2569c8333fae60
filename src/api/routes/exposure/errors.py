"""Tradução de ApiError em respostas HTTP.

Corpo de erro:
    {"statusCode": 400, "error": "Bad Request", "message": "...", "details": [...]}

Status usados pela exposição:
- 400 parâmetros inválidos
- 413 corpo acima do limite
- 512 resposta viola o próprio schema (não padrão, intencional)
- 599 erro não anotado lançado pela API (não padrão, intencional)
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from utils.errors import ApiError

logger = logging.getLogger(__name__)


async def api_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Responde com o status e o corpo carregados pelo ApiError."""
    if not isinstance(exc, ApiError):  # pragma: no cover - registrado só para ApiError
        raise exc
    logger.info(
        "api_error_response",
        extra={
            "path": request.url.path,
            "status_code": exc.status_code,
            "error_type": type(exc).__name__,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Registra os handlers de erro da exposição na aplicação."""
    app.add_exception_handler(ApiError, api_error_handler)
