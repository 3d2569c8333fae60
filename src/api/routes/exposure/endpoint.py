"""Endpoint FastAPI genérico para uma rota declarativa do núcleo.

Fluxo por requisição:
1. Define correlation_id (header x-correlation-id ou UUID novo)
2. Lê o corpo conforme RequestOptions (JSON, bytes ou stream)
3. Chama o handler do núcleo
4. Escreve ApiResult como JSON, octet-stream, stream chunked ou vazio
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse, StreamingResponse

from app.observability import reset_correlation_id, set_correlation_id
from app.protocols.router import ApiResult, RequestOptions, RouteSpec
from utils.errors import PayloadTooLarge, ValidationFailed

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "x-correlation-id"


def build_endpoint(route: RouteSpec) -> Callable[[Request], Awaitable[Response]]:
    """Cria o endpoint FastAPI que delega para `route.handler`."""
    options = route.request_options
    reads_body = route.method == "POST"

    async def endpoint(request: Request) -> Response:
        token = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            payload = await read_payload(request, options) if reads_body else None
            result = await route.handler(payload)
            return render_result(result)
        finally:
            reset_correlation_id(token)

    endpoint.__name__ = (route.name or route.path).replace(".", "_").replace("/", "_")
    return endpoint


async def read_payload(request: Request, options: RequestOptions) -> Any:
    """Lê o corpo da requisição conforme as opções da rota.

    Returns:
        Iterador assíncrono de bytes (stream), bytes (buffer), objeto JSON
        decodificado, ou None para corpo vazio.

    Raises:
        PayloadTooLarge: Corpo acima de `options.max_bytes`.
        ValidationFailed: JSON inválido.
    """
    declared_length = request.headers.get("content-length")
    if declared_length and declared_length.isdigit() and int(declared_length) > options.max_bytes:
        msg = f"Payload content length greater than maximum allowed: {options.max_bytes}"
        raise PayloadTooLarge(msg)

    if options.output == "stream":
        return request.stream()

    body = await request.body()
    if len(body) > options.max_bytes:
        msg = f"Payload content length greater than maximum allowed: {options.max_bytes}"
        raise PayloadTooLarge(msg)
    if not options.parse:
        return body
    if not body:
        return None
    # bytes brutos já lidos para o limite de tamanho; JSON inválido vira 400
    try:
        return json.loads(body)
    except ValueError as exc:
        logger.info("invalid_json_payload", extra={"path": request.url.path})
        msg = "Invalid request payload JSON format"
        raise ValidationFailed(msg) from exc


def render_result(result: ApiResult) -> Response:
    """Converte ApiResult na resposta HTTP correspondente."""
    headers = dict(result.headers)
    if result.kind == "empty":
        return Response(status_code=result.status_code, headers=headers)
    if result.kind == "bytes":
        return Response(
            content=result.body,
            status_code=result.status_code,
            headers=headers,
            media_type="application/octet-stream",
        )
    if result.kind == "stream":
        # sem content-type: o conteúdo do stream é opaco
        return StreamingResponse(result.body, status_code=result.status_code, headers=headers)
    return JSONResponse(content=result.body, status_code=result.status_code, headers=headers)
