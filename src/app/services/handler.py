"""Handler de requisição por API exposta.

Estados de uma chamada:
RECEIVED → PARSED → VALIDATED → INVOKED → RESPONDED | FAILED

- APIs buffer/stream: corpo bruto é o primeiro argumento (demais None), sem
  validação.
- Demais: payload nomeado (ausente = {}), validação opcional, reconstrução
  posicional (declarados + excedentes).
- Funções síncronas rodam no threadpool; resultados awaitable são aguardados.
- Erros anotados (ApiError, HTTPException) seguem inalterados; os demais
  viram HandlerError (599).
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator, Iterator, Mapping
from typing import Any

from fastapi.encoders import jsonable_encoder
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException

from app.domain.api import Descriptor, Exposure
from app.protocols.router import DEFAULT_MAX_BYTES, ApiResult, RequestOptions, RouteSpec
from app.services.checksum import CHECKSUM_HEADER
from app.services.marshalling import to_positional
from app.services.validation import (
    FULL_SAMPLE,
    NO_SAMPLE,
    parse_params,
    should_sample,
    validate_response,
)
from utils.errors import ApiError, HandlerError, ValidationFailed


class RequestHandler:
    """Executa uma API a partir do payload recebido pelo servidor.

    Args:
        descriptor: Descritor da API (somente leitura, compartilhado).
        checksum: Checksum da superfície exposta, enviado em cada resposta.
        logger: Logger do serviço.
    """

    def __init__(
        self,
        descriptor: Descriptor,
        checksum: str,
        logger: logging.Logger,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ) -> None:
        self.descriptor = descriptor
        self.checksum = checksum
        self.max_bytes = max_bytes
        self._logger = logger

    @property
    def response_sample(self) -> int:
        """100 quando validate_response, 0 caso contrário (só documentação)."""
        return FULL_SAMPLE if self.descriptor.validate_response else NO_SAMPLE

    @property
    def request_options(self) -> RequestOptions:
        descriptor = self.descriptor
        return RequestOptions(
            parse=descriptor.parse_and_validate,
            max_bytes=self.max_bytes,
            output="stream" if descriptor.has_stream_input else "data",
            response_sample=self.response_sample,
            description=descriptor.api.description,
            notes=descriptor.api.notes,
        )

    async def __call__(self, payload: Any) -> ApiResult:
        args = self.build_args(payload)
        try:
            result = await self._invoke(args)
        except (ApiError, HTTPException):
            raise
        except Exception as exc:
            self._logger.warning(
                "api_call_failed",
                extra={
                    "group": self.descriptor.group,
                    "api": self.descriptor.id,
                    "error_type": type(exc).__name__,
                },
            )
            msg = f"Error while calling API {self.descriptor.id}: {exc}"
            raise HandlerError(msg) from exc

        descriptor = self.descriptor
        if (
            descriptor.parse_and_validate
            and descriptor.response_schema is not None
            and should_sample(self.response_sample)
        ):
            error = validate_response(result, descriptor.response_schema, descriptor.id)
            if error is not None:
                raise error
        return self.to_result(result)

    def build_args(self, payload: Any) -> list[Any]:
        """Reconstrói a lista posicional de argumentos a partir do payload.

        Raises:
            ValidationFailed: Payload não é objeto ou não respeita o schema.
        """
        descriptor = self.descriptor
        if not descriptor.parse_and_validate:
            # corpo bruto no primeiro parâmetro; os demais chegam como None
            return [payload, *([None] * max(0, len(descriptor.params) - 1))]

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            msg = (
                f"Incorrect parameters for API {descriptor.id}: payload must be an object, "
                f"got {type(payload).__name__}"
            )
            raise ValidationFailed(msg)

        if descriptor.payload_schema is not None:
            payload = parse_params(
                payload,
                descriptor.payload_schema,
                descriptor.id,
                len(descriptor.params),
            )
        return to_positional(payload, descriptor.params)

    async def _invoke(self, args: list[Any]) -> Any:
        fn = self.descriptor.api.fn
        if inspect.iscoroutinefunction(fn):
            result = await fn(*args)
        else:
            result = await run_in_threadpool(fn, *args)
        if inspect.isawaitable(result):
            result = await result
        return result

    def to_result(self, result: Any) -> ApiResult:
        """Converte o retorno da função no resultado enviado ao adaptador."""
        headers = {CHECKSUM_HEADER: self.checksum}
        if result is None:
            return ApiResult(body=None, kind="empty", headers=headers)
        if isinstance(result, (bytes, bytearray, memoryview)):
            return ApiResult(body=bytes(result), kind="bytes", headers=headers)
        if isinstance(result, (AsyncIterator, Iterator)):
            return ApiResult(body=result, kind="stream", headers=headers)
        try:
            body = jsonable_encoder(result)
        except (TypeError, ValueError) as exc:
            msg = f"Error while calling API {self.descriptor.id}: result is not serializable ({exc})"
            raise HandlerError(msg) from exc
        return ApiResult(body=body, kind="json", headers=headers)

    def route(self) -> RouteSpec:
        """Rota declarativa desta API (GET sem parâmetros, POST com)."""
        return RouteSpec(
            method="POST" if self.descriptor.params else "GET",
            path=self.descriptor.path,
            handler=self,
            request_options=self.request_options,
            name=f"{self.descriptor.group}.{self.descriptor.id}",
        )


def build_routes(
    exposure: Exposure,
    name: str,
    version: str,
    base_path: str,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> list[RouteSpec]:
    """Rota de descoberta seguida de uma rota por API exposta."""
    discovery_body = {"name": name, "version": version, "apis": exposure.exposed_dicts()}
    headers = {CHECKSUM_HEADER: exposure.checksum}

    async def list_exposed(_payload: Any) -> ApiResult:
        return ApiResult(body=discovery_body, headers=headers)

    routes = [
        RouteSpec(
            method="GET",
            path=f"{base_path}/exposed",
            handler=list_exposed,
            request_options=RequestOptions(description="List exposed APIs"),
            name="exposed",
        )
    ]
    routes.extend(
        RequestHandler(descriptor, exposure.checksum, exposure.logger, max_bytes).route()
        for descriptor in exposure.descriptors
    )
    return routes
