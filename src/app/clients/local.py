"""Cliente local: chama as APIs de um serviço no mesmo processo.

Roda o mesmo pipeline do servidor (grupos, descritores, validação) sem
HTTP. Argumentos e resultados passam por um round trip JSON para que o
comportamento seja igual ao do cliente remoto.

Uso:
    client = LocalClient(options)
    await client.init()
    total = await client.call("add", 1, 2)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi.encoders import jsonable_encoder

from app.services.descriptors import extract_apis
from app.services.handler import RequestHandler
from app.services.marshalling import to_named_object
from utils.errors import ExposerError, UnknownApiError, ValidationFailed

if TYPE_CHECKING:
    from app.domain.api import Exposure, ExposedApi
    from app.domain.options import ServiceOptions


class LocalClient:
    """Acesso em processo às APIs de um serviço.

    Args:
        options: Opções do serviço (mesmas usadas para expô-lo).
    """

    def __init__(self, options: ServiceOptions) -> None:
        self._options = options
        self._exposure: Exposure | None = None
        self._handlers: dict[str, RequestHandler] = {}

    @property
    def checksum(self) -> str | None:
        return self._exposure.checksum if self._exposure else None

    @property
    def apis(self) -> list[ExposedApi]:
        return list(self._exposure.exposed) if self._exposure else []

    async def init(self) -> None:
        """Inicializa os grupos do serviço (uma única vez)."""
        if self._exposure is not None:
            return
        exposure = await extract_apis(self._options)
        handlers: dict[str, RequestHandler] = {}
        for descriptor in exposure.descriptors:
            handler = RequestHandler(descriptor, exposure.checksum, exposure.logger)
            handlers[f"{descriptor.group}.{descriptor.id}"] = handler
            # id sem grupo resolve para o primeiro grupo que o declara
            handlers.setdefault(descriptor.id, handler)
        self._exposure = exposure
        self._handlers = handlers

    async def call(self, api_id: str, *args: Any) -> Any:
        """Chama a API `api_id` (ou `grupo.id`) com argumentos posicionais.

        Raises:
            UnknownApiError: API não exposta pelo serviço.
            ApiError: Mesma família de erros do servidor (400, 512, 599).
        """
        if self._exposure is None:
            msg = "LocalClient.init() must be awaited before call()"
            raise ExposerError(msg)
        handler = self._handlers.get(api_id)
        if handler is None:
            msg = f"Unknown API {api_id} in service {self._options.name}"
            raise UnknownApiError(msg)

        descriptor = handler.descriptor
        if not descriptor.params and args:
            msg = (
                f"Incorrect parameters for API {descriptor.id}: expected at most "
                f"0 parameter(s), received {len(args)}"
            )
            raise ValidationFailed(msg)
        if descriptor.parse_and_validate:
            payload = jsonable_encoder(to_named_object(list(args), descriptor.params))
        else:
            payload = args[0] if args else b""

        result = await handler(payload)
        return result.body
