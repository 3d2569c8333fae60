"""Cliente remoto: chama as APIs de um serviço exposto via HTTP (httpx).

Duas fases:
- resolve: GET `{base_path}/exposed` obtém a lista pública e o checksum
- dispatch: cada chamada usa método/path da API resolvida, com os
  argumentos convertidos em objeto nomeado

Toda resposta traz `x-service-crc`. Se diferir do checksum resolvido, o
serviço mudou: o cliente registra `checksum_mismatch` e resolve de novo
antes da próxima chamada.

Erros de transporte (httpx.TransportError) propagam sem alteração.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from app.domain.api import ExposedApi
from app.domain.options import DEFAULT_BASE_PATH
from app.services.checksum import CHECKSUM_HEADER, compute_checksum
from app.services.marshalling import to_named_object
from utils.errors import RemoteApiError, UnknownApiError, ValidationFailed

logger = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"


@dataclass
class RemoteClientConfig:
    """Configuração do cliente remoto."""

    base_path: str = DEFAULT_BASE_PATH
    timeout_seconds: float | None = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)


class RemoteClient:
    """Cliente HTTP de um serviço exposto.

    Args:
        base_url: URL do servidor (ex: http://localhost:3000).
        config: Configuração do cliente.
        http_client: AsyncClient pré-configurado (ex: com ASGITransport em
            testes). Quando informado, o cliente não o fecha.
    """

    def __init__(
        self,
        base_url: str,
        config: RemoteClientConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or RemoteClientConfig()
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url,
            headers=self._config.default_headers,
            timeout=self._config.timeout_seconds,
        )
        self.name: str | None = None
        self.version: str | None = None
        self.checksum: str | None = None
        self._apis: dict[str, ExposedApi] = {}
        self._stale = True

    async def __aenter__(self) -> RemoteClient:
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    @property
    def apis(self) -> list[ExposedApi]:
        return list(dict.fromkeys(self._apis.values()))

    async def resolve(self) -> list[ExposedApi]:
        """Busca a lista de APIs expostas e o checksum do serviço.

        Raises:
            RemoteApiError: Endpoint de descoberta respondeu com erro.
        """
        response = await self._http.get(f"{self._config.base_path}/exposed")
        if response.is_error:
            raise _remote_error(response)

        body = response.json()
        exposed = [ExposedApi.from_dict(item) for item in body.get("apis", [])]
        apis: dict[str, ExposedApi] = {}
        for item in exposed:
            apis[f"{item.group}.{item.id}"] = item
            apis.setdefault(item.id, item)

        self.name = body.get("name")
        self.version = body.get("version")
        self.checksum = response.headers.get(CHECKSUM_HEADER) or compute_checksum(exposed)
        self._apis = apis
        self._stale = False
        logger.debug(
            "apis_resolved",
            extra={"service": self.name, "api_count": len(exposed), "checksum": self.checksum},
        )
        return exposed

    async def call(self, api_id: str, *args: Any) -> Any:
        """Chama a API `api_id` (ou `grupo.id`) com argumentos posicionais.

        Returns:
            Resultado JSON decodificado, bytes (octet-stream) ou None.

        Raises:
            UnknownApiError: API não exposta pelo serviço.
            RemoteApiError: Servidor respondeu com status de erro.
        """
        if self._stale:
            await self.resolve()
        exposed = self._apis.get(api_id)
        if exposed is None:
            msg = f"Unknown API {api_id} in service {self.name}"
            raise UnknownApiError(msg)

        response = await self._dispatch(exposed, args)
        self._check_checksum(response)
        if response.is_error:
            raise _remote_error(response)
        return _decode(response)

    async def _dispatch(self, exposed: ExposedApi, args: tuple[Any, ...]) -> httpx.Response:
        if exposed.method == "GET":
            if args:
                msg = (
                    f"Incorrect parameters for API {exposed.id}: expected at most "
                    f"0 parameter(s), received {len(args)}"
                )
                raise ValidationFailed(msg)
            return await self._http.get(exposed.path)

        if exposed.has_buffer_input or exposed.has_stream_input:
            content = args[0] if args else b""
            return await self._http.post(
                exposed.path,
                content=content,
                headers={"content-type": OCTET_STREAM},
            )
        return await self._http.post(exposed.path, json=to_named_object(list(args), exposed.params))

    def _check_checksum(self, response: httpx.Response) -> None:
        received = response.headers.get(CHECKSUM_HEADER)
        if received is None or received == self.checksum:
            return
        logger.warning(
            "checksum_mismatch",
            extra={"service": self.name, "expected": self.checksum, "received": received},
        )
        self._stale = True


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        return response.json()
    return response.content


def _remote_error(response: httpx.Response) -> RemoteApiError:
    """Reconstrói o erro a partir do corpo `{statusCode, error, message, details}`."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {"message": response.text or response.reason_phrase}

    return RemoteApiError(
        str(body.get("message", "")),
        status_code=int(body.get("statusCode", response.status_code)),
        error=str(body.get("error") or response.reason_phrase),
        details=body.get("details"),
    )
