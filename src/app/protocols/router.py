"""Protocolo do adaptador de rotas (servidor HTTP).

O núcleo de exposição não escuta HTTP: produz uma lista declarativa de
rotas e um handler por rota. Qualquer servidor que saiba registrar
(method, path, handler, request_options) pode expor as APIs.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

# 1 GiB: APIs binárias podem receber arquivos grandes
DEFAULT_MAX_BYTES = 1024 * 1024 * 1024

ResultKind = Literal["json", "bytes", "stream", "empty"]


@dataclass(frozen=True, slots=True)
class ApiResult:
    """Resposta de um handler, independente do servidor HTTP.

    Atributos:
        body: Valor já serializável (json), bytes, iterador de bytes ou None
        kind: Como o adaptador deve escrever o corpo
        headers: Headers adicionais (inclui o checksum)
        status_code: Status de sucesso
    """

    body: Any
    kind: ResultKind = "json"
    headers: Mapping[str, str] = field(default_factory=dict)
    status_code: int = 200


@dataclass(frozen=True, slots=True)
class RequestOptions:
    """Opções de leitura do corpo e de validação da resposta.

    Atributos:
        parse: False repassa o corpo bruto (APIs buffer/stream)
        max_bytes: Tamanho máximo do corpo
        output: "data" (corpo completo) ou "stream" (iterador de bytes)
        response_sample: Percentual de respostas validadas (0-100)
        description: Resumo para documentação
        notes: Notas para documentação
    """

    parse: bool = True
    max_bytes: int = DEFAULT_MAX_BYTES
    output: Literal["data", "stream"] = "data"
    response_sample: int = 0
    description: str | None = None
    notes: str | None = None


RouteHandler = Callable[[Any], Awaitable[ApiResult]]


@dataclass(frozen=True, slots=True)
class RouteSpec:
    """Rota declarativa: método, path, handler e opções de requisição."""

    method: Literal["GET", "POST"]
    path: str
    handler: RouteHandler
    request_options: RequestOptions = field(default_factory=RequestOptions)
    name: str | None = None


class RouterProtocol(Protocol):
    """Contrato mínimo do adaptador de rotas."""

    async def register(self, routes: Sequence[RouteSpec]) -> None: ...
