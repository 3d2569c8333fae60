"""Modelos de domínio das APIs expostas.

Define o contrato explícito entre quem declara APIs (grupos) e o pipeline
de exposição:

- Api: função exposta + metadados (validação, resposta, entrada binária)
- Group: unidade de inicialização ordenada que produz um ApiMap
- NoApis: variante explícita "este grupo não expõe nada"
- Descriptor: registro interno imutável usado no registro de rotas
- ExposedApi: projeção pública (sem schemas) enviada aos clientes
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final, Union

if TYPE_CHECKING:
    from pydantic import BaseModel, TypeAdapter


@dataclass(frozen=True, slots=True)
class Api:
    """Função exposta e seus metadados.

    Atributos:
        fn: Função (síncrona ou assíncrona) chamada posicionalmente
        validate: Schemas por parâmetro, na ordem dos parâmetros
        response_schema: Tipo do resultado (documentação ou validação)
        validate_response: Quando True, valida o resultado contra response_schema
        has_buffer_input: Único parâmetro recebido como bytes brutos
        has_stream_input: Único parâmetro recebido como stream de bytes
        description: Resumo para documentação (sem efeito no pipeline)
        notes: Notas para documentação (sem efeito no pipeline)
        params: Nomes explícitos dos parâmetros (dispensa introspecção)
    """

    fn: Callable[..., Any]
    validate: Sequence[Any] | None = None
    response_schema: Any = None
    validate_response: bool = False
    has_buffer_input: bool = False
    has_stream_input: bool = False
    description: str | None = None
    notes: str | None = None
    params: Sequence[str] | None = None

    def __call__(self, *args: Any) -> Any:
        return self.fn(*args)

    def metadata_errors(self) -> list[str]:
        """Lista inconsistências dos metadados (vazia = OK)."""
        errors: list[str] = []
        if not callable(self.fn):
            errors.append(f"fn must be callable, got {type(self.fn).__name__}")
        if self.validate is not None and (
            isinstance(self.validate, (str, bytes)) or not isinstance(self.validate, Sequence)
        ):
            errors.append(f'"validate" must be an array, got {type(self.validate).__name__}')
        if self.validate_response and self.response_schema is None:
            errors.append('"validate_response" requires "response_schema"')
        if self.has_buffer_input and self.has_stream_input:
            errors.append('"has_buffer_input" and "has_stream_input" are mutually exclusive')
        if self.params is not None and not all(isinstance(name, str) for name in self.params):
            errors.append('"params" must only contain strings')
        return errors


def api(
    *,
    validate: Sequence[Any] | None = None,
    response_schema: Any = None,
    validate_response: bool = False,
    has_buffer_input: bool = False,
    has_stream_input: bool = False,
    description: str | None = None,
    notes: str | None = None,
    params: Sequence[str] | None = None,
) -> Callable[[Callable[..., Any]], Api]:
    """Decorator que envolve uma função em Api com os metadados informados.

    Exemplo:
        @api(validate=[int, int], response_schema=int, validate_response=True)
        async def add(a, b):
            return a + b
    """

    def decorator(fn: Callable[..., Any]) -> Api:
        return Api(
            fn=fn,
            validate=validate,
            response_schema=response_schema,
            validate_response=validate_response,
            has_buffer_input=has_buffer_input,
            has_stream_input=has_stream_input,
            description=description or _first_doc_line(fn),
            notes=notes,
            params=params,
        )

    return decorator


def _first_doc_line(fn: Callable[..., Any]) -> str | None:
    doc = getattr(fn, "__doc__", None)
    if not doc:
        return None
    return doc.strip().splitlines()[0]


class NoApis:
    """Resultado explícito de um grupo que só produz efeitos colaterais."""

    _instance: NoApis | None = None

    def __new__(cls) -> NoApis:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_APIS"

    def __bool__(self) -> bool:
        return False


NO_APIS: Final = NoApis()

ApiMap = Mapping[str, Union[Api, Callable[..., Any]]]
GroupInit = Callable[[dict[str, Any]], Union[ApiMap, NoApis, None, Awaitable[Any], Any]]


@dataclass(frozen=True, slots=True)
class Group:
    """Grupo nomeado de APIs, inicializado na ordem de declaração.

    Atributos:
        name: Identificador do grupo (chave de group_opts e segmento do path)
        init: Função (síncrona ou assíncrona) que recebe as opções do grupo
            e retorna um ApiMap ou NO_APIS
    """

    name: str
    init: GroupInit


@dataclass(frozen=True, slots=True)
class ExposedApi:
    """Projeção pública de uma API exposta."""

    group: str
    id: str
    params: tuple[str, ...]
    path: str
    has_buffer_input: bool = False
    has_stream_input: bool = False

    @property
    def method(self) -> str:
        """GET sem parâmetros declarados, POST caso contrário."""
        return "POST" if self.params else "GET"

    def to_dict(self) -> dict[str, Any]:
        """Serializa no formato do protocolo (chaves camelCase, ordem fixa)."""
        return {
            "group": self.group,
            "id": self.id,
            "params": list(self.params),
            "path": self.path,
            "hasBufferInput": self.has_buffer_input,
            "hasStreamInput": self.has_stream_input,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExposedApi:
        """Reconstrói a projeção recebida do endpoint de descoberta."""
        return cls(
            group=data["group"],
            id=data["id"],
            params=tuple(data.get("params", ())),
            path=data["path"],
            has_buffer_input=bool(data.get("hasBufferInput", False)),
            has_stream_input=bool(data.get("hasStreamInput", False)),
        )


@dataclass(frozen=True, slots=True)
class Descriptor:
    """Registro interno: API exposta + schemas + função."""

    group: str
    id: str
    path: str
    params: tuple[str, ...]
    api: Api
    has_buffer_input: bool = False
    has_stream_input: bool = False
    payload_schema: type[BaseModel] | None = None
    response_schema: TypeAdapter[Any] | None = None
    validate_response: bool = False

    @property
    def method(self) -> str:
        """GET sem parâmetros declarados, POST caso contrário."""
        return "POST" if self.params else "GET"

    @property
    def parse_and_validate(self) -> bool:
        """False para APIs binárias: corpo repassado sem parsing."""
        return not (self.has_buffer_input or self.has_stream_input)

    def exposed(self) -> ExposedApi:
        """Remove schemas e função, mantendo apenas a projeção pública."""
        return ExposedApi(
            group=self.group,
            id=self.id,
            params=self.params,
            path=self.path,
            has_buffer_input=self.has_buffer_input,
            has_stream_input=self.has_stream_input,
        )


@dataclass(frozen=True, slots=True)
class Exposure:
    """Resultado completo da extração de APIs de um serviço."""

    descriptors: tuple[Descriptor, ...]
    exposed: tuple[ExposedApi, ...]
    checksum: str
    logger: Any = field(repr=False, default=None)

    def exposed_dicts(self) -> list[dict[str, Any]]:
        return [item.to_dict() for item in self.exposed]
