"""Validação de parâmetros e respostas das APIs expostas (pydantic).

Schemas por parâmetro são expressões de tipo aceitas pelo pydantic:
`int`, `str | None`, `Annotated[int, Field(gt=0)]`, modelos BaseModel, ou
uma tupla `(tipo, default)` para parâmetros opcionais.

Mensagens de erro sempre citam o id da API:
- "Incorrect parameters for API <id>: ..." (400)
- "Incorrect response for API <id>: ..." (512)
"""

from __future__ import annotations

import random
from collections.abc import Mapping, Sequence
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PydanticUserError, TypeAdapter, create_model
from pydantic import ValidationError as PydanticValidationError

from utils.errors import ResponseValidationFailed, ValidationFailed

# Amostragem de validação de resposta (percentual)
FULL_SAMPLE = 100
NO_SAMPLE = 0


class SchemaDefinitionError(ValueError):
    """Fragmento de schema que não pode virar modelo pydantic."""


def build_schema(
    fragments: Sequence[Any],
    names: Sequence[str],
    label: str = "Payload",
) -> type[BaseModel]:
    """Monta um modelo pydantic com um campo por parâmetro nomeado.

    Campos usam o nome do parâmetro como alias; chaves desconhecidas são
    rejeitadas. Parâmetros sem fragmento aceitam qualquer valor (default None).
    Um fragmento simples (`float`, `Point`) torna o parâmetro obrigatório, como
    um campo pydantic sem default; para opcional use `(tipo, default)` ou
    `(tipo | None, None)`.

    Args:
        fragments: Schemas por parâmetro, na ordem dos parâmetros.
        names: Nomes dos parâmetros.
        label: Nome do modelo gerado (aparece em diagnósticos).

    Raises:
        SchemaDefinitionError: Fragmentos malformados ou em excesso.
    """
    if isinstance(fragments, (str, bytes)) or not isinstance(fragments, Sequence):
        msg = f'"validate" must be an array, got {type(fragments).__name__}'
        raise SchemaDefinitionError(msg)
    if len(fragments) > len(names):
        msg = f'"validate" declares {len(fragments)} schemas for {len(names)} parameter(s)'
        raise SchemaDefinitionError(msg)

    fields: dict[str, Any] = {}
    try:
        for index, name in enumerate(names):
            annotation, default = _split_fragment(fragments[index] if index < len(fragments) else None)
            fields[f"p{index}"] = (Annotated[annotation, Field(alias=name)], default)
        return create_model(label, __config__=ConfigDict(extra="forbid"), **fields)
    except (TypeError, ValueError, PydanticUserError) as exc:
        raise SchemaDefinitionError(str(exc)) from exc


def _split_fragment(fragment: Any) -> tuple[Any, Any]:
    if fragment is None:
        return Any, None
    if isinstance(fragment, tuple) and len(fragment) == 2:
        return fragment
    return fragment, ...


def build_response_adapter(schema: Any) -> TypeAdapter[Any]:
    """Cria o TypeAdapter do resultado.

    Raises:
        SchemaDefinitionError: Se o pydantic não consegue gerar o schema.
    """
    try:
        return TypeAdapter(schema)
    except (TypeError, ValueError, PydanticUserError) as exc:
        raise SchemaDefinitionError(f'"response_schema" is invalid: {exc}') from exc


def parse_params(
    values: Mapping[str, Any],
    schema: type[BaseModel],
    api_id: str,
    expected_count: int,
) -> dict[str, Any]:
    """Valida valores nomeados e retorna os valores convertidos.

    A contagem é verificada antes do schema: o erro de "chave extra" do
    pydantic é menos claro que uma mensagem dedicada.

    Returns:
        Valores validados indexados pelo nome do parâmetro.

    Raises:
        ValidationFailed: Quantidade ou conteúdo dos parâmetros inválido.
    """
    if len(values) > expected_count:
        msg = (
            f"Incorrect parameters for API {api_id}: expected at most "
            f"{expected_count} parameter(s), received {len(values)}"
        )
        raise ValidationFailed(
            msg,
            details=[{"field": None, "message": msg, "type": "too_many_parameters"}],
        )
    try:
        model = schema.model_validate(dict(values))
    except PydanticValidationError as exc:
        details = _details(exc)
        msg = f"Incorrect parameters for API {api_id}: {_summary(details)}"
        raise ValidationFailed(msg, details=details) from exc
    return {
        info.alias or key: getattr(model, key) for key, info in type(model).model_fields.items()
    }


def validate_params(
    values: Mapping[str, Any],
    schema: type[BaseModel],
    api_id: str,
    expected_count: int,
) -> ValidationFailed | None:
    """Retorna o erro de validação dos parâmetros, ou None se válidos."""
    try:
        parse_params(values, schema, api_id, expected_count)
    except ValidationFailed as exc:
        return exc
    return None


def validate_response(
    result: Any,
    adapter: TypeAdapter[Any],
    api_id: str,
) -> ResponseValidationFailed | None:
    """Retorna o erro de validação do resultado, ou None se conforme."""
    try:
        adapter.validate_python(result)
    except PydanticValidationError as exc:
        details = _details(exc, root=f"{api_id}Result")
        msg = f"Incorrect response for API {api_id}: {_summary(details)}"
        error = ResponseValidationFailed(msg, details=details)
        error.__cause__ = exc
        return error
    return None


def should_sample(sample: int) -> bool:
    """Decide se esta resposta entra na amostra de validação."""
    if sample >= FULL_SAMPLE:
        return True
    if sample <= NO_SAMPLE:
        return False
    return random.uniform(0, FULL_SAMPLE) < sample  # noqa: S311


def _details(exc: PydanticValidationError, root: str = "value") -> list[dict[str, Any]]:
    details = []
    for error in exc.errors(include_url=False):
        location = ".".join(str(part) for part in error["loc"]) or root
        details.append({"field": location, "message": error["msg"], "type": error["type"]})
    return details


def _summary(details: list[dict[str, Any]]) -> str:
    return "; ".join(f'"{item["field"]}" {item["message"]}' for item in details)
