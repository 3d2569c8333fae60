"""Construção dos descritores das APIs expostas.

Para cada (grupo, id, função) produzido pelos grupos:
- nomes de parâmetros (explícitos ou por introspecção)
- path `{base_path}/{grupo}/{id}`
- schema de payload (apenas se houver validate E parâmetros)
- schema de resposta (documentação, ou validação se validate_response)

Qualquer metadado inválido aborta o registro inteiro (InvalidValidationSchema):
schema quebrado é defeito de configuração, não condição de runtime.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from app.domain.api import Api, ApiMap, Descriptor, Exposure
from app.domain.options import DEFAULT_BASE_PATH, ServiceOptions
from app.services.checksum import compute_checksum
from app.services.groups import init_groups
from app.services.introspection import param_names
from app.services.validation import SchemaDefinitionError, build_response_adapter, build_schema
from utils.errors import InvalidValidationSchema


def as_api(value: Api | Callable[..., Any]) -> Api:
    """Normaliza funções simples para Api sem metadados."""
    if isinstance(value, Api):
        return value
    return Api(fn=value)


def build_descriptor(
    group: str,
    api_id: str,
    value: Api | Callable[..., Any],
    base_path: str = DEFAULT_BASE_PATH,
) -> Descriptor:
    """Cria o descritor de uma API.

    Raises:
        InvalidValidationSchema: Metadados inconsistentes ou schema inválido.
        UnsupportedSignatureError: Assinatura com parâmetros variádicos.
    """
    if not callable(value):
        raise InvalidValidationSchema(api_id, group, f"must be a function, got {type(value).__name__}")
    exposed_api = as_api(value)
    errors = exposed_api.metadata_errors()
    if errors:
        raise InvalidValidationSchema(api_id, group, "; ".join(errors))

    params = tuple(
        exposed_api.params if exposed_api.params is not None else param_names(exposed_api.fn)
    )

    payload_schema = None
    # funções sem parâmetros nunca validam payload, mesmo com validate declarado
    if exposed_api.validate is not None and params:
        try:
            payload_schema = build_schema(exposed_api.validate, params, label=api_id)
        except SchemaDefinitionError as exc:
            raise InvalidValidationSchema(api_id, group, str(exc)) from exc

    response_schema = None
    if exposed_api.response_schema is not None:
        try:
            response_schema = build_response_adapter(exposed_api.response_schema)
        except SchemaDefinitionError as exc:
            raise InvalidValidationSchema(api_id, group, str(exc)) from exc

    return Descriptor(
        group=group,
        id=api_id,
        path=f"{base_path}/{group}/{api_id}",
        params=params,
        api=exposed_api,
        has_buffer_input=exposed_api.has_buffer_input,
        has_stream_input=exposed_api.has_stream_input,
        payload_schema=payload_schema,
        response_schema=response_schema,
        validate_response=bool(response_schema is not None and exposed_api.validate_response),
    )


def build_descriptors(
    initialized: Mapping[str, ApiMap],
    base_path: str = DEFAULT_BASE_PATH,
) -> list[Descriptor]:
    """Cria descritores para todas as APIs, na ordem grupo → id."""
    return [
        build_descriptor(group, api_id, value, base_path)
        for group, apis in initialized.items()
        for api_id, value in apis.items()
    ]


async def extract_apis(options: ServiceOptions) -> Exposure:
    """Inicializa os grupos e produz descritores, lista pública e checksum.

    Args:
        options: Opções do serviço (validadas antes de qualquer grupo rodar).

    Returns:
        Exposure com descritores, APIs públicas, checksum e logger.

    Raises:
        ConfigurationError: Opções inválidas ou metadados de API inválidos.
        GroupInitError: Falha no init de algum grupo.
    """
    options.assert_valid()
    service_logger = options.get_logger()
    groups, group_opts = options.resolved_groups()

    initialized = await init_groups(groups, group_opts, service_logger)
    descriptors = build_descriptors(initialized, options.base_path)
    exposed = tuple(descriptor.exposed() for descriptor in descriptors)
    checksum = compute_checksum(exposed)

    for descriptor in descriptors:
        service_logger.debug(
            "api_exposed",
            extra={"path": descriptor.path, "method": descriptor.method},
        )
    service_logger.info(
        "apis_extracted",
        extra={"api_count": len(descriptors), "checksum": checksum},
    )
    return Exposure(
        descriptors=tuple(descriptors),
        exposed=exposed,
        checksum=checksum,
        logger=service_logger,
    )
