"""Serviço de exemplo `calc`: usado por `python -m app.app` e pelos testes.

Mostra as três formas de declarar APIs:
- função simples (sem validação)
- Api via decorator `api(...)` com validação de parâmetros e resposta
- API binária (`has_buffer_input`)
"""

from __future__ import annotations

from typing import Any

from app.domain.api import NO_APIS, ApiMap, Group, NoApis, api
from app.domain.options import DEFAULT_BASE_PATH, ServiceOptions

SAMPLE_SERVICE_NAME = "calc-service"
SAMPLE_SERVICE_VERSION = "1.0.0"


def init_calc(options: dict[str, Any]) -> ApiMap:
    """Grupo `calc`: operações aritméticas com validação."""
    precision = options.get("precision")

    def _round(value: float) -> float:
        return round(value, precision) if precision is not None else value

    @api(validate=[float, float], response_schema=float, validate_response=True)
    async def add(a, b):
        """Soma dois números."""
        return _round(a + b)

    @api(validate=[float, float], response_schema=float, validate_response=True)
    def subtract(a, b):
        """Subtrai b de a."""
        return _round(a - b)

    @api(validate=[float, float])
    def divide(a, b):
        """Divide a por b (b = 0 resulta em erro 599)."""
        return _round(a / b)

    def ping():
        return "pong"

    @api(has_buffer_input=True, description="Tamanho do corpo recebido em bytes")
    async def size(data):
        return len(data)

    return {
        "add": add,
        "subtract": subtract,
        "divide": divide,
        "ping": ping,
        "size": size,
    }


def init_audit(options: dict[str, Any]) -> NoApis:
    """Grupo só de efeitos colaterais: registra o início do serviço."""
    options["logger"].info("audit_group_ready", extra={"group": "audit"})
    return NO_APIS


def sample_service_options(base_path: str = DEFAULT_BASE_PATH, precision: int | None = None) -> ServiceOptions:
    """Opções do serviço de exemplo (grupos `audit` e `calc`)."""
    return ServiceOptions(
        name=SAMPLE_SERVICE_NAME,
        version=SAMPLE_SERVICE_VERSION,
        groups=(
            Group(name="audit", init=init_audit),
            Group(name="calc", init=init_calc),
        ),
        group_opts={"calc": {"precision": precision}},
        base_path=base_path,
    )
