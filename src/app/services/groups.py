"""Inicialização sequencial dos grupos de APIs.

Regras:
- Ordem de declaração é obrigatória: grupos posteriores podem depender de
  estado compartilhado preparado pelos anteriores.
- O init do grupo i+1 só começa depois que o do grupo i terminou.
- Primeira falha aborta tudo (GroupInitError); grupos seguintes não rodam.
- Sem rollback: efeitos dos grupos já inicializados permanecem.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from app.domain.api import ApiMap, Group, NoApis
from app.domain.options import validate_groups
from utils.errors import ConfigurationError, GroupInitError


async def init_groups(
    groups: Sequence[Group],
    group_opts: Mapping[str, Mapping[str, Any]],
    service_logger: logging.Logger,
) -> dict[str, ApiMap]:
    """Inicializa os grupos em ordem e coleta as APIs de cada um.

    Cada init recebe `{"logger": service_logger, **group_opts[nome]}` e pode
    ser síncrono ou assíncrono.

    Args:
        groups: Grupos na ordem de inicialização.
        group_opts: Opções por nome de grupo.
        service_logger: Logger injetado em cada init.

    Returns:
        ApiMap por nome de grupo (na ordem dos grupos). Grupos que não
        expõem nada não aparecem.

    Raises:
        ConfigurationError: Lista de grupos malformada (antes de qualquer init).
        GroupInitError: Primeiro init que falhou.
    """
    errors = validate_groups(groups)
    if errors:
        raise ConfigurationError("Invalid groups: " + "; ".join(errors))

    initialized: dict[str, ApiMap] = {}
    for group in groups:
        opts = {"logger": service_logger, **group_opts.get(group.name, {})}
        try:
            result = group.init(opts)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            service_logger.warning(
                "group_init_failed",
                extra={"group": group.name, "error_type": type(exc).__name__},
            )
            raise GroupInitError(group.name, exc) from exc

        apis = as_api_map(result)
        if apis is None:
            service_logger.debug("group_exposes_nothing", extra={"group": group.name})
            continue
        initialized[group.name] = apis
        service_logger.debug(
            "group_initialized",
            extra={"group": group.name, "apis": list(apis)},
        )
    return initialized


def as_api_map(result: Any) -> ApiMap | None:
    """Interpreta o resultado de init: ApiMap ou None (nada exposto).

    NO_APIS, None, primitivos, sequências e qualquer não-mapping significam
    que o grupo só produz efeitos colaterais.
    """
    if isinstance(result, NoApis) or not isinstance(result, Mapping):
        return None
    return result
