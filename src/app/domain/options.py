"""Opções de serviço consumidas pelo pipeline de exposição.

Equivalente programático das settings: nome/versão do serviço, grupos
ordenados, opções por grupo e logger injetado.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from app.domain.api import Group, GroupInit
from utils.errors import ConfigurationError

DEFAULT_BASE_PATH = "/api"

# Nome de grupo: identificador, com hífen permitido (também é segmento de path)
GROUP_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


@dataclass(frozen=True)
class ServiceOptions:
    """Definição de um serviço exposto.

    Attributes:
        name: Nome do serviço (obrigatório)
        version: Versão do serviço (obrigatório)
        groups: Grupos de APIs, inicializados na ordem declarada
        group_opts: Opções por grupo, indexadas pelo nome do grupo
        logger: Logger injetado em cada init() de grupo
        init: Atalho para um único grupo (tem precedência sobre groups)
        init_opts: Opções passadas ao atalho init
        base_path: Prefixo de todos os endpoints
    """

    name: str = ""
    version: str = ""
    groups: Sequence[Group] = ()
    group_opts: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    logger: logging.Logger | None = None
    init: GroupInit | None = None
    init_opts: Mapping[str, Any] = field(default_factory=dict)
    base_path: str = DEFAULT_BASE_PATH

    def get_logger(self) -> logging.Logger:
        """Retorna o logger injetado ou um logger nomeado pelo serviço."""
        return self.logger or logging.getLogger(f"exposer.{self.name or 'service'}")

    def resolved_groups(self) -> tuple[tuple[Group, ...], dict[str, Mapping[str, Any]]]:
        """Retorna grupos e opções efetivos.

        Quando `init` é informado, vira um único grupo nomeado pelo serviço,
        cujas opções são `init_opts`.
        """
        if self.init is not None:
            return (Group(name=self.name, init=self.init),), {self.name: dict(self.init_opts)}
        return tuple(self.groups), dict(self.group_opts)

    def validate(self) -> list[str]:
        """Valida opções do serviço e estrutura dos grupos.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        if not isinstance(self.name, str) or not self.name:
            errors.append('"name" is required')
        if not isinstance(self.version, str) or not self.version:
            errors.append('"version" is required')
        if not isinstance(self.base_path, str) or (
            self.base_path and not self.base_path.startswith("/")
        ):
            errors.append(f'"base_path" must start with "/": {self.base_path!r}')
        if self.init is not None and not callable(self.init):
            errors.append('"init" must be callable')
        if not isinstance(self.group_opts, Mapping):
            errors.append('"group_opts" must be a mapping')

        if self.init is None:
            errors.extend(validate_groups(self.groups))
        elif self.name and callable(self.init):
            errors.extend(validate_groups(self.resolved_groups()[0]))
        return errors

    def assert_valid(self) -> None:
        """Levanta ConfigurationError se validate() encontrar erros."""
        errors = self.validate()
        if errors:
            raise ConfigurationError("Invalid service options: " + "; ".join(errors))


def validate_groups(groups: Any) -> list[str]:
    """Validação estrutural da lista de grupos (não do resultado de init)."""
    if isinstance(groups, (str, bytes, Mapping)) or not isinstance(groups, Sequence):
        return ['"groups" must be an array']

    errors: list[str] = []
    seen: set[str] = set()
    for index, group in enumerate(groups):
        name = getattr(group, "name", None)
        init = getattr(group, "init", None)
        if not isinstance(name, str) or not GROUP_NAME_PATTERN.match(name):
            errors.append(f'"groups[{index}].name" must be an identifier, got {name!r}')
        elif name in seen:
            errors.append(f'"groups[{index}].name" is duplicated: {name}')
        else:
            seen.add(name)
        if not callable(init):
            errors.append(f'"groups[{index}].init" must be a function')
    return errors
