"""Settings do servidor HTTP de exposição.

Configurações de processo (host, porta, logs, limites). A definição do
serviço (nome, versão, grupos) é programática: ver app.domain.options.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]

DEFAULT_PORT = 3000
DEFAULT_MAX_PAYLOAD_BYTES = 1024 * 1024 * 1024


@dataclass(frozen=True)
class ServerSettings:
    """Configurações do servidor.

    Attributes:
        environment: Ambiente de execução (development|staging|production)
        service_name: Nome do serviço para logs
        host: Interface de escuta
        port: Porta de escuta (0 = primeira disponível)
        log_level: Nível de log (DEBUG, INFO, ...)
        base_path: Prefixo dos endpoints expostos
        max_payload_bytes: Tamanho máximo do corpo das requisições
    """

    environment: Environment = "development"
    service_name: str = "exposer"
    host: str = "0.0.0.0"  # noqa: S104
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    base_path: str = "/api"
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Valida configurações do servidor.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        if not 0 <= self.port <= 65535:
            errors.append(f"EXPOSER_PORT inválida: {self.port}")

        if self.base_path and not self.base_path.startswith("/"):
            errors.append(f"EXPOSER_BASE_PATH deve começar com '/': {self.base_path}")

        if self.max_payload_bytes <= 0:
            errors.append("EXPOSER_MAX_PAYLOAD_BYTES deve ser positivo")

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")

        return errors


def _parse_environment(env_str: str) -> Environment:
    """Converte string de ambiente para tipo Environment."""
    env_lower = env_str.lower()
    if env_lower in ("production", "prod"):
        return "production"
    if env_lower in ("staging", "stage"):
        return "staging"
    return "development"


def _parse_int(raw: str | None, default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return -1


def _load_server_from_env() -> ServerSettings:
    """Carrega ServerSettings de variáveis de ambiente."""
    return ServerSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "exposer"),
        host=os.getenv("EXPOSER_HOST", "0.0.0.0"),  # noqa: S104
        port=_parse_int(os.getenv("EXPOSER_PORT"), DEFAULT_PORT),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        base_path=os.getenv("EXPOSER_BASE_PATH", "/api").rstrip("/"),
        max_payload_bytes=_parse_int(
            os.getenv("EXPOSER_MAX_PAYLOAD_BYTES"),
            DEFAULT_MAX_PAYLOAD_BYTES,
        ),
    )


@lru_cache(maxsize=1)
def get_server_settings() -> ServerSettings:
    """Retorna instância cacheada de ServerSettings."""
    return _load_server_from_env()
