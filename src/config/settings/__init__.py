"""Agregador de settings do Exposer.

Re-exporta settings e funções de carregamento.
"""

from __future__ import annotations

from config.settings.server import (
    DEFAULT_MAX_PAYLOAD_BYTES,
    DEFAULT_PORT,
    Environment,
    ServerSettings,
    get_server_settings,
)

__all__ = [
    "DEFAULT_MAX_PAYLOAD_BYTES",
    "DEFAULT_PORT",
    "Environment",
    "ServerSettings",
    "get_server_settings",
]
