"""Formatter JSON dos logs (python-json-logger).

Campos de todo log:
asctime, level, logger, message, correlation_id, service
+ qualquer chave passada em `extra` (group, api, path, checksum, ...).
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Ordem fixa: facilita leitura em terminal
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

# Nomes padronizados no JSON final
FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {"asctime": "...", "level": "DEBUG", "logger": "exposer.calc",
         "message": "api_exposed", "correlation_id": "", "service": "exposer",
         "path": "/api/calc/add", "method": "POST"}
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)
