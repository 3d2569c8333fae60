"""Checksum da superfície exposta.

CRC-32 do JSON compacto da lista pública de APIs (sem schemas nem funções).
Enviado em todas as respostas no header `x-service-crc`: o cliente compara
com o valor obtido na descoberta para detectar mudanças no servidor.
"""

from __future__ import annotations

import json
import zlib
from collections.abc import Iterable
from typing import Any

from app.domain.api import ExposedApi

CHECKSUM_HEADER = "x-service-crc"


def serialize_exposed(exposed: Iterable[ExposedApi | dict[str, Any]]) -> str:
    """Serialização estável (ordem da lista, chaves na ordem do protocolo)."""
    items = [item.to_dict() if isinstance(item, ExposedApi) else item for item in exposed]
    return json.dumps(items, separators=(",", ":"), ensure_ascii=False)


def compute_checksum(exposed: Iterable[ExposedApi | dict[str, Any]]) -> str:
    """Retorna o CRC-32 da lista exposta, em 8 dígitos hexadecimais."""
    data = serialize_exposed(exposed).encode("utf-8")
    return f"{zlib.crc32(data) & 0xFFFFFFFF:08x}"
