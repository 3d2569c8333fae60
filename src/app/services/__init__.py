"""Serviços de aplicação: pipeline de exposição.

Unidades reutilizáveis (sem IO de rede):
- introspection: nomes de parâmetros declarados
- marshalling: lista posicional ↔ objeto nomeado
- validation: schemas pydantic de parâmetros e respostas
- groups: inicialização sequencial dos grupos
- descriptors: descritores e extração das APIs
- checksum: fingerprint da superfície exposta
- handler: execução de uma API por requisição
"""

from app.services.checksum import CHECKSUM_HEADER, compute_checksum
from app.services.descriptors import build_descriptor, build_descriptors, extract_apis
from app.services.groups import init_groups
from app.services.handler import RequestHandler, build_routes
from app.services.introspection import param_names
from app.services.marshalling import to_named_object, to_positional
from app.services.validation import build_schema, validate_params, validate_response

__all__ = [
    "CHECKSUM_HEADER",
    "RequestHandler",
    "build_descriptor",
    "build_descriptors",
    "build_routes",
    "build_schema",
    "compute_checksum",
    "extract_apis",
    "init_groups",
    "param_names",
    "to_named_object",
    "to_positional",
    "validate_params",
    "validate_response",
]
