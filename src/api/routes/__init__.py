"""Rotas HTTP da API: adaptador FastAPI da camada de exposição.

Responsabilidades:
- Registrar as rotas declarativas produzidas pelo núcleo
- Ler o corpo da requisição (JSON, bytes, stream)
- Escrever respostas (JSON, octet-stream, chunked) com o checksum
- Traduzir ApiError em respostas de erro

Agregação:
- router.py: FastApiRouter (RouterProtocol)
- exposure/: endpoint genérico e handlers de erro
"""

from __future__ import annotations

from api.routes.router import FastApiRouter

__all__ = ["FastApiRouter"]
