"""Adaptador FastAPI das rotas declarativas do núcleo de exposição."""

from __future__ import annotations

from api.routes.exposure.endpoint import build_endpoint, read_payload, render_result
from api.routes.exposure.errors import api_error_handler, register_exception_handlers

__all__ = [
    "api_error_handler",
    "build_endpoint",
    "read_payload",
    "register_exception_handlers",
    "render_result",
]
