"""Protocolos e contratos do core da aplicação."""

from .router import (
    DEFAULT_MAX_BYTES,
    ApiResult,
    RequestOptions,
    RouteHandler,
    RouterProtocol,
    RouteSpec,
)

__all__ = [
    "DEFAULT_MAX_BYTES",
    "ApiResult",
    "RequestOptions",
    "RouteHandler",
    "RouteSpec",
    "RouterProtocol",
]
