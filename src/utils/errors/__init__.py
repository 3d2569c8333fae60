"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    ApiError,
    ConfigurationError,
    ExposerError,
    GroupInitError,
    HandlerError,
    InvalidValidationSchema,
    PayloadTooLarge,
    RemoteApiError,
    ResponseValidationFailed,
    UnknownApiError,
    UnsupportedSignatureError,
    ValidationFailed,
)

__all__ = [
    "ApiError",
    "ConfigurationError",
    "ExposerError",
    "GroupInitError",
    "HandlerError",
    "InvalidValidationSchema",
    "PayloadTooLarge",
    "RemoteApiError",
    "ResponseValidationFailed",
    "UnknownApiError",
    "UnsupportedSignatureError",
    "ValidationFailed",
]
