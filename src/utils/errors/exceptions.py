"""Exceções de domínio da camada de exposição de APIs.

Dois grupos distintos:
- Erros de registro (startup): abortam a exposição inteira, nenhuma rota
  é registrada.
- Erros por requisição (ApiError): carregam status HTTP e são isolados
  à requisição que os gerou.
"""

from __future__ import annotations

from typing import Any


class ExposerError(Exception):
    """Base para todas as falhas da camada de exposição."""


class ConfigurationError(ExposerError):
    """Opções de serviço, grupos ou metadados de API malformados."""


class InvalidValidationSchema(ConfigurationError):
    """Schema de validação (entrada ou resposta) não pôde ser construído."""

    def __init__(self, api_id: str, group: str, reason: str) -> None:
        self.api_id = api_id
        self.group = group
        self.reason = reason
        super().__init__(f"Invalid exposed API {api_id} (from group {group}): {reason}")


class UnsupportedSignatureError(ConfigurationError):
    """Função exposta com assinatura não representável posicionalmente."""


class GroupInitError(ExposerError):
    """Falha no init() de um grupo, fatal para o startup."""

    def __init__(self, group: str, cause: BaseException) -> None:
        self.group = group
        self.cause = cause
        super().__init__(f"Group {group} failed to initialize: {cause}")


class ApiError(ExposerError):
    """Erro anotado com status HTTP, propagado sem alteração ao chamador.

    Args:
        message: Mensagem legível do erro.
        status_code: Status HTTP (default da subclasse quando omitido).
        details: Diagnósticos estruturados opcionais (ex: campos inválidos).
    """

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error: str | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error is not None:
            self.error = error
        self.details = details or []

    def to_dict(self) -> dict[str, Any]:
        """Serializa para o corpo de resposta de erro."""
        body: dict[str, Any] = {
            "statusCode": self.status_code,
            "error": self.error,
            "message": self.message,
        }
        if self.details:
            body["details"] = self.details
        return body


class ValidationFailed(ApiError):
    """Parâmetros recebidos não respeitam o schema declarado."""

    status_code = 400
    error = "Bad Request"


class PayloadTooLarge(ApiError):
    """Corpo da requisição acima do limite configurado."""

    status_code = 413
    error = "Payload Too Large"


class ResponseValidationFailed(ApiError):
    """Resultado da API viola o próprio responseSchema (bug do servidor)."""

    status_code = 512
    error = "Bad Response"


class HandlerError(ApiError):
    """Falha não anotada lançada pela função exposta."""

    status_code = 599
    error = "Handler Error"


class RemoteApiError(ApiError):
    """Resposta de erro recebida por um cliente remoto."""


class UnknownApiError(ExposerError, LookupError):
    """Cliente chamou uma API que o serviço não expõe."""
