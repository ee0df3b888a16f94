"""
Service-level exceptions. Each carries the HTTP status its handler responds with
and the short `error` label used in the JSON envelope.
"""
from typing import Any, Mapping, Optional


class ServiceError(Exception):
    """Base class for errors raised by the service layer"""

    http_status = 500
    error = "Erro interno do servidor"

    def __init__(self, message: str = "", details: Optional[Mapping[str, Any]] = None):
        super().__init__(message or self.error)
        self.message = message or self.error
        self.details = details

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {
            "success": False,
            "error": self.error,
            "message": self.message,
        }
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(ServiceError):
    """Raised when input is malformed or out of range (unknown criterion, bad score)"""

    http_status = 400
    error = "Erro de validação"


class NotFoundError(ServiceError):
    """Raised when a referenced dish, judge, recipe or evaluation does not exist"""

    http_status = 404
    error = "Não encontrado"


class ConflictError(ServiceError):
    """Raised when a write collides with a uniqueness rule (e.g. duplicate judge email)"""

    http_status = 409
    error = "Conflito"


class StoreError(ServiceError):
    """Raised when the underlying persistence layer fails"""

    http_status = 500
    error = "Erro no banco de dados"
