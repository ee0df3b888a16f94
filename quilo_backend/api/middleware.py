"""
Request logging middleware and error handlers.

Every error leaves the API as {"success": false, "error", "message"}.
"""
import logging
import time

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from quilo_backend.exceptions import ServiceError, StoreError

logger = logging.getLogger("quilo_backend.http")


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and elapsed time of every HTTP request"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                f"{request.method} {request.url.path} failed after {process_time:.4f}s: {exc}",
                exc_info=True,
            )
            raise

        process_time = time.time() - start_time
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({process_time:.4f}s)")
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


# ============================================================================
# Error Handlers
# ============================================================================


def _error(status_code: int, error: str, message: str, details=None) -> JSONResponse:
    content = {"success": False, "error": error, "message": message}
    if details is not None:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content)


async def service_exception_handler(request: Request, exc: ServiceError):
    """Handle domain errors raised by the services"""
    if exc.http_status >= 500:
        logger.error(f"{exc.error} on {request.url.path}: {exc}")
    else:
        logger.warning(f"{exc.error} on {request.url.path}: {exc}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handle database failures that escaped the services"""
    logger.exception(f"Database error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=StoreError.http_status,
        content=StoreError("Falha ao acessar o banco de dados").to_dict(),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies and parameters"""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return _error(
        422,
        "Requisição inválida",
        "Os dados enviados não são válidos",
        details=exc.errors(),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle routing errors (unknown path, wrong method) and explicit HTTP errors"""
    logger.warning(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _error(404, "Rota não encontrada", f"Rota {request.method} {request.url.path} não existe")
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return _error(405, "Método não permitido", f"Método {request.method} não é aceito em {request.url.path}")
    return _error(exc.status_code, "Erro HTTP", str(exc.detail))


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url.path}: {exc}")
    return _error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ServiceError.error,
        "Ocorreu um erro inesperado",
    )
