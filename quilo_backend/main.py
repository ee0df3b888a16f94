"""
Main FastAPI application
"""
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from quilo_backend.config import get_settings
from quilo_backend.database import engine, Base, AsyncSessionLocal
from quilo_backend.exceptions import ServiceError
from quilo_backend.seed import seed_demo_data
from quilo_backend.utils.helpers import isoformat_utc
from quilo_backend.utils.logger import get_logger
from quilo_backend import models  # noqa: F401 - registers the tables on Base.metadata
from quilo_backend.api import dishes, judges, recipes, evaluations, ranking, live
from quilo_backend.api.middleware import (
    RequestLoggingMiddleware,
    general_exception_handler,
    http_exception_handler,
    service_exception_handler,
    store_exception_handler,
    validation_exception_handler,
)

settings = get_settings()
logger = get_logger("quilo_backend")

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")

    if settings.SEED_DEMO_DATA:
        async with AsyncSessionLocal() as session:
            await seed_demo_data(session)

    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} ready")
    yield

    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

# Error handlers
app.add_exception_handler(ServiceError, service_exception_handler)
app.add_exception_handler(SQLAlchemyError, store_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include routers
app.include_router(dishes.router, prefix="/api/pratos", tags=["Pratos"])
app.include_router(judges.router, prefix="/api/jurados", tags=["Jurados"])
app.include_router(recipes.router, prefix="/api/receitas", tags=["Receitas"])
app.include_router(evaluations.router, prefix="/api/avaliacoes", tags=["Avaliações"])
app.include_router(ranking.router, prefix="/api", tags=["Ranking"])
app.include_router(live.router, tags=["Live"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/api/health")
async def health_check():
    return {
        "status": "OK",
        "message": f"Servidor {settings.APP_NAME} funcionando",
        "timestamp": isoformat_utc(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "quilo_backend.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
