"""
FastAPI application initialization
"""

from contextlib import asynccontextmanager
import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from api.routes import health, datasources, initialize
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.database import Database
from core.exceptions import CatalogException
from core.logging import setup_logging
from core.storage import SQLAlchemyStorage
from ingestion.locks import KeyedLock
from schemas.api import ErrorResponse
import logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build process-wide clients once and release them on shutdown"""
    logger.info("Starting CSV Catalog API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")

    database = Database.from_settings(settings)
    http_client = httpx.AsyncClient(
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        follow_redirects=True
    )

    app.state.storage = SQLAlchemyStorage(database.session_maker)
    app.state.http_client = http_client
    app.state.refresh_locks = KeyedLock()

    try:
        yield
    finally:
        logger.info("Shutting down CSV Catalog API")
        await http_client.aclose()
        await database.dispose()


app = FastAPI(
    title="CSV Catalog API",
    description="Catalog of remote CSV data sources with fetch, refresh, preview and export",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(RequestContextMiddleware)

app.include_router(health.router)
app.include_router(datasources.router)
app.include_router(initialize.router)


@app.exception_handler(CatalogException)
async def catalog_exception_handler(request: Request, exc: CatalogException):
    request_id = getattr(request.state, "request_id", "-")
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"[{request_id}] {exc.classification}: {exc.message}", extra={"error_context": exc.to_dict()})

    body = ErrorResponse(
        error=exc.message,
        classification=exc.classification,
        detail=str(exc.original_exception) if exc.original_exception else None
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    request_id = getattr(request.state, "request_id", "-")
    logger.exception(f"[{request_id}] Unhandled error on {request.method} {request.url.path}")

    body = ErrorResponse(error="Internal server error")
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "CSV Catalog API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "datasources": "/datasources",
            "initialize": "/initialize"
        }
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.API_HOST, port=settings.API_PORT)
