"""
Materials Exchange FastAPI Main Application
Entry point for the catalog and inventory REST API
"""
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from materials_exchange.api.v1.api_router import api_router
from materials_exchange.core.config import settings
from materials_exchange.core.database import check_db_connection, init_db
from materials_exchange.core.exceptions import (
    CatalogException, InvalidQueryError, ParseError, PartialReplaceError,
    RecordNotFoundError, ReplaceInProgressError, StoreError
)
from materials_exchange.core.logging import get_logger, setup_logging

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application startup and shutdown tasks

    Configure logging, verify the database and create missing tables
    """
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    try:
        if not check_db_connection():
            logger.error("Failed to connect to database on startup")
            raise RuntimeError("Database connection failed")

        logger.info("Database connection established")
        init_db()
        logger.info("Application startup completed successfully")

    except Exception as e:
        logger.error(f"Startup failed: {e}")
        sys.exit(1)

    yield

    logger.info("Shutting down application")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
    ## Materials Exchange API

    Inventory exchange between the subsidiaries of one group. Each balance
    unit offers its surplus stock on the market and maintains its own slice.

    ### Key Features:
    - **Market**: stock offered by other balance units
    - **My inventory**: the balance unit's own stock
    - **Column filters, sorting and paging** over either view
    - **Bulk replace**: upload a spreadsheet export to replace the whole slice
    - **Profitability**: one value propagated to every row of a balance unit
    """,
    docs_url=settings.DOCS_URL,
    redoc_url=settings.REDOC_URL,
    openapi_url=settings.OPENAPI_URL,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health", tags=["System"])
async def health_check():
    """
    Health check endpoint for monitoring and load balancers

    Returns system status and database connectivity
    """
    try:
        db_status = check_db_connection()

        return {
            "status": "healthy" if db_status else "degraded",
            "version": settings.APP_VERSION,
            "database": "connected" if db_status else "disconnected",
            "debug": settings.DEBUG
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Service unavailable")


# System information endpoint
@app.get("/info", tags=["System"])
async def system_info():
    """Application configuration and catalog settings"""
    return {
        "application": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "api_version": "v1",
        "docs_url": settings.DOCS_URL,
        "page_size_options": list(settings.PAGE_SIZE_OPTIONS),
        "default_page_size": settings.DEFAULT_PAGE_SIZE,
        "bulk_insert_batch_size": settings.BULK_INSERT_BATCH_SIZE,
        "bulk_replace_transactional": settings.BULK_REPLACE_TRANSACTIONAL,
    }


def _error(status_code: int, error: str, exc: Exception, **extra) -> JSONResponse:
    content = {"error": error, "detail": str(exc)}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(ParseError)
async def parse_error_handler(request: Request, exc: ParseError):
    logger.warning(f"Rejected document on {request.url.path}: {exc}")
    return _error(400, "Invalid document", exc, type="parse_error")


@app.exception_handler(InvalidQueryError)
async def invalid_query_handler(request: Request, exc: InvalidQueryError):
    return _error(400, "Invalid query", exc, type="invalid_query")


@app.exception_handler(RecordNotFoundError)
async def not_found_handler(request: Request, exc: RecordNotFoundError):
    return _error(404, "Not found", exc, type="not_found")


@app.exception_handler(ReplaceInProgressError)
async def replace_in_progress_handler(request: Request, exc: ReplaceInProgressError):
    return _error(409, "Replace in progress", exc, type="conflict")


@app.exception_handler(PartialReplaceError)
async def partial_replace_handler(request: Request, exc: PartialReplaceError):
    return _error(
        500, "Inventory replace incomplete", exc,
        type="partial_replace",
        severity=exc.severity,
        tenant_key=exc.tenant_key,
        deleted_count=exc.deleted_count,
        inserted_count=exc.inserted_count,
        expected_count=exc.expected_count,
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    # Store message is passed through unmodified
    return JSONResponse(
        status_code=503,
        content={"error": "Store unavailable", "detail": exc.message, "type": "store_error"},
    )


@app.exception_handler(CatalogException)
async def catalog_exception_handler(request: Request, exc: CatalogException):
    logger.error(f"Unhandled catalog error: {exc}")
    return _error(400, "Request failed", exc, type="catalog_error")


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """
    Global exception handler for unhandled errors

    Args:
        request: FastAPI request object
        exc: Exception that occurred

    Returns:
        JSON error response
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if settings.DEBUG else "An unexpected error occurred",
            "type": "server_error"
        }
    )


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_STR)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "materials_exchange.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
