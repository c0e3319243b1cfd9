"""
FastAPI main application for the Bookshelf Review API.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from api.config import APIConfig, config as default_api_config
from api.models import ErrorResponse
from api.routes import router
from catalog.errors import AuthError, CatalogError
from catalog.store import BookStore, UserStore
from utilities.config import AppConfig, config as default_app_config
from utilities.logger import setup_logging

# Setup logging
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    app_config: AppConfig = app.state.config
    setup_logging(
        log_level=app_config.log_level,
        log_format=app_config.log_format,
        log_file=app_config.get_log_file_path(),
        debug=app_config.debug
    )
    logger.info("Starting Bookshelf Review API", books=app.state.book_store.count())

    yield

    logger.info("Shutting down Bookshelf Review API")


def _error_response(status_code: int, error: str, detail: Optional[str] = None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail, status_code=status_code).model_dump(),
        headers=headers
    )


def create_app(
    app_config: Optional[AppConfig] = None,
    api_config: Optional[APIConfig] = None,
    book_store: Optional[BookStore] = None,
    user_store: Optional[UserStore] = None,
) -> FastAPI:
    """
    Build the application with its own stores.

    Args:
        app_config: Core settings (token signing, hashing, logging)
        api_config: HTTP surface settings (title, CORS)
        book_store: Catalog to serve; a freshly seeded one when omitted
        user_store: User registry; an empty one when omitted

    Returns:
        Configured FastAPI application
    """
    app_config = app_config or default_app_config
    api_config = api_config or default_api_config

    app = FastAPI(
        title=api_config.api_title,
        description=api_config.api_description,
        version=api_config.api_version,
        lifespan=lifespan
    )

    app.state.config = app_config
    app.state.book_store = book_store if book_store is not None else BookStore()
    app.state.user_store = (
        user_store if user_store is not None
        else UserStore(password_hash_iterations=app_config.password_hash_iterations)
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.cors_origins,
        allow_credentials=api_config.cors_allow_credentials,
        allow_methods=api_config.cors_allow_methods,
        allow_headers=api_config.cors_allow_headers,
    )

    # Exception handlers
    @app.exception_handler(CatalogError)
    async def catalog_exception_handler(request: Request, exc: CatalogError):
        """Handle domain errors raised by the stores and the auth gate."""
        logger.warning(
            "Request rejected",
            error=exc.message,
            error_type=type(exc).__name__,
            status_code=exc.status_code,
            path=request.url.path
        )
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
        return _error_response(exc.status_code, exc.message, headers=headers)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions."""
        return _error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report malformed requests as 400."""
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request",
            detail="; ".join(err.get("msg", "") for err in exc.errors())
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            detail=str(exc) if app_config.debug or api_config.debug else None
        )

    app.include_router(router)
    return app


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=default_api_config.host,
        port=default_api_config.port,
        reload=True,
        log_level="info"
    )
