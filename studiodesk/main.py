"""
FastAPI application factory
"""
import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware

from studiodesk.api.v1 import auth, firms, dashboard, clients, events, tasks, payments, team, quotations
from studiodesk.application.errors import (
    AuthenticationError, PermissionDeniedError, ValidationError, NotFoundError, StorageError,
)
from studiodesk.config import get_settings
from studiodesk.infrastructure.db.session import check_db_connection, init_storage

logger = logging.getLogger(__name__)

INTERNAL_ERROR = StorageError.public_message


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Last line of defence: log the traceback, hide the details from the client"""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return JSONResponse({"message": INTERNAL_ERROR}, status_code=500)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"message": message}, status_code=status_code)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthenticationError)
    def handle_unauthenticated(request: Request, exc: AuthenticationError):
        return _error(401, exc.message)

    @app.exception_handler(PermissionDeniedError)
    def handle_forbidden(request: Request, exc: PermissionDeniedError):
        return _error(403, exc.message)

    @app.exception_handler(ValidationError)
    def handle_invalid(request: Request, exc: ValidationError):
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    def handle_invalid_body(request: Request, exc: RequestValidationError):
        return JSONResponse(
            {"message": ValidationError.public_message, "errors": jsonable_encoder(exc.errors())},
            status_code=400,
        )

    @app.exception_handler(NotFoundError)
    def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(StorageError)
    def handle_storage_error(request: Request, exc: StorageError):
        logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
        return _error(500, INTERNAL_ERROR)

    @app.exception_handler(SQLAlchemyError)
    def handle_database_error(request: Request, exc: SQLAlchemyError):
        logger.error(
            "Database error on %s %s",
            request.method, request.url.path,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return _error(500, INTERNAL_ERROR)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_storage()
    yield


def create_app() -> FastAPI:
    """
    Application factory - builds and configures the FastAPI app

    Returns:
        Configured FastAPI app
    """
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(
        title="StudioDesk",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(ErrorLoggingMiddleware)

    # Middleware
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY,
        session_cookie=settings.SESSION_COOKIE,
        max_age=settings.SESSION_MAX_AGE,
        https_only=settings.SESSION_HTTPS_ONLY,
        same_site="lax",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Routers
    app.include_router(auth.router)
    app.include_router(firms.router)
    app.include_router(dashboard.router)
    app.include_router(clients.router)
    app.include_router(events.router)
    app.include_router(tasks.router)
    app.include_router(payments.router)
    app.include_router(team.router)
    app.include_router(quotations.router)

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready():
        """Readiness check endpoint (checks the configured storage)"""
        check_db_connection()
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "studiodesk.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
