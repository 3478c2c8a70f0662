import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sanakota.config import Settings, configure_logging, get_settings
from sanakota.database import check_connection, create_engine, create_session_maker, init_db
from sanakota.exceptions import StoreError, ValidationError, WordNotFoundError
from sanakota.routers import words

logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    content = {"success": False, "error": error}
    if message is not None:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc), str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", details)

    @app.exception_handler(WordNotFoundError)
    async def not_found_handler(request: Request, exc: WordNotFoundError):
        return error_response(status.HTTP_404_NOT_FOUND, "Word not found", str(exc))

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error", str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return JSONResponse(
                status_code=exc.status_code,
                content={"success": False, "error": "Route not found", "path": request.url.path},
            )
        return error_response(exc.status_code, str(exc.detail))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one explicit settings object."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the engine and schema on startup, dispose on shutdown."""
        configure_logging(settings.LOG_LEVEL)
        engine = create_engine(settings)
        await init_db(engine)
        app.state.engine = engine
        app.state.session_maker = create_session_maker(engine)
        app.state.started_at = time.monotonic()
        logger.info("Sanakota API started (database: %s)", engine.url.render_as_string())
        yield
        await engine.dispose()

    app = FastAPI(
        title="Sanakota API",
        description="Finnish dictionary: words, translations, inflections and synonyms",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(words.router, prefix="/api", tags=["words"])

    @app.get("/")
    async def root():
        return {
            "message": "Welcome to Sanakota Backend API",
            "status": "Server is running successfully",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": {
                "health": "/health",
                "words": "/api/words",
                "search": "/api/words/search",
                "stats": "/api/words/stats",
            },
        }

    @app.get("/health")
    async def health_check(request: Request):
        connected = await check_connection(request.app.state.engine)
        return {
            "status": "OK",
            "uptime": time.monotonic() - request.app.state.started_at,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": "Connected" if connected else "Unavailable",
        }

    return app


# uvicorn sanakota.main:app
app = create_app()
