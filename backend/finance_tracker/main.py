import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .api import api_router
from .errors import StorageError, ValidationError
from .session import SessionRegistry

logger = logging.getLogger(__name__)


def create_app(data_dir: Path | None = None) -> FastAPI:
    """Build the API app, storing books under ``data_dir`` (default from config)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle startup and shutdown events."""
        yield
        # Save and close every open session on shutdown
        app.state.sessions.close_all()

    app = FastAPI(
        title="Finance Tracker",
        description="Personal income, expense and budget tracker",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.sessions = SessionRegistry(data_dir)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("Storage failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    # API routes
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()
