import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional

from app.core.config import Settings, settings as default_settings
from app.core.errors import NotFoundError, StoreNotInitializedError, UnsupportedExportFormatError
from app.core.logging_config import configure_logging
from app.database import Database
from app.routes.admin.dashboard_routes import router as dashboard_router
from app.routes.auth.user_routes import router as user_router
from app.routes.exam.autofill_routes import router as autofill_router
from app.routes.exam.catalog_routes import router as catalog_router
from app.routes.training.training_routes import router as training_router
from app.routes.workflow.assignment_routes import router as assignment_router
from app.routes.workflow.log_routes import router as log_router
from app.routes.workflow.submission_routes import router as submission_router
from app.services.exam.catalog import ExamCatalog
from app.store.base import DocumentStore
from app.utils.response import error_response

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[DocumentStore] = None) -> FastAPI:
    """
    Build the API application.

    `store` replaces the store DOCUMENT_STORE would select; tests pass an
    in-memory one.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan events for the application"""
        # Startup
        configure_logging(settings.log_level)
        await Database.connect_db(settings, store)
        app.state.catalog = ExamCatalog.from_file(settings.exam_catalog_path)
        logger.info("%s %s started", settings.app_name, settings.app_version)

        yield
        # Shutdown
        await Database.close_db()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Exam data collection API: catalog, assignments, submissions, version history and training data export",
        lifespan=lifespan
    )
    app.state.settings = settings

    # CORS middleware
    # In development, allow all origins for easier testing
    cors_origins = [
        settings.frontend_url,
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins if not settings.debug else ["*"],
        allow_credentials=not settings.debug,  # Can't use credentials with wildcard origin
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StoreNotInitializedError)
    async def store_not_initialized_handler(request: Request, exc: StoreNotInitializedError):
        logger.error("[DB] Request to %s before the store was initialized", request.url.path)
        return error_response(message=str(exc), status_code=503)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return error_response(message=str(exc), status_code=404)

    @app.exception_handler(UnsupportedExportFormatError)
    async def unsupported_format_handler(request: Request, exc: UnsupportedExportFormatError):
        return error_response(message=str(exc), status_code=400)

    # Include routers with /api prefix
    app.include_router(catalog_router, prefix="/api")
    app.include_router(autofill_router, prefix="/api")
    app.include_router(assignment_router, prefix="/api")
    app.include_router(submission_router, prefix="/api")
    app.include_router(training_router, prefix="/api")
    app.include_router(log_router, prefix="/api")
    app.include_router(user_router, prefix="/api")
    app.include_router(dashboard_router, prefix="/api")

    @app.get("/")
    async def read_root():
        """Root endpoint"""
        return {
            "message": f"Welcome to {settings.app_name} API",
            "version": settings.app_version,
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "store": Database.store is not None}

    return app


app = create_app()
