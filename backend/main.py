# backend/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from bootstrap import Repositories, build_repositories
from config import Settings, settings as default_settings
from domain.clock import Clock, SystemClock
from domain.exceptions import (
    ConflictError,
    DomainException,
    InvalidArgumentError,
    NotFoundError,
    StorageUnavailableError,
)
from utils.log_setup import configure_logging

# Routers
from routes.analytics import router as analytics_router
from routes.categories import router as categories_router
from routes.products import router as products_router

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    NotFoundError: 404,
    ConflictError: 409,
    InvalidArgumentError: 400,
    StorageUnavailableError: 503,
}


def _domain_error_handler(request: Request, exc: DomainException) -> JSONResponse:
    status_code = next(
        (code for cls, code in STATUS_BY_ERROR.items() if isinstance(exc, cls)), 500
    )
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    app.state.repositories.close()


def create_app(
    settings: Optional[Settings] = None,
    repositories: Optional[Repositories] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """Build the API with its storage backend.

    Without explicit repositories the backend comes from settings, so the
    relational default opens (and creates) the database file right here.
    The module-level ``app`` below does this on import; set
    USE_IN_MEMORY_DB=true to import ``main`` without touching disk.
    """
    settings = settings or default_settings
    clock = clock or SystemClock()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_TITLE,
        version=settings.APP_VERSION,
        description="Inventory management API: products and categories on in-memory or relational storage",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Backend is chosen once here; routes only see the repository interfaces
    app.state.clock = clock
    app.state.repositories = repositories or build_repositories(settings, clock)

    # CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DomainException, _domain_error_handler)

    # Router registration (analytics before categories, see routes/analytics.py)
    app.include_router(analytics_router)
    app.include_router(categories_router)
    app.include_router(products_router)

    @app.get("/")
    def read_root():
        return {"message": "Demo Inventory API is running"}

    return app


# Entry point for `uvicorn main:app`; builds storage from settings on import
app = create_app()
