# app/main.py
import uvicorn
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, settings as default_settings
from app.core.database import Database
from app.core.errors import register_exception_handlers
from app.core.logger import setup_logging
from app.core.migrations import Migrator
from app.core.rate_limit import RateLimitMiddleware
from app.api.v1.api import api_router

logger = logging.getLogger(__name__)

# Electron loads the UI from file://
ELECTRON_ORIGIN_REGEX = r"^file://.*$"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    database = Database(settings.database_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Migrate the store before serving; a failed migration aborts startup."""
        setup_logging(settings)
        try:
            await Migrator(database).run()
        except Exception as e:
            logger.critical(f"Failed to initialize database: {str(e)}")
            await database.dispose()
            raise
        logger.info(f"✅ {settings.APP_NAME} started (environment={settings.ENVIRONMENT})")
        logger.info(f"✅ Allowed origins: {settings.allowed_origins}")
        yield
        logger.info("Shutting down, closing database connections")
        await database.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "transactions", "description": "Income and expense records"},
            {"name": "goals", "description": "Savings goals"},
            {"name": "System", "description": "Health and backup operations"},
        ],
    )
    app.state.settings = settings
    app.state.database = database

    register_exception_handlers(app)

    # ------------------------------------------------------------
    # MIDDLEWARE (last added runs first)
    # ------------------------------------------------------------
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        path_prefix="/api",
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        client = request.client.host if request.client else "unknown"
        user_agent = request.headers.get("user-agent", "")
        logger.info(f"Incoming request {request.method} {request.url.path} from {client} ({user_agent})")
        return await call_next(request)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_origin_regex=ELECTRON_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ------------------------------------------------------------
    # ROOT ENDPOINT
    # ------------------------------------------------------------
    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API information"""
        return {
            "message": f"{settings.APP_NAME} is running!",
            "version": settings.VERSION,
        }

    # ------------------------------------------------------------
    # API ROUTES
    # ------------------------------------------------------------
    app.include_router(api_router, prefix="/api")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("app.main:app", host="127.0.0.1", port=default_settings.PORT, reload=False)
