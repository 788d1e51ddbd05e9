"""Main web application - FastAPI server with auth, API, actions and dashboard pages."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core import ChangeFeed, ViewCache
from ..shared.db import Database
from ..shared.redis import RedisClient
from .api import router as api_router, actions_router
from .auth.dependencies import LoginRequired
from .config import WebConfig, config as default_config
from .pages import router as pages_router

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    config: WebConfig = app.state.config

    logger.info("=" * 60)
    logger.info("  SmartSchool Sentinel - Web Service")
    logger.info("=" * 60)

    # Validate configuration; raises ConfigurationError on missing values
    for warning in config.validate():
        logger.warning("[WARN] %s", warning)

    logger.info("[SETUP] Initializing database connection...")
    app.state.db = Database.from_config(config)
    app.state.view_cache = ViewCache(
        ttl=config.VIEW_CACHE_TTL, max_entries=config.VIEW_CACHE_SIZE,
    )

    redis_client = RedisClient(config.REDIS_URL) if config.REDIS_URL else None
    if redis_client is not None:
        logger.info("[SETUP] Checking Redis connection...")
        if await redis_client.connect():
            logger.info("[SETUP] Redis connected")
        else:
            logger.warning("[WARN] Change notices will stay in this process")

    listener = None
    if redis_client is not None and redis_client.connected:
        app.state.changes = ChangeFeed(app.state.view_cache, publisher=redis_client.publisher())
        listener = asyncio.create_task(app.state.changes.listen(redis_client.subscriber()))
    else:
        app.state.changes = ChangeFeed(app.state.view_cache)

    logger.info("[SERVER] Starting on port %s...", config.PORT)
    logger.info("[SERVER] Production mode: %s", config.is_production())

    yield  # Application runs here

    logger.info("[SHUTDOWN] Closing connections...")
    if listener is not None:
        listener.cancel()
        try:
            await listener
        except asyncio.CancelledError:
            pass
    if redis_client is not None:
        await redis_client.close()
    await app.state.db.close()
    logger.info("[SHUTDOWN] Complete")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(p) for p in error.get('loc', ()))}: {error.get('msg')}"
        for error in errors
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message or "Invalid request"},
    )


async def backend_exception_handler(request: Request, exc: Exception):
    logger.exception("Request failed: %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc) or exc.__class__.__name__},
    )


async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse(url=request.app.state.config.LOGIN_URL, status_code=302)


def create_app(config: Optional[WebConfig] = None) -> FastAPI:
    """Build the application around a configuration."""
    config = config or default_config

    app = FastAPI(
        title="SmartSchool Sentinel API",
        description="School operations dashboard: attendance, gate, leave and anomalies",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs" if not config.is_production() else None,
        redoc_url="/redoc" if not config.is_production() else None,
    )
    app.state.config = config

    # CORS middleware (for development)
    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, backend_exception_handler)
    app.add_exception_handler(Exception, backend_exception_handler)
    app.add_exception_handler(LoginRequired, login_required_handler)

    app.include_router(api_router)
    app.include_router(actions_router, prefix="/actions", tags=["actions"])
    app.include_router(pages_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "web",
            "version": VERSION,
        }

    @app.get("/", include_in_schema=False)
    async def root():
        """Redirect to the dashboard; it sends unauthenticated callers to login."""
        return RedirectResponse(url="/dashboard", status_code=302)

    return app


app = create_app()


def main():
    """Main entry point."""
    import uvicorn

    logging.basicConfig(
        level=default_config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "sentinel.web.main:app",
        host=default_config.HOST,
        port=default_config.PORT,
        reload=not default_config.is_production(),
        log_level=default_config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
