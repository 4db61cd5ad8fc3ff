"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from interview_agent.config import Settings, get_settings
from interview_agent.database import Database
from interview_agent.errors import register_exception_handlers
from interview_agent.routers import auth, interviews
from interview_agent.services.ai_service import InterviewAIService
from interview_agent.utils.rate_limit import FixedWindowRateLimiter, RateLimitMiddleware


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(format=LOG_FORMAT, level=level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings: Settings = app.state.settings

    # Startup
    database: Database = app.state.database
    if await database.connect():
        try:
            await database.ensure_indexes()
        except PyMongoError as exc:
            logger.warning("⚠️ Could not create indexes: %s", exc)

    ai_service: InterviewAIService = app.state.ai_service
    if settings.validate_openai_on_startup:
        await ai_service.validate_api_key()

    logger.info("🚀 %s %s started (%s)", settings.app_name, settings.app_version, settings.environment)
    yield

    # Shutdown
    await ai_service.close()
    await database.disconnect()


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    ai_service: Optional[InterviewAIService] = None,
) -> FastAPI:
    """Build the application with explicitly constructed collaborators."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database or Database(settings)
    app.state.ai_service = ai_service or InterviewAIService(settings)

    register_exception_handlers(app, expose_details=not settings.is_production)

    # Middleware added last runs first, so CORS wraps the rate limiter
    app.add_middleware(
        RateLimitMiddleware,
        limiter=FixedWindowRateLimiter(settings.rate_limit_max_requests, settings.rate_limit_window_seconds),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(auth.router)
    app.include_router(interviews.router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "success": True,
            "message": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check():
        """Liveness plus dependency status."""
        try:
            db_health = await app.state.database.check_health()
        except Exception as exc:
            logger.exception("Health check failed")
            return JSONResponse(
                status_code=500,
                content={"success": False, "message": "Health check failed", "error": str(exc)},
            )

        return {
            "success": True,
            "message": "AI Interview Agent API is running",
            "timestamp": datetime.utcnow().isoformat(),
            "environment": settings.environment,
            "services": {
                "database": db_health,
                "openai": "configured" if app.state.ai_service.is_configured else "not configured",
            },
        }

    return app


def run():
    """Console entry point: ``interview-agent-api``."""
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
