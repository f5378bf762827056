from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import text

from src.scribe.api.middlewares import setup_middlewares
from src.scribe.api.v1.router import api_router
from src.scribe.core.config import get_settings
from src.scribe.core.db import dispose_engine, get_engine, get_session, init_models
from src.scribe.core.exceptions import setup_exception_handlers
from src.scribe.core.logging import get_logger, setup_logging
from src.scribe.core.notifications import Mailer
from src.scribe.core.oauth import build_oauth_providers
from src.scribe.core.security import TokenService

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}", env=settings.app_env)

    if settings.database_auto_create:
        await init_models(get_engine())

    yield

    logger.info("Closing connections...")
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "Registration, login, tokens and OAuth"},
    {"name": "users", "description": "User profile, password and preferences"},
    {"name": "onboarding", "description": "Guided account setup"},
    {"name": "workspaces", "description": "Workspaces, members and invitations"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Identity, onboarding and workspace collaboration API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    # Shared collaborators, built once and injected into request handlers
    app.state.token_service = TokenService(settings)
    app.state.mailer = Mailer(settings)
    app.state.oauth_providers = build_oauth_providers(settings)

    setup_exception_handlers(app)
    setup_middlewares(app, settings)
    app.include_router(api_router)

    @app.get("/health")
    async def health() -> JSONResponse:
        """Health check with database validation."""
        health_status: dict[str, Any] = {"status": "healthy", "database": "unknown"}

        try:
            async with get_session() as session:
                await session.execute(text("SELECT 1"))
            health_status["database"] = "healthy"
        except Exception as e:
            logger.warning("Health check failed", error=str(e))
            health_status["database"] = "unhealthy"
            health_status["status"] = "unhealthy"

        status_code = 200 if health_status["status"] == "healthy" else 503
        return JSONResponse(content=health_status, status_code=status_code)

    return app


app = create_app()


def main() -> None:
    """Serve the API with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "src.scribe.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
