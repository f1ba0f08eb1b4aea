"""AI Adoption Assessment service entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ai_adoption_assessment import __version__
from ai_adoption_assessment.adapters.llm_client import LLMClient
from ai_adoption_assessment.api.router import router
from ai_adoption_assessment.database import dispose_database, init_database
from ai_adoption_assessment.errors import register_exception_handlers
from ai_adoption_assessment.observability import configure_logging, get_logger
from ai_adoption_assessment.settings import Settings, get_settings

logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Service settings; the environment-derived settings when omitted.

    Returns:
        Application with the API mounted under /api/v1.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # Startup
        configure_logging(settings.log_level, settings.log_format)
        init_database(settings.database)
        app.state.llm_client = LLMClient(settings.llm)
        logger.info(
            "Service started",
            service=settings.service_name,
            environment=settings.environment,
            model=settings.llm.model,
        )
        yield
        # Shutdown
        await app.state.llm_client.aclose()
        await dispose_database()
        logger.info("Service stopped", service=settings.service_name)

    app = FastAPI(title=settings.service_name, version=__version__, lifespan=lifespan)
    register_exception_handlers(app)

    @app.get("/health", tags=["Health"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "service": settings.service_name, "version": __version__}

    app.include_router(router, prefix="/api/v1")
    return app


app: FastAPI = create_app()
