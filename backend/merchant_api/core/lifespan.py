"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from merchant_api.seed import seed
from shared.config.logging import merchant_api_logger as logger, setup_logging
from shared.config.settings import settings
from shared.infrastructure.store import get_entity_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    setup_logging()

    # Validate production settings before startup
    config_errors = settings.validate_production_settings()
    if config_errors:
        for error in config_errors:
            logger.error("Configuration error", error=error)
        if settings.environment == "production":
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(config_errors)}. "
                "Server will not start with insecure configuration."
            )

    logger.info(
        "Starting merchant API",
        port=settings.api_port,
        env=settings.environment,
        data_dir=str(settings.data_dir),
    )

    store = get_entity_store()
    settings.reports_dir.mkdir(parents=True, exist_ok=True)

    if settings.seed_sample_data:
        seed(store)

    yield

    logger.info("Shutting down merchant API")
