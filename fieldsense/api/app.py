"""FastAPI application with lifespan management."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from fieldsense import __version__
from fieldsense.config.settings import Settings, get_settings
from fieldsense.inference import SharedInfrastructure
from fieldsense.storage import StorageError


def configure_logging(settings: Settings | None = None) -> None:
    """Configure logging for the classifier service."""
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Set level for our package specifically
    logging.getLogger("fieldsense").setLevel(log_level)

    # Quiet noisy third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("filelock").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


def _log_settings(settings: Settings) -> None:
    """Log current settings for debugging."""
    logger.info("=" * 60)
    logger.info("FieldSense Configuration")
    logger.info("=" * 60)
    logger.info("  Log level: %s", settings.log_level)
    logger.info("  Storage: %s", settings.storage_backend)
    if settings.storage_backend == "database":
        logger.info("    Database: %s", settings.database_url.split("@")[-1])
    elif settings.storage_backend == "file":
        logger.info("    Data dir: %s", settings.data_dir)
    logger.info("  Soft match:")
    logger.info("    Learned threshold: %.2f", settings.learned_threshold)
    logger.info("    Network threshold: %.2f", settings.network_threshold)
    logger.info("    Max learned entries: %d", settings.max_learned_entries)
    logger.info("  Training:")
    logger.info("    Epochs: %d", settings.training_epochs)
    logger.info("    Patience: %d", settings.training_patience)
    logger.info("    Batch size: %d", settings.training_batch_size)
    logger.info("    Min samples: %d", settings.training_min_samples)
    logger.info("  Assistant:")
    logger.info("    Enabled: %s", settings.assistant_enabled)
    if settings.assistant_enabled:
        logger.info("    URL: %s", settings.assistant_url)
        logger.info("    Timeout: %.0fs", settings.assistant_timeout)
        logger.info("    Cooldown: %.0fs", settings.assistant_cooldown_seconds)
    logger.info("=" * 60)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open storage and warm the soft-match engine at startup."""
    settings: Settings = app.state.settings
    _log_settings(settings)

    infra = await SharedInfrastructure.create(settings)
    await infra.engine.load()
    app.state.infra = infra

    logger.info(
        "Classifier ready - model %s",
        "loaded" if infra.engine.is_loaded else "not trained",
    )
    yield

    logger.info("Shutting down")
    await infra.close()
    del app.state.infra


async def _storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": f"Storage unavailable: {exc}"},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI application."""
    from fieldsense.api.routes import classify, dataset, health, learned, model

    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="FieldSense",
        description="Form field classification service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_exception_handler(StorageError, _storage_error_handler)

    app.include_router(health.router, tags=["health"])
    app.include_router(classify.router, tags=["classification"])
    app.include_router(learned.router, tags=["learned"])
    app.include_router(dataset.router, tags=["dataset"])
    app.include_router(model.router, tags=["model"])

    return app
