"""FastAPI application entry point."""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, FastAPI

from spotter.api.chat import router as chat_router
from spotter.api.exceptions import register_exception_handlers
from spotter.configs.config import get_app_config
from spotter.core.llm import build_providers_state
from spotter.core.service.metrics import instrument_app
from spotter.infra.lifespan import inject
from spotter.infra.logging import setup_logging
from spotter.infra.telemetry import build_telemetry, init_telemetry

logger = logging.getLogger(__name__)


@inject
async def lifespan(
    app: FastAPI,
    _telemetry: Annotated[None, Depends(build_telemetry)],
    _providers: Annotated[None, Depends(build_providers_state)],
) -> AsyncGenerator[None, None]:
    """Startup/shutdown; ``build_telemetry`` pulls in ``build_db``."""
    logger.info("Spotter started")
    yield
    logger.info("Spotter shutting down")


def health() -> dict[str, str]:
    return {"status": "ok"}


def get_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_app_config()
    setup_logging(config.logging)

    app = FastAPI(
        title="Spotter",
        description="Memory-augmented personal trainer chat assistant",
        version="0.1.0",
        lifespan=lifespan,
    )

    init_telemetry(app, config.tracing)
    instrument_app(app, config)
    register_exception_handlers(app)

    app.add_api_route("/health", health, methods=["GET"], tags=["health"])
    app.include_router(chat_router)

    return app


app = get_app()
