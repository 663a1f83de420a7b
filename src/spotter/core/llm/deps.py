"""Provider clients and their lifespan/request dependencies.

Clients are created once at startup (``build_providers``) and read per
request from ``app.state`` (``get_providers``).  Startup fails with
``MissingConfiguration`` when a required API key is empty.
"""

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from langchain_core.language_models import BaseChatModel
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI

from spotter.configs.config import AppConfig, get_app_config
from spotter.configs.system import LLMConfig
from spotter.core.embedding import EmbeddingClient
from spotter.infra.lifespan import get_app

logger = logging.getLogger(__name__)


@dataclass
class Providers:
    """External model clients shared by every request."""

    chat_model: Runnable
    """Response model: primary provider, secondary as fallback."""

    classifier_model: BaseChatModel
    """Intention model: primary provider only."""

    embedder: EmbeddingClient


def build_chat_model(config: LLMConfig, streaming: bool = True) -> ChatOpenAI:
    """Create a ``ChatOpenAI`` client for an OpenAI-compatible endpoint."""
    return ChatOpenAI(
        base_url=config.endpoint,
        api_key=config.api_key,
        model=config.model_name,
        temperature=config.temperature,
        top_p=config.top_p,
        max_tokens=config.max_tokens,
        timeout=config.model_timeout.total_seconds(),
        max_retries=config.max_retries,
        streaming=streaming,
    )


def build_providers(config: AppConfig) -> Providers:
    primary = build_chat_model(config.llm)
    chat_model: Runnable = primary
    if config.fallback_llm.enabled:
        chat_model = primary.with_fallbacks(
            [build_chat_model(config.fallback_llm)]
        )
        logger.info(
            "Fallback provider enabled (model=%s)", config.fallback_llm.model_name
        )
    else:
        logger.info("No fallback provider configured")

    return Providers(
        chat_model=chat_model,
        classifier_model=build_chat_model(config.llm, streaming=False),
        embedder=EmbeddingClient(config.embedding),
    )


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


async def build_providers_state(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Validate required settings and attach ``Providers`` to ``app.state``."""
    config.check_required()
    providers = build_providers(config)
    app.state.providers = providers
    yield
    await providers.embedder.close()


# ---------------------------------------------------------------------------
# Per-request dependency
# ---------------------------------------------------------------------------


def get_providers(request: Request) -> Providers:
    """FastAPI dependency: reads from ``app.state``."""
    return request.app.state.providers
