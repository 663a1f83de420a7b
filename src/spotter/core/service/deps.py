"""FastAPI dependency factory for the chat service.

Provider clients come from ``app.state`` (created in the lifespan);
``get_chat_service`` assembles a service per request from them.
"""

from typing import Annotated

from fastapi import Depends

from spotter.configs.config import AppConfig, get_app_config
from spotter.core.llm import Providers, get_providers
from spotter.infra.db import MemoryRepository, get_memory_repository

from .chat_service import MemoryChatService
from .intention import IntentionClassifier
from .models import ChatService
from .response import RESPONDERS


def get_chat_service(
    providers: Annotated[Providers, Depends(get_providers)],
    memory: Annotated[MemoryRepository, Depends(get_memory_repository)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> ChatService:
    """Create a configured chat service per request."""
    classifier = IntentionClassifier(
        providers.classifier_model, config.prompt, config.identity
    )
    responders = {
        intention: responder_cls(providers.chat_model, config)
        for intention, responder_cls in RESPONDERS.items()
    }
    return MemoryChatService(
        embedder=providers.embedder,
        memory=memory,
        classifier=classifier,
        responders=responders,
        config=config,
    )
