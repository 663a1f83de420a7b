"""LLM and embedding provider clients."""

from .deps import (  # noqa: F401
    Providers,
    build_chat_model,
    build_providers,
    build_providers_state,
    get_providers,
)
