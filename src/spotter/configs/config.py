"""Configuration management using pydantic-settings.

**Not a singleton**: each call to ``get_app_config()`` re-reads config
from disk so that edits to the YAML files are picked up without a restart.

Priority order (highest first):

1. Environment variables (``SPOTTER_`` prefix, ``__`` for nesting)
2. ``.env`` dotenv file
3. Static YAML (``configs/config.yaml``)
4. Prompt YAML (``configs/prompt.yml``)
5. Init defaults / field defaults
6. File secrets
"""

from pathlib import Path
from typing import Annotated, Any

import yaml
from fastapi import Depends
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .identity import IdentityConfig
from .prompt import PromptConfig
from .system import (
    APIConfig,
    ChatConfig,
    EmbeddingConfig,
    FallbackLLMConfig,
    LLMConfig,
    LoggingConfig,
    MemoryConfig,
    ThirdPartyConfig,
    TracingConfig,
)

# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

CONFIG_PY_PATH = Path(__file__).resolve()
PROJECT_ROOT = CONFIG_PY_PATH.parent.parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "configs"

STATIC_CONFIG_FILE = CONFIG_DIR / "config.yaml"
PROMPT_CONFIG_FILE = CONFIG_DIR / "prompt.yml"

DOTENV_FILE_PATH = PROJECT_ROOT / ".env"
ENV_DELIMITER = "__"
ENV_PREFIX = "SPOTTER_"

DEFAULT_ENCODING = "utf-8"


class MissingConfiguration(RuntimeError):
    """A setting required to serve requests is empty."""


# ---------------------------------------------------------------------------
# Application config (re-created on every call, not a singleton)
# ---------------------------------------------------------------------------


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=DOTENV_FILE_PATH,
        env_file_encoding=DEFAULT_ENCODING,
        env_nested_delimiter=ENV_DELIMITER,
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
        yaml_file=STATIC_CONFIG_FILE,
        yaml_file_encoding=DEFAULT_ENCODING,
    )

    third_party: ThirdPartyConfig = Field(
        default_factory=ThirdPartyConfig,
        description="Third-party service configurations",
    )

    api: APIConfig = Field(
        default_factory=APIConfig,
        description="API configuration settings",
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="Primary chat model provider",
    )

    fallback_llm: FallbackLLMConfig = Field(
        default_factory=FallbackLLMConfig,
        description="Secondary chat model provider used on primary failure",
    )

    embedding: EmbeddingConfig = Field(
        default_factory=EmbeddingConfig,
        description="OpenAI-compatible embedding endpoint settings",
    )

    memory: MemoryConfig = Field(
        default_factory=MemoryConfig,
        description="Conversational memory retrieval settings",
    )

    chat: ChatConfig = Field(
        default_factory=ChatConfig, description="Configuration for chat handling"
    )

    identity: IdentityConfig = Field(
        default_factory=IdentityConfig,
        description="Assistant identity and client strings",
    )

    prompt: PromptConfig = Field(
        default_factory=PromptConfig,
        description="Classification and response prompt templates",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    tracing: TracingConfig = Field(default_factory=TracingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            _PromptYamlSettingsSource(settings_cls),
            init_settings,
            file_secret_settings,
        )

    def check_required(self) -> None:
        """Raise ``MissingConfiguration`` for empty required settings."""
        required = {
            "SPOTTER_LLM__API_KEY": self.llm.api_key,
            "SPOTTER_EMBEDDING__API_KEY": self.embedding.api_key,
            "SPOTTER_THIRD_PARTY__POSTGRES_URI": self.third_party.postgres_uri,
        }
        for name, value in required.items():
            if not value:
                raise MissingConfiguration(f"{name} is not set")


class _PromptYamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads the prompt.yml file."""

    def __init__(self, settings_cls: type[BaseSettings]) -> None:
        self.settings_cls = settings_cls

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        if not PROMPT_CONFIG_FILE.exists():
            return {}

        with open(PROMPT_CONFIG_FILE, encoding=DEFAULT_ENCODING) as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            return {}
        return {"prompt": data}


def get_app_config() -> AppConfig:
    """Get the application configuration.

    Re-reads ``configs/config.yaml`` and ``configs/prompt.yml`` on every
    call so that edited values are picked up immediately.
    """
    return AppConfig()


def get_api_config(
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> APIConfig:
    return config.api
