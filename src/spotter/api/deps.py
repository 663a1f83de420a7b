"""FastAPI dependency type aliases for route modules.

Each alias wraps a single ``get_*`` factory, which tests can replace via
``app.dependency_overrides[get_xxx] = ...``.
"""

from typing import Annotated

from fastapi import Depends

from spotter.configs.config import AppConfig, get_api_config, get_app_config
from spotter.configs.system import APIConfig
from spotter.core.service.deps import get_chat_service
from spotter.core.service.models import ChatService

AppConfigDep = Annotated[AppConfig, Depends(get_app_config)]
APIConfigDep = Annotated[APIConfig, Depends(get_api_config)]
ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
