"""Domain models for the chat service layer.

Re-exports every public symbol so callers can write
``from spotter.core.service.models import Chat``.
"""

from .chat import *  # noqa: F401, F403
from .constants import *  # noqa: F401, F403
from .events import *  # noqa: F401, F403
from .service import *  # noqa: F401, F403
