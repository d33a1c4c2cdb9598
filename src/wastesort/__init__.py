from . import analytics
from . import cache
from . import constants
from . import matching
from . import models
from . import storage
from . import text
from .knowledge import KnowledgeBase
from .resolver import WasteResolver, create_resolver

__all__ = [
    "KnowledgeBase",
    "WasteResolver",
    "analytics",
    "cache",
    "constants",
    "create_resolver",
    "matching",
    "models",
    "storage",
    "text",
]
