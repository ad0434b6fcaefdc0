from . import exports
from .storage import JSONFileStorage, MemoryStorage

__all__ = ["exports", "JSONFileStorage", "MemoryStorage"]
