"""Utility exports for the chartcache package."""

from .hasher import Hasher
from .logger import get_logger, set_level
from .now import Now

__all__ = [
    "Hasher",
    "Now",
    "get_logger",
    "set_level",
]
