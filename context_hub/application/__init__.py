"""Application layer modules."""

from .engine import ContextHub
from .config import Config, AISettings

__all__ = ["ContextHub", "Config", "AISettings"]
