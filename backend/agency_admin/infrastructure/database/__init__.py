from .base import Base
from .session import build_session_factory, get_async_url, get_engine, get_session_factory
from .models import TABLE_MODELS

__all__ = [
    "Base",
    "build_session_factory",
    "get_async_url",
    "get_engine",
    "get_session_factory",
    "TABLE_MODELS",
]
