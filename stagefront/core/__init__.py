"""Core app configuration, context and database."""

from stagefront.core.config import Settings, get_settings
from stagefront.core.context import AppContext, build_context
from stagefront.core.database import get_db

__all__ = ["AppContext", "Settings", "build_context", "get_db", "get_settings"]
