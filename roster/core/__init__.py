"""Core app configuration, database and error handling."""

from roster.core.config import Settings, get_settings
from roster.core.database import get_db

__all__ = ["Settings", "get_settings", "get_db"]
