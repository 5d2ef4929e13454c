"""Application configuration module.

- **settings.py**: Environment-based settings (Pydantic BaseSettings)
  - Database URL, store timing, rest timer persistence
  - Loaded from .env file via pydantic-settings
"""
from gymbo.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
