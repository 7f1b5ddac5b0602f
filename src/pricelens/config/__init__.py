"""Configuration module for PriceLens.

Usage:
    from pricelens.config import get_settings

    settings = get_settings()  # Cached singleton
    print(settings.app_name)
"""

from pricelens.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
