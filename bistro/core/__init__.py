"""
Core module initialization.
Exports configuration.
"""

from bistro.core.config import get_settings, Settings, EnvironmentMode

__all__ = ["get_settings", "Settings", "EnvironmentMode"]
