"""Configuration management package for the converter client"""

from .loader import ConfigLoader, get_config_loader

__all__ = [
    "ConfigLoader",
    "get_config_loader",
]
