"""Configuration files (YAML) and the helper that loads them."""

from .manager import ConfigManager

__all__ = [
    "ConfigManager",
]
