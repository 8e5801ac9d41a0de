"""Core services: bitmap import pipelines, settings, and logging."""

from .adapter import BitmapAdapter
from .config import AppConfig, load_config, save_config
from .logging_setup import configure_logging, get_logger

__all__ = [
    "AppConfig",
    "BitmapAdapter",
    "configure_logging",
    "get_logger",
    "load_config",
    "save_config",
]
