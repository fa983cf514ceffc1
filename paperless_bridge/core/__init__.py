"""Core services for the Paperless bridge."""

from .config import Settings, get_settings
from .logging import setup_logging, get_logger
from .storage import ScratchStorage

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "ScratchStorage",
]
