"""Shared utilities: configuration and logging."""

from .config import Config, config
from .logger import setup_from_config, setup_logger

__all__ = ["Config", "config", "setup_from_config", "setup_logger"]
