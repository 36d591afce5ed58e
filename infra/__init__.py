# Infrastructure module - Logging and configuration

from .logging import (
    get_logger, configure_logging, reset_logging,
    DispatchContext, get_dispatch_id, generate_dispatch_id
)
from .config import PaletteConfig, ConfigManager, load_config

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "reset_logging",
    "DispatchContext",
    "get_dispatch_id",
    "generate_dispatch_id",
    # Config
    "PaletteConfig",
    "ConfigManager",
    "load_config",
]
