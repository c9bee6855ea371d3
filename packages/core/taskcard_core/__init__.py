"""Core services for run configuration and logging."""

from .config import RunConfig, load_config, parse_config
from .logging_setup import JsonFormatter, configure_logging, get_logger

__all__ = [
    "JsonFormatter",
    "RunConfig",
    "configure_logging",
    "get_logger",
    "load_config",
    "parse_config",
]
