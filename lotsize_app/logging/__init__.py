"""
Logging configuration and utilities for the position sizing engine.
"""
from .config import configure_logging, get_logger, get_sizing_logger, log_calculation

__all__ = ["configure_logging", "get_logger", "get_sizing_logger", "log_calculation"]
