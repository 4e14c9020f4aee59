"""
Core utilities and configuration for the debug assistant.

This package provides settings loading and logging configuration shared by the
other subpackages.
"""

from debug_assistant.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
