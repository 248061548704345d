"""Logging setup for GoDev."""

from godev.core.logger.logger import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
