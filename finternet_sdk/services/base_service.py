"""
Base service class for Finternet SDK services.

This module provides a base class for services that build and submit
transactions, with shared logging and timing helpers.
"""

import logging
import time
from typing import Optional


class BaseService:
    """
    Base service class with common functionality.

    This class provides:
    - A per-service logger
    - Timing of long-running operations
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the base service.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(f"finternet_sdk.services.{self.__class__.__name__}")

    def log_timing(self, operation_name: str) -> "TimingContextManager":
        """
        Create a context manager to log timing information.

        Args:
            operation_name: Name of the operation

        Returns:
            Timing context manager
        """
        return TimingContextManager(operation_name, self.logger)


class TimingContextManager:
    """Context manager to log timing information."""

    def __init__(self, operation_name: str, logger: logging.Logger):
        self.operation_name = operation_name
        self.logger = logger
        self.start_time = 0.0

    async def __aenter__(self) -> "TimingContextManager":
        self.start_time = time.monotonic()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        elapsed = time.monotonic() - self.start_time
        if exc_val is not None:
            self.logger.error(
                f"{self.operation_name} failed after {elapsed:.2f}s: {str(exc_val)}"
            )
        else:
            self.logger.info(f"{self.operation_name} completed in {elapsed:.2f}s")
