"""Utility modules for common operations."""

from .retry_manager import RetryManager, create_retry_manager

__all__ = [
    "RetryManager",
    "create_retry_manager",
]
