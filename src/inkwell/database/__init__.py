"""
Database module for Inkwell
"""

from .connection import ConfigurationError, Database, to_async_url

__all__ = ["ConfigurationError", "Database", "to_async_url"]
