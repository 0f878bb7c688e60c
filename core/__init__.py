"""
Core infrastructure module for DataGrid Search.

This module provides the foundational components including configuration
management, logging setup, and custom exceptions.
"""

from .config import GridConfig, UIConfig, LoggingConfig, Config
from .exceptions import DataGridError, ConfigurationError, ValidationError
from .logging_config import setup_logging, setup_logging_from_config

__all__ = [
    # Configuration
    'GridConfig',
    'UIConfig',
    'LoggingConfig',
    'Config',

    # Exceptions
    'DataGridError',
    'ConfigurationError',
    'ValidationError',

    # Logging
    'setup_logging',
    'setup_logging_from_config',
]

__version__ = "1.0.0"
