"""
Configuration management for DataGrid Search.

This module provides a split configuration system that separates the grid
protocol defaults from the settings of the Dash demo interface and its
logging.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List

import toml

from .exceptions import ConfigurationError


@dataclass
class GridConfig:
    """Defaults and switches used by the codec and the dispatcher."""

    default_page: int = 1
    default_limit: int = 10

    # Query-string key carrying the last dispatched command tag
    command_param: str = '_DGC'

    # Filter commands move the grid back to the first page
    reset_page_on_filter_change: bool = True

    page_size_options: List[int] = field(default_factory=lambda: [10, 25, 50, 100])

    def validate(self) -> List[str]:
        """Validate the grid configuration and return any errors."""
        errors = []

        if self.default_page < 1:
            errors.append("default_page must be at least 1")

        if self.default_limit < 1:
            errors.append("default_limit must be at least 1")

        if not self.command_param:
            errors.append("command_param cannot be empty")
        elif self.command_param in ('page', 'limit', 'sort', 'order', 'selected'):
            errors.append(f"command_param '{self.command_param}' collides with a reserved key")

        if any(size < 1 for size in self.page_size_options):
            errors.append("page_size_options must all be positive")

        return errors


@dataclass
class UIConfig:
    """Configuration for the Dash interface."""

    title: str = 'DataGrid Search'
    theme: str = 'SLATE'
    location_id: str = 'grid-location'
    table_id: str = 'grid-table'

    def validate(self) -> List[str]:
        """Validate the UI configuration and return any errors."""
        errors = []

        if not self.location_id:
            errors.append("location_id cannot be empty")

        if not self.table_id:
            errors.append("table_id cannot be empty")

        if self.location_id == self.table_id:
            errors.append("location_id and table_id must differ")

        return errors


@dataclass
class LoggingConfig:
    """Logging settings applied by the demo app at startup."""

    level: str = 'INFO'

    # Empty means console only
    log_file: str = ''
    log_dir: str = 'logs'

    # Trace dispatched commands and decode anomalies from the datagrid package
    debug_grid: bool = False

    def validate(self) -> List[str]:
        """Validate the logging configuration and return any errors."""
        errors = []

        if self.level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            errors.append(f"level '{self.level}' is not a logging level")

        if self.log_file and not self.log_dir:
            errors.append("log_dir cannot be empty when log_file is set")

        return errors


@dataclass
class Config:
    """Main configuration class that combines all configuration sections."""

    config_file_path: str = "config.toml"

    grid: GridConfig = field(default_factory=GridConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Load configuration when an instance is created."""
        self.load_config()

    def save_config(self) -> None:
        """Save current configuration to TOML file."""
        config_data = {
            'grid': {
                'default_page': self.grid.default_page,
                'default_limit': self.grid.default_limit,
                'command_param': self.grid.command_param,
                'reset_page_on_filter_change': self.grid.reset_page_on_filter_change,
                'page_size_options': list(self.grid.page_size_options),
            },
            'ui': {
                'title': self.ui.title,
                'theme': self.ui.theme,
                'location_id': self.ui.location_id,
                'table_id': self.ui.table_id,
            },
            'logging': {
                'level': self.log.level,
                'log_file': self.log.log_file,
                'log_dir': self.log.log_dir,
                'debug_grid': self.log.debug_grid,
            }
        }

        try:
            with open(self.config_file_path, 'w') as f:
                toml.dump(config_data, f)
            logging.info(f"Configuration saved to {self.config_file_path}")
        except OSError as e:
            error_msg = f"Error saving configuration: {e}"
            logging.error(error_msg)
            raise ConfigurationError(error_msg, config_file=self.config_file_path)

    def load_config(self) -> None:
        """Load configuration from TOML file, keeping defaults when it is missing."""
        if not os.path.exists(self.config_file_path):
            logging.info(f"{self.config_file_path} not found, using default configuration")
            return

        try:
            with open(self.config_file_path) as f:
                config_data = toml.load(f)
        except (OSError, toml.TomlDecodeError) as e:
            logging.error(f"Error loading {self.config_file_path}: {e}. Using default configuration.")
            return

        if 'grid' in config_data:
            grid_config = config_data['grid']
            self.grid.default_page = grid_config.get('default_page', self.grid.default_page)
            self.grid.default_limit = grid_config.get('default_limit', self.grid.default_limit)
            self.grid.command_param = grid_config.get('command_param', self.grid.command_param)
            self.grid.reset_page_on_filter_change = grid_config.get(
                'reset_page_on_filter_change', self.grid.reset_page_on_filter_change
            )
            self.grid.page_size_options = grid_config.get('page_size_options', self.grid.page_size_options)

        if 'ui' in config_data:
            ui_config = config_data['ui']
            self.ui.title = ui_config.get('title', self.ui.title)
            self.ui.theme = ui_config.get('theme', self.ui.theme)
            self.ui.location_id = ui_config.get('location_id', self.ui.location_id)
            self.ui.table_id = ui_config.get('table_id', self.ui.table_id)

        if 'logging' in config_data:
            log_config = config_data['logging']
            self.log.level = log_config.get('level', self.log.level)
            self.log.log_file = log_config.get('log_file', self.log.log_file)
            self.log.log_dir = log_config.get('log_dir', self.log.log_dir)
            self.log.debug_grid = log_config.get('debug_grid', self.log.debug_grid)

        logging.info(f"Configuration loaded from {self.config_file_path}")

        errors = self.validate()
        if errors:
            logging.warning(f"Configuration issues in {self.config_file_path}: {'; '.join(errors)}")

    def validate(self) -> List[str]:
        """Validate every configuration section."""
        return self.grid.validate() + self.ui.validate() + self.log.validate()
