"""
Logging setup for DataGrid Search.

Grid modules log through ``logging.getLogger(__name__)``. This module installs
the console and optional file handlers on the root logger and can switch the
``datagrid`` package alone to debug output, which traces every dispatched
command and every tolerated decode anomaly.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .config import LoggingConfig

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Parent logger of every grid module (datagrid.codec, datagrid.dispatcher, ...)
GRID_LOGGER = 'datagrid'

_HANDLER_TAG = '_datagrid_handler'


def _tagged(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_TAG, True)
    return handler


def setup_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    format_string: Optional[str] = None,
    debug_grid: bool = False
) -> None:
    """
    Configure the root logger for the application.

    Calling it again replaces the handlers installed by the previous call and
    leaves handlers added by anyone else (e.g. a test runner) in place.

    Args:
        level: Logging level for the application ('DEBUG', 'INFO', ...)
        log_file: Name of a log file; console only when empty
        log_dir: Directory for the log file (defaults to 'logs')
        format_string: Custom format string (optional)
        debug_grid: Emit debug records from the ``datagrid`` package only
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        if getattr(handler, _HANDLER_TAG, False):
            root_logger.removeHandler(handler)
            handler.close()

    # Handlers pass DEBUG when asked; the logger levels decide what reaches them
    handler_level = logging.DEBUG if debug_grid else numeric_level

    root_logger.addHandler(_tagged(logging.StreamHandler(), handler_level, formatter))

    if log_file:
        log_dir = log_dir or 'logs'
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        log_path = os.path.join(log_dir, log_file)
        root_logger.addHandler(_tagged(logging.FileHandler(log_path), handler_level, formatter))
        logging.info(f"Logging to file: {log_path}")

    logging.getLogger(GRID_LOGGER).setLevel(logging.DEBUG if debug_grid else logging.NOTSET)

    logging.info(f"Logging configured with level: {level}"
                 f"{' (grid debug on)' if debug_grid else ''}")


def setup_logging_from_config(log_config: LoggingConfig, debug_grid: Optional[bool] = None) -> None:
    """Apply the ``[logging]`` section of ``config.toml``; ``debug_grid`` overrides it."""
    setup_logging(
        level=log_config.level,
        log_file=log_config.log_file or None,
        log_dir=log_config.log_dir,
        debug_grid=log_config.debug_grid if debug_grid is None else debug_grid,
    )
