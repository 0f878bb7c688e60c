"""
Callback functions for the grid page.

This package contains the Dash callbacks organized by functionality:
- table: rendering from the URL and turning table events into grid commands
"""

import time
import logging
import weakref
from typing import Optional, Sequence

from core.config import GridConfig, UIConfig
from datagrid.state.models import Column

from . import table

# Apps that already carry the grid callbacks; Dash rejects duplicate outputs
_registered_apps = weakref.WeakSet()


def _callback_count(app) -> int:
    # Dash stores callbacks in different places depending on version
    if hasattr(app, 'callback_map'):
        return len(app.callback_map)
    if hasattr(app, '_callback_list'):
        return len(app._callback_list)
    return 0


def register_all_callbacks(app, columns: Sequence[Column], load_rows,
                           filter_keys: Optional[Sequence[str]] = None,
                           config: Optional[GridConfig] = None,
                           ui_config: Optional[UIConfig] = None,
                           verbose: bool = True) -> int:
    """
    Register the grid callbacks with the Dash app, once per app.

    Args:
        app: The Dash application instance
        columns: Column schema of the grid
        load_rows: Host function returning ``(rows, total)`` for a derived state
        filter_keys: Keys of the filter dropdowns in layout order
        config: Grid defaults
        ui_config: Component ids
        verbose: Whether to print registration information

    Returns:
        Number of callbacks added (0 when the app was already registered)

    Raises:
        ValueError: If no app is given
        RuntimeError: If Dash rejects the callbacks
    """
    if not app:
        raise ValueError("Valid Dash app instance required for callback registration")

    if app in _registered_apps:
        logging.info("Grid callbacks already registered for this app instance")
        if verbose:
            print("Grid callbacks already registered for this app instance")
        return 0

    start_time = time.time()
    callbacks_before = _callback_count(app)

    try:
        table.register_callbacks(app, columns, load_rows, filter_keys=filter_keys,
                                 config=config, ui_config=ui_config)
    except Exception as e:
        error_msg = f"Failed to register grid callbacks: {e}"
        logging.error(error_msg)
        raise RuntimeError(error_msg) from e

    _registered_apps.add(app)
    callbacks_registered = _callback_count(app) - callbacks_before

    if verbose:
        print(f"Grid callbacks registered successfully: "
              f"{callbacks_registered} callbacks in {(time.time() - start_time) * 1000:.1f}ms")

    return callbacks_registered


__all__ = [
    'register_all_callbacks',
]
