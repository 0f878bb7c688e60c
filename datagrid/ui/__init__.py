"""
UI components for the grid page.

This package contains the layout and reusable components of a Dash page
whose table state is kept in the URL query string.
"""

from .layout import build_grid_layout
from .components import (
    CLEAR_FILTERS_ID,
    FILTER_TYPE,
    STATUS_ID,
    create_filters_card,
    create_grid_table,
    filter_id,
)

__all__ = [
    'build_grid_layout',
    'CLEAR_FILTERS_ID',
    'FILTER_TYPE',
    'STATUS_ID',
    'create_filters_card',
    'create_grid_table',
    'filter_id',
]
