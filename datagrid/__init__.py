"""
Grid state protocol for DataGrid Search.

This package keeps a table's pagination, sorting, filters and row selection
in a query-string store: a codec between ``GridState`` and the store, a
derivation pipeline driven by the column schema, and a dispatcher for the
closed set of state-changing commands.
"""

from .codec import decode, encode
from .derive import derive_state
from .dispatcher import dispatch
from .grid_views import export_grid_state_to_toml, import_grid_state_from_toml
from .params import ParameterStore, SearchParams
from .shared_grid import SharedDataGrid
from .state import (
    Column,
    GridCommand,
    GridState,
    RemoveFilter,
    ReplaceFilter,
    SetFilter,
    SetLimit,
    SetOrder,
    SetPage,
    SetSelected,
    SetSort,
    SetState,
)
from .validation import validate_columns, validate_grid_state

__all__ = [
    # Store
    'ParameterStore',
    'SearchParams',

    # State and schema
    'Column',
    'GridCommand',
    'GridState',

    # Commands
    'SetPage',
    'SetLimit',
    'SetSort',
    'SetOrder',
    'SetFilter',
    'ReplaceFilter',
    'RemoveFilter',
    'SetSelected',
    'SetState',

    # Codec, derivation, dispatch
    'decode',
    'encode',
    'derive_state',
    'dispatch',
    'SharedDataGrid',

    # Validation and saved views
    'validate_columns',
    'validate_grid_state',
    'export_grid_state_to_toml',
    'import_grid_state_from_toml',
]

__version__ = "1.0.0"
