"""
State models for the grid.

This package provides the typed decoded state, the column schema and the
closed set of commands that mutate the query-string store.
"""

from .models import (
    AnyGridAction,
    Column,
    FILTER_COMMANDS,
    GridAction,
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
    find_column,
)

__all__ = [
    'AnyGridAction',
    'Column',
    'FILTER_COMMANDS',
    'GridAction',
    'GridCommand',
    'GridState',
    'RemoveFilter',
    'ReplaceFilter',
    'SetFilter',
    'SetLimit',
    'SetOrder',
    'SetPage',
    'SetSelected',
    'SetSort',
    'SetState',
    'find_column',
]
