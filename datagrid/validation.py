"""
Caller-side validation helpers for grid schemas and states.

The codec and dispatcher accept anything and propagate it. These helpers
report, without raising, why a schema or a state would not survive a
decode/encode round trip.
"""

import math
import numbers
from typing import List, Optional, Sequence

from core.config import GridConfig
from datagrid.constants import SORT_ASC, SORT_DESC, STATE_PARAMS
from datagrid.state.models import Column, GridState, find_column


def validate_columns(columns: Sequence[Column], config: Optional[GridConfig] = None) -> List[str]:
    """Check that column keys are unique and disjoint from the reserved keys."""
    config = config or GridConfig()
    reserved = set(STATE_PARAMS) | {config.command_param}
    errors = []
    seen = set()

    for column in columns:
        if not column.key:
            errors.append("column key cannot be empty")
            continue
        if column.key in reserved:
            errors.append(f"column key '{column.key}' is reserved")
        if column.key in seen:
            errors.append(f"column key '{column.key}' is declared more than once")
        seen.add(column.key)

    return errors


def _is_valid_count(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    if math.isnan(value) or math.isinf(value):
        return False
    return value >= 1 and float(value).is_integer()


def validate_grid_state(state: GridState, columns: Sequence[Column]) -> List[str]:
    """
    List the reasons ``state`` would not round-trip through the codec.

    Args:
        state: State to check
        columns: Column schema the state is encoded with

    Returns:
        List of error messages; empty when the state is valid
    """
    errors = []

    if not _is_valid_count(state.page):
        errors.append(f"page must be an integer >= 1, got {state.page!r}")

    if not _is_valid_count(state.limit):
        errors.append(f"limit must be an integer >= 1, got {state.limit!r}")

    if state.sort is not None and not state.sort:
        errors.append("sort must be None or a non-empty string")

    if state.order is not None and state.order not in (SORT_ASC, SORT_DESC):
        errors.append(f"order must be None, '{SORT_ASC}' or '{SORT_DESC}', got {state.order!r}")

    for key, value in state.filter.items():
        column = find_column(columns, key)
        if column is None:
            errors.append(f"filter key '{key}' is not a declared column")
            continue
        if value is None:
            errors.append(f"filter '{key}' is None; omit the key instead")
        elif column.multiple:
            if not isinstance(value, list):
                errors.append(f"filter '{key}' is multiple and needs a list of values")
            elif not value:
                errors.append(f"filter '{key}' has an empty list; omit the key instead")
            elif not all(isinstance(item, str) for item in value):
                errors.append(f"filter '{key}' values must be strings")
        elif not isinstance(value, str):
            errors.append(f"filter '{key}' is single-valued and needs a string")

    if not all(isinstance(item, str) for item in state.selected):
        errors.append("selected values must be strings")

    return errors


def is_round_trippable(state: GridState, columns: Sequence[Column]) -> bool:
    return not validate_grid_state(state, columns)
