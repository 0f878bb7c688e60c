"""
Saved grid views for DataGrid Search.

This module saves a grid state to TOML and loads it back, so a view can be
shared as a file as well as a URL. Commands are not part of a saved view.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

import toml

from core.exceptions import ValidationError
from datagrid.constants import DEFAULT_LIMIT, DEFAULT_PAGE
from datagrid.state.models import Column, GridState
from datagrid.validation import validate_grid_state

FORMAT_VERSION = '1.0'


def export_grid_state_to_toml(
    state: GridState,
    columns: Optional[Sequence[Column]] = None,
    user_notes: str = "",
    app_version: str = "1.0.0"
) -> str:
    """
    Export a grid state to a TOML format string.

    Args:
        state: State to export
        columns: Column schema; when given the state is validated against it
        user_notes: User-provided notes
        app_version: Application version

    Returns:
        TOML format string

    Raises:
        ValidationError: If the state cannot be represented
    """
    if columns is not None:
        errors = validate_grid_state(state, columns)
        if errors:
            error_msg = f"Grid state cannot be exported: {'; '.join(errors)}"
            logging.error(error_msg)
            raise ValidationError(error_msg, field="grid_state")

    try:
        view = {
            'metadata': {
                'export_timestamp': datetime.now().isoformat(),
                'app_version': app_version,
                'format_version': FORMAT_VERSION,
                'user_notes': user_notes
            },
            'pagination': {
                'page': int(state.page),
                'limit': int(state.limit)
            },
            'sorting': {},
            'filter': {
                key: list(value) if isinstance(value, (list, tuple)) else value
                for key, value in state.filter.items()
                if value is not None
            },
            'selection': {
                'selected': list(state.selected)
            }
        }

        # TOML has no null; unset sort/order are omitted
        if state.sort is not None:
            view['sorting']['sort'] = state.sort
        if state.order is not None:
            view['sorting']['order'] = state.order

        return toml.dumps(view)

    except (TypeError, ValueError, OverflowError) as e:
        error_msg = f"Error exporting grid state to TOML: {e}"
        logging.error(error_msg)
        raise ValidationError(error_msg, field="grid_state")


def validate_grid_view(data: Dict[str, Any]) -> List[str]:
    """Check the structure of a parsed saved view."""
    errors = []

    for section in ('metadata', 'pagination'):
        if section not in data:
            errors.append(f"Missing required section: {section}")

    format_version = data.get('metadata', {}).get('format_version')
    if 'metadata' in data and format_version != FORMAT_VERSION:
        errors.append(f"Unsupported format version: {format_version}")

    pagination = data.get('pagination', {})
    for field in ('page', 'limit'):
        value = pagination.get(field)
        if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 1):
            errors.append(f"{field} must be an integer >= 1")

    filter_data = data.get('filter', {})
    if not isinstance(filter_data, dict):
        errors.append("filter must be a table")

    selected = data.get('selection', {}).get('selected', [])
    if not isinstance(selected, list):
        errors.append("selected must be a list")

    return errors


def import_grid_state_from_toml(toml_string: str) -> Tuple[Optional[GridState], List[str]]:
    """
    Import a grid state from a TOML format string.

    Args:
        toml_string: TOML produced by ``export_grid_state_to_toml``

    Returns:
        Tuple of (state or None, error_messages)

    Raises:
        ValidationError: If TOML parsing fails
    """
    try:
        data = toml.loads(toml_string)
    except toml.TomlDecodeError as e:
        error_msg = f"Invalid TOML format: {e}"
        logging.error(error_msg)
        raise ValidationError(error_msg, field="toml_string")

    errors = validate_grid_view(data)
    if errors:
        return None, errors

    pagination = data['pagination']
    sorting = data.get('sorting', {})

    filter_values = {}
    for key, value in data.get('filter', {}).items():
        if isinstance(value, list):
            filter_values[str(key)] = [str(v) for v in value]
        else:
            filter_values[str(key)] = str(value)

    state = GridState(
        page=pagination.get('page', DEFAULT_PAGE),
        limit=pagination.get('limit', DEFAULT_LIMIT),
        sort=sorting.get('sort') or None,
        order=sorting.get('order') or None,
        filter=filter_values,
        selected=[str(s) for s in data.get('selection', {}).get('selected', [])],
    )

    return state, errors
