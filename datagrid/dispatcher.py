"""
Action dispatcher for the grid state protocol.

Every state change goes through ``dispatch``: the command tag is stamped into
the store first, then the command applies the smallest mutation that
expresses it. Keys a command does not name are left as they are.
"""

import dataclasses
import logging
from typing import Callable, Dict, Optional, Sequence

from core.config import GridConfig
from datagrid.codec import encode, format_number, reserved_params, write_filter_value
from datagrid.constants import (
    LIMIT_PARAM,
    ORDER_PARAM,
    PAGE_PARAM,
    SELECTED_PARAM,
    SORT_PARAM,
)
from datagrid.params import SearchParams, ensure_search_params
from datagrid.state.models import (
    Column,
    FILTER_COMMANDS,
    GridAction,
    GridCommand,
    find_column,
)

logger = logging.getLogger(__name__)


def _set_or_delete(params: SearchParams, key: str, value) -> None:
    if value is None:
        params.delete(key)
    else:
        params.set(key, str(value))


def _apply_page(params, action, columns, config):
    _set_or_delete(params, PAGE_PARAM, None if action.page is None else format_number(action.page))
    return params


def _apply_limit(params, action, columns, config):
    _set_or_delete(params, LIMIT_PARAM, None if action.limit is None else format_number(action.limit))
    return params


def _apply_sort(params, action, columns, config):
    _set_or_delete(params, SORT_PARAM, action.sort)
    return params


def _apply_order(params, action, columns, config):
    _set_or_delete(params, ORDER_PARAM, action.order)
    return params


def _apply_filter(params, action, columns, config):
    reserved = reserved_params(config)

    for key, value in (action.filter or {}).items():
        if key in reserved:
            logger.warning(f"Ignoring filter key '{key}': it is reserved")
            continue

        column = find_column(columns, key)
        if column is None:
            logger.warning(f"Filter key '{key}' is not a declared column; "
                           f"it is written but will not be decoded")

        multiple = column.multiple if column is not None else isinstance(value, (list, tuple))
        if value is not None:
            if multiple and not isinstance(value, (list, tuple)):
                value = [value]
            elif not multiple and isinstance(value, (list, tuple)):
                value = ','.join(str(item) for item in value)
        write_filter_value(params, key, value, multiple=multiple)

    if config.reset_page_on_filter_change:
        params.set(PAGE_PARAM, str(config.default_page))
    return params


def _apply_selected(params, action, columns, config):
    params.delete(SELECTED_PARAM)
    for value in action.selected or ():
        if value is not None:
            params.append(SELECTED_PARAM, str(value))
    return params


def _apply_state(params, action, columns, config):
    state = dataclasses.replace(action.state, command=GridCommand.SET_STATE)
    return encode(state, columns, params, config)


_HANDLERS: Dict[GridCommand, Callable] = {
    GridCommand.SET_PAGE: _apply_page,
    GridCommand.SET_LIMIT: _apply_limit,
    GridCommand.SET_SORT: _apply_sort,
    GridCommand.SET_ORDER: _apply_order,
    GridCommand.SET_FILTER: _apply_filter,
    GridCommand.REPLACE_FILTER: _apply_filter,
    GridCommand.REMOVE_FILTER: _apply_filter,
    GridCommand.SET_SELECTED: _apply_selected,
    GridCommand.SET_STATE: _apply_state,
}


def dispatch(params, action: GridAction, columns: Sequence[Column],
             config: Optional[GridConfig] = None) -> SearchParams:
    """
    Apply a command to a copy of the store.

    Args:
        params: Current store (``SearchParams``, query string or ``None``)
        action: One of the command dataclasses
        columns: Column schema; decides single vs multiple filter writes
        config: Grid defaults (``GridConfig()`` when omitted)

    Returns:
        The updated copy of the store
    """
    config = config or GridConfig()
    result = ensure_search_params(params).copy()

    command = action.command
    handler = _HANDLERS.get(command)
    if handler is None:
        logger.warning(f"Unsupported grid action {type(action).__name__}; store left unchanged")
        return result

    result.set(config.command_param, str(int(command)))
    result = handler(result, action, columns, config)

    if command in FILTER_COMMANDS:
        logger.debug(f"Dispatched {command.name} for keys {sorted((action.filter or {}).keys())}")
    else:
        logger.debug(f"Dispatched {command.name}")

    return result
