"""
Grid table callbacks.

This module contains callbacks responsible for:
- Rendering the table, filters and status line from the URL search string
- Turning paging, sorting, filter and selection events into grid commands

Every updater reads the current ``search``, dispatches a command and returns
the new ``search``. When an event does not change the decoded state (which
happens every time ``render_grid`` pushes values back into the components)
the updater returns ``no_update`` so that no command is recorded.
"""

import logging
import math
import functools
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from dash import ALL, Input, Output, State, no_update

from core.config import GridConfig, UIConfig
from datagrid.codec import decode
from datagrid.derive import derive_state
from datagrid.dispatcher import dispatch
from datagrid.params import SearchParams
from datagrid.state.models import (
    Column,
    GridState,
    RemoveFilter,
    SetFilter,
    SetLimit,
    SetOrder,
    SetPage,
    SetSelected,
    SetSort,
    find_column,
)
from datagrid.constants import SORT_ASC, SORT_DESC
from datagrid.ui.components import CLEAR_FILTERS_ID, FILTER_TYPE, STATUS_ID

logger = logging.getLogger(__name__)

# load_rows(state) -> (rows for the current page, total row count)
RowLoader = Callable[[GridState], Tuple[List[Dict[str, Any]], int]]


def _usable_count(value, default: int) -> int:
    """Guard against NaN or out-of-range page/limit values decoded from the URL."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if math.isnan(value) or math.isinf(value) or value < 1:
        return default
    return int(value)


def sort_by_from_state(state: GridState) -> List[Dict[str, str]]:
    """DataTable ``sort_by`` for a state; an unknown order is shown as ascending."""
    if not state.sort:
        return []
    direction = state.order if state.order in (SORT_ASC, SORT_DESC) else SORT_ASC
    return [{'column_id': state.sort, 'direction': direction}]


def describe_command(state: GridState) -> str:
    if state.command is None:
        return ""
    return f"Last change: {state.command.name.replace('_', ' ').lower()}"


def render_grid(search, *, columns: Sequence[Column], load_rows: RowLoader,
                filter_keys: Sequence[str], config: Optional[GridConfig] = None):
    """
    Render every grid component from the URL search string.

    Filter controls show the decoded filters; rows are loaded with the
    derived state, which includes implicit column filters.
    """
    config = config or GridConfig()
    raw_state = decode(SearchParams.from_query_string(search), columns, config)
    state = derive_state(raw_state, columns)

    page = _usable_count(state.page, config.default_page)
    limit = _usable_count(state.limit, config.default_limit)

    rows, total = load_rows(state)
    page_count = max(1, math.ceil(total / limit))

    filter_values = []
    for key in filter_keys:
        value = raw_state.filter.get(key)
        column = find_column(columns, key)
        if column is not None and column.multiple and value is None:
            value = []
        filter_values.append(value)

    logger.debug(f"Rendered grid page {page}/{page_count} with {len(rows)} rows")

    return (
        rows,
        page - 1,
        page_count,
        limit,
        sort_by_from_state(state),
        list(state.selected),
        limit,
        filter_values,
        describe_command(raw_state),
    )


def update_pagination(page_current, page_size, search, *, columns: Sequence[Column],
                      config: Optional[GridConfig] = None):
    """Dispatch ``SetLimit``/``SetPage`` when the table page or page size changes."""
    config = config or GridConfig()
    params = SearchParams.from_query_string(search)
    state = decode(params, columns, config)

    if page_size is not None and page_size != state.limit:
        params = dispatch(params, SetLimit(int(page_size)), columns, config)
        params = dispatch(params, SetPage(config.default_page), columns, config)
        return params.to_query_string()

    if page_current is not None and page_current + 1 != state.page:
        params = dispatch(params, SetPage(int(page_current) + 1), columns, config)
        return params.to_query_string()

    return no_update


def update_sorting(sort_by, search, *, columns: Sequence[Column],
                   config: Optional[GridConfig] = None):
    """Dispatch ``SetSort`` and/or ``SetOrder`` for a DataTable ``sort_by`` change."""
    config = config or GridConfig()
    params = SearchParams.from_query_string(search)
    state = decode(params, columns, config)

    if sort_by:
        sort, order = sort_by[0].get('column_id'), sort_by[0].get('direction')
    else:
        sort, order = None, None

    if sort == state.sort and order == state.order:
        return no_update

    if sort != state.sort:
        params = dispatch(params, SetSort(sort), columns, config)
    if order != state.order:
        params = dispatch(params, SetOrder(order), columns, config)

    return params.to_query_string()


def _normalize_filter_value(value, multiple: bool):
    if value is None or value == '' or value == []:
        return None
    if multiple:
        if not isinstance(value, (list, tuple)):
            value = [value]
        return [str(item) for item in value]
    return str(value)


def update_filters(values, ids, search, *, columns: Sequence[Column],
                   config: Optional[GridConfig] = None):
    """Dispatch ``SetFilter`` with only the filter keys whose dropdown changed."""
    config = config or GridConfig()
    params = SearchParams.from_query_string(search)
    state = decode(params, columns, config)

    patch = {}
    for component_id, value in zip(ids or [], values or []):
        key = component_id.get('column')
        column = find_column(columns, key)
        multiple = column.multiple if column is not None else False
        normalized = _normalize_filter_value(value, multiple)
        if normalized != state.filter.get(key):
            patch[key] = normalized

    if not patch:
        return no_update

    params = dispatch(params, SetFilter(patch), columns, config)
    return params.to_query_string()


def clear_filters(n_clicks, search, *, columns: Sequence[Column],
                  config: Optional[GridConfig] = None):
    """Dispatch ``RemoveFilter`` for every filter currently in the URL."""
    if not n_clicks:
        return no_update

    config = config or GridConfig()
    params = SearchParams.from_query_string(search)
    state = decode(params, columns, config)

    if not state.filter:
        return no_update

    params = dispatch(params, RemoveFilter({key: None for key in state.filter}), columns, config)
    return params.to_query_string()


def update_selection(selected_row_ids, search, *, columns: Sequence[Column],
                     config: Optional[GridConfig] = None):
    """Dispatch ``SetSelected`` when the table row selection changes."""
    config = config or GridConfig()
    params = SearchParams.from_query_string(search)
    state = decode(params, columns, config)

    selected = [str(row_id) for row_id in (selected_row_ids or [])]
    if selected == list(state.selected):
        return no_update

    params = dispatch(params, SetSelected(tuple(selected)), columns, config)
    return params.to_query_string()


def _bind(func, **bound):
    """Bind keyword arguments while keeping the callback's name for Dash."""
    @functools.wraps(func)
    def wrapper(*args):
        return func(*args, **bound)
    return wrapper


def register_callbacks(app, columns: Sequence[Column], load_rows: RowLoader,
                       filter_keys: Optional[Sequence[str]] = None,
                       config: Optional[GridConfig] = None,
                       ui_config: Optional[UIConfig] = None):
    """
    Register the grid callbacks on ``app``.

    Args:
        app: The Dash application instance
        columns: Column schema
        load_rows: Host function returning ``(rows, total)`` for a derived state
        filter_keys: Keys of the filter dropdowns in layout order
        config: Grid defaults
        ui_config: Component ids
    """
    config = config or GridConfig()
    ui_config = ui_config or UIConfig()
    location_id = ui_config.location_id
    table_id = ui_config.table_id
    page_size_id = f"{table_id}-page-size"
    if filter_keys is None:
        filter_keys = [column.key for column in columns]

    # Rendering from the URL
    app.callback(
        [Output(table_id, 'data'), Output(table_id, 'page_current'), Output(table_id, 'page_count'),
         Output(table_id, 'page_size'), Output(table_id, 'sort_by'), Output(table_id, 'selected_row_ids'),
         Output(page_size_id, 'value'), Output({'type': FILTER_TYPE, 'column': ALL}, 'value'),
         Output(STATUS_ID, 'children')],
        Input(location_id, 'search')
    )(_bind(render_grid, columns=columns, load_rows=load_rows, filter_keys=list(filter_keys), config=config))

    # Component events to commands
    app.callback(
        Output(location_id, 'search', allow_duplicate=True),
        [Input(table_id, 'page_current'), Input(page_size_id, 'value')],
        State(location_id, 'search'),
        prevent_initial_call=True
    )(_bind(update_pagination, columns=columns, config=config))
    app.callback(
        Output(location_id, 'search', allow_duplicate=True),
        Input(table_id, 'sort_by'),
        State(location_id, 'search'),
        prevent_initial_call=True
    )(_bind(update_sorting, columns=columns, config=config))
    app.callback(
        Output(location_id, 'search', allow_duplicate=True),
        Input({'type': FILTER_TYPE, 'column': ALL}, 'value'),
        [State({'type': FILTER_TYPE, 'column': ALL}, 'id'), State(location_id, 'search')],
        prevent_initial_call=True
    )(_bind(update_filters, columns=columns, config=config))
    app.callback(
        Output(location_id, 'search', allow_duplicate=True),
        Input(CLEAR_FILTERS_ID, 'n_clicks'),
        State(location_id, 'search'),
        prevent_initial_call=True
    )(_bind(clear_filters, columns=columns, config=config))
    app.callback(
        Output(location_id, 'search', allow_duplicate=True),
        Input(table_id, 'selected_row_ids'),
        State(location_id, 'search'),
        prevent_initial_call=True
    )(_bind(update_selection, columns=columns, config=config))

    logger.info(f"Registered grid callbacks for table '{table_id}' on location '{location_id}'")
