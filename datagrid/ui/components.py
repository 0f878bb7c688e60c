"""
Reusable UI components for the grid page.

Filter dropdowns use pattern-matching ids ``{'type': FILTER_TYPE, 'column': key}``
so a single callback can read every filter at once.
"""

from typing import Dict, List, Optional, Sequence

import dash_bootstrap_components as dbc
from dash import dash_table, dcc, html

from datagrid.state.models import Column

FILTER_TYPE = 'grid-filter'
CLEAR_FILTERS_ID = 'grid-clear-filters'
STATUS_ID = 'grid-status'

TABLE_STYLES = {
    'table': {'overflowX': 'auto'},
    'cell': {'textAlign': 'left', 'padding': '6px'},
    'header': {'fontWeight': 'bold'},
}


def filter_id(key: str) -> Dict[str, str]:
    return {'type': FILTER_TYPE, 'column': key}


def create_filter_control(column: Column, options: Optional[List[str]] = None):
    """Create a dropdown for one column; ``multi`` follows ``column.multiple``."""
    return dbc.Col(html.Div([
        html.Label(f"{column.display_label}:"),
        dcc.Dropdown(
            id=filter_id(column.key),
            options=[{'label': str(o), 'value': str(o)} for o in (options or [])],
            multi=column.multiple,
            placeholder=f"Any {column.display_label.lower()}",
            clearable=True,
        ),
    ]), md=3)


def create_filters_card(columns: Sequence[Column], filter_options: Dict[str, List[str]]):
    """Create the filters card with one dropdown per filterable column."""
    controls = [
        create_filter_control(column, filter_options.get(column.key))
        for column in columns
        if column.key in filter_options
    ]
    return dbc.Card(dbc.CardBody([
        html.H4("Filters", className="card-title"),
        dbc.Row(controls, className="mb-2"),
        dbc.Button(
            "Clear Filters",
            id=CLEAR_FILTERS_ID,
            color="outline-secondary",
            size="sm",
        ),
    ]), className="mb-3")


def create_grid_table(table_id: str, columns: Sequence[Column], page_size: int = 10):
    """Create a DataTable with server-side paging, sorting and multi-row selection."""
    return dash_table.DataTable(
        id=table_id,
        columns=[{'name': column.display_label, 'id': column.key} for column in columns],
        data=[],
        page_action='custom',
        page_current=0,
        page_size=page_size,
        page_count=1,
        sort_action='custom',
        sort_mode='single',
        sort_by=[],
        row_selectable='multi',
        selected_row_ids=[],
        style_table=TABLE_STYLES['table'],
        style_cell=TABLE_STYLES['cell'],
        style_header=TABLE_STYLES['header'],
    )


def create_page_size_selector(page_size_options: Sequence[int], table_id: str):
    return html.Div([
        html.Label("Rows per page:", className="me-2"),
        dcc.Dropdown(
            id=f"{table_id}-page-size",
            options=[{'label': str(size), 'value': size} for size in page_size_options],
            clearable=False,
            style={'width': '100px'},
        ),
    ], className="d-flex align-items-center mb-2")


def create_grid_status():
    """Status line showing the last applied command."""
    return html.Div(id=STATUS_ID, className="text-muted small mt-2")
