"""
Layout for a grid page whose state lives in the URL query string.

The ``dcc.Location`` search string is the only store; every other component
is rendered from it by ``datagrid.callbacks.table.render_grid``.
"""

from typing import Dict, List, Optional, Sequence

import dash_bootstrap_components as dbc
from dash import dcc, html

from core.config import GridConfig, UIConfig
from datagrid.state.models import Column

from .components import (
    create_filters_card,
    create_grid_status,
    create_grid_table,
    create_page_size_selector,
)


def build_grid_layout(
    columns: Sequence[Column],
    filter_options: Optional[Dict[str, List[str]]] = None,
    grid_config: Optional[GridConfig] = None,
    ui_config: Optional[UIConfig] = None,
):
    """
    Assemble the grid page.

    Args:
        columns: Column schema; every column becomes a table column
        filter_options: Dropdown choices per filterable column key
        grid_config: Grid defaults (page size)
        ui_config: Component ids and page title

    Returns:
        A ``dbc.Container`` holding the location, filters, table and status line
    """
    grid_config = grid_config or GridConfig()
    ui_config = ui_config or UIConfig()

    return dbc.Container([
        dcc.Location(id=ui_config.location_id, refresh=False),

        dbc.Row([
            dbc.Col([
                html.H3(ui_config.title),
            ], width=12)
        ]),

        dbc.Row([
            dbc.Col([
                create_filters_card(columns, filter_options or {})
            ], width=12)
        ]),

        dbc.Row([
            dbc.Col([
                create_page_size_selector(grid_config.page_size_options, ui_config.table_id),
                create_grid_table(ui_config.table_id, columns, grid_config.default_limit),
                create_grid_status(),
            ], width=12)
        ]),
    ], fluid=True)
