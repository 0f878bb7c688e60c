import argparse
import dataclasses
import logging
import os
import threading
import time
import webbrowser
from typing import Dict, List

import dash
import dash_bootstrap_components as dbc
import pandas as pd

from config_manager import get_config
from core.logging_config import setup_logging_from_config
from datagrid import Column, GridState
from datagrid.callbacks import register_all_callbacks
from datagrid.constants import SORT_DESC
from datagrid.ui import build_grid_layout

DATA_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data', 'orders.csv')

# Columns that get a filter dropdown, in layout order
FILTER_KEYS = ['status', 'region', 'channel', 'archived']


def exclude_archived_orders(state: GridState) -> GridState:
    """Hide archived orders unless the URL asks for them explicitly."""
    if 'archived' in state.filter:
        return state
    return dataclasses.replace(state, filter={**state.filter, 'archived': 'no'})


ORDER_COLUMNS = [
    Column('id', label='Order'),
    Column('customer'),
    Column('status', multiple=True),
    Column('region', multiple=True),
    Column('channel'),
    Column('amount'),
    Column('archived', derive_state=exclude_archived_orders),
]


def load_orders(path: str = DATA_FILE) -> pd.DataFrame:
    """Load the demo orders table; every column except ``amount`` is text."""
    df = pd.read_csv(path, dtype=str)
    df['amount'] = pd.to_numeric(df['amount'], errors='coerce')
    return df


def build_filter_options(df: pd.DataFrame, keys: List[str]) -> Dict[str, List[str]]:
    return {key: sorted(df[key].dropna().astype(str).unique().tolist()) for key in keys if key in df.columns}


def make_row_loader(df: pd.DataFrame):
    """Return a ``load_rows(state)`` that filters, sorts and slices ``df``."""
    def load_rows(state: GridState):
        view = df
        for key, value in state.filter.items():
            if key not in view.columns or value is None:
                continue
            if isinstance(value, (list, tuple)):
                view = view[view[key].astype(str).isin([str(v) for v in value])]
            else:
                view = view[view[key].astype(str) == str(value)]

        if state.sort and state.sort in view.columns:
            view = view.sort_values(state.sort, ascending=state.order != SORT_DESC, kind='mergesort')

        page, limit = state.page, state.limit
        if not isinstance(page, int) or page < 1:
            page = 1
        if not isinstance(limit, int) or limit < 1:
            limit = 10

        start = (page - 1) * limit
        return view.iloc[start:start + limit].to_dict('records'), len(view)

    return load_rows


config = get_config()
setup_logging_from_config(config.log)

orders_df = load_orders()

app = dash.Dash(
    __name__,
    external_stylesheets=[getattr(dbc.themes, config.ui.theme, dbc.themes.SLATE)],
    suppress_callback_exceptions=True,
    title=config.ui.title,
)

app.layout = build_grid_layout(
    ORDER_COLUMNS,
    filter_options=build_filter_options(orders_df, FILTER_KEYS),
    grid_config=config.grid,
    ui_config=config.ui,
)

register_all_callbacks(
    app,
    ORDER_COLUMNS,
    make_row_loader(orders_df),
    filter_keys=FILTER_KEYS,
    config=config.grid,
    ui_config=config.ui,
    verbose=False,
)


def open_browser(url, delay=1.5):
    """Open browser after a delay"""
    def _open():
        time.sleep(delay)
        try:
            webbrowser.open(url)
        except Exception as e:
            logging.warning(f"Could not open browser automatically: {e}")

    threading.Thread(target=_open, daemon=True).start()


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='DataGrid Search - URL-backed table demo')
    parser.add_argument('--no-browser', action='store_true',
                        help='Do not automatically open browser')
    parser.add_argument('--port', type=int, default=8050, help='Port to serve on')
    parser.add_argument('--debug-grid', action='store_true',
                        help='Log every grid command and decode anomaly')
    args = parser.parse_args()

    if args.debug_grid:
        setup_logging_from_config(config.log, debug_grid=True)

    url = f"http://127.0.0.1:{args.port}"
    if not args.no_browser:
        open_browser(url)

    app.run(debug=True, port=args.port, use_reloader=False)
