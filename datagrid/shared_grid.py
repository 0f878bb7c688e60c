"""
SharedDataGrid - grid state backed by a query-string store.

The store is the source of truth: ``state`` decodes and derives it lazily,
and every mutation is a dispatched command. Hosts pass an ``on_change``
callback to persist the new store (for example by returning it as the
``search`` of a ``dcc.Location``); the host is responsible for applying
updates one at a time.

Example:
    columns = [Column('status', multiple=True), Column('region')]
    grid = SharedDataGrid.from_search('?page=2&status=open', columns)
    grid.set_filter({'region': 'emea'})
    grid.search        # '?page=1&status=open&_DGC=4&region=emea'
"""

import copy
import logging
from typing import Callable, Dict, Iterable, Optional, Sequence

from core.config import GridConfig
from datagrid.codec import decode
from datagrid.derive import derive_state
from datagrid.dispatcher import dispatch
from datagrid.params import SearchParams, ensure_search_params
from datagrid.state.models import (
    Column,
    GridAction,
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
from datagrid.validation import validate_columns

logger = logging.getLogger(__name__)


class SharedDataGrid:
    """Read accessor and command dispatch over one query-string store."""

    def __init__(self, params=None, columns: Sequence[Column] = (),
                 config: Optional[GridConfig] = None,
                 on_change: Optional[Callable[[SearchParams], None]] = None):
        self.columns = list(columns)
        self.config = config or GridConfig()
        self.on_change = on_change
        self._params = ensure_search_params(params).copy()
        self._state: Optional[GridState] = None

        errors = validate_columns(self.columns, self.config)
        if errors:
            logger.warning(f"Column schema issues: {'; '.join(errors)}")

    @classmethod
    def from_search(cls, search: Optional[str], columns: Sequence[Column],
                    config: Optional[GridConfig] = None, **kwargs) -> 'SharedDataGrid':
        """Build a grid from a ``location.search`` string."""
        return cls(SearchParams.from_query_string(search), columns, config, **kwargs)

    @property
    def params(self) -> SearchParams:
        """A copy of the current store."""
        return self._params.copy()

    @property
    def search(self) -> str:
        return self._params.to_query_string()

    @property
    def raw_state(self) -> GridState:
        """State decoded from the store, before derivation."""
        return decode(self._params, self.columns, self.config)

    @property
    def state(self) -> GridState:
        """
        Current derived state.

        Derivation runs once per store change; each read returns its own copy
        so callers cannot alter the cached filter or selection.
        """
        if self._state is None:
            self._state = derive_state(self.raw_state, self.columns)
        return copy.deepcopy(self._state)

    def replace_params(self, params) -> None:
        """Adopt a store changed outside the grid (e.g. browser navigation)."""
        self._params = ensure_search_params(params).copy()
        self._state = None

    def dispatch(self, *actions: GridAction) -> GridState:
        """
        Apply one or more commands as a single store update.

        The commands run in order against a working copy; the host is
        notified once, with the final store.
        """
        if not actions:
            return self.state

        params = self._params
        for action in actions:
            params = dispatch(params, action, self.columns, self.config)

        self._params = params
        self._state = None

        if self.on_change is not None:
            self.on_change(self._params.copy())

        return self.state

    # --- Setter sugar; every setter is a tagged command ---

    def set_page(self, page: Optional[int]) -> GridState:
        return self.dispatch(SetPage(page))

    def set_limit(self, limit: Optional[int]) -> GridState:
        return self.dispatch(SetLimit(limit))

    def set_pagination(self, page: Optional[int], limit: Optional[int]) -> GridState:
        """Set the page size, then the page; the stored tag is ``SET_PAGE``."""
        return self.dispatch(SetLimit(limit), SetPage(page))

    def set_sorting(self, sort: Optional[str], order: Optional[str]) -> GridState:
        """Set sort key and direction; the stored tag is ``SET_ORDER``."""
        return self.dispatch(SetSort(sort), SetOrder(order))

    def set_filter(self, filter: Dict[str, object]) -> GridState:
        return self.dispatch(SetFilter(dict(filter)))

    def replace_filter(self, filter: Dict[str, object]) -> GridState:
        return self.dispatch(ReplaceFilter(dict(filter)))

    def remove_filter(self, keys: Iterable[str]) -> GridState:
        """Delete the given filter keys."""
        return self.dispatch(RemoveFilter({key: None for key in keys}))

    def clear_filters(self) -> GridState:
        """Delete every declared column's filter."""
        return self.remove_filter(column.key for column in self.columns)

    def set_selected(self, selected: Iterable[str]) -> GridState:
        return self.dispatch(SetSelected(tuple(selected)))

    def set_state(self, state: GridState) -> GridState:
        return self.dispatch(SetState(state))

    def __repr__(self) -> str:
        return f"SharedDataGrid(search={self.search!r}, columns={[c.key for c in self.columns]!r})"
