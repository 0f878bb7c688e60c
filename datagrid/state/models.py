"""
State models for the grid state protocol.

This module defines the decoded grid state, the column schema entries that
drive decoding and derivation, and the closed set of commands the dispatcher
understands.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from datagrid.constants import DEFAULT_LIMIT, DEFAULT_PAGE

FilterValue = Union[str, List[str]]


class GridCommand(IntEnum):
    """Tag of a state-changing intent, stored under the command key as its number."""
    SET_PAGE = 0
    SET_LIMIT = 1
    SET_SORT = 2
    SET_ORDER = 3
    SET_FILTER = 4
    REPLACE_FILTER = 5
    REMOVE_FILTER = 6
    SET_SELECTED = 7
    SET_STATE = 8


FILTER_COMMANDS = frozenset({
    GridCommand.SET_FILTER,
    GridCommand.REPLACE_FILTER,
    GridCommand.REMOVE_FILTER,
})


@dataclass(frozen=True)
class GridState:
    """
    Decoded view state of a grid.

    Snapshots are never mutated in place; use ``dataclasses.replace`` to build
    a new one. ``page`` and ``limit`` may hold ``float('nan')`` when the store
    contains a non-numeric value.
    """

    page: Union[int, float] = DEFAULT_PAGE
    limit: Union[int, float] = DEFAULT_LIMIT
    sort: Optional[str] = None
    order: Optional[str] = None
    filter: Dict[str, FilterValue] = field(default_factory=dict)
    selected: List[str] = field(default_factory=list)
    command: Optional[GridCommand] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to a plain dictionary (e.g. for a ``dcc.Store``)."""
        return {
            'page': self.page,
            'limit': self.limit,
            'sort': self.sort,
            'order': self.order,
            'filter': {k: list(v) if isinstance(v, (list, tuple)) else v for k, v in self.filter.items()},
            'selected': list(self.selected),
            'command': int(self.command) if self.command is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'GridState':
        """Create a state instance from a dictionary produced by ``to_dict``."""
        if not data:
            return cls()

        command = data.get('command')
        return cls(
            page=data.get('page', DEFAULT_PAGE),
            limit=data.get('limit', DEFAULT_LIMIT),
            sort=data.get('sort'),
            order=data.get('order'),
            filter=dict(data.get('filter') or {}),
            selected=list(data.get('selected') or []),
            command=GridCommand(command) if command is not None else None,
        )


StateTransform = Callable[[GridState], GridState]


@dataclass(frozen=True)
class Column:
    """
    Column schema entry.

    ``key`` names the query-string key holding this column's filter.
    ``derive_state`` is applied to every decoded state, in column order,
    and is meant to inject implicit filters.
    """

    key: str
    multiple: bool = False
    derive_state: Optional[StateTransform] = None
    label: Optional[str] = None

    @property
    def display_label(self) -> str:
        return self.label or self.key.replace('_', ' ').title()


def find_column(columns: Sequence[Column], key: str) -> Optional[Column]:
    """Return the column declared for ``key``, if any."""
    for column in columns:
        if column.key == key:
            return column
    return None


# --- Commands ---

@dataclass(frozen=True)
class GridAction:
    """Base class for all commands."""
    command = None  # type: GridCommand


@dataclass(frozen=True)
class SetPage(GridAction):
    """Set the page number, or delete it when ``page`` is ``None``."""
    page: Optional[int] = None
    command = GridCommand.SET_PAGE


@dataclass(frozen=True)
class SetLimit(GridAction):
    """Set the page size, or delete it when ``limit`` is ``None``."""
    limit: Optional[int] = None
    command = GridCommand.SET_LIMIT


@dataclass(frozen=True)
class SetSort(GridAction):
    sort: Optional[str] = None
    command = GridCommand.SET_SORT


@dataclass(frozen=True)
class SetOrder(GridAction):
    order: Optional[str] = None
    command = GridCommand.SET_ORDER


@dataclass(frozen=True)
class SetFilter(GridAction):
    """Patch the named filter keys; ``None`` values delete their key."""
    filter: Dict[str, Optional[Union[str, Sequence[str]]]] = field(default_factory=dict)
    command = GridCommand.SET_FILTER


@dataclass(frozen=True)
class ReplaceFilter(SetFilter):
    """Same mutation as ``SetFilter``; tagged as a replacement."""
    command = GridCommand.REPLACE_FILTER


@dataclass(frozen=True)
class RemoveFilter(SetFilter):
    """Same mutation as ``SetFilter``; tagged as a removal."""
    command = GridCommand.REMOVE_FILTER


@dataclass(frozen=True)
class SetSelected(GridAction):
    """Replace the selected row identifiers."""
    selected: Sequence[str] = ()
    command = GridCommand.SET_SELECTED


@dataclass(frozen=True)
class SetState(GridAction):
    """Rewrite the whole managed key space from a state."""
    state: GridState = field(default_factory=GridState)
    command = GridCommand.SET_STATE


AnyGridAction = Union[
    SetPage,
    SetLimit,
    SetSort,
    SetOrder,
    SetFilter,
    ReplaceFilter,
    RemoveFilter,
    SetSelected,
    SetState,
]
