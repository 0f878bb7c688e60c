"""
Codec between ``GridState`` and the query-string store.

``decode`` reads a store through a column schema; ``encode`` writes a state
back. Neither raises: malformed store values are carried into the decoded
state (a non-numeric page decodes to NaN, an unknown order passes through).
"""

import logging
import math
import re
from typing import List, Optional, Sequence, Set, Union

from core.config import GridConfig
from datagrid.constants import (
    LIMIT_PARAM,
    ORDER_PARAM,
    PAGE_PARAM,
    SELECTED_PARAM,
    SORT_PARAM,
    STATE_PARAMS,
)
from datagrid.params import ParameterStore, SearchParams, ensure_search_params
from datagrid.state.models import Column, GridCommand, GridState

logger = logging.getLogger(__name__)


def reserved_params(config: Optional[GridConfig] = None) -> Set[str]:
    """Keys owned by the codec that never appear inside ``GridState.filter``."""
    config = config or GridConfig()
    return set(STATE_PARAMS) | {config.command_param}


# Numeric literals a browser's Number() accepts; ASCII digits only
_INTEGER = re.compile(r'[+-]?[0-9]+')
_DECIMAL = re.compile(r'[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?')
_PREFIXED = re.compile(r'0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)')
_INFINITY = re.compile(r'([+-]?)Infinity')


def parse_number(raw: str) -> Union[int, float]:
    """
    Parse a numeric query value the way a browser's ``Number()`` does.

    Integral values come back as ``int``. Blank text parses to ``0``;
    ``0x``/``0o``/``0b`` literals and ``Infinity`` are accepted. Anything
    else (``1_000``, ``inf``, non-ASCII digits) parses to NaN.
    """
    text = raw.strip()
    if not text:
        return 0

    if _INTEGER.fullmatch(text):
        return int(text)
    if _PREFIXED.fullmatch(text):
        return int(text, 0)

    infinity = _INFINITY.fullmatch(text)
    if infinity:
        return -math.inf if infinity.group(1) == '-' else math.inf

    if not _DECIMAL.fullmatch(text):
        return math.nan

    number = float(text)
    if number.is_integer():
        return int(number)
    return number


def parse_command(raw: Optional[str]) -> Optional[GridCommand]:
    """Parse the command tag; unknown tags decode to ``None``."""
    if raw is None:
        return None
    number = parse_number(raw)
    try:
        return GridCommand(number)
    except ValueError:
        logger.debug(f"Ignoring unknown command tag {raw!r}")
        return None


def decode_filter(params: ParameterStore, columns: Sequence[Column],
                  config: Optional[GridConfig] = None) -> dict:
    """Read every declared, non-reserved column present in the store."""
    reserved = reserved_params(config)
    decoded = {}
    for column in columns:
        if column.key in reserved or not params.has(column.key):
            continue
        if column.multiple:
            decoded[column.key] = params.get_all(column.key)
        else:
            decoded[column.key] = params.get(column.key)
    return decoded


def decode(params, columns: Sequence[Column], config: Optional[GridConfig] = None) -> GridState:
    """
    Decode a store into a ``GridState``.

    Args:
        params: ``SearchParams`` (or a query string) to read
        columns: Column schema; only declared keys are read as filters
        config: Grid defaults (``GridConfig()`` when omitted)

    Returns:
        A new ``GridState`` snapshot
    """
    config = config or GridConfig()
    params = ensure_search_params(params)

    page = parse_number(params.get(PAGE_PARAM)) if params.has(PAGE_PARAM) else config.default_page
    limit = parse_number(params.get(LIMIT_PARAM)) if params.has(LIMIT_PARAM) else config.default_limit

    return GridState(
        page=page,
        limit=limit,
        sort=params.get(SORT_PARAM) or None,
        order=params.get(ORDER_PARAM) or None,
        filter=decode_filter(params, columns, config),
        selected=params.get_all(SELECTED_PARAM),
        command=parse_command(params.get(config.command_param)),
    )


def format_number(value: Union[int, float]) -> str:
    """Render a page/limit value so that ``parse_number`` reads it back."""
    if isinstance(value, float):
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        if value.is_integer():
            return str(int(value))
    return str(value)


def write_filter_value(params: ParameterStore, key: str, value, multiple: bool) -> None:
    """
    Write one filter entry.

    ``None`` deletes the key. Sequences are written by delete-then-append so
    that a previous single value does not linger next to the new ones.
    """
    if value is None:
        params.delete(key)
    elif multiple:
        params.delete(key)
        for item in value:
            if item is not None:
                params.append(key, str(item))
    else:
        params.set(key, str(value))


def _is_sequence(value) -> bool:
    return isinstance(value, (list, tuple))


def managed_filter_keys(params: ParameterStore, columns: Sequence[Column],
                        config: Optional[GridConfig] = None) -> List[str]:
    """Store keys that ``encode`` owns as filters: declared columns present in the store."""
    reserved = reserved_params(config)
    declared = {column.key for column in columns}
    keys = []
    for key in params.keys():
        if key in declared and key not in reserved and key not in keys:
            keys.append(key)
    return keys


def encode(state: GridState, columns: Sequence[Column], params=None,
           config: Optional[GridConfig] = None) -> SearchParams:
    """
    Encode a ``GridState`` into a copy of ``params``.

    The whole managed key space is rewritten on every call, so the result for
    managed keys depends only on ``state``. Keys that are neither reserved nor
    declared columns are passed through untouched. That includes undeclared
    keys written from ``state.filter`` by an earlier call: they are not managed,
    so a later ``encode`` leaves them in the store.

    Args:
        state: State to write
        columns: Column schema
        params: Store to start from (``None`` for an empty store)
        config: Grid defaults (``GridConfig()`` when omitted)

    Returns:
        The updated copy of the store
    """
    config = config or GridConfig()
    result = ensure_search_params(params).copy()

    result.set(PAGE_PARAM, format_number(state.page))
    result.set(LIMIT_PARAM, format_number(state.limit))

    if state.sort is None:
        result.delete(SORT_PARAM)
    else:
        result.set(SORT_PARAM, str(state.sort))

    if state.order is None:
        result.delete(ORDER_PARAM)
    else:
        result.set(ORDER_PARAM, str(state.order))

    reserved = reserved_params(config)
    for key in managed_filter_keys(result, columns, config):
        if key not in state.filter:
            result.delete(key)

    for key, value in state.filter.items():
        if key in reserved:
            logger.warning(f"Skipping filter key '{key}': it is reserved")
            continue
        write_filter_value(result, key, value, multiple=_is_sequence(value))

    result.delete(SELECTED_PARAM)
    for value in state.selected or []:
        if value is not None:
            result.append(SELECTED_PARAM, str(value))

    if state.command is not None:
        result.set(config.command_param, str(int(state.command)))

    return result
