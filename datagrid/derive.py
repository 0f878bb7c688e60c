"""
Post-decode derivation pipeline.

Columns may declare a ``derive_state`` transform that injects implicit
filters (for example a fixed scoping constraint). The transforms are folded
over the decoded state in column declaration order.
"""

import copy
import logging
from typing import Sequence

from datagrid.state.models import Column, GridState

logger = logging.getLogger(__name__)


def derive_state(state: GridState, columns: Sequence[Column]) -> GridState:
    """
    Apply every column's ``derive_state`` transform to a copy of ``state``.

    Each transform receives the output of the previous one, so transforms
    writing the same filter key resolve last-write-wins.

    Args:
        state: Decoded state; left untouched
        columns: Column schema in declaration order

    Returns:
        The derived state
    """
    current = copy.deepcopy(state)

    for column in columns:
        if column.derive_state is None:
            continue
        current = column.derive_state(current)
        logger.debug(f"Applied derive_state of column '{column.key}'")

    return current
