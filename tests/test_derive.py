"""
Tests for the column-driven derivation pipeline.
"""

import dataclasses
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datagrid.derive import derive_state
from datagrid.state.models import Column, GridState


def inject(key, value):
    def transform(state):
        return dataclasses.replace(state, filter={**state.filter, key: value})
    return transform


class TestDeriveState:
    """Folding derive_state transforms over a decoded state"""

    def test_no_transforms_returns_equal_copy(self):
        state = GridState(page=2, filter={'a': '1'})
        derived = derive_state(state, [Column('a'), Column('b')])
        assert derived == state
        assert derived is not state

    def test_injects_implicit_filter(self):
        state = GridState(filter={'status': ['open']})
        derived = derive_state(state, [Column('org', derive_state=inject('org', '1'))])
        assert derived.filter == {'status': ['open'], 'org': '1'}

    def test_last_column_wins(self):
        columns = [
            Column('x', derive_state=inject('k', 'x')),
            Column('y', derive_state=inject('k', 'y')),
        ]
        assert derive_state(GridState(), columns).filter['k'] == 'y'

    def test_transforms_see_previous_output(self):
        seen = []

        def record(state):
            seen.append(dict(state.filter))
            return state

        columns = [
            Column('a', derive_state=inject('a', '1')),
            Column('b', derive_state=record),
        ]
        derive_state(GridState(), columns)
        assert seen == [{'a': '1'}]

    def test_input_state_is_not_mutated(self):
        def mutate_in_place(state):
            state.filter['leak'] = 'yes'
            return state

        state = GridState(filter={'a': '1'})
        derive_state(state, [Column('a', derive_state=mutate_in_place)])
        assert state.filter == {'a': '1'}

    def test_is_deterministic(self):
        columns = [Column('org', derive_state=inject('org', '7'))]
        state = GridState(selected=['1'])
        assert derive_state(state, columns) == derive_state(state, columns)
