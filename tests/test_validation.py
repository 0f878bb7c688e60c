"""
Tests for column and grid state validation.
"""

import math
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import GridConfig
from datagrid.codec import decode, encode
from datagrid.validation import is_round_trippable, validate_columns, validate_grid_state
from datagrid.state.models import Column, GridState

COLUMNS = [Column('status', multiple=True), Column('region')]


class TestValidateColumns:

    def test_valid_schema(self):
        assert validate_columns(COLUMNS) == []

    def test_reserved_keys(self):
        errors = validate_columns([Column('page'), Column('_DGC')])
        assert len(errors) == 2

    def test_custom_command_param_is_reserved(self):
        assert validate_columns([Column('cmd')], GridConfig(command_param='cmd'))
        assert validate_columns([Column('_DGC')], GridConfig(command_param='cmd')) == []

    def test_duplicates_and_empty_keys(self):
        errors = validate_columns([Column('a'), Column('a'), Column('')])
        assert any('more than once' in e for e in errors)
        assert any('empty' in e for e in errors)


class TestValidateGridState:

    def test_default_state_is_valid(self):
        assert validate_grid_state(GridState(), COLUMNS) == []

    @pytest.mark.parametrize('state', [
        GridState(page=0),
        GridState(page=math.nan),
        GridState(limit=2.5),
        GridState(page=True),
        GridState(sort=''),
        GridState(order='sideways'),
        GridState(filter={'unknown': 'x'}),
        GridState(filter={'region': None}),
        GridState(filter={'region': ['a']}),
        GridState(filter={'status': 'open'}),
        GridState(filter={'status': []}),
        GridState(filter={'status': [1]}),
        GridState(selected=[1]),
    ])
    def test_invalid_states(self, state):
        assert validate_grid_state(state, COLUMNS)
        assert not is_round_trippable(state, COLUMNS)

    def test_valid_states_round_trip(self):
        state = GridState(page=2, limit=25, sort='region', order='desc',
                          filter={'status': ['a', 'b'], 'region': ''}, selected=['1'])
        assert is_round_trippable(state, COLUMNS)
        assert decode(encode(state, COLUMNS), COLUMNS) == state
