"""
Tests for the grid action dispatcher.
"""

import logging
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import GridConfig
from datagrid.codec import decode
from datagrid.dispatcher import dispatch
from datagrid.params import SearchParams
from datagrid.state.models import (
    Column,
    GridAction,
    GridCommand,
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

COLUMNS = [
    Column('a'),
    Column('b'),
    Column('c', multiple=True),
]


@pytest.fixture
def store():
    return SearchParams.from_query_string('?page=4&limit=20&sort=name&order=asc&a=1&b=2&utm=x')


class TestCommandTag:
    """Every dispatch stamps the command key first"""

    @pytest.mark.parametrize('action, tag', [
        (SetPage(2), '0'),
        (SetLimit(5), '1'),
        (SetSort('a'), '2'),
        (SetOrder('desc'), '3'),
        (SetFilter({'a': '1'}), '4'),
        (ReplaceFilter({'a': '1'}), '5'),
        (RemoveFilter({'a': None}), '6'),
        (SetSelected(('1',)), '7'),
        (SetState(GridState()), '8'),
    ])
    def test_tag_is_written(self, store, action, tag):
        result = dispatch(store, action, COLUMNS)
        assert result.get('_DGC') == tag

    def test_tag_is_decoded(self, store):
        result = dispatch(store, SetSort('b'), COLUMNS)
        assert decode(result, COLUMNS).command is GridCommand.SET_SORT

    def test_custom_command_param(self, store):
        config = GridConfig(command_param='cmd')
        result = dispatch(store, SetPage(1), COLUMNS, config)
        assert result.get('cmd') == '0'
        assert not result.has('_DGC')

    def test_input_store_is_not_mutated(self, store):
        before = store.items()
        dispatch(store, SetPage(9), COLUMNS)
        assert store.items() == before

    def test_unsupported_action_leaves_store_unchanged(self, store):
        result = dispatch(store, GridAction(), COLUMNS)
        assert result == store


class TestScalarCommands:
    """SetPage/SetLimit/SetSort/SetOrder touch only their own key"""

    def test_set_page(self, store):
        result = dispatch(store, SetPage(7), COLUMNS)
        assert result.get('page') == '7'
        assert result.get('limit') == '20'
        assert result.get('a') == '1'

    def test_unset_page_deletes_key(self, store):
        result = dispatch(store, SetPage(), COLUMNS)
        assert not result.has('page')
        assert decode(result, COLUMNS).page == 1

    def test_set_and_unset_limit(self, store):
        assert dispatch(store, SetLimit(50), COLUMNS).get('limit') == '50'
        assert not dispatch(store, SetLimit(None), COLUMNS).has('limit')

    def test_sort_does_not_clear_order(self, store):
        result = dispatch(store, SetSort(None), COLUMNS)
        assert not result.has('sort')
        assert result.get('order') == 'asc'

    def test_order_does_not_clear_sort(self, store):
        result = dispatch(store, SetOrder(None), COLUMNS)
        assert not result.has('order')
        assert result.get('sort') == 'name'

    def test_unvalidated_order_is_written(self, store):
        assert dispatch(store, SetOrder('sideways'), COLUMNS).get('order') == 'sideways'


class TestFilterCommands:
    """SetFilter/ReplaceFilter/RemoveFilter share one targeted-patch rule"""

    def test_targeted_patch(self):
        store = SearchParams.from_query_string('?a=1&b=2')
        result = dispatch(store, SetFilter({'a': '9'}), COLUMNS)
        assert result.get('a') == '9'
        assert result.get('b') == '2'
        assert result.get('page') == '1'

    def test_filter_resets_page(self, store):
        result = dispatch(store, SetFilter({'b': '3'}), COLUMNS)
        assert result.get('page') == '1'

    def test_page_reset_can_be_disabled(self, store):
        config = GridConfig(reset_page_on_filter_change=False)
        result = dispatch(store, SetFilter({'b': '3'}), COLUMNS, config)
        assert result.get('page') == '4'

    def test_cardinality_switch_leaves_no_stale_value(self):
        store = SearchParams.from_query_string('?c=1')
        result = dispatch(store, SetFilter({'c': ['1', '2', '3']}), COLUMNS)
        assert result.get_all('c') == ['1', '2', '3']

    def test_multiple_column_with_scalar_value(self):
        result = dispatch(SearchParams(), SetFilter({'c': 'x'}), COLUMNS)
        assert result.get_all('c') == ['x']

    def test_single_column_with_list_value_is_joined(self):
        result = dispatch(SearchParams(), SetFilter({'a': ['x', 'y']}), COLUMNS)
        assert result.get_all('a') == ['x,y']

    def test_none_deletes_key(self, store):
        result = dispatch(store, SetFilter({'a': None}), COLUMNS)
        assert not result.has('a')
        assert result.get('b') == '2'

    def test_unmentioned_keys_and_unknown_keys_survive(self, store):
        result = dispatch(store, SetFilter({'a': '5'}), COLUMNS)
        assert result.get('utm') == 'x'
        assert result.get('sort') == 'name'

    @pytest.mark.parametrize('command_cls', [SetFilter, ReplaceFilter, RemoveFilter])
    def test_filter_commands_mutate_identically(self, store, command_cls):
        expected = dispatch(store, SetFilter({'a': None, 'c': ['x', 'y']}), COLUMNS)
        result = dispatch(store, command_cls({'a': None, 'c': ['x', 'y']}), COLUMNS)
        expected.delete('_DGC')
        result.delete('_DGC')
        assert result == expected

    def test_undeclared_key_is_written_but_not_decoded(self, caplog):
        with caplog.at_level(logging.WARNING, logger='datagrid.dispatcher'):
            result = dispatch(SearchParams(), SetFilter({'zzz': '1'}), COLUMNS)
        assert result.get('zzz') == '1'
        assert 'zzz' not in decode(result, COLUMNS).filter
        assert any('zzz' in record.message for record in caplog.records)

    def test_reserved_key_in_filter_is_ignored(self, store):
        result = dispatch(store, SetFilter({'sort': 'evil'}), COLUMNS)
        assert result.get('sort') == 'name'

    def test_empty_filter_only_resets_page(self, store):
        result = dispatch(store, SetFilter({}), COLUMNS)
        assert result.get('page') == '1'
        assert result.get('a') == '1'


class TestSelectionAndState:
    """SetSelected and SetState"""

    def test_set_selected_replaces_values(self):
        store = SearchParams.from_query_string('?selected=1&selected=2')
        result = dispatch(store, SetSelected(('3',)), COLUMNS)
        assert result.get_all('selected') == ['3']

    def test_clearing_selection(self):
        store = SearchParams.from_query_string('?selected=1&selected=2&a=1')
        result = dispatch(store, SetSelected(()), COLUMNS)
        assert not result.has('selected')
        assert decode(result, COLUMNS).selected == []
        assert result.get('a') == '1'

    def test_set_state_rewrites_managed_keys(self, store):
        state = GridState(page=2, limit=5, filter={'c': ['q']}, selected=['9'])
        result = dispatch(store, SetState(state), COLUMNS)
        decoded = decode(result, COLUMNS)
        assert decoded.page == 2
        assert decoded.limit == 5
        assert decoded.sort is None
        assert decoded.filter == {'c': ['q']}
        assert decoded.selected == ['9']
        assert decoded.command is GridCommand.SET_STATE
        assert result.get('utm') == 'x'

    def test_set_state_ignores_incoming_command(self, store):
        state = GridState(command=GridCommand.SET_PAGE)
        result = dispatch(store, SetState(state), COLUMNS)
        assert result.get('_DGC') == '8'


class TestIdempotence:
    """Dispatching the same command twice gives the same store"""

    @pytest.mark.parametrize('action', [
        SetPage(3),
        SetLimit(None),
        SetSort('b'),
        SetFilter({'c': ['1', '2'], 'a': None}),
        SetSelected(('1', '2')),
        SetState(GridState(filter={'a': 'z'})),
    ])
    def test_repeat_dispatch(self, store, action):
        once = dispatch(store, action, COLUMNS)
        twice = dispatch(once, action, COLUMNS)
        assert twice.to_dict() == once.to_dict()
