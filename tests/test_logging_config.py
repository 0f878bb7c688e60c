import logging
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import LoggingConfig
from core.logging_config import GRID_LOGGER, setup_logging, setup_logging_from_config


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    handlers = root.handlers[:]
    grid_level = logging.getLogger(GRID_LOGGER).level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
    logging.getLogger(GRID_LOGGER).setLevel(grid_level)


def _own_handlers(root):
    return [h for h in root.handlers if getattr(h, '_datagrid_handler', False)]


def test_setup_logging_replaces_its_own_handlers(restore_root_logger):
    root = restore_root_logger
    foreign = logging.NullHandler()
    root.addHandler(foreign)

    setup_logging('DEBUG')
    setup_logging('WARNING')

    assert len(_own_handlers(root)) == 1
    assert foreign in root.handlers
    assert root.level == logging.WARNING


def test_setup_logging_with_file(restore_root_logger, tmp_path):
    setup_logging('INFO', log_file='grid.log', log_dir=str(tmp_path / 'logs'))
    logging.getLogger('datagrid.test').info("hello grid")

    for handler in _own_handlers(restore_root_logger):
        handler.flush()
    assert 'hello grid' in (tmp_path / 'logs' / 'grid.log').read_text()


def test_debug_grid_only_lowers_grid_loggers(restore_root_logger, tmp_path):
    setup_logging('INFO', log_file='grid.log', log_dir=str(tmp_path), debug_grid=True)
    logging.getLogger('datagrid.dispatcher').debug("dispatched SET_PAGE")
    logging.getLogger('thirdparty.client').debug("request noise")

    for handler in _own_handlers(restore_root_logger):
        handler.flush()
    text = (tmp_path / 'grid.log').read_text()
    assert 'dispatched SET_PAGE' in text
    assert 'request noise' not in text


def test_grid_debug_is_reset_by_next_setup(restore_root_logger):
    setup_logging('INFO', debug_grid=True)
    assert logging.getLogger(GRID_LOGGER).level == logging.DEBUG

    setup_logging('INFO')
    assert logging.getLogger(GRID_LOGGER).level == logging.NOTSET


def test_setup_from_config_section(restore_root_logger, tmp_path):
    log_config = LoggingConfig(level='WARNING', log_file='app.log', log_dir=str(tmp_path))
    setup_logging_from_config(log_config)

    assert restore_root_logger.level == logging.WARNING
    assert (tmp_path / 'app.log').exists()
    assert logging.getLogger(GRID_LOGGER).level == logging.NOTSET

    setup_logging_from_config(LoggingConfig(), debug_grid=True)
    assert logging.getLogger(GRID_LOGGER).level == logging.DEBUG


def test_empty_log_file_means_console_only(restore_root_logger):
    setup_logging_from_config(LoggingConfig(log_file=''))
    own = _own_handlers(restore_root_logger)
    assert len(own) == 1
    assert not isinstance(own[0], logging.FileHandler)
