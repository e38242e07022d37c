import logging

from fist.core.logging_utils import configure_logging, get_logger


def test_get_logger_attaches_no_handlers():
    log = get_logger('fist.test_module')
    assert log.name == 'fist.test_module'
    assert log.handlers == []
    assert log.level == logging.NOTSET
    assert get_logger('fist.test_module', 'debug').level == logging.DEBUG


def test_configure_logging_single_handler_no_root_change():
    fist_root = logging.getLogger('fist')
    saved_handlers = list(fist_root.handlers)
    saved_propagate = fist_root.propagate
    saved_level = fist_root.level
    root_handlers = list(logging.getLogger().handlers)
    # state right after `import fist`
    fist_root.handlers[:] = [logging.NullHandler()]
    try:
        configure_logging('WARNING')
        configure_logging('DEBUG')
        assert len(fist_root.handlers) == 1
        assert isinstance(fist_root.handlers[0], logging.StreamHandler)
        assert fist_root.level == logging.DEBUG
        assert fist_root.propagate is False
        assert logging.getLogger().handlers == root_handlers
    finally:
        fist_root.handlers[:] = saved_handlers
        fist_root.propagate = saved_propagate
        fist_root.setLevel(saved_level)


def test_unknown_level_falls_back_to_info():
    fist_root = logging.getLogger('fist')
    saved_handlers = list(fist_root.handlers)
    saved_propagate = fist_root.propagate
    saved_level = fist_root.level
    try:
        configure_logging('LOUD')
        assert fist_root.level == logging.INFO
    finally:
        fist_root.handlers[:] = saved_handlers
        fist_root.propagate = saved_propagate
        fist_root.setLevel(saved_level)
