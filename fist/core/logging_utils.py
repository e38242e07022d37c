"""Logging utilities for fist.

Provides a consistent logger hierarchy and formatting without modifying the
process root logger. All fist code should obtain loggers via get_logger().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')


def _ensure_fist_root() -> logging.Logger:
    """Ensure the 'fist' logger has a single stream handler and is isolated
    from the process root logger. Returns the 'fist' logger.
    """
    fist_root = logging.getLogger('fist')
    has_non_null = any(not isinstance(h, logging.NullHandler) for h in fist_root.handlers)
    if not has_non_null:
        # Remove NullHandlers added by the package __init__ so logs are not swallowed
        for h in list(fist_root.handlers):
            if isinstance(h, logging.NullHandler):
                fist_root.removeHandler(h)
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        fist_root.addHandler(handler)
    fist_root.propagate = False
    return fist_root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    if isinstance(value, int):
        return value
    return default


def configure_logging(level: Union[str, int] = 'INFO', mute_external: bool = True) -> None:
    """Configure the 'fist' logger family level and optional external noise suppression.

    This does NOT modify the process root logger.
    """
    fist_root = _ensure_fist_root()
    lvl = _to_level(level)
    fist_root.setLevel(lvl)
    if mute_external and lvl <= logging.DEBUG:
        for noisy in ('matplotlib', 'matplotlib.font_manager'):
            logging.getLogger(noisy).setLevel(logging.INFO)


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger under the 'fist' namespace.

    Unlike configure_logging(), this does not attach handlers: library code
    stays silent until an application calls configure_logging(). If a level
    is provided it is set on the logger; otherwise the logger inherits from
    its 'fist' parent.
    """
    log = logging.getLogger(name)
    if level is not None:
        log.setLevel(_to_level(level))
    else:
        log.setLevel(logging.NOTSET)
    return log


__all__ = ['get_logger', 'configure_logging']
