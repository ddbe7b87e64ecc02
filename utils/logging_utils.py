"""
Logging utilities - one logger family for the whole kernel.

All modules obtain loggers via get_logger(), which places them under the
'tangram' namespace. The process root logger is never modified.
"""

import logging
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = 'tangram'

_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else default


def configure_logging(level: Union[str, int] = 'INFO', mute_external: bool = True) -> logging.Logger:
    """
    Attach a single stdout handler to the 'tangram' logger and set its level.

    Safe to call repeatedly; the handler is only added once.

    Args:
        level: Level name or number
        mute_external: Keep matplotlib at INFO when running at DEBUG

    Returns:
        The 'tangram' root logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)

    for h in list(root.handlers):
        if isinstance(h, logging.NullHandler):
            root.removeHandler(h)

    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        root.addHandler(handler)

    root.propagate = False
    lvl = _to_level(level)
    root.setLevel(lvl)

    if mute_external and lvl <= logging.DEBUG:
        for noisy in ('matplotlib', 'matplotlib.font_manager', 'numba'):
            logging.getLogger(noisy).setLevel(logging.INFO)

    return root


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """
    Return a logger under the 'tangram' namespace.

    Module names like 'geometry.polygon' become 'tangram.geometry.polygon'
    so they inherit whatever configure_logging() set up.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    log = logging.getLogger(name)
    if level is not None:
        log.setLevel(_to_level(level))
    return log


__all__ = ['ROOT_LOGGER_NAME', 'get_logger', 'configure_logging']
