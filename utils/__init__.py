"""
Utilities module - Logging, persistence, and visualization helpers.

Only logging is imported eagerly: the geometry packages import it, and the
persistence / plotting submodules import the geometry packages in turn.
"""

from .logging_utils import configure_logging, get_logger

__all__ = [
    'configure_logging',
    'get_logger',
]
