"""
Geometry error taxonomy.

Interactive callers get documented fallbacks instead of exceptions; these
are raised only by explicit validation entry points (and by strict-mode
helpers) so malformed static data is caught at startup.
"""


class GeometryError(Exception):
    """Base class for kernel errors."""


class InvalidShapeError(GeometryError):
    """Too few vertices, or non-positive / out-of-bounds area."""


class DegenerateGeometryError(GeometryError):
    """Zero-length segment or zero-area polygon where a strict result was requested."""


__all__ = ['GeometryError', 'InvalidShapeError', 'DegenerateGeometryError']
