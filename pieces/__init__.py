"""
Pieces module - Shape catalog and posed tangram pieces.
"""

from .shapes import (
    ShapeKind,
    estimated_frame_size,
    local_vertices,
    shape_area,
    total_area,
    validate_catalog,
    validate_shape,
)

from .piece import (
    CANONICAL_COLORS,
    DEFAULT_COLOR,
    Piece,
    PieceColor,
    create_canonical_set,
)

__all__ = [
    'ShapeKind',
    'estimated_frame_size',
    'local_vertices',
    'shape_area',
    'total_area',
    'validate_catalog',
    'validate_shape',
    'CANONICAL_COLORS',
    'DEFAULT_COLOR',
    'Piece',
    'PieceColor',
    'create_canonical_set',
]
