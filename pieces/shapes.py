"""
Shape Catalog - The seven tangram shapes in local space.

Each shape is a pure function of the scale unit. Vertex loops are
counterclockwise with (0, 0) at a meaningful anchor (the right-angle corner
of the triangles, the bottom-left corner of the parallelogram, the center
of the square). The anchor doubles as the rotation pivot of a placed piece.

Areas at unit u:
    large triangles   2 u^2 each
    medium triangle   1 u^2
    small triangles   0.5 u^2 each
    square            1 u^2 (side u, drawn as a diamond)
    parallelogram     1 u^2
    ------------------------------
    canonical set     8 u^2
"""

from enum import Enum
from typing import Dict, List, Tuple
import math

from geometry.constants import (
    CANONICAL_SET_AREA_FACTOR,
    CANONICAL_SET_AREA_TOLERANCE,
    EPS_AREA,
    MAX_SHAPE_AREA_FACTOR,
    MIN_SHAPE_AREA_FACTOR,
)
from geometry.errors import InvalidShapeError
from geometry.polygon import bounding_box, polygon_area
from geometry.vertex import Vertex
from utils.logging_utils import get_logger

logger = get_logger(__name__)


class ShapeKind(Enum):
    """Closed set of tangram shapes; values are the persisted tags."""
    LARGE_TRIANGLE_A = "large_triangle_1"
    LARGE_TRIANGLE_B = "large_triangle_2"
    MEDIUM_TRIANGLE = "medium_triangle"
    SMALL_TRIANGLE_A = "small_triangle_1"
    SMALL_TRIANGLE_B = "small_triangle_2"
    SQUARE = "square"
    PARALLELOGRAM = "parallelogram"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def vertex_count(self) -> int:
        return 4 if self in (ShapeKind.SQUARE, ShapeKind.PARALLELOGRAM) else 3

    @property
    def is_triangle(self) -> bool:
        return self.vertex_count == 3


_DISPLAY_NAMES: Dict[ShapeKind, str] = {
    ShapeKind.LARGE_TRIANGLE_A: "Large Triangle 1",
    ShapeKind.LARGE_TRIANGLE_B: "Large Triangle 2",
    ShapeKind.MEDIUM_TRIANGLE: "Medium Triangle",
    ShapeKind.SMALL_TRIANGLE_A: "Small Triangle 1",
    ShapeKind.SMALL_TRIANGLE_B: "Small Triangle 2",
    ShapeKind.SQUARE: "Square",
    ShapeKind.PARALLELOGRAM: "Parallelogram",
}


def _right_triangle(leg: float) -> List[Vertex]:
    # Right angle at the anchor
    return [Vertex(0.0, 0.0), Vertex(leg, 0.0), Vertex(0.0, leg)]


def local_vertices(kind: ShapeKind, unit: float) -> List[Vertex]:
    """
    Canonical local-space vertex loop of a shape.

    Args:
        kind: Shape
        unit: Scale factor (points per tangram unit)

    Returns:
        Counterclockwise vertex list
    """
    if kind in (ShapeKind.LARGE_TRIANGLE_A, ShapeKind.LARGE_TRIANGLE_B):
        return _right_triangle(2.0 * unit)

    if kind is ShapeKind.MEDIUM_TRIANGLE:
        return _right_triangle(unit * math.sqrt(2.0))

    if kind in (ShapeKind.SMALL_TRIANGLE_A, ShapeKind.SMALL_TRIANGLE_B):
        return _right_triangle(unit)

    if kind is ShapeKind.SQUARE:
        # Side = unit, so half-diagonal = unit * sqrt(2) / 2
        h = unit * math.sqrt(2.0) / 2.0
        return [Vertex(0.0, -h), Vertex(h, 0.0), Vertex(0.0, h), Vertex(-h, 0.0)]

    if kind is ShapeKind.PARALLELOGRAM:
        # Long edges = small-triangle hypotenuse, slanted edges = square side at 45 degrees
        long_edge = unit * math.sqrt(2.0)
        slant = unit / math.sqrt(2.0)
        return [
            Vertex(0.0, 0.0),
            Vertex(long_edge, 0.0),
            Vertex(long_edge + slant, slant),
            Vertex(slant, slant),
        ]

    raise InvalidShapeError(f"Unknown shape kind: {kind!r}")


def shape_area(kind: ShapeKind, unit: float) -> float:
    """Shoelace area of the local vertex loop."""
    return polygon_area(local_vertices(kind, unit))


def total_area(unit: float) -> float:
    """Combined area of all seven shapes (8 * unit**2 for the canonical set)."""
    return sum(shape_area(kind, unit) for kind in ShapeKind)


def estimated_frame_size(kind: ShapeKind, unit: float) -> Tuple[float, float]:
    """(width, height) of the local-space bounding box, for layout."""
    box = bounding_box(local_vertices(kind, unit))
    return abs(box.width), abs(box.height)


def validate_shape(kind: ShapeKind, unit: float):
    """
    Check a shape definition.

    Raises:
        InvalidShapeError: fewer than 3 vertices, area <= epsilon, or area
            outside [0.1 * unit**2, 10 * unit**2]
    """
    vertices = local_vertices(kind, unit)
    if len(vertices) < 3:
        raise InvalidShapeError(f"{kind.value}: need at least 3 vertices, got {len(vertices)}")

    area = polygon_area(vertices)
    if area <= EPS_AREA:
        raise InvalidShapeError(f"{kind.value}: non-positive area {area}")

    unit_sq = unit * unit
    low = MIN_SHAPE_AREA_FACTOR * unit_sq
    high = MAX_SHAPE_AREA_FACTOR * unit_sq
    if not (low <= area <= high):
        raise InvalidShapeError(
            f"{kind.value}: area {area:.4f} outside [{low:.4f}, {high:.4f}]"
        )


def validate_catalog(unit: float):
    """
    Validate every shape and the canonical-set area sum.

    Raises:
        InvalidShapeError: any shape fails, or the total differs from
            8 * unit**2 by more than 0.01 * unit**2
    """
    for kind in ShapeKind:
        validate_shape(kind, unit)

    expected = CANONICAL_SET_AREA_FACTOR * unit * unit
    actual = total_area(unit)
    if abs(actual - expected) > CANONICAL_SET_AREA_TOLERANCE * unit * unit:
        raise InvalidShapeError(f"Canonical set area {actual:.4f} != expected {expected:.4f}")

    logger.debug("validate_catalog: %d shapes valid, total area %.4f", len(ShapeKind), actual)


__all__ = [
    'ShapeKind',
    'local_vertices',
    'shape_area',
    'total_area',
    'estimated_frame_size',
    'validate_shape',
    'validate_catalog',
]
