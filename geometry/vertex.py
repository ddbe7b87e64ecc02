"""
Vertex - Immutable 2D point with rigid-transform primitives.

Coordinates follow the math convention: positive angles rotate
counterclockwise. A renderer with an inverted Y axis sees clockwise
rotation on screen; that mapping belongs to the renderer.

Equality is tolerance based. Each Vertex carries the tolerance it should be
compared with (0.0 = exact). Vertices with different tolerances are never
equal; with the same tolerance they are equal when both |dx| and |dy| are
within it. Tolerance equality is not transitive, so no coordinate grid can
hash it consistently: tolerant vertices hash by their tolerance alone and
sets of them fall back to equality scans. Exact vertices hash by coordinates.
"""

import numpy as np
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Sequence, Tuple, Union
import math


@dataclass(frozen=True, eq=False)
class Vertex:
    """
    Immutable point.

    Attributes:
        x: X coordinate
        y: Y coordinate
        tolerance: Comparison tolerance used by == and hash()
    """

    x: float = 0.0
    y: float = 0.0
    tolerance: float = 0.0

    # -------------------------------------------------------------------------
    # Translation / rotation / scaling
    # -------------------------------------------------------------------------

    def translated(self, dx: float, dy: float) -> 'Vertex':
        """Return the vertex moved by (dx, dy)."""
        return Vertex(self.x + dx, self.y + dy, self.tolerance)

    def translated_by(self, offset: 'Vertex') -> 'Vertex':
        """Return the vertex moved by another vertex treated as an offset."""
        return self.translated(offset.x, offset.y)

    def rotated_around(self, pivot: 'Vertex', angle: float) -> 'Vertex':
        """
        Rotate around a pivot point.

        Args:
            pivot: Center of rotation
            angle: Radians, positive = counterclockwise

        Returns:
            Rotated vertex
        """
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        rel_x = self.x - pivot.x
        rel_y = self.y - pivot.y
        return Vertex(
            rel_x * cos_a - rel_y * sin_a + pivot.x,
            rel_x * sin_a + rel_y * cos_a + pivot.y,
            self.tolerance,
        )

    def rotated(self, angle: float) -> 'Vertex':
        """Rotate around the origin."""
        return self.rotated_around(ORIGIN, angle)

    def scaled_from(self, origin: 'Vertex', factor: float) -> 'Vertex':
        """Scale the offset from origin by factor."""
        return Vertex(
            origin.x + (self.x - origin.x) * factor,
            origin.y + (self.y - origin.y) * factor,
            self.tolerance,
        )

    # -------------------------------------------------------------------------
    # Distances
    # -------------------------------------------------------------------------

    def distance_to(self, other: 'Vertex') -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def squared_distance_to(self, other: 'Vertex') -> float:
        dx = other.x - self.x
        dy = other.y - self.y
        return dx * dx + dy * dy

    def midpoint_with(self, other: 'Vertex') -> 'Vertex':
        return Vertex((self.x + other.x) / 2.0, (self.y + other.y) / 2.0, self.tolerance)

    def is_within_distance(self, threshold: float, other: 'Vertex') -> bool:
        """True if the Euclidean distance to other is <= threshold."""
        return self.distance_to(other) <= threshold

    def matches(self, other: 'Vertex', tolerance: float) -> bool:
        """Euclidean match within tolerance (used for vertex snapping)."""
        return self.is_within_distance(tolerance, other)

    # -------------------------------------------------------------------------
    # Conversions
    # -------------------------------------------------------------------------

    def with_tolerance(self, tolerance: float) -> 'Vertex':
        """Same coordinates, different comparison tolerance."""
        return replace(self, tolerance=tolerance)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    @staticmethod
    def unit_vector(angle: float) -> 'Vertex':
        """Unit-length vertex pointing at angle (0 = +X, pi/2 = +Y)."""
        return Vertex(math.cos(angle), math.sin(angle))

    # -------------------------------------------------------------------------
    # Tolerance-aware equality
    # -------------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vertex):
            return NotImplemented
        if self.tolerance != other.tolerance:
            return False
        tol = self.tolerance
        return abs(self.x - other.x) <= tol and abs(self.y - other.y) <= tol

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        if self.tolerance > 0:
            return hash(('tolerance', self.tolerance))
        # 0.0 and -0.0 hash alike already
        return hash((self.x, self.y))

    def __repr__(self) -> str:
        return f"Vertex(x={self.x:.4f}, y={self.y:.4f})"


ORIGIN = Vertex(0.0, 0.0)

VertexLike = Union[Vertex, Tuple[float, float], Sequence[float]]


def as_vertex(value: VertexLike, tolerance: float = 0.0) -> Vertex:
    """Coerce a Vertex or an (x, y) pair to a Vertex."""
    if isinstance(value, Vertex):
        return value
    x, y = value
    return Vertex(float(x), float(y), tolerance)


def vertices_to_array(vertices: Union[Iterable[VertexLike], np.ndarray]) -> np.ndarray:
    """
    Convert vertices to a contiguous (N, 2) float64 array for the kernels.

    Accepts Vertex objects, (x, y) pairs or an existing array.
    """
    if isinstance(vertices, np.ndarray):
        return np.ascontiguousarray(vertices, dtype=np.float64).reshape(-1, 2)

    coords = [(v.x, v.y) if isinstance(v, Vertex) else (v[0], v[1]) for v in vertices]
    if not coords:
        return np.empty((0, 2), dtype=np.float64)
    return np.ascontiguousarray(coords, dtype=np.float64)


def array_to_vertices(coords: np.ndarray, tolerance: float = 0.0) -> List[Vertex]:
    """Convert an (N, 2) array back to a list of Vertex."""
    return [Vertex(float(x), float(y), tolerance) for x, y in coords]


def regular_polygon(sides: int, radius: float, start_angle: float = 0.0) -> List[Vertex]:
    """
    Vertices of a regular polygon centered at the origin, counterclockwise.

    Returns an empty list for fewer than 3 sides.
    """
    if sides < 3:
        return []

    step = 2.0 * math.pi / sides
    return [
        Vertex(radius * math.cos(start_angle + i * step), radius * math.sin(start_angle + i * step))
        for i in range(sides)
    ]


__all__ = [
    'Vertex',
    'ORIGIN',
    'VertexLike',
    'as_vertex',
    'vertices_to_array',
    'array_to_vertices',
    'regular_polygon',
]
