"""
Polygon Math - Area, centroid, bounds and rigid transforms.

Public functions take and return vertex lists (Vertex objects); the inner
loops run as Numba kernels over (N, 2) float64 arrays. Every function is
total: malformed input yields the documented degenerate default instead of
an exception.
"""

import numpy as np
from numba import njit
from dataclasses import dataclass
from typing import List, Sequence, Tuple
import math

from .constants import EPS_AREA
from .errors import DegenerateGeometryError
from .vertex import ORIGIN, Vertex, array_to_vertices, vertices_to_array
from utils.logging_utils import get_logger

logger = get_logger(__name__)


# =============================================================================
# NUMBA KERNELS
# =============================================================================

@njit(cache=True, nogil=True)
def _signed_area(coords: np.ndarray) -> float:
    """Shoelace signed area. Positive = counterclockwise."""
    n = len(coords)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += coords[i, 0] * coords[j, 1]
        area -= coords[j, 0] * coords[i, 1]
    return area / 2.0


@njit(cache=True, nogil=True)
def _weighted_centroid(coords: np.ndarray, signed_area: float) -> Tuple[float, float]:
    """Area-weighted polygon centroid (signed_area must be nonzero)."""
    n = len(coords)
    cx = 0.0
    cy = 0.0
    for i in range(n):
        j = (i + 1) % n
        cross = coords[i, 0] * coords[j, 1] - coords[j, 0] * coords[i, 1]
        cx += (coords[i, 0] + coords[j, 0]) * cross
        cy += (coords[i, 1] + coords[j, 1]) * cross

    factor = 1.0 / (6.0 * signed_area)
    return cx * factor, cy * factor


@njit(cache=True, nogil=True)
def _rotate_translate(coords: np.ndarray, angle_rad: float, dx: float, dy: float) -> np.ndarray:
    """Rotate about the origin, then translate by (dx, dy)."""
    cos_a = math.cos(angle_rad)
    sin_a = math.sin(angle_rad)

    n = len(coords)
    out = np.empty((n, 2), dtype=np.float64)
    for i in range(n):
        x = coords[i, 0]
        y = coords[i, 1]
        out[i, 0] = x * cos_a - y * sin_a + dx
        out[i, 1] = x * sin_a + y * cos_a + dy
    return out


@njit(cache=True, nogil=True)
def _bounds(coords: np.ndarray) -> Tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y) of a non-empty array."""
    min_x = coords[0, 0]
    max_x = coords[0, 0]
    min_y = coords[0, 1]
    max_y = coords[0, 1]

    for i in range(1, len(coords)):
        x = coords[i, 0]
        y = coords[i, 1]
        if x < min_x:
            min_x = x
        if x > max_x:
            max_x = x
        if y < min_y:
            min_y = y
        if y > max_y:
            max_y = y

    return min_x, min_y, max_x, max_y


# =============================================================================
# BOUNDING BOX
# =============================================================================

@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle (min/max corners)."""
    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Vertex:
        return Vertex((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)

    def intersects(self, other: 'BoundingBox') -> bool:
        """Inclusive overlap test: touching boxes intersect."""
        return not (
            self.max_x < other.min_x or other.max_x < self.min_x or
            self.max_y < other.min_y or other.max_y < self.min_y
        )

    def contains(self, point: Vertex) -> bool:
        return self.min_x <= point.x <= self.max_x and self.min_y <= point.y <= self.max_y

    def union(self, other: 'BoundingBox') -> 'BoundingBox':
        return BoundingBox(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    @classmethod
    def at_point(cls, point: Vertex) -> 'BoundingBox':
        """Zero-size box at a point."""
        return cls(point.x, point.y, point.x, point.y)


def bounding_box(vertices: Sequence[Vertex]) -> BoundingBox:
    """
    Axis-aligned bounding box of a vertex list.

    An empty list yields a zero-size box at the origin.
    """
    coords = vertices_to_array(vertices)
    if len(coords) == 0:
        logger.debug("bounding_box: empty vertex list, returning zero box at origin")
        return BoundingBox.at_point(ORIGIN)

    return BoundingBox(*_bounds(coords))


# =============================================================================
# AREA / CENTROID
# =============================================================================

def signed_area(vertices: Sequence[Vertex]) -> float:
    """Shoelace signed area; positive for counterclockwise winding, 0 below 3 vertices."""
    return float(_signed_area(vertices_to_array(vertices)))


def polygon_area(vertices: Sequence[Vertex]) -> float:
    """
    Polygon area via the shoelace formula.

    |sum(x_i * y_{i+1} - x_{i+1} * y_i)| / 2, indices modulo length.
    Fewer than 3 vertices yields 0.
    """
    if len(vertices) < 3:
        logger.debug("polygon_area: need at least 3 vertices, got %d", len(vertices))
        return 0.0
    return abs(signed_area(vertices))


def is_counterclockwise(vertices: Sequence[Vertex]) -> bool:
    return signed_area(vertices) > 0.0


def ensure_counterclockwise(vertices: Sequence[Vertex]) -> List[Vertex]:
    """Return the vertices in counterclockwise order (reversed if clockwise)."""
    if signed_area(vertices) < 0.0:
        return list(reversed(vertices))
    return list(vertices)


def polygon_centroid(vertices: Sequence[Vertex], strict: bool = False) -> Vertex:
    """
    Geometric center of a polygon.

    - 0 vertices: the origin
    - 1 vertex: that vertex
    - 2 vertices: their midpoint
    - 3+ vertices: area-weighted centroid, or the arithmetic mean of the
      vertices when the polygon has (near) zero area

    Args:
        vertices: Polygon vertices in order
        strict: Raise DegenerateGeometryError instead of using a fallback

    Returns:
        Centroid vertex
    """
    n = len(vertices)
    if n == 0:
        if strict:
            raise DegenerateGeometryError("centroid of an empty vertex list")
        return ORIGIN
    if n == 1:
        return vertices[0]
    if n == 2:
        if strict:
            raise DegenerateGeometryError("centroid of a 2-vertex polygon")
        return vertices[0].midpoint_with(vertices[1])

    coords = vertices_to_array(vertices)
    area = _signed_area(coords)

    if abs(area) <= EPS_AREA:
        if strict:
            raise DegenerateGeometryError(f"centroid of a zero-area polygon ({n} vertices)")
        logger.debug("polygon_centroid: degenerate polygon, using vertex average")
        mean = coords.mean(axis=0)
        return Vertex(float(mean[0]), float(mean[1]))

    cx, cy = _weighted_centroid(coords, area)
    return Vertex(float(cx), float(cy))


# =============================================================================
# TRANSFORMS
# =============================================================================

def translate_all(vertices: Sequence[Vertex], offset: Vertex) -> List[Vertex]:
    """Translate every vertex by offset."""
    return [v.translated(offset.x, offset.y) for v in vertices]


def rotate_all(vertices: Sequence[Vertex], pivot: Vertex, angle: float) -> List[Vertex]:
    """Rotate every vertex around pivot by angle (radians, counterclockwise)."""
    return [v.rotated_around(pivot, angle) for v in vertices]


def scale_all(vertices: Sequence[Vertex], origin: Vertex, factor: float) -> List[Vertex]:
    """Scale every vertex about origin by factor."""
    return [v.scaled_from(origin, factor) for v in vertices]


def rotate_translate(
    vertices: Sequence[Vertex],
    angle: float,
    dx: float,
    dy: float,
    tolerance: float = 0.0,
) -> List[Vertex]:
    """
    Rotate about the origin, then translate: the pose transform of a piece.

    Args:
        vertices: Local-space vertices
        angle: Rotation in radians
        dx: Translation in x
        dy: Translation in y
        tolerance: Comparison tolerance given to the output vertices

    Returns:
        World-space vertices
    """
    coords = vertices_to_array(vertices)
    if len(coords) == 0:
        return []
    return array_to_vertices(_rotate_translate(coords, angle, dx, dy), tolerance)


def transform(
    vertices: Sequence[Vertex],
    translation: Vertex = ORIGIN,
    rotation: float = 0.0,
    scale: float = 1.0,
) -> List[Vertex]:
    """
    Composite transform pipeline.

    Order: translate -> rotate about the translated set's centroid -> scale
    about the centroid of the rotated set. Each step recomputes the centroid
    from the previous step's output; rotation and scale are skipped when
    they are identities.

    Args:
        vertices: Input vertices
        translation: Offset applied first
        rotation: Radians, about the current centroid
        scale: Factor, about the current centroid

    Returns:
        Transformed vertices
    """
    result = translate_all(vertices, translation)

    if rotation != 0.0:
        result = rotate_all(result, polygon_centroid(result), rotation)

    if scale != 1.0:
        result = scale_all(result, polygon_centroid(result), scale)

    return result


# =============================================================================
# VALIDATION
# =============================================================================

def validate_polygon(
    vertices: Sequence[Vertex],
    min_vertex_separation: float,
    min_area: float = 0.0,
) -> Tuple[bool, List[str]]:
    """
    Check a polygon for gameplay use.

    Args:
        vertices: Polygon vertices
        min_vertex_separation: Consecutive vertices must be at least this far apart
        min_area: Area must exceed this

    Returns:
        (is_valid, list_of_issues)
    """
    issues = []
    n = len(vertices)

    if n < 3:
        issues.append(f"Need at least 3 vertices, got {n}")
        return False, issues

    for i in range(n):
        current = vertices[i]
        following = vertices[(i + 1) % n]
        if current.distance_to(following) < min_vertex_separation:
            issues.append(f"Vertices {i} and {(i + 1) % n} closer than {min_vertex_separation}")

    area = polygon_area(vertices)
    if area <= min_area:
        issues.append(f"Area {area:.4f} not above minimum {min_area:.4f}")

    if issues:
        logger.debug("validate_polygon: %s", "; ".join(issues))

    return len(issues) == 0, issues


__all__ = [
    'BoundingBox',
    'bounding_box',
    'signed_area',
    'polygon_area',
    'is_counterclockwise',
    'ensure_counterclockwise',
    'polygon_centroid',
    'translate_all',
    'rotate_all',
    'scale_all',
    'rotate_translate',
    'transform',
    'validate_polygon',
]
