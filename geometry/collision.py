"""
Collision Queries - Point/shape containment, proximity, and piece overlap.

Point-in-polygon uses ray casting: a ray is cast from the point in +X and
an edge counts when one endpoint is above the point's Y and the other at or
below it, and the edge crosses the point's Y to the right of the point.
Odd crossing count = inside.

Piece-vs-piece overlap uses Shapely, with an AABB pre-check first, since
exact interior intersection is what "two pieces overlap" means.
"""

import numpy as np
from numba import njit
from shapely.geometry import Polygon
from shapely.validation import make_valid
from typing import List, Optional, Sequence, Tuple
import math

from .polygon import BoundingBox, bounding_box
from .vertex import Vertex, vertices_to_array
from utils.logging_utils import get_logger

logger = get_logger(__name__)


# =============================================================================
# RAY CASTING KERNELS
# =============================================================================

@njit(cache=True, nogil=True)
def _point_in_polygon(px: float, py: float, coords: np.ndarray) -> bool:
    n = len(coords)
    if n < 3:
        return False

    crossings = 0
    for i in range(n):
        x1 = coords[i, 0]
        y1 = coords[i, 1]
        x2 = coords[(i + 1) % n, 0]
        y2 = coords[(i + 1) % n, 1]

        # Edge must span the ray's Y
        if (y1 > py) != (y2 > py):
            x_cross = x1 + (py - y1) * (x2 - x1) / (y2 - y1)
            if x_cross > px:
                crossings += 1

    return crossings % 2 == 1


@njit(cache=True, nogil=True)
def _points_in_polygon(points: np.ndarray, coords: np.ndarray) -> np.ndarray:
    m = len(points)
    inside = np.zeros(m, dtype=np.bool_)
    for k in range(m):
        inside[k] = _point_in_polygon(points[k, 0], points[k, 1], coords)
    return inside


# =============================================================================
# POINT / SEGMENT / BOX QUERIES
# =============================================================================

def point_in_polygon(point: Vertex, vertices: Sequence[Vertex]) -> bool:
    """
    Ray-casting containment test.

    Args:
        point: Point to test
        vertices: Polygon vertices in order (either winding)

    Returns:
        True if inside; False for fewer than 3 vertices
    """
    if len(vertices) < 3:
        return False
    return bool(_point_in_polygon(point.x, point.y, vertices_to_array(vertices)))


def points_in_polygon(points, vertices: Sequence[Vertex]) -> np.ndarray:
    """
    Vectorized containment test.

    Args:
        points: (M, 2) array or sequence of vertices
        vertices: Polygon vertices

    Returns:
        (M,) boolean array
    """
    pts = vertices_to_array(points)
    if len(vertices) < 3:
        return np.zeros(len(pts), dtype=bool)
    return _points_in_polygon(pts, vertices_to_array(vertices))


def segment_distance(
    point: Vertex,
    seg_start: Vertex,
    seg_end: Vertex,
    min_vertex_separation: float,
) -> float:
    """
    Shortest distance from a point to a line segment.

    The projection parameter is clamped to [0, 1]. A segment no longer than
    min_vertex_separation is treated as a point (its start).
    """
    length = seg_start.distance_to(seg_end)
    if length <= min_vertex_separation:
        return point.distance_to(seg_start)

    dx = seg_end.x - seg_start.x
    dy = seg_end.y - seg_start.y
    t = ((point.x - seg_start.x) * dx + (point.y - seg_start.y) * dy) / (length * length)
    t = max(0.0, min(1.0, t))

    return math.hypot(point.x - (seg_start.x + t * dx), point.y - (seg_start.y + t * dy))


def boxes_intersect(a: BoundingBox, b: BoundingBox) -> bool:
    """AABB overlap test (touching counts as intersecting)."""
    return a.intersects(b)


def circle_intersects_polygon(
    center: Vertex,
    radius: float,
    vertices: Sequence[Vertex],
    min_vertex_separation: float,
) -> bool:
    """
    True if the circle's center is inside the polygon or any edge is within radius.
    """
    if point_in_polygon(center, vertices):
        return True

    n = len(vertices)
    for i in range(n):
        if segment_distance(center, vertices[i], vertices[(i + 1) % n], min_vertex_separation) <= radius:
            return True

    return False


# =============================================================================
# PIECE QUERIES
# =============================================================================

def pieces_near_point(pieces: Sequence, point: Vertex, max_distance: float) -> List:
    """
    Broad-phase filter: pieces whose position (not outline) is within max_distance.

    Order of the input is preserved.
    """
    near = [p for p in pieces if point.distance_to(p.position) <= max_distance]
    logger.debug("pieces_near_point: %d of %d within %.1f", len(near), len(pieces), max_distance)
    return near


def piece_at_point(pieces: Sequence, point: Vertex) -> Optional[object]:
    """
    Hit test for drag targets.

    Later pieces are drawn on top, so the last piece whose outline contains
    the point wins.

    Returns:
        The piece under the point, or None
    """
    for piece in reversed(pieces):
        vertices = piece.world_vertices()
        if not bounding_box(vertices).contains(point):
            continue
        if point_in_polygon(point, vertices):
            return piece
    return None


# =============================================================================
# SHAPELY-BASED PIECE OVERLAP
# =============================================================================

def _to_polygon(vertices: Sequence[Vertex]) -> Polygon:
    poly = Polygon(vertices_to_array(vertices))
    if not poly.is_valid:
        poly = make_valid(poly)
    return poly


def overlap_area(verts1: Sequence[Vertex], verts2: Sequence[Vertex]) -> float:
    """
    Exact area of the intersection of two polygons.

    Returns 0 when either has fewer than 3 vertices.
    """
    if len(verts1) < 3 or len(verts2) < 3:
        return 0.0
    return float(_to_polygon(verts1).intersection(_to_polygon(verts2)).area)


def polygons_overlap(
    verts1: Sequence[Vertex],
    verts2: Sequence[Vertex],
    area_tolerance: float,
) -> bool:
    """
    True if the polygons' interiors overlap by more than area_tolerance.

    Pieces sharing an edge (normal in a solved tangram) do not overlap.
    """
    if not bounding_box(verts1).intersects(bounding_box(verts2)):
        return False
    return overlap_area(verts1, verts2) > area_tolerance


def check_all_collisions(pieces: Sequence, area_tolerance: float) -> List[Tuple[int, int]]:
    """
    Find all overlapping piece pairs.

    Uses an AABB pre-check, then the exact Shapely test for candidates.

    Args:
        pieces: Pieces (anything with world_vertices())
        area_tolerance: Minimum intersection area that counts as overlap

    Returns:
        List of (i, j) index pairs with i < j
    """
    all_vertices = [p.world_vertices() for p in pieces]
    all_bounds = [bounding_box(v) for v in all_vertices]

    collisions = []
    n = len(all_vertices)
    for i in range(n):
        for j in range(i + 1, n):
            if not all_bounds[i].intersects(all_bounds[j]):
                continue
            if overlap_area(all_vertices[i], all_vertices[j]) > area_tolerance:
                collisions.append((i, j))

    if collisions:
        logger.debug("check_all_collisions: %d overlapping pairs", len(collisions))

    return collisions


__all__ = [
    'point_in_polygon',
    'points_in_polygon',
    'segment_distance',
    'boxes_intersect',
    'circle_intersects_polygon',
    'pieces_near_point',
    'piece_at_point',
    'overlap_area',
    'polygons_overlap',
    'check_all_collisions',
]
