"""
Shape Comparator - Similarity, overlap estimation, and alignment search.

These are simple algorithms sized for 3-4 vertex tangram
shapes:

- shapes_similar: normalize both shapes (counterclockwise, centroid at the
  origin, unit area), then try every cyclic starting offset of the second
  shape, rotating it so its offset vertex lines up with the first shape's
  vertex 0, and compare vertex pairs.
- shape_overlap: deterministic grid sampling over the union bounding box.
  It is an approximation whose error shrinks with the grid resolution, not
  exact polygon clipping.
- find_optimal_alignment: exhaustive search over evenly spaced angles.
"""

import numpy as np
from typing import List, Sequence, Tuple
import math

from .collision import points_in_polygon
from .constants import EPS_LENGTH, MIN_GRID_SAMPLES
from .polygon import (
    ensure_counterclockwise,
    polygon_area,
    polygon_centroid,
    rotate_all,
    scale_all,
    translate_all,
)
from .vertex import ORIGIN, Vertex, vertices_to_array
from utils.logging_utils import get_logger

logger = get_logger(__name__)


# =============================================================================
# SIMILARITY
# =============================================================================

def normalize_shape(vertices: Sequence[Vertex]) -> List[Vertex]:
    """
    Counterclockwise, centroid at the origin, unit area.

    Scaling is about the shape's own centroid by 1/sqrt(area). A zero-area
    input is only re-centered.
    """
    ccw = ensure_counterclockwise(vertices)
    center = polygon_centroid(ccw)
    area = polygon_area(ccw)

    if area > 0.0:
        ccw = scale_all(ccw, center, 1.0 / math.sqrt(area))

    return translate_all(ccw, Vertex(-center.x, -center.y))


def _polar_angle(v: Vertex) -> float:
    if abs(v.x) <= EPS_LENGTH and abs(v.y) <= EPS_LENGTH:
        return 0.0
    return math.atan2(v.y, v.x)


def shapes_similar(v1: Sequence[Vertex], v2: Sequence[Vertex], tolerance: float) -> bool:
    """
    True if two polygons are the same shape up to rotation, translation and uniform scale.

    Requires equal vertex counts (>= 3) and both areas above tolerance.
    Mirror images are not similar.

    Args:
        v1: First polygon
        v2: Second polygon
        tolerance: Max Euclidean distance between paired vertices after normalization

    Returns:
        True on the first cyclic offset where every vertex pair matches
    """
    n = len(v1)
    if n < 3 or n != len(v2):
        return False

    if polygon_area(v1) <= tolerance or polygon_area(v2) <= tolerance:
        logger.debug("shapes_similar: area at or below tolerance %.3g", tolerance)
        return False

    norm1 = normalize_shape(v1)
    norm2 = normalize_shape(v2)
    anchor_angle = _polar_angle(norm1[0])

    for offset in range(n):
        angle = anchor_angle - _polar_angle(norm2[offset])
        aligned = rotate_all(norm2, ORIGIN, angle)

        if all(
            norm1[i].distance_to(aligned[(i + offset) % n]) <= tolerance
            for i in range(n)
        ):
            logger.debug("shapes_similar: matched at offset %d (rotation %.4f rad)", offset, angle)
            return True

    return False


# =============================================================================
# OVERLAP ESTIMATION
# =============================================================================

def _grid_shape(width: float, height: float, sample_density: int) -> Tuple[int, int]:
    """(nx, ny): sample_density along the longer side, proportional on the shorter."""
    density = max(int(sample_density), MIN_GRID_SAMPLES)
    if width >= height:
        nx = density
        ny = int(round(density * height / width))
    else:
        ny = density
        nx = int(round(density * width / height))
    return max(nx, MIN_GRID_SAMPLES), max(ny, MIN_GRID_SAMPLES)


def _sample_grid(min_x: float, min_y: float, width: float, height: float,
                 nx: int, ny: int) -> np.ndarray:
    """Cell-center sample points, shape (nx * ny, 2)."""
    xs = min_x + (np.arange(nx) + 0.5) * (width / nx)
    ys = min_y + (np.arange(ny) + 0.5) * (height / ny)
    gx, gy = np.meshgrid(xs, ys)
    return np.column_stack([gx.ravel(), gy.ravel()])


def shape_overlap(v1: Sequence[Vertex], v2: Sequence[Vertex], sample_density: int = 100) -> float:
    """
    Estimate the fraction of shape 1's area covered by shape 2.

    A regular grid spans the union bounding box of both shapes;
    the result is samples_in_both / samples_in_shape1.

    Args:
        v1: Reference polygon
        v2: Covering polygon
        sample_density: Samples along the longer side of the box (minimum 10 per axis)

    Returns:
        Fraction in [0, 1]; 0 when shape 1 receives no samples
    """
    if len(v1) < 3 or len(v2) < 3:
        return 0.0

    c1 = vertices_to_array(v1)
    c2 = vertices_to_array(v2)
    both = np.vstack([c1, c2])
    min_x, min_y = both.min(axis=0)
    max_x, max_y = both.max(axis=0)
    width = float(max_x - min_x)
    height = float(max_y - min_y)

    if width <= 0.0 or height <= 0.0:
        return 0.0

    nx, ny = _grid_shape(width, height, sample_density)
    samples = _sample_grid(float(min_x), float(min_y), width, height, nx, ny)

    in1 = points_in_polygon(samples, c1)
    n_in1 = int(in1.sum())
    if n_in1 == 0:
        return 0.0

    in2 = points_in_polygon(samples, c2)
    return float(np.count_nonzero(in1 & in2)) / n_in1


# =============================================================================
# ALIGNMENT SEARCH
# =============================================================================

def find_optimal_alignment(
    v1: Sequence[Vertex],
    v2: Sequence[Vertex],
    angle_steps: int = 72,
    sample_density: int = 100,
) -> float:
    """
    Rotation of shape 2 that best covers shape 1.

    For each of angle_steps evenly spaced angles in [0, 2*pi), shape 2 is
    rotated about its own centroid, moved so the centroids coincide, and
    scored with shape_overlap. Ties keep the smaller angle.

    Args:
        v1: Reference polygon
        v2: Polygon to rotate
        angle_steps: Number of candidate angles
        sample_density: Passed to shape_overlap

    Returns:
        Best angle in radians (0.0 when angle_steps < 1)
    """
    if angle_steps < 1:
        return 0.0

    c1 = polygon_centroid(v1)
    c2 = polygon_centroid(v2)
    offset = Vertex(c1.x - c2.x, c1.y - c2.y)

    best_angle = 0.0
    best_overlap = -1.0
    for k in range(angle_steps):
        angle = 2.0 * math.pi * k / angle_steps
        candidate = translate_all(rotate_all(v2, c2, angle), offset)
        overlap = shape_overlap(v1, candidate, sample_density)
        if overlap > best_overlap:
            best_overlap = overlap
            best_angle = angle

    logger.debug(
        "find_optimal_alignment: best angle %.4f rad (overlap %.3f over %d steps)",
        best_angle, best_overlap, angle_steps,
    )
    return best_angle


def alignment_overlap(
    v1: Sequence[Vertex],
    v2: Sequence[Vertex],
    angle: float,
    sample_density: int = 100,
) -> float:
    """Overlap of shape 2 over shape 1 after rotating it by angle about its centroid and matching centroids."""
    c1 = polygon_centroid(v1)
    c2 = polygon_centroid(v2)
    candidate = translate_all(rotate_all(v2, c2, angle), Vertex(c1.x - c2.x, c1.y - c2.y))
    return shape_overlap(v1, candidate, sample_density)


__all__ = [
    'normalize_shape',
    'shapes_similar',
    'shape_overlap',
    'find_optimal_alignment',
    'alignment_overlap',
]
