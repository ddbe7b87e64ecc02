"""
Geometry module - Points, polygon math, collision queries and shape comparison.
"""

from .vertex import (
    ORIGIN,
    Vertex,
    array_to_vertices,
    as_vertex,
    regular_polygon,
    vertices_to_array,
)

from .errors import (
    DegenerateGeometryError,
    GeometryError,
    InvalidShapeError,
)

from .polygon import (
    BoundingBox,
    bounding_box,
    ensure_counterclockwise,
    polygon_area,
    polygon_centroid,
    rotate_all,
    scale_all,
    signed_area,
    transform,
    translate_all,
    validate_polygon,
)

from .collision import (
    boxes_intersect,
    check_all_collisions,
    circle_intersects_polygon,
    overlap_area,
    piece_at_point,
    pieces_near_point,
    point_in_polygon,
    points_in_polygon,
    polygons_overlap,
    segment_distance,
)

from .comparator import (
    find_optimal_alignment,
    normalize_shape,
    shape_overlap,
    shapes_similar,
)

__all__ = [
    'ORIGIN',
    'Vertex',
    'array_to_vertices',
    'as_vertex',
    'regular_polygon',
    'vertices_to_array',
    'GeometryError',
    'InvalidShapeError',
    'DegenerateGeometryError',
    'BoundingBox',
    'bounding_box',
    'ensure_counterclockwise',
    'polygon_area',
    'polygon_centroid',
    'rotate_all',
    'scale_all',
    'signed_area',
    'transform',
    'translate_all',
    'validate_polygon',
    'boxes_intersect',
    'check_all_collisions',
    'circle_intersects_polygon',
    'overlap_area',
    'piece_at_point',
    'pieces_near_point',
    'point_in_polygon',
    'points_in_polygon',
    'polygons_overlap',
    'segment_distance',
    'find_optimal_alignment',
    'normalize_shape',
    'shape_overlap',
    'shapes_similar',
]
