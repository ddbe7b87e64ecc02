"""
Fixed internal thresholds.

These are properties of the algorithms, not gameplay tuning, so they live
here rather than in Configuration.
"""

# Polygons with |area| at or below this are treated as degenerate
EPS_AREA = 1e-12

# Directions shorter than this are treated as zero-length
EPS_LENGTH = 1e-12

# snapped_rotation() keeps the same piece when the change is this small (radians)
SNAP_CHURN_THRESHOLD = 1e-3

# shape_overlap() never samples fewer than this many points per axis
MIN_GRID_SAMPLES = 10

# validate_shape() sanity bounds, as multiples of unit**2
MIN_SHAPE_AREA_FACTOR = 0.1
MAX_SHAPE_AREA_FACTOR = 10.0

# Seven canonical shapes at the catalog's vertex definitions cover 8 * unit**2
CANONICAL_SET_AREA_FACTOR = 8.0
CANONICAL_SET_AREA_TOLERANCE = 0.01

__all__ = [
    'EPS_AREA',
    'EPS_LENGTH',
    'SNAP_CHURN_THRESHOLD',
    'MIN_GRID_SAMPLES',
    'MIN_SHAPE_AREA_FACTOR',
    'MAX_SHAPE_AREA_FACTOR',
    'CANONICAL_SET_AREA_FACTOR',
    'CANONICAL_SET_AREA_TOLERANCE',
]
