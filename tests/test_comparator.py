import math

import pytest

from geometry.comparator import (
    alignment_overlap,
    find_optimal_alignment,
    normalize_shape,
    shape_overlap,
    shapes_similar,
)
from geometry.polygon import polygon_area, polygon_centroid, signed_area, transform
from geometry.vertex import Vertex, regular_polygon
from pieces.shapes import ShapeKind, local_vertices


TRIANGLE = [Vertex(0.0, 0.0), Vertex(2.0, 0.0), Vertex(0.0, 2.0)]
SCALENE = [Vertex(0.0, 0.0), Vertex(4.0, 0.0), Vertex(1.0, 2.0)]
SQUARE = [Vertex(0.0, 0.0), Vertex(2.0, 0.0), Vertex(2.0, 2.0), Vertex(0.0, 2.0)]


class TestNormalize:
    def test_unit_area_at_origin(self):
        norm = normalize_shape(SCALENE)
        c = polygon_centroid(norm)
        assert polygon_area(norm) == pytest.approx(1.0)
        assert c.x == pytest.approx(0.0, abs=1e-9)
        assert c.y == pytest.approx(0.0, abs=1e-9)

    def test_winding_is_counterclockwise(self):
        assert signed_area(normalize_shape(list(reversed(SCALENE)))) > 0


class TestShapesSimilar:
    def test_similar_after_rotation_translation_scale(self):
        """Similarity is invariant to rigid motion plus uniform scale."""
        moved = transform(SCALENE, translation=Vertex(40.0, -7.0), rotation=1.1, scale=3.5)
        assert shapes_similar(SCALENE, moved, 1e-3)

    def test_similar_with_shifted_start_vertex(self):
        rotated_order = SCALENE[1:] + SCALENE[:1]
        assert shapes_similar(SCALENE, rotated_order, 1e-3)

    def test_similar_with_opposite_winding(self):
        assert shapes_similar(SCALENE, list(reversed(SCALENE)), 1e-3)

    def test_mirror_image_not_similar(self):
        mirrored = [Vertex(-v.x, v.y) for v in SCALENE]
        assert not shapes_similar(SCALENE, mirrored, 1e-3)

    def test_vertex_count_mismatch(self):
        assert not shapes_similar(TRIANGLE, SQUARE, 1e-3)
        assert not shapes_similar(TRIANGLE[:2], TRIANGLE[:2], 1e-3)

    def test_different_shapes_same_count(self):
        rhombus = [Vertex(0.0, 0.0), Vertex(2.0, 0.0), Vertex(3.0, 1.0), Vertex(1.0, 1.0)]
        assert not shapes_similar(SQUARE, rhombus, 1e-3)

    def test_degenerate_area(self):
        flat = [Vertex(0.0, 0.0), Vertex(1.0, 0.0), Vertex(2.0, 0.0)]
        assert not shapes_similar(flat, flat, 1e-3)

    def test_catalog_similarity(self):
        """All triangles are similar to each other; the square and parallelogram are not."""
        small = local_vertices(ShapeKind.SMALL_TRIANGLE_A, 50.0)
        for kind in (ShapeKind.LARGE_TRIANGLE_A, ShapeKind.MEDIUM_TRIANGLE):
            assert shapes_similar(small, local_vertices(kind, 50.0), 1e-3)

        square = local_vertices(ShapeKind.SQUARE, 50.0)
        parallelogram = local_vertices(ShapeKind.PARALLELOGRAM, 50.0)
        assert not shapes_similar(square, parallelogram, 1e-3)
        assert shapes_similar(square, regular_polygon(4, 10.0), 1e-3)


class TestShapeOverlap:
    def test_self_overlap_is_one(self):
        for verts in (TRIANGLE, SQUARE, SCALENE):
            assert abs(shape_overlap(verts, verts, 100) - 1.0) < 0.05

    def test_disjoint_is_zero(self):
        far = [Vertex(v.x + 10.0, v.y) for v in SQUARE]
        assert shape_overlap(SQUARE, far, 50) == 0.0

    def test_half_cover(self):
        left_half = [Vertex(0.0, 0.0), Vertex(1.0, 0.0), Vertex(1.0, 2.0), Vertex(0.0, 2.0)]
        assert shape_overlap(SQUARE, left_half, 100) == pytest.approx(0.5, abs=0.05)
        assert shape_overlap(left_half, SQUARE, 100) == pytest.approx(1.0, abs=0.05)

    def test_low_density_is_clamped(self):
        assert shape_overlap(SQUARE, SQUARE, 1) == pytest.approx(1.0)

    def test_degenerate_inputs(self):
        assert shape_overlap([], SQUARE) == 0.0
        flat = [Vertex(0.0, 0.0), Vertex(1.0, 0.0), Vertex(2.0, 0.0)]
        assert shape_overlap(flat, flat) == 0.0


class TestAlignment:
    def test_identical_shapes_keep_zero(self):
        """Ties keep the smallest angle."""
        assert find_optimal_alignment(SQUARE, SQUARE, angle_steps=8, sample_density=40) == 0.0

    def test_recovers_quarter_turn(self):
        c = polygon_centroid(TRIANGLE)
        turned = [v.rotated_around(c, math.pi / 2) for v in TRIANGLE]
        turned = [v.translated(25.0, 5.0) for v in turned]

        angle = find_optimal_alignment(TRIANGLE, turned, angle_steps=4, sample_density=60)
        assert angle == pytest.approx(3 * math.pi / 2)
        assert alignment_overlap(TRIANGLE, turned, angle, 60) > 0.95

    def test_no_steps(self):
        assert find_optimal_alignment(TRIANGLE, SQUARE, angle_steps=0) == 0.0
