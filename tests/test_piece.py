import math
import uuid

import pytest

from config import Configuration
from geometry.collision import check_all_collisions
from geometry.errors import InvalidShapeError
from geometry.polygon import polygon_area
from geometry.vertex import Vertex
from pieces.piece import (
    CANONICAL_COLORS,
    DEFAULT_COLOR,
    Piece,
    PieceColor,
    create_canonical_set,
)
from pieces.shapes import ShapeKind, shape_area


class TestCreate:
    def test_canonical_color_by_default(self, config):
        piece = Piece.create(ShapeKind.LARGE_TRIANGLE_A, config)
        assert piece.color is PieceColor.RED
        assert piece.unit == config.unit
        assert piece.position == Vertex(0.0, 0.0)
        assert piece.rotation == 0.0
        assert isinstance(piece.id, uuid.UUID)

    def test_explicit_color_and_pose(self, config):
        piece = Piece.create(ShapeKind.SQUARE, config, position=(10, 20), rotation=1.0,
                             color=PieceColor.PINK)
        assert piece.color is PieceColor.PINK
        assert piece.position.as_tuple() == (10.0, 20.0)
        assert piece.rotation == 1.0

    def test_ids_are_unique(self, config):
        a = Piece.create(ShapeKind.SQUARE, config)
        b = Piece.create(ShapeKind.SQUARE, config)
        assert a.id != b.id


class TestGeometry:
    def test_world_vertices_rotate_then_translate(self, config):
        piece = Piece.create(ShapeKind.SMALL_TRIANGLE_A, config, position=(100.0, 0.0),
                             rotation=math.pi / 2)
        verts = piece.world_vertices()
        assert verts[0].x == pytest.approx(100.0)
        assert verts[0].y == pytest.approx(0.0)
        # (50, 0) -> (0, 50) -> (100, 50)
        assert verts[1].x == pytest.approx(100.0)
        assert verts[1].y == pytest.approx(50.0)

    def test_area_preserved_by_pose(self, config):
        piece = Piece.create(ShapeKind.PARALLELOGRAM, config, position=(-30.0, 12.0), rotation=2.2)
        expected = shape_area(ShapeKind.PARALLELOGRAM, config.unit)
        assert polygon_area(piece.world_vertices()) == pytest.approx(expected)

    def test_world_vertices_carry_vertex_tolerance(self, config):
        piece = Piece.create(ShapeKind.SQUARE, config)
        assert all(v.tolerance == config.vertex_tolerance for v in piece.world_vertices())

    def test_vertices_match_within_tolerance(self, config):
        """Outlines 1 point apart match at the default 8 point tolerance."""
        piece = Piece.create(ShapeKind.LARGE_TRIANGLE_A, config, position=(40.0, 40.0))
        assert piece.world_vertices() == piece.translated(1.0, 0.0).world_vertices()
        assert piece.vertices_match(piece.translated(1.0, -1.0))
        assert not piece.vertices_match(piece.translated(10.0, 0.0))

    def test_exact_tolerance_needs_exact_outline(self):
        exact = Configuration(vertex_tolerance=0.0)
        piece = Piece.create(ShapeKind.LARGE_TRIANGLE_A, exact)
        assert piece.vertices_match(piece.rotated_by(0.0))
        assert not piece.vertices_match(piece.translated(1.0, 0.0))

    def test_vertices_match_needs_same_vertex_count(self, config):
        square = Piece.create(ShapeKind.SQUARE, config)
        triangle = Piece.create(ShapeKind.SMALL_TRIANGLE_A, config)
        assert not square.vertices_match(triangle)

    def test_bounding_box(self, config):
        piece = Piece.create(ShapeKind.LARGE_TRIANGLE_A, config, position=(10.0, 20.0))
        assert piece.bounding_box().as_tuple() == (10.0, 20.0, 110.0, 120.0)


class TestTransforms:
    def test_transforms_keep_identity(self, config):
        piece = Piece.create(ShapeKind.SQUARE, config)
        for changed in (
            piece.translated(1.0, 2.0),
            piece.moved_to((5.0, 5.0)),
            piece.rotated_by(0.5),
            piece.rotated_to(0.5),
            piece.recolored(PieceColor.BLACK),
            piece.reset(),
        ):
            assert changed.id == piece.id
            assert changed.kind is piece.kind

    def test_original_untouched(self, config):
        piece = Piece.create(ShapeKind.SQUARE, config)
        piece.translated(10.0, 10.0)
        assert piece.position.as_tuple() == (0.0, 0.0)

    def test_rotated_by_composes(self, config):
        piece = Piece.create(ShapeKind.MEDIUM_TRIANGLE, config, rotation=0.2)
        assert piece.rotated_by(0.3).rotated_by(0.4).rotation == pytest.approx(
            piece.rotated_by(0.7).rotation
        )

    def test_translate_and_move(self, config):
        piece = Piece.create(ShapeKind.SQUARE, config, position=(1.0, 1.0))
        assert piece.translated(2.0, 3.0).position.as_tuple() == (3.0, 4.0)
        assert piece.moved_to(Vertex(7.0, 8.0)).position.as_tuple() == (7.0, 8.0)
        assert piece.rotated_to(1.5).rotation == 1.5

    def test_reset(self, config):
        piece = Piece.create(ShapeKind.SQUARE, config, position=(5.0, 5.0), rotation=1.0)
        kept = piece.reset()
        assert kept.rotation == 0.0
        assert kept.position.as_tuple() == (5.0, 5.0)
        moved = piece.reset((0.0, -1.0))
        assert moved.position.as_tuple() == (0.0, -1.0)

    def test_snapped_rotation_rounds_to_multiple(self, config):
        snap = config.rotation_snap
        piece = Piece.create(ShapeKind.SQUARE, config, rotation=snap * 2.4)
        snapped = piece.snapped_rotation(snap)
        assert snapped.rotation == pytest.approx(2 * snap)
        assert snapped.id == piece.id

    def test_snapped_rotation_idempotent(self, config):
        """Snapping an already snapped piece returns the same piece."""
        snap = config.rotation_snap
        piece = Piece.create(ShapeKind.SQUARE, config, rotation=1.234).snapped_rotation(snap)
        assert piece.snapped_rotation(snap) is piece

    def test_snap_ignores_tiny_changes(self, config):
        snap = config.rotation_snap
        piece = Piece.create(ShapeKind.SQUARE, config, rotation=snap + 0.0005)
        assert piece.snapped_rotation(snap) is piece

    def test_snap_with_non_positive_angle(self, config):
        piece = Piece.create(ShapeKind.SQUARE, config, rotation=0.4)
        assert piece.snapped_rotation(0.0) is piece
        assert piece.snapped_rotation(-1.0) is piece


class TestPersistence:
    def test_round_trip(self, config):
        piece = Piece.create(ShapeKind.PARALLELOGRAM, config, position=(12.5, -4.0), rotation=0.75)
        restored = Piece.from_dict(piece.to_dict(), config)
        assert restored.id == piece.id
        assert restored.kind is piece.kind
        assert restored.position == piece.position
        assert restored.rotation == piece.rotation
        assert restored.color is piece.color

    def test_dict_layout(self, config):
        piece = Piece.create(ShapeKind.SQUARE, config, position=(1.0, 2.0))
        d = piece.to_dict()
        assert d['type'] == 'square'
        assert d['position'] == {'x': 1.0, 'y': 2.0}
        assert d['color'] == 'yellow'
        assert uuid.UUID(d['id']) == piece.id

    def test_unknown_color_falls_back(self, config):
        d = Piece.create(ShapeKind.SQUARE, config).to_dict()
        d['color'] = 'chartreuse'
        assert Piece.from_dict(d, config).color is PieceColor.BLUE

    def test_unparseable_id_is_replaced(self, config):
        d = Piece.create(ShapeKind.SQUARE, config).to_dict()
        d['id'] = 'not-a-uuid'
        assert isinstance(Piece.from_dict(d, config).id, uuid.UUID)
        del d['id']
        assert isinstance(Piece.from_dict(d, config).id, uuid.UUID)

    def test_unknown_type_raises(self, config):
        d = Piece.create(ShapeKind.SQUARE, config).to_dict()
        d['type'] = 'hexagon'
        with pytest.raises(InvalidShapeError):
            Piece.from_dict(d, config)

    def test_unit_comes_from_config(self, config, small_config):
        d = Piece.create(ShapeKind.SQUARE, config).to_dict()
        restored = Piece.from_dict(d, small_config)
        assert restored.unit == 1.0
        assert restored.vertex_tolerance == small_config.vertex_tolerance

    def test_missing_type_raises(self, config):
        with pytest.raises(InvalidShapeError):
            Piece.from_dict({'id': 'x'}, config)

    @pytest.mark.parametrize("position", [None, 5, "here", [1.0, 2.0]])
    def test_malformed_position_loads_at_origin(self, config, position):
        d = Piece.create(ShapeKind.SQUARE, config, position=(3.0, 4.0)).to_dict()
        d['position'] = position
        assert Piece.from_dict(d, config).position.as_tuple() == (0.0, 0.0)

    @pytest.mark.parametrize("color", list(PieceColor))
    def test_every_color_round_trips(self, config, color):
        piece = Piece.create(ShapeKind.MEDIUM_TRIANGLE, config, color=color)
        assert Piece.from_dict(piece.to_dict(), config).color is color


class TestColors:
    def test_from_name(self):
        assert PieceColor.from_name("red") is PieceColor.RED
        assert PieceColor.from_name(" Green ") is PieceColor.GREEN
        assert PieceColor.from_name(PieceColor.CYAN) is PieceColor.CYAN
        assert PieceColor.from_name(None) is DEFAULT_COLOR
        assert PieceColor.from_name("mauve") is PieceColor.BLUE

    def test_every_shape_has_a_canonical_color(self):
        assert set(CANONICAL_COLORS) == set(ShapeKind)


class TestDisplay:
    def test_str(self, config):
        piece = Piece.create(ShapeKind.SQUARE, config, position=(10.0, 20.0), rotation=math.pi / 2)
        assert str(piece) == "Square at (10.0, 20.0), rotated 90.0°"

    def test_status_and_debug(self, config):
        piece = Piece.create(ShapeKind.MEDIUM_TRIANGLE, config)
        assert piece.status_string.startswith("medium_triangle | pos: (0,0)")
        text = piece.debug_description
        assert str(piece.id) in text
        assert "Vertices: 3" in text
        assert piece.rotation_degrees == 0.0


class TestCanonicalSet:
    def test_one_piece_per_shape(self, config):
        pieces = create_canonical_set(config)
        assert [p.kind for p in pieces] == [
            ShapeKind.LARGE_TRIANGLE_A,
            ShapeKind.MEDIUM_TRIANGLE,
            ShapeKind.LARGE_TRIANGLE_B,
            ShapeKind.SMALL_TRIANGLE_A,
            ShapeKind.SQUARE,
            ShapeKind.SMALL_TRIANGLE_B,
            ShapeKind.PARALLELOGRAM,
        ]
        assert all(p.color is CANONICAL_COLORS[p.kind] for p in pieces)

    def test_no_overlaps(self, config):
        pieces = create_canonical_set(config)
        assert check_all_collisions(pieces, config.overlap_area_tolerance) == []

    def test_center_and_spacing(self, config):
        pieces = create_canonical_set(config, center=(1000.0, 0.0), spacing=10.0)
        square = pieces[4]
        assert square.position.as_tuple() == (1000.0, 0.0)
        assert pieces[0].position.as_tuple() == (990.0, -10.0)
