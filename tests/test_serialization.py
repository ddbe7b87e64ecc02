import json

import pytest

from config import Configuration
from pieces.piece import Piece, PieceColor, create_canonical_set
from pieces.shapes import ShapeKind
from utils.serialization import (
    FORMAT_VERSION,
    load_pieces,
    pieces_from_dict,
    pieces_from_json,
    pieces_to_dict,
    pieces_to_json,
    save_pieces,
    validate_pieces,
)


def test_json_round_trip(config):
    """Ids, shapes, poses and colors survive a JSON round trip."""
    pieces = create_canonical_set(config, center=(400.0, 300.0))
    pieces[3] = pieces[3].rotated_by(0.123).recolored(PieceColor.BROWN)

    restored = pieces_from_json(pieces_to_json(pieces, config), config)

    assert len(restored) == len(pieces)
    for original, loaded in zip(pieces, restored):
        assert loaded.id == original.id
        assert loaded.kind is original.kind
        assert loaded.position == original.position
        assert loaded.rotation == original.rotation
        assert loaded.color is original.color


def test_envelope(config):
    doc = pieces_to_dict([Piece.create(ShapeKind.SQUARE, config)], config)
    assert doc['version'] == FORMAT_VERSION
    assert doc['unit'] == config.unit
    assert doc['pieces'][0]['type'] == 'square'


def test_bare_list_accepted(config):
    entries = [Piece.create(ShapeKind.SQUARE, config).to_dict()]
    assert len(pieces_from_dict(entries, config)) == 1


def test_unknown_color_loads_as_blue(config):
    doc = pieces_to_dict([Piece.create(ShapeKind.SQUARE, config)], config)
    doc['pieces'][0]['color'] = 'magenta'
    assert pieces_from_json(json.dumps(doc), config)[0].color is PieceColor.BLUE


def test_unsupported_version(config):
    with pytest.raises(ValueError):
        pieces_from_dict({'version': 99, 'pieces': []}, config)


def test_save_and_load(tmp_path, config):
    path = tmp_path / "nested" / "pieces.json"
    pieces = create_canonical_set(config)
    save_pieces(pieces, str(path), config)

    assert path.exists()
    loaded = load_pieces(str(path), config)
    assert [p.id for p in loaded] == [p.id for p in pieces]


class TestValidatePieces:
    def test_canonical_set_is_valid(self, config):
        ok, issues = validate_pieces(create_canonical_set(config), config)
        assert ok
        assert issues == []

    def test_duplicate_ids(self, config):
        piece = Piece.create(ShapeKind.SQUARE, config)
        ok, issues = validate_pieces([piece, piece.translated(500.0, 0.0)], config)
        assert not ok
        assert any("duplicate id" in issue for issue in issues)

    def test_overlaps_reported(self, config):
        pieces = [Piece.create(ShapeKind.SQUARE, config) for _ in range(8)]
        ok, issues = validate_pieces(pieces, config)
        assert not ok
        # 28 overlapping pairs: five listed plus a summary line
        assert len(issues) == 6
        assert issues[-1].startswith("... and 23 more")


@pytest.mark.parametrize("color", list(PieceColor))
def test_every_color_survives_json(config, color):
    piece = Piece.create(ShapeKind.SQUARE, config, color=color)
    assert pieces_from_json(pieces_to_json([piece], config), config)[0].color is color


def test_vertex_separation_checked(config):
    """Outlines with edges shorter than min_vertex_separation are reported."""
    strict = Configuration(min_vertex_separation=60.0)
    pieces = [Piece.create(ShapeKind.SMALL_TRIANGLE_A, strict)]

    ok, issues = validate_pieces(pieces, strict)
    assert not ok
    assert len(issues) == 2
    assert all(issue.startswith("Piece 0 (small_triangle_1)") for issue in issues)

    assert validate_pieces(pieces, config) == (True, [])
