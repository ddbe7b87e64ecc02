"""
Piece Persistence - Save and load piece collections as JSON.

File format:
    {
      "version": 1,
      "unit": 50.0,
      "pieces": [
        {"id": "...", "type": "square", "position": {"x": 0.0, "y": 0.0},
         "rotation": 0.0, "color": "yellow"},
        ...
      ]
    }

Colors round-trip through the closed PieceColor name set; unknown names
load as the default color. The stored unit is informational: pieces are
rebuilt with the unit of the Configuration passed to the loader.
"""

import json
import os
from typing import Any, Dict, List, Sequence, Tuple

from config import Configuration
from pieces.piece import Piece
from .logging_utils import get_logger

logger = get_logger(__name__)

FORMAT_VERSION = 1


def pieces_to_dict(pieces: Sequence[Piece], config: Configuration) -> Dict[str, Any]:
    return {
        'version': FORMAT_VERSION,
        'unit': config.unit,
        'pieces': [p.to_dict() for p in pieces],
    }


def pieces_from_dict(data: Dict[str, Any], config: Configuration) -> List[Piece]:
    """
    Rebuild pieces from a parsed document.

    Accepts either the versioned envelope or a bare list of piece dicts.
    """
    if isinstance(data, list):
        entries = data
    else:
        version = data.get('version', FORMAT_VERSION)
        if version != FORMAT_VERSION:
            raise ValueError(f"Unsupported piece file version: {version}")
        entries = data.get('pieces', [])

    return [Piece.from_dict(entry, config) for entry in entries]


def pieces_to_json(pieces: Sequence[Piece], config: Configuration, indent: int = 2) -> str:
    return json.dumps(pieces_to_dict(pieces, config), indent=indent)


def pieces_from_json(text: str, config: Configuration) -> List[Piece]:
    return pieces_from_dict(json.loads(text), config)


def save_pieces(pieces: Sequence[Piece], path: str, config: Configuration):
    """Write pieces to a JSON file, creating parent directories."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, 'w') as f:
        f.write(pieces_to_json(pieces, config))

    logger.info("Saved %d pieces to %s", len(pieces), path)


def load_pieces(path: str, config: Configuration) -> List[Piece]:
    """Read pieces from a JSON file written by save_pieces()."""
    with open(path, 'r') as f:
        pieces = pieces_from_json(f.read(), config)

    logger.info("Loaded %d pieces from %s", len(pieces), path)
    return pieces


def validate_pieces(pieces: Sequence[Piece], config: Configuration) -> Tuple[bool, List[str]]:
    """
    Check a loaded collection before use.

    Each outline must keep consecutive vertices min_vertex_separation apart
    and cover more than overlap_area_tolerance; ids must be unique and no
    two pieces may overlap.

    Args:
        pieces: Pieces to check
        config: Supplies the separation and overlap tolerances

    Returns:
        (is_valid, list_of_issues)
    """
    from geometry.collision import check_all_collisions
    from geometry.polygon import validate_polygon

    issues = []

    seen = set()
    for i, piece in enumerate(pieces):
        if piece.id in seen:
            issues.append(f"Piece {i}: duplicate id {piece.id}")
        seen.add(piece.id)

        ok, shape_issues = validate_polygon(
            piece.world_vertices(), config.min_vertex_separation, config.overlap_area_tolerance
        )
        if not ok:
            issues.extend(f"Piece {i} ({piece.kind.value}): {issue}" for issue in shape_issues)

    collisions = check_all_collisions(pieces, config.overlap_area_tolerance)
    for i, j in collisions[:5]:  # Only report first 5
        issues.append(f"Overlap between pieces {i} and {j}")
    if len(collisions) > 5:
        issues.append(f"... and {len(collisions) - 5} more overlaps")

    return len(issues) == 0, issues


__all__ = [
    'FORMAT_VERSION',
    'pieces_to_dict',
    'pieces_from_dict',
    'pieces_to_json',
    'pieces_from_json',
    'save_pieces',
    'load_pieces',
    'validate_pieces',
]
