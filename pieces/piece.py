"""
Piece - A tangram shape placed in the world.

A Piece is an immutable value: shape kind + scale unit + pose (position,
rotation) + color tag + identity. Every manipulation returns a new Piece
with the same id, so callers can keep old values for undo or animation.

World vertices are derived on demand from (kind, unit, position, rotation)
and never stored: local vertices are rotated about the local origin (the
shape's anchor), then translated to the position.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import math
import uuid

from config import Configuration
from geometry.constants import SNAP_CHURN_THRESHOLD
from geometry.errors import InvalidShapeError
from geometry.polygon import BoundingBox, bounding_box, rotate_translate
from geometry.vertex import ORIGIN, Vertex, VertexLike, as_vertex
from .shapes import ShapeKind, local_vertices
from utils.logging_utils import get_logger

logger = get_logger(__name__)


# =============================================================================
# COLOR TAGS
# =============================================================================

class PieceColor(Enum):
    """Closed set of symbolic display colors; values are the persisted names."""
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    PURPLE = "purple"
    CYAN = "cyan"
    BLACK = "black"
    WHITE = "white"
    GRAY = "gray"
    PINK = "pink"
    BROWN = "brown"

    @classmethod
    def from_name(cls, name: Any) -> 'PieceColor':
        """Look up a color by name; unknown names fall back to BLUE."""
        if isinstance(name, PieceColor):
            return name
        color = _COLORS_BY_NAME.get(str(name).strip().lower()) if name is not None else None
        if color is None:
            logger.debug("Unknown color tag %r, using %s", name, DEFAULT_COLOR.value)
            return DEFAULT_COLOR
        return color


_COLORS_BY_NAME: Dict[str, PieceColor] = {c.value: c for c in PieceColor}

DEFAULT_COLOR = PieceColor.BLUE

CANONICAL_COLORS: Dict[ShapeKind, PieceColor] = {
    ShapeKind.LARGE_TRIANGLE_A: PieceColor.RED,
    ShapeKind.MEDIUM_TRIANGLE: PieceColor.GREEN,
    ShapeKind.LARGE_TRIANGLE_B: PieceColor.CYAN,
    ShapeKind.SMALL_TRIANGLE_A: PieceColor.BLUE,
    ShapeKind.SQUARE: PieceColor.YELLOW,
    ShapeKind.SMALL_TRIANGLE_B: PieceColor.PURPLE,
    ShapeKind.PARALLELOGRAM: PieceColor.ORANGE,
}


# =============================================================================
# PIECE
# =============================================================================

@dataclass(frozen=True)
class Piece:
    """
    Immutable tangram piece.

    Attributes:
        kind: Shape (fixed for the piece's lifetime)
        unit: Scale unit the shape is built with (fixed)
        position: World position of the shape's anchor
        rotation: Rotation in radians about the anchor
        color: Display color tag
        id: Identity, preserved by every transform
        vertex_tolerance: Tolerance carried by the world vertices, so they
            compare equal when within vertex matching distance
    """

    kind: ShapeKind
    unit: float
    position: Vertex = ORIGIN
    rotation: float = 0.0
    color: PieceColor = DEFAULT_COLOR
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    vertex_tolerance: float = 0.0

    @classmethod
    def create(
        cls,
        kind: ShapeKind,
        config: Configuration,
        position: VertexLike = ORIGIN,
        rotation: float = 0.0,
        color: Optional[PieceColor] = None,
    ) -> 'Piece':
        """
        Build a piece with the configuration's unit.

        A missing color defaults to the shape's canonical palette entry.
        """
        piece = cls(
            kind=kind,
            unit=config.unit,
            position=as_vertex(position),
            rotation=float(rotation),
            color=color if color is not None else CANONICAL_COLORS[kind],
            vertex_tolerance=config.vertex_tolerance,
        )
        logger.debug("Created %s", piece.status_string)
        return piece

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    def local_vertices(self) -> List[Vertex]:
        return local_vertices(self.kind, self.unit)

    def world_vertices(self) -> List[Vertex]:
        """Local vertices rotated about the anchor, then translated to position."""
        return rotate_translate(
            self.local_vertices(), self.rotation, self.position.x, self.position.y,
            tolerance=self.vertex_tolerance,
        )

    def bounding_box(self) -> BoundingBox:
        """World-space AABB; a zero-size box at position if there are no vertices."""
        vertices = self.world_vertices()
        if not vertices:
            return BoundingBox.at_point(self.position)
        return bounding_box(vertices)

    def vertices_match(self, other: 'Piece') -> bool:
        """
        True if every world vertex equals the other piece's vertex at the same index.

        Equality uses the pieces' vertex tolerance, so a piece dropped within
        matching distance of a target outline matches it.
        """
        mine = self.world_vertices()
        theirs = other.world_vertices()
        return len(mine) == len(theirs) and all(a == b for a, b in zip(mine, theirs))

    # -------------------------------------------------------------------------
    # Transforms (each returns a new Piece with the same id)
    # -------------------------------------------------------------------------

    def translated(self, dx: float, dy: float) -> 'Piece':
        return replace(self, position=self.position.translated(dx, dy))

    def moved_to(self, point: VertexLike) -> 'Piece':
        return replace(self, position=as_vertex(point))

    def rotated_by(self, angle: float) -> 'Piece':
        return replace(self, rotation=self.rotation + angle)

    def rotated_to(self, angle: float) -> 'Piece':
        return replace(self, rotation=float(angle))

    def recolored(self, color: PieceColor) -> 'Piece':
        return replace(self, color=color)

    def reset(self, position: Optional[VertexLike] = None) -> 'Piece':
        """Rotation to 0; position to the argument, or unchanged if omitted."""
        new_position = self.position if position is None else as_vertex(position)
        return replace(self, position=new_position, rotation=0.0)

    def snapped_rotation(self, snap_angle: float) -> 'Piece':
        """
        Round rotation to the nearest multiple of snap_angle.

        Returns this same piece when the change would be <= 0.001 rad, or
        when snap_angle is not positive.
        """
        if snap_angle <= 0:
            return self

        snapped = round(self.rotation / snap_angle) * snap_angle
        if abs(self.rotation - snapped) <= SNAP_CHURN_THRESHOLD:
            return self
        return replace(self, rotation=snapped)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': str(self.id),
            'type': self.kind.value,
            'position': {'x': self.position.x, 'y': self.position.y},
            'rotation': self.rotation,
            'color': self.color.value,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any], config: Configuration) -> 'Piece':
        """
        Rebuild a piece saved with to_dict().

        The saved id is restored when it parses as a UUID, otherwise a new id
        is minted. Unknown colors fall back to the default color.

        A missing or non-object position loads as the origin.

        Raises:
            InvalidShapeError: missing or unknown shape type
        """
        try:
            kind = ShapeKind(d['type'])
        except (KeyError, ValueError):
            raise InvalidShapeError(f"Unknown piece type: {d.get('type')!r}") from None

        position = d.get('position')
        if not isinstance(position, dict):
            position = {}
        try:
            piece_id = uuid.UUID(str(d['id']))
        except (KeyError, ValueError):
            piece_id = uuid.uuid4()

        return cls(
            kind=kind,
            unit=config.unit,
            position=Vertex(float(position.get('x', 0.0)), float(position.get('y', 0.0))),
            rotation=float(d.get('rotation', 0.0)),
            color=PieceColor.from_name(d.get('color')),
            id=piece_id,
            vertex_tolerance=config.vertex_tolerance,
        )

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    @property
    def rotation_degrees(self) -> float:
        return math.degrees(self.rotation)

    @property
    def status_string(self) -> str:
        return (f"{self.kind.value} | pos: ({self.position.x:.0f},{self.position.y:.0f}) "
                f"| rot: {self.rotation_degrees:.1f}°")

    @property
    def debug_description(self) -> str:
        vertices = self.world_vertices()
        box = self.bounding_box()
        lines = [
            str(self),
            f"  ID: {self.id}",
            f"  Vertices: {len(vertices)}",
            f"  Bounding Box: ({box.min_x:.1f}, {box.min_y:.1f}) - {box.width:.1f}x{box.height:.1f}",
        ]
        lines.extend(f"    [{i}]: ({v.x:.2f}, {v.y:.2f})" for i, v in enumerate(vertices))
        return "\n".join(lines)

    def __str__(self) -> str:
        return (f"{self.kind.display_name} at ({self.position.x:.1f}, {self.position.y:.1f}), "
                f"rotated {self.rotation_degrees:.1f}°")


# =============================================================================
# CANONICAL SET
# =============================================================================

# (kind, column, row, rotation) of the seven pieces on a 3x3 layout grid
_CANONICAL_LAYOUT: Tuple[Tuple[ShapeKind, int, int, float], ...] = (
    (ShapeKind.LARGE_TRIANGLE_A, -1, -1, 0.0),
    (ShapeKind.MEDIUM_TRIANGLE, 0, -1, math.pi / 2),
    (ShapeKind.LARGE_TRIANGLE_B, 1, -1, math.pi),
    (ShapeKind.SMALL_TRIANGLE_A, -1, 0, math.pi / 4),
    (ShapeKind.SQUARE, 0, 0, 0.0),
    (ShapeKind.SMALL_TRIANGLE_B, 1, 0, 3 * math.pi / 4),
    (ShapeKind.PARALLELOGRAM, 0, 1, math.pi / 6),
)


def create_canonical_set(
    config: Configuration,
    center: VertexLike = ORIGIN,
    spacing: Optional[float] = None,
) -> List[Piece]:
    """
    The seven tangram pieces spread on a grid around center.

    Args:
        config: Supplies the unit
        center: Grid center
        spacing: Distance between grid cells (default 5 units, wider than
            twice the farthest vertex of any shape from its anchor)

    Returns:
        Seven pieces, one per ShapeKind, with canonical colors
    """
    c = as_vertex(center)
    step = 5.0 * config.unit if spacing is None else spacing

    return [
        Piece.create(kind, config, position=(c.x + col * step, c.y + row * step), rotation=rotation)
        for kind, col, row, rotation in _CANONICAL_LAYOUT
    ]


__all__ = [
    'PieceColor',
    'DEFAULT_COLOR',
    'CANONICAL_COLORS',
    'Piece',
    'create_canonical_set',
]
