"""
Visualization - Debug plots of pieces and shape comparisons.

Plots use the kernel's math convention (Y up). Overlapping pieces are
outlined in red.
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Polygon as MplPolygon
from matplotlib.collections import PatchCollection
from typing import Optional, Sequence, Tuple

from config import Configuration
from geometry.comparator import alignment_overlap, find_optimal_alignment
from geometry.polygon import bounding_box, polygon_centroid, rotate_all, translate_all
from geometry.vertex import Vertex, vertices_to_array
from pieces.piece import Piece, create_canonical_set
from .logging_utils import get_logger

logger = get_logger(__name__)

# PieceColor names map onto matplotlib named colors except gray
_MPL_COLORS = {'gray': 'grey'}


def _mpl_color(piece: Piece) -> str:
    return _MPL_COLORS.get(piece.color.value, piece.color.value)


def plot_pieces(
    pieces: Sequence[Piece],
    ax=None,
    title: Optional[str] = None,
    config: Optional[Configuration] = None,
    show_bounds: bool = False,
    show_anchors: bool = True,
    figsize: Tuple[int, int] = (8, 8),
):
    """
    Plot placed pieces.

    Args:
        pieces: Pieces to draw
        ax: Matplotlib axes (creates new if None)
        title: Plot title
        config: When given, overlapping pieces are outlined in red
        show_bounds: Draw each piece's bounding box
        show_anchors: Mark each piece's position (its rotation pivot)
        figsize: Figure size if creating new figure

    Returns:
        ax: Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=figsize)

    colliding = set()
    if config is not None:
        from geometry.collision import check_all_collisions
        for i, j in check_all_collisions(pieces, config.overlap_area_tolerance):
            colliding.add(i)
            colliding.add(j)

    patches = []
    face_colors = []
    edge_colors = []
    for i, piece in enumerate(pieces):
        patches.append(MplPolygon(vertices_to_array(piece.world_vertices()), closed=True))
        face_colors.append(_mpl_color(piece))
        edge_colors.append('red' if i in colliding else 'black')

    collection = PatchCollection(
        patches,
        facecolors=face_colors,
        edgecolors=edge_colors,
        linewidths=1.0,
        alpha=0.7,
    )
    ax.add_collection(collection)

    if show_bounds:
        for piece in pieces:
            box = piece.bounding_box()
            ax.add_patch(plt.Rectangle(
                (box.min_x, box.min_y), box.width, box.height,
                fill=False, edgecolor='grey', linestyle='--', linewidth=0.8,
            ))

    if show_anchors and pieces:
        anchors = np.array([p.position.as_tuple() for p in pieces])
        ax.scatter(anchors[:, 0], anchors[:, 1], color='black', s=10, zorder=5)

    if pieces:
        box = bounding_box([v for p in pieces for v in p.world_vertices()])
        padding = 0.1 * max(box.width, box.height, 1.0)
        ax.set_xlim(box.min_x - padding, box.max_x + padding)
        ax.set_ylim(box.min_y - padding, box.max_y + padding)

    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)

    if title is None:
        title = f"{len(pieces)} pieces"
    if colliding:
        title += f" | {len(colliding)} overlapping"
    ax.set_title(title)

    return ax


def plot_shape_overlap(
    v1: Sequence[Vertex],
    v2: Sequence[Vertex],
    angle_steps: int = 72,
    sample_density: int = 100,
    ax=None,
    figsize: Tuple[int, int] = (6, 6),
):
    """
    Plot shape 2 at its best alignment over shape 1.

    Returns:
        (ax, best_angle, overlap)
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=figsize)

    best_angle = find_optimal_alignment(v1, v2, angle_steps, sample_density)
    overlap = alignment_overlap(v1, v2, best_angle, sample_density)

    c1 = polygon_centroid(v1)
    c2 = polygon_centroid(v2)
    aligned = translate_all(rotate_all(v2, c2, best_angle), Vertex(c1.x - c2.x, c1.y - c2.y))

    ax.fill(*vertices_to_array(v1).T, color='tab:blue', alpha=0.4, label='reference')
    ax.fill(*vertices_to_array(aligned).T, color='tab:orange', alpha=0.4, label='aligned')
    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)
    ax.legend()
    ax.set_title(f"Best angle {np.degrees(best_angle):.1f}° | overlap {overlap:.3f}")

    return ax, best_angle, overlap


def plot_canonical_set(config: Configuration, save_path: Optional[str] = None, show: bool = True):
    """
    Plot the seven canonical pieces and optionally save to file.
    """
    fig, ax = plt.subplots(1, 1, figsize=(8, 8))
    plot_pieces(create_canonical_set(config), ax=ax, title="Canonical tangram set", config=config)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info("Saved figure to %s", save_path)

    if show:
        plt.show()

    return fig
