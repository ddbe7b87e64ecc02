#!/usr/bin/env python3
"""
Tangram Geometry Kernel - command line entry point.

Usage:
    python main.py --validate                       # Validate the shape catalog
    python main.py --demo                           # Report on the canonical set
    python main.py --compare square parallelogram   # Compare two shapes
    python main.py --export pieces.json             # Save the canonical set
    python main.py --check pieces.json              # Load and validate a saved set
    python main.py --visualize --save set.png       # Plot the canonical set

All commands accept --config PATH (JSON Configuration) and --log-level.
"""

import argparse
import math
import sys

from config import BatchConfig, Configuration, load_config
from utils.logging_utils import configure_logging, get_logger

logger = get_logger(__name__)


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_validate(args, config: Configuration) -> int:
    """Validate every shape and the canonical-set total area."""
    from geometry.errors import InvalidShapeError
    from pieces.shapes import ShapeKind, shape_area, total_area, validate_catalog

    print(f"\nShape catalog at unit={config.unit}:")
    for kind in ShapeKind:
        print(f"   {kind.display_name:18s} vertices={kind.vertex_count}  "
              f"area={shape_area(kind, config.unit):10.2f}")
    print(f"   {'Total':18s}             area={total_area(config.unit):10.2f}")

    try:
        validate_catalog(config.unit)
    except InvalidShapeError as e:
        print(f"\n❌ Catalog invalid: {e}")
        return 1

    print("\n✅ Catalog valid")
    return 0


def cmd_demo(args, config: Configuration) -> int:
    """Create the canonical set and report poses, boxes and overlaps."""
    from geometry.collision import check_all_collisions
    from pieces.piece import create_canonical_set

    pieces = create_canonical_set(config)

    print(f"\nCanonical set ({len(pieces)} pieces):")
    for piece in pieces:
        box = piece.bounding_box()
        print(f"   {piece}")
        print(f"      color={piece.color.value}  box=({box.min_x:.1f}, {box.min_y:.1f})"
              f" {box.width:.1f}x{box.height:.1f}")

    snapped = [p.snapped_rotation(config.rotation_snap) for p in pieces]
    n_changed = sum(1 for before, after in zip(pieces, snapped) if before is not after)
    print(f"\n   Rotation snap ({math.degrees(config.rotation_snap):.1f}°) changes {n_changed} pieces")

    collisions = check_all_collisions(pieces, config.overlap_area_tolerance)
    if collisions:
        print(f"   ⚠️ Overlapping pairs: {collisions}")
    else:
        print("   ✅ No overlapping pieces")
    return 0


def cmd_compare(args, config: Configuration) -> int:
    """Compare two shape kinds: similarity, best alignment, overlap."""
    from geometry.comparator import alignment_overlap, find_optimal_alignment, shapes_similar
    from pieces.shapes import ShapeKind, local_vertices

    try:
        kind_a = ShapeKind(args.compare[0])
        kind_b = ShapeKind(args.compare[1])
    except ValueError as e:
        valid = ", ".join(k.value for k in ShapeKind)
        print(f"\n❌ {e}. Valid shapes: {valid}")
        return 2

    batch = BatchConfig()
    v1 = local_vertices(kind_a, config.unit)
    v2 = local_vertices(kind_b, config.unit)

    similar = shapes_similar(v1, v2, batch.similarity_tolerance)
    angle = find_optimal_alignment(v1, v2, args.angle_steps, args.density)
    overlap = alignment_overlap(v1, v2, angle, args.density)

    print(f"\n{kind_a.display_name} vs {kind_b.display_name}:")
    print(f"   Similar:     {similar}")
    print(f"   Best angle:  {math.degrees(angle):.1f}°")
    print(f"   Overlap:     {overlap:.3f}")
    return 0


def cmd_export(args, config: Configuration) -> int:
    from pieces.piece import create_canonical_set
    from utils.serialization import save_pieces

    save_pieces(create_canonical_set(config), args.export, config)
    print(f"\n✅ Saved canonical set to {args.export}")
    return 0


def cmd_check(args, config: Configuration) -> int:
    """Load a saved piece file and validate it."""
    from utils.serialization import load_pieces, validate_pieces

    pieces = load_pieces(args.check, config)
    is_valid, issues = validate_pieces(pieces, config)

    print(f"\nLoaded {len(pieces)} pieces from {args.check}")
    if is_valid:
        print("✅ Valid")
        return 0

    for issue in issues:
        print(f"   - {issue}")
    return 1


def cmd_visualize(args, config: Configuration) -> int:
    from utils.visualization import plot_canonical_set

    plot_canonical_set(config, save_path=args.save, show=args.save is None)
    return 0


# =============================================================================
# MAIN
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Tangram geometry kernel",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py --validate
    python main.py --demo --config settings.json
    python main.py --compare small_triangle_1 small_triangle_2
    python main.py --export pieces.json
    python main.py --check pieces.json
        """
    )

    cmd_group = parser.add_mutually_exclusive_group(required=True)
    cmd_group.add_argument('--validate', action='store_true', help='Validate the shape catalog')
    cmd_group.add_argument('--demo', action='store_true', help='Report on the canonical set')
    cmd_group.add_argument('--compare', nargs=2, metavar=('SHAPE_A', 'SHAPE_B'), help='Compare two shapes')
    cmd_group.add_argument('--export', type=str, metavar='PATH', help='Save the canonical set as JSON')
    cmd_group.add_argument('--check', type=str, metavar='PATH', help='Load and validate a piece file')
    cmd_group.add_argument('--visualize', action='store_true', help='Plot the canonical set')

    parser.add_argument('--config', type=str, metavar='PATH', help='JSON configuration file')
    parser.add_argument('--save', type=str, metavar='PATH', help='Save visualization to file')
    parser.add_argument('--angle-steps', type=int, default=72, help='Alignment search angles')
    parser.add_argument('--density', type=int, default=100, help='Overlap grid samples per axis')
    parser.add_argument('--log-level', type=str, default='WARNING', help='Logging level')

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    config = load_config(args.config) if args.config else Configuration()
    logger.info("Using configuration %s", config.to_dict())

    if args.validate:
        return cmd_validate(args, config)
    if args.demo:
        return cmd_demo(args, config)
    if args.compare:
        return cmd_compare(args, config)
    if args.export:
        return cmd_export(args, config)
    if args.check:
        return cmd_check(args, config)
    if args.visualize:
        return cmd_visualize(args, config)
    return 2


if __name__ == "__main__":
    sys.exit(main())
