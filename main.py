#!/usr/bin/env python3
"""
Facet Layout - demo runner for the panel geometry core.

The real application shell (canvas, widgets, pointer plumbing) lives
elsewhere; this script drives the core with canned scenes so the behavior
can be checked by eye.

Usage:
    python main.py --scenarios                     # Run the reference scenarios
    python main.py --snap 213 200                  # Resolve a drag to (213, 200)
    python main.py --lattice 180 180               # Tile the demo facet
    python main.py --lattice 180 180 --angle 30    # Rotated lattice
    python main.py --lattice 180 180 --save out.png
"""

import argparse
import os
import sys
import time

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)


BANNER = """
╔══════════════════════════════════════════════════════════════╗
║   FACET LAYOUT - panel snapping and lattice tiling           ║
╚══════════════════════════════════════════════════════════════╝
"""

# Irregular convex facet used by the demos
DEMO_FACET = [
    (40.0, 20.0), (260.0, 0.0), (320.0, 140.0),
    (250.0, 300.0), (60.0, 280.0), (0.0, 150.0),
]


# =============================================================================
# WARMUP
# =============================================================================

def warmup_jit():
    """Warm up JIT compilation for all modules."""
    print("\nWarming up JIT compilation...")

    from core.bounding_box import warmup as warmup_bbox
    from core.polygon import warmup as warmup_polygon
    from core.collision import warmup as warmup_collision

    warmup_bbox()
    warmup_polygon()
    warmup_collision()


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_scenarios(args):
    """Run the reference collision / snap / lattice scenarios."""
    from core.collision import test_collision
    from core.polygon import OrientedRect, Polygon
    from core.vector import Vector2
    from placement.lattice import generate_lattice
    from placement.snap import resolve_move

    print(BANNER)
    warmup_jit()

    a = OrientedRect(Vector2(50, 50), 100, 100)
    far = OrientedRect(Vector2(250, 50), 100, 100)
    near = OrientedRect(Vector2(140, 50), 100, 100)

    result = test_collision(a.to_polygon(), far.to_polygon())
    print(f"\n1. Separate rects:    collided={result.collided}")

    result = test_collision(a.to_polygon(), near.to_polygon())
    print(f"2. Overlapping rects: collided={result.collided} overlap={result.overlap}")

    static = OrientedRect(Vector2(200, 200), 100, 50)
    marker = OrientedRect(Vector2(213, 200), 0, 0)
    snapped = resolve_move(marker, [static], Vector2(213, 200), threshold=15)
    print(f"3. Snap within 15:    x={snapped.center.x:.1f} y={snapped.center.y:.1f}")

    square = Polygon([(0, 0), (200, 0), (200, 200), (0, 200)])
    seed = OrientedRect(Vector2(10, 10), 20, 20)
    start = time.time()
    cells = generate_lattice(seed, square, (180, 180))
    elapsed = time.time() - start
    print(f"4. Lattice in square: {len(cells)} cells ({elapsed * 1000:.1f}ms)")


def cmd_snap(args):
    """Resolve a drag against a row of static panels."""
    from core.polygon import OrientedRect
    from core.vector import Vector2
    from placement.snap import SnapResolver
    from config import SnapConfig

    print(BANNER)
    warmup_jit()

    statics = [
        OrientedRect.from_degrees(100 + col * 100, 100 + row * 50, 100, 50, args.angle)
        for row in range(2)
        for col in range(5)
    ]
    pointer = Vector2(args.x, args.y)
    moving = OrientedRect.from_degrees(args.x, args.y, args.width, args.height, args.angle)

    config = SnapConfig(threshold=args.threshold, collision_priority=not args.distance_first)
    resolution = SnapResolver(config).resolve(moving, statics, pointer)

    print(f"\nPointer:   ({pointer.x:.2f}, {pointer.y:.2f})")
    print(f"Resolved:  ({resolution.position.x:.2f}, {resolution.position.y:.2f})")
    for correction in resolution.corrections:
        print(f"  pushed out of static {correction.source_id} by {correction.offset}")
    if resolution.snap is not None:
        snap = resolution.snap
        print(f"  snapped to static {snap.source_id} along {snap.axis.value} by {snap.delta:.2f}")

    if args.plot or args.save:
        from utils.visualization import plot_scene, save_or_show
        ax = plot_scene(statics, moving=moving, resolved=resolution.rect)
        save_or_show(ax, args.save)


def cmd_lattice(args):
    """Tile the demo facet from a seed panel."""
    from core.polygon import OrientedRect, Polygon
    from placement.lattice import LatticeTiler, seed_accepted
    from config import LatticeConfig

    print(BANNER)
    warmup_jit()

    facet = Polygon(DEMO_FACET)
    seed = OrientedRect.from_degrees(args.seed_x, args.seed_y, args.width, args.height, args.angle)

    if not seed_accepted(seed, facet):
        print("\nSeed panel does not touch the facet; nothing to tile")
        return

    config = LatticeConfig(containment=args.containment, verbose=True)
    result = LatticeTiler(config).generate(seed, [facet], (args.dx, args.dy))

    print(f"\nAccepted {len(result)} of {result.n_candidates} candidate cells")

    if args.plot or args.save:
        from utils.visualization import plot_lattice, save_or_show
        ax = plot_lattice(result, facet)
        save_or_show(ax, args.save)


# =============================================================================
# MAIN
# =============================================================================

def main():
    parser = argparse.ArgumentParser(
        description="Facet Layout demo runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py --scenarios
    python main.py --snap 213 200 --plot
    python main.py --lattice 180 180 --angle 30 --save lattice.png
        """
    )

    # Commands
    cmd_group = parser.add_mutually_exclusive_group(required=True)
    cmd_group.add_argument('--scenarios', action='store_true', help='Run reference scenarios')
    cmd_group.add_argument('--snap', nargs=2, type=float, metavar=('X', 'Y'), help='Resolve a drag to X, Y')
    cmd_group.add_argument('--lattice', nargs=2, type=float, metavar=('DX', 'DY'), help='Tile with drag extent')

    # Panel options
    parser.add_argument('--width', type=float, default=20.0, help='Panel width')
    parser.add_argument('--height', type=float, default=20.0, help='Panel height')
    parser.add_argument('--angle', type=float, default=0.0, help='Panel rotation in degrees')
    parser.add_argument('--threshold', type=float, default=15.0, help='Snap threshold')
    parser.add_argument('--distance-first', action='store_true', help='Snap before collision push-out')
    parser.add_argument('--seed-x', type=float, default=80.0, help='Seed center x')
    parser.add_argument('--seed-y', type=float, default=60.0, help='Seed center y')
    parser.add_argument('--containment', choices=['inside', 'overlap'], default='inside')

    # Output
    parser.add_argument('--plot', action='store_true', help='Show a plot')
    parser.add_argument('--save', type=str, metavar='PATH', help='Save plot to file')

    args = parser.parse_args()

    # Route to command
    try:
        if args.scenarios:
            cmd_scenarios(args)
        elif args.snap:
            args.x, args.y = args.snap
            cmd_snap(args)
        elif args.lattice:
            args.dx, args.dy = args.lattice
            cmd_lattice(args)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
