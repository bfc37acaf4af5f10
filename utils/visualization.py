"""
Visualization - Plotting facets, panels, snap results and lattices.

Debugging aid only; the real canvas layer lives in the application shell.
Axes are flipped so the plot reads like the y-down canvas.
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Polygon as MplPolygon
from matplotlib.collections import PatchCollection
from typing import Optional, Sequence, Tuple

from core.collision import find_collisions
from core.polygon import as_polygon


def _add_polygons(ax, polygons, facecolor, edgecolor='black', alpha=0.6, linewidth=0.5):
    patches = [MplPolygon(as_polygon(p).vertices, closed=True) for p in polygons]
    if not patches:
        return None
    collection = PatchCollection(
        patches,
        facecolors=facecolor,
        edgecolors=edgecolor,
        linewidths=linewidth,
        alpha=alpha
    )
    ax.add_collection(collection)
    return collection


def _finish_axes(ax, shapes, title: str, padding: float = 10.0):
    all_vertices = [as_polygon(s).vertices for s in shapes if len(as_polygon(s))]
    if all_vertices:
        stacked = np.vstack(all_vertices)
        min_x, min_y = stacked.min(axis=0)
        max_x, max_y = stacked.max(axis=0)
        ax.set_xlim(min_x - padding, max_x + padding)
        # y-down, like the canvas
        ax.set_ylim(max_y + padding, min_y - padding)
    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)
    ax.set_title(title)
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    return ax


def plot_scene(
    statics: Sequence,
    moving=None,
    resolved=None,
    boundary=None,
    ax=None,
    title: str = None,
    figsize: Tuple[int, int] = (8, 8)
):
    """
    Plot one snap frame.

    Args:
        statics: Static panels / polygons
        moving: Panel at the raw pointer position (drawn dashed)
        resolved: Panel after resolve_move (drawn solid)
        boundary: Optional facet polygon
        ax: Matplotlib axes (creates new if None)

    Returns:
        ax: Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=figsize)

    shapes = list(statics)
    if boundary is not None:
        _add_polygons(ax, [boundary], facecolor='lightsteelblue', alpha=0.3, linewidth=2)
        shapes.append(boundary)

    _add_polygons(ax, statics, facecolor='lightcoral', edgecolor='red')

    if moving is not None:
        verts = as_polygon(moving).vertices
        closed = np.vstack([verts, verts[:1]])
        ax.plot(closed[:, 0], closed[:, 1], linestyle='--', color='gray', linewidth=1)
        shapes.append(moving)

    if resolved is not None:
        _add_polygons(ax, [resolved], facecolor='seagreen', edgecolor='darkgreen', alpha=0.7)
        shapes.append(resolved)

    if title is None:
        title = f"{len(statics)} static panels"

    return _finish_axes(ax, shapes, title)


def plot_lattice(
    result,
    boundary,
    existing: Sequence = (),
    ax=None,
    title: str = None,
    highlight_collisions: bool = True,
    figsize: Tuple[int, int] = (8, 8)
):
    """
    Plot a tiling pass.

    Args:
        result: LatticeResult (or any sequence of cell polygons)
        boundary: Facet polygon
        existing: Previously placed panels
        highlight_collisions: Color overlapping cells red (should never happen)

    Returns:
        ax: Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=figsize)

    cells = list(result)

    colliding = set()
    if highlight_collisions:
        for i, j in find_collisions(cells):
            colliding.add(i)
            colliding.add(j)

    _add_polygons(ax, [boundary], facecolor='lightsteelblue', alpha=0.3, linewidth=2)
    _add_polygons(ax, existing, facecolor='gray', alpha=0.7)

    colors = []
    n = len(cells)
    for i in range(n):
        if i in colliding:
            colors.append('red')
        else:
            # Gradient green based on acceptance order
            green = 0.4 + 0.4 * (i / max(n - 1, 1))
            colors.append((0.1, green, 0.1))
    _add_polygons(ax, cells, facecolor=colors, edgecolor='darkgreen', alpha=0.7)

    if title is None:
        title = f"{n} panels"
        if colliding:
            title += f" | {len(colliding)} colliding"

    return _finish_axes(ax, [boundary] + list(existing) + cells, title)


def save_or_show(ax, save_path: Optional[str] = None):
    """Save the figure owning ax, or show it interactively."""
    fig = ax.figure
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved figure to {save_path}")
        plt.close(fig)
    else:
        plt.show()
