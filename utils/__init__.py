"""
Utilities module - Visualization helpers.
"""

from .visualization import plot_scene, plot_lattice, save_or_show

__all__ = [
    'plot_scene',
    'plot_lattice',
    'save_or_show',
]
