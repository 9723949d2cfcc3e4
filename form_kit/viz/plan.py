# form_kit/viz/plan.py
"""
Plan-view plots (matplotlib) of generated segments and floor plates.
"""

import os
from typing import Iterable, Optional, Sequence, Tuple

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from ..kernel.units import from_internal_length
from ..model import Ring, Segment


def plot_plan(
    segments: Iterable[Segment],
    title: str = "Plan",
    outpath: Optional[str] = None,
    unit: str = "m",
    color: str = 'steelblue',
    ax=None,
):
    """
    Draw segments in plan (X/Y), equal aspect.
    
    Returns:
    --------
    (fig, ax)
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))
    else:
        fig = ax.figure
    
    for seg in segments:
        ax.plot(
            [from_internal_length(seg.start.x, unit), from_internal_length(seg.end.x, unit)],
            [from_internal_length(seg.start.y, unit), from_internal_length(seg.end.y, unit)],
            color=color, linewidth=1.5,
        )
    
    ax.set_aspect('equal', adjustable='datalim')
    ax.set_xlabel(f'X ({unit})')
    ax.set_ylabel(f'Y ({unit})')
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    
    if outpath:
        os.makedirs(os.path.dirname(outpath) if os.path.dirname(outpath) else '.', exist_ok=True)
        fig.savefig(outpath, dpi=150, bbox_inches='tight')
        plt.close(fig)
        print(f"Plan plot saved to: {outpath}")
    return fig, ax


def plot_floor_plates(
    plates: Sequence[Tuple[float, Ring]],
    title: str = "Floor Plates",
    outpath: Optional[str] = None,
    unit: str = "m",
):
    """Overlay stacked floor plates in plan, lower levels lighter."""
    fig, ax = plt.subplots(figsize=(8, 8))
    cmap = plt.get_cmap('viridis')
    n = max(len(plates) - 1, 1)
    for index, (_, ring) in enumerate(plates):
        plot_plan(ring.segments, title=title, unit=unit, color=cmap(index / n), ax=ax)
    if outpath:
        os.makedirs(os.path.dirname(outpath) if os.path.dirname(outpath) else '.', exist_ok=True)
        fig.savefig(outpath, dpi=150, bbox_inches='tight')
        plt.close(fig)
        print(f"Floor plate plot saved to: {outpath}")
    return fig, ax
