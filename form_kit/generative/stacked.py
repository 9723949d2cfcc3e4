# form_kit/generative/stacked.py
"""
STACKED RECTANGLE GENERATOR: "Spiral House" Floor Plates
========================================================

PURPOSE:
--------
One rectangular outline per building level, each rotated a little more
than the one below. Stacked up, the plates read as a twisting tower.

For level k (0-based, in elevation order):

    theta_k = k * rotation_increment

The four corners (+-w/2, +-d/2) are rotated by theta_k about Z and placed
at the level elevation. The outline is emitted counter-clockwise starting
from the (-w/2, -d/2) corner:

    p4 -------- p3
    |            |
    |            |     sides: p1-p2 (width), p2-p3 (depth),
    |            |            p3-p4 (width), p4-p1 (depth)
    p1 -------- p2
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

from ..kernel.errors import InvalidParameter
from ..kernel.vector import Point3, rotate, translate
from ..model import Ring, chain_segments

logger = logging.getLogger(__name__)


@dataclass
class StackedParams:
    """
    Parameters for the stacked rotated-rectangle generator.
    
    elevations : Sequence[float]
        Level elevations, ascending (internal units)
    width : float
        Rectangle size along local X (internal units)
    depth : float
        Rectangle size along local Y (internal units)
    rotation_increment_degrees : float
        Extra rotation added per level
    offset_x, offset_y : float
        Plan position of the rotation centre
    """
    elevations: Sequence[float] = field(default_factory=list)
    width: float = 10.0 / 0.3048
    depth: float = 20.0 / 0.3048
    rotation_increment_degrees: float = 5.0
    offset_x: float = 0.0
    offset_y: float = 0.0


def _validate(params: StackedParams, elevations: List[float]) -> None:
    if not params.width > 0 or not params.depth > 0:
        raise InvalidParameter(
            f"width and depth must be positive, got {params.width} x {params.depth}"
        )
    for lower, upper in zip(elevations, elevations[1:]):
        if upper < lower:
            raise InvalidParameter(
                f"elevations must be ascending, got {lower} before {upper}"
            )


def rectangle_corners(width: float, depth: float) -> List[Point3]:
    """Corners of a width x depth rectangle centred on the origin at z=0."""
    hw, hd = width / 2, depth / 2
    return [
        Point3(-hw, -hd, 0.0),
        Point3(hw, -hd, 0.0),
        Point3(hw, hd, 0.0),
        Point3(-hw, hd, 0.0),
    ]


def rotated_rectangle(
    width: float,
    depth: float,
    rotation: float,
    elevation: float,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
) -> Tuple[Ring, int]:
    """
    Build one rotated rectangular ring.
    
    Returns:
    --------
    ring : Ring
        Up to four boundary segments
    skipped : int
        Number of degenerate sides left out
    """
    corners = [
        translate(rotate(p, rotation), offset_x, offset_y).with_z(elevation)
        for p in rectangle_corners(width, depth)
    ]
    segments, skipped = chain_segments(corners, closed=True)
    return Ring(tuple(segments)), skipped


def generate_stacked_rectangles(params: StackedParams) -> List[Tuple[float, Ring]]:
    """
    Generate one rotated rectangle per level.
    
    Parameters:
    -----------
    params : StackedParams
        Level elevations, plate size and rotation increment
    
    Returns:
    --------
    List[Tuple[float, Ring]]
        (elevation, ring) in the same order as params.elevations.
        A ring with a skipped side has is_closed == False.
    
    Example:
    --------
    >>> plates = generate_stacked_rectangles(
    ...     StackedParams(elevations=[0, 10, 20], width=30, depth=60))
    >>> [len(ring) for _, ring in plates]
    [4, 4, 4]
    """
    elevations = [float(z) for z in params.elevations]
    _validate(params, elevations)
    increment = np.radians(params.rotation_increment_degrees)
    
    plates = []
    for k, elevation in enumerate(elevations):
        ring, skipped = rotated_rectangle(
            params.width, params.depth, k * increment, elevation,
            params.offset_x, params.offset_y,
        )
        if skipped:
            logger.warning(
                "Level %d (z=%.3f): skipped %d side(s) with invalid geometry "
                "(line length too short); floor plate is incomplete.",
                k, elevation, skipped,
            )
        plates.append((elevation, ring))
    return plates
