# form_kit/generative/spiral.py
"""
SPIRAL GENERATOR: Archimedean Spiral as Bounded Segments
========================================================

PURPOSE:
--------
Discretize an Archimedean spiral into straight segments that a host can
turn into model lines or walls.

GEOMETRY:
---------
The radius grows linearly with the swept angle:

    r(a) = max_radius * a / (turn_count * 2*pi)

so r = 0 at a = 0 and r = max_radius after exactly turn_count turns.
The sweep is sampled every angle_resolution_degrees; sample i spans the
angles [i*da, (i+1)*da] and becomes one segment between the two spiral
points at those angles.

The output is an open polyline. Nothing closes the last point back to the
first; that is left to the caller.
"""

import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from ..config import CONFIG
from ..kernel.errors import InvalidParameter
from ..kernel.vector import Point3
from ..model import Segment, try_segment

logger = logging.getLogger(__name__)


@dataclass
class SpiralParams:
    """
    Parameters defining a spiral.
    
    Geometry:
    ---------
    max_radius : float
        Radius reached at the end of the last turn (internal units)
    turn_count : int
        Number of full turns (>= 1)
    angle_resolution_degrees : float
        Angular step between samples, in (0, 360]
        Lower = smoother curve, more segments
    
    Placement:
    ----------
    elevation : float
        Z of every point (the level elevation)
    offset_x, offset_y : float
        Plan offset of the spiral centre
    """
    max_radius: float = 24.0 / 0.3048
    turn_count: int = 10
    angle_resolution_degrees: float = 20.0
    elevation: float = 0.0
    offset_x: float = 0.0
    offset_y: float = 0.0


def validate_spiral_params(params: SpiralParams) -> None:
    """
    Check spiral parameters before any geometry is computed.
    
    Raises:
        InvalidParameter: If any parameter is out of range
    """
    if isinstance(params.turn_count, bool) or int(params.turn_count) != params.turn_count:
        raise InvalidParameter(f"turn_count must be an integer, got {params.turn_count!r}")
    if params.turn_count < 1:
        raise InvalidParameter(f"turn_count must be >= 1, got {params.turn_count}")
    if not 0 < params.angle_resolution_degrees <= 360:
        raise InvalidParameter(
            f"angle_resolution_degrees must be in (0, 360], got {params.angle_resolution_degrees}"
        )
    if not params.max_radius > 0:
        raise InvalidParameter(f"max_radius must be positive, got {params.max_radius}")


def spiral_sample_count(params: SpiralParams) -> int:
    """
    Number of raw samples (segments before degeneracy filtering).
    
    S = floor(turn_count * 360 / angle_resolution_degrees), capped at
    CONFIG.max_spiral_samples.
    """
    validate_spiral_params(params)
    # round() first so 3600/20 is not floored to 179 by float noise
    raw = params.turn_count * 360.0 / params.angle_resolution_degrees
    count = int(np.floor(round(raw, 9)))
    if count > CONFIG.max_spiral_samples:
        logger.warning(
            "Spiral needs %d samples; capping at %d. Increase angle_resolution_degrees.",
            count, CONFIG.max_spiral_samples,
        )
        count = CONFIG.max_spiral_samples
    return count


def spiral_radius(angle: float, params: SpiralParams) -> float:
    """Radius of the spiral after sweeping `angle` radians."""
    return params.max_radius * angle / (params.turn_count * 2 * np.pi)


def spiral_point(angle: float, params: SpiralParams) -> Point3:
    """Point on the spiral at the swept angle, including the plan offset."""
    r = spiral_radius(angle, params)
    return Point3(
        float(r * np.cos(angle) + params.offset_x),
        float(r * np.sin(angle) + params.offset_y),
        float(params.elevation),
    )


def generate_spiral(params: SpiralParams) -> List[Segment]:
    """
    Generate an Archimedean spiral as an ordered list of segments.
    
    Parameters:
    -----------
    params : SpiralParams
        Spiral design parameters
    
    Returns:
    --------
    List[Segment]
        Segments in sweep order; degenerate ones (near the origin when
        the resolution is fine) are dropped
    
    Example:
    --------
    >>> segs = generate_spiral(SpiralParams(max_radius=10.0, turn_count=2,
    ...                                     angle_resolution_degrees=30))
    >>> len(segs)
    24
    """
    n_samples = spiral_sample_count(params)
    delta = np.radians(params.angle_resolution_degrees)
    
    # One extra angle so sample i uses angles[i] and angles[i + 1]
    angles = np.arange(n_samples + 1) * delta
    points = [spiral_point(a, params) for a in angles]
    
    segments = []
    dropped = 0
    for i in range(n_samples):
        seg = try_segment(points[i], points[i + 1])
        if seg is None:
            dropped += 1
            continue
        segments.append(seg)
    
    if dropped:
        logger.debug("Spiral: dropped %d degenerate segment(s)", dropped)
    return segments
