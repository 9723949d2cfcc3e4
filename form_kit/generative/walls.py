# form_kit/generative/walls.py
"""
Wall layout generators: rectangular grids, a single centred wall, and
perpendicular offsets of boundary segments.
"""

import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from ..kernel.errors import InvalidParameter
from ..kernel.vector import Point3, translate
from ..model import Segment, try_segment

logger = logging.getLogger(__name__)


@dataclass
class GridParams:
    """
    Parameters for a rectangular wall grid (offices, hotel rooms, ...).
    
    spacing_x, spacing_y : float
        Bay size in X and Y (internal units)
    count_x, count_y : int
        Number of bays in X and Y
    origin_x, origin_y : float
        Plan position of the grid's lower-left corner
    elevation : float
        Level elevation
    """
    spacing_x: float = 3.0 / 0.3048
    spacing_y: float = 3.0 / 0.3048
    count_x: int = 5
    count_y: int = 5
    origin_x: float = 0.0
    origin_y: float = 0.0
    elevation: float = 0.0


def generate_wall_grid(params: GridParams) -> List[Segment]:
    """
    Generate the wall lines of a rectangular grid.
    
    count_x + 1 lines run parallel to Y (one per X gridline), followed by
    count_y + 1 lines parallel to X, each spanning the full grid extent.
    
    Raises:
        InvalidParameter: For non-positive spacing or negative counts
    """
    if not params.spacing_x > 0 or not params.spacing_y > 0:
        raise InvalidParameter(
            f"grid spacing must be positive, got {params.spacing_x} x {params.spacing_y}"
        )
    if params.count_x < 0 or params.count_y < 0:
        raise InvalidParameter(
            f"grid counts must be >= 0, got {params.count_x} x {params.count_y}"
        )
    
    z = params.elevation
    x0, y0 = params.origin_x, params.origin_y
    x_end = x0 + params.count_x * params.spacing_x
    y_end = y0 + params.count_y * params.spacing_y
    
    segments = []
    # Walls parallel to Y
    for i in range(params.count_x + 1):
        x = x0 + i * params.spacing_x
        seg = try_segment(Point3(x, y0, z), Point3(x, y_end, z))
        if seg is None:
            logger.warning("Grid: skipped degenerate wall at x=%.3f", x)
            continue
        segments.append(seg)
    
    # Walls parallel to X
    for j in range(params.count_y + 1):
        y = y0 + j * params.spacing_y
        seg = try_segment(Point3(x0, y, z), Point3(x_end, y, z))
        if seg is None:
            logger.warning("Grid: skipped degenerate wall at y=%.3f", y)
            continue
        segments.append(seg)
    
    return segments


def centered_wall_segment(length: float, along_x: bool = True, elevation: float = 0.0) -> Segment:
    """
    A single wall of the given length centred on the origin.
    
    Raises:
        InvalidParameter: If the wall would be degenerate
    """
    half = length / 2
    if along_x:
        start, end = Point3(-half, 0.0, elevation), Point3(half, 0.0, elevation)
    else:
        start, end = Point3(0.0, -half, elevation), Point3(0.0, half, elevation)
    seg = try_segment(start, end)
    if seg is None:
        raise InvalidParameter(f"wall length {length} is too short")
    return seg


def offset_segment(segment: Segment, offset: float) -> Segment:
    """
    Shift a segment sideways in plan.
    
    Positive offsets move to the left of the segment direction; for a
    counter-clockwise room boundary that is inward.
    
    Raises:
        InvalidParameter: If the segment has no plan direction
    """
    dx = segment.end.x - segment.start.x
    dy = segment.end.y - segment.start.y
    plan_length = np.hypot(dx, dy)
    if plan_length == 0:
        raise InvalidParameter("cannot offset a segment with no plan direction")
    nx, ny = -dy / plan_length, dx / plan_length
    ox, oy = float(nx * offset), float(ny * offset)
    return Segment(translate(segment.start, ox, oy), translate(segment.end, ox, oy))
