# form_kit/generative/loft.py
"""
LOFT PROFILE GENERATOR: Tapered, Twisted, Bulged Tower Sections
===============================================================

PURPOSE:
--------
Produce the stack of closed cross-sections that a geometry kernel lofts
into a conceptual tower mass. Between a base and a top elevation, every
profile is:

1. TAPERED  - side length interpolates linearly from base_side to top_side
2. ROTATED  - the whole section turns by rotation_degrees over the height
3. TWISTED  - an extra twist_degrees, also proportional to height
4. BULGED   - pushed out (or squeezed in) radially by a smooth bump

THE BULGE ENVELOPE:
-------------------
The bump is centred at center_height_ratio of the height and reaches
radius_ratio of the height above and below. Inside that window, with
d = |z - center| / radius in [0, 1):

    smooth = 1 - 3d^2 + 2d^3          (cubic smoothstep: 1 at centre, 0 at edge)
    effect = 1 + bulge_factor * smooth

Outside the window effect = 1. Only X and Y are scaled, Z is untouched.

ANCHOR PRESERVATION:
--------------------
The first and last profiles ALWAYS have effect = 1, wherever the window
falls. The loft's base and top footprints therefore match base_side and
top_side exactly, independent of any bulge settings.

PROFILE SHAPE:
--------------
Each profile samples 4 * segments_per_side vertices evenly around a circle
of radius side/2 (segments_per_side = 1 gives a square standing on its
corner). Consecutive vertices are joined into one closed ring.
"""

import logging
from dataclasses import dataclass, field
from typing import List

import numpy as np

from ..config import CONFIG
from ..kernel.errors import InvalidParameter
from ..kernel.vector import Point3
from ..model import ProfileStack, Ring, chain_segments

logger = logging.getLogger(__name__)


@dataclass
class BulgeParams:
    """
    Smooth radial bulge/squeeze along the height.
    
    factor : float
        Bulge magnitude. Positive = bulge out, negative = squeeze in,
        0 = no effect. factor=3 makes the centre profile 4x as wide.
    center_height_ratio : float
        Vertical position of the bulge centre (0=base, 1=top)
    radius_ratio : float
        Half-height of the affected band as a fraction of total height (0, 0.5]
    """
    factor: float = 0.0
    center_height_ratio: float = 0.5
    radius_ratio: float = 0.3


@dataclass
class LoftParams:
    """
    Parameters defining a lofted tower mass.
    
    Height:
    -------
    base_elevation, top_elevation : float
        Z of the first and last profile (internal units); top > base
    segments : int
        Height subdivisions; values below 3 are raised to 3.
        profile_count = segments + 1
    
    Section:
    --------
    base_side, top_side : float
        Section size at base and top (linear taper in between)
    segments_per_side : int
        Sub-segments per quarter of the section outline (>= 1)
    
    Rotation:
    ---------
    rotation_degrees : float
        Total rotation from base to top
    clockwise : bool
        Direction flag: +rotation when True, -rotation when False
    twist_degrees : float
        Additional twist from base to top, added per vertex
    
    Placement:
    ----------
    center_x, center_y : float
        Plan position of the loft axis
    """
    base_elevation: float = 0.0
    top_elevation: float = 100.0
    segments: int = 82
    base_side: float = 10.0 / 0.3048
    top_side: float = 10.0 / 0.3048
    rotation_degrees: float = 360.0
    clockwise: bool = True
    twist_degrees: float = 0.0
    segments_per_side: int = 2
    bulge: BulgeParams = field(default_factory=BulgeParams)
    center_x: float = 0.0
    center_y: float = 0.0

    @property
    def effective_segments(self) -> int:
        return max(CONFIG.min_loft_segments, int(self.segments))

    @property
    def profile_count(self) -> int:
        return self.effective_segments + 1

    @property
    def height(self) -> float:
        return self.top_elevation - self.base_elevation


def validate_loft_params(params: LoftParams) -> None:
    """
    Raises:
        InvalidParameter: If the loft would be degenerate
    """
    if not params.top_elevation > params.base_elevation:
        raise InvalidParameter(
            f"top_elevation ({params.top_elevation}) must be above "
            f"base_elevation ({params.base_elevation})"
        )
    if not params.base_side > 0 or not params.top_side > 0:
        raise InvalidParameter(
            f"base_side and top_side must be positive, got {params.base_side}, {params.top_side}"
        )
    if int(params.segments_per_side) != params.segments_per_side or params.segments_per_side < 1:
        raise InvalidParameter(
            f"segments_per_side must be an integer >= 1, got {params.segments_per_side}"
        )
    bulge = params.bulge
    if not 0.0 <= bulge.center_height_ratio <= 1.0:
        raise InvalidParameter(
            f"bulge center_height_ratio must be in [0, 1], got {bulge.center_height_ratio}"
        )
    if not 0.0 < bulge.radius_ratio <= 0.5:
        raise InvalidParameter(
            f"bulge radius_ratio must be in (0, 0.5], got {bulge.radius_ratio}"
        )


def smoothstep_falloff(d: float) -> float:
    """1 - 3d^2 + 2d^3: 1 at d=0, 0 at d=1, zero slope at both ends."""
    return 1.0 - 3.0 * d**2 + 2.0 * d**3


def bulge_window(base_elevation: float, top_elevation: float, bulge: BulgeParams):
    """
    Vertical extent of the bulge.
    
    Returns:
    --------
    (center_z, radius_z, start_z, end_z)
        start/end are clipped to [base_elevation, top_elevation]
    """
    height = top_elevation - base_elevation
    center_z = base_elevation + height * bulge.center_height_ratio
    radius_z = height * bulge.radius_ratio
    start_z = max(base_elevation, center_z - radius_z)
    end_z = min(top_elevation, center_z + radius_z)
    return center_z, radius_z, start_z, end_z


def bulge_effect(
    z: float,
    base_elevation: float,
    top_elevation: float,
    bulge: BulgeParams,
    is_anchor: bool = False,
) -> float:
    """
    Radial scale factor for a profile at elevation z.
    
    Parameters:
    -----------
    z : float
        Elevation of the profile
    base_elevation, top_elevation : float
        Loft extent
    bulge : BulgeParams
        Envelope definition
    is_anchor : bool
        First or last profile; anchors are never scaled
    
    Returns:
    --------
    float
        1.0 outside the window, for anchors, and for |factor| <= epsilon;
        1 + factor * smoothstep inside the window
    
    Example:
    --------
    >>> bulge_effect(0.2, 0.0, 1.0, BulgeParams(3.0, 0.2, 0.3))
    4.0
    """
    if is_anchor or abs(bulge.factor) <= CONFIG.bulge_epsilon:
        return 1.0
    center_z, radius_z, start_z, end_z = bulge_window(base_elevation, top_elevation, bulge)
    if not start_z < z < end_z:
        return 1.0
    d = abs(z - center_z) / radius_z
    return 1.0 + bulge.factor * smoothstep_falloff(d)


def profile_vertices(
    side: float,
    angle_offset: float,
    segments_per_side: int,
    elevation: float,
    radial_scale: float = 1.0,
    center_x: float = 0.0,
    center_y: float = 0.0,
) -> List[Point3]:
    """
    Vertices of one section outline.
    
    4 * segments_per_side points spaced evenly around a circle of radius
    side/2, turned by angle_offset, scaled radially, then moved to the
    loft axis and elevation.
    """
    n = 4 * segments_per_side
    angles = 2 * np.pi * np.arange(n) / n + angle_offset
    radius = side / 2
    xs = np.cos(angles) * radius
    ys = np.sin(angles) * radius
    if radial_scale != 1.0:
        xs = xs * radial_scale
        ys = ys * radial_scale
    return [
        Point3(float(x + center_x), float(y + center_y), float(elevation))
        for x, y in zip(xs, ys)
    ]


def generate_loft_profiles(params: LoftParams) -> ProfileStack:
    """
    Generate the profile stack for a tapered, twisted, bulged loft.
    
    Parameters:
    -----------
    params : LoftParams
        Loft design parameters
    
    Returns:
    --------
    ProfileStack
        profile_count closed rings from base to top, with their height
        ratios and the bulge effect applied to each
    
    Example:
    --------
    >>> stack = generate_loft_profiles(LoftParams(base_elevation=0, top_elevation=100,
    ...                                           segments=10))
    >>> len(stack)
    11
    """
    validate_loft_params(params)
    
    count = params.profile_count
    last = count - 1
    sps = int(params.segments_per_side)
    sign = 1.0 if params.clockwise else -1.0
    rotation_rad = np.radians(params.rotation_degrees) * sign
    twist_rad = np.radians(params.twist_degrees)
    
    rings = []
    ratios = []
    effects = []
    for i in range(count):
        t = i / last
        z = params.base_elevation + t * params.height
        side = params.base_side + (params.top_side - params.base_side) * t
        angle_offset = rotation_rad * t + twist_rad * t
        
        is_anchor = i == 0 or i == last
        effect = bulge_effect(
            z, params.base_elevation, params.top_elevation, params.bulge, is_anchor
        )
        
        vertices = profile_vertices(
            side, angle_offset, sps, z, effect, params.center_x, params.center_y
        )
        segments, skipped = chain_segments(vertices, closed=True)
        if skipped:
            logger.warning(
                "Profile %d (t=%.3f): skipped %d degenerate segment(s)", i, t, skipped
            )
        
        rings.append(Ring(tuple(segments)))
        ratios.append(t)
        effects.append(effect)
    
    if abs(params.bulge.factor) > CONFIG.bulge_epsilon:
        affected = sum(1 for e in effects if e != 1.0)
        logger.debug("Loft: bulge factor %.3f affects %d of %d profiles",
                     params.bulge.factor, affected, count)
    
    return ProfileStack(tuple(rings), tuple(ratios), tuple(effects))
