# form_kit/kernel/vector.py
"""
VECTOR PRIMITIVES: Point3 and Plan Rotation
===========================================

PURPOSE:
--------
The smallest building blocks shared by every generator:
- Point3: an immutable (x, y, z) position in internal length units
- rotate: rotation about the global Z axis through the origin
- translate / distance: plan offsets and Euclidean length

COORDINATE SYSTEM:
------------------
Right-handed, z = up. A positive angle turns a point counter-clockwise
when the plan is viewed from above. Rotation never touches Z, so a point
rotated on a level stays on that level.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Point3:
    """
    A position in 3D model space.
    
    Parameters:
    -----------
    x, y, z : float
        Coordinates in internal length units (feet)
    
    Examples:
    ---------
    >>> p = Point3(1.0, 0.0, 10.0)
    >>> rotate(p, np.pi / 2)
    Point3(x=6.123233995736766e-17, y=1.0, z=10.0)
    
    Notes:
    ------
    - frozen=True makes points hashable and safe to share between rings
    """
    x: float
    y: float
    z: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def with_z(self, z: float) -> "Point3":
        """Same plan position at a different elevation."""
        return Point3(self.x, self.y, float(z))

    def scaled_xy(self, factor: float) -> "Point3":
        """Scale X and Y about the origin, leaving Z alone."""
        return Point3(self.x * factor, self.y * factor, self.z)


def rotate(point: Point3, angle: float) -> Point3:
    """
    Rotate a point about the Z axis through the origin.
    
    Parameters:
    -----------
    point : Point3
        Point to rotate
    angle : float
        Rotation angle in radians (positive = counter-clockwise in plan)
    
    Returns:
    --------
    Point3
        Rotated point with the same Z coordinate
    """
    if angle == 0:
        return point
    c = np.cos(angle)
    s = np.sin(angle)
    x = point.x * c - point.y * s
    y = point.x * s + point.y * c
    return Point3(float(x), float(y), point.z)


def translate(point: Point3, dx: float, dy: float, dz: float = 0.0) -> Point3:
    """Shift a point by (dx, dy, dz)."""
    return Point3(point.x + dx, point.y + dy, point.z + dz)


def distance(a: Point3, b: Point3) -> float:
    """Euclidean distance between two points."""
    return float(np.sqrt((b.x - a.x)**2 + (b.y - a.y)**2 + (b.z - a.z)**2))


def plan_radius(point: Point3) -> float:
    """Horizontal distance from the Z axis."""
    return float(np.hypot(point.x, point.y))
