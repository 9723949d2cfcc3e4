# form_kit/kernel - Geometry primitives shared by every generator
"""
KERNEL: THE SHARED FOUNDATION
=============================

Everything the generators have in common:
- Point3 and rotation about Z (vector.py)
- Length unit conversion at the boundary (units.py)
- The error taxonomy (errors.py)

Nothing in the kernel knows about walls, levels or lofts.
"""

from .vector import Point3, rotate, translate, distance, plan_radius
from .units import to_internal_length, from_internal_length, normalize_unit
from .errors import (
    FormKitError,
    InvalidParameter,
    NotFound,
    ElementCreationFailure,
    ImportParseError,
)

__all__ = [
    'Point3', 'rotate', 'translate', 'distance', 'plan_radius',
    'to_internal_length', 'from_internal_length', 'normalize_unit',
    'FormKitError', 'InvalidParameter', 'NotFound',
    'ElementCreationFailure', 'ImportParseError',
]
