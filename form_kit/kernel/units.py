# form_kit/kernel/units.py
"""
Length unit conversion at the model boundary.

The model works in feet internally (the host convention). User-facing
parameters arrive in meters, centimeters, millimeters, inches or feet and
are converted once, on the way in, with exact factors (1 ft = 0.3048 m).
"""

from typing import Dict

from .errors import InvalidParameter


FEET_PER_UNIT: Dict[str, float] = {
    'meter': 1.0 / 0.3048,
    'centimeter': 1.0 / 30.48,
    'millimeter': 1.0 / 304.8,
    'inch': 1.0 / 12.0,
    'foot': 1.0,
}

_ALIASES: Dict[str, str] = {
    'm': 'meter', 'meter': 'meter', 'meters': 'meter', 'metre': 'meter', 'metres': 'meter',
    'cm': 'centimeter', 'centimeter': 'centimeter', 'centimeters': 'centimeter',
    'mm': 'millimeter', 'millimeter': 'millimeter', 'millimeters': 'millimeter',
    'in': 'inch', 'inch': 'inch', 'inches': 'inch',
    'ft': 'foot', 'foot': 'foot', 'feet': 'foot',
}


def normalize_unit(unit: str) -> str:
    """
    Resolve a unit name or alias ("m", "Meters", "ft", ...) to its canonical key.
    
    Raises:
        InvalidParameter: If the unit is not supported
    """
    key = _ALIASES.get(str(unit).strip().lower())
    if key is None:
        raise InvalidParameter(
            f"Unknown length unit: {unit!r}. Use one of {sorted(FEET_PER_UNIT)}."
        )
    return key


def to_internal_length(value: float, unit: str) -> float:
    """Convert a physical length to internal units (feet)."""
    return value * FEET_PER_UNIT[normalize_unit(unit)]


def from_internal_length(value: float, unit: str) -> float:
    """Convert an internal length (feet) back to a physical unit."""
    return value / FEET_PER_UNIT[normalize_unit(unit)]
