# form_kit/generative - Parametric Geometry Generators
"""
GENERATIVE: Parametric Curve and Profile Generators
===================================================

Pure functions that turn a handful of design parameters into immutable
geometry. None of them touches a model.

Available Generators:
---------------------
- spiral:  Archimedean spiral as bounded segments
- stacked: One rotated rectangle per level ("spiral house")
- loft:    Tapered / twisted / bulged profile stack for a tower mass
- walls:   Rectangular wall grids, single walls, segment offsets

USAGE:
------
    from form_kit.generative import generate_spiral, SpiralParams
    
    segments = generate_spiral(SpiralParams(
        max_radius=78.74, turn_count=10, angle_resolution_degrees=20,
    ))
"""

from .spiral import generate_spiral, spiral_sample_count, SpiralParams
from .stacked import generate_stacked_rectangles, StackedParams
from .loft import generate_loft_profiles, bulge_effect, LoftParams, BulgeParams
from .walls import generate_wall_grid, centered_wall_segment, offset_segment, GridParams

__all__ = [
    'generate_spiral', 'spiral_sample_count', 'SpiralParams',
    'generate_stacked_rectangles', 'StackedParams',
    'generate_loft_profiles', 'bulge_effect', 'LoftParams', 'BulgeParams',
    'generate_wall_grid', 'centered_wall_segment', 'offset_segment', 'GridParams',
]
