# form_kit/config.py
"""
Generator configuration and defaults.
"""

from dataclasses import dataclass
from typing import List, Tuple


@dataclass
class GeneratorConfig:
    """Global generator configuration."""
    
    # Degeneracy threshold for emitted segments (feet, ~0.8 mm)
    min_segment_length: float = 0.0026
    
    # Shortest wall the spiral wall workflow will try to build (feet)
    min_wall_length: float = 0.1
    
    # Resource protection for the spiral sampler
    max_spiral_samples: int = 100_000
    
    # Bulge factors at or below this magnitude are treated as zero
    bulge_epsilon: float = 0.001
    
    # Loft profiles: minimum number of height segments
    min_loft_segments: int = 3
    
    # Tolerance for ring closure and geometric comparisons (feet)
    closure_tolerance: float = 1e-9
    
    # Workflow defaults (user units)
    default_level_name: str = "Level 1"
    default_wall_type_name: str = "Generic - 200mm"
    default_wall_height_m: float = 3.0
    
    # Parameter ranges exposed through the API
    spiral_radius_range_m: Tuple[float, float] = (0.5, 200.0)
    spiral_turns_range: Tuple[int, int] = (1, 100)
    angle_resolution_range: Tuple[float, float] = (0.5, 360.0)
    loft_segments_range: Tuple[int, int] = (3, 400)
    
    # Wall type kinds accepted as a fallback wall type
    basic_wall_kinds: List[str] = None
    
    def __post_init__(self):
        if self.basic_wall_kinds is None:
            self.basic_wall_kinds = ['Basic']


# Global config instance
CONFIG = GeneratorConfig()
