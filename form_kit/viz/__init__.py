# form_kit/viz - Visualization Tools
"""
VIZ: Visualization for Generated Geometry
=========================================

- plan:  2D plan views (matplotlib)
- viz3d: interactive 3D views (Plotly)
"""

from .viz3d import plot_geometry_3d, create_geometry_figure
from .plan import plot_plan, plot_floor_plates

__all__ = ['plot_geometry_3d', 'create_geometry_figure', 'plot_plan', 'plot_floor_plates']
