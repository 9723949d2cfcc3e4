# form_kit/viz/viz3d.py
"""
3D VISUALIZATION: Interactive Geometry Viewer
=============================================

PURPOSE:
--------
Show generated segments, rings and profile stacks in an interactive Plotly
scene (rotate, zoom, pan) and export it to a standalone HTML file for
review before anything is built in the model.
"""

import os
from typing import Iterable, Literal, Optional, Union

import plotly.graph_objects as go
from plotly.colors import sample_colorscale

from ..kernel.units import from_internal_length
from ..model import ProfileStack, Ring, Segment, all_segments

Geometry = Union[Segment, Ring, ProfileStack]


def _line_coordinates(segments, unit: str):
    xs, ys, zs = [], [], []
    for seg in segments:
        # None breaks the polyline between segments
        xs.extend([from_internal_length(seg.start.x, unit), from_internal_length(seg.end.x, unit), None])
        ys.extend([from_internal_length(seg.start.y, unit), from_internal_length(seg.end.y, unit), None])
        zs.extend([from_internal_length(seg.start.z, unit), from_internal_length(seg.end.z, unit), None])
    return xs, ys, zs


def create_geometry_figure(
    geometry: Iterable[Geometry],
    title: str = "Generated Geometry",
    color_by: Literal['none', 'group'] = 'none',
    unit: str = "m",
) -> go.Figure:
    """
    Create a Plotly figure of segments, rings or profile stacks.
    
    Parameters:
    -----------
    geometry : Iterable[Segment | Ring | ProfileStack]
        Items to draw
    title : str
        Plot title
    color_by : str
        - 'none':  one trace, all lines steelblue
        - 'group': one trace per ring / profile, colored by height
    unit : str
        Display unit for the axes
    
    Returns:
    --------
    go.Figure
    """
    fig = go.Figure()
    items = list(geometry)
    
    if color_by == 'group':
        groups = []
        for item in items:
            if isinstance(item, ProfileStack):
                groups.extend(item.rings)
            elif isinstance(item, Ring):
                groups.append(item)
            else:
                groups.append(Ring((item,)))
        n = max(len(groups) - 1, 1)
        for index, ring in enumerate(groups):
            xs, ys, zs = _line_coordinates(ring.segments, unit)
            fig.add_trace(go.Scatter3d(
                x=xs, y=ys, z=zs,
                mode='lines',
                line=dict(color=sample_colorscale('Viridis', [index / n])[0], width=3),
                name=f'Profile {index}',
                showlegend=False,
                hoverinfo='skip',
            ))
    else:
        xs, ys, zs = _line_coordinates(all_segments(items), unit)
        fig.add_trace(go.Scatter3d(
            x=xs, y=ys, z=zs,
            mode='lines',
            line=dict(color='steelblue', width=4),
            name='Segments',
            hoverinfo='skip',
        ))
    
    fig.update_layout(
        title=title,
        scene=dict(
            xaxis_title=f'X ({unit})',
            yaxis_title=f'Y ({unit})',
            zaxis_title=f'Z ({unit})',
            aspectmode='data',
        ),
        margin=dict(l=0, r=0, t=40, b=0),
    )
    return fig


def plot_geometry_3d(
    geometry: Iterable[Geometry],
    title: str = "Generated Geometry",
    outpath: Optional[str] = None,
    show: bool = False,
    **kwargs,
) -> go.Figure:
    """
    Build the figure and optionally save it as HTML and/or show it.
    """
    fig = create_geometry_figure(geometry, title=title, **kwargs)
    if outpath:
        os.makedirs(os.path.dirname(outpath) if os.path.dirname(outpath) else '.', exist_ok=True)
        fig.write_html(outpath)
        print(f"3D visualization saved to: {outpath}")
    if show:
        fig.show()
    return fig
