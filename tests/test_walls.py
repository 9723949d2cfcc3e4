# File: tests/test_walls.py
"""
Test the wall layout generators (grid, single wall, offsets).
"""

import numpy as np
import pytest

from form_kit.generative.walls import (
    GridParams,
    generate_wall_grid,
    centered_wall_segment,
    offset_segment,
)
from form_kit.kernel.errors import InvalidParameter
from form_kit.kernel.vector import Point3
from form_kit.model import Segment


def test_grid_line_counts_and_extent():
    """
    WHAT IS THIS TEST?
    ==================
    A 5 x 5 bay grid has 6 lines in each direction. Lines parallel to Y
    come first and span the full grid depth; then the lines parallel to X.
    """
    params = GridParams(spacing_x=10.0, spacing_y=8.0, count_x=5, count_y=5, elevation=3.0)
    segments = generate_wall_grid(params)

    assert len(segments) == 12
    along_y, along_x = segments[:6], segments[6:]
    for i, seg in enumerate(along_y):
        assert seg.start.x == seg.end.x == pytest.approx(i * 10.0)
        assert seg.length == pytest.approx(40.0)
    for j, seg in enumerate(along_x):
        assert seg.start.y == seg.end.y == pytest.approx(j * 8.0)
        assert seg.length == pytest.approx(50.0)
    assert all(seg.start.z == 3.0 for seg in segments)
    print("✓ Grid: 6 + 6 wall lines")


def test_grid_origin():
    segments = generate_wall_grid(GridParams(spacing_x=1.0, spacing_y=1.0, count_x=1, count_y=1,
                                             origin_x=5.0, origin_y=-5.0))
    assert segments[0].start == Point3(5.0, -5.0, 0.0)
    assert segments[-1].end == Point3(6.0, -4.0, 0.0)


def test_grid_with_zero_bays_skips_degenerate_lines():
    """With count_y = 0 the lines parallel to Y have no length and are dropped."""
    segments = generate_wall_grid(GridParams(spacing_x=3.0, spacing_y=3.0, count_x=2, count_y=0))
    assert len(segments) == 1
    assert segments[0].start.y == segments[0].end.y


@pytest.mark.parametrize("overrides", [
    dict(spacing_x=0.0),
    dict(spacing_y=-1.0),
    dict(count_x=-1),
])
def test_grid_invalid(overrides):
    with pytest.raises(InvalidParameter):
        generate_wall_grid(GridParams(**overrides))


def test_centered_wall():
    seg = centered_wall_segment(20.0)
    assert seg.start == Point3(-10.0, 0.0, 0.0)
    assert seg.end == Point3(10.0, 0.0, 0.0)

    seg = centered_wall_segment(20.0, along_x=False, elevation=12.0)
    assert seg.start == Point3(0.0, -10.0, 12.0)
    assert seg.midpoint == Point3(0.0, 0.0, 12.0)

    with pytest.raises(InvalidParameter):
        centered_wall_segment(0.001)


def test_offset_segment_moves_left():
    """
    Positive offsets go to the left of the segment direction, so
    (0,0) -> (10,0) offset by 1 lands on y = 1.
    """
    moved = offset_segment(Segment(Point3(0, 0, 2), Point3(10, 0, 2)), 1.0)
    np.testing.assert_allclose(moved.start.as_tuple(), (0, 1, 2), atol=1e-12)
    np.testing.assert_allclose(moved.end.as_tuple(), (10, 1, 2), atol=1e-12)

    back = offset_segment(moved, -1.0)
    np.testing.assert_allclose(back.start.as_tuple(), (0, 0, 2), atol=1e-12)


def test_offset_vertical_segment_raises():
    with pytest.raises(InvalidParameter):
        offset_segment(Segment(Point3(1, 1, 0), Point3(1, 1, 5)), 1.0)
