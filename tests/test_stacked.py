# File: tests/test_stacked.py
"""
Test the stacked rotated-rectangle ("spiral house") generator.
"""

import numpy as np
import pytest

from form_kit.generative.stacked import (
    StackedParams,
    generate_stacked_rectangles,
    rectangle_corners,
)
from form_kit.kernel.errors import InvalidParameter
from form_kit.kernel.units import to_internal_length, from_internal_length


def three_level_params(**overrides) -> StackedParams:
    values = dict(
        elevations=[0.0, to_internal_length(3.0, "m"), to_internal_length(6.0, "m")],
        width=to_internal_length(10.0, "m"),
        depth=to_internal_length(20.0, "m"),
        rotation_increment_degrees=5.0,
    )
    values.update(overrides)
    return StackedParams(**values)


def segment_angle_degrees(seg) -> float:
    return np.degrees(np.arctan2(seg.end.y - seg.start.y, seg.end.x - seg.start.x))


def test_one_ring_per_level():
    """
    WHAT IS THIS TEST?
    ==================
    Three levels in, three closed 4-sided rings out, each at its level's
    elevation and in the same order.
    """
    params = three_level_params()
    plates = generate_stacked_rectangles(params)

    assert len(plates) == 3
    for (elevation, ring), expected in zip(plates, params.elevations):
        assert elevation == pytest.approx(expected)
        assert len(ring) == 4
        assert ring.is_closed
        assert all(seg.start.z == expected for seg in ring)
    print("✓ 3 levels -> 3 closed rectangles")


def test_rotation_increments():
    """
    WHAT IS THIS TEST?
    ==================
    Level k is rotated by k * increment. The first side (p1 -> p2) runs
    along local +X, so its direction angle IS the plate rotation:
    0, 5 and 10 degrees for the reference case.
    """
    plates = generate_stacked_rectangles(three_level_params())
    angles = [segment_angle_degrees(ring.segments[0]) for _, ring in plates]

    np.testing.assert_allclose(angles, [0.0, 5.0, 10.0], atol=1e-9)
    print(f"✓ Plate rotations: {[round(a, 6) for a in angles]} deg")


def test_side_lengths_match_width_and_depth():
    """Sides alternate width, depth, width, depth (10, 20, 10, 20 m) on every level."""
    plates = generate_stacked_rectangles(three_level_params())
    for _, ring in plates:
        lengths_m = [from_internal_length(seg.length, "m") for seg in ring]
        np.testing.assert_allclose(lengths_m, [10.0, 20.0, 10.0, 20.0], rtol=1e-12)
    print("✓ Rotation preserves side lengths")


def test_corners_are_centred():
    corners = rectangle_corners(4.0, 2.0)
    np.testing.assert_allclose(
        [p.as_tuple() for p in corners],
        [(-2, -1, 0), (2, -1, 0), (2, 1, 0), (-2, 1, 0)],
    )


def test_offset_moves_rotation_centre():
    plates = generate_stacked_rectangles(three_level_params(offset_x=100.0, offset_y=50.0))
    for _, ring in plates:
        xs = [p.x for p in ring.points]
        ys = [p.y for p in ring.points]
        assert np.mean(xs) == pytest.approx(100.0)
        assert np.mean(ys) == pytest.approx(50.0)


def test_no_levels_gives_no_plates():
    assert generate_stacked_rectangles(three_level_params(elevations=[])) == []


def test_elevations_from_a_generator():
    """Elevations may be any iterable, consumed exactly once."""
    plates = generate_stacked_rectangles(
        three_level_params(elevations=(10.0 * k for k in range(2)))
    )
    assert [z for z, _ in plates] == [0.0, 10.0]
    assert all(ring.is_closed for _, ring in plates)

    with pytest.raises(InvalidParameter):
        generate_stacked_rectangles(three_level_params(elevations=iter([5.0, 0.0])))


def test_descending_elevations_raise():
    with pytest.raises(InvalidParameter):
        generate_stacked_rectangles(three_level_params(elevations=[0.0, 10.0, 5.0]))


@pytest.mark.parametrize("width, depth", [(0.0, 10.0), (10.0, -1.0)])
def test_non_positive_size_raises(width, depth):
    with pytest.raises(InvalidParameter):
        generate_stacked_rectangles(three_level_params(width=width, depth=depth))


def test_degenerate_width_gives_incomplete_ring(caplog):
    """
    WHAT IS THIS TEST?
    ==================
    A plate narrower than the host's minimum line length loses its two
    width sides. The depth sides are still emitted (they are useful walls),
    but the ring reports that it is not closed and a warning is logged.
    """
    plates = generate_stacked_rectangles(three_level_params(width=0.001))

    for _, ring in plates:
        assert len(ring) == 2
        assert not ring.is_closed
    assert "incomplete" in caplog.text
    print("✓ Degenerate sides are skipped, not emitted")
