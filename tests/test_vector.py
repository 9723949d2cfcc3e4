# File: tests/test_vector.py
"""
Tests for the kernel primitives: Point3, rotation about Z, unit conversion,
and the Segment / Ring model built on top of them.
"""

import numpy as np
import pytest

from form_kit.kernel.vector import Point3, rotate, translate, distance, plan_radius
from form_kit.kernel.units import to_internal_length, from_internal_length, normalize_unit
from form_kit.kernel.errors import InvalidParameter, ImportParseError, FormKitError
from form_kit.model import Segment, Ring, ProfileStack, try_segment, chain_segments, all_segments


def test_rotate_zero_is_identity():
    """
    WHAT IS THIS TEST?
    ==================
    Rotating by 0 radians must return the exact same point, not a point
    that is merely close (cos(0)*x - sin(0)*y can pick up float noise).
    """
    p = Point3(3.7, -1.25, 12.0)
    assert rotate(p, 0.0) == p
    assert rotate(p, 0) is p
    print("✓ rotate(p, 0) == p")


def test_rotate_inverse():
    """rotate(rotate(p, a), -a) returns to p (within float tolerance)."""
    p = Point3(5.0, 2.0, 7.5)
    for angle in [0.1, np.pi / 3, np.pi, 2.5 * np.pi, -1.7]:
        back = rotate(rotate(p, angle), -angle)
        np.testing.assert_allclose(back.as_tuple(), p.as_tuple(), atol=1e-12)
    print("✓ rotate by -a undoes rotate by a")


def test_rotate_quarter_turn_and_z():
    """A positive quarter turn maps +X to +Y and never changes Z."""
    p = rotate(Point3(1.0, 0.0, 4.0), np.pi / 2)
    np.testing.assert_allclose([p.x, p.y], [0.0, 1.0], atol=1e-15)
    assert p.z == 4.0
    assert plan_radius(p) == pytest.approx(1.0)
    print("✓ Counter-clockwise rotation keeps elevation")


def test_translate_and_distance():
    a = Point3(0.0, 0.0, 0.0)
    b = translate(a, 3.0, 4.0)
    assert distance(a, b) == pytest.approx(5.0)
    assert b.with_z(2.0) == Point3(3.0, 4.0, 2.0)
    assert b.scaled_xy(2.0) == Point3(6.0, 8.0, 0.0)


def test_unit_conversion_is_exact():
    """
    1 ft = 0.3048 m exactly; conversions in and out must agree.
    """
    assert to_internal_length(0.3048, "m") == pytest.approx(1.0, abs=1e-15)
    assert to_internal_length(12.0, "in") == pytest.approx(1.0)
    assert to_internal_length(304.8, "mm") == pytest.approx(1.0)
    assert to_internal_length(30.48, "cm") == pytest.approx(1.0)

    for unit in ["m", "cm", "mm", "in", "ft", "Meters", "FEET"]:
        value = 24.0
        assert from_internal_length(to_internal_length(value, unit), unit) == pytest.approx(value)
    print("✓ Unit conversions round-trip exactly")


def test_unknown_unit_raises():
    with pytest.raises(InvalidParameter):
        normalize_unit("furlong")
    with pytest.raises(ValueError):
        to_internal_length(1.0, "parsec")


def test_error_hierarchy():
    """Every package error is a FormKitError; ImportParseError keeps its line number."""
    err = ImportParseError(7, "could not convert string to float: 'abc'")
    assert isinstance(err, FormKitError)
    assert isinstance(err, ValueError)
    assert err.line_number == 7
    assert str(err).startswith("line 7:")


def test_try_segment_rejects_short_lines():
    """
    WHAT IS THIS TEST?
    ==================
    The host refuses lines of ~0.8 mm or less. try_segment must return None
    for them instead of producing an element that will fail later.
    """
    a = Point3(0.0, 0.0, 0.0)
    assert try_segment(a, Point3(0.002, 0.0, 0.0)) is None
    assert try_segment(a, a) is None
    seg = try_segment(a, Point3(1.0, 0.0, 0.0))
    assert seg is not None
    assert seg.length == pytest.approx(1.0)
    print("✓ Degenerate segments are never emitted")


def test_chain_segments_closed_ring():
    square = [Point3(0, 0), Point3(1, 0), Point3(1, 1), Point3(0, 1)]
    segments, skipped = chain_segments(square, closed=True)
    ring = Ring(tuple(segments))

    assert skipped == 0
    assert len(ring) == 4
    assert ring.is_closed
    assert ring.perimeter == pytest.approx(4.0)
    assert ring.points == square


def test_ring_with_gap_is_not_closed():
    """A ring that lost a side reports is_closed == False."""
    pts = [Point3(0, 0), Point3(1, 0), Point3(1, 0.001), Point3(0, 1)]
    segments, skipped = chain_segments(pts, closed=True)
    ring = Ring(tuple(segments))

    assert skipped == 1
    assert len(ring) == 3
    assert not ring.is_closed


def test_all_segments_flattens():
    seg = Segment(Point3(0, 0), Point3(1, 0))
    ring = Ring((seg, seg.reversed()))
    stack = ProfileStack((ring, ring), (0.0, 1.0), (1.0, 1.0))

    assert len(all_segments([seg, ring, stack])) == 1 + 2 + 4
    with pytest.raises(TypeError):
        all_segments([Point3(0, 0)])
