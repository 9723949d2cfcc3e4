# form_kit/model.py
"""
GEOMETRY MODEL: Segment, Ring and ProfileStack
==============================================

PURPOSE:
--------
The immutable primitives every generator produces and every consumer
(builder, exporters, viewers) reads:
- Segment: a straight line between two Point3s
- Ring: an ordered loop of segments (one cross-section or floor plate)
- ProfileStack: rings ordered by height ratio, ready for a loft

DEGENERACY RULE:
----------------
A segment no longer than CONFIG.min_segment_length is never emitted.
The host rejects such lines, so generators drop them at the source
through try_segment() and chain_segments().
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import CONFIG
from .kernel.vector import Point3, distance


@dataclass(frozen=True)
class Segment:
    """
    A straight segment from start to end.
    
    Parameters:
    -----------
    start : Point3
        First endpoint
    end : Point3
        Second endpoint
    
    Notes:
    ------
    - Direction matters for offsets (left normal) and ring closure
    """
    start: Point3
    end: Point3

    @property
    def length(self) -> float:
        return distance(self.start, self.end)

    @property
    def midpoint(self) -> Point3:
        return Point3(
            (self.start.x + self.end.x) / 2,
            (self.start.y + self.end.y) / 2,
            (self.start.z + self.end.z) / 2,
        )

    def reversed(self) -> "Segment":
        return Segment(self.end, self.start)


@dataclass(frozen=True)
class Ring:
    """
    An ordered loop of segments describing one closed outline.
    
    A ring whose generator had to skip a degenerate segment is kept
    (the remaining walls are still useful) but reports is_closed=False
    so the caller can warn about partial geometry.
    """
    segments: Tuple[Segment, ...]

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    @property
    def points(self) -> List[Point3]:
        """Start point of every segment, in order."""
        return [seg.start for seg in self.segments]

    @property
    def is_closed(self) -> bool:
        """True when every segment starts where the previous one ends."""
        if not self.segments:
            return False
        tol = CONFIG.closure_tolerance
        for prev, curr in zip(self.segments, self.segments[1:] + self.segments[:1]):
            if distance(prev.end, curr.start) > tol:
                return False
        return True

    @property
    def perimeter(self) -> float:
        return sum(seg.length for seg in self.segments)

    @property
    def elevation(self) -> float:
        """Z of the first point (rings produced here are planar and level)."""
        return self.segments[0].start.z if self.segments else 0.0


@dataclass(frozen=True)
class ProfileStack:
    """
    Loft cross-sections ordered from base (t=0) to top (t=1).
    
    Parameters:
    -----------
    rings : Tuple[Ring, ...]
        One closed ring per profile
    height_ratios : Tuple[float, ...]
        Normalized height t of each ring
    bulge_effects : Tuple[float, ...]
        Radial scale applied to each ring (1.0 = unaffected)
    
    Notes:
    ------
    - rings[0] and rings[-1] are the anchors: their bulge effect is always 1.0
    """
    rings: Tuple[Ring, ...]
    height_ratios: Tuple[float, ...]
    bulge_effects: Tuple[float, ...]

    def __len__(self) -> int:
        return len(self.rings)

    def __getitem__(self, index: int) -> Ring:
        return self.rings[index]

    def __iter__(self):
        return iter(self.rings)

    @property
    def anchors(self) -> Tuple[Ring, Ring]:
        return self.rings[0], self.rings[-1]


def try_segment(start: Point3, end: Point3, min_length: Optional[float] = None) -> Optional[Segment]:
    """
    Build a segment, or return None if it is too short to emit.
    """
    limit = CONFIG.min_segment_length if min_length is None else min_length
    seg = Segment(start, end)
    if seg.length > limit:
        return seg
    return None


def chain_segments(
    points: Sequence[Point3],
    closed: bool = False,
    min_length: Optional[float] = None,
) -> Tuple[List[Segment], int]:
    """
    Join consecutive points into segments.
    
    Parameters:
    -----------
    points : Sequence[Point3]
        Vertices in order
    closed : bool
        Also join the last point back to the first
    min_length : Optional[float]
        Override for the degeneracy threshold
    
    Returns:
    --------
    segments : List[Segment]
        Emitted segments (degenerate ones removed)
    skipped : int
        How many segments were dropped
    """
    pairs = list(zip(points, points[1:]))
    if closed and len(points) > 1:
        pairs.append((points[-1], points[0]))
    
    segments = []
    skipped = 0
    for a, b in pairs:
        seg = try_segment(a, b, min_length)
        if seg is None:
            skipped += 1
        else:
            segments.append(seg)
    return segments, skipped


def all_segments(items: Iterable) -> List[Segment]:
    """Flatten segments, rings and profile stacks into one segment list."""
    out = []
    for item in items:
        if isinstance(item, Segment):
            out.append(item)
        elif isinstance(item, (Ring, ProfileStack)):
            out.extend(all_segments(item))
        else:
            raise TypeError(f"Cannot take segments from {type(item).__name__}")
    return out
