# form_kit - Parametric geometry for BIM authoring
"""
FORM_KIT: Parametric Curves, Floor Plates and Loft Profiles for BIM
===================================================================

This package provides:
- Pure geometry generators (spirals, rotated floor plates, bulged lofts,
  wall grids) that return immutable segments, rings and profile stacks
- A model repository interface (plus an in-memory model) that turns
  that geometry into walls, model lines and lofted forms
- Workflows that run one all-or-nothing transaction per invocation and
  report partial success

ARCHITECTURE:
-------------
    kernel/         Point3, rotation about Z, unit conversion, errors
    model.py        Segment, Ring, ProfileStack
    generative/     spiral, stacked, loft, walls generators
    io.py           CSV import, DataFrame export
    repository.py   ModelRepository interface + InMemoryRepository
    builder.py      Batch creation with per-element failure handling
    workflows.py    End-to-end procedures (spiral walls, spiral house, ...)
    viz/            Plotly 3D and matplotlib plan views
"""

from .kernel import Point3, rotate, to_internal_length, from_internal_length
from .kernel.errors import (
    FormKitError,
    InvalidParameter,
    NotFound,
    ElementCreationFailure,
    ImportParseError,
)
from .model import Segment, Ring, ProfileStack

__version__ = "0.1.0"
