# form_kit/workflows.py
"""
WORKFLOWS: Parameters -> Geometry -> One Transaction -> Report
==============================================================

Each function here is one complete model-building procedure:

1. Validate parameters and resolve names (levels, types, rooms).
   InvalidParameter / NotFound propagate before any transaction opens.
2. Compute all geometry with the pure generators.
3. Build everything in ONE transaction; per-element rejections are
   caught, counted and reported (partial success).
4. Return a BuildReport (success count first, then diagnostics).

User-facing lengths are in physical units (meters unless stated);
conversion to internal units happens here, at the boundary.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import pandas as pd

from .builder import BuildReport, build_batch, build_loft, build_model_lines, build_walls
from .config import CONFIG
from .generative.loft import BulgeParams, LoftParams, bulge_window, generate_loft_profiles
from .generative.spiral import SpiralParams, generate_spiral
from .generative.stacked import StackedParams, generate_stacked_rectangles
from .generative.walls import GridParams, centered_wall_segment, generate_wall_grid, offset_segment
from .io import Source, read_coordinate_rows, read_name_value_rows, write_frame_csv
from .kernel.errors import ElementCreationFailure, InvalidParameter, NotFound
from .kernel.units import from_internal_length, to_internal_length
from .repository import MODEL_LINES, REVEALS, SWEEPS, WALL_HEIGHT, WALL_SIDES, WALLS, ElementType, ModelRepository

logger = logging.getLogger(__name__)


# =============================================================================
# Shared lookups
# =============================================================================

def _wall_type(repo: ModelRepository, name: Optional[str], report: BuildReport) -> ElementType:
    """Named wall type, falling back to the default basic type with a warning."""
    if name is None:
        return repo.default_wall_type()
    try:
        return repo.find_type(WALLS, name)
    except NotFound:
        fallback = repo.default_wall_type()
        report.warn(f"Wall type '{name}' not found. Using default '{fallback.name}' instead.")
        return fallback


def _positive(name: str, value: float) -> None:
    if not value > 0:
        raise InvalidParameter(f"{name} must be positive, got {value}")


# =============================================================================
# Spirals
# =============================================================================

def spiral_model_lines(
    repo: ModelRepository,
    level_name: str = CONFIG.default_level_name,
    max_radius: float = 2400.0,
    turn_count: int = 10,
    angle_resolution_degrees: float = 20.0,
    unit: str = "cm",
) -> BuildReport:
    """Sketch an Archimedean spiral with model lines on a level."""
    level = repo.find_level(level_name)
    params = SpiralParams(
        max_radius=to_internal_length(max_radius, unit),
        turn_count=turn_count,
        angle_resolution_degrees=angle_resolution_degrees,
        elevation=level.elevation,
    )
    segments = generate_spiral(params)
    logger.info("Sketching spiral on '%s' with %d segment(s)", level.name, len(segments))
    return build_model_lines(repo, segments, operation="Create Spiral")


def spiral_walls(
    repo: ModelRepository,
    level_name: str = CONFIG.default_level_name,
    max_radius_m: float = 24.0,
    turn_count: int = 5,
    angle_resolution_degrees: float = 30.0,
    wall_height_m: float = CONFIG.default_wall_height_m,
    wall_type_name: Optional[str] = None,
) -> BuildReport:
    """
    Build a spiral of straight walls.

    Segments shorter than CONFIG.min_wall_length are left out (the host
    will not build walls that short) and reported as warnings.
    """
    _positive("wall_height_m", wall_height_m)
    report = BuildReport(operation="Create Spiral Walls", noun='wall')
    level = repo.find_level(level_name)
    wall_type = _wall_type(repo, wall_type_name, report)

    params = SpiralParams(
        max_radius=to_internal_length(max_radius_m, "m"),
        turn_count=turn_count,
        angle_resolution_degrees=angle_resolution_degrees,
        elevation=level.elevation,
    )
    segments = generate_spiral(params)
    walls = [seg for seg in segments if seg.length > CONFIG.min_wall_length]
    if len(walls) < len(segments):
        report.warn(f"Skipped {len(segments) - len(walls)} spiral segment(s) too short for a wall.")

    return build_walls(
        repo, walls, wall_type, level, to_internal_length(wall_height_m, "m"),
        operation=report.operation, report=report,
    )


def spiral_house(
    repo: ModelRepository,
    wall_type_name: str = CONFIG.default_wall_type_name,
    width_m: float = 10.0,
    depth_m: float = 20.0,
    rotation_increment_degrees: float = 5.0,
    wall_height_m: float = CONFIG.default_wall_height_m,
) -> BuildReport:
    """
    Rectangular walls on every level, each level turned a bit further.

    All levels are built in a single transaction.

    Raises:
        NotFound: If the model has no levels or no usable wall type
    """
    _positive("wall_height_m", wall_height_m)
    report = BuildReport(operation="Create Spiral House", noun='wall')
    levels = repo.levels()
    if not levels:
        raise NotFound("No levels found in the document. Cannot create the house.")
    wall_type = _wall_type(repo, wall_type_name, report)

    plates = generate_stacked_rectangles(StackedParams(
        elevations=[level.elevation for level in levels],
        width=to_internal_length(width_m, "m"),
        depth=to_internal_length(depth_m, "m"),
        rotation_increment_degrees=rotation_increment_degrees,
    ))

    items = []
    for level, (_, ring) in zip(levels, plates):
        if not ring.is_closed:
            report.warn(f"Level '{level.name}': floor plate is incomplete ({len(ring)} of 4 walls).")
        items.extend((level, seg) for seg in ring)

    height = to_internal_length(wall_height_m, "m")
    report = build_batch(
        repo, report.operation, items,
        lambda item: repo.create_wall(item[1], wall_type, item[0], height),
        noun='wall', report=report,
    )
    report.details['levels'] = len(levels)
    report.details['wall_type'] = wall_type.name
    return report


@dataclass
class MassSettings:
    """
    User-unit settings for a lofted tower mass.

    Side lengths are in centimeters, the centre offset in meters, angles
    in degrees; see LoftParams / BulgeParams for the meaning of each.
    """
    segments: int = 82
    side_length_cm: float = 1000.0
    top_side_length_cm: float = 1000.0
    rotation_degrees: float = 360.0
    clockwise: bool = True
    twist_degrees: float = 0.0
    segments_per_side: int = 2
    bulge_factor: float = 3.0
    bulge_center_height_ratio: float = 0.2
    bulge_radius_ratio: float = 0.3
    center_x_m: float = 0.0
    center_y_m: float = 0.0

    def to_loft_params(self, base_elevation: float, top_elevation: float) -> LoftParams:
        return LoftParams(
            base_elevation=base_elevation,
            top_elevation=top_elevation,
            segments=self.segments,
            base_side=to_internal_length(self.side_length_cm, "cm"),
            top_side=to_internal_length(self.top_side_length_cm, "cm"),
            rotation_degrees=self.rotation_degrees,
            clockwise=self.clockwise,
            twist_degrees=self.twist_degrees,
            segments_per_side=self.segments_per_side,
            bulge=BulgeParams(
                factor=self.bulge_factor,
                center_height_ratio=self.bulge_center_height_ratio,
                radius_ratio=self.bulge_radius_ratio,
            ),
            center_x=to_internal_length(self.center_x_m, "m"),
            center_y=to_internal_length(self.center_y_m, "m"),
        )


def spiral_mass(
    repo: ModelRepository,
    base_level_name: str = "Level 1",
    top_level_name: str = "Level 42",
    settings: Optional[MassSettings] = None,
) -> BuildReport:
    """
    Loft a rotating, tapering tower mass between two levels.

    The base and top profiles keep their exact requested sizes whatever
    the bulge settings are.
    """
    settings = settings or MassSettings()
    base = repo.find_level(base_level_name)
    top = repo.find_level(top_level_name)
    params = settings.to_loft_params(base.elevation, top.elevation)
    stack = generate_loft_profiles(params)

    logger.info(
        "Lofting %d profile(s) from '%s' (%.2f m) to '%s' (%.2f m)",
        len(stack), base.name, from_internal_length(base.elevation, "m"),
        top.name, from_internal_length(top.elevation, "m"),
    )
    report = build_loft(repo, stack, operation="Create SpiralMass")
    report.details['profiles'] = len(stack)
    report.details['segments'] = params.effective_segments

    if abs(settings.bulge_factor) > CONFIG.bulge_epsilon:
        center_z, _, start_z, end_z = bulge_window(base.elevation, top.elevation, params.bulge)
        report.details['bulge'] = {
            'effect': 'Bulge' if settings.bulge_factor > 0 else 'Squeeze',
            'center_m': from_internal_length(center_z - base.elevation, "m"),
            'from_m': from_internal_length(start_z - base.elevation, "m"),
            'to_m': from_internal_length(end_z - base.elevation, "m"),
            'affected_profiles': sum(1 for e in stack.bulge_effects if e != 1.0),
        }
    return report


# =============================================================================
# Straight walls
# =============================================================================

def single_wall(
    repo: ModelRepository,
    level_name: str = CONFIG.default_level_name,
    wall_type_name: str = CONFIG.default_wall_type_name,
    length_m: float = 6.0,
    height_m: float = CONFIG.default_wall_height_m,
    along_x: bool = True,
) -> BuildReport:
    """One wall centred on the origin, along X or Y."""
    _positive("length_m", length_m)
    _positive("height_m", height_m)
    wall_type = repo.find_type(WALLS, wall_type_name)
    level = repo.find_level(level_name)
    segment = centered_wall_segment(to_internal_length(length_m, "m"), along_x, level.elevation)
    return build_walls(
        repo, [segment], wall_type, level, to_internal_length(height_m, "m"),
        operation="Create Wall",
    )


@dataclass
class GridSettings:
    """Wall grid in meters: bay spacing, bay counts and origin."""
    spacing_x_m: float = 3.0
    spacing_y_m: float = 3.0
    count_x: int = 5
    count_y: int = 5
    origin_x_m: float = 0.0
    origin_y_m: float = 0.0


def grid_walls(
    repo: ModelRepository,
    level_name: str = CONFIG.default_level_name,
    wall_type_name: str = CONFIG.default_wall_type_name,
    height_m: float = CONFIG.default_wall_height_m,
    settings: Optional[GridSettings] = None,
    room_bounding: bool = True,
) -> BuildReport:
    """Repetitive wall grid for offices, hotels, apartments."""
    _positive("height_m", height_m)
    settings = settings or GridSettings()
    level = repo.find_level(level_name)
    wall_type = repo.find_type(WALLS, wall_type_name)
    segments = generate_wall_grid(GridParams(
        spacing_x=to_internal_length(settings.spacing_x_m, "m"),
        spacing_y=to_internal_length(settings.spacing_y_m, "m"),
        count_x=settings.count_x,
        count_y=settings.count_y,
        origin_x=to_internal_length(settings.origin_x_m, "m"),
        origin_y=to_internal_length(settings.origin_y_m, "m"),
        elevation=level.elevation,
    ))
    return build_walls(
        repo, segments, wall_type, level, to_internal_length(height_m, "m"),
        room_bounding, operation="Create Walls - Grid",
    )


def coordinate_walls(
    repo: ModelRepository,
    source: Source,
    level_name: str = CONFIG.default_level_name,
    wall_type_name: str = CONFIG.default_wall_type_name,
    height_m: float = CONFIG.default_wall_height_m,
    room_bounding: bool = True,
) -> BuildReport:
    """
    Walls from an x1,y1,x2,y2 CSV (meters).

    Malformed rows are skipped and reported; they never stop the import.
    """
    _positive("height_m", height_m)
    level = repo.find_level(level_name)
    wall_type = repo.find_type(WALLS, wall_type_name)
    imported = read_coordinate_rows(source, elevation=level.elevation, unit="m")

    report = BuildReport(operation="Create Walls - Coordinates", noun='wall')
    for err in imported.errors:
        report.warn(f"Could not parse {err}")
    report.details['import_errors'] = imported.error_count

    return build_walls(
        repo, imported.segments, wall_type, level, to_internal_length(height_m, "m"),
        room_bounding, operation=report.operation, report=report,
    )


def room_boundary_walls(
    repo: ModelRepository,
    level_name: str = CONFIG.default_level_name,
    wall_type_name: str = CONFIG.default_wall_type_name,
    height_m: float = CONFIG.default_wall_height_m,
    offset_mm: float = 0.0,
    room_bounding: bool = True,
) -> BuildReport:
    """
    Walls along the boundary of every placed room on a level.

    A non-zero offset shifts each boundary segment sideways (positive =
    to the left of the boundary direction).
    """
    _positive("height_m", height_m)
    level = repo.find_level(level_name)
    wall_type = repo.find_type(WALLS, wall_type_name)
    offset = to_internal_length(offset_mm, "mm")

    report = BuildReport(operation="Create Walls - RoomBoundaries", noun='wall')
    segments = []
    for room in repo.rooms():
        if room.level_id != level.id:
            continue
        if room.geometry is None:
            report.warn(f"Room '{room.name}' has no boundary.")
            continue
        for seg in room.geometry:
            segments.append(offset_segment(seg, offset) if abs(offset) > 0.001 else seg)

    return build_walls(
        repo, segments, wall_type, level, to_internal_length(height_m, "m"),
        room_bounding, operation=report.operation, report=report,
    )


def model_line_walls(
    repo: ModelRepository,
    level_name: str = CONFIG.default_level_name,
    wall_type_name: str = CONFIG.default_wall_type_name,
    height_m: float = CONFIG.default_wall_height_m,
    room_bounding: bool = True,
    tolerance: float = 0.1,
) -> BuildReport:
    """
    Walls on top of the model lines sketched at a level's elevation.

    A line counts as on the level when its start point is within
    `tolerance` (internal units) of the level elevation.
    """
    _positive("height_m", height_m)
    level = repo.find_level(level_name)
    wall_type = repo.find_type(WALLS, wall_type_name)
    segments = [
        line.geometry for line in repo.elements(MODEL_LINES)
        if abs(line.geometry.start.z - level.elevation) < tolerance
    ]
    report = BuildReport(operation="Create Walls - Perimeter", noun='wall')
    if not segments:
        report.warn(f"No model lines found on '{level.name}'.")
    return build_walls(
        repo, segments, wall_type, level, to_internal_length(height_m, "m"),
        room_bounding, operation=report.operation, report=report,
    )


def delete_all_walls(repo: ModelRepository, confirm: bool = True) -> BuildReport:
    """Delete every wall in the model (nothing happens unless confirm=True)."""
    report = BuildReport(operation="Delete All Walls", noun='deleted wall')
    wall_ids = [wall.id for wall in repo.elements(WALLS)]
    if not wall_ids:
        report.warn("No walls found to delete.")
        return report
    if not confirm:
        report.warn(f"Deletion skipped: found {len(wall_ids)} wall(s) that could be deleted.")
        return report

    with repo.transaction(report.operation):
        repo.delete(wall_ids)
    report.created.extend(wall_ids)
    report.log()
    return report


# =============================================================================
# Wall sweeps and reveals
# =============================================================================

SWEEP_MODES = {'AddSweep': SWEEPS, 'AddReveal': REVEALS}


def _sweep_type(
    repo: ModelRepository,
    category: str,
    name: Optional[str],
    report: BuildReport,
) -> ElementType:
    """Sweep or reveal type by name (any case), else the first of its category."""
    available = repo.types(category)
    if name:
        for sweep_type in available:
            if sweep_type.name.lower() == name.lower():
                return sweep_type
    if not available:
        raise NotFound(f"No {category} types found in the model.")
    if name:
        report.warn(f"{category} type '{name}' not found. Using default '{available[0].name}' instead.")
    return available[0]


def wall_sweeps(
    repo: ModelRepository,
    mode: str = "AddSweep",
    sweep_type_name: Optional[str] = None,
    vertical: bool = False,
    offset: float = 0.5,
    distance_m: Optional[float] = None,
    wall_ids: Optional[Iterable[int]] = None,
    wall_side: str = "Exterior",
) -> BuildReport:
    """
    Add a sweep or reveal to each wall of a working set.

    Parameters:
    -----------
    mode : str
        'AddSweep' (Cornices types) or 'AddReveal' (Reveals types)
    sweep_type_name : Optional[str]
        Type to place; a missing name falls back to the first type of
        the category with a warning
    vertical : bool
        Vertical sweeps sit at `offset` (0-1) along the wall; horizontal
        ones at `offset` times the wall height above its base
    distance_m : Optional[float]
        Fixed height above the base for horizontal sweeps (overrides offset)
    wall_ids : Optional[Iterable[int]]
        Walls to process (all walls when None); other ids are skipped
        with a warning
    wall_side : str
        'Exterior' or 'Interior'
    """
    if mode not in SWEEP_MODES:
        raise InvalidParameter(f"mode must be one of {sorted(SWEEP_MODES)}, got '{mode}'")
    if wall_side not in WALL_SIDES:
        raise InvalidParameter(f"wall_side must be one of {list(WALL_SIDES)}, got '{wall_side}'")
    if not 0.0 <= offset <= 1.0:
        raise InvalidParameter(f"offset must be within 0..1, got {offset}")
    if distance_m is not None and distance_m < 0:
        raise InvalidParameter(f"distance_m must not be negative, got {distance_m}")

    category = SWEEP_MODES[mode]
    report = BuildReport(operation=f"Wall Geometry - {mode}",
                         noun='sweep' if category == SWEEPS else 'reveal')
    sweep_type = _sweep_type(repo, category, sweep_type_name, report)

    if wall_ids is None:
        walls = repo.elements(WALLS)
    else:
        walls = []
        for element_id in wall_ids:
            try:
                element = repo.element(element_id)
            except NotFound:
                element = None
            if element is None or element.category != WALLS:
                report.warn(f"Element {element_id} is not a wall; skipped.")
                continue
            walls.append(element)
    if not walls:
        report.warn("No walls to process.")

    def distance_for(wall) -> float:
        if vertical:
            return offset
        if distance_m is not None:
            return to_internal_length(distance_m, "m")
        return wall.parameters[WALL_HEIGHT] * offset

    report.details['type'] = sweep_type.name
    return build_batch(
        repo, report.operation, walls,
        lambda wall: repo.create_wall_sweep(
            wall.id, sweep_type, vertical, distance_for(wall), wall_side
        ),
        noun=report.noun, report=report,
    )


# =============================================================================
# Parameters
# =============================================================================

def modify_parameter(
    repo: ModelRepository,
    element_ids: Iterable[int],
    parameter_name: str,
    value: Any,
    unit: Optional[str] = None,
    category: str = WALLS,
) -> BuildReport:
    """
    Set one parameter on a working set of elements.

    Elements outside `category` are skipped; missing or read-only
    parameters are reported per element.
    """
    element_ids = list(element_ids)
    report = BuildReport(operation="Modify Parameters", noun='modified element')
    if not element_ids:
        report.warn("No element ids provided for modification.")
        return report
    internal_value = to_internal_length(value, unit) if unit else value

    skipped = 0
    with repo.transaction(report.operation):
        for element_id in element_ids:
            try:
                element = repo.element(element_id)
            except NotFound as exc:
                report.failures.append(str(exc))
                continue
            if element.category != category:
                skipped += 1
                continue
            try:
                repo.set_parameter(element_id, parameter_name, internal_value)
            except (NotFound, ElementCreationFailure) as exc:
                report.failures.append(str(exc))
                continue
            report.created.append(element_id)

    report.attempted = len(element_ids) - skipped
    if skipped:
        report.warn(f"Skipped {skipped} element(s) outside category '{category}'.")
    report.log()
    return report


def update_room_parameters(
    repo: ModelRepository,
    source: Source,
    parameter_name: str = "Floor Finish",
    output_csv: Optional[Union[str, Path]] = None,
) -> BuildReport:
    """
    Apply RoomName,Value rows from a CSV to a room parameter.

    The report's details['log'] is a DataFrame with one row per CSV entry
    (RoomName, Status, OldValue, NewValue); it is also written to
    output_csv when given.
    """
    imported = read_name_value_rows(source)
    report = BuildReport(operation="Update Room Parameters", noun='updated room')
    for err in imported.errors:
        report.warn(f"Could not parse {err}")
    if not imported.values:
        report.warn("CSV file is empty or has no data rows.")
    report.attempted = len(imported.values)

    log = []
    with repo.transaction(report.operation):
        for room_name, new_value in imported.values.items():
            try:
                room = repo.find_room(room_name)
            except NotFound:
                report.failures.append(f"Room not found: '{room_name}'")
                log.append({'RoomName': room_name, 'Status': 'Not Found',
                            'OldValue': '', 'NewValue': new_value})
                continue
            try:
                old_value = repo.set_parameter(room.id, parameter_name, new_value)
            except (NotFound, ElementCreationFailure) as exc:
                report.failures.append(str(exc))
                log.append({'RoomName': room.name, 'Status': 'Parameter Error',
                            'OldValue': '', 'NewValue': new_value})
                continue
            report.created.append(room.id)
            log.append({'RoomName': room.name, 'Status': 'Updated',
                        'OldValue': '(empty)' if old_value in (None, '') else old_value,
                        'NewValue': new_value})

    frame = pd.DataFrame(log, columns=['RoomName', 'Status', 'OldValue', 'NewValue'])
    report.details['log'] = frame
    if output_csv:
        write_frame_csv(frame, output_csv)
    report.log()
    return report


def list_types(repo: ModelRepository, category: str = WALLS) -> pd.DataFrame:
    """Table of the types in a category, sorted by name."""
    rows = [{'id': t.id, 'name': t.name, 'kind': t.kind} for t in repo.types(category)]
    frame = pd.DataFrame(rows, columns=['id', 'name', 'kind'])
    return frame.sort_values('name', ignore_index=True)


def element_parameters(repo: ModelRepository, category: str = WALLS) -> pd.DataFrame:
    """One row per element of a category, one column per parameter."""
    rows = []
    for element in repo.elements(category):
        row = {'id': element.id, 'name': element.name}
        row.update(element.parameters)
        rows.append(row)
    return pd.DataFrame(rows)


def level_table(repo: ModelRepository, unit: str = "m") -> pd.DataFrame:
    """Levels with their elevations in the requested unit."""
    rows = [
        {'id': lv.id, 'name': lv.name, 'elevation': from_internal_length(lv.elevation, unit)}
        for lv in repo.levels()
    ]
    return pd.DataFrame(rows, columns=['id', 'name', 'elevation'])
