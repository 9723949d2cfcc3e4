# form_kit/io.py
"""
TABULAR IMPORT / EXPORT
=======================

PURPOSE:
--------
Bulk input for the wall workflows and tabular output for reports.

INPUT FORMATS:
--------------
Coordinates (header optional, values in the given unit):

    x1,y1,x2,y2
    0,0,5,0
    5,0,5,4

Name / value pairs (header required, e.g. room finishes):

    RoomName,FloorFinish
    Kitchen,Ceramic Tile

A malformed row never aborts an import: it is skipped, recorded as an
ImportParseError (with its 1-based line number) and logged.

OUTPUT:
-------
pandas DataFrames: one row per segment (or per ring segment), which
serve as the "show" surface and export to CSV.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple, Union

import pandas as pd

from .kernel.errors import ImportParseError, NotFound
from .kernel.units import to_internal_length, from_internal_length
from .kernel.vector import Point3
from .model import Ring, Segment, try_segment

logger = logging.getLogger(__name__)

Source = Union[str, Path, io.TextIOBase]


@dataclass
class CoordinateImport:
    """Result of a coordinate import: good segments plus per-row errors."""
    segments: List[Segment] = field(default_factory=list)
    errors: List[ImportParseError] = field(default_factory=list)
    rows_read: int = 0

    @property
    def error_count(self) -> int:
        return len(self.errors)


@dataclass
class NameValueImport:
    """
    Result of a name/value import.
    
    Names keep the spelling of their first occurrence; lookups through
    get() and repeated rows match case-insensitively.
    """
    values: Dict[str, str] = field(default_factory=dict)
    _names: Dict[str, str] = field(default_factory=dict, repr=False)
    errors: List[ImportParseError] = field(default_factory=list)
    rows_read: int = 0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def get(self, name: str, default=None):
        key = self._names.get(name.strip().lower())
        return default if key is None else self.values[key]

    def add(self, name: str, value: str) -> None:
        key = self._names.setdefault(name.lower(), name)
        self.values[key] = value


def _read_rows(source: Source) -> List[Tuple[int, List[str]]]:
    """
    Read CSV rows with their 1-based line numbers, skipping blank lines.
    
    Raises:
        NotFound: If a path is given and the file does not exist
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise NotFound(f"CSV file not found: {path}")
        with open(path, newline='', encoding='utf-8-sig') as f:
            text = f.read()
    else:
        text = source.read()
    
    rows = []
    for line_number, row in enumerate(csv.reader(io.StringIO(text)), start=1):
        if not row or all(not cell.strip() for cell in row):
            continue
        rows.append((line_number, row))
    return rows


def _record(errors: List[ImportParseError], line_number: int, message: str) -> None:
    err = ImportParseError(line_number, message)
    logger.warning("Could not parse %s", err)
    errors.append(err)


def read_coordinate_rows(source: Source, elevation: float = 0.0, unit: str = "m") -> CoordinateImport:
    """
    Import wall lines from x1,y1,x2,y2 rows.
    
    Parameters:
    -----------
    source : str | Path | text stream
        CSV file path or an open text stream
    elevation : float
        Z for every segment (internal units, usually the level elevation)
    unit : str
        Unit of the coordinate values (default meters)
    
    Returns:
    --------
    CoordinateImport
        Segments in row order; skipped rows are listed in .errors
    """
    result = CoordinateImport()
    rows = _read_rows(source)
    
    # Header is optional: recognised by an "x1" column name
    if rows and any(cell.strip().lower() == 'x1' for cell in rows[0][1]):
        rows = rows[1:]
    
    for line_number, row in rows:
        result.rows_read += 1
        if len(row) < 4:
            _record(result.errors, line_number, f"expected 4 columns, got {len(row)}")
            continue
        try:
            x1, y1, x2, y2 = (float(cell.strip()) for cell in row[:4])
        except ValueError as exc:
            _record(result.errors, line_number, str(exc))
            continue
        
        start = Point3(to_internal_length(x1, unit), to_internal_length(y1, unit), elevation)
        end = Point3(to_internal_length(x2, unit), to_internal_length(y2, unit), elevation)
        seg = try_segment(start, end)
        if seg is None:
            _record(result.errors, line_number, "segment is too short")
            continue
        result.segments.append(seg)
    
    logger.info("Imported %d segment(s) from %d row(s), %d error(s)",
                len(result.segments), result.rows_read, result.error_count)
    return result


def read_name_value_rows(source: Source) -> NameValueImport:
    """
    Import Name,Value rows. The first row is a header and is skipped.
    
    Surrounding quotes and whitespace are stripped; later rows override
    earlier ones with the same (case-insensitive) name.
    """
    result = NameValueImport()
    rows = _read_rows(source)[1:]
    
    for line_number, row in rows:
        result.rows_read += 1
        if len(row) < 2:
            _record(result.errors, line_number, f"expected 2 columns, got {len(row)}")
            continue
        name = row[0].strip().strip('"')
        value = row[1].strip().strip('"')
        if not name or not value:
            _record(result.errors, line_number, "empty name or value")
            continue
        result.add(name, value)
    
    return result


def segments_to_frame(segments: Iterable[Segment], unit: str = "m") -> pd.DataFrame:
    """
    One row per segment with endpoints and length in the requested unit.
    """
    records = []
    for i, seg in enumerate(segments):
        records.append({
            'segment': i,
            'x1': from_internal_length(seg.start.x, unit),
            'y1': from_internal_length(seg.start.y, unit),
            'z1': from_internal_length(seg.start.z, unit),
            'x2': from_internal_length(seg.end.x, unit),
            'y2': from_internal_length(seg.end.y, unit),
            'z2': from_internal_length(seg.end.z, unit),
            'length': from_internal_length(seg.length, unit),
        })
    columns = ['segment', 'x1', 'y1', 'z1', 'x2', 'y2', 'z2', 'length']
    return pd.DataFrame(records, columns=columns)


def rings_to_frame(rings: Sequence[Ring], unit: str = "m") -> pd.DataFrame:
    """
    Flatten rings into a segment table with a leading 'ring' column.
    """
    frames = []
    for ring_index, ring in enumerate(rings):
        frame = segments_to_frame(ring.segments, unit)
        frame.insert(0, 'ring', ring_index)
        frames.append(frame)
    if not frames:
        empty = segments_to_frame([], unit)
        empty.insert(0, 'ring', pd.Series(dtype=int))
        return empty
    return pd.concat(frames, ignore_index=True)


def write_frame_csv(frame: pd.DataFrame, path: Union[str, Path], decimals: int = 4) -> Path:
    """Write a report table to CSV, creating parent folders as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.round(decimals).to_csv(path, index=False)
    logger.info("Exported %d row(s) to %s", len(frame), path)
    return path
