# File: tests/test_io.py
"""
Test CSV import (coordinates, name/value pairs) and DataFrame export.
"""

import io

import pandas as pd
import pytest

from form_kit.io import (
    read_coordinate_rows,
    read_name_value_rows,
    segments_to_frame,
    rings_to_frame,
    write_frame_csv,
)
from form_kit.kernel.errors import NotFound
from form_kit.kernel.units import to_internal_length
from form_kit.kernel.vector import Point3
from form_kit.model import Ring, Segment


COORDINATES = """x1,y1,x2,y2
0,0,5,0
bad,row
5,0,5,abc

5,0,5,4
"""


def test_malformed_rows_are_skipped_and_counted():
    """
    WHAT IS THIS TEST?
    ==================
    A coordinate file with two good rows and two malformed ones:
    - "bad,row" has too few columns
    - "5,0,5,abc" has a non-numeric value
    The import must not raise. It returns the 2 good segments and
    records one ImportParseError per bad row with its line number.
    """
    result = read_coordinate_rows(io.StringIO(COORDINATES))

    assert len(result.segments) == 2
    assert result.error_count == 2
    assert result.rows_read == 4
    assert [err.line_number for err in result.errors] == [3, 4]
    print(f"✓ Skipped {result.error_count} malformed row(s)")


def test_coordinates_convert_to_internal_units():
    result = read_coordinate_rows(io.StringIO(COORDINATES), elevation=10.0)
    first = result.segments[0]

    assert first.start == Point3(0.0, 0.0, 10.0)
    assert first.end.x == pytest.approx(to_internal_length(5.0, "m"))
    assert first.end.z == 10.0


def test_header_is_optional():
    result = read_coordinate_rows(io.StringIO("0,0,1,0\n1,0,1,1\n"), unit="ft")
    assert len(result.segments) == 2
    assert result.error_count == 0
    assert result.segments[1].end == Point3(1.0, 1.0, 0.0)


def test_zero_length_row_is_an_error():
    result = read_coordinate_rows(io.StringIO("x1,y1,x2,y2\n2,2,2,2\n"))
    assert result.segments == []
    assert result.error_count == 1
    assert "too short" in str(result.errors[0])


def test_missing_file_raises_not_found(tmp_path):
    with pytest.raises(NotFound):
        read_coordinate_rows(tmp_path / "nope.csv")


def test_read_from_path(tmp_path):
    path = tmp_path / "walls.csv"
    path.write_text(COORDINATES, encoding="utf-8")
    assert len(read_coordinate_rows(path).segments) == 2
    assert len(read_coordinate_rows(str(path)).segments) == 2


def test_name_value_rows():
    """
    Header skipped, quotes stripped, names case-insensitive with the
    first spelling kept, later rows overriding earlier ones.
    """
    text = 'RoomName,FloorFinish\nKitchen,Ceramic Tile\n"Bath"," Stone "\nkitchen,Oak\nLonely\n'
    result = read_name_value_rows(io.StringIO(text))

    assert result.values == {'Kitchen': 'Oak', 'Bath': 'Stone'}
    assert result.get('KITCHEN') == 'Oak'
    assert result.get('Garage') is None
    assert result.error_count == 1
    assert result.errors[0].line_number == 5


def test_segments_to_frame():
    segments = [
        Segment(Point3(0, 0, 0), Point3(to_internal_length(3, "m"), 0, 0)),
        Segment(Point3(0, 0, 0), Point3(0, to_internal_length(4, "m"), 0)),
    ]
    frame = segments_to_frame(segments, "m")

    assert list(frame.columns) == ['segment', 'x1', 'y1', 'z1', 'x2', 'y2', 'z2', 'length']
    assert frame['length'].tolist() == pytest.approx([3.0, 4.0])
    assert frame['segment'].tolist() == [0, 1]


def test_rings_to_frame():
    seg = Segment(Point3(0, 0), Point3(1, 0))
    ring = Ring((seg, seg.reversed()))
    frame = rings_to_frame([ring, ring], "ft")

    assert len(frame) == 4
    assert frame['ring'].tolist() == [0, 0, 1, 1]
    assert frame.columns[0] == 'ring'

    empty = rings_to_frame([], "m")
    assert len(empty) == 0
    assert 'ring' in empty.columns


def test_write_frame_csv(tmp_path):
    frame = pd.DataFrame({'a': [1.234567, 2.0], 'b': ['x', 'y']})
    path = write_frame_csv(frame, tmp_path / "out" / "table.csv", decimals=2)

    assert path.exists()
    back = pd.read_csv(path)
    assert back['a'].tolist() == [1.23, 2.0]
