# File: tests/test_repository.py
"""
Test the in-memory model repository: lookups, transactions and parameters.
"""

import pytest

from form_kit.kernel.errors import ElementCreationFailure, NotFound
from form_kit.kernel.vector import Point3
from form_kit.model import Ring, Segment, ProfileStack, chain_segments
from form_kit.repository import (
    InMemoryRepository,
    ReadOnlyParameter,
    TransactionError,
    WALLS,
    MODEL_LINES,
    MASS,
    WALL_HEIGHT,
    ROOM_BOUNDING,
    LENGTH,
    SWEEPS,
    REVEALS,
    HOST_WALL,
    VERTICAL,
    DISTANCE,
    WALL_SIDE,
)


def square_ring(size: float, z: float = 0.0) -> Ring:
    pts = [Point3(0, 0, z), Point3(size, 0, z), Point3(size, size, z), Point3(0, size, z)]
    segments, _ = chain_segments(pts, closed=True)
    return Ring(tuple(segments))


@pytest.fixture
def repo():
    repo = InMemoryRepository()
    repo.add_level("Level 2", 10.0)
    repo.add_level("Level 1", 0.0)
    repo.add_type(WALLS, "Stacked Wall 1", kind='Stacked')
    repo.add_type(WALLS, "Curtain Wall 1", kind='Curtain')
    repo.add_type(WALLS, "Generic - 200mm")
    return repo


SEG = Segment(Point3(0, 0, 0), Point3(10, 0, 0))


def test_levels_sorted_and_lookup(repo):
    assert [lv.name for lv in repo.levels()] == ["Level 1", "Level 2"]
    assert repo.find_level("Level 2").elevation == 10.0
    with pytest.raises(NotFound):
        repo.find_level("Roof")


def test_type_lookup_and_default(repo):
    """
    default_wall_type() picks the first Basic type that is not stacked;
    curtain and stacked walls are never a fallback.
    """
    assert repo.find_type(WALLS, "Curtain Wall 1").kind == 'Curtain'
    assert repo.default_wall_type().name == "Generic - 200mm"
    with pytest.raises(NotFound):
        repo.find_type(WALLS, "Exterior - Brick")

    empty = InMemoryRepository()
    empty.add_type(WALLS, "Stacked Wall 1", kind='Stacked')
    with pytest.raises(NotFound):
        empty.default_wall_type()


def test_create_wall_sets_parameters(repo):
    level = repo.find_level("Level 1")
    wall_type = repo.default_wall_type()
    with repo.transaction("Create Wall"):
        wall_id = repo.create_wall(SEG, wall_type, level, 9.0, room_bounding=True)

    wall = repo.element(wall_id)
    assert wall.category == WALLS
    assert wall.level_id == level.id
    assert wall.parameters[WALL_HEIGHT] == 9.0
    assert wall.parameters[ROOM_BOUNDING] is True
    assert wall.parameters[LENGTH] == pytest.approx(10.0)
    assert repo.committed == ["Create Wall"]


def test_writes_need_a_transaction(repo):
    with pytest.raises(TransactionError):
        repo.create_model_line(SEG)


def test_nested_transaction_raises(repo):
    with repo.transaction("outer"):
        with pytest.raises(TransactionError):
            with repo.transaction("inner"):
                pass
    assert not repo.in_transaction


def test_rollback_on_exception(repo):
    """
    WHAT IS THIS TEST?
    ==================
    An exception escaping the transaction block undoes EVERY change made
    inside it: after the rollback the model looks as if the block never ran.
    """
    with repo.transaction("keep"):
        repo.create_model_line(SEG)

    with pytest.raises(RuntimeError):
        with repo.transaction("discard"):
            repo.create_model_line(SEG)
            repo.create_model_line(SEG.reversed())
            raise RuntimeError("host crashed")

    assert len(repo.elements(MODEL_LINES)) == 1
    assert repo.committed == ["keep"]
    print("✓ Failed transaction rolled back")


def test_caught_failures_do_not_roll_back(repo):
    level = repo.find_level("Level 1")
    wall_type = repo.default_wall_type()
    short = Segment(Point3(0, 0, 0), Point3(0.001, 0, 0))
    with repo.transaction("partial"):
        repo.create_wall(SEG, wall_type, level, 9.0)
        with pytest.raises(ElementCreationFailure):
            repo.create_wall(short, wall_type, level, 9.0)
    assert len(repo.elements(WALLS)) == 1


def test_reject_hook():
    repo = InMemoryRepository(reject=lambda category, geometry: "nope" if category == MODEL_LINES else None)
    with repo.transaction("t"):
        with pytest.raises(ElementCreationFailure, match="nope"):
            repo.create_model_line(SEG)


def test_create_loft_requires_closed_profiles(repo):
    closed = square_ring(10.0)
    open_ring = Ring(closed.segments[:3])
    with repo.transaction("loft"):
        form_id = repo.create_loft(ProfileStack((closed, square_ring(8.0, 20.0)), (0.0, 1.0), (1.0, 1.0)))
        with pytest.raises(ElementCreationFailure):
            repo.create_loft(ProfileStack((closed, open_ring), (0.0, 1.0), (1.0, 1.0)))
        with pytest.raises(ElementCreationFailure):
            repo.create_loft(ProfileStack((closed,), (0.0,), (1.0,)))
    assert repo.element(form_id).category == MASS
    assert repo.element(form_id).parameters['Profiles'] == 2


def test_set_parameter(repo):
    """
    set_parameter returns the old value, keeps the stored type, and
    refuses missing or read-only parameters.
    """
    room = repo.add_room("Kitchen", parameters={'Floor Finish': '', 'Occupancy': 2})
    with repo.transaction("params"):
        assert repo.set_parameter(room.id, 'Floor Finish', 'Tile') == ''
        assert repo.set_parameter(room.id, 'Occupancy', 3.6) == 2
        with pytest.raises(NotFound):
            repo.set_parameter(room.id, 'Comments', 'x')
        with pytest.raises(ReadOnlyParameter):
            repo.set_parameter(room.id, 'Area', 5.0)

    assert repo.get_parameter(room.id, 'Floor Finish') == 'Tile'
    assert repo.get_parameter(room.id, 'Occupancy') == 4
    assert isinstance(ReadOnlyParameter("x"), ElementCreationFailure)


def test_set_parameter_rejects_unconvertible_values(repo):
    """A value the stored type cannot take fails like any other element write."""
    room = repo.add_room("Kitchen", parameters={'Occupancy': 2, 'Ceiling Height': 9.0})
    with repo.transaction("params"):
        with pytest.raises(ElementCreationFailure, match="cannot take 'many'"):
            repo.set_parameter(room.id, 'Occupancy', "many")
        with pytest.raises(ElementCreationFailure):
            repo.set_parameter(room.id, 'Ceiling Height', None)
        assert repo.set_parameter(room.id, 'Occupancy', "4") == 2

    assert repo.get_parameter(room.id, 'Occupancy') == 4
    assert repo.get_parameter(room.id, 'Ceiling Height') == 9.0
    assert repo.committed == ["params"]


def test_create_wall_sweep(repo):
    """
    WHAT IS THIS TEST?
    ==================
    Sweeps and reveals attach to walls only. Vertical ones take a 0-1
    position along the wall, horizontal ones a height inside the wall.
    """
    level = repo.find_level("Level 1")
    wall_type = repo.default_wall_type()
    cornice = repo.add_type(SWEEPS, "Cornice 50mm")
    reveal = repo.add_type(REVEALS, "Reveal 20mm")
    with repo.transaction("sweeps"):
        wall_id = repo.create_wall(SEG, wall_type, level, 9.0)
        line_id = repo.create_model_line(SEG)
        sweep_id = repo.create_wall_sweep(wall_id, cornice, vertical=False, distance=4.5)
        reveal_id = repo.create_wall_sweep(wall_id, reveal, vertical=True, distance=0.25,
                                           wall_side='Interior')
        with pytest.raises(ElementCreationFailure):
            repo.create_wall_sweep(line_id, cornice)
        with pytest.raises(ElementCreationFailure):
            repo.create_wall_sweep(wall_id, cornice, distance=12.0)
        with pytest.raises(ElementCreationFailure):
            repo.create_wall_sweep(wall_id, reveal, vertical=True, distance=1.5)
        with pytest.raises(ElementCreationFailure):
            repo.create_wall_sweep(wall_id, wall_type)

    sweep = repo.element(sweep_id)
    assert sweep.category == SWEEPS
    assert sweep.parameters == {HOST_WALL: wall_id, VERTICAL: False, DISTANCE: 4.5,
                                WALL_SIDE: 'Exterior'}
    assert repo.element(reveal_id).category == REVEALS
    assert repo.element(reveal_id).parameters[WALL_SIDE] == 'Interior'


def test_rooms_and_find_room(repo):
    repo.add_room("Kitchen")
    repo.add_room("Unplaced", area=0.0)

    assert [r.name for r in repo.rooms()] == ["Kitchen"]
    assert repo.find_room("  kitchen ").name == "Kitchen"
    with pytest.raises(NotFound):
        repo.find_room("Unplaced")


def test_delete(repo):
    with repo.transaction("lines"):
        ids = [repo.create_model_line(SEG) for _ in range(3)]
    with repo.transaction("delete"):
        assert repo.delete(ids[:2] + [999]) == 2
    assert [e.id for e in repo.elements()] == [ids[2]]
    with pytest.raises(NotFound):
        repo.element(ids[0])
