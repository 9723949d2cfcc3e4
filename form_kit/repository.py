# form_kit/repository.py
"""
MODEL REPOSITORY: The Host Document Behind an Interface
=======================================================

PURPOSE:
--------
Generators never touch a model. Everything that does (finding levels and
types by name, creating walls, model lines, lofts and wall sweeps, reading
and writing parameters, deleting elements) goes through ModelRepository.

    ModelRepository       abstract interface a host adapter implements
    InMemoryRepository    dictionary-backed implementation for tests,
                          demos and the HTTP API

TRANSACTIONS:
-------------
Write operations are only allowed inside `with repo.transaction(name):`.
The block is all-or-nothing: if an exception escapes it, every change made
inside is rolled back. Per-element failures that the caller catches inside
the block do not roll anything back.
"""

import copy
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

from .config import CONFIG
from .kernel.errors import ElementCreationFailure, FormKitError, NotFound
from .model import ProfileStack, Ring, Segment

logger = logging.getLogger(__name__)

# Element categories
WALLS = 'Walls'
MODEL_LINES = 'Lines'
MASS = 'Mass'
ROOMS = 'Rooms'
SWEEPS = 'Cornices'
REVEALS = 'Reveals'

# Built-in wall parameter names
WALL_HEIGHT = 'Unconnected Height'
ROOM_BOUNDING = 'Room Bounding'
LENGTH = 'Length'

# Wall sweep and reveal parameter names
HOST_WALL = 'Host Wall'
VERTICAL = 'Vertical'
DISTANCE = 'Distance'
WALL_SIDE = 'Wall Side'
WALL_SIDES = ('Exterior', 'Interior')


@dataclass(frozen=True)
class Level:
    """A named building level."""
    id: int
    name: str
    elevation: float  # internal units


@dataclass(frozen=True)
class ElementType:
    """
    A named type (wall type, sweep type, profile family, ...).
    
    kind : str
        Host classification, e.g. 'Basic', 'Stacked', 'Curtain' for walls
    """
    id: int
    name: str
    category: str
    kind: str = 'Basic'


@dataclass
class Element:
    """A model element as stored by the in-memory repository."""
    id: int
    category: str
    name: str = ''
    type_id: Optional[int] = None
    level_id: Optional[int] = None
    geometry: Union[Segment, Ring, ProfileStack, None] = None
    parameters: Dict[str, Any] = field(default_factory=dict)
    read_only: frozenset = frozenset()


class ReadOnlyParameter(ElementCreationFailure):
    """Raised when writing a parameter the host marks read-only."""
    pass


class TransactionError(FormKitError, RuntimeError):
    """Raised for writes outside a transaction or nested transactions."""
    pass


class ModelRepository(ABC):
    """
    Interface to a host model.
    
    Implementations provide storage and element creation; name lookups
    are built on top of levels() / types() here.
    """

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @abstractmethod
    def levels(self) -> List[Level]:
        """All levels, sorted by elevation."""

    @abstractmethod
    def types(self, category: str) -> List[ElementType]:
        """All types of a category (e.g. WALLS)."""

    @abstractmethod
    def elements(self, category: Optional[str] = None) -> List[Element]:
        """All elements, optionally restricted to one category."""

    @abstractmethod
    def element(self, element_id: int) -> Element:
        """One element by id. Raises NotFound."""

    @abstractmethod
    def get_parameter(self, element_id: int, name: str) -> Any:
        """Read a named parameter. Raises NotFound."""

    # ------------------------------------------------------------------
    # Writes (inside a transaction)
    # ------------------------------------------------------------------
    @abstractmethod
    def transaction(self, name: str):
        """Context manager wrapping one all-or-nothing batch of writes."""

    @abstractmethod
    def create_wall(
        self,
        segment: Segment,
        wall_type: ElementType,
        level: Level,
        height: float,
        room_bounding: bool = False,
    ) -> int:
        """Create a straight wall. Raises ElementCreationFailure."""

    @abstractmethod
    def create_model_line(self, segment: Segment) -> int:
        """Create a model line. Raises ElementCreationFailure."""

    @abstractmethod
    def create_loft(self, stack: ProfileStack, solid: bool = True) -> int:
        """Loft a profile stack into a form. Raises ElementCreationFailure."""

    @abstractmethod
    def create_wall_sweep(
        self,
        wall_id: int,
        sweep_type: ElementType,
        vertical: bool = False,
        distance: float = 0.0,
        wall_side: str = 'Exterior',
    ) -> int:
        """
        Attach a sweep or reveal (per sweep_type.category) to a wall.

        distance is the 0-1 position along the wall for vertical sweeps,
        or the height above the wall base (internal units) for horizontal
        ones. Raises ElementCreationFailure.
        """

    @abstractmethod
    def delete(self, element_ids: Iterable[int]) -> int:
        """Delete elements; returns how many were removed."""

    @abstractmethod
    def set_parameter(self, element_id: int, name: str, value: Any) -> Any:
        """Write a named parameter; returns the previous value."""

    # ------------------------------------------------------------------
    # Name resolution
    # ------------------------------------------------------------------
    def find_level(self, name: str) -> Level:
        """
        Raises:
            NotFound: If no level has this exact name
        """
        for level in self.levels():
            if level.name == name:
                return level
        raise NotFound(f"Level '{name}' not found.")

    def find_type(self, category: str, name: str) -> ElementType:
        """
        Raises:
            NotFound: If the category has no type with this exact name
        """
        for element_type in self.types(category):
            if element_type.name == name:
                return element_type
        raise NotFound(f"{category} type '{name}' not found.")

    def default_wall_type(self) -> ElementType:
        """
        First basic, non-stacked wall type.
        
        Raises:
            NotFound: If the model has no suitable wall type
        """
        for wall_type in self.types(WALLS):
            if wall_type.kind in CONFIG.basic_wall_kinds and 'Stacked' not in wall_type.name:
                return wall_type
        raise NotFound("No suitable wall type found.")

    def find_room(self, name: str) -> Element:
        """
        Case-insensitive lookup among placed rooms.
        
        Raises:
            NotFound: If no placed room has this name
        """
        target = name.strip().lower()
        for room in self.rooms():
            if room.name.strip().lower() == target:
                return room
        raise NotFound(f"Room '{name}' not found.")

    def rooms(self) -> List[Element]:
        """Placed rooms (area > 0)."""
        return [r for r in self.elements(ROOMS) if r.parameters.get('Area', 0) > 0]


RejectRule = Callable[[str, Any], Optional[str]]


class InMemoryRepository(ModelRepository):
    """
    Dictionary-backed model.
    
    Parameters:
    -----------
    reject : Optional[Callable[[category, geometry], Optional[str]]]
        Simulates host-side rejection: return a message to make the
        creation fail with ElementCreationFailure, or None to accept.
    
    Example:
    --------
    >>> repo = InMemoryRepository()
    >>> level = repo.add_level("Level 1", 0.0)
    >>> wall_type = repo.add_type(WALLS, "Generic - 200mm")
    >>> with repo.transaction("Create Wall"):
    ...     wall_id = repo.create_wall(segment, wall_type, level, 10.0)
    """

    def __init__(self, reject: Optional[RejectRule] = None):
        self._levels: Dict[int, Level] = {}
        self._types: Dict[int, ElementType] = {}
        self._elements: Dict[int, Element] = {}
        self._next_id = 1
        self._active: Optional[str] = None
        self.reject = reject
        self.committed: List[str] = []

    # -- seeding (setup only, no transaction needed) -------------------
    def _new_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def add_level(self, name: str, elevation: float) -> Level:
        level = Level(self._new_id(), name, float(elevation))
        self._levels[level.id] = level
        return level

    def add_type(self, category: str, name: str, kind: str = 'Basic') -> ElementType:
        element_type = ElementType(self._new_id(), name, category, kind)
        self._types[element_type.id] = element_type
        return element_type

    def add_room(
        self,
        name: str,
        level: Optional[Level] = None,
        area: float = 100.0,
        parameters: Optional[Dict[str, Any]] = None,
        read_only: Iterable[str] = (),
        boundary: Optional[Ring] = None,
    ) -> Element:
        params = {'Area': area}
        params.update(parameters or {})
        room = Element(
            id=self._new_id(),
            category=ROOMS,
            name=name,
            level_id=level.id if level else None,
            geometry=boundary,
            parameters=params,
            read_only=frozenset(read_only) | {'Area'},
        )
        self._elements[room.id] = room
        return room

    # -- queries -------------------------------------------------------
    def levels(self) -> List[Level]:
        return sorted(self._levels.values(), key=lambda lv: lv.elevation)

    def types(self, category: str) -> List[ElementType]:
        return [t for t in self._types.values() if t.category == category]

    def elements(self, category: Optional[str] = None) -> List[Element]:
        return [
            e for e in self._elements.values()
            if category is None or e.category == category
        ]

    def element(self, element_id: int) -> Element:
        try:
            return self._elements[element_id]
        except KeyError:
            raise NotFound(f"Element {element_id} not found.") from None

    def get_parameter(self, element_id: int, name: str) -> Any:
        element = self.element(element_id)
        if name not in element.parameters:
            raise NotFound(f"Parameter '{name}' not found for element {element_id}.")
        return element.parameters[name]

    # -- transactions --------------------------------------------------
    @property
    def in_transaction(self) -> bool:
        return self._active is not None

    @contextmanager
    def transaction(self, name: str) -> Iterator["InMemoryRepository"]:
        if self._active is not None:
            raise TransactionError(
                f"Cannot start '{name}': transaction '{self._active}' is already open."
            )
        snapshot = (copy.deepcopy(self._elements), self._next_id)
        self._active = name
        try:
            yield self
        except BaseException:
            self._elements, self._next_id = snapshot
            logger.warning("Transaction '%s' rolled back.", name)
            raise
        else:
            self.committed.append(name)
            logger.debug("Transaction '%s' committed.", name)
        finally:
            self._active = None

    def _require_transaction(self, action: str) -> None:
        if self._active is None:
            raise TransactionError(f"{action} requires an open transaction.")

    def _check_rejected(self, category: str, geometry: Any) -> None:
        if self.reject is not None:
            message = self.reject(category, geometry)
            if message:
                raise ElementCreationFailure(message)

    # -- writes --------------------------------------------------------
    def create_wall(
        self,
        segment: Segment,
        wall_type: ElementType,
        level: Level,
        height: float,
        room_bounding: bool = False,
    ) -> int:
        self._require_transaction("create_wall")
        if segment.length <= CONFIG.min_segment_length:
            raise ElementCreationFailure("Curve length is too small for a wall.")
        if not height > 0:
            raise ElementCreationFailure(f"Wall height must be positive, got {height}.")
        self._check_rejected(WALLS, segment)
        wall = Element(
            id=self._new_id(),
            category=WALLS,
            name=wall_type.name,
            type_id=wall_type.id,
            level_id=level.id,
            geometry=segment,
            parameters={
                WALL_HEIGHT: float(height),
                ROOM_BOUNDING: bool(room_bounding),
                LENGTH: segment.length,
            },
            read_only=frozenset({LENGTH}),
        )
        self._elements[wall.id] = wall
        return wall.id

    def create_model_line(self, segment: Segment) -> int:
        self._require_transaction("create_model_line")
        if segment.length <= CONFIG.min_segment_length:
            raise ElementCreationFailure("Curve length is too small for a model line.")
        self._check_rejected(MODEL_LINES, segment)
        line = Element(
            id=self._new_id(),
            category=MODEL_LINES,
            geometry=segment,
            parameters={LENGTH: segment.length},
            read_only=frozenset({LENGTH}),
        )
        self._elements[line.id] = line
        return line.id

    def create_loft(self, stack: ProfileStack, solid: bool = True) -> int:
        self._require_transaction("create_loft")
        if len(stack) < 2:
            raise ElementCreationFailure("A loft needs at least two profiles.")
        for index, ring in enumerate(stack):
            if not ring.is_closed:
                raise ElementCreationFailure(f"Profile {index} is not a closed loop.")
        self._check_rejected(MASS, stack)
        form = Element(
            id=self._new_id(),
            category=MASS,
            name='Loft',
            geometry=stack,
            parameters={'Solid': bool(solid), 'Profiles': len(stack)},
            read_only=frozenset({'Profiles'}),
        )
        self._elements[form.id] = form
        return form.id

    def create_wall_sweep(
        self,
        wall_id: int,
        sweep_type: ElementType,
        vertical: bool = False,
        distance: float = 0.0,
        wall_side: str = 'Exterior',
    ) -> int:
        self._require_transaction("create_wall_sweep")
        if sweep_type.category not in (SWEEPS, REVEALS):
            raise ElementCreationFailure(
                f"Type '{sweep_type.name}' is not a sweep or reveal type."
            )
        wall = self._elements.get(wall_id)
        if wall is None or wall.category != WALLS:
            raise ElementCreationFailure(f"Element {wall_id} is not a wall.")
        if wall_side not in WALL_SIDES:
            raise ElementCreationFailure(f"Unknown wall side '{wall_side}'.")
        if vertical and not 0.0 <= distance <= 1.0:
            raise ElementCreationFailure(
                f"Vertical position must be within 0..1, got {distance}."
            )
        if not vertical and not 0.0 <= distance <= wall.parameters[WALL_HEIGHT]:
            raise ElementCreationFailure(
                f"Distance {distance:.3f} is outside the height of wall {wall_id}."
            )
        self._check_rejected(sweep_type.category, wall)
        sweep = Element(
            id=self._new_id(),
            category=sweep_type.category,
            name=sweep_type.name,
            type_id=sweep_type.id,
            level_id=wall.level_id,
            parameters={
                HOST_WALL: wall_id,
                VERTICAL: bool(vertical),
                DISTANCE: float(distance),
                WALL_SIDE: wall_side,
            },
            read_only=frozenset({HOST_WALL, VERTICAL}),
        )
        self._elements[sweep.id] = sweep
        return sweep.id

    def delete(self, element_ids: Iterable[int]) -> int:
        self._require_transaction("delete")
        removed = 0
        for element_id in list(element_ids):
            if self._elements.pop(element_id, None) is not None:
                removed += 1
        return removed

    def set_parameter(self, element_id: int, name: str, value: Any) -> Any:
        self._require_transaction("set_parameter")
        element = self.element(element_id)
        if name not in element.parameters:
            raise NotFound(f"Parameter '{name}' not found for element {element_id}.")
        if name in element.read_only:
            raise ReadOnlyParameter(
                f"Parameter '{name}' for element {element_id} is read-only."
            )
        old = element.parameters[name]
        # Keep the stored type: integer parameters take rounded values
        try:
            if isinstance(old, bool) or old is None:
                new = value
            elif isinstance(old, int):
                new = int(round(float(value)))
            elif isinstance(old, float):
                new = float(value)
            else:
                new = value
        except (TypeError, ValueError):
            raise ElementCreationFailure(
                f"Parameter '{name}' for element {element_id} cannot take {value!r}."
            ) from None
        element.parameters[name] = new
        return old
