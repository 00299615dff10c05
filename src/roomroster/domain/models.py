"""Domain models for the room roster engine.

This module contains the core data structures used throughout the roster
system: the calendar shape, per-person availability rules, per-room time
windows, the schedule grid and the fairness counters derived from it.

Blob conversion lives next to each model. Blobs are the plain nested
mappings that storage and transport layers hand to the engine; they may be
partial or stale, and loading them never raises for missing keys.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from roomroster import config
from roomroster.errors import UnknownCellError
from roomroster.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Cell:
    """One assignable (day, slot, room) address in the schedule."""

    day: str
    slot: str
    room: str

    def __str__(self) -> str:
        return f"{self.day} {self.slot} / {self.room}"


@dataclass(frozen=True)
class CalendarShape:
    """Ordered days, slots and rooms that define every valid cell.

    Attributes:
        days: Days in generation order.
        slots: Exactly two slots per day, in order (e.g. AM, PM).
        rooms: Rooms in configured iteration order.
    """

    days: tuple[str, ...] = config.DEFAULT_DAYS
    slots: tuple[str, ...] = config.DEFAULT_SLOTS
    rooms: tuple[str, ...] = config.DEFAULT_ROOMS

    def __post_init__(self):
        object.__setattr__(self, "days", tuple(self.days))
        object.__setattr__(self, "slots", tuple(self.slots))
        object.__setattr__(self, "rooms", tuple(self.rooms))

        if len(self.slots) != 2:
            raise ValueError(
                f"Calendar shape needs exactly two slots per day, got {len(self.slots)}"
            )
        for label, values in (("day", self.days), ("slot", self.slots), ("room", self.rooms)):
            if len(set(values)) != len(values):
                raise ValueError(f"Duplicate {label} names in calendar shape: {values}")

    @property
    def cell_count(self) -> int:
        """Total number of cells in the grid."""
        return len(self.days) * len(self.slots) * len(self.rooms)

    def cells(self) -> list[Cell]:
        """All cells in generation order: day, then slot, then room."""
        return [
            Cell(day, slot, room)
            for day in self.days
            for slot in self.slots
            for room in self.rooms
        ]

    def contains(self, cell: Cell) -> bool:
        """Check if a cell address belongs to this shape."""
        return (
            cell.day in self.days
            and cell.slot in self.slots
            and cell.room in self.rooms
        )

    def require(self, cell: Cell) -> Cell:
        """Return the cell, raising UnknownCellError if it is outside the shape."""
        if not isinstance(cell, Cell) or not self.contains(cell):
            raise UnknownCellError(cell)
        return cell

    def other_slot(self, slot: str) -> str:
        """The other slot of the same day."""
        first, second = self.slots
        if slot == first:
            return second
        if slot == second:
            return first
        raise ValueError(f"Unknown slot: {slot!r}")


@dataclass(frozen=True)
class AvailabilityRule:
    """Availability constraints for one person.

    ``available_days`` and ``wfh_days`` may overlap in stored data. A WFH
    day always wins over general availability.

    Attributes:
        available_days: Days the person can work from a room.
        wfh_days: Days the person works from home (never assigned a room).
        available_slots: Slots the person can work on an available day.
        max_consecutive_per_day: 1 (one slot per day) or 2 (both slots).
    """

    available_days: frozenset[str] = frozenset()
    wfh_days: frozenset[str] = frozenset()
    available_slots: frozenset[str] = frozenset()
    max_consecutive_per_day: int = config.DEFAULT_MAX_CONSECUTIVE_PER_DAY

    def __post_init__(self):
        object.__setattr__(self, "available_days", frozenset(self.available_days))
        object.__setattr__(self, "wfh_days", frozenset(self.wfh_days))
        object.__setattr__(self, "available_slots", frozenset(self.available_slots))
        if self.max_consecutive_per_day not in config.ALLOWED_MAX_CONSECUTIVE:
            raise ValueError(
                f"max_consecutive_per_day must be 1 or 2, got {self.max_consecutive_per_day!r}"
            )

    @classmethod
    def full(cls, shape: CalendarShape) -> "AvailabilityRule":
        """Rule for someone available every day and slot, no WFH, both slots allowed."""
        return cls(
            available_days=frozenset(shape.days),
            wfh_days=frozenset(),
            available_slots=frozenset(shape.slots),
            max_consecutive_per_day=2,
        )

    def is_wfh(self, day: str) -> bool:
        return day in self.wfh_days

    def is_available(self, day: str, slot: str) -> bool:
        """General availability only; does not consider WFH."""
        return day in self.available_days and slot in self.available_slots

    def to_blob(self, shape: CalendarShape) -> dict[str, Any]:
        """Convert to the stored rule shape, lists in calendar order."""
        return {
            "availableDays": [d for d in shape.days if d in self.available_days],
            "wfhDays": [d for d in shape.days if d in self.wfh_days],
            "availableSlots": [s for s in shape.slots if s in self.available_slots],
            "maxConsecutivePerDay": self.max_consecutive_per_day,
        }

    @classmethod
    def from_blob(
        cls,
        blob: Mapping[str, Any],
        shape: CalendarShape,
        person: str = "",
    ) -> "AvailabilityRule":
        """Build a rule from a stored blob, defaulting anything missing.

        Older stored rules may lack ``wfhDays``, ``availableSlots`` or the
        consecutive cap; those fall back to no WFH, all slots and a cap of 2.
        """
        available_days = _known_values(
            blob.get("availableDays"), shape.days, shape.days, "day", person
        )
        wfh_days = _known_values(blob.get("wfhDays"), (), shape.days, "WFH day", person)
        available_slots = _known_values(
            blob.get("availableSlots"), shape.slots, shape.slots, "slot", person
        )

        max_consecutive = blob.get("maxConsecutivePerDay")
        if max_consecutive is None:
            # Older blobs spell the field out in full
            max_consecutive = blob.get("maxConsecutiveSlotsPerDay")
        if max_consecutive is None:
            max_consecutive = config.DEFAULT_MAX_CONSECUTIVE_PER_DAY
        elif isinstance(max_consecutive, bool) or max_consecutive not in config.ALLOWED_MAX_CONSECUTIVE:
            logger.warning(
                "Invalid max consecutive slots %r for %s, using %d",
                max_consecutive,
                person or "person",
                config.DEFAULT_MAX_CONSECUTIVE_PER_DAY,
            )
            max_consecutive = config.DEFAULT_MAX_CONSECUTIVE_PER_DAY

        return cls(
            available_days=available_days,
            wfh_days=wfh_days,
            available_slots=available_slots,
            max_consecutive_per_day=int(max_consecutive),
        )


def _known_values(
    raw: Any,
    default: Iterable[str],
    known: tuple[str, ...],
    label: str,
    person: str,
) -> frozenset[str]:
    """Filter a stored list down to names the calendar knows about."""
    if raw is None:
        return frozenset(default)
    if not isinstance(raw, (list, tuple, set, frozenset)):
        logger.warning("Expected a list of %ss for %s, got %r; using default", label, person, raw)
        return frozenset(default)

    values = set()
    for value in raw:
        if value in known:
            values.add(value)
        else:
            logger.warning("Dropping unknown %s %r for %s", label, value, person)
    return frozenset(values)


@dataclass(frozen=True)
class RuleSet:
    """Availability rules for every person, bound to a calendar shape.

    People without an explicit rule are treated as fully available.
    """

    shape: CalendarShape
    rules: dict[str, AvailabilityRule] = field(default_factory=dict)

    @classmethod
    def defaults(cls, people: Iterable[str], shape: CalendarShape) -> "RuleSet":
        """Fully available rules for everybody."""
        return cls(shape=shape, rules={p: AvailabilityRule.full(shape) for p in people})

    @property
    def people(self) -> list[str]:
        return list(self.rules)

    def rule_for(self, person: str) -> AvailabilityRule:
        """Get the rule for a person, defaulting to full availability."""
        rule = self.rules.get(person)
        if rule is None:
            return AvailabilityRule.full(self.shape)
        return rule

    def with_rule(self, person: str, rule: AvailabilityRule) -> "RuleSet":
        """Return a new rule set with one person's rule replaced."""
        rules = dict(self.rules)
        rules[person] = rule
        return RuleSet(shape=self.shape, rules=rules)

    def to_blob(self) -> dict[str, dict[str, Any]]:
        return {person: rule.to_blob(self.shape) for person, rule in self.rules.items()}

    @classmethod
    def from_blob(
        cls,
        blob: Optional[Mapping[str, Any]],
        people: Iterable[str],
        shape: CalendarShape,
    ) -> "RuleSet":
        """Load rules for the configured people from a possibly stale blob.

        Every configured person gets a rule. People missing from the blob,
        or stored in an unreadable form, get the fully available default.
        Entries for people no longer configured are dropped.
        """
        if blob is None:
            blob = {}
        elif not isinstance(blob, Mapping):
            logger.warning("Rules blob is not a mapping (%s); using defaults", type(blob).__name__)
            blob = {}

        people = list(people)
        rules = {}
        for person in people:
            raw = blob.get(person)
            if raw is None:
                rules[person] = AvailabilityRule.full(shape)
            elif not isinstance(raw, Mapping):
                logger.warning("Unreadable rule for %s; using default availability", person)
                rules[person] = AvailabilityRule.full(shape)
            else:
                rules[person] = AvailabilityRule.from_blob(raw, shape, person)

        stale = [p for p in blob if p not in rules]
        if stale:
            logger.info("Ignoring rules for %d unconfigured people: %s", len(stale), ", ".join(map(str, stale)))

        return cls(shape=shape, rules=rules)


@dataclass(frozen=True)
class RoomTimeWindow:
    """Whitelist of (day, slot) pairs during which a room may be used at all.

    Attributes:
        room: The restricted room.
        allowed: Allowed (day, slot) pairs.
    """

    room: str
    allowed: frozenset[tuple[str, str]] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "allowed", frozenset(tuple(p) for p in self.allowed))

    def allows(self, day: str, slot: str) -> bool:
        return (day, slot) in self.allowed


@dataclass(frozen=True)
class RoomConstraints:
    """Optional time windows per room. Rooms without a window are always allowed."""

    windows: dict[str, RoomTimeWindow] = field(default_factory=dict)

    def allows(self, room: str, day: str, slot: str) -> bool:
        """Check whether a room may be used in a (day, slot)."""
        window = self.windows.get(room)
        if window is None:
            return True
        return window.allows(day, slot)

    def allows_cell(self, cell: Cell) -> bool:
        return self.allows(cell.room, cell.day, cell.slot)

    def window_for(self, room: str) -> Optional[RoomTimeWindow]:
        return self.windows.get(room)

    def restrict(self, room: str, allowed: Iterable[tuple[str, str]]) -> "RoomConstraints":
        """Return new constraints with a window set for one room."""
        windows = dict(self.windows)
        windows[room] = RoomTimeWindow(room=room, allowed=frozenset(allowed))
        return RoomConstraints(windows=windows)

    def to_blob(self, shape: CalendarShape) -> dict[str, list[list[str]]]:
        blob = {}
        for room, window in self.windows.items():
            blob[room] = [
                [day, slot]
                for day in shape.days
                for slot in shape.slots
                if window.allows(day, slot)
            ]
        return blob

    @classmethod
    def from_blob(
        cls,
        blob: Optional[Mapping[str, Any]],
        shape: CalendarShape,
    ) -> "RoomConstraints":
        """Load room windows, dropping rooms and pairs the calendar doesn't know."""
        if not blob:
            return cls()
        if not isinstance(blob, Mapping):
            logger.warning("Room windows blob is not a mapping (%s); using no windows", type(blob).__name__)
            return cls()

        windows = {}
        for room, pairs in blob.items():
            if room not in shape.rooms:
                logger.warning("Ignoring time window for unknown room %r", room)
                continue
            if not isinstance(pairs, (list, tuple)):
                logger.warning("Ignoring time window for %s: expected a list, got %r", room, pairs)
                continue
            allowed = set()
            for pair in pairs:
                if (
                    isinstance(pair, (list, tuple))
                    and len(pair) == 2
                    and pair[0] in shape.days
                    and pair[1] in shape.slots
                ):
                    allowed.add((pair[0], pair[1]))
                else:
                    logger.warning("Ignoring invalid time window entry %r for %s", pair, room)
            windows[room] = RoomTimeWindow(room=room, allowed=frozenset(allowed))
        return cls(windows=windows)


@dataclass(frozen=True)
class ScheduleGrid:
    """Assignment state: one optional person per (day, slot, room) cell.

    A grid always holds every cell of its shape exactly once. Use
    ``empty``, ``normalize`` or ``from_blob`` to build one; edits return a
    new grid instead of mutating this one.

    Attributes:
        shape: The calendar shape the grid covers.
        cells: Mapping from every cell to a person, or None when empty.
    """

    shape: CalendarShape
    cells: dict[Cell, Optional[str]]

    def __post_init__(self):
        if len(self.cells) != self.shape.cell_count or any(
            not self.shape.contains(cell) for cell in self.cells
        ):
            raise ValueError(
                "Grid cells must match the calendar shape exactly; use ScheduleGrid.normalize"
            )

    __hash__ = None

    @classmethod
    def empty(cls, shape: CalendarShape) -> "ScheduleGrid":
        return cls(shape=shape, cells={cell: None for cell in shape.cells()})

    @classmethod
    def normalize(
        cls,
        shape: CalendarShape,
        source: Union["ScheduleGrid", Mapping[Cell, Optional[str]], None] = None,
    ) -> "ScheduleGrid":
        """Fit possibly partial or stale cells onto the current shape.

        Values at matching cells carry over; every other cell is empty.
        Cells outside the shape are dropped. Normalizing a normalized grid
        returns an equal grid.
        """
        if isinstance(source, ScheduleGrid):
            source = source.cells
        source = source or {}
        return cls(
            shape=shape,
            cells={cell: _person_or_none(source.get(cell)) for cell in shape.cells()},
        )

    @classmethod
    def from_blob(
        cls,
        shape: CalendarShape,
        blob: Optional[Mapping[str, Any]],
    ) -> "ScheduleGrid":
        """Load a nested Day -> Slot -> Room -> person blob.

        Missing days, slots or rooms become empty cells and entries for
        rooms that are no longer configured are dropped.
        """
        if not isinstance(blob, Mapping):
            if blob is not None:
                logger.warning("Grid blob is not a mapping (%s); starting empty", type(blob).__name__)
            return cls.empty(shape)

        cells = {}
        for cell in shape.cells():
            day_blob = blob.get(cell.day)
            slot_blob = day_blob.get(cell.slot) if isinstance(day_blob, Mapping) else None
            value = slot_blob.get(cell.room) if isinstance(slot_blob, Mapping) else None
            cells[cell] = _person_or_none(value)
        return cls(shape=shape, cells=cells)

    def to_blob(self) -> dict[str, dict[str, dict[str, str]]]:
        """Convert to the stored nested shape, empty cells as ""."""
        blob: dict[str, dict[str, dict[str, str]]] = {}
        for cell in self.shape.cells():
            blob.setdefault(cell.day, {}).setdefault(cell.slot, {})[cell.room] = (
                self.cells[cell] or ""
            )
        return blob

    def __getitem__(self, cell: Cell) -> Optional[str]:
        return self.cells[self.shape.require(cell)]

    def get(self, day: str, slot: str, room: str) -> Optional[str]:
        return self[Cell(day, slot, room)]

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.shape.cells())

    def items(self) -> list[tuple[Cell, Optional[str]]]:
        """Cells and values in generation order."""
        return [(cell, self.cells[cell]) for cell in self.shape.cells()]

    def assigned(self) -> list[tuple[Cell, str]]:
        """Only the filled cells, in generation order."""
        return [(cell, person) for cell, person in self.items() if person is not None]

    def people_in_slot(self, day: str, slot: str) -> list[str]:
        """People assigned to any room in a (day, slot)."""
        people = []
        for room in self.shape.rooms:
            person = self.cells[Cell(day, slot, room)]
            if person is not None:
                people.append(person)
        return people

    def cells_for(self, person: str) -> list[Cell]:
        return [cell for cell, value in self.items() if value == person]

    @property
    def filled_count(self) -> int:
        return sum(1 for value in self.cells.values() if value is not None)

    def is_empty(self) -> bool:
        return self.filled_count == 0

    def with_updates(self, updates: Mapping[Cell, Optional[str]]) -> "ScheduleGrid":
        """Return a new grid with several cells changed as one update.

        The cell mapping is shallow-copied; person values are shared.
        """
        for cell in updates:
            self.shape.require(cell)
        cells = dict(self.cells)
        for cell, value in updates.items():
            cells[cell] = _person_or_none(value)
        return ScheduleGrid(shape=self.shape, cells=cells)

    def with_cell(self, cell: Cell, value: Optional[str]) -> "ScheduleGrid":
        return self.with_updates({cell: value})


def _person_or_none(value: Any) -> Optional[str]:
    """Stored grids use "" for empty cells; the engine uses None."""
    if value is None or value == "":
        return None
    return str(value)


@dataclass
class PersonCounts:
    """Running assignment counts for one person.

    Attributes:
        total: Number of cells assigned overall.
        per_room: Number of cells assigned per room.
    """

    total: int = 0
    per_room: dict[str, int] = field(default_factory=dict)

    def room_count(self, room: str) -> int:
        return self.per_room.get(room, 0)


@dataclass
class FairnessCounters:
    """Per-person assignment totals and per-room counts."""

    counts: dict[str, PersonCounts] = field(default_factory=dict)

    @classmethod
    def zero(cls, people: Iterable[str], rooms: Iterable[str]) -> "FairnessCounters":
        rooms = list(rooms)
        return cls(
            counts={
                person: PersonCounts(total=0, per_room={room: 0 for room in rooms})
                for person in people
            }
        )

    def for_person(self, person: str) -> PersonCounts:
        if person not in self.counts:
            self.counts[person] = PersonCounts()
        return self.counts[person]

    def record(self, person: str, room: str) -> None:
        """Count one more assignment of a person to a room."""
        counts = self.for_person(person)
        counts.total += 1
        counts.per_room[room] = counts.per_room.get(room, 0) + 1

    def total(self, person: str) -> int:
        counts = self.counts.get(person)
        return counts.total if counts else 0

    def room_count(self, person: str, room: str) -> int:
        counts = self.counts.get(person)
        return counts.room_count(room) if counts else 0

    def totals(self) -> dict[str, int]:
        return {person: counts.total for person, counts in self.counts.items()}

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {
            person: {"totalSlots": counts.total, "roomDistribution": dict(counts.per_room)}
            for person, counts in self.counts.items()
        }


@dataclass
class FairnessMetrics:
    """Summary statistics for how evenly work is spread.

    Attributes:
        totals: Assignments per person.
        average: Mean assignments per person.
        std_dev: Standard deviation of assignments.
        minimum: Fewest assignments given to any person.
        maximum: Most assignments given to any person.
        fairness_score: Overall score (0-100, higher is fairer).
    """

    totals: dict[str, int] = field(default_factory=dict)
    average: float = 0.0
    std_dev: float = 0.0
    minimum: int = 0
    maximum: int = 0
    fairness_score: float = 100.0

    @classmethod
    def calculate(cls, counters: FairnessCounters) -> "FairnessMetrics":
        """Calculate metrics from fairness counters."""
        totals = counters.totals()
        if not totals:
            return cls()

        values = list(totals.values())
        avg = sum(values) / len(values)
        variance = sum((v - avg) ** 2 for v in values) / len(values)
        std_dev = variance ** 0.5

        # 100 = perfectly even; two assignments of std dev scores 0
        max_acceptable_std_dev = 2.0
        score = max(0.0, 100.0 - (std_dev / max_acceptable_std_dev) * 100.0)

        return cls(
            totals=totals,
            average=avg,
            std_dev=std_dev,
            minimum=min(values),
            maximum=max(values),
            fairness_score=score,
        )
