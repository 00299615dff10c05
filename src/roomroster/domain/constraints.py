"""Hard constraints that decide whether a person may take a cell.

Checks run in a fixed precedence and the first failing one wins:

1. Room time window (person independent, also gates manual edits)
2. Work-from-home day (overrides general availability)
3. General day and slot availability
4. Per-day consecutive slot cap
5. Same-slot exclusivity (one room per person per slot)

None of these are scored; a candidate either passes all of them or is
not considered for the cell.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from roomroster.domain.models import (
    AvailabilityRule,
    CalendarShape,
    Cell,
    RoomConstraints,
    RuleSet,
)


class DenialReason(Enum):
    """Why a person cannot take a cell."""

    ROOM_WINDOW = "room_window"
    WFH_DAY = "wfh_day"
    UNAVAILABLE = "unavailable"
    CONSECUTIVE_CAP = "consecutive_cap"
    SAME_SLOT = "same_slot"


@dataclass
class DayOccupancy:
    """Which slots each person already occupies on the current day.

    Only meaningful within a single day; the generator starts a fresh one
    for every day it visits.
    """

    slots_by_person: dict[str, set[str]] = field(default_factory=dict)

    def occupies(self, person: str, slot: str) -> bool:
        return slot in self.slots_by_person.get(person, ())

    def mark(self, person: str, slot: str) -> None:
        self.slots_by_person.setdefault(person, set()).add(slot)


def check_assignment(
    person: str,
    rule: AvailabilityRule,
    cell: Cell,
    occupancy: DayOccupancy,
    room_constraints: RoomConstraints,
    shape: CalendarShape,
) -> Optional[DenialReason]:
    """Return the first constraint an assignment breaks, or None if allowed."""
    if not room_constraints.allows_cell(cell):
        return DenialReason.ROOM_WINDOW

    # WFH wins even when the day is also listed as available
    if rule.is_wfh(cell.day):
        return DenialReason.WFH_DAY

    if not rule.is_available(cell.day, cell.slot):
        return DenialReason.UNAVAILABLE

    if rule.max_consecutive_per_day == 1 and occupancy.occupies(
        person, shape.other_slot(cell.slot)
    ):
        return DenialReason.CONSECUTIVE_CAP

    if occupancy.occupies(person, cell.slot):
        return DenialReason.SAME_SLOT

    return None


def can_assign(
    person: str,
    rule: AvailabilityRule,
    cell: Cell,
    occupancy: DayOccupancy,
    room_constraints: RoomConstraints,
    shape: CalendarShape,
) -> bool:
    """Boolean form of ``check_assignment``."""
    return check_assignment(person, rule, cell, occupancy, room_constraints, shape) is None


class AssignmentChecker:
    """Binds the hard constraints to one rule set and set of room windows.

    Example:
        >>> checker = AssignmentChecker(rule_set, room_constraints)
        >>> occupancy = DayOccupancy()
        >>> checker.can_assign("Kirsty Png", Cell("Mon", "AM", "Counselling Room A"), occupancy)
        True
    """

    def __init__(self, rule_set: RuleSet, room_constraints: Optional[RoomConstraints] = None):
        self.rule_set = rule_set
        self.room_constraints = room_constraints or RoomConstraints()

    @property
    def shape(self) -> CalendarShape:
        return self.rule_set.shape

    def check(
        self,
        person: str,
        cell: Cell,
        occupancy: DayOccupancy,
    ) -> Optional[DenialReason]:
        return check_assignment(
            person,
            self.rule_set.rule_for(person),
            cell,
            occupancy,
            self.room_constraints,
            self.shape,
        )

    def can_assign(self, person: str, cell: Cell, occupancy: DayOccupancy) -> bool:
        return self.check(person, cell, occupancy) is None

    def room_allows(self, cell: Cell) -> bool:
        """Person-independent room window check."""
        return self.room_constraints.allows_cell(cell)
