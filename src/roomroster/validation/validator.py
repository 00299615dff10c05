"""Validation module for verifying roster correctness.

Generated grids satisfy every hard constraint by construction. Manually
edited grids only have to respect room time windows, so this module is
where the remaining rules (WFH, availability, consecutive cap, double
booking) are reported after an edit.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from roomroster.domain.models import Cell, RoomConstraints, RuleSet, ScheduleGrid


class ValidationErrorType(Enum):
    """Types of validation errors."""

    ROOM_WINDOW = "room_window"
    WFH_DAY = "wfh_day"
    DAY_UNAVAILABLE = "day_unavailable"
    SLOT_UNAVAILABLE = "slot_unavailable"
    CONSECUTIVE_CAP_EXCEEDED = "consecutive_cap_exceeded"
    DOUBLE_BOOKED = "double_booked"
    UNKNOWN_PERSON = "unknown_person"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    person: Optional[str] = None
    cell: Optional[Cell] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.person:
            parts.append(f"{self.person}:")
        parts.append(self.message)
        if self.cell is not None:
            parts.append(f"({self.cell})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a roster."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def errors_of_type(self, error_type: ValidationErrorType) -> list[ValidationError]:
        return [e for e in self.errors if e.error_type == error_type]


class RosterValidator:
    """Validates rosters against all rules.

    Example:
        >>> validator = RosterValidator()
        >>> result = validator.validate(grid, rule_set, room_constraints)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def validate(
        self,
        grid: ScheduleGrid,
        rule_set: RuleSet,
        room_constraints: Optional[RoomConstraints] = None,
        people: Optional[list[str]] = None,
    ) -> ValidationResult:
        """Validate a complete grid.

        Args:
            grid: The grid to validate.
            rule_set: Availability rules.
            room_constraints: Room time windows, if any.
            people: Configured people. Defaults to the people in ``rule_set``;
                anyone else found in the grid is reported as unknown.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)
        room_constraints = room_constraints or RoomConstraints()
        known_people = set(people if people is not None else rule_set.people)

        for cell, person in grid.assigned():
            if person not in known_people:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.UNKNOWN_PERSON,
                        message=f"Unknown person {person!r}",
                        person=person,
                        cell=cell,
                    )
                )
                continue

            self._validate_cell(cell, person, rule_set, room_constraints, result)

        self._validate_double_booking(grid, result)
        self._validate_consecutive_cap(grid, rule_set, known_people, result)

        if grid.is_empty() and grid.shape.cell_count:
            result.add_warning("Roster is empty; check availability and WFH rules")

        return result

    def _validate_cell(
        self,
        cell: Cell,
        person: str,
        rule_set: RuleSet,
        room_constraints: RoomConstraints,
        result: ValidationResult,
    ) -> None:
        """Validate a single assignment."""
        if not room_constraints.allows_cell(cell):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.ROOM_WINDOW,
                    message=f"{cell.room} is not available on {cell.day} {cell.slot}",
                    person=person,
                    cell=cell,
                )
            )

        rule = rule_set.rule_for(person)

        if rule.is_wfh(cell.day):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.WFH_DAY,
                    message=f"Works from home on {cell.day}",
                    person=person,
                    cell=cell,
                )
            )
        elif cell.day not in rule.available_days:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.DAY_UNAVAILABLE,
                    message=f"Not available on {cell.day}",
                    person=person,
                    cell=cell,
                )
            )

        if cell.slot not in rule.available_slots:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.SLOT_UNAVAILABLE,
                    message=f"Not available in the {cell.slot} slot",
                    person=person,
                    cell=cell,
                )
            )

    def _validate_double_booking(self, grid: ScheduleGrid, result: ValidationResult) -> None:
        """Check no one occupies two rooms in the same (day, slot)."""
        for day in grid.shape.days:
            for slot in grid.shape.slots:
                seen: dict[str, str] = {}
                for room in grid.shape.rooms:
                    person = grid.get(day, slot, room)
                    if person is None:
                        continue
                    if person in seen:
                        result.add_error(
                            ValidationError(
                                error_type=ValidationErrorType.DOUBLE_BOOKED,
                                message=f"Also in {seen[person]} during {day} {slot}",
                                person=person,
                                cell=Cell(day, slot, room),
                                details={"rooms": [seen[person], room]},
                            )
                        )
                    else:
                        seen[person] = room

    def _validate_consecutive_cap(
        self,
        grid: ScheduleGrid,
        rule_set: RuleSet,
        known_people: set[str],
        result: ValidationResult,
    ) -> None:
        """Check people capped at one slot per day don't work both."""
        first_slot, second_slot = grid.shape.slots
        for day in grid.shape.days:
            first = set(grid.people_in_slot(day, first_slot))
            second = set(grid.people_in_slot(day, second_slot))
            for person in sorted(first & second):
                if person not in known_people:
                    continue
                if rule_set.rule_for(person).max_consecutive_per_day == 1:
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.CONSECUTIVE_CAP_EXCEEDED,
                            message=f"Works both {first_slot} and {second_slot} on {day} (cap is 1)",
                            person=person,
                            details={"day": day},
                        )
                    )
