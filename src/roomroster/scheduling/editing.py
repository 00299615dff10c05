"""Manual single-cell edits on a generated grid.

Edits only honour room time windows. A person's own availability,
WFH days and consecutive cap guide generation but do not block a manual
placement; the validator reports such placements instead.
"""

from dataclasses import dataclass
from typing import Optional

from roomroster.domain.constraints import DenialReason
from roomroster.domain.models import Cell, RoomConstraints, ScheduleGrid
from roomroster.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ConstraintViolation:
    """An edit that was rejected before touching the grid.

    Attributes:
        cell: Target cell of the edit.
        person: Person the edit tried to place.
        message: Human-readable explanation.
        reason: Which constraint rejected it.
    """

    cell: Cell
    person: str
    message: str
    reason: DenialReason = DenialReason.ROOM_WINDOW

    def __str__(self) -> str:
        return f"[{self.reason.value}] {self.person} -> {self.cell}: {self.message}"


@dataclass
class EditResult:
    """Outcome of an edit.

    ``grid`` is the new grid when the edit was applied, or the untouched
    input grid when it was rejected.
    """

    grid: ScheduleGrid
    violation: Optional[ConstraintViolation] = None

    @property
    def applied(self) -> bool:
        return self.violation is None


def apply_cell_edit(
    grid: ScheduleGrid,
    cell: Cell,
    value: Optional[str],
    room_constraints: Optional[RoomConstraints] = None,
    source: Optional[Cell] = None,
) -> EditResult:
    """Assign, clear or move a person into a cell.

    Args:
        grid: Grid to edit; it is never mutated.
        cell: Target cell.
        value: Person to place, or None/"" to clear the target.
        room_constraints: Room windows the target must respect.
        source: For a move, the cell the person is dragged from. It is
            cleared in the same update, but only when it still holds that
            person and differs from the target.

    Returns:
        EditResult with the new grid, or the original grid and a violation.

    Raises:
        UnknownCellError: If ``cell`` or ``source`` is outside the grid's shape.
    """
    shape = grid.shape
    shape.require(cell)
    if source is not None:
        shape.require(source)

    person = value or None
    room_constraints = room_constraints or RoomConstraints()

    if person is not None and not room_constraints.allows_cell(cell):
        violation = ConstraintViolation(
            cell=cell,
            person=person,
            message=f"{cell.room} is not available on {cell.day} {cell.slot}",
        )
        logger.info("Rejected edit: %s", violation)
        return EditResult(grid=grid, violation=violation)

    updates: dict[Cell, Optional[str]] = {cell: person}
    if (
        source is not None
        and source != cell
        and person is not None
        and grid[source] == person
    ):
        updates[source] = None

    return EditResult(grid=grid.with_updates(updates))


def move_person(
    grid: ScheduleGrid,
    source: Cell,
    target: Cell,
    room_constraints: Optional[RoomConstraints] = None,
) -> EditResult:
    """Move whoever occupies ``source`` into ``target``.

    Moving from an empty cell changes nothing.
    """
    person = grid[source]
    grid.shape.require(target)
    if person is None:
        return EditResult(grid=grid)
    return apply_cell_edit(grid, target, person, room_constraints, source=source)


def clear_cell(grid: ScheduleGrid, cell: Cell) -> ScheduleGrid:
    """Return a grid with one cell emptied."""
    return grid.with_cell(cell, None)
