"""Greedy roster generator.

This module fills a weekly grid in one deterministic pass:
1. Walk days, then slots, then rooms in calendar order
2. Collect eligible people, scanning from a rotating cursor
3. Pick the lowest fairness score (total load first, room variety second)
4. Record the pick and move the cursor to the chosen person

There is no backtracking. A cell nobody can take is left empty.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from roomroster import config
from roomroster.domain.constraints import AssignmentChecker, DayOccupancy
from roomroster.domain.models import (
    Cell,
    FairnessCounters,
    RoomConstraints,
    RuleSet,
    ScheduleGrid,
)
from roomroster.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class GenerationResult:
    """Output of one generation pass.

    Attributes:
        grid: The completed grid (every cell present, some possibly empty).
        counters: Fairness counters maintained during the pass.
        next_cursor: Cursor to pass into the next run for continued rotation.
        unfilled: Cells no eligible person could take, in generation order.
    """

    grid: ScheduleGrid
    counters: FairnessCounters
    next_cursor: int
    unfilled: list[Cell] = field(default_factory=list)

    @property
    def filled_count(self) -> int:
        return self.grid.filled_count

    @property
    def is_empty(self) -> bool:
        """True when nothing could be assigned; usually a rule configuration problem."""
        return self.grid.is_empty()


class RosterGenerator:
    """Deterministic greedy generator for weekly room rosters.

    Candidates for each cell are scanned starting from a round-robin
    cursor so the same person does not win every tie. Among eligible
    candidates the one with the lowest ``total * weight + per_room[room]``
    wins; ties go to whoever the scan reached first.

    Example:
        >>> generator = RosterGenerator()
        >>> result = generator.generate(people, rule_set, room_constraints)
        >>> result.grid.get("Mon", "AM", "Counselling Room A")
        'Dominic Yeo'
    """

    def __init__(self, total_weight: int = config.TOTAL_ASSIGNMENT_WEIGHT):
        if total_weight <= 0:
            raise ValueError("total_weight must be > 0")
        self.total_weight = total_weight

    def generate(
        self,
        people: Sequence[str],
        rule_set: RuleSet,
        room_constraints: Optional[RoomConstraints] = None,
        start_cursor: int = 0,
    ) -> GenerationResult:
        """Generate a complete grid from scratch.

        Args:
            people: Ordered person list; order is the default scan order.
            rule_set: Availability rules (people without one are fully available).
            room_constraints: Optional per-room time windows.
            start_cursor: Index into ``people`` where the first scan starts.

        Returns:
            GenerationResult with the grid, counters and next cursor.
        """
        people = list(people)
        if len(set(people)) != len(people):
            raise ValueError("Person list contains duplicate names")

        shape = rule_set.shape
        checker = AssignmentChecker(rule_set, room_constraints)
        counters = FairnessCounters.zero(people, shape.rooms)
        cells: dict[Cell, Optional[str]] = {cell: None for cell in shape.cells()}
        unfilled: list[Cell] = []

        cursor = start_cursor % len(people) if people else 0

        for day in shape.days:
            # Occupancy only spans the current day
            occupancy = DayOccupancy()

            for slot in shape.slots:
                for room in shape.rooms:
                    cell = Cell(day, slot, room)
                    eligible = self._eligible_candidates(people, cursor, cell, checker, occupancy)

                    if not eligible:
                        unfilled.append(cell)
                        logger.debug("No eligible person for %s", cell)
                        continue

                    index, person = self._select(eligible, room, counters)

                    cells[cell] = person
                    counters.record(person, room)
                    occupancy.mark(person, slot)
                    cursor = index

        grid = ScheduleGrid(shape=shape, cells=cells)

        if people and grid.is_empty() and shape.cell_count:
            logger.warning(
                "Generated roster is empty; check availability and WFH rules for %d people",
                len(people),
            )
        logger.info(
            "Generated roster: %d/%d cells filled, next cursor %d",
            grid.filled_count,
            shape.cell_count,
            cursor,
        )

        return GenerationResult(
            grid=grid,
            counters=counters,
            next_cursor=cursor,
            unfilled=unfilled,
        )

    def _eligible_candidates(
        self,
        people: list[str],
        cursor: int,
        cell: Cell,
        checker: AssignmentChecker,
        occupancy: DayOccupancy,
    ) -> list[tuple[int, str]]:
        """People allowed to take the cell, in scan order from the cursor.

        Each person is visited exactly once, wrapping around the list.
        """
        eligible = []
        for offset in range(len(people)):
            index = (cursor + offset) % len(people)
            person = people[index]
            if checker.can_assign(person, cell, occupancy):
                eligible.append((index, person))
        return eligible

    def _select(
        self,
        eligible: list[tuple[int, str]],
        room: str,
        counters: FairnessCounters,
    ) -> tuple[int, str]:
        """Pick the lowest score; the earliest in scan order wins ties."""
        best = eligible[0]
        best_score = self.score(best[1], room, counters)

        for candidate in eligible[1:]:
            score = self.score(candidate[1], room, counters)
            if score < best_score:
                best_score = score
                best = candidate

        return best

    def score(self, person: str, room: str, counters: FairnessCounters) -> int:
        """Fairness score for giving a person this room. Lower is better."""
        return counters.total(person) * self.total_weight + counters.room_count(person, room)


def generate(
    people: Sequence[str],
    rule_set: RuleSet,
    room_constraints: Optional[RoomConstraints] = None,
    start_cursor: int = 0,
) -> GenerationResult:
    """Generate a roster with the default weighting."""
    return RosterGenerator().generate(people, rule_set, room_constraints, start_cursor)
