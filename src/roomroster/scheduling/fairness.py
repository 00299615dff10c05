"""Fairness bookkeeping derived from a grid.

Counts are always recomputed from a full scan after a grid changes (a
generation run or a manual edit). Only the generator's own pass keeps
counters incrementally, and a recompute of its grid gives the same
numbers.
"""

from typing import Iterable, Optional

from roomroster.domain.models import FairnessCounters, FairnessMetrics, ScheduleGrid


def compute_fairness(
    grid: ScheduleGrid,
    people: Optional[Iterable[str]] = None,
) -> FairnessCounters:
    """Count assignments per person, overall and per room.

    Args:
        grid: Grid to scan.
        people: People to report even when unassigned. Anyone found in the
            grid but missing from this list is still counted.

    Returns:
        Fresh FairnessCounters.
    """
    counters = FairnessCounters.zero(people or (), grid.shape.rooms)
    for cell, person in grid.assigned():
        counters.record(person, cell.room)
    return counters


def fairness_metrics(
    grid: ScheduleGrid,
    people: Optional[Iterable[str]] = None,
) -> FairnessMetrics:
    """Summary statistics for a grid's workload spread."""
    return FairnessMetrics.calculate(compute_fairness(grid, people))


def counters_match(left: FairnessCounters, right: FairnessCounters) -> bool:
    """Compare counters, treating missing rooms and people as zero."""
    people = set(left.counts) | set(right.counts)
    for person in people:
        if left.total(person) != right.total(person):
            return False
        rooms = set()
        for counters in (left, right):
            if person in counters.counts:
                rooms |= set(counters.counts[person].per_room)
        for room in rooms:
            if left.room_count(person, room) != right.room_count(person, room):
                return False
    return True
