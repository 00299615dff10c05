"""Roster generation, fairness bookkeeping and manual edits."""

from roomroster.scheduling.editing import (
    ConstraintViolation,
    EditResult,
    apply_cell_edit,
    clear_cell,
    move_person,
)
from roomroster.scheduling.fairness import compute_fairness, counters_match, fairness_metrics
from roomroster.scheduling.roster_generator import (
    GenerationResult,
    RosterGenerator,
    generate,
)
from roomroster.scheduling.scheduler import RosterScheduler

__all__ = [
    # Generation
    "GenerationResult",
    "RosterGenerator",
    "RosterScheduler",
    "generate",
    # Fairness
    "compute_fairness",
    "counters_match",
    "fairness_metrics",
    # Editing
    "ConstraintViolation",
    "EditResult",
    "apply_cell_edit",
    "clear_cell",
    "move_person",
]
