"""Domain models and business rules for roster generation."""

from roomroster.domain.constraints import (
    AssignmentChecker,
    DayOccupancy,
    DenialReason,
    can_assign,
    check_assignment,
)
from roomroster.domain.models import (
    AvailabilityRule,
    CalendarShape,
    Cell,
    FairnessCounters,
    FairnessMetrics,
    PersonCounts,
    RoomConstraints,
    RoomTimeWindow,
    RuleSet,
    ScheduleGrid,
)

__all__ = [
    # Models
    "AvailabilityRule",
    "CalendarShape",
    "Cell",
    "FairnessCounters",
    "FairnessMetrics",
    "PersonCounts",
    "RoomConstraints",
    "RoomTimeWindow",
    "RuleSet",
    "ScheduleGrid",
    # Constraints
    "AssignmentChecker",
    "DayOccupancy",
    "DenialReason",
    "can_assign",
    "check_assignment",
]
