"""Main roster scheduling interface.

This module provides the high-level RosterScheduler that runs generation
for a roster configuration, optionally continuing the round-robin
rotation from one run to the next, and reports statistics.
"""

from typing import Optional

from roomroster.domain.models import FairnessMetrics
from roomroster.loader import RosterConfig
from roomroster.scheduling.roster_generator import GenerationResult, RosterGenerator


class RosterScheduler:
    """High-level scheduler for weekly room rosters.

    Each call to ``generate_roster`` replaces the previous grid wholesale.
    With ``continue_rotation`` the cursor returned by one run becomes the
    starting cursor of the next; otherwise every run starts at the first
    person in the list.

    Example:
        >>> scheduler = RosterScheduler(default_config())
        >>> result = scheduler.generate_roster()
        >>> result.grid.filled_count
        40
    """

    def __init__(
        self,
        roster_config: RosterConfig,
        generator: Optional[RosterGenerator] = None,
        continue_rotation: bool = False,
    ):
        self.roster_config = roster_config
        self.generator = generator or RosterGenerator()
        self.continue_rotation = continue_rotation
        self.cursor = 0

    def generate_roster(self, start_cursor: Optional[int] = None) -> GenerationResult:
        """Generate a fresh grid.

        Args:
            start_cursor: Explicit starting cursor. Overrides the carried-over
                cursor when given.
        """
        if start_cursor is None:
            start_cursor = self.cursor if self.continue_rotation else 0

        result = self.generator.generate(
            self.roster_config.people,
            self.roster_config.rule_set,
            self.roster_config.room_constraints,
            start_cursor=start_cursor,
        )

        if self.continue_rotation:
            self.cursor = result.next_cursor

        return result

    def generate_roster_with_stats(
        self,
        start_cursor: Optional[int] = None,
    ) -> tuple[GenerationResult, dict]:
        """Generate a roster and return statistics.

        Returns:
            Tuple of (result, stats_dict).
        """
        result = self.generate_roster(start_cursor)
        return result, self._calculate_stats(result)

    def _calculate_stats(self, result: GenerationResult) -> dict:
        """Calculate roster statistics."""
        shape = self.roster_config.shape
        metrics = FairnessMetrics.calculate(result.counters)

        unassigned_people = [
            person for person in self.roster_config.people
            if result.counters.total(person) == 0
        ]

        filled_by_day = {
            day: sum(
                1 for cell, person in result.grid.items()
                if cell.day == day and person is not None
            )
            for day in shape.days
        }

        return {
            "total_cells": shape.cell_count,
            "filled_cells": result.filled_count,
            "unfilled_cells": len(result.unfilled),
            "unassigned_people": unassigned_people,
            "filled_by_day": filled_by_day,
            "next_cursor": result.next_cursor,
            "fairness_metrics": metrics,
        }
