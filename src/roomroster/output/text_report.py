"""Plain-text roster output.

This module creates text reports showing:
- The weekly grid, one table per day
- Per-person totals and room distribution
- Cells left empty by generation
"""

from pathlib import Path
from typing import Optional, Union

from roomroster.domain.models import FairnessCounters, FairnessMetrics, ScheduleGrid
from roomroster.scheduling.fairness import compute_fairness


def abbreviate_room(room: str) -> str:
    """Shorten a room name for narrow columns ("Counselling Room A" -> "Room A")."""
    return room.replace("Counselling ", "")


class RosterReport:
    """Generates text reports for a roster grid.

    Example:
        >>> report = RosterReport()
        >>> print(report.generate_to_string(grid, people))
    """

    def __init__(self, column_width: int = 16):
        self.column_width = column_width

    def generate(
        self,
        grid: ScheduleGrid,
        people: list[str],
        output_path: Union[str, Path],
    ) -> str:
        """Generate the report and save it to a file.

        Returns:
            The generated text content.
        """
        content = self.generate_to_string(grid, people)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(
        self,
        grid: ScheduleGrid,
        people: list[str],
        counters: Optional[FairnessCounters] = None,
    ) -> str:
        """Generate the report and return it as a string.

        Counts are recomputed from the grid unless ``counters`` is given.
        """
        if counters is None:
            counters = compute_fairness(grid, people)

        lines = []
        lines.extend(self.grid_lines(grid))
        lines.append("")
        lines.extend(self.fairness_lines(grid, counters))
        lines.append("")
        lines.extend(self._unfilled_lines(grid))
        return "\n".join(lines) + "\n"

    def grid_lines(self, grid: ScheduleGrid) -> list[str]:
        """Weekly grid, rooms as columns and (day, slot) as rows."""
        width = self.column_width
        shape = grid.shape

        header = f"{'Day':<4} {'Slot':<4} " + " ".join(
            f"{abbreviate_room(room)[:width]:<{width}}" for room in shape.rooms
        )

        lines = ["=" * len(header), "WEEKLY ROSTER", "=" * len(header), header, "-" * len(header)]
        for day in shape.days:
            for slot in shape.slots:
                row = " ".join(
                    f"{(grid.get(day, slot, room) or '.')[:width]:<{width}}"
                    for room in shape.rooms
                )
                lines.append(f"{day:<4} {slot:<4} {row}")
            lines.append("-" * len(header))
        return lines

    def fairness_lines(self, grid: ScheduleGrid, counters: FairnessCounters) -> list[str]:
        """Per-person totals, room distribution and summary metrics."""
        rooms = grid.shape.rooms
        name_width = max([len(p) for p in counters.counts] + [6])

        header = f"{'Person':<{name_width}} {'Total':>5} " + " ".join(
            f"{abbreviate_room(room)[:8]:>8}" for room in rooms
        )
        lines = ["FAIRNESS", "-" * len(header), header, "-" * len(header)]

        for person, counts in counters.counts.items():
            distribution = " ".join(f"{counts.room_count(room):>8}" for room in rooms)
            lines.append(f"{person:<{name_width}} {counts.total:>5} {distribution}")

        metrics = FairnessMetrics.calculate(counters)
        lines.append("-" * len(header))
        lines.append(
            f"Avg {metrics.average:.1f}, std dev {metrics.std_dev:.2f}, "
            f"range {metrics.minimum}-{metrics.maximum}, "
            f"score {metrics.fairness_score:.1f}/100"
        )
        return lines

    def _unfilled_lines(self, grid: ScheduleGrid) -> list[str]:
        empty = [cell for cell, person in grid.items() if person is None]
        lines = [f"UNFILLED CELLS: {len(empty)}/{grid.shape.cell_count}"]
        for cell in empty:
            lines.append(f"  {cell}")
        return lines
