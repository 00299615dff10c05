"""PDF generation for roster output.

This module creates a printable PDF roster showing:
- The weekly grid with one column per room
- A fairness summary with per-person totals and room distribution
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from reportlab.lib.pagesizes import landscape, letter
from reportlab.pdfgen import canvas

from roomroster.domain.models import (
    Cell,
    FairnessCounters,
    FairnessMetrics,
    RoomConstraints,
    ScheduleGrid,
)
from roomroster.output.text_report import abbreviate_room
from roomroster.scheduling.fairness import compute_fairness

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    "header": (0.85, 0.88, 0.95),
    "assigned": (0.86, 0.94, 0.86),  # Light green
    "empty": (0.96, 0.96, 0.96),  # Light gray
    "restricted": (0.85, 0.85, 0.85),  # Gray
    "grid_line": (0.6, 0.6, 0.6),
}


class PDFGenerator:
    """Generates printable PDF rosters.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(grid, people, "roster.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
        title: str = "Therapist Room Allocation",
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.title = title

    def generate(
        self,
        grid: ScheduleGrid,
        people: list[str],
        output_path: Union[str, Path],
        counters: Optional[FairnessCounters] = None,
        include_summary: bool = True,
        room_constraints: Optional[RoomConstraints] = None,
    ) -> None:
        """Generate the roster PDF and save it to a file.

        Args:
            grid: The roster grid to render.
            people: Configured people, in display order.
            output_path: Path to save the PDF.
            counters: Fairness counters; recomputed from the grid if omitted.
            include_summary: Whether to add the fairness summary page.
            room_constraints: Room windows; cells a room may not be used in
                are shaded.
        """
        c = canvas.Canvas(str(output_path), pagesize=landscape(letter))
        self._draw(c, grid, people, counters, include_summary, room_constraints)
        c.save()

    def generate_to_buffer(
        self,
        grid: ScheduleGrid,
        people: list[str],
        counters: Optional[FairnessCounters] = None,
        include_summary: bool = True,
        room_constraints: Optional[RoomConstraints] = None,
    ) -> BytesIO:
        """Generate the roster PDF and return it as a bytes buffer."""
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=landscape(letter))
        self._draw(c, grid, people, counters, include_summary, room_constraints)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw(
        self,
        c,
        grid: ScheduleGrid,
        people: list[str],
        counters: Optional[FairnessCounters],
        include_summary: bool,
        room_constraints: Optional[RoomConstraints],
    ) -> None:
        if counters is None:
            counters = compute_fairness(grid, people)

        self._draw_grid_page(c, grid, room_constraints or RoomConstraints())
        if include_summary:
            self._draw_summary_page(c, grid, counters)

    def cell_color(
        self,
        grid: ScheduleGrid,
        cell: Cell,
        room_constraints: RoomConstraints,
    ) -> tuple[float, float, float]:
        """Fill color for a grid cell."""
        if grid[cell]:
            return COLORS["assigned"]
        if not room_constraints.allows_cell(cell):
            return COLORS["restricted"]
        return COLORS["empty"]

    def _draw_grid_page(
        self,
        c,
        grid: ScheduleGrid,
        room_constraints: RoomConstraints,
    ) -> None:
        """Draw the weekly grid: rows are (day, slot), columns are rooms."""
        shape = grid.shape

        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, self.title)
        c.setFont("Helvetica", 10)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"Assigned cells: {grid.filled_count}/{shape.cell_count}",
        )

        label_width = 80
        top = self.page_height - self.margin - 60
        usable_width = self.page_width - 2 * self.margin - label_width
        usable_height = top - self.margin
        col_width = usable_width / max(len(shape.rooms), 1)
        row_height = min(28.0, usable_height / (len(shape.days) * len(shape.slots) + 1))

        # Header row
        y = top - row_height
        c.setFillColorRGB(*COLORS["header"])
        c.rect(self.margin, y, label_width + usable_width, row_height, fill=1, stroke=0)
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 9)
        for i, room in enumerate(shape.rooms):
            x = self.margin + label_width + i * col_width
            c.drawCentredString(x + col_width / 2, y + row_height / 2 - 3, abbreviate_room(room))

        # Cell rows
        c.setFont("Helvetica", 9)
        for day in shape.days:
            for slot in shape.slots:
                y -= row_height
                c.setFillColorRGB(0, 0, 0)
                c.drawString(self.margin + 4, y + row_height / 2 - 3, f"{day} {slot}")

                for i, room in enumerate(shape.rooms):
                    x = self.margin + label_width + i * col_width
                    cell = Cell(day, slot, room)
                    person = grid[cell]
                    c.setFillColorRGB(*self.cell_color(grid, cell, room_constraints))
                    c.setStrokeColorRGB(*COLORS["grid_line"])
                    c.rect(x, y, col_width, row_height, fill=1, stroke=1)
                    if person:
                        c.setFillColorRGB(0, 0, 0)
                        c.drawCentredString(x + col_width / 2, y + row_height / 2 - 3, person[:24])

        c.showPage()

    def _draw_summary_page(
        self,
        c,
        grid: ScheduleGrid,
        counters: FairnessCounters,
    ) -> None:
        """Draw per-person totals and room distribution."""
        rooms = grid.shape.rooms
        metrics = FairnessMetrics.calculate(counters)

        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, "Roster Summary")

        y = self.page_height - self.margin - 50
        c.setFont("Helvetica", 10)
        for line in (
            f"Average assignments per person: {metrics.average:.1f}",
            f"Standard deviation: {metrics.std_dev:.2f}",
            f"Range: {metrics.minimum} - {metrics.maximum}",
            f"Fairness score: {metrics.fairness_score:.1f}/100",
        ):
            c.drawString(self.margin + 20, y, line)
            y -= 15

        y -= 15
        name_x = self.margin
        total_x = self.margin + 160
        room_x = total_x + 60
        room_width = 90

        c.setFont("Helvetica-Bold", 9)
        c.drawString(name_x, y, "Person")
        c.drawRightString(total_x + 30, y, "Total")
        for i, room in enumerate(rooms):
            c.drawRightString(room_x + (i + 1) * room_width - 10, y, abbreviate_room(room))
        y -= 14

        c.setFont("Helvetica", 9)
        for person, counts in counters.counts.items():
            if y < self.margin:
                c.showPage()
                c.setFont("Helvetica", 9)
                y = self.page_height - self.margin - 20
            c.drawString(name_x, y, person[:28])
            c.drawRightString(total_x + 30, y, str(counts.total))
            for i, room in enumerate(rooms):
                c.drawRightString(room_x + (i + 1) * room_width - 10, y, str(counts.room_count(room)))
            y -= 13

        c.showPage()
