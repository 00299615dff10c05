"""Output generation for rosters (text, PDF)."""

from roomroster.output.pdf_generator import PDFGenerator
from roomroster.output.text_report import RosterReport, abbreviate_room

__all__ = [
    "PDFGenerator",
    "RosterReport",
    "abbreviate_room",
]
