"""Exceptions raised by the roster engine.

Expected conditions (empty eligibility, missing blob keys, edits into a
restricted room) are never raised. Only programmer errors and unreadable
configuration surface as exceptions.
"""


class RosterError(Exception):
    """Base class for roster engine errors."""


class UnknownCellError(RosterError, KeyError):
    """A cell address lies outside the configured calendar shape."""

    def __init__(self, cell):
        self.cell = cell
        super().__init__(f"Cell {cell!r} is not part of the calendar shape")

    def __str__(self) -> str:
        return self.args[0]


class ConfigError(RosterError):
    """A roster configuration file could not be read."""
