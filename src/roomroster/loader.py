"""Roster configuration loading.

A roster configuration bundles the calendar shape, the ordered person
list, their availability rules and the room time windows. It can come
from the built-in defaults or from a JSON file shaped like::

    {
        "days": ["Mon", "Tue", "Wed", "Thu", "Fri"],
        "slots": ["AM", "PM"],
        "rooms": ["Counselling Room A", "Counselling Room B"],
        "people": ["Dominic Yeo", "Kirsty Png"],
        "rules": {"Kirsty Png": {"availableDays": ["Mon"], "wfhDays": ["Fri"]}},
        "roomWindows": {"Counselling Room B": [["Wed", "AM"], ["Thu", "PM"]]}
    }

Every key is optional; missing ones fall back to ``roomroster.config``.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from roomroster import config
from roomroster.domain.models import CalendarShape, RoomConstraints, RuleSet, ScheduleGrid
from roomroster.errors import ConfigError
from roomroster.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RosterConfig:
    """Everything the generator needs for one roster.

    Attributes:
        shape: Days, slots and rooms.
        people: Ordered person list (default scan order).
        rule_set: Availability rules for every person.
        room_constraints: Optional per-room time windows.
    """

    shape: CalendarShape
    people: list[str]
    rule_set: RuleSet
    room_constraints: RoomConstraints = field(default_factory=RoomConstraints)

    def to_dict(self) -> dict[str, Any]:
        return {
            "days": list(self.shape.days),
            "slots": list(self.shape.slots),
            "rooms": list(self.shape.rooms),
            "people": list(self.people),
            "rules": self.rule_set.to_blob(),
            "roomWindows": self.room_constraints.to_blob(self.shape),
        }


def default_config() -> RosterConfig:
    """The built-in week: five days, AM/PM, four rooms, ten therapists."""
    shape = CalendarShape()
    people = list(config.DEFAULT_PEOPLE)
    return RosterConfig(
        shape=shape,
        people=people,
        rule_set=RuleSet.defaults(people, shape),
    )


def config_from_dict(data: dict[str, Any]) -> RosterConfig:
    """Build a roster configuration from already-parsed JSON data."""
    if not isinstance(data, dict):
        raise ConfigError(f"Roster configuration must be a JSON object, got {type(data).__name__}")

    try:
        shape = CalendarShape(
            days=tuple(data.get("days") or config.DEFAULT_DAYS),
            slots=tuple(data.get("slots") or config.DEFAULT_SLOTS),
            rooms=tuple(data.get("rooms") or config.DEFAULT_ROOMS),
        )
    except ValueError as e:
        raise ConfigError(str(e)) from e

    people = list(data.get("people") or config.DEFAULT_PEOPLE)
    if len(set(people)) != len(people):
        raise ConfigError("Duplicate names in people list")

    rule_set = RuleSet.from_blob(data.get("rules"), people, shape)
    room_constraints = RoomConstraints.from_blob(data.get("roomWindows"), shape)

    return RosterConfig(
        shape=shape,
        people=people,
        rule_set=rule_set,
        room_constraints=room_constraints,
    )


def load_config(path: Union[str, Path]) -> RosterConfig:
    """Load a roster configuration from a JSON file.

    Raises:
        ConfigError: If the file is missing, not JSON, or describes an
            invalid calendar shape.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except OSError as e:
        raise ConfigError(f"Cannot read roster configuration {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Roster configuration {path} is not valid JSON: {e}") from e

    roster_config = config_from_dict(data)
    logger.info(
        "Loaded roster configuration from %s: %d people, %d rooms, %d days",
        path,
        len(roster_config.people),
        len(roster_config.shape.rooms),
        len(roster_config.shape.days),
    )
    return roster_config


def load_grid(path: Union[str, Path], shape: CalendarShape) -> ScheduleGrid:
    """Load a stored grid blob and normalize it onto the current shape."""
    path = Path(path)
    try:
        blob = json.loads(path.read_text())
    except OSError as e:
        raise ConfigError(f"Cannot read grid {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Grid {path} is not valid JSON: {e}") from e
    return ScheduleGrid.from_blob(shape, blob)


def save_grid(grid: ScheduleGrid, path: Union[str, Path]) -> Path:
    """Write a grid blob as JSON."""
    path = Path(path)
    path.write_text(json.dumps(grid.to_blob(), indent=2))
    return path
