"""Tests for rule blobs, room window blobs and the rule editing helpers."""

import json

import pytest

from roomroster.domain.models import AvailabilityRule, CalendarShape, RoomConstraints, RuleSet
from roomroster.loader import load_config
from roomroster.domain.rules import (
    overlapping_days,
    set_max_consecutive,
    toggle_available_day,
    toggle_slot,
    toggle_wfh_day,
)


@pytest.fixture
def shape():
    return CalendarShape()


class TestRuleBlobs:
    """Tests for loading availability rules from stored blobs."""

    def test_missing_fields_default(self, shape):
        blob = {"Kirsty Png": {"availableDays": ["Mon", "Tue"]}}
        rule_set = RuleSet.from_blob(blob, ["Kirsty Png"], shape)
        rule = rule_set.rule_for("Kirsty Png")

        assert rule.available_days == frozenset({"Mon", "Tue"})
        assert rule.wfh_days == frozenset()
        assert rule.available_slots == frozenset({"AM", "PM"})
        assert rule.max_consecutive_per_day == 2

    def test_missing_person_gets_full_availability(self, shape):
        rule_set = RuleSet.from_blob({}, ["Dominic Yeo"], shape)
        assert rule_set.rule_for("Dominic Yeo") == AvailabilityRule.full(shape)

    def test_none_blob(self, shape):
        rule_set = RuleSet.from_blob(None, ["Dominic Yeo", "Kirsty Png"], shape)
        assert rule_set.people == ["Dominic Yeo", "Kirsty Png"]

    def test_legacy_cap_key(self, shape):
        blob = {"Oliver Tan": {"maxConsecutiveSlotsPerDay": 1}}
        rule_set = RuleSet.from_blob(blob, ["Oliver Tan"], shape)
        assert rule_set.rule_for("Oliver Tan").max_consecutive_per_day == 1

    def test_invalid_cap_falls_back(self, shape):
        blob = {"Oliver Tan": {"maxConsecutivePerDay": 5}}
        rule_set = RuleSet.from_blob(blob, ["Oliver Tan"], shape)
        assert rule_set.rule_for("Oliver Tan").max_consecutive_per_day == 2

    def test_unknown_days_dropped(self, shape):
        blob = {"Xiao Hui": {"availableDays": ["Mon", "Sat"], "wfhDays": ["Sun", "Fri"]}}
        rule = RuleSet.from_blob(blob, ["Xiao Hui"], shape).rule_for("Xiao Hui")
        assert rule.available_days == frozenset({"Mon"})
        assert rule.wfh_days == frozenset({"Fri"})

    def test_stale_people_dropped(self, shape):
        blob = {"Former Staff": {"availableDays": ["Mon"]}}
        rule_set = RuleSet.from_blob(blob, ["Tika Zainal"], shape)
        assert rule_set.people == ["Tika Zainal"]

    def test_unreadable_rule_gets_default(self, shape):
        rule_set = RuleSet.from_blob({"Tika Zainal": "all week"}, ["Tika Zainal"], shape)
        assert rule_set.rule_for("Tika Zainal") == AvailabilityRule.full(shape)

    def test_overlap_preserved_from_blob(self, shape):
        blob = {"Seanna Neo": {"availableDays": ["Mon", "Tue"], "wfhDays": ["Mon"]}}
        rule = RuleSet.from_blob(blob, ["Seanna Neo"], shape).rule_for("Seanna Neo")
        assert overlapping_days(rule) == {"Mon"}

    def test_to_blob_calendar_order(self, shape):
        rule = AvailabilityRule(
            available_days={"Fri", "Mon", "Wed"},
            wfh_days={"Thu"},
            available_slots={"PM", "AM"},
            max_consecutive_per_day=1,
        )
        rule_set = RuleSet(shape=shape, rules={"Andrew Lim": rule})

        assert rule_set.to_blob() == {
            "Andrew Lim": {
                "availableDays": ["Mon", "Wed", "Fri"],
                "wfhDays": ["Thu"],
                "availableSlots": ["AM", "PM"],
                "maxConsecutivePerDay": 1,
            }
        }


class TestRoomWindowBlobs:
    """Tests for RoomConstraints blob loading."""

    def test_load_window(self, shape):
        blob = {"Counselling Room B": [["Wed", "AM"], ["Thu", "PM"]]}
        constraints = RoomConstraints.from_blob(blob, shape)

        assert constraints.allows("Counselling Room B", "Wed", "AM")
        assert constraints.allows("Counselling Room B", "Thu", "PM")
        assert not constraints.allows("Counselling Room B", "Wed", "PM")
        assert constraints.allows("Counselling Room A", "Mon", "AM")

    def test_unknown_room_and_bad_pairs_dropped(self, shape):
        blob = {
            "Old Room": [["Mon", "AM"]],
            "Counselling Room C": [["Mon", "AM"], ["Sat", "AM"], "Tue PM"],
        }
        constraints = RoomConstraints.from_blob(blob, shape)

        assert constraints.window_for("Old Room") is None
        assert constraints.window_for("Counselling Room C").allowed == frozenset({("Mon", "AM")})

    def test_non_mapping_blob_gives_no_windows(self, shape):
        constraints = RoomConstraints.from_blob([["Counselling Room B"]], shape)
        assert constraints.windows == {}
        assert constraints.allows("Counselling Room B", "Mon", "AM")

    def test_scalar_window_skips_room(self, shape):
        blob = {"Counselling Room B": 5, "Counselling Room C": [["Tue", "PM"]]}
        constraints = RoomConstraints.from_blob(blob, shape)

        assert constraints.window_for("Counselling Room B") is None
        assert constraints.allows("Counselling Room B", "Mon", "AM")
        assert not constraints.allows("Counselling Room C", "Mon", "AM")

    def test_malformed_windows_do_not_break_config_loading(self, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text(json.dumps({"roomWindows": {"Counselling Room A": "Mon AM"}}))

        roster_config = load_config(path)
        assert roster_config.room_constraints.windows == {}

    def test_empty_window_blocks_room(self, shape):
        constraints = RoomConstraints.from_blob({"Counselling Room D": []}, shape)
        assert not any(
            constraints.allows("Counselling Room D", day, slot)
            for day in shape.days
            for slot in shape.slots
        )

    def test_restrict_returns_new_constraints(self):
        base = RoomConstraints()
        restricted = base.restrict("R1", [("Mon", "AM")])
        assert base.allows("R1", "Tue", "AM")
        assert not restricted.allows("R1", "Tue", "AM")

    def test_to_blob(self, shape):
        constraints = RoomConstraints().restrict(
            "Counselling Room B", [("Thu", "PM"), ("Wed", "AM")]
        )
        assert constraints.to_blob(shape) == {
            "Counselling Room B": [["Wed", "AM"], ["Thu", "PM"]]
        }


class TestRuleEditing:
    """Tests for the mutually exclusive day toggles."""

    @pytest.fixture
    def rule_set(self, shape):
        return RuleSet.defaults(["Janice Leong"], shape)

    def test_wfh_removes_available_day(self, rule_set):
        updated = toggle_wfh_day(rule_set, "Janice Leong", "Mon", True)
        rule = updated.rule_for("Janice Leong")

        assert "Mon" in rule.wfh_days
        assert "Mon" not in rule.available_days
        assert overlapping_days(rule) == set()

    def test_available_removes_wfh_day(self, rule_set):
        updated = toggle_wfh_day(rule_set, "Janice Leong", "Tue", True)
        updated = toggle_available_day(updated, "Janice Leong", "Tue", True)
        rule = updated.rule_for("Janice Leong")

        assert "Tue" in rule.available_days
        assert "Tue" not in rule.wfh_days

    def test_unchecking_leaves_other_list(self, rule_set):
        updated = toggle_available_day(rule_set, "Janice Leong", "Wed", False)
        rule = updated.rule_for("Janice Leong")
        assert "Wed" not in rule.available_days
        assert "Wed" not in rule.wfh_days

    def test_original_rule_set_unchanged(self, rule_set, shape):
        toggle_wfh_day(rule_set, "Janice Leong", "Mon", True)
        assert rule_set.rule_for("Janice Leong") == AvailabilityRule.full(shape)

    def test_unknown_day(self, rule_set):
        with pytest.raises(ValueError):
            toggle_available_day(rule_set, "Janice Leong", "Sat", True)
        with pytest.raises(ValueError):
            toggle_wfh_day(rule_set, "Janice Leong", "Sun", True)

    def test_toggle_slot(self, rule_set):
        updated = toggle_slot(rule_set, "Janice Leong", "PM", False)
        assert updated.rule_for("Janice Leong").available_slots == frozenset({"AM"})
        with pytest.raises(ValueError):
            toggle_slot(rule_set, "Janice Leong", "EVE", True)

    def test_set_max_consecutive(self, rule_set):
        updated = set_max_consecutive(rule_set, "Janice Leong", 1)
        assert updated.rule_for("Janice Leong").max_consecutive_per_day == 1
        with pytest.raises(ValueError):
            set_max_consecutive(rule_set, "Janice Leong", 3)
