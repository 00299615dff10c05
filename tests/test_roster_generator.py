"""Tests for the greedy roster generator."""

from dataclasses import replace

import pytest

from roomroster import config
from roomroster.domain.models import (
    AvailabilityRule,
    CalendarShape,
    Cell,
    RoomConstraints,
    RuleSet,
)
from roomroster.loader import default_config
from roomroster.scheduling.fairness import compute_fairness, counters_match
from roomroster.scheduling.roster_generator import RosterGenerator, generate
from roomroster.scheduling.scheduler import RosterScheduler

PEOPLE = list(config.DEFAULT_PEOPLE)


@pytest.fixture
def shape():
    return CalendarShape()


@pytest.fixture
def rule_set(shape):
    return RuleSet.defaults(PEOPLE, shape)


@pytest.fixture
def generator():
    return RosterGenerator()


def assert_no_double_booking(grid):
    for day in grid.shape.days:
        for slot in grid.shape.slots:
            people = grid.people_in_slot(day, slot)
            assert len(people) == len(set(people)), f"double booking on {day} {slot}"


class TestGeneration:
    """Tests for the default week with fully available people."""

    def test_fills_every_cell(self, generator, rule_set):
        result = generator.generate(PEOPLE, rule_set)

        assert result.filled_count == 40
        assert result.unfilled == []
        assert len(result.grid.cells) == 40

    def test_balanced_load(self, generator, rule_set):
        result = generator.generate(PEOPLE, rule_set)
        totals = compute_fairness(result.grid, PEOPLE).totals()

        assert totals == {person: 4 for person in PEOPLE}

    def test_no_double_booking(self, generator, rule_set):
        result = generator.generate(PEOPLE, rule_set)
        assert_no_double_booking(result.grid)

    def test_first_day_follows_scan_order(self, generator, rule_set):
        grid = generator.generate(PEOPLE, rule_set).grid
        rooms = grid.shape.rooms

        assert [grid.get("Mon", "AM", room) for room in rooms] == PEOPLE[0:4]
        assert [grid.get("Mon", "PM", room) for room in rooms] == PEOPLE[4:8]
        assert grid.get("Tue", "AM", rooms[0]) == "Xiao Hui"
        assert grid.get("Tue", "AM", rooms[1]) == "Tika Zainal"

    def test_deterministic(self, generator, rule_set):
        first = generator.generate(PEOPLE, rule_set, start_cursor=3)
        second = generator.generate(PEOPLE, rule_set, start_cursor=3)

        assert first.grid == second.grid
        assert first.next_cursor == second.next_cursor

    def test_counters_match_recomputed(self, generator, rule_set):
        result = generator.generate(PEOPLE, rule_set)
        assert counters_match(result.counters, compute_fairness(result.grid, PEOPLE))

    def test_module_level_generate(self, rule_set):
        result = generate(PEOPLE, rule_set)
        assert result.filled_count == 40

    def test_people_without_rules_are_available(self, generator, shape):
        result = generator.generate(PEOPLE, RuleSet(shape=shape))
        assert result.filled_count == 40

    def test_duplicate_people_rejected(self, generator, rule_set):
        with pytest.raises(ValueError):
            generator.generate(["Dominic Yeo", "Dominic Yeo"], rule_set)

    def test_no_people(self, generator, rule_set):
        result = generator.generate([], rule_set)

        assert result.is_empty
        assert result.next_cursor == 0
        assert len(result.unfilled) == 40

    def test_invalid_weight(self):
        with pytest.raises(ValueError):
            RosterGenerator(total_weight=0)


class TestHardConstraints:
    """Tests that generated grids respect every hard constraint."""

    def test_room_window_scenario(self, generator, rule_set, shape):
        windows = RoomConstraints().restrict("Counselling Room B", [("Wed", "AM"), ("Thu", "PM")])
        result = generator.generate(PEOPLE, rule_set, windows)

        filled_b = [
            (cell.day, cell.slot)
            for cell, person in result.grid.assigned()
            if cell.room == "Counselling Room B"
        ]
        assert filled_b == [("Wed", "AM"), ("Thu", "PM")]
        assert result.filled_count == 32
        assert len(result.unfilled) == 8
        assert all(cell.room == "Counselling Room B" for cell in result.unfilled)

    def test_wfh_day_never_assigned(self, generator, rule_set, shape):
        rule = replace(rule_set.rule_for("Kirsty Png"), wfh_days=frozenset({"Mon", "Wed"}))
        rule_set = rule_set.with_rule("Kirsty Png", rule)

        result = generator.generate(PEOPLE, rule_set)

        days = {cell.day for cell in result.grid.cells_for("Kirsty Png")}
        assert days.isdisjoint({"Mon", "Wed"})
        assert result.filled_count == 40

    def test_wfh_wins_over_available(self, generator, shape):
        rule = AvailabilityRule(
            available_days=set(shape.days),
            wfh_days=set(shape.days),
            available_slots=set(shape.slots),
        )
        rule_set = RuleSet(shape=shape, rules={"Andrew Lim": rule})

        result = generator.generate(["Andrew Lim"], rule_set)

        assert result.is_empty

    def test_starvation_gives_empty_grid(self, generator, shape):
        rule_set = RuleSet(
            shape=shape,
            rules={p: AvailabilityRule(wfh_days=set(shape.days)) for p in PEOPLE},
        )
        result = generator.generate(PEOPLE, rule_set)

        assert result.is_empty
        assert len(result.unfilled) == 40
        assert all(result.counters.total(p) == 0 for p in PEOPLE)

    def test_single_available_day(self, generator, rule_set):
        rule = replace(rule_set.rule_for("Dominic Yeo"), available_days=frozenset({"Mon"}))
        rule_set = rule_set.with_rule("Dominic Yeo", rule)

        result = generator.generate(PEOPLE, rule_set)

        days = {cell.day for cell in result.grid.cells_for("Dominic Yeo")}
        assert days == {"Mon"}
        assert result.counters.total("Dominic Yeo") == 1
        assert result.filled_count == 40

    def test_consecutive_cap_of_one(self, generator, shape):
        capped = replace(AvailabilityRule.full(shape), max_consecutive_per_day=1)
        rule_set = RuleSet(shape=shape, rules={p: capped for p in PEOPLE})

        grid = generator.generate(PEOPLE, rule_set).grid

        for day in shape.days:
            am = set(grid.people_in_slot(day, "AM"))
            pm = set(grid.people_in_slot(day, "PM"))
            assert am.isdisjoint(pm)
        assert grid.filled_count == 40

    def test_cap_of_one_can_leave_cells_empty(self, generator):
        shape = CalendarShape(days=("Mon",), rooms=("R1", "R2"))
        capped = replace(AvailabilityRule.full(shape), max_consecutive_per_day=1)
        rule_set = RuleSet(shape=shape, rules={"A": capped, "B": capped})

        result = generator.generate(["A", "B"], rule_set)

        assert result.grid.people_in_slot("Mon", "AM") == ["A", "B"]
        assert result.grid.people_in_slot("Mon", "PM") == []
        assert result.unfilled == [Cell("Mon", "PM", "R1"), Cell("Mon", "PM", "R2")]

    def test_unavailable_slot(self, generator, rule_set):
        rule = replace(rule_set.rule_for("Oliver Tan"), available_slots=frozenset({"PM"}))
        rule_set = rule_set.with_rule("Oliver Tan", rule)

        grid = generator.generate(PEOPLE, rule_set).grid

        assert all(cell.slot == "PM" for cell in grid.cells_for("Oliver Tan"))


class TestTieBreaking:
    """Tests for scoring ties, the rotating cursor and room variety."""

    @pytest.fixture
    def one_room(self):
        shape = CalendarShape(days=("Mon",), rooms=("R",))
        return shape, RuleSet.defaults(["A", "B", "C"], shape)

    def test_first_in_scan_order_wins(self, generator, one_room):
        _, rule_set = one_room
        result = generator.generate(["A", "B", "C"], rule_set, start_cursor=0)

        assert result.grid.get("Mon", "AM", "R") == "A"
        assert result.grid.get("Mon", "PM", "R") == "B"
        assert result.next_cursor == 1

    def test_start_cursor_rotates_scan(self, generator, one_room):
        _, rule_set = one_room
        result = generator.generate(["A", "B", "C"], rule_set, start_cursor=2)

        assert result.grid.get("Mon", "AM", "R") == "C"
        assert result.grid.get("Mon", "PM", "R") == "A"
        assert result.next_cursor == 0

    def test_start_cursor_wraps(self, generator, one_room):
        _, rule_set = one_room
        wrapped = generator.generate(["A", "B", "C"], rule_set, start_cursor=5)
        direct = generator.generate(["A", "B", "C"], rule_set, start_cursor=2)
        assert wrapped.grid == direct.grid

    def test_room_variety_breaks_total_ties(self, generator):
        shape = CalendarShape(days=("Mon",), rooms=("R1", "R2"))
        rule_set = RuleSet.defaults(["A", "B"], shape)

        result = generator.generate(["A", "B"], rule_set)
        grid = result.grid

        assert grid.get("Mon", "AM", "R1") == "A"
        assert grid.get("Mon", "AM", "R2") == "B"
        assert grid.get("Mon", "PM", "R1") == "B"
        assert grid.get("Mon", "PM", "R2") == "A"
        assert result.next_cursor == 0

    def test_score(self, generator):
        shape = CalendarShape(days=("Mon",), rooms=("R1", "R2"))
        result = generator.generate(["A", "B"], RuleSet.defaults(["A", "B"], shape))
        counters = compute_fairness(result.grid, ["A", "B"])

        # A holds Mon AM R1 and Mon PM R2
        assert generator.score("A", "R1", counters) == 2001
        assert generator.score("Z", "R1", counters) == 0


class TestRosterScheduler:
    """Tests for the RosterScheduler facade."""

    def test_stats(self):
        scheduler = RosterScheduler(default_config())
        result, stats = scheduler.generate_roster_with_stats()

        assert stats["total_cells"] == 40
        assert stats["filled_cells"] == 40
        assert stats["unfilled_cells"] == 0
        assert stats["unassigned_people"] == []
        assert stats["filled_by_day"] == {day: 8 for day in config.DEFAULT_DAYS}
        assert stats["next_cursor"] == result.next_cursor
        assert stats["fairness_metrics"].fairness_score == 100.0

    def test_rotation_off_restarts_at_zero(self):
        scheduler = RosterScheduler(default_config())
        first = scheduler.generate_roster()
        second = scheduler.generate_roster()
        assert first.grid == second.grid

    def test_continue_rotation_uses_next_cursor(self):
        roster_config = default_config()
        scheduler = RosterScheduler(roster_config, continue_rotation=True)

        first = scheduler.generate_roster()
        second = scheduler.generate_roster()
        expected = RosterGenerator().generate(
            roster_config.people,
            roster_config.rule_set,
            start_cursor=first.next_cursor,
        )

        assert scheduler.cursor == second.next_cursor
        assert second.grid == expected.grid

    def test_explicit_cursor_overrides(self):
        scheduler = RosterScheduler(default_config(), continue_rotation=True)
        result = scheduler.generate_roster(start_cursor=4)
        assert result.grid.get("Mon", "AM", "Counselling Room A") == "Janice Leong"
