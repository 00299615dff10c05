"""Rule editing helpers.

The rule form keeps a person's available days and WFH days mutually
exclusive: ticking a day in one list removes it from the other. Stored
rules from elsewhere may still overlap, which is why the engine treats
WFH as an override rather than relying on these helpers.
"""

from dataclasses import replace

from roomroster.domain.models import AvailabilityRule, RuleSet


def toggle_available_day(rule_set: RuleSet, person: str, day: str, checked: bool) -> RuleSet:
    """Add or remove a day from a person's available days.

    Marking a day available also removes it from the WFH days.
    """
    _require_day(rule_set, day)
    rule = rule_set.rule_for(person)
    if checked:
        updated = replace(
            rule,
            available_days=rule.available_days | {day},
            wfh_days=rule.wfh_days - {day},
        )
    else:
        updated = replace(rule, available_days=rule.available_days - {day})
    return rule_set.with_rule(person, updated)


def toggle_wfh_day(rule_set: RuleSet, person: str, day: str, checked: bool) -> RuleSet:
    """Add or remove a WFH day. Marking WFH removes the day from availability."""
    _require_day(rule_set, day)
    rule = rule_set.rule_for(person)
    if checked:
        updated = replace(
            rule,
            wfh_days=rule.wfh_days | {day},
            available_days=rule.available_days - {day},
        )
    else:
        updated = replace(rule, wfh_days=rule.wfh_days - {day})
    return rule_set.with_rule(person, updated)


def toggle_slot(rule_set: RuleSet, person: str, slot: str, checked: bool) -> RuleSet:
    if slot not in rule_set.shape.slots:
        raise ValueError(f"Unknown slot: {slot!r}")
    rule = rule_set.rule_for(person)
    if checked:
        updated = replace(rule, available_slots=rule.available_slots | {slot})
    else:
        updated = replace(rule, available_slots=rule.available_slots - {slot})
    return rule_set.with_rule(person, updated)


def set_max_consecutive(rule_set: RuleSet, person: str, value: int) -> RuleSet:
    """Set the per-day slot cap (1 or 2). Raises ValueError otherwise."""
    rule = rule_set.rule_for(person)
    return rule_set.with_rule(person, replace(rule, max_consecutive_per_day=int(value)))


def overlapping_days(rule: AvailabilityRule) -> set[str]:
    """Days listed as both available and WFH (WFH wins during generation)."""
    return set(rule.available_days & rule.wfh_days)


def _require_day(rule_set: RuleSet, day: str) -> None:
    if day not in rule_set.shape.days:
        raise ValueError(f"Unknown day: {day!r}")
