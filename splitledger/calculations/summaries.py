"""Timesheet summaries grouped by resource."""

from collections.abc import Iterable
from decimal import Decimal

from splitledger.models.distribution import ResourceHoursSummary, TimesheetSummary
from splitledger.models.records import TimesheetEntry


def summarize_timesheets(timesheets: Iterable[TimesheetEntry]) -> TimesheetSummary:
    """
    Hours, billed amount and entry count per resource name.

    Grouping uses the name as stored, so rows for unknown names appear
    under their own heading rather than disappearing.
    """
    groups: dict[str, ResourceHoursSummary] = {}

    for entry in timesheets:
        group = groups.get(entry.resource_name)
        if group is None:
            group = ResourceHoursSummary(resource_name=entry.resource_name)
            groups[entry.resource_name] = group
        group.total_hours += entry.hours_worked
        group.total_amount += entry.amount_usd
        group.entry_count += 1

    by_resource = [groups[name] for name in sorted(groups)]

    return TimesheetSummary(
        by_resource=by_resource,
        total_hours=sum((g.total_hours for g in by_resource), Decimal("0")),
        total_amount=sum((g.total_amount for g in by_resource), Decimal("0")),
        entry_count=sum(g.entry_count for g in by_resource),
    )
