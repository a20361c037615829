"""
Invoice Building

An invoice is the billable timesheet entries of a period, one line per
entry, totalled in USD and converted to INR at the rate chosen for the
invoice.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import Optional

from splitledger.models.inputs import InvoiceRequest
from splitledger.models.records import (
    Invoice,
    InvoiceLineItem,
    InvoiceStatus,
    Resource,
    TimesheetEntry,
)


FIRST_INVOICE_SEQUENCE = 1001


class NoBillableTimesheetsError(Exception):
    """No timesheet entries matched the billing period and resources."""

    def __init__(self, start: date, end: date, resources: list[Resource]):
        self.start = start
        self.end = end
        self.resources = resources
        names = ", ".join(r.value for r in resources)
        super().__init__(
            f"No timesheet entries found for {names} between "
            f"{start.isoformat()} and {end.isoformat()}"
        )


def select_billable_entries(
    timesheets: Iterable[TimesheetEntry],
    start: date,
    end: date,
    resources: Iterable[Resource],
) -> list[TimesheetEntry]:
    """Entries dated within [start, end] for the selected resources, oldest first."""
    selected = set(resources)
    return sorted(
        (
            entry for entry in timesheets
            if start <= entry.date <= end and entry.resource in selected
        ),
        key=lambda entry: entry.date,
    )


def describe_entry(entry: TimesheetEntry) -> str:
    if entry.description:
        return entry.description
    return f"{entry.project_name or 'Work'} - {entry.client_name or 'Client'}"


def build_line_items(entries: Iterable[TimesheetEntry]) -> list[InvoiceLineItem]:
    return [
        InvoiceLineItem(
            date=entry.date,
            resource_name=entry.resource_name,
            description=describe_entry(entry),
            hours_worked=entry.hours_worked,
            rate_per_hour=entry.hourly_rate,
            amount_usd=entry.amount_usd,
        )
        for entry in entries
    ]


def generate_invoice_number(
    resource_label: str,
    invoice_date: date,
    sequence_number: int,
) -> str:
    """
    Build an invoice number such as Invoice_Amit_FY25-26-1001.

    The FY pair is the calendar year of the invoice date and the next one.
    """
    year = invoice_date.year
    fy_year = f"{str(year)[-2:]}-{str(year + 1)[-2:]}"
    return f"Invoice_{resource_label}_FY{fy_year}-{sequence_number:04d}"


def next_sequence_number(
    latest_invoice_number: Optional[str],
    first_sequence: int = FIRST_INVOICE_SEQUENCE,
) -> int:
    """
    Sequence for the next invoice, continuing from the latest number.

    Numbers whose last segment is not numeric restart at first_sequence.
    """
    if not latest_invoice_number:
        return first_sequence

    last_part = latest_invoice_number.rsplit("-", 1)[-1]
    if not last_part.isdigit():
        return first_sequence
    return int(last_part) + 1


def resource_label(resources: Iterable[Resource]) -> str:
    return "_".join(resource.value for resource in resources)


def build_invoice(
    request: InvoiceRequest,
    timesheets: Iterable[TimesheetEntry],
    sequence_number: int,
) -> Invoice:
    """
    Build a draft invoice from the request's period and resources.

    Raises:
        NoBillableTimesheetsError: If no entries fall in the period
    """
    entries = select_billable_entries(
        timesheets,
        request.billing_period_start,
        request.billing_period_end,
        request.resources,
    )
    if not entries:
        raise NoBillableTimesheetsError(
            request.billing_period_start,
            request.billing_period_end,
            request.resources,
        )

    line_items = build_line_items(entries)
    subtotal_usd = sum((item.amount_usd for item in line_items), Decimal("0"))

    return Invoice(
        invoice_number=generate_invoice_number(
            resource_label(request.resources),
            request.invoice_date,
            sequence_number,
        ),
        invoice_date=request.invoice_date,
        billing_period_start=request.billing_period_start,
        billing_period_end=request.billing_period_end,
        client_name=request.client_name,
        client_address=request.client_address,
        resources=request.resources,
        line_items=line_items,
        subtotal_usd=subtotal_usd,
        conversion_rate=request.conversion_rate,
        total_inr=subtotal_usd * request.conversion_rate,
        status=InvoiceStatus.DRAFT,
    )
