"""
Calculations Package

Pure functions over already-fetched records. Nothing in here reads
settings, touches storage or logs.
"""

from splitledger.calculations.settlement import (
    DEFAULT_CONVERSION_RATE,
    blended_conversion_rate,
    compute_distribution,
    safe_divide,
    summarize_earnings,
    summarize_expenses,
)
from splitledger.calculations.invoicing import (
    FIRST_INVOICE_SEQUENCE,
    NoBillableTimesheetsError,
    build_invoice,
    build_line_items,
    generate_invoice_number,
    next_sequence_number,
    select_billable_entries,
)
from splitledger.calculations.payments import build_payment, mark_invoice_paid
from splitledger.calculations.summaries import summarize_timesheets

__all__ = [
    # Settlement
    "DEFAULT_CONVERSION_RATE",
    "blended_conversion_rate",
    "compute_distribution",
    "safe_divide",
    "summarize_earnings",
    "summarize_expenses",
    # Invoicing
    "FIRST_INVOICE_SEQUENCE",
    "NoBillableTimesheetsError",
    "build_invoice",
    "build_line_items",
    "generate_invoice_number",
    "next_sequence_number",
    "select_billable_entries",
    # Payments
    "build_payment",
    "mark_invoice_paid",
    # Summaries
    "summarize_timesheets",
]
