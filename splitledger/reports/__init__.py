"""Reporting package: presentation formatting and plain-text export."""

from splitledger.reports.formatting import (
    FiscalYear,
    fiscal_year,
    format_currency,
    format_date,
    format_display_date,
    format_hours,
    format_rate,
    month_range,
    parse_date_string,
    to_cents,
)
from splitledger.reports.text import render_distribution, render_invoice

__all__ = [
    "FiscalYear",
    "fiscal_year",
    "format_currency",
    "format_date",
    "format_display_date",
    "format_hours",
    "format_rate",
    "month_range",
    "parse_date_string",
    "render_distribution",
    "render_invoice",
    "to_cents",
]
