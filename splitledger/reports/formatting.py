"""
Presentation Formatting

Rounding to two decimal places happens here and nowhere earlier.
"""

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from pydantic import BaseModel


CENTS = Decimal("0.01")

CURRENCY_SYMBOLS = {
    "USD": "$",
    "INR": "₹",
}

Number = Union[Decimal, int, str]


def to_cents(amount: Number) -> Decimal:
    """Round half-up to two decimal places."""
    return Decimal(str(amount)).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(amount: Number, currency: str = "USD") -> str:
    """
    Format an amount with its currency symbol.

    Negative amounts keep the sign in front of the symbol: -₹5000.00
    """
    if currency not in CURRENCY_SYMBOLS:
        raise ValueError(f"Unsupported currency: {currency}")
    value = to_cents(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOLS[currency]}{abs(value):.2f}"


def format_hours(hours: Number) -> str:
    return f"{to_cents(hours):.2f}"


def format_rate(rate: Number) -> str:
    return f"{to_cents(rate):.2f}"


def format_date(value: date, format_string: str = "%Y-%m-%d") -> str:
    return value.strftime(format_string)


def format_display_date(value: date) -> str:
    """e.g. Jan 05, 2025"""
    return format_date(value, "%b %d, %Y")


def parse_date_string(value: str) -> date:
    return date.fromisoformat(value)


def month_range(day: Optional[date] = None) -> tuple[date, date]:
    """First and last day of the month containing day (default: today)."""
    day = day or date.today()
    start = day.replace(day=1)
    next_month = (start + timedelta(days=32)).replace(day=1)
    return start, next_month - timedelta(days=1)


class FiscalYear(BaseModel):
    """Indian fiscal year: April 1 to March 31."""

    label: str
    start: date
    end: date


def fiscal_year(today: Optional[date] = None) -> FiscalYear:
    """
    Fiscal year starting in April of today's calendar year.

    Follows the calendar year of today, so a January date maps to the
    fiscal year that begins the following April.
    """
    today = today or date.today()
    year = today.year
    return FiscalYear(
        label=f"FY{str(year)[-2:]}-{str(year + 1)[-2:]}",
        start=date(year, 4, 1),
        end=date(year + 1, 3, 31),
    )
