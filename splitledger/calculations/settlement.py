"""
Revenue Distribution Engine

Turns a period's timesheets, client payments and shared expenses into a
DistributionReport: what each resource earned, what share of the shared
expenses each owes, and what each may withdraw.

DESIGN DECISION: This module is pure. Callers fetch and date-filter the
records; nothing here touches storage, settings or logs, so the same
inputs always produce the same report.

RULES:
1. Earnings are valued at ONE blended rate for the whole period
   (total INR received / total USD invoiced), not the rate of the payment
   that settled each hour.
2. With no USD invoiced in the period, the default rate applies.
3. Each resource carries exactly half of all shared expenses, whoever paid.
4. reimbursement = paid - liability
   net_withdrawal = earnings_inr - liability + reimbursement
5. Records naming anyone outside the pair are ignored, not rejected.

The blended rate is rounded to the default 28-digit context like any other
quotient. Everything derived from it runs at SETTLEMENT_PRECISION, wide
enough that the products and sums stay exact, so
net_withdrawal == earnings_inr + expenses_paid - 2 * liability holds to
the last digit.
"""

from collections.abc import Iterable
from decimal import Decimal, localcontext
from typing import Optional

from splitledger.models.distribution import (
    DistributionReport,
    DistributionTotals,
    PaymentSummary,
    ResourceDistribution,
)
from splitledger.models.records import (
    Expense,
    Payment,
    ReportPeriod,
    Resource,
    TimesheetEntry,
)


DEFAULT_CONVERSION_RATE = Decimal("90")

ZERO = Decimal("0")
TWO = Decimal("2")

SETTLEMENT_PRECISION = 60


def safe_divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """numerator / denominator, or 0 when the denominator is 0."""
    if denominator == 0:
        return ZERO
    return numerator / denominator


def summarize_earnings(
    timesheets: Iterable[TimesheetEntry],
) -> dict[Resource, tuple[Decimal, Decimal]]:
    """
    Total (hours, USD earnings) per resource.

    Both resources are always present. Entries for unknown names are skipped.
    """
    totals = {resource: (ZERO, ZERO) for resource in Resource}

    for entry in timesheets:
        resource = entry.resource
        if resource is None:
            continue
        hours, usd = totals[resource]
        totals[resource] = (
            hours + entry.hours_worked,
            usd + entry.hours_worked * entry.hourly_rate,
        )

    return totals


def blended_conversion_rate(
    payments: Iterable[Payment],
    default_rate: Decimal = DEFAULT_CONVERSION_RATE,
) -> PaymentSummary:
    """
    Aggregate payments into the period's average INR/USD rate.

    Falls back to default_rate when nothing was invoiced in USD.
    """
    total_inr = ZERO
    total_usd = ZERO
    count = 0

    for payment in payments:
        total_inr += payment.amount_inr_received
        total_usd += payment.amount_usd_invoiced
        count += 1

    used_default = total_usd <= 0
    rate = default_rate if used_default else total_inr / total_usd

    return PaymentSummary(
        total_inr=total_inr,
        total_usd_invoiced=total_usd,
        avg_conversion_rate=rate,
        payment_count=count,
        used_default_rate=used_default,
    )


def summarize_expenses(
    expenses: Iterable[Expense],
) -> dict[Resource, tuple[int, Decimal]]:
    """(count, INR paid) per payer. Expenses paid by unknown names are skipped."""
    totals = {resource: (0, ZERO) for resource in Resource}

    for expense in expenses:
        payer = expense.payer
        if payer is None:
            continue
        count, paid = totals[payer]
        totals[payer] = (count + 1, paid + expense.amount_inr)

    return totals


def compute_distribution(
    timesheets: Iterable[TimesheetEntry],
    payments: Iterable[Payment],
    expenses: Iterable[Expense],
    period: Optional[ReportPeriod] = None,
    default_rate: Decimal = DEFAULT_CONVERSION_RATE,
) -> DistributionReport:
    """
    Compute the revenue distribution for one period.

    Args:
        timesheets: Timesheet entries already filtered to the period
        payments: Payments already filtered to the period
        expenses: Expenses already filtered to the period
        period: Window the records were filtered by (label only)
        default_rate: INR per USD used when there are no payments

    Returns:
        An immutable DistributionReport. Nothing is rounded.
    """
    earnings = summarize_earnings(timesheets)
    payment_summary = blended_conversion_rate(payments, default_rate)
    rate = payment_summary.avg_conversion_rate
    paid = summarize_expenses(expenses)

    with localcontext() as ctx:
        ctx.prec = SETTLEMENT_PRECISION

        total_expenses = sum((amount for _, amount in paid.values()), ZERO)
        liability = total_expenses / TWO

        reimbursements = {
            resource: paid[resource][1] - liability
            for resource in Resource
        }

        distributions = {}
        for resource in Resource:
            hours, earnings_usd = earnings[resource]
            expense_count, expenses_paid = paid[resource]
            earnings_inr = earnings_usd * rate
            reimbursement = reimbursements[resource]

            distributions[resource] = ResourceDistribution(
                resource=resource,
                hours=hours,
                earnings_usd=earnings_usd,
                earnings_inr=earnings_inr,
                effective_rate_usd=safe_divide(earnings_usd, hours),
                effective_rate_inr=safe_divide(earnings_inr, hours),
                expense_count=expense_count,
                expenses_paid=expenses_paid,
                liability=liability,
                reimbursement=reimbursement,
                net_withdrawal=earnings_inr - liability + reimbursement,
                owes_other=-reimbursement if reimbursement < 0 else ZERO,
            )

        amit = distributions[Resource.AMIT]
        abhilash = distributions[Resource.ABHILASH]

        totals = DistributionTotals(
            hours=amit.hours + abhilash.hours,
            earnings_usd=amit.earnings_usd + abhilash.earnings_usd,
            earnings_inr=amit.earnings_inr + abhilash.earnings_inr,
            expense_count=amit.expense_count + abhilash.expense_count,
            total_expenses=total_expenses,
            equal_liability=liability,
            net_withdrawal=amit.net_withdrawal + abhilash.net_withdrawal,
        )

    return DistributionReport(
        period=period or ReportPeriod(),
        resources=distributions,
        totals=totals,
        payments=payment_summary,
    )
