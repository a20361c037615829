"""
Plain-Text Export

Renders distribution reports and invoices as fixed-width text for email,
chat or a terminal. DOC/PDF rendering lives outside this package.
"""

from splitledger.models.distribution import DistributionReport
from splitledger.models.records import Invoice, Resource
from splitledger.reports.formatting import (
    format_currency,
    format_display_date,
    format_hours,
    format_rate,
)


RULE = "-" * 64


def _row(label: str, *values: str) -> str:
    return f"{label:<22}" + "".join(f"{v:>14}" for v in values)


def render_distribution(report: DistributionReport) -> str:
    """Render a distribution report as plain text."""
    resources = list(Resource)
    names = [r.value for r in resources]
    lines = [
        "REVENUE DISTRIBUTION",
        f"Period: {report.period.label}",
        RULE,
        f"Earnings (average rate: ₹{format_rate(report.payments.avg_conversion_rate)}/$1)",
        _row("", *names, "Total"),
        _row(
            "Hours",
            *(format_hours(report.resource(r).hours) for r in resources),
            format_hours(report.totals.hours),
        ),
        _row(
            "Earnings (USD)",
            *(format_currency(report.resource(r).earnings_usd, "USD") for r in resources),
            format_currency(report.totals.earnings_usd, "USD"),
        ),
        _row(
            "Earnings (INR)",
            *(format_currency(report.resource(r).earnings_inr, "INR") for r in resources),
            format_currency(report.totals.earnings_inr, "INR"),
        ),
        RULE,
        f"Payments received: {report.payments.payment_count}, "
        f"{format_currency(report.payments.total_inr, 'INR')}",
    ]

    if report.payments.used_default_rate:
        lines.append("No USD invoiced in this period; default conversion rate applied.")

    lines.extend([
        RULE,
        "Shared expenses",
        _row("", *names, "Total"),
        _row(
            "Paid",
            *(format_currency(report.resource(r).expenses_paid, "INR") for r in resources),
            format_currency(report.totals.total_expenses, "INR"),
        ),
        _row(
            "Liability (50%)",
            *(format_currency(report.resource(r).liability, "INR") for r in resources),
            "",
        ),
        _row(
            "Reimbursement",
            *(format_currency(report.resource(r).reimbursement, "INR") for r in resources),
            "",
        ),
        RULE,
        _row(
            "Net withdrawal",
            *(format_currency(report.resource(r).net_withdrawal, "INR") for r in resources),
            format_currency(report.totals.net_withdrawal, "INR"),
        ),
        RULE,
    ])

    settlement = report.settlement
    if settlement is None:
        lines.append("Shared expenses are settled; nobody owes anything.")
    else:
        lines.append(
            f"{settlement.debtor.value} owes {settlement.creditor.value} "
            f"{format_currency(settlement.amount, 'INR')} for expense reimbursement."
        )

    return "\n".join(lines) + "\n"


def render_invoice(invoice: Invoice) -> str:
    """Render an invoice as plain text."""
    lines = [
        f"INVOICE {invoice.invoice_number}",
        f"Date: {format_display_date(invoice.invoice_date)}",
        f"Billing period: {format_display_date(invoice.billing_period_start)}"
        f" - {format_display_date(invoice.billing_period_end)}",
        f"Bill to: {invoice.client_name}",
    ]
    if invoice.client_address:
        lines.append(f"         {invoice.client_address}")

    lines.append(RULE)
    lines.append(f"{'Date':<12}{'Resource':<10}{'Description':<20}{'Hours':>7}{'Rate':>8}{'Amount':>12}")

    for item in invoice.line_items:
        lines.append(
            f"{item.date.isoformat():<12}"
            f"{item.resource_name:<10}"
            f"{item.description[:19]:<20}"
            f"{format_hours(item.hours_worked):>7}"
            f"{format_rate(item.rate_per_hour):>8}"
            f"{format_currency(item.amount_usd, 'USD'):>12}"
        )

    lines.extend([
        RULE,
        f"Subtotal: {format_currency(invoice.subtotal_usd, 'USD')}",
        f"Conversion rate: ₹{format_rate(invoice.conversion_rate)}/$1",
        f"Total: {format_currency(invoice.total_inr, 'INR')}",
        f"Status: {invoice.status.value}",
    ])

    return "\n".join(lines) + "\n"
