"""Payment recording helpers."""

from datetime import date, datetime

from splitledger.models.inputs import PaymentInput
from splitledger.models.records import Invoice, InvoiceStatus, Payment


def build_payment(payment_input: PaymentInput) -> Payment:
    """Create a Payment with the received amounts derived from the form."""
    return Payment(
        invoice_id=payment_input.invoice_id,
        payment_date=payment_input.payment_date,
        amount_usd_invoiced=payment_input.amount_usd_invoiced,
        bank_charges_usd=payment_input.bank_charges_usd,
        amount_usd_received=payment_input.amount_usd_received,
        conversion_rate=payment_input.conversion_rate,
        amount_inr_received=payment_input.amount_inr_received,
        notes=payment_input.notes,
    )


def mark_invoice_paid(invoice: Invoice, paid_date: date) -> Invoice:
    """Return a copy of the invoice marked Paid on paid_date."""
    return invoice.model_copy(
        update={
            "status": InvoiceStatus.PAID,
            "paid_date": paid_date,
            "updated_at": datetime.utcnow(),
        }
    )
