from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from core.models import PAID, PENDING, Invoice, InvoiceItem, Payment
from core.pricing import balance, next_invoice_number, status_after_delivery, status_after_payment
from core.services.stock import update_stock
from core.store import DataStore

logger = logging.getLogger(__name__)


@dataclass
class InvoiceDraft:
    company_id: str
    company_code: str
    company_name: str
    items: list[InvoiceItem] = field(default_factory=list)
    total_amount: float = 0.0
    paid_amount: float = 0.0
    remaining_amount: float = 0.0
    payments: list[Payment] = field(default_factory=list)
    status: str = PENDING
    created_by: str = ""


def add_invoice(store: DataStore, draft: InvoiceDraft) -> Invoice:
    """
    Numbering is max(existing) + 1, starting at 1000. Status comes from the
    draft as given.
    """
    invoice = Invoice(
        id=store.next_id(),
        invoice_number=next_invoice_number(i.invoice_number for i in store.invoices),
        company_id=draft.company_id,
        company_code=draft.company_code,
        company_name=draft.company_name,
        items=list(draft.items),
        total_amount=float(draft.total_amount),
        paid_amount=float(draft.paid_amount),
        remaining_amount=float(draft.remaining_amount),
        payments=list(draft.payments),
        status=draft.status,
        created_at=store.now(),
        created_by=draft.created_by,
    )
    store.invoices.append(invoice)
    store.persist("invoices")
    logger.info("Invoice #%d created for %s (total %.2f)", invoice.invoice_number, invoice.company_name, invoice.total_amount)
    return invoice


def update_invoice(store: DataStore, invoice_id: str, patch: dict) -> Optional[Invoice]:
    invoice = store.get_invoice(invoice_id)
    if invoice is None:
        return None
    invoice.merge(patch)
    store.persist("invoices")
    return invoice


def add_payment(store: DataStore, invoice_id: str, amount: float) -> Optional[Invoice]:
    # Amount is not validated: zero, negative and overpayments are all recorded.
    invoice = store.get_invoice(invoice_id)
    if invoice is None:
        logger.debug("Payment for unknown invoice %s ignored", invoice_id)
        return None

    previous_remaining = invoice.remaining_amount
    invoice.payments.append(Payment(id=store.next_id(), amount=float(amount), date=store.now()))
    invoice.paid_amount, invoice.remaining_amount = balance(
        invoice.total_amount, (p.amount for p in invoice.payments)
    )
    invoice.status = status_after_payment(invoice.status, invoice.remaining_amount, previous_remaining)
    store.persist("invoices")
    logger.info(
        "Payment %.2f on invoice #%d; remaining %.2f (%s)",
        float(amount),
        invoice.invoice_number,
        invoice.remaining_amount,
        invoice.status,
    )
    return invoice


def confirm_delivery(store: DataStore, invoice_id: str) -> Optional[Invoice]:
    """
    Goods received: stock of each line product goes up by its quantity and the
    invoice moves to delivered/partial. Confirming twice does nothing.
    """
    invoice = store.get_invoice(invoice_id)
    if invoice is None or invoice.delivered_at:
        return None

    for item in invoice.items:
        product = store.get_product(item.product_id)
        if product is not None:
            update_stock(store, product.id, product.stock + int(item.quantity))

    invoice.status = status_after_delivery(invoice.status, invoice.paid_amount)
    invoice.delivered_at = store.now()
    store.persist("invoices")
    logger.info("Invoice #%d delivered (%s)", invoice.invoice_number, invoice.status)
    return invoice


def open_invoices(store: DataStore) -> list[Invoice]:
    return [i for i in store.invoices if i.status != PAID]


def search_invoices(store: DataStore, text: str) -> list[Invoice]:
    needle = str(text).strip().lower()
    if not needle:
        return list(store.invoices)
    return [
        i
        for i in store.invoices
        if needle in i.company_name.lower()
        or needle in i.company_code
        or needle in str(i.invoice_number)
        or any(needle in item.product_name.lower() for item in i.items)
    ]
