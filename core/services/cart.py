from __future__ import annotations

from typing import Optional, Union

from core.models import PENDING, InvoiceItem, SaleItem
from core.pricing import line_total, shelf_price
from core.services.catalog import get_product_by_code
from core.services.invoices import InvoiceDraft
from core.services.sales import SaleDraft
from core.store import DataStore

Line = Union[SaleItem, InvoiceItem]


def _check_quantity(quantity: int) -> int:
    try:
        qty = int(quantity)
    except (TypeError, ValueError):
        raise ValueError("Quantity must be a whole number.")
    if qty <= 0:
        raise ValueError("Quantity must be > 0.")
    return qty


def _merge_line(items: list, product_id: str, quantity: int) -> bool:
    for line in items:
        if line.product_id == product_id:
            line.quantity += quantity
            line.total = line_total(line.price, line.quantity)
            return True
    return False


def cart_total(items: list[Line]) -> float:
    return sum(float(i.total) for i in items)


def remove_line(items: list[Line], product_id: str) -> list[Line]:
    return [i for i in items if i.product_id != product_id]


def set_line_quantity(items: list[Line], product_id: str, quantity: int) -> list[Line]:
    if int(quantity) <= 0:
        return remove_line(items, product_id)
    for line in items:
        if line.product_id == product_id:
            line.quantity = int(quantity)
            line.total = line_total(line.price, line.quantity)
    return items


# -------------------------
# Point of sale
# -------------------------

def add_to_sale(store: DataStore, items: list[SaleItem], code: str, quantity: int = 1) -> SaleItem:
    """Scans a product code into the till; repeated codes add to the same line."""
    if not str(code).strip():
        raise ValueError("Enter a product code.")
    qty = _check_quantity(quantity)

    product = get_product_by_code(store, code)
    if product is None:
        raise ValueError("Product not found.")

    if not _merge_line(items, product.id, qty):
        price = shelf_price(product)
        items.append(
            SaleItem(
                product_id=product.id,
                product_code=product.code,
                product_name=product.name,
                quantity=qty,
                price=price,
                total=line_total(price, qty),
            )
        )
    return next(i for i in items if i.product_id == product.id)


def build_sale(items: list[SaleItem], *, received_amount: Optional[float], created_by: str) -> SaleDraft:
    if not items:
        raise ValueError("There are no items on this sale.")
    return SaleDraft(
        items=list(items),
        total_amount=cart_total(items),
        received_amount=received_amount,
        created_by=created_by,
    )


# -------------------------
# Purchase invoices
# -------------------------

def add_to_invoice(
    store: DataStore,
    items: list[InvoiceItem],
    *,
    company_id: Optional[str],
    code: str,
    quantity: int = 1,
) -> InvoiceItem:
    """Adds a product of the selected company, priced at its price after tax."""
    if not company_id:
        raise ValueError("Choose a company first.")
    if not str(code).strip():
        raise ValueError("Enter a product code.")
    qty = _check_quantity(quantity)

    product = get_product_by_code(store, code)
    if product is None or product.company_id != company_id:
        raise ValueError("Product not found in this company's list.")

    if not _merge_line(items, product.id, qty):
        items.append(
            InvoiceItem(
                product_id=product.id,
                product_code=product.code,
                product_name=product.name,
                quantity=qty,
                price=float(product.price_after_tax),
                total=line_total(product.price_after_tax, qty),
                stock=int(product.stock),
            )
        )
    return next(i for i in items if i.product_id == product.id)


def build_invoice(
    store: DataStore,
    items: list[InvoiceItem],
    *,
    company_id: Optional[str],
    created_by: str,
) -> InvoiceDraft:
    company = store.get_company(company_id) if company_id else None
    if company is None:
        raise ValueError("Choose a company first.")
    if not items:
        raise ValueError("Add at least one item to the invoice.")

    total = cart_total(items)
    return InvoiceDraft(
        company_id=company.id,
        company_code=company.code,
        company_name=company.name,
        items=list(items),
        total_amount=total,
        paid_amount=0.0,
        remaining_amount=total,
        payments=[],
        status=PENDING,
        created_by=created_by,
    )
