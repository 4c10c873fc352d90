"""
Pure derivations shared by every mutation path.

Nothing here touches the store: callers pass values in and write results back,
so selling price and invoice status come out the same wherever they are set.
"""
from __future__ import annotations

from typing import Iterable, Optional

from core.models import DELIVERED, PAID, PARTIAL, Product
from core.utils import round2

FIRST_COMPANY_CODE = 10
INVOICE_NUMBER_SEED = 999


def selling_price(price_after_tax: float, margin_pct: float) -> float:
    return round2(float(price_after_tax) * (1 + float(margin_pct) / 100))


def company_code(existing_count: int) -> str:
    return str(FIRST_COMPANY_CODE + int(existing_count))


def product_code(company_id: str, company_product_count: int) -> str:
    return f"{company_id}-{int(company_product_count) + 1:04d}"


def next_invoice_number(numbers: Iterable[int]) -> int:
    return max((int(n) for n in numbers), default=INVOICE_NUMBER_SEED) + 1


def balance(total_amount: float, amounts: Iterable[float]) -> tuple[float, float]:
    """Returns (paid, remaining). Remaining may go negative on overpayment."""
    paid = sum(float(a) for a in amounts)
    return paid, float(total_amount) - paid


def status_after_payment(current: str, remaining: float, previous_remaining: float) -> str:
    # `paid` is terminal once the balance has been cleared.
    if remaining <= 0 or (current == PAID and previous_remaining <= 0):
        return PAID
    return PARTIAL


def status_after_delivery(current: str, paid_amount: float) -> str:
    if current == PAID:
        return PAID
    return PARTIAL if paid_amount > 0 else DELIVERED


def change_due(total_amount: float, received_amount: float) -> float:
    return max(0.0, float(received_amount) - float(total_amount))


def line_total(price: float, quantity: int) -> float:
    return float(price) * int(quantity)


def effective_threshold(product: Product, global_threshold: int) -> int:
    # A zero/unset per-product threshold falls back to the global one.
    return int(product.low_stock_threshold or global_threshold)


def is_low_stock(product: Product, global_threshold: int) -> bool:
    return int(product.stock) <= effective_threshold(product, global_threshold)


def shelf_price(product: Product) -> float:
    """Price charged at the till: the offer price when one is set."""
    offer: Optional[float] = product.offer_price
    return float(offer) if offer else float(product.selling_price)
