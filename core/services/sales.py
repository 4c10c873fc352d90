from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union

from core.models import Sale, SaleItem
from core.pricing import change_due
from core.services.stock import update_stock
from core.store import DataStore

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str]


@dataclass
class SaleDraft:
    items: list[SaleItem] = field(default_factory=list)
    total_amount: float = 0.0
    received_amount: Optional[float] = None   # None/0 -> exact amount tendered
    created_by: str = ""


def add_sale(store: DataStore, draft: SaleDraft) -> Sale:
    """
    Records the sale, then takes each line's quantity off its product's stock.
    Overselling clamps at zero; lines whose product no longer exists are skipped.
    """
    total = float(draft.total_amount)
    received = float(draft.received_amount) if draft.received_amount else total

    sale = Sale(
        id=store.next_id(),
        items=list(draft.items),
        total_amount=total,
        received_amount=received,
        change_amount=change_due(total, received),
        created_at=store.now(),
        created_by=draft.created_by,
    )
    store.sales.append(sale)
    store.persist("sales")

    for item in sale.items:
        product = store.get_product(item.product_id)
        if product is None:
            logger.warning("Sale %s references unknown product %s; stock untouched", sale.id, item.product_id)
            continue
        update_stock(store, product.id, product.stock - int(item.quantity))

    logger.info("Sale %s recorded: %d line(s), total %.2f", sale.id, len(sale.items), total)
    return sale


def _as_date(v: DateLike) -> date:
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    return datetime.fromisoformat(str(v)).date()


def get_sales_by_date_range(store: DataStore, start: DateLike, end: DateLike) -> list[Sale]:
    """Sales whose day falls within [start, end], both ends inclusive."""
    lo, hi = _as_date(start), _as_date(end)
    return [s for s in store.sales if lo <= _as_date(s.created_at) <= hi]
