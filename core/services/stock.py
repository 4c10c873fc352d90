from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from core.models import LOW_STOCK, Notification
from core.pricing import is_low_stock
from core.store import DataStore

logger = logging.getLogger(__name__)


@dataclass
class NotificationInput:
    kind: str
    title: str
    message: str
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    product_ids: list[str] = field(default_factory=list)
    read: bool = False


def get_stock(store: DataStore, product_id: str) -> int:
    product = store.get_product(product_id)
    return int(product.stock) if product else 0


def update_stock(store: DataStore, product_id: str, quantity: int) -> Optional[int]:
    """Sets stock (floored at 0), then re-runs the low-stock scan."""
    product = store.get_product(product_id)
    if product is None:
        return None
    product.stock = max(0, int(quantity))
    store.persist("products")
    check_low_stock(store)
    return product.stock


def add_notification(store: DataStore, data: NotificationInput) -> Notification:
    n = Notification(
        id=store.next_id(),
        kind=data.kind,
        title=data.title,
        message=data.message,
        company_id=data.company_id,
        company_name=data.company_name,
        product_ids=list(data.product_ids),
        read=bool(data.read),
        created_at=store.now(),
    )
    # Newest first
    store.notifications.insert(0, n)
    store.persist("notifications")
    return n


def mark_notification_read(store: DataStore, notification_id: str) -> None:
    n = store.get_notification(notification_id)
    if n is None:
        return
    n.read = True
    store.persist("notifications")


def unread_notifications(store: DataStore) -> list[Notification]:
    return [n for n in store.notifications if not n.read]


def _has_unread_low_stock(store: DataStore, product_id: str) -> bool:
    return any(
        n.kind == LOW_STOCK and not n.read and product_id in n.product_ids
        for n in store.notifications
    )


def check_low_stock(store: DataStore) -> list[Notification]:
    """
    One low_stock notification per product at or below its threshold, unless an
    unread one already points at that product. A read notification no longer
    suppresses, so the next breach alerts again.
    """
    created: list[Notification] = []
    for product in store.products:
        if not is_low_stock(product, store.settings.low_stock_threshold):
            continue
        if _has_unread_low_stock(store, product.id):
            continue
        created.append(
            add_notification(
                store,
                NotificationInput(
                    kind=LOW_STOCK,
                    title="Low stock",
                    message=f"{product.name} from {product.company_name} reached its minimum stock ({product.stock}).",
                    company_id=product.company_id,
                    company_name=product.company_name,
                    product_ids=[product.id],
                ),
            )
        )
    if created:
        logger.info("Low-stock alerts raised for %d product(s)", len(created))
    return created
