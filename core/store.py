from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Callable, Optional

from core.models import (
    AppSettings,
    Company,
    Invoice,
    Notification,
    PriceList,
    Product,
    Sale,
)
from core.utils import utc_now

logger = logging.getLogger(__name__)

# storage key -> (attribute, record type)
COLLECTIONS: dict[str, tuple[str, type]] = {
    "companies": ("companies", Company),
    "products": ("products", Product),
    "invoices": ("invoices", Invoice),
    "sales": ("sales", Sale),
    "notifications": ("notifications", Notification),
    "priceLists": ("price_lists", PriceList),
}
SETTINGS_KEY = "settings"


class DataStore:
    """
    Owns every collection for one browser session.

    Service functions in core.services.* are the only code that mutates it;
    each one calls `persist(...)` with the keys it touched.
    """

    def __init__(self, storage, *, clock: Optional[Callable[[], datetime]] = None):
        self.storage = storage
        self.clock = clock or utc_now
        self.companies: list[Company] = []
        self.products: list[Product] = []
        self.invoices: list[Invoice] = []
        self.sales: list[Sale] = []
        self.notifications: list[Notification] = []
        self.price_lists: list[PriceList] = []
        self.settings = AppSettings()
        self._last_id = 0

    @classmethod
    def load(cls, storage, *, clock: Optional[Callable[[], datetime]] = None) -> "DataStore":
        store = cls(storage, clock=clock)
        for key, (attr, record_type) in COLLECTIONS.items():
            raw = storage.get(key, [])
            if not isinstance(raw, list):
                logger.warning("Expected a list under %r, got %s; starting empty", key, type(raw).__name__)
                raw = []
            setattr(store, attr, [record_type.from_dict(r) for r in raw])

        raw_settings = storage.get(SETTINGS_KEY, {})
        store.settings = AppSettings.from_dict(raw_settings if isinstance(raw_settings, dict) else {})

        store._last_id = max((int(i) for i in store._all_ids() if str(i).isdigit()), default=0)
        return store

    def _all_ids(self):
        for attr, _ in COLLECTIONS.values():
            for r in getattr(self, attr):
                yield r.id

    # -------------------------
    # Collaborators
    # -------------------------

    def now(self) -> str:
        return self.clock().isoformat(timespec="milliseconds")

    def next_id(self) -> str:
        ms = int(self.clock().timestamp() * 1000)
        self._last_id = max(ms, self._last_id + 1)
        return str(self._last_id)

    def persist(self, *keys: str) -> None:
        for key in keys:
            if key == SETTINGS_KEY:
                payload = self.settings.to_dict()
            else:
                attr, _ = COLLECTIONS[key]
                payload = [r.to_dict() for r in getattr(self, attr)]
            try:
                self.storage.set(key, payload)
            except sqlite3.Error:
                # The in-memory collection stays the source of truth for this run.
                logger.exception("Failed to persist %r", key)

    # -------------------------
    # Lookups
    # -------------------------

    def get_company(self, company_id: str) -> Optional[Company]:
        return next((c for c in self.companies if c.id == company_id), None)

    def get_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def get_invoice(self, invoice_id: str) -> Optional[Invoice]:
        return next((i for i in self.invoices if i.id == invoice_id), None)

    def get_notification(self, notification_id: str) -> Optional[Notification]:
        return next((n for n in self.notifications if n.id == notification_id), None)

    def get_price_list(self, price_list_id: str) -> Optional[PriceList]:
        return next((pl for pl in self.price_lists if pl.id == price_list_id), None)

    def products_of(self, company_id: str) -> list[Product]:
        return [p for p in self.products if p.company_id == company_id]
