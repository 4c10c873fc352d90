from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Optional

# Invoice status
PENDING = "pending"
DELIVERED = "delivered"
PARTIAL = "partial"
PAID = "paid"

# Notification kinds
LOW_STOCK = "low_stock"
ORDER = "order"
PAYMENT = "payment"

# User roles
ROLES = ("admin", "manager", "employee")


def _known(cls, data: dict) -> dict:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in dict(data).items() if k in names}


class Record:
    """Dataclass mixin: JSON-friendly dicts in and out of storage."""

    # list field -> record type of its elements
    _nested: dict = {}

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def _coerce(cls, data: dict) -> dict:
        d = _known(cls, data)
        for name, record_type in cls._nested.items():
            if name in d:
                d[name] = [record_type.from_dict(v) if isinstance(v, dict) else v for v in d[name] or []]
        return d

    @classmethod
    def from_dict(cls, data: dict):
        return cls(**cls._coerce(data))

    def merge(self, patch: dict) -> list[str]:
        """Partial update in place; unknown keys and `id` are ignored. Returns the fields written."""
        written = []
        for k, v in type(self)._coerce(patch).items():
            if k == "id":
                continue
            setattr(self, k, v)
            written.append(k)
        return written


@dataclass
class Company(Record):
    id: str
    code: str
    name: str
    created_at: str


@dataclass
class Product(Record):
    id: str
    code: str
    name: str
    company_id: str
    company_name: str = ""
    price_before_tax: float = 0.0
    price_after_tax: float = 0.0
    selling_price: float = 0.0
    offer_price: Optional[float] = None
    stock: int = 0
    low_stock_threshold: int = 0


@dataclass
class InvoiceItem(Record):
    product_id: str
    product_code: str
    product_name: str
    quantity: int
    price: float
    total: float
    stock: int = 0


@dataclass
class Payment(Record):
    id: str
    amount: float
    date: str


@dataclass
class Invoice(Record):
    id: str
    invoice_number: int
    company_id: str
    company_code: str
    company_name: str
    items: list[InvoiceItem] = field(default_factory=list)
    total_amount: float = 0.0
    paid_amount: float = 0.0
    remaining_amount: float = 0.0
    payments: list[Payment] = field(default_factory=list)
    status: str = PENDING
    created_at: str = ""
    created_by: str = ""
    delivered_at: Optional[str] = None

    _nested = {"items": InvoiceItem, "payments": Payment}


@dataclass
class SaleItem(Record):
    product_id: str
    product_code: str
    product_name: str
    quantity: int
    price: float
    total: float


@dataclass
class Sale(Record):
    id: str
    items: list[SaleItem] = field(default_factory=list)
    total_amount: float = 0.0
    received_amount: float = 0.0
    change_amount: float = 0.0
    created_at: str = ""
    created_by: str = ""

    _nested = {"items": SaleItem}


@dataclass
class Notification(Record):
    id: str
    kind: str
    title: str
    message: str
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    product_ids: list[str] = field(default_factory=list)
    read: bool = False
    created_at: str = ""


@dataclass
class PriceList(Record):
    id: str
    company_id: str
    company_name: str
    products: list[Product] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    _nested = {"products": Product}


DEFAULT_SIDEBAR_LABELS = {
    "daily_sales": "Daily Sales",
    "create_invoice": "Create Invoice",
    "pending_orders": "Pending Orders",
    "price_lists": "Company Price Lists",
    "inventory": "Inventory",
    "sales_record": "Sales Record",
    "offer_prices": "Offer Prices",
    "shelf_prices": "Shelf Prices",
    "settings": "Settings",
}


@dataclass
class AppSettings(Record):
    app_name: str = "Market Pro"
    profit_margin: float = 14.0        # percent
    low_stock_threshold: int = 10
    sidebar_labels: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SIDEBAR_LABELS))


@dataclass
class User(Record):
    id: str
    username: str
    password: str
    role: str = "employee"
    name: str = ""
    phone: str = ""
    address: str = ""
    start_date: str = ""
    permissions: list[str] = field(default_factory=list)
