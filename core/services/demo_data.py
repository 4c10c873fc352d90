from __future__ import annotations

import random

from core.services.auth import ensure_default_admin
from core.services.cart import add_to_invoice, add_to_sale, build_invoice, build_sale
from core.services.catalog import ProductInput, add_company, add_product
from core.services.invoices import add_invoice, add_payment, confirm_delivery
from core.services.sales import add_sale
from core.store import DataStore

DEFAULT_COMPANIES = {
    "Nile Foods": ["Rice 1kg", "Pasta 400g", "Lentils 500g", "Sugar 1kg"],
    "Delta Dairy": ["Milk 1L", "Yogurt Cup", "White Cheese 250g"],
    "Cairo Cleaners": ["Dish Soap", "Laundry Powder 2kg", "Bleach 1L"],
}


def upsert_reference_data(store: DataStore) -> None:
    ensure_default_admin(store.storage)
    if store.storage.get("settings") is None:
        store.persist("settings")


def wipe_all(store: DataStore) -> None:
    # Keeps users and the session entry so nobody is logged out.
    store.companies, store.products, store.invoices = [], [], []
    store.sales, store.notifications, store.price_lists = [], [], []
    store.persist("companies", "products", "invoices", "sales", "notifications", "priceLists")


def load_demo_data(store: DataStore, *, seed: int = 7, created_by: str = "Administrator") -> None:
    random.seed(seed)
    upsert_reference_data(store)

    for company_name, product_names in DEFAULT_COMPANIES.items():
        company = add_company(store, name=company_name)
        for name in product_names:
            before_tax = round(random.uniform(8, 120), 2)
            add_product(
                store,
                ProductInput(
                    name=name,
                    company_id=company.id,
                    price_before_tax=before_tax,
                    price_after_tax=round(before_tax * 1.14, 2),
                    stock=random.randint(0, 40),
                    low_stock_threshold=random.choice([0, 5, 15]),
                ),
            )

    # One purchase invoice per company; the first is delivered and part-paid.
    for n, company in enumerate(store.companies):
        items = []
        for p in store.products_of(company.id)[:2]:
            add_to_invoice(store, items, company_id=company.id, code=p.code, quantity=random.randint(6, 24))
        invoice = add_invoice(store, build_invoice(store, items, company_id=company.id, created_by=created_by))
        if n == 0:
            add_payment(store, invoice.id, round(invoice.total_amount / 2, 2))
            confirm_delivery(store, invoice.id)

    # A few till sales
    for _ in range(4):
        items = []
        for p in random.sample(store.products, 3):
            add_to_sale(store, items, p.code, random.randint(1, 3))
        draft = build_sale(items, received_amount=None, created_by=created_by)
        add_sale(store, draft)
