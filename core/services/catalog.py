from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from core.models import Company, Product
from core.pricing import company_code, product_code, selling_price
from core.store import DataStore

logger = logging.getLogger(__name__)


@dataclass
class ProductInput:
    name: str
    company_id: str
    price_before_tax: float
    price_after_tax: float
    stock: int = 0
    low_stock_threshold: int = 0
    offer_price: Optional[float] = None


# -------------------------
# Companies
# -------------------------

def add_company(store: DataStore, *, name: str) -> Company:
    company = Company(
        id=store.next_id(),
        code=company_code(len(store.companies)),
        name=str(name).strip(),
        created_at=store.now(),
    )
    store.companies.append(company)
    store.persist("companies")
    logger.info("Company %s added with code %s", company.name, company.code)
    return company


def update_company(store: DataStore, company_id: str, patch: dict) -> Optional[Company]:
    company = store.get_company(company_id)
    if company is None:
        return None
    company.merge(patch)
    store.persist("companies")
    return company


def delete_company(store: DataStore, company_id: str) -> None:
    before = len(store.products)
    store.companies = [c for c in store.companies if c.id != company_id]
    store.products = [p for p in store.products if p.company_id != company_id]
    store.persist("companies", "products")
    logger.info("Company %s deleted (%d products removed)", company_id, before - len(store.products))


# -------------------------
# Products
# -------------------------

def add_product(store: DataStore, data: ProductInput) -> Product:
    company = store.get_company(data.company_id)
    product = Product(
        id=store.next_id(),
        code=product_code(data.company_id, len(store.products_of(data.company_id))),
        name=str(data.name).strip(),
        company_id=data.company_id,
        company_name=company.name if company else "",
        price_before_tax=float(data.price_before_tax),
        price_after_tax=float(data.price_after_tax),
        selling_price=selling_price(data.price_after_tax, store.settings.profit_margin),
        offer_price=data.offer_price,
        stock=max(0, int(data.stock)),
        low_stock_threshold=int(data.low_stock_threshold),
    )
    store.products.append(product)
    store.persist("products")
    logger.info("Product %s added as %s", product.name, product.code)
    return product


def update_product(store: DataStore, product_id: str, patch: dict) -> Optional[Product]:
    """
    Partial merge. Writing price_after_tax re-derives selling_price from the
    current global margin, whatever selling_price the patch carried.
    """
    product = store.get_product(product_id)
    if product is None:
        return None
    product.merge(patch)
    if "price_after_tax" in patch:
        product.selling_price = selling_price(product.price_after_tax, store.settings.profit_margin)
    store.persist("products")
    return product


def delete_product(store: DataStore, product_id: str) -> None:
    store.products = [p for p in store.products if p.id != product_id]
    store.persist("products")


def get_product_by_code(store: DataStore, code: str) -> Optional[Product]:
    code = str(code).strip()
    return next((p for p in store.products if p.code == code), None)


def set_offer_price(store: DataStore, product_id: str, offer_price: Optional[float]) -> Optional[Product]:
    price = float(offer_price) if offer_price else None
    return update_product(store, product_id, {"offer_price": price})

