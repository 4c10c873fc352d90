from __future__ import annotations

from typing import Optional

from core.models import PriceList, Product
from core.store import DataStore


def add_price_list(store: DataStore, *, company_id: str, company_name: str, products: list[Product]) -> PriceList:
    now = store.now()
    pl = PriceList(
        id=store.next_id(),
        company_id=company_id,
        company_name=company_name,
        products=[Product.from_dict(p.to_dict()) for p in products],
        created_at=now,
        updated_at=now,
    )
    store.price_lists.append(pl)
    store.persist("priceLists")
    return pl


def snapshot_company(store: DataStore, company_id: str) -> Optional[PriceList]:
    """Price list from the company's current products."""
    company = store.get_company(company_id)
    if company is None:
        return None
    return add_price_list(
        store,
        company_id=company.id,
        company_name=company.name,
        products=store.products_of(company.id),
    )


def update_price_list(store: DataStore, price_list_id: str, patch: dict) -> Optional[PriceList]:
    pl = store.get_price_list(price_list_id)
    if pl is None:
        return None
    pl.merge(patch)
    if "products" in patch:
        pl.products = [Product.from_dict(p.to_dict()) for p in pl.products]
    pl.updated_at = store.now()
    store.persist("priceLists")
    return pl


def delete_price_list(store: DataStore, price_list_id: str) -> None:
    store.price_lists = [pl for pl in store.price_lists if pl.id != price_list_id]
    store.persist("priceLists")
