from __future__ import annotations

from typing import Optional

import pandas as pd

from core.pricing import effective_threshold, shelf_price
from core.services.sales import DateLike, get_sales_by_date_range
from core.store import DataStore

SALES_COLUMNS = ["created_at", "sale_id", "lines", "units", "total_amount", "received_amount", "change_amount", "created_by"]


def sales_frame(store: DataStore, start: Optional[DateLike] = None, end: Optional[DateLike] = None) -> pd.DataFrame:
    sales = get_sales_by_date_range(store, start, end) if start and end else store.sales
    rows = [
        {
            "created_at": s.created_at,
            "sale_id": s.id,
            "lines": len(s.items),
            "units": sum(int(i.quantity) for i in s.items),
            "total_amount": round(float(s.total_amount), 2),
            "received_amount": round(float(s.received_amount), 2),
            "change_amount": round(float(s.change_amount), 2),
            "created_by": s.created_by,
        }
        for s in sales
    ]
    df = pd.DataFrame(rows, columns=SALES_COLUMNS)
    return df.sort_values("created_at", ascending=False, ignore_index=True)


def daily_totals(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=["day", "sales", "total_amount"])
    out = df.assign(day=pd.to_datetime(df["created_at"], utc=True).dt.date)
    out = out.groupby("day", as_index=False).agg(sales=("sale_id", "count"), total_amount=("total_amount", "sum"))
    return out.sort_values("day", ignore_index=True)


def invoices_frame(store: DataStore) -> pd.DataFrame:
    rows = [
        {
            "invoice_number": i.invoice_number,
            "company_code": i.company_code,
            "company": i.company_name,
            "total_amount": round(float(i.total_amount), 2),
            "paid_amount": round(float(i.paid_amount), 2),
            "remaining_amount": round(float(i.remaining_amount), 2),
            "status": i.status,
            "created_at": i.created_at,
            "delivered_at": i.delivered_at,
            "created_by": i.created_by,
        }
        for i in store.invoices
    ]
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    return df.sort_values("invoice_number", ascending=False, ignore_index=True)


def inventory_frame(store: DataStore, company_id: Optional[str] = None) -> pd.DataFrame:
    threshold = store.settings.low_stock_threshold
    products = store.products_of(company_id) if company_id else store.products
    rows = [
        {
            "code": p.code,
            "name": p.name,
            "company": p.company_name,
            "stock": int(p.stock),
            "threshold": effective_threshold(p, threshold),
            "low": int(p.stock) <= effective_threshold(p, threshold),
            "price_before_tax": p.price_before_tax,
            "price_after_tax": p.price_after_tax,
            "selling_price": p.selling_price,
            "offer_price": p.offer_price,
            "shelf_price": shelf_price(p),
        }
        for p in products
    ]
    return pd.DataFrame(rows)
