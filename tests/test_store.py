import logging

from core.db import KeyValueStorage
from core.models import InvoiceItem
from core.services.catalog import add_company
from core.services.invoices import InvoiceDraft, add_invoice, add_payment
from core.services.settings import update_settings
from core.store import DataStore


def test_round_trip_through_storage(storage, clock, store, company, make_product):
    p = make_product(stock=12)
    inv = add_invoice(
        store,
        InvoiceDraft(
            company_id=company.id,
            company_code=company.code,
            company_name=company.name,
            items=[InvoiceItem(p.id, p.code, p.name, 2, 100.0, 200.0, 12)],
            total_amount=200.0,
            remaining_amount=200.0,
        ),
    )
    add_payment(store, inv.id, 75.0)
    update_settings(store, {"profit_margin": 20})

    reloaded = DataStore.load(storage, clock=clock)

    assert reloaded.companies == store.companies
    assert reloaded.products == store.products
    again = reloaded.get_invoice(inv.id)
    assert again.items[0].product_code == p.code
    assert again.payments[0].amount == 75.0
    assert again.remaining_amount == 125.0
    assert reloaded.settings.profit_margin == 20


def test_keys_are_prefixed(storage, store, company):
    assert "companies" in storage.keys()
    raw = storage.conn.execute("SELECT key FROM kv").fetchall()
    assert all(r["key"].startswith("marketpro_") for r in raw)


def test_ids_stay_unique_under_a_frozen_clock(store):
    ids = {store.next_id() for _ in range(50)}
    assert len(ids) == 50


def test_ids_continue_after_reload(storage, clock, store):
    a = add_company(store, name="A")
    reloaded = DataStore.load(storage, clock=clock)
    b = add_company(reloaded, name="B")
    assert int(b.id) > int(a.id)


def test_invalid_json_falls_back_to_default(storage, clock, caplog):
    storage.conn.execute(
        "INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)",
        ("marketpro_companies", "{not json", "2026-01-01T00:00:00+00:00"),
    )
    with caplog.at_level(logging.WARNING):
        store = DataStore.load(storage, clock=clock)
    assert store.companies == []
    assert "not valid JSON" in caplog.text


def test_defaults_when_storage_empty(store):
    assert store.settings.profit_margin == 14.0
    assert store.settings.low_stock_threshold == 10
    assert store.invoices == []


def test_failed_write_is_logged_not_raised(clock, caplog):
    storage = KeyValueStorage.open(":memory:")
    store = DataStore.load(storage, clock=clock)
    storage.conn.close()

    with caplog.at_level(logging.ERROR):
        company = add_company(store, name="Offline")

    assert store.companies == [company]
    assert "Failed to persist 'companies'" in caplog.text
