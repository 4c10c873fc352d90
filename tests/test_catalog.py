from core.services.catalog import (
    add_company,
    delete_company,
    delete_product,
    get_product_by_code,
    set_offer_price,
    update_company,
    update_product,
)
from core.services.settings import update_settings


def test_company_codes_follow_count(store):
    a = add_company(store, name="A")
    b = add_company(store, name="B")
    assert (a.code, b.code) == ("10", "11")
    assert a.created_at == "2026-03-02T09:30:00.000+00:00"
    assert a.id != b.id


def test_company_codes_can_repeat_after_delete(store):
    add_company(store, name="A")
    b = add_company(store, name="B")
    delete_company(store, store.companies[0].id)
    c = add_company(store, name="C")
    assert c.code == b.code == "11"


def test_update_company_merges(store, company):
    update_company(store, company.id, {"name": "Nile Foods Co", "id": "hijack"})
    assert store.companies[0].name == "Nile Foods Co"
    assert store.companies[0].id == company.id
    assert update_company(store, "missing", {"name": "x"}) is None


def test_delete_company_cascades_products(store, company, make_product):
    other = add_company(store, name="Other")
    make_product("Rice")
    make_product("Pasta")
    keep = make_product("Soap", company_id=other.id)

    delete_company(store, company.id)

    assert [c.id for c in store.companies] == [other.id]
    assert [p.id for p in store.products] == [keep.id]


def test_product_code_and_selling_price(store, company, make_product):
    p1 = make_product("Rice", price_after_tax=100.0)
    p2 = make_product("Pasta", price_after_tax=2.5)
    assert p1.code == f"{company.id}-0001"
    assert p2.code == f"{company.id}-0002"
    assert p1.selling_price == 114.0
    assert p2.selling_price == 2.85
    assert p1.company_name == "Nile Foods"


def test_update_price_uses_current_margin(store, make_product):
    p = make_product(price_after_tax=100.0)
    update_settings(store, {"profit_margin": 20})

    # no price in the patch: selling price untouched
    update_product(store, p.id, {"name": "Rice 5kg"})
    assert p.selling_price == 114.0

    update_product(store, p.id, {"price_after_tax": 50.0, "selling_price": 1.0})
    assert p.price_after_tax == 50.0
    assert p.selling_price == 60.0


def test_update_unknown_product_is_noop(store):
    assert update_product(store, "nope", {"stock": 3}) is None


def test_lookup_by_code(store, make_product):
    p = make_product()
    assert get_product_by_code(store, f"  {p.code} ") is p
    assert get_product_by_code(store, "0000-0000") is None


def test_offer_price_set_and_clear(store, make_product):
    p = make_product()
    set_offer_price(store, p.id, 99.0)
    assert p.offer_price == 99.0
    set_offer_price(store, p.id, 0)
    assert p.offer_price is None


def test_delete_product(store, make_product):
    p = make_product()
    delete_product(store, p.id)
    assert store.products == []
