import pytest
from decimal import Decimal
from sqlalchemy import select

from app.core.exceptions import CouldNotImportOrder
from app.db.models import AuditLog, ConfigValue, Quote, QuoteItem, WeeeTax
from app.schemas.order import OrderPayload
from app.services.config import XML_PATH_DEDUCT_FPT, XML_PATH_LVB_STOCK, XML_PATH_PRICE_INCLUDES_TAX
from app.services import order_import as order_import_service
from app.services.order_import import import_order, get_quote


def make_payload(store, catalog, **kwargs):
    data = {
        "channable_id": 5001,
        "channel_name": "bol",
        "store_id": store.id,
        "customer": {"email": "buyer@example.com"},
        "billing": {"country_code": "NL"},
        "shipping": {"country_code": "NL"},
        "products": [
            {"id": catalog["kettle"].id, "quantity": 2, "price": "60.50", "title": "Kettle"},
            {"id": catalog["toaster"].id, "quantity": 1, "price": "30.25", "title": "Toaster"},
        ],
    }
    data.update(kwargs)
    return OrderPayload(**data)


@pytest.mark.asyncio
async def test_import_order_persists_quote(db_session, store, catalog):
    result = await import_order(db_session, make_payload(store, catalog))

    assert result.qty == 3
    assert result.skip_qty_check is False

    quote = await get_quote(db_session, result.quote_id)
    assert quote.channable_id == 5001
    assert quote.items_qty == 3
    assert quote.customer_email == "buyer@example.com"

    prices = {item.sku: item.price for item in quote.items}
    assert prices["KETTLE-01"] == Decimal("50.0000")
    assert prices["TOASTER-01"] == Decimal("25.0000")

    audit = await db_session.execute(select(AuditLog).where(AuditLog.action == "ORDER_IMPORT"))
    assert audit.scalar_one().audit_data["qty"] == 3


@pytest.mark.asyncio
async def test_import_order_with_tax_inclusive_prices_and_fpt(db_session, store, catalog):
    db_session.add_all([
        ConfigValue(path=XML_PATH_PRICE_INCLUDES_TAX, store_id=store.id, value="1"),
        ConfigValue(path=XML_PATH_DEDUCT_FPT, store_id=0, value="1"),
        WeeeTax(entity_id=catalog["kettle"].id, country="NL", value=Decimal("0.50")),
    ])
    await db_session.commit()

    result = await import_order(db_session, make_payload(store, catalog))
    quote = await get_quote(db_session, result.quote_id)

    prices = {item.sku: item.price for item in quote.items}
    assert prices["KETTLE-01"] == Decimal("60.0000")
    assert prices["TOASTER-01"] == Decimal("30.2500")


@pytest.mark.asyncio
async def test_shipped_order_is_lvb(db_session, store, catalog):
    db_session.add(ConfigValue(path=XML_PATH_LVB_STOCK, store_id=0, value="1"))
    await db_session.commit()

    payload = make_payload(
        store,
        catalog,
        order_status="shipped",
        products=[{"id": catalog["lamp"].id, "quantity": 3, "price": "12.10", "title": "Lamp"}]
    )
    result = await import_order(db_session, payload)

    assert result.qty == 3
    assert result.skip_qty_check is True
    assert result.skip_reservation is True

    quote = await get_quote(db_session, result.quote_id)
    assert quote.is_lvb is True


@pytest.mark.asyncio
async def test_failed_import_persists_nothing(db_session, store, catalog):
    payload = make_payload(
        store,
        catalog,
        products=[
            {"id": catalog["kettle"].id, "quantity": 1, "price": "60.50", "title": "Kettle"},
            {"id": catalog["lamp"].id, "quantity": 1, "price": "12.10", "title": "Lamp"},
        ]
    )

    with pytest.raises(CouldNotImportOrder, match='Product "Lamp"'):
        await import_order(db_session, payload)

    quotes = await db_session.execute(select(Quote))
    items = await db_session.execute(select(QuoteItem))
    assert quotes.scalars().all() == []
    assert items.scalars().all() == []

    audit = await db_session.execute(select(AuditLog).where(AuditLog.action == "ORDER_IMPORT_FAILED"))
    assert "Lamp" in audit.scalar_one().audit_data["error"]


@pytest.mark.asyncio
async def test_duplicate_channable_order_rejected(db_session, store, catalog):
    await import_order(db_session, make_payload(store, catalog))

    with pytest.raises(CouldNotImportOrder, match="already imported"):
        await import_order(db_session, make_payload(store, catalog))


@pytest.mark.asyncio
async def test_unknown_store_rejected(db_session, store, catalog):
    with pytest.raises(CouldNotImportOrder, match="Store 42 not found"):
        await import_order(db_session, make_payload(store, catalog, store_id=42))


@pytest.mark.asyncio
async def test_store_is_validated_before_duplicate_check(db_session, store, catalog):
    await import_order(db_session, make_payload(store, catalog))

    with pytest.raises(CouldNotImportOrder, match="Store 42 not found"):
        await import_order(db_session, make_payload(store, catalog, store_id=42))


@pytest.mark.asyncio
async def test_concurrent_duplicate_insert_reported_as_import_error(db_session, store, catalog, monkeypatch):
    first = make_payload(store, catalog)
    second = make_payload(store, catalog)
    await import_order(db_session, first)

    async def not_imported(db, channable_id):
        return False

    monkeypatch.setattr(order_import_service, "is_imported", not_imported)

    with pytest.raises(CouldNotImportOrder, match=r"Order already imported \(Channable ID: 5001\)"):
        await import_order(db_session, second)

    quotes = await db_session.execute(select(Quote))
    assert len(quotes.scalars().all()) == 1

    audit = await db_session.execute(select(AuditLog).where(AuditLog.action == "ORDER_IMPORT_FAILED"))
    assert "already imported" in audit.scalar_one().audit_data["error"]
