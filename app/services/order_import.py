import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from decimal import Decimal
from typing import Optional

from app.core.exceptions import CouldNotImportOrder
from app.db.models import Store, Quote, QuoteItem, AuditLog
from app.schemas.order import OrderPayload, ImportResult
from app.services.cart import Cart
from app.services.catalog import SqlProductRepository, SqlStockRegistry, SqlTaxCalculation, SqlWeeeTaxLookup
from app.services.config import StoreConfigProvider
from app.services.contracts import StoreContext
from app.services.order_items import OrderItemImporter

logger = logging.getLogger(__name__)

PRICE_PRECISION = Decimal("0.0001")


def build_importer(db: AsyncSession, store_id: int) -> OrderItemImporter:
    config = StoreConfigProvider(db)
    return OrderItemImporter(
        config=config,
        products=SqlProductRepository(db),
        stock_registry=SqlStockRegistry(db, config, store_id),
        tax_rates=SqlTaxCalculation(db),
        surcharges=SqlWeeeTaxLookup(db)
    )


async def get_store(db: AsyncSession, store_id: int) -> StoreContext:
    result = await db.execute(select(Store).where(Store.id == store_id))
    store = result.scalar_one_or_none()

    if not store or not store.is_active:
        raise CouldNotImportOrder(f"Store {store_id} not found or not active")

    return StoreContext(id=store.id, code=store.code, country_id=store.country_id)


async def is_imported(db: AsyncSession, channable_id: Optional[int]) -> bool:
    if channable_id is None:
        return False
    existing = await db.execute(select(Quote.id).where(Quote.channable_id == channable_id))
    return existing.scalar_one_or_none() is not None


async def import_order(db: AsyncSession, payload: OrderPayload) -> ImportResult:
    store = await get_store(db, payload.store_id)

    if await is_imported(db, payload.channable_id):
        raise CouldNotImportOrder(f"Order already imported (Channable ID: {payload.channable_id})")

    cart = Cart(
        store_id=store.id,
        billing_country=payload.billing.country_code,
        shipping_country=payload.shipping.country_code,
        customer_email=payload.customer.email
    )

    importer = build_importer(db, store.id)
    try:
        qty = await importer.execute(cart, payload, store, lvb_order=payload.is_lvb)
    except CouldNotImportOrder as e:
        await _log_failure(db, payload, str(e))
        raise

    try:
        quote = await _persist_quote(db, cart, payload, qty)
    except IntegrityError:
        message = f"Order already imported (Channable ID: {payload.channable_id})"
        await _log_failure(db, payload, message)
        raise CouldNotImportOrder(message)

    logger.info(f"Imported Channable order {payload.channable_id} into quote {quote.id}: qty={qty}")

    return ImportResult(
        quote_id=quote.id,
        channable_id=payload.channable_id,
        qty=qty,
        skip_qty_check=cart.skip_qty_check,
        skip_reservation=cart.skip_reservation
    )


async def _persist_quote(db: AsyncSession, cart: Cart, payload: OrderPayload, qty: int) -> Quote:
    quote = Quote(
        channable_id=payload.channable_id,
        store_id=cart.store_id,
        channel_name=payload.channel_name,
        customer_email=cart.customer_email,
        billing_country=cart.billing_country,
        shipping_country=cart.shipping_country,
        is_lvb=payload.is_lvb,
        skip_qty_check=cart.skip_qty_check,
        skip_reservation=cart.skip_reservation,
        items_qty=qty
    )
    db.add(quote)
    await db.flush()

    for line in cart.lines:
        db.add(QuoteItem(
            quote_id=quote.id,
            product_id=line.product_id,
            sku=line.sku,
            name=line.name,
            qty=line.qty,
            price=line.price.quantize(PRICE_PRECISION),
            original_custom_price=_quantize(line.original_custom_price)
        ))

    audit_log = AuditLog(
        action="ORDER_IMPORT",
        entity="quote",
        entity_id=quote.id,
        audit_data={
            "channable_id": payload.channable_id,
            "qty": qty,
            "lvb": payload.is_lvb
        }
    )
    db.add(audit_log)
    await db.commit()
    return quote


async def get_quote(db: AsyncSession, quote_id: int) -> Optional[Quote]:
    result = await db.execute(
        select(Quote).options(selectinload(Quote.items)).where(Quote.id == quote_id)
    )
    return result.scalar_one_or_none()


def _quantize(value: Optional[Decimal]) -> Optional[Decimal]:
    return value.quantize(PRICE_PRECISION) if value is not None else None


async def _log_failure(db: AsyncSession, payload: OrderPayload, message: str) -> None:
    await db.rollback()
    db.add(AuditLog(
        action="ORDER_IMPORT_FAILED",
        entity="quote",
        audit_data={"channable_id": payload.channable_id, "error": message}
    ))
    await db.commit()
