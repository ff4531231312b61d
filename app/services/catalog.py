import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, inspect
from decimal import Decimal
from typing import Optional

from app.core.config import settings
from app.core.exceptions import NoSuchEntityError
from app.db.models import Product, StockItem as StockItemModel, TaxRate, WeeeTax
from app.services.config import StoreConfigProvider
from app.services.contracts import CatalogProduct, StockItem, StoreContext

logger = logging.getLogger(__name__)


class SqlProductRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, product_id: int) -> CatalogProduct:
        result = await self.db.execute(
            select(Product, StockItemModel)
            .select_from(Product)
            .outerjoin(StockItemModel, StockItemModel.product_id == Product.id)
            .where(Product.id == product_id)
        )
        row = result.first()

        if not row:
            raise NoSuchEntityError(entity_id=product_id)

        product, stock = row
        is_in_stock = stock.is_in_stock if stock else False
        manages_stock = stock.manage_stock if stock else True

        return CatalogProduct(
            id=product.id,
            sku=product.sku,
            name=product.name,
            type_id=product.type_id,
            tax_class_id=product.tax_class_id,
            price=Decimal(product.price),
            final_price=Decimal(product.price),
            is_in_stock=is_in_stock,
            is_salable=product.is_enabled and (is_in_stock or not manages_stock)
        )


class SqlStockRegistry:
    """Loads stock items as detached records; changes to them are never saved."""

    def __init__(self, db: AsyncSession, config: StoreConfigProvider, store_id: int):
        self.db = db
        self.config = config
        self.store_id = store_id

    async def get_stock_item(self, product_id: int) -> StockItem:
        result = await self.db.execute(
            select(StockItemModel).where(StockItemModel.product_id == product_id)
        )
        stock = result.scalar_one_or_none()
        config_backorders = await self.config.config_backorders(self.store_id)

        if not stock:
            return StockItem(product_id=product_id, is_in_stock=False, config_backorders=config_backorders)

        return StockItem(
            product_id=product_id,
            qty=Decimal(stock.qty),
            is_in_stock=stock.is_in_stock,
            manage_stock=stock.manage_stock,
            use_config_backorders=stock.use_config_backorders,
            backorders=stock.backorders,
            config_backorders=config_backorders
        )


class SqlTaxCalculation:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_rate(self, tax_class_id: Optional[int], cart, store: StoreContext) -> Decimal:
        if tax_class_id is None:
            return Decimal("0")

        country_id = cart.shipping_country or cart.billing_country or store.country_id or settings.DEFAULT_COUNTRY
        result = await self.db.execute(
            select(TaxRate.rate)
            .where(TaxRate.tax_class_id == tax_class_id, TaxRate.country_id == country_id)
            .order_by(TaxRate.id)
            .limit(1)
        )
        rate = result.scalar_one_or_none()

        if rate is None:
            logger.debug(f"No tax rate for class={tax_class_id}, country={country_id}")
            return Decimal("0")

        return Decimal(rate)


class SqlWeeeTaxLookup:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _table_exists(self) -> bool:
        connection = await self.db.connection()
        return await connection.run_sync(
            lambda sync_conn: inspect(sync_conn).has_table(WeeeTax.__tablename__)
        )

    async def get_value(self, product_id: int, country_id: Optional[str]) -> Optional[Decimal]:
        if not await self._table_exists():
            return None

        result = await self.db.execute(
            select(WeeeTax.value)
            .where(WeeeTax.entity_id == product_id, WeeeTax.country == country_id)
            .order_by(WeeeTax.id)
            .limit(1)
        )
        value = result.scalar_one_or_none()
        return Decimal(value) if value is not None else None
