"""
Records and capability interfaces used by the order item importer.

The importer only works against these, so it can run against the database
adapters in production and against in-memory fakes in tests.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol


@dataclass
class StoreContext:
    id: int
    code: str = "default"
    country_id: Optional[str] = None


@dataclass
class StockItem:
    product_id: int
    qty: Decimal = Decimal("0")
    is_in_stock: bool = True
    manage_stock: bool = True
    use_config_backorders: bool = True
    backorders: bool = False
    config_backorders: bool = False

    @property
    def backorders_allowed(self) -> bool:
        if self.use_config_backorders:
            return self.config_backorders
        return self.backorders


@dataclass
class CatalogProduct:
    id: int
    sku: str
    name: str
    price: Decimal
    tax_class_id: Optional[int] = None
    type_id: str = "simple"
    final_price: Optional[Decimal] = None
    special_price: Optional[Decimal] = None
    original_custom_price: Optional[Decimal] = None
    tier_price: list = field(default_factory=list)
    special_from_date: Optional[datetime] = None
    special_to_date: Optional[datetime] = None
    is_in_stock: bool = True
    is_salable: bool = True
    stock_data: Optional[StockItem] = None


class ProductRepository(Protocol):
    async def get_by_id(self, product_id: int) -> CatalogProduct:
        """Raises NoSuchEntityError when the product does not exist."""


class TaxRateLookup(Protocol):
    async def get_rate(self, tax_class_id: Optional[int], cart, store: StoreContext) -> Decimal:
        ...


class SurchargeLookup(Protocol):
    async def get_value(self, product_id: int, country_id: Optional[str]) -> Optional[Decimal]:
        """First matching surcharge, or None when there is no row or no table."""


class StockRegistry(Protocol):
    async def get_stock_item(self, product_id: int) -> StockItem:
        ...


class ConfigProvider(Protocol):
    async def needs_tax_calculation(self, kind: str, store_id: int) -> bool:
        ...

    async def deduct_fpt_tax(self, store_id: int) -> bool:
        ...

    async def disable_stock_check_on_import(self, store_id: int) -> bool:
        ...

    async def enable_backorders(self, store_id: int) -> bool:
        ...

    async def disable_stock_movement_for_lvb_orders(self, store_id: int) -> bool:
        ...
