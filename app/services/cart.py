import copy
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from app.core.exceptions import CartError
from app.services.contracts import CatalogProduct, StockItem

logger = logging.getLogger(__name__)


@dataclass
class CartLine:
    product_id: int
    sku: str
    name: str
    qty: int
    price: Decimal
    original_custom_price: Optional[Decimal] = None


@dataclass
class Cart:
    store_id: int
    billing_country: Optional[str] = None
    shipping_country: Optional[str] = None
    customer_email: Optional[str] = None
    lines: List[CartLine] = field(default_factory=list)
    skip_qty_check: bool = False
    skip_reservation: bool = False

    @property
    def items_qty(self) -> int:
        return sum(line.qty for line in self.lines)

    def get_line(self, product_id: int) -> Optional[CartLine]:
        return next((line for line in self.lines if line.product_id == product_id), None)

    def add_product(self, product: CatalogProduct, qty: int, stock_item: StockItem) -> CartLine:
        if qty <= 0:
            raise CartError("The requested quantity must be greater than zero")

        existing = self.get_line(product.id)
        requested = qty + (existing.qty if existing else 0)

        if not self.skip_qty_check:
            self._check_stock(product, stock_item, requested)

        price = product.final_price if product.final_price is not None else product.price

        if existing:
            existing.qty = requested
            existing.price = price
            line = existing
        else:
            line = CartLine(
                product_id=product.id,
                sku=product.sku,
                name=product.name,
                qty=qty,
                price=price
            )
            self.lines.append(line)

        logger.debug(f"Added to cart: product_id={product.id}, qty={qty}, line_qty={line.qty}")
        return line

    def _check_stock(self, product: CatalogProduct, stock_item: StockItem, requested: int) -> None:
        if not product.is_salable:
            raise CartError("Product that you are trying to add is not available.")

        if not stock_item.manage_stock:
            return

        if not stock_item.is_in_stock:
            raise CartError("Product that you are trying to add is not available.")

        if not stock_item.backorders_allowed and stock_item.qty < requested:
            raise CartError("The requested qty is not available")

    def checkpoint(self) -> List[CartLine]:
        return copy.deepcopy(self.lines)

    def rollback(self, checkpoint: List[CartLine]) -> None:
        self.lines = copy.deepcopy(checkpoint)
