from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from app.services.contracts import CatalogProduct, StockItem

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class SessionFlags:
    skip_qty_check: bool
    skip_reservation: bool


def exclude_tax(price: Decimal, rate_percent: Decimal) -> Decimal:
    return price / (HUNDRED + rate_percent) * HUNDRED


def reconcile_unit_price(
    reported_price: Decimal,
    prices_include_tax: bool,
    tax_rate: Decimal = Decimal("0"),
    surcharge: Optional[Decimal] = None
) -> Decimal:
    """
    Net unit price for a channel-reported price.

    Channel prices always include tax. When the store keeps catalog prices
    excluding tax the tax is taken out again, then the fixed product tax
    (weee) is deducted so it is not charged twice.
    """
    price = Decimal(reported_price)
    if not prices_include_tax:
        price = exclude_tax(price, Decimal(tax_rate))

    surcharge = surcharge or Decimal("0")
    if surcharge > price:
        raise ValueError(f"Fixed product tax {surcharge} exceeds unit price {price}")

    return price - surcharge


def resolve_session_flags(enable_backorders: bool, lvb_order: bool, lvb_stock_disabled: bool) -> SessionFlags:
    skip_reservation = lvb_order and lvb_stock_disabled
    return SessionFlags(
        skip_qty_check=enable_backorders or skip_reservation,
        skip_reservation=skip_reservation
    )


def force_salable(product: CatalogProduct, stock_item: StockItem) -> None:
    stock_item.use_config_backorders = False
    stock_item.backorders = True
    stock_item.is_in_stock = True

    product.is_in_stock = True
    product.is_salable = True
    product.stock_data = stock_item


def apply_custom_price(product: CatalogProduct, price: Decimal) -> None:
    product.price = price
    product.final_price = price
    product.special_price = price
    product.original_custom_price = price
    product.tier_price = []
    product.special_from_date = None
    product.special_to_date = None
