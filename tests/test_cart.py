import pytest
from decimal import Decimal

from app.core.exceptions import CartError
from app.services.cart import Cart
from app.services.contracts import CatalogProduct, StockItem


def make_product(product_id=1, price="10"):
    return CatalogProduct(id=product_id, sku=f"SKU-{product_id}", name=f"Product {product_id}", price=Decimal(price))


def test_add_same_product_merges_lines():
    cart = Cart(store_id=1)
    stock_item = StockItem(product_id=1, qty=Decimal("5"))

    cart.add_product(make_product(), 2, stock_item)
    cart.add_product(make_product(), 3, stock_item)

    assert len(cart.lines) == 1
    assert cart.items_qty == 5


def test_merged_qty_is_checked_against_stock():
    cart = Cart(store_id=1)
    stock_item = StockItem(product_id=1, qty=Decimal("4"))
    cart.add_product(make_product(), 3, stock_item)

    with pytest.raises(CartError, match="requested qty is not available"):
        cart.add_product(make_product(), 2, stock_item)


def test_backorders_allow_qty_above_stock():
    cart = Cart(store_id=1)
    stock_item = StockItem(product_id=1, qty=Decimal("1"), use_config_backorders=False, backorders=True)

    cart.add_product(make_product(), 7, stock_item)

    assert cart.items_qty == 7


def test_unmanaged_stock_is_not_checked():
    cart = Cart(store_id=1)
    stock_item = StockItem(product_id=1, qty=Decimal("0"), is_in_stock=False, manage_stock=False)

    cart.add_product(make_product(), 2, stock_item)

    assert cart.items_qty == 2


def test_rollback_restores_checkpoint():
    cart = Cart(store_id=1)
    stock_item = StockItem(product_id=1, qty=Decimal("10"))
    cart.add_product(make_product(), 1, stock_item)
    checkpoint = cart.checkpoint()

    cart.add_product(make_product(), 4, stock_item)
    cart.add_product(make_product(2), 1, StockItem(product_id=2, qty=Decimal("1")))
    cart.rollback(checkpoint)

    assert len(cart.lines) == 1
    assert cart.lines[0].qty == 1


def test_skip_qty_check_accepts_sold_out_product():
    cart = Cart(store_id=1, skip_qty_check=True)
    product = CatalogProduct(id=3, sku="LAMP-01", name="Lamp", price=Decimal("10"), is_in_stock=False, is_salable=False)
    stock_item = StockItem(product_id=3, qty=Decimal("0"), is_in_stock=False)

    cart.add_product(product, 1, stock_item)

    assert cart.items_qty == 1
