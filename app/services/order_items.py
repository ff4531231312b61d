import logging
from decimal import Decimal

from app.core.exceptions import CouldNotImportOrder, NoSuchEntityError
from app.schemas.order import OrderPayload, OrderProductItem
from app.services.cart import Cart
from app.services.contracts import (
    CatalogProduct,
    ConfigProvider,
    ProductRepository,
    StockRegistry,
    StoreContext,
    SurchargeLookup,
    TaxRateLookup,
)
from app.services.pricing import apply_custom_price, force_salable, reconcile_unit_price, resolve_session_flags

logger = logging.getLogger(__name__)


EMPTY_ITEMS_EXCEPTION = "No products found in order"
PRODUCT_NOT_FOUND_EXCEPTION = 'Product "{title}" not found in catalog (ID: {id})'
PRODUCT_EXCEPTION = 'Product "{title}" => {reason}'
UNKNOWN_TITLE = "*unknown*"


class OrderItemImporter:
    """Adds the products of a Channable order to a cart and returns the imported qty."""

    def __init__(
        self,
        config: ConfigProvider,
        products: ProductRepository,
        stock_registry: StockRegistry,
        tax_rates: TaxRateLookup,
        surcharges: SurchargeLookup
    ):
        self.config = config
        self.products = products
        self.stock_registry = stock_registry
        self.tax_rates = tax_rates
        self.surcharges = surcharges

    async def execute(self, cart: Cart, payload: OrderPayload, store: StoreContext, lvb_order: bool = False) -> int:
        if not payload.products:
            raise CouldNotImportOrder(EMPTY_ITEMS_EXCEPTION)

        await self._set_session_flags(cart, lvb_order)

        checkpoint = cart.checkpoint()
        qty = 0

        for item in payload.products:
            try:
                qty += await self._add_item(cart, item, store, lvb_order)
            except Exception as e:
                cart.rollback(checkpoint)
                message = await self._reformat_exception(e, item)
                logger.warning(f"Order item import failed (Channable ID: {payload.channable_id}): {message}")
                raise CouldNotImportOrder(message) from e

        return qty

    async def _add_item(self, cart: Cart, item: OrderProductItem, store: StoreContext, lvb_order: bool) -> int:
        product = await self.products.get_by_id(item.id)
        price = await self._get_product_price(item, product, store, cart)
        stock_item = await self.stock_registry.get_stock_item(product.id)

        if lvb_order or await self.config.disable_stock_check_on_import(store.id):
            force_salable(product, stock_item)

        apply_custom_price(product, price)
        line = cart.add_product(product, item.quantity, stock_item)
        line.original_custom_price = price
        return item.quantity

    async def _get_product_price(
        self,
        item: OrderProductItem,
        product: CatalogProduct,
        store: StoreContext,
        cart: Cart
    ) -> Decimal:
        prices_include_tax = await self.config.needs_tax_calculation("price", store.id)
        rate = Decimal("0")
        if not prices_include_tax:
            rate = await self.tax_rates.get_rate(product.tax_class_id, cart, store)

        surcharge = await self._get_product_weee_tax(product, cart)
        return reconcile_unit_price(item.price, prices_include_tax, rate, surcharge)

    async def _get_product_weee_tax(self, product: CatalogProduct, cart: Cart) -> Decimal:
        if not await self.config.deduct_fpt_tax(cart.store_id):
            return Decimal("0")

        value = await self.surcharges.get_value(product.id, cart.billing_country)
        return Decimal(value) if value is not None else Decimal("0")

    async def _set_session_flags(self, cart: Cart, lvb_order: bool) -> None:
        flags = resolve_session_flags(
            enable_backorders=await self.config.enable_backorders(cart.store_id),
            lvb_order=lvb_order,
            lvb_stock_disabled=await self.config.disable_stock_movement_for_lvb_orders(cart.store_id)
        )
        cart.skip_qty_check = flags.skip_qty_check
        cart.skip_reservation = flags.skip_reservation

    async def _reformat_exception(self, exception: Exception, item: OrderProductItem) -> str:
        title = item.title or UNKNOWN_TITLE
        try:
            await self.products.get_by_id(item.id)
        except NoSuchEntityError:
            return PRODUCT_NOT_FOUND_EXCEPTION.format(title=title, id=item.id)

        return PRODUCT_EXCEPTION.format(title=title, reason=str(exception))
