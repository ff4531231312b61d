from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from decimal import Decimal
from datetime import datetime


class OrderProductItem(BaseModel):
    id: int
    quantity: int = Field(gt=0)
    price: Decimal
    title: Optional[str] = None


class OrderAddress(BaseModel):
    country_code: Optional[str] = Field(default=None, max_length=2)


class OrderCustomer(BaseModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class OrderPayload(BaseModel):
    channable_id: Optional[int] = None
    channel_name: Optional[str] = None
    store_id: int = 1
    lvb: bool = False
    order_status: Optional[str] = None
    customer: OrderCustomer = OrderCustomer()
    billing: OrderAddress = OrderAddress()
    shipping: OrderAddress = OrderAddress()
    products: List[OrderProductItem] = []

    @property
    def is_lvb(self) -> bool:
        return self.lvb or (self.order_status or "").lower() == "shipped"


class ImportResult(BaseModel):
    validated: str = "true"
    quote_id: int
    channable_id: Optional[int] = None
    qty: int
    skip_qty_check: bool
    skip_reservation: bool


class QuoteItemResponse(BaseModel):
    product_id: int
    sku: str
    name: str
    qty: int
    price: Decimal
    original_custom_price: Optional[Decimal] = None

    class Config:
        from_attributes = True


class QuoteResponse(BaseModel):
    id: int
    channable_id: Optional[int] = None
    store_id: int
    channel_name: Optional[str] = None
    customer_email: Optional[str] = None
    is_lvb: bool
    skip_qty_check: bool
    skip_reservation: bool
    items_qty: int
    created_at: datetime
    items: List[QuoteItemResponse] = []

    class Config:
        from_attributes = True
