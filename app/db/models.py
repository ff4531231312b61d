from datetime import datetime
from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base


class Store(Base):
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(64), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    country_id = Column(String(2), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    quotes = relationship("Quote", back_populates="store")


class ConfigValue(Base):
    __tablename__ = "config_values"

    id = Column(Integer, primary_key=True, index=True)
    path = Column(String(255), nullable=False, index=True)
    store_id = Column(Integer, default=0, nullable=False)
    value = Column(String(255), nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('path', 'store_id', name='_config_path_store_uc'),
    )


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String(64), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type_id = Column(String(32), default="simple", nullable=False)
    tax_class_id = Column(Integer, nullable=True)
    price = Column(Numeric(20, 4), nullable=False)
    is_enabled = Column(Boolean, default=True, nullable=False)

    stock_item = relationship("StockItem", back_populates="product", uselist=False)
    weee_taxes = relationship("WeeeTax", back_populates="product")


class StockItem(Base):
    __tablename__ = "stock_items"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), unique=True, nullable=False)
    qty = Column(Numeric(12, 4), default=0, nullable=False)
    is_in_stock = Column(Boolean, default=True, nullable=False)
    manage_stock = Column(Boolean, default=True, nullable=False)
    use_config_backorders = Column(Boolean, default=True, nullable=False)
    backorders = Column(Boolean, default=False, nullable=False)

    product = relationship("Product", back_populates="stock_item")


class TaxRate(Base):
    __tablename__ = "tax_rates"

    id = Column(Integer, primary_key=True, index=True)
    tax_class_id = Column(Integer, nullable=False, index=True)
    country_id = Column(String(2), nullable=False, index=True)
    rate = Column(Numeric(12, 4), nullable=False)


class WeeeTax(Base):
    __tablename__ = "weee_tax"

    id = Column(Integer, primary_key=True, index=True)
    entity_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    country = Column(String(2), nullable=False)
    website_id = Column(Integer, default=0, nullable=False)
    value = Column(Numeric(12, 4), nullable=False)

    product = relationship("Product", back_populates="weee_taxes")


class Quote(Base):
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, index=True)
    channable_id = Column(Integer, unique=True, nullable=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    channel_name = Column(String(64), nullable=True)
    customer_email = Column(String(255), nullable=True)
    billing_country = Column(String(2), nullable=True)
    shipping_country = Column(String(2), nullable=True)
    is_lvb = Column(Boolean, default=False, nullable=False)
    skip_qty_check = Column(Boolean, default=False, nullable=False)
    skip_reservation = Column(Boolean, default=False, nullable=False)
    items_qty = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    store = relationship("Store", back_populates="quotes")
    items = relationship("QuoteItem", back_populates="quote")


class QuoteItem(Base):
    __tablename__ = "quote_items"

    id = Column(Integer, primary_key=True, index=True)
    quote_id = Column(Integer, ForeignKey("quotes.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    sku = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    qty = Column(Integer, nullable=False)
    price = Column(Numeric(20, 4), nullable=False)
    original_custom_price = Column(Numeric(20, 4), nullable=True)

    quote = relationship("Quote", back_populates="items")


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    action = Column(String(50), nullable=False, index=True)
    entity = Column(String(50), nullable=False)
    entity_id = Column(Integer, nullable=True)
    audit_data = Column(JSON, default=dict, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
