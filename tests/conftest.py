import pytest
from decimal import Decimal
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from app.db.base import Base
from app.db.models import Store, Product, StockItem, TaxRate


DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    engine = create_async_engine(DATABASE_URL, echo=False, future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(engine):
    AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def store(db_session):
    store = Store(code="nl", name="Dutch Store", country_id="NL", is_active=True)
    db_session.add(store)
    await db_session.commit()
    await db_session.refresh(store)
    return store


@pytest.fixture
async def catalog(db_session):
    """Two products in stock and one sold out, all in tax class 2 (21% in NL)."""
    kettle = Product(sku="KETTLE-01", name="Kettle", tax_class_id=2, price=Decimal("60.50"))
    toaster = Product(sku="TOASTER-01", name="Toaster", tax_class_id=2, price=Decimal("30.25"))
    lamp = Product(sku="LAMP-01", name="Lamp", tax_class_id=2, price=Decimal("12.10"))
    db_session.add_all([kettle, toaster, lamp])
    await db_session.flush()

    db_session.add_all([
        StockItem(product_id=kettle.id, qty=Decimal("10"), is_in_stock=True),
        StockItem(product_id=toaster.id, qty=Decimal("5"), is_in_stock=True),
        StockItem(product_id=lamp.id, qty=Decimal("0"), is_in_stock=False),
        TaxRate(tax_class_id=2, country_id="NL", rate=Decimal("21")),
        TaxRate(tax_class_id=2, country_id="BE", rate=Decimal("21")),
        TaxRate(tax_class_id=2, country_id="DE", rate=Decimal("19")),
    ])
    await db_session.commit()

    return {"kettle": kettle, "toaster": toaster, "lamp": lamp}
