import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from typing import Optional

from app.core.config import settings
from app.db.models import ConfigValue, AuditLog

logger = logging.getLogger(__name__)


MODULE_PATH_PREFIX = "magmodules_channable_marketplace/"

XML_PATH_PRICE_INCLUDES_TAX = "tax/calculation/price_includes_tax"
XML_PATH_SHIPPING_INCLUDES_TAX = "tax/calculation/shipping_includes_tax"
XML_PATH_DEDUCT_FPT = MODULE_PATH_PREFIX + "order/deduct_fpt"
XML_PATH_DISABLE_STOCK_CHECK = MODULE_PATH_PREFIX + "order/disable_stock_check"
XML_PATH_ENABLE_BACKORDERS = MODULE_PATH_PREFIX + "order/backorders"
XML_PATH_LVB_STOCK = MODULE_PATH_PREFIX + "order/lvb_stock"
XML_PATH_CONFIG_BACKORDERS = "cataloginventory/item_options/backorders"

# path -> settings default
DEFAULTS = {
    XML_PATH_PRICE_INCLUDES_TAX: settings.DEFAULT_PRICE_INCLUDES_TAX,
    XML_PATH_SHIPPING_INCLUDES_TAX: settings.DEFAULT_SHIPPING_INCLUDES_TAX,
    XML_PATH_DEDUCT_FPT: settings.DEFAULT_DEDUCT_FPT,
    XML_PATH_DISABLE_STOCK_CHECK: settings.DEFAULT_DISABLE_STOCK_CHECK,
    XML_PATH_ENABLE_BACKORDERS: settings.DEFAULT_ENABLE_BACKORDERS,
    XML_PATH_LVB_STOCK: settings.DEFAULT_LVB_STOCK_DISABLED,
    XML_PATH_CONFIG_BACKORDERS: settings.DEFAULT_CONFIG_BACKORDERS,
}

TRUTHY = {"1", "true", "yes", "on"}


def to_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUTHY


class StoreConfigProvider:
    """
    Reads store flags with the fallback store scope -> default scope -> settings.

    Values are cached for the lifetime of the provider, which is one request.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self._cache: dict[tuple[str, int], bool] = {}

    async def get_flag(self, path: str, store_id: int) -> bool:
        key = (path, store_id)
        if key in self._cache:
            return self._cache[key]

        result = await self.db.execute(
            select(ConfigValue.store_id, ConfigValue.value).where(
                ConfigValue.path == path,
                ConfigValue.store_id.in_([store_id, 0])
            )
        )
        values = dict(result.all())

        if store_id in values:
            flag = to_flag(values[store_id])
        elif 0 in values:
            flag = to_flag(values[0])
        else:
            flag = bool(DEFAULTS.get(path, False))

        self._cache[key] = flag
        return flag

    async def needs_tax_calculation(self, kind: str, store_id: int) -> bool:
        if kind == "price":
            return await self.get_flag(XML_PATH_PRICE_INCLUDES_TAX, store_id)
        return await self.get_flag(XML_PATH_SHIPPING_INCLUDES_TAX, store_id)

    async def deduct_fpt_tax(self, store_id: int) -> bool:
        return await self.get_flag(XML_PATH_DEDUCT_FPT, store_id)

    async def disable_stock_check_on_import(self, store_id: int) -> bool:
        return await self.get_flag(XML_PATH_DISABLE_STOCK_CHECK, store_id)

    async def enable_backorders(self, store_id: int) -> bool:
        return await self.get_flag(XML_PATH_ENABLE_BACKORDERS, store_id)

    async def disable_stock_movement_for_lvb_orders(self, store_id: int) -> bool:
        return await self.get_flag(XML_PATH_LVB_STOCK, store_id)

    async def config_backorders(self, store_id: int) -> bool:
        return await self.get_flag(XML_PATH_CONFIG_BACKORDERS, store_id)


class ConfigMaintenance:
    """Cleans up stored module config after the admin saves the section."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def run(self) -> dict:
        result = await self.db.execute(
            select(ConfigValue).where(ConfigValue.path.startswith(MODULE_PATH_PREFIX))
        )
        rows = result.scalars().all()

        normalized = 0
        removed = 0
        for row in rows:
            if row.path not in DEFAULTS:
                await self.db.delete(row)
                removed += 1
                continue

            value = (row.value or "").strip().lower()
            flag = "1" if value in TRUTHY else "0"
            if row.value != flag:
                row.value = flag
                normalized += 1

        audit_log = AuditLog(
            action="CONFIG_RUN",
            entity="config",
            audit_data={"normalized": normalized, "removed": removed}
        )
        self.db.add(audit_log)
        await self.db.commit()

        logger.info(f"Config maintenance done: normalized={normalized}, removed={removed}")
        return {"normalized": normalized, "removed": removed}


class ConfigSaveObserver:
    def __init__(self, runner: ConfigMaintenance, section: str = None):
        self.runner = runner
        self.section = section or settings.CONFIG_SECTION

    async def execute(self, section: str) -> bool:
        if section != self.section:
            return False

        logger.info(f"Config section {section} saved, running maintenance")
        await self.runner.run()
        return True


async def save_config_section(db: AsyncSession, section: str, store_id: int, values: dict) -> dict:
    unknown = [path for path in values if path.startswith(MODULE_PATH_PREFIX) and path not in DEFAULTS]
    if unknown:
        raise ValueError(f"Unknown config paths: {', '.join(sorted(unknown))}")

    saved = 0
    for path, value in values.items():
        if isinstance(value, bool):
            value = "1" if value else "0"

        if value is None:
            await db.execute(
                delete(ConfigValue).where(ConfigValue.path == path, ConfigValue.store_id == store_id)
            )
            continue

        result = await db.execute(
            select(ConfigValue).where(ConfigValue.path == path, ConfigValue.store_id == store_id)
        )
        row = result.scalar_one_or_none()

        if row:
            row.value = str(value)
        else:
            db.add(ConfigValue(path=path, store_id=store_id, value=str(value)))
        saved += 1

    await db.commit()
    logger.info(f"Saved {saved} config values for section={section}, store_id={store_id}")

    observer = ConfigSaveObserver(ConfigMaintenance(db))
    maintenance_run = await observer.execute(section)

    return {"saved": saved, "maintenance_run": maintenance_run}
