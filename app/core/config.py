from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./channable.db"

    # Bearer tokens
    WEBHOOK_TOKEN: str = "change-me"
    ADMIN_TOKEN: str = "change-me-too"

    # Admin config section that triggers maintenance on save
    CONFIG_SECTION: str = "magmodules_channable"

    # Store defaults, used when no config value is stored for a path
    DEFAULT_COUNTRY: str = "NL"
    DEFAULT_PRICE_INCLUDES_TAX: bool = False
    DEFAULT_SHIPPING_INCLUDES_TAX: bool = False
    DEFAULT_DEDUCT_FPT: bool = False
    DEFAULT_DISABLE_STOCK_CHECK: bool = False
    DEFAULT_ENABLE_BACKORDERS: bool = False
    DEFAULT_LVB_STOCK_DISABLED: bool = False
    DEFAULT_CONFIG_BACKORDERS: bool = False


    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
