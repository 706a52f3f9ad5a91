# rangebet/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RANGEBET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Fixed-point scale shared by bin quantities and collateral (18 = 1e18 units)
    DECIMALS: int = 18

    # Significant digits carried by the natural logarithm in the cost integral
    LN_PRECISION: int = 60

    # Account that holds collateral on behalf of all markets
    VAULT_ADDRESS: str = "rangebet_manager"

    # Default administrative identity
    OWNER: str = "owner"

    LOG_LEVEL: str = "INFO"


settings = Settings()
