from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "AMORTIZER_"}

    # Storage
    database_url: str = "sqlite:///amortizer.db"
    storage_key: str = "loan-visualizer-storage"
    debug: bool = False

    # Defaults for a fresh loan
    default_principal: Decimal = Decimal("300000")
    default_annual_rate: Decimal = Decimal("4.5")  # Percent
    default_term_years: int = 30
    default_term_months: int = 0
    default_payment_frequency: str = "monthly"

    # Display label only, never converted
    default_currency: str = "INR"


settings = Settings()
