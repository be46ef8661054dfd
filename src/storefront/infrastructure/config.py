"""Runtime configuration, read from ``STOREFRONT_*`` environment variables.

A ``.env`` file in the working directory is honoured as well.  Every
setting has a default, so the CLI works out of the box against ``./data``.
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront.domain.model.value_objects import Money
from storefront.domain.service.pricing import PricingConfig

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Application configuration loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        extra="ignore",
    )

    data_dir: Path = Field(Path("data"), description="Directory holding the JSON stores")

    tax_rate: Decimal = Decimal("0.15")
    free_shipping_threshold: Decimal = Decimal("100.00")
    shipping_fee: Decimal = Decimal("10.00")
    currency: str = "USD"

    checkout_base_url: str = "https://checkout.example.com/pay"
    frontend_url: str = "http://localhost:3000"
    webhook_secret: str = Field(
        "", description="Shared secret the payment webhook must present; empty disables the webhook"
    )

    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{value}'")
        return level

    @property
    def success_url(self) -> str:
        return f"{self.frontend_url.rstrip('/')}/order-success"

    @property
    def cancel_url(self) -> str:
        return f"{self.frontend_url.rstrip('/')}/cart?canceled=true"

    def pricing(self) -> PricingConfig:
        return PricingConfig(
            tax_rate=self.tax_rate,
            free_shipping_threshold=Money(self.free_shipping_threshold, self.currency),
            shipping_fee=Money(self.shipping_fee, self.currency),
            currency=self.currency,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
