"""
Configuration Management for Split Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Policy constants (the fallback conversion rate, the default hourly rate)
are plain defaults that a deployment can override without touching code.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from splitledger.calculations.settlement import DEFAULT_CONVERSION_RATE


class SettlementSettings(BaseSettings):
    """Revenue distribution configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SETTLEMENT_",
        extra="ignore"
    )

    default_conversion_rate: Decimal = Field(
        default=DEFAULT_CONVERSION_RATE,
        gt=0,
        description="INR per USD used when a period has no payments"
    )


class BillingSettings(BaseSettings):
    """Timesheet and invoice defaults."""

    model_config = SettingsConfigDict(
        env_prefix="BILLING_",
        extra="ignore"
    )

    default_hourly_rate_usd: Decimal = Field(
        default=Decimal("45.00"),
        ge=0,
        description="Hourly rate applied when a timesheet omits one"
    )
    default_invoice_conversion_rate: Decimal = Field(
        default=Decimal("90"),
        ge=0,
        description="Conversion rate suggested for new invoices"
    )
    first_invoice_sequence: int = Field(
        default=1001,
        ge=1,
        description="Sequence number of the very first invoice"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Validation thresholds
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a record date can be"
    )

    # Storage
    storage_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts made when the storage backend is unavailable"
    )

    @field_validator('app_environment')
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        """Environment names are compared case-insensitively."""
        return v.strip().lower()

    @property
    def is_production(self) -> bool:
        return self.app_environment == "production"


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def settlement(self) -> SettlementSettings:
        return SettlementSettings()

    @property
    def billing(self) -> BillingSettings:
        return BillingSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed to load.
    """
    results = {}
    settings = get_settings()

    sections = {
        "settlement": lambda: settings.settlement,
        "billing": lambda: settings.billing,
        "app": lambda: settings.app,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
