"""Configuration package."""

from splitledger.config.settings import (
    AppSettings,
    BillingSettings,
    SettlementSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "BillingSettings",
    "SettlementSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
