"""
Cashbook configuration.

Public API:
    load_settings(path=None) -> CashbookSettings
    default_chart() -> tuple[ChartSeed, ...]
"""

from cashbook_config.loader import (
    DEFAULT_CONFIG_PATH,
    CashbookSettings,
    ChartSeed,
    default_chart,
    load_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "CashbookSettings",
    "ChartSeed",
    "default_chart",
    "load_settings",
]
