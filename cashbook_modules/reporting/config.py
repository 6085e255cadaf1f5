"""
Reporting Configuration Schema.

Named account codes the statements depend on (cash, retained earnings and
the two fallback accounts), the balancing mode of the balance sheet, and
display options.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Self

from cashbook_config.loader import load_settings
from cashbook_engines.classification import AccountCodes
from cashbook_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.config")


@dataclass
class ReportingConfig:
    """
    Configuration schema for the reporting module.

    ``strict_balancing`` False reproduces the legacy balance sheet, where
    cash moves by each voucher's total amount.  True moves cash by what the
    voucher actually posted elsewhere, so assets equal liabilities plus
    equity whenever retained earnings resolves.
    """

    account_codes: AccountCodes = field(default_factory=AccountCodes)

    currency: str = "PHP"

    # Entity name shown on reports when the company has none
    entity_name: str = ""

    display_precision: int = 2

    strict_balancing: bool = False

    def __post_init__(self):
        if self.display_precision < 0:
            raise ValueError("display_precision cannot be negative")
        if len(self.currency) != 3:
            raise ValueError("currency must be a 3-letter ISO 4217 code")

    @classmethod
    def with_defaults(cls) -> Self:
        """Config from the bundled PH SME settings file."""
        config = cls.from_dict(load_settings().reporting_section())
        logger.info("reporting_config_created_with_defaults")
        return config

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary (e.g. CashbookSettings.reporting_section())."""
        data = dict(data)
        if "account_codes" in data and isinstance(data["account_codes"], dict):
            data["account_codes"] = AccountCodes(**data["account_codes"])
        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
