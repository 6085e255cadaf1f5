"""
Tax Configuration Schema.

Default rates applied when a company has no tax settings row for a year,
the percentage tax rate used by the 2551-Q extract, and the loss years
whose NOLCO carries over for five years instead of three.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Self

from cashbook_config.loader import load_settings
from cashbook_engines.carryforward import NOLCO_EXTENDED_YEARS
from cashbook_kernel.logging_config import get_logger

logger = get_logger("modules.tax.config")

_HUNDRED = Decimal("100")


@dataclass
class TaxConfig:
    """
    Configuration schema for the tax module.

    Rates are percentages (25 means 25%), matching the stored tax settings.

        config = TaxConfig.from_dict(load_settings().tax)
    """

    default_tax_rate: Decimal = Decimal("25")
    default_mcit_rate: Decimal = Decimal("2")

    # Non-VAT registrants, 2551-Q
    percentage_tax_rate: Decimal = Decimal("3")

    nolco_extended_years: frozenset[int] = field(default_factory=lambda: NOLCO_EXTENDED_YEARS)

    def __post_init__(self):
        for name in ("default_tax_rate", "default_mcit_rate", "percentage_tax_rate"):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                value = Decimal(str(value))
                setattr(self, name, value)
            if value < 0 or value > _HUNDRED:
                raise ValueError(f"{name} must be a percentage between 0 and 100, got {value}")
        self.nolco_extended_years = frozenset(int(y) for y in self.nolco_extended_years)

        logger.debug(
            "tax_config_initialized",
            extra={
                "default_tax_rate": str(self.default_tax_rate),
                "default_mcit_rate": str(self.default_mcit_rate),
                "percentage_tax_rate": str(self.percentage_tax_rate),
                "nolco_extended_years": sorted(self.nolco_extended_years),
            },
        )

    @property
    def percentage_tax_fraction(self) -> Decimal:
        return self.percentage_tax_rate / _HUNDRED

    @classmethod
    def with_defaults(cls) -> Self:
        """Config from the ``tax`` section of the bundled PH SME settings file."""
        config = cls.from_dict(load_settings().tax)
        logger.info("tax_config_created_with_defaults")
        return config

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary (e.g. CashbookSettings.tax)."""
        logger.info(
            "tax_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
