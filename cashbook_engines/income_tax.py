"""
Income Tax Engine - Philippine corporate income tax: regular tax versus
minimum corporate income tax (MCIT), with NOLCO deduction and creditable
excess MCIT.

Pure function with no I/O.  Rates are fractions (0.25 for 25%); callers
holding percentage settings convert with TaxSettingsInfo.tax_rate_fraction.

Algorithm:
    gross_income    = total_revenue - total_cost
    taxable_income  = max(0, gross_income - total_expenses - available_nolco)
    regular_tax     = max(0, taxable_income * tax_rate)
    mcit            = gross_income * mcit_rate          (may be negative)
    tax_due         = max(regular_tax, mcit)
    is_mcit_applied = mcit > regular_tax                 (ties go to regular tax)
    total_credits   = available_mcit_credits + other_credits
    final_tax_due   = max(0, tax_due - total_credits)

Comparisons run on unrounded Decimals; results are quantized to centavos
(ROUND_HALF_UP) only when the TaxCalculation is built.

Usage:
    from cashbook_engines.income_tax import TaxInputs, compute_tax

    result = compute_tax(TaxInputs(
        total_revenue=Decimal("100000"),
        total_cost=Decimal("0"),
        total_expenses=Decimal("40000"),
        tax_rate=Decimal("0.25"),
        mcit_rate=Decimal("0.02"),
    ))
    result.tax_due          # Decimal("15000.00")
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from cashbook_kernel.logging_config import get_logger

logger = get_logger("engines.income_tax")

ZERO = Decimal("0")
CENTAVO = Decimal("0.01")


def to_centavos(amount: Decimal) -> Decimal:
    return amount.quantize(CENTAVO, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class TaxInputs:
    """
    Everything compute_tax needs.

    ``available_nolco`` and ``available_mcit_credits`` are the unexpired
    remaining balances for the target year (see
    cashbook_engines.carryforward.available_total).
    """

    total_revenue: Decimal
    total_cost: Decimal
    total_expenses: Decimal
    tax_rate: Decimal
    mcit_rate: Decimal
    available_nolco: Decimal = ZERO
    available_mcit_credits: Decimal = ZERO
    other_credits: Decimal = ZERO

    def __post_init__(self) -> None:
        if self.tax_rate < ZERO:
            raise ValueError(f"Tax rate cannot be negative: {self.tax_rate}")
        if self.mcit_rate < ZERO:
            raise ValueError(f"MCIT rate cannot be negative: {self.mcit_rate}")
        if self.tax_rate > 1 or self.mcit_rate > 1:
            raise ValueError(
                "Rates are fractions (0.25 for 25%), got "
                f"tax_rate={self.tax_rate} mcit_rate={self.mcit_rate}"
            )
        for name in ("available_nolco", "available_mcit_credits", "other_credits"):
            if getattr(self, name) < ZERO:
                raise ValueError(f"{name} cannot be negative: {getattr(self, name)}")


@dataclass(frozen=True)
class TaxCalculation:
    """Result of compute_tax.  Money fields are in centavos."""

    gross_income: Decimal
    taxable_income: Decimal
    regular_tax: Decimal
    mcit: Decimal
    tax_due: Decimal
    is_mcit_applied: bool
    excess_mcit: Decimal
    available_nolco: Decimal
    available_mcit_credits: Decimal
    other_credits: Decimal
    total_credits: Decimal
    final_tax_due: Decimal
    total_expenses: Decimal = ZERO


def compute_tax(inputs: TaxInputs) -> TaxCalculation:
    """Compute income tax due.  Pure; never mutates carryforward balances."""
    t0 = time.monotonic()
    logger.info(
        "tax_calculation_started",
        extra={
            "total_revenue": str(inputs.total_revenue),
            "total_cost": str(inputs.total_cost),
            "total_expenses": str(inputs.total_expenses),
            "tax_rate": str(inputs.tax_rate),
            "mcit_rate": str(inputs.mcit_rate),
        },
    )

    gross_income = inputs.total_revenue - inputs.total_cost
    taxable_income = max(ZERO, gross_income - inputs.total_expenses - inputs.available_nolco)
    regular_tax = max(ZERO, taxable_income * inputs.tax_rate)
    mcit = gross_income * inputs.mcit_rate
    is_mcit_applied = mcit > regular_tax
    tax_due = mcit if is_mcit_applied else regular_tax
    # Excess of MCIT over regular tax becomes a credit for the next three years
    excess_mcit = mcit - regular_tax if is_mcit_applied else ZERO
    total_credits = inputs.available_mcit_credits + inputs.other_credits
    final_tax_due = max(ZERO, tax_due - total_credits)

    result = TaxCalculation(
        gross_income=to_centavos(gross_income),
        taxable_income=to_centavos(taxable_income),
        regular_tax=to_centavos(regular_tax),
        mcit=to_centavos(mcit),
        tax_due=to_centavos(tax_due),
        is_mcit_applied=is_mcit_applied,
        excess_mcit=to_centavos(excess_mcit),
        available_nolco=to_centavos(inputs.available_nolco),
        available_mcit_credits=to_centavos(inputs.available_mcit_credits),
        other_credits=to_centavos(inputs.other_credits),
        total_credits=to_centavos(total_credits),
        final_tax_due=to_centavos(final_tax_due),
        total_expenses=to_centavos(inputs.total_expenses),
    )

    duration_ms = round((time.monotonic() - t0) * 1000, 2)
    logger.info(
        "tax_calculation_completed",
        extra={
            "taxable_income": str(result.taxable_income),
            "regular_tax": str(result.regular_tax),
            "mcit": str(result.mcit),
            "is_mcit_applied": result.is_mcit_applied,
            "final_tax_due": str(result.final_tax_due),
            "duration_ms": duration_ms,
        },
    )
    return result


@dataclass(frozen=True)
class CreditConsumption:
    """How much of each carryforward ledger a calculation absorbs."""

    nolco_used: Decimal
    mcit_credit_used: Decimal


def credit_consumption(calc: TaxCalculation) -> CreditConsumption:
    """
    NOLCO absorbed is the part of the available NOLCO that was actually
    needed to bring taxable income down to zero.  MCIT credits are applied
    before other credits, up to the tax due.
    """
    pre_nolco_income = max(ZERO, calc.gross_income - calc.total_expenses)
    nolco_used = min(calc.available_nolco, pre_nolco_income)
    mcit_credit_used = min(calc.available_mcit_credits, calc.tax_due)
    return CreditConsumption(
        nolco_used=nolco_used,
        mcit_credit_used=max(ZERO, mcit_credit_used),
    )
