"""
Module: cashbook_engines
Responsibility:
    Re-exports the pure calculation engines: classification, temporal
    bucketing, income tax, and carryforward ledgers.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May import cashbook_kernel domain DTOs, exceptions and logging only.
    MUST NOT import cashbook_modules.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
    - Decimal-only arithmetic; floats are forbidden.
    - Determinism: identical inputs always produce identical outputs.
"""

from cashbook_engines.bucketing import (
    MONTH_KEYS,
    MONTH_NAMES,
    QUARTER_MONTHS,
    MonthlyBuckets,
    ReportPeriod,
    additive_rollup,
    check_window,
    is_quarter_end,
    month_index,
    quarter_of,
    quarter_sum,
    resolve_period,
    running_totals,
    snapshot_rollup,
    year_window,
)
from cashbook_engines.carryforward import (
    Allocation,
    CarryforwardApplication,
    apply_carryforward,
    available_entries,
    available_total,
    is_available,
    mcit_expiry_year,
    new_mcit_credit,
    new_nolco_entry,
    nolco_expiry_year,
)
from cashbook_engines.classification import (
    AccountChart,
    AccountCodes,
    ClassifiedLine,
    ClassifiedVoucher,
    ResolvedAccounts,
    classify_voucher,
    classify_vouchers,
    resolve_accounts,
)
from cashbook_engines.income_tax import (
    CreditConsumption,
    TaxCalculation,
    TaxInputs,
    compute_tax,
    credit_consumption,
)

__all__ = [
    # Bucketing
    "MONTH_KEYS",
    "MONTH_NAMES",
    "QUARTER_MONTHS",
    "MonthlyBuckets",
    "ReportPeriod",
    "additive_rollup",
    "check_window",
    "is_quarter_end",
    "month_index",
    "quarter_of",
    "quarter_sum",
    "resolve_period",
    "running_totals",
    "snapshot_rollup",
    "year_window",
    # Carryforward
    "Allocation",
    "CarryforwardApplication",
    "apply_carryforward",
    "available_entries",
    "available_total",
    "is_available",
    "mcit_expiry_year",
    "new_mcit_credit",
    "new_nolco_entry",
    "nolco_expiry_year",
    # Classification
    "AccountChart",
    "AccountCodes",
    "ClassifiedLine",
    "ClassifiedVoucher",
    "ResolvedAccounts",
    "classify_voucher",
    "classify_vouchers",
    "resolve_accounts",
    # Income tax
    "CreditConsumption",
    "TaxCalculation",
    "TaxInputs",
    "compute_tax",
    "credit_consumption",
]
