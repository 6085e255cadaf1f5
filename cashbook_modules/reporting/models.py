"""
Financial Reporting Domain Models (``cashbook_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects for the statement outputs: twelve-month
statement rows, the P&L and balance sheet reports, the P&L summary, and
the journal ledger listing and totals.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* A StatementRow always carries all twelve months, four quarters and the
  annual column; what the quarter columns mean (sum or snapshot) is up to
  the report that built it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Sequence
from uuid import UUID

from cashbook_engines.bucketing import MONTH_KEYS
from cashbook_kernel.domain.dtos import AccountType, VoucherKind


class ReportType(str, Enum):
    PROFIT_LOSS = "profit_loss"
    BALANCE_SHEET = "balance_sheet"
    JOURNAL_LEDGER = "journal_ledger"


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every statement."""

    report_type: ReportType
    company_id: UUID
    entity_name: str
    currency: str
    year: int
    generated_at: str


@dataclass(frozen=True)
class StatementRow:
    account_code: str
    account_name: str
    account_type: AccountType | None
    jan: Decimal
    feb: Decimal
    mar: Decimal
    apr: Decimal
    may: Decimal
    jun: Decimal
    jul: Decimal
    aug: Decimal
    sep: Decimal
    oct: Decimal
    nov: Decimal
    dec: Decimal
    q1: Decimal
    q2: Decimal
    q3: Decimal
    q4: Decimal
    annual: Decimal

    @classmethod
    def build(
        cls,
        account_code: str,
        account_name: str,
        account_type: AccountType | None,
        months: Sequence[Decimal],
        quarters: Sequence[Decimal],
        annual: Decimal,
    ) -> StatementRow:
        if len(months) != 12 or len(quarters) != 4:
            raise ValueError("StatementRow needs 12 months and 4 quarters")
        return cls(
            account_code,
            account_name,
            account_type,
            *months,
            *quarters,
            annual,
        )

    @property
    def months(self) -> tuple[Decimal, ...]:
        return tuple(getattr(self, key) for key in MONTH_KEYS)

    @property
    def quarters(self) -> tuple[Decimal, ...]:
        return (self.q1, self.q2, self.q3, self.q4)


@dataclass(frozen=True)
class ProfitLossSummary:
    total_revenue: Decimal
    total_cost: Decimal
    total_expenses: Decimal
    gross_profit: Decimal
    net_income: Decimal


@dataclass(frozen=True)
class ProfitLossReport:
    metadata: ReportMetadata
    rows: tuple[StatementRow, ...]
    summary: ProfitLossSummary
    fallback_voucher_count: int = 0
    dropped_amount: Decimal = Decimal("0")


@dataclass(frozen=True)
class BalanceSheetResult:
    """
    Pure balance sheet output.

    ``imbalance[m]`` is assets - liabilities - equity at the end of month
    m+1.  It is reported in both balancing modes.
    """

    rows: tuple[StatementRow, ...]
    imbalance: tuple[Decimal, ...]
    strict_balancing: bool

    @property
    def is_balanced(self) -> bool:
        return all(v == 0 for v in self.imbalance)


@dataclass(frozen=True)
class BalanceSheetReport:
    metadata: ReportMetadata
    rows: tuple[StatementRow, ...]
    imbalance: tuple[Decimal, ...]
    is_balanced: bool
    strict_balancing: bool


# =========================================================================
# Journal ledger
# =========================================================================


@dataclass(frozen=True)
class JournalEntryRow:
    """One voucher as it appears in the cash journal."""

    entry_date: date
    reference: str
    kind: VoucherKind
    counterparty: str | None
    particulars: str | None
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class JournalMonthRow:
    month: str
    monthly_debit: Decimal
    monthly_credit: Decimal
    is_quarter_end: bool
    quarterly_debit: Decimal | None = None
    quarterly_credit: Decimal | None = None


@dataclass(frozen=True)
class FinancialSummary:
    """Headline figures for the dashboard."""

    year: int
    total_revenue: Decimal
    total_cost: Decimal
    total_expenses: Decimal
    gross_profit: Decimal
    net_income: Decimal
    receipt_count: int
    disbursement_count: int
