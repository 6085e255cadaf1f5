"""
Financial Reporting Module (``cashbook_modules.reporting``).

Responsibility
--------------
Read-only module that generates the cash ledger's statements: the
twelve-month Profit & Loss (additive quarters), the twelve-month Balance
Sheet (quarter-end snapshots), the journal ledger listing and its monthly
totals, and the dashboard financial summary.

Architecture position
---------------------
**Modules layer** -- pure read-only service.  The module never writes
vouchers or ledgers.  All statement generation is implemented as pure
functions in ``statements.py``.

Invariants enforced
-------------------
* No stored balances -- every statement is recomputed from the vouchers.
* P&L and Balance Sheet classify vouchers through the same resolver, so
  P&L net income equals the December retained-earnings movement.

Failure modes
-------------
* Invalid year -> ``InvalidPeriodError``.
* Unknown company or no vouchers -> empty rows with zero totals.
"""

from cashbook_modules.reporting.config import ReportingConfig
from cashbook_modules.reporting.models import (
    BalanceSheetReport,
    BalanceSheetResult,
    FinancialSummary,
    JournalEntryRow,
    JournalMonthRow,
    ProfitLossReport,
    ProfitLossSummary,
    ReportMetadata,
    ReportType,
    StatementRow,
)
from cashbook_modules.reporting.service import ReportingService
from cashbook_modules.reporting.statements import render_to_dict

__all__ = [
    # Service
    "ReportingService",
    # Config
    "ReportingConfig",
    # Models
    "ReportType",
    "ReportMetadata",
    "StatementRow",
    "ProfitLossSummary",
    "ProfitLossReport",
    "BalanceSheetResult",
    "BalanceSheetReport",
    "JournalEntryRow",
    "JournalMonthRow",
    "FinancialSummary",
    # Rendering
    "render_to_dict",
]
