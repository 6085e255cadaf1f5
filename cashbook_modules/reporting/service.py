"""
Reporting Module Service (``cashbook_modules.reporting.service``).

Responsibility
--------------
Orchestrates statement generation -- Profit & Loss, Balance Sheet, journal
ledger and the financial summary -- by bridging the Ledger Source
(``LedgerSelector``) to the pure functions in ``statements.py`` and the
classification engine.  This is a **read-only** service.

Architecture position
---------------------
**Modules layer** -- thin glue.  Constructor: ``session`` + ``clock`` +
``config`` (+ optional ``source`` to read from something other than the
SQL selector).

Invariants enforced
-------------------
* Read-only -- no writes to vouchers, accounts or ledgers.
* The chart arena and named-code resolution are rebuilt on every call;
  nothing is cached across calls.
* All monetary amounts use ``Decimal`` -- NEVER ``float``.

Failure modes
-------------
* Invalid year  -> ``InvalidPeriodError`` before any query runs.
* No vouchers / unknown company  -> empty rows, never an error.
* Selector query failure  -> exception propagates.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from cashbook_engines.bucketing import check_window, resolve_period
from cashbook_engines.classification import (
    AccountChart,
    ClassifiedVoucher,
    ResolvedAccounts,
    classify_vouchers,
    resolve_accounts,
)
from cashbook_kernel.domain.clock import Clock, SystemClock
from cashbook_kernel.domain.dtos import Voucher, VoucherKind
from cashbook_kernel.logging_config import LogContext, get_logger
from cashbook_kernel.selectors.ledger_selector import LedgerSelector, LedgerSource
from cashbook_modules.reporting.config import ReportingConfig
from cashbook_modules.reporting.models import (
    BalanceSheetReport,
    FinancialSummary,
    JournalEntryRow,
    JournalMonthRow,
    ProfitLossReport,
    ProfitLossSummary,
    ReportMetadata,
    ReportType,
)
from cashbook_modules.reporting.statements import (
    build_balance_sheet,
    build_financial_summary,
    build_journal_entries,
    build_journal_totals,
    build_profit_loss,
    summarize_profit_loss,
)

logger = get_logger("modules.reporting.service")


@dataclass(frozen=True)
class _YearLedger:
    """Everything one aggregation call reads, fetched once."""

    year: int
    chart: AccountChart
    resolved: ResolvedAccounts
    vouchers: tuple[Voucher, ...]
    classified: tuple[ClassifiedVoucher, ...]

    @property
    def dropped_amount(self) -> Decimal:
        return sum((cv.dropped_amount for cv in self.classified), Decimal("0"))


class ReportingService:
    """
    Statement generation service.

    Contract
    --------
    * Every public method returns a typed report DTO.
    * All methods are **read-only**.

    Guarantees
    ----------
    * Financial logic lives in the pure functions; this class only loads,
      classifies and delegates.
    * Calling a method twice on unchanged data yields equal reports apart
      from ``generated_at``.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
        source: LedgerSource | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or ReportingConfig.with_defaults()
        self._source: LedgerSource = source or LedgerSelector(session)

        logger.info(
            "reporting_service_initialized",
            extra={
                "currency": self._config.currency,
                "strict_balancing": self._config.strict_balancing,
            },
        )

    @property
    def config(self) -> ReportingConfig:
        return self._config

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _load_vouchers(self, company_id: UUID, start: date, end: date) -> tuple[Voucher, ...]:
        receipts = self._source.get_vouchers(company_id, VoucherKind.RECEIPT, start, end)
        disbursements = self._source.get_vouchers(company_id, VoucherKind.DISBURSEMENT, start, end)
        return receipts + disbursements

    def _load_year(self, company_id: UUID, year: int) -> _YearLedger:
        period = resolve_period(year)
        chart = AccountChart.from_accounts(self._source.get_accounts(company_id))
        resolved = resolve_accounts(chart, self._config.account_codes)
        vouchers = self._load_vouchers(company_id, period.start_date, period.end_date)
        classified = classify_vouchers(vouchers, chart, resolved)

        logger.debug(
            "ledger_loaded_for_reporting",
            extra={
                "company_id": str(company_id),
                "year": period.year,
                "account_count": len(chart),
                "voucher_count": len(vouchers),
            },
        )
        return _YearLedger(period.year, chart, resolved, vouchers, classified)

    def _build_metadata(self, report_type: ReportType, company_id: UUID, year: int) -> ReportMetadata:
        company = self._source.get_company(company_id)
        return ReportMetadata(
            report_type=report_type,
            company_id=company_id,
            entity_name=company.name if company is not None else self._config.entity_name,
            currency=self._config.currency,
            year=year,
            generated_at=self._clock.now().isoformat(),
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def get_profit_loss(self, company_id: UUID, year: int) -> ProfitLossReport:
        """Profit & Loss rows for ``year`` with additive quarter / annual columns."""
        t0 = time.monotonic()
        with LogContext.bind(company_id=str(company_id)):
            ledger = self._load_year(company_id, year)
            rows = build_profit_loss(ledger.classified, ledger.year)
            report = ProfitLossReport(
                metadata=self._build_metadata(ReportType.PROFIT_LOSS, company_id, ledger.year),
                rows=rows,
                summary=summarize_profit_loss(rows),
                fallback_voucher_count=sum(1 for cv in ledger.classified if cv.used_fallback),
                dropped_amount=ledger.dropped_amount,
            )
            logger.info(
                "profit_loss_generated",
                extra={
                    "year": ledger.year,
                    "row_count": len(rows),
                    "net_income": str(report.summary.net_income),
                    "fallback_voucher_count": report.fallback_voucher_count,
                    "dropped_amount": str(report.dropped_amount),
                    "duration_ms": round((time.monotonic() - t0) * 1000, 2),
                },
            )
        return report

    def get_profit_loss_summary(self, company_id: UUID, year: int) -> ProfitLossSummary:
        ledger = self._load_year(company_id, year)
        return summarize_profit_loss(build_profit_loss(ledger.classified, ledger.year))

    def get_balance_sheet(
        self,
        company_id: UUID,
        year: int,
        strict_balancing: bool | None = None,
    ) -> BalanceSheetReport:
        """
        Month-end cumulative balances for ``year``.

        Args:
            strict_balancing: Overrides the configured balancing mode.
        """
        t0 = time.monotonic()
        strict = self._config.strict_balancing if strict_balancing is None else strict_balancing
        with LogContext.bind(company_id=str(company_id)):
            ledger = self._load_year(company_id, year)
            result = build_balance_sheet(
                ledger.classified,
                ledger.chart,
                ledger.resolved,
                ledger.year,
                strict_balancing=strict,
            )
            report = BalanceSheetReport(
                metadata=self._build_metadata(ReportType.BALANCE_SHEET, company_id, ledger.year),
                rows=result.rows,
                imbalance=result.imbalance,
                is_balanced=result.is_balanced,
                strict_balancing=strict,
            )
            log_extra = {
                "year": ledger.year,
                "row_count": len(result.rows),
                "strict_balancing": strict,
                "is_balanced": result.is_balanced,
                "december_imbalance": str(result.imbalance[11]),
                "duration_ms": round((time.monotonic() - t0) * 1000, 2),
            }
            if result.is_balanced:
                logger.info("balance_sheet_generated", extra=log_extra)
            else:
                logger.warning("balance_sheet_generated_unbalanced", extra=log_extra)
        return report

    def get_journal_entries(
        self,
        company_id: UUID,
        start_date: date,
        end_date: date,
    ) -> tuple[JournalEntryRow, ...]:
        check_window(start_date, end_date)
        return build_journal_entries(self._load_vouchers(company_id, start_date, end_date))

    def get_journal_totals(self, company_id: UUID, year: int) -> tuple[JournalMonthRow, ...]:
        period = resolve_period(year)
        vouchers = self._load_vouchers(company_id, period.start_date, period.end_date)
        return build_journal_totals(vouchers, period.year)

    def get_financial_summary(self, company_id: UUID, year: int) -> FinancialSummary:
        ledger = self._load_year(company_id, year)
        receipts = sum(1 for v in ledger.vouchers if v.is_receipt)
        return build_financial_summary(
            build_profit_loss(ledger.classified, ledger.year),
            ledger.year,
            receipt_count=receipts,
            disbursement_count=len(ledger.vouchers) - receipts,
        )
