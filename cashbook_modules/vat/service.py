"""
VAT Book Service (``cashbook_modules.vat.service``).

Responsibility
--------------
Fetches a window's vouchers from the Ledger Source and hands them to the
pure VAT book functions: period summary, monthly totals, sales book and
purchase book.

Architecture position
---------------------
**Modules layer** -- read-only glue over ``cashbook_modules.vat.books``.

Failure modes
-------------
* Invalid year -> ``InvalidPeriodError``.
* ``end_date`` before ``start_date`` -> ``InvalidPeriodError``.
* No vouchers -> all-zero summary / rows.
"""

from __future__ import annotations

import time
from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from cashbook_engines.bucketing import check_window, resolve_period
from cashbook_kernel.domain.clock import Clock, SystemClock
from cashbook_kernel.domain.dtos import Voucher, VoucherKind
from cashbook_kernel.logging_config import LogContext, get_logger
from cashbook_kernel.selectors.ledger_selector import LedgerSelector, LedgerSource
from cashbook_modules.vat.books import (
    build_purchase_book,
    build_sales_book,
    build_vat_summary,
    build_vat_totals,
)
from cashbook_modules.vat.models import (
    PurchaseBookRow,
    SalesBookRow,
    VatMonthRow,
    VatSummary,
)

logger = get_logger("modules.vat.service")


class VatService:
    """
    VAT books for one company.

    Contract
    --------
    * All methods are read-only.
    * Date windows are inclusive on both ends.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        source: LedgerSource | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._source: LedgerSource = source or LedgerSelector(session)

    def _receipts(self, company_id: UUID, start: date, end: date) -> tuple[Voucher, ...]:
        return self._source.get_vouchers(company_id, VoucherKind.RECEIPT, start, end)

    def _disbursements(self, company_id: UUID, start: date, end: date) -> tuple[Voucher, ...]:
        return self._source.get_vouchers(company_id, VoucherKind.DISBURSEMENT, start, end)

    def get_vat_summary(self, company_id: UUID, start_date: date, end_date: date) -> VatSummary:
        check_window(start_date, end_date)
        t0 = time.monotonic()
        with LogContext.bind(company_id=str(company_id)):
            summary = build_vat_summary(
                self._receipts(company_id, start_date, end_date),
                self._disbursements(company_id, start_date, end_date),
            )
            logger.info(
                "vat_summary_computed",
                extra={
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                    "output_vat": str(summary.output_vat),
                    "input_vat": str(summary.input_vat),
                    "vat_payable": str(summary.vat_payable),
                    "duration_ms": round((time.monotonic() - t0) * 1000, 2),
                },
            )
        return summary

    def get_vat_totals(self, company_id: UUID, year: int) -> tuple[VatMonthRow, ...]:
        period = resolve_period(year)
        vouchers = (
            self._receipts(company_id, period.start_date, period.end_date)
            + self._disbursements(company_id, period.start_date, period.end_date)
        )
        return build_vat_totals(vouchers, period.year)

    def get_sales_book(self, company_id: UUID, start_date: date, end_date: date) -> tuple[SalesBookRow, ...]:
        check_window(start_date, end_date)
        return build_sales_book(self._receipts(company_id, start_date, end_date))

    def get_purchase_book(
        self, company_id: UUID, start_date: date, end_date: date,
    ) -> tuple[PurchaseBookRow, ...]:
        check_window(start_date, end_date)
        return build_purchase_book(self._disbursements(company_id, start_date, end_date))
