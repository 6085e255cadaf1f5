"""
BIR Report Service (``cashbook_modules.bir.service``).

Responsibility
--------------
Resolves a report request (form code, year, optional quarter or month)
into a date window, fetches what the form's data shape needs from the
Ledger Source, and hands it to the pure extractor functions.

Architecture position
---------------------
**Modules layer** -- read-only glue over ``cashbook_modules.bir.extractor``.

Invariants enforced
-------------------
* The period is validated before the form code is looked up and before
  any query runs.
* Only the inputs a shape needs are fetched.
* Annual alphalists always cover the whole year of the request.

Failure modes
-------------
* Bad year / quarter / month -> ``InvalidPeriodError``.
* Form code not in ``BIR_FORMS`` -> ``UnknownFormCodeError``.
* Unknown company -> envelope with ``name`` None and empty TIN / address;
  the data shape is still built (empty).
"""

from __future__ import annotations

import time
from decimal import Decimal
from typing import Callable
from uuid import UUID

from sqlalchemy.orm import Session

from cashbook_engines.bucketing import ReportPeriod, quarter_of, resolve_period, year_window
from cashbook_kernel.domain.clock import Clock, SystemClock
from cashbook_kernel.domain.dtos import (
    FinalWithholdingIncomeInfo,
    PayrollRecordInfo,
    Voucher,
    VoucherKind,
)
from cashbook_kernel.logging_config import LogContext, get_logger
from cashbook_kernel.selectors.ledger_selector import LedgerSelector, LedgerSource
from cashbook_modules.bir.extractor import (
    build_alphalist,
    build_books_of_accounts,
    build_income_summary,
    build_percentage_tax,
    build_purchases_list,
    build_sales_list,
    build_supplier_payments,
    build_withholding_credits,
    build_withholding_return,
    build_withholding_summary,
    summarize_payroll,
)
from cashbook_modules.bir.forms import ReportShape, get_form
from cashbook_modules.bir.models import BirCompany, BirReport, BirReportData
from cashbook_modules.tax.config import TaxConfig
from cashbook_modules.tax.service import TaxService
from cashbook_modules.vat.books import build_vat_summary

logger = get_logger("modules.bir.service")


class BirReportService:
    """
    Per-form data extracts for BIR filings.

    Contract
    --------
    * ``get_report_data`` is read-only and returns a ``BirReport`` whose
      ``data`` has the shape registered for the form.
    * Income figures use the company's tax rate for the request year
      (defaults when no settings are stored).
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        tax_config: TaxConfig | None = None,
        source: LedgerSource | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._source: LedgerSource = source or LedgerSelector(session)
        self._tax = TaxService(
            session,
            clock=self._clock,
            config=tax_config,
            source=self._source,
        )
        self._builders: dict[ReportShape, Callable[[UUID, ReportPeriod], BirReportData]] = {
            ReportShape.WITHHOLDING_WITH_PAYROLL: self._withholding_with_payroll,
            ReportShape.WITHHOLDING_SUMMARY: self._withholding_summary,
            ReportShape.VAT_SUMMARY: self._vat_summary,
            ReportShape.SALES_LIST: self._sales_list,
            ReportShape.PURCHASES_LIST: self._purchases_list,
            ReportShape.WITHHOLDING_CREDITS: self._withholding_credits,
            ReportShape.PERCENTAGE_TAX: self._percentage_tax,
            ReportShape.INCOME_SUMMARY: self._income_summary,
            ReportShape.ALPHALIST: self._alphalist,
            ReportShape.SUPPLIER_PAYMENTS: self._supplier_payments,
            ReportShape.BOOKS_OF_ACCOUNTS: self._books_of_accounts,
        }

    # =========================================================================
    # Public API
    # =========================================================================

    def get_report_data(
        self,
        form_code: str,
        company_id: UUID,
        year: object,
        quarter: object | None = None,
        month: object | None = None,
    ) -> BirReport:
        """
        Build the data extract for one form and period.

        Raises:
            InvalidPeriodError: year, quarter or month is malformed.
            UnknownFormCodeError: ``form_code`` is not registered.
        """
        t0 = time.monotonic()
        period = resolve_period(year, quarter=quarter, month=month)
        form = get_form(form_code)

        with LogContext.bind(company_id=str(company_id), form_code=form_code):
            company = self._source.get_company(company_id)
            data = self._builders[form.shape](company_id, period)
            report = BirReport(
                form_code=form.form_number,
                period=period,
                company=BirCompany(
                    name=company.name if company is not None else None,
                    tin=(company.tin if company is not None else None) or "",
                    address=(company.address if company is not None else None) or "",
                ),
                generated_at=self._clock.now().isoformat(),
                data=data,
            )
            logger.info(
                "bir_report_generated",
                extra={
                    "shape": form.shape.value,
                    "start_date": period.start_date.isoformat(),
                    "end_date": period.end_date.isoformat(),
                    "company_found": company is not None,
                    "duration_ms": round((time.monotonic() - t0) * 1000, 2),
                },
            )
        return report

    # =========================================================================
    # Fetch helpers
    # =========================================================================

    def _receipts(self, company_id: UUID, period: ReportPeriod) -> tuple[Voucher, ...]:
        return self._source.get_vouchers(
            company_id, VoucherKind.RECEIPT, period.start_date, period.end_date,
        )

    def _disbursements(self, company_id: UUID, period: ReportPeriod) -> tuple[Voucher, ...]:
        return self._source.get_vouchers(
            company_id, VoucherKind.DISBURSEMENT, period.start_date, period.end_date,
        )

    def _payroll(self, company_id: UUID, period: ReportPeriod) -> tuple[PayrollRecordInfo, ...]:
        return self._source.get_payroll_records(company_id, period.start_date, period.end_date)

    def _final_withholding(
        self, company_id: UUID, period: ReportPeriod,
    ) -> tuple[FinalWithholdingIncomeInfo, ...]:
        # Final withholding incomes are recorded per quarter, not per date
        quarter = period.quarter
        if period.month is not None:
            quarter = quarter_of(period.month)
        return self._source.get_final_withholding_incomes(company_id, period.year, quarter)

    def _tax_rate(self, company_id: UUID, period: ReportPeriod) -> Decimal:
        return self._tax.get_tax_settings(company_id, period.year).tax_rate_fraction

    # =========================================================================
    # Shape builders
    # =========================================================================

    def _withholding_with_payroll(self, company_id, period):
        return build_withholding_return(self._payroll(company_id, period))

    def _withholding_summary(self, company_id, period):
        return build_withholding_summary(summarize_payroll(self._payroll(company_id, period)))

    def _vat_summary(self, company_id, period):
        return build_vat_summary(
            self._receipts(company_id, period),
            self._disbursements(company_id, period),
        )

    def _sales_list(self, company_id, period):
        return build_sales_list(self._receipts(company_id, period))

    def _purchases_list(self, company_id, period):
        return build_purchases_list(self._disbursements(company_id, period))

    def _withholding_credits(self, company_id, period):
        return build_withholding_credits(self._receipts(company_id, period))

    def _income_summary(self, company_id, period):
        return build_income_summary(
            self._receipts(company_id, period),
            self._disbursements(company_id, period),
            self._tax_rate(company_id, period),
            self._final_withholding(company_id, period),
        )

    def _percentage_tax(self, company_id, period):
        return build_percentage_tax(
            self._income_summary(company_id, period),
            self._tax.config.percentage_tax_fraction,
        )

    def _alphalist(self, company_id, period):
        start, end = year_window(period.year)
        return build_alphalist(self._source.get_payroll_records(company_id, start, end))

    def _supplier_payments(self, company_id, period):
        return build_supplier_payments(self._disbursements(company_id, period))

    def _books_of_accounts(self, company_id, period):
        return build_books_of_accounts(
            self._receipts(company_id, period),
            self._disbursements(company_id, period),
            self._payroll(company_id, period),
            self._tax_rate(company_id, period),
            self._final_withholding(company_id, period),
        )
