"""
Module: cashbook_kernel.selectors.ledger_selector
Responsibility: The Ledger Source.  Supplies chart-of-accounts entries,
    vouchers with their lines, tax settings, carryforward ledgers, final
    withholding incomes and payroll records, filtered by company and date
    range, as immutable DTOs.
Architecture position: Kernel > Selectors.  Read-only.  Consumed by the
    module services, which hand the DTOs to the pure engines.

Invariants enforced:
    - Date filters are inclusive on both ends and applied in SQL.
    - Voucher lines are eager-loaded in line_no order.
    - Results are ordered deterministically (date, then number) so repeated
      reads of unchanged data yield identical DTO sequences.

Failure modes:
    - A company with no rows yields empty tuples / None, never an error.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol, runtime_checkable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from cashbook_kernel.domain.dtos import (
    AccountInfo,
    CarryforwardEntry,
    CompanyInfo,
    FinalWithholdingIncomeInfo,
    PayrollRecordInfo,
    TaxSettingsInfo,
    Voucher,
    VoucherKind,
)
from cashbook_kernel.models.account import Account
from cashbook_kernel.models.carryforward import McitCredit, NolcoEntry
from cashbook_kernel.models.company import Company
from cashbook_kernel.models.payroll import PayrollPeriod, PayrollRecord
from cashbook_kernel.models.tax_settings import FinalWithholdingIncome, TaxSettings
from cashbook_kernel.models.voucher import CashDisbursement, CashReceipt
from cashbook_kernel.selectors.base import BaseSelector


@runtime_checkable
class LedgerSource(Protocol):
    """Protocol for the filtered reads the reporting services depend on.

    Implementations: LedgerSelector (SQLAlchemy).
    """

    def get_company(self, company_id: UUID) -> CompanyInfo | None: ...

    def get_accounts(self, company_id: UUID) -> tuple[AccountInfo, ...]: ...

    def get_vouchers(
        self,
        company_id: UUID,
        kind: VoucherKind,
        start_date: date,
        end_date: date,
    ) -> tuple[Voucher, ...]: ...

    def get_tax_settings(self, company_id: UUID, tax_year: int) -> TaxSettingsInfo | None: ...

    def get_mcit_credits(self, company_id: UUID) -> tuple[CarryforwardEntry, ...]: ...

    def get_nolco_entries(self, company_id: UUID) -> tuple[CarryforwardEntry, ...]: ...

    def get_final_withholding_incomes(
        self,
        company_id: UUID,
        tax_year: int,
        quarter: int | None = None,
    ) -> tuple[FinalWithholdingIncomeInfo, ...]: ...

    def get_payroll_records(
        self,
        company_id: UUID,
        start_date: date,
        end_date: date,
    ) -> tuple[PayrollRecordInfo, ...]: ...


class LedgerSelector(BaseSelector):
    """SQLAlchemy implementation of LedgerSource."""

    def get_company(self, company_id: UUID) -> CompanyInfo | None:
        company = self.session.get(Company, company_id)
        return company.to_dto() if company is not None else None

    def get_accounts(self, company_id: UUID) -> tuple[AccountInfo, ...]:
        """All accounts of the company, active or not, ordered by code."""
        rows = self.session.scalars(
            select(Account)
            .where(Account.company_id == company_id)
            .order_by(Account.code)
        ).all()
        return tuple(row.to_dto() for row in rows)

    def get_vouchers(
        self,
        company_id: UUID,
        kind: VoucherKind,
        start_date: date,
        end_date: date,
    ) -> tuple[Voucher, ...]:
        """Vouchers of one stream dated within [start_date, end_date]."""
        if kind == VoucherKind.RECEIPT:
            model, number_col = CashReceipt, CashReceipt.crn
        else:
            model, number_col = CashDisbursement, CashDisbursement.cdn

        rows = self.session.scalars(
            select(model)
            .options(selectinload(model.lines))
            .where(
                model.company_id == company_id,
                model.voucher_date >= start_date,
                model.voucher_date <= end_date,
            )
            .order_by(model.voucher_date, number_col)
        ).all()
        return tuple(row.to_dto() for row in rows)

    def get_tax_settings(self, company_id: UUID, tax_year: int) -> TaxSettingsInfo | None:
        row = self.session.scalars(
            select(TaxSettings).where(
                TaxSettings.company_id == company_id,
                TaxSettings.tax_year == tax_year,
            )
        ).one_or_none()
        return row.to_dto() if row is not None else None

    def get_mcit_credits(self, company_id: UUID) -> tuple[CarryforwardEntry, ...]:
        rows = self.session.scalars(
            select(McitCredit)
            .where(McitCredit.company_id == company_id)
            .order_by(McitCredit.tax_year)
        ).all()
        return tuple(row.to_dto() for row in rows)

    def get_nolco_entries(self, company_id: UUID) -> tuple[CarryforwardEntry, ...]:
        rows = self.session.scalars(
            select(NolcoEntry)
            .where(NolcoEntry.company_id == company_id)
            .order_by(NolcoEntry.loss_year)
        ).all()
        return tuple(row.to_dto() for row in rows)

    def get_final_withholding_incomes(
        self,
        company_id: UUID,
        tax_year: int,
        quarter: int | None = None,
    ) -> tuple[FinalWithholdingIncomeInfo, ...]:
        stmt = select(FinalWithholdingIncome).where(
            FinalWithholdingIncome.company_id == company_id,
            FinalWithholdingIncome.tax_year == tax_year,
        )
        if quarter is not None:
            stmt = stmt.where(FinalWithholdingIncome.quarter == quarter)
        rows = self.session.scalars(
            stmt.order_by(FinalWithholdingIncome.quarter, FinalWithholdingIncome.income_type)
        ).all()
        return tuple(row.to_dto() for row in rows)

    def get_payroll_records(
        self,
        company_id: UUID,
        start_date: date,
        end_date: date,
    ) -> tuple[PayrollRecordInfo, ...]:
        """Records of payroll periods lying entirely within [start_date, end_date]."""
        rows = self.session.scalars(
            select(PayrollRecord)
            .join(PayrollRecord.period)
            .options(
                selectinload(PayrollRecord.period),
                selectinload(PayrollRecord.employee),
            )
            .where(
                PayrollPeriod.company_id == company_id,
                PayrollPeriod.period_start >= start_date,
                PayrollPeriod.period_end <= end_date,
            )
            .order_by(PayrollPeriod.period_end, PayrollRecord.employee_id)
        ).all()
        return tuple(row.to_dto() for row in rows)
