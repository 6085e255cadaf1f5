"""
BIR Report Domain Models (``cashbook_modules.bir.models``).

Responsibility
--------------
Frozen dataclass value objects for the per-form data extracts and the
report envelope (form code, period, company identity, generation time).

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* Listing rows are emitted one per voucher and are not aggregated further
  here; the summaries next to them are computed from the same vouchers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Union

from cashbook_engines.bucketing import ReportPeriod
from cashbook_kernel.domain.dtos import FinalWithholdingIncomeInfo
from cashbook_modules.vat.models import VatSummary

ZERO = Decimal("0")


# =========================================================================
# Withholding and payroll
# =========================================================================


@dataclass(frozen=True)
class PayrollSummary:
    period_count: int
    employee_count: int
    total_gross_compensation: Decimal
    total_withholding_tax: Decimal
    total_sss_employee: Decimal
    total_philhealth_employee: Decimal
    total_hdmf_employee: Decimal
    total_sss_employer: Decimal
    total_philhealth_employer: Decimal
    total_hdmf_employer: Decimal
    total_employee_contributions: Decimal
    total_employer_contributions: Decimal


@dataclass(frozen=True)
class WithholdingSummary:
    """
    Taxes the company withheld as an employer or payor.

    Only compensation withholding is tracked; the cash ledger records no
    expanded or final withholding on disbursements, so those stay zero.
    """

    compensation_withholding_tax: Decimal
    expanded_withholding_tax: Decimal
    final_withholding_tax: Decimal
    total_withholding_tax: Decimal


@dataclass(frozen=True)
class WithholdingReturnData:
    withholding: WithholdingSummary
    payroll_summary: PayrollSummary


# =========================================================================
# Sales and purchases listings
# =========================================================================


@dataclass(frozen=True)
class SalesListRow:
    voucher_date: date
    crn: str
    customer_tin: str
    customer_name: str
    customer_address: str
    sales_amount: Decimal
    vat_amount: Decimal
    gross_amount: Decimal
    is_vatable: bool


@dataclass(frozen=True)
class SalesListSummary:
    total_sales: Decimal
    vatable_sales: Decimal
    zero_rated_sales: Decimal
    exempt_sales: Decimal
    total_output_vat: Decimal
    transaction_count: int


@dataclass(frozen=True)
class SalesListData:
    transactions: tuple[SalesListRow, ...]
    summary: SalesListSummary


@dataclass(frozen=True)
class PurchaseListRow:
    voucher_date: date
    cdn: str
    supplier_tin: str
    supplier_name: str
    supplier_address: str
    purchase_amount: Decimal
    vat_amount: Decimal
    gross_amount: Decimal
    has_input_vat: bool


@dataclass(frozen=True)
class PurchaseListSummary:
    total_purchases: Decimal
    vatable_purchases: Decimal
    total_input_vat: Decimal
    transaction_count: int


@dataclass(frozen=True)
class PurchaseListData:
    transactions: tuple[PurchaseListRow, ...]
    summary: PurchaseListSummary


# =========================================================================
# Creditable withholding (2307)
# =========================================================================


@dataclass(frozen=True)
class WithholdingCreditRow:
    """A receipt from which the customer withheld creditable tax."""

    voucher_date: date
    crn: str
    withholding_agent_tin: str
    withholding_agent_name: str
    withholding_agent_address: str
    income_payment: Decimal
    tax_withheld: Decimal
    atc_code: str


@dataclass(frozen=True)
class WithholdingCreditSummary:
    total_income_payments: Decimal
    total_tax_withheld: Decimal
    transaction_count: int
    withholding_agent_count: int


@dataclass(frozen=True)
class WithholdingCreditData:
    transactions: tuple[WithholdingCreditRow, ...]
    summary: WithholdingCreditSummary


# =========================================================================
# Income
# =========================================================================


@dataclass(frozen=True)
class IncomeSummary:
    """
    Cash-basis income for a window.

    Final withholding incomes are informational: they are already taxed at
    source and not part of ``taxable_income``.
    """

    gross_income: Decimal
    deductions: Decimal
    taxable_income: Decimal
    income_tax_rate: Decimal
    income_tax_due: Decimal
    final_withholding_incomes: tuple[FinalWithholdingIncomeInfo, ...] = ()
    final_withholding_gross: Decimal = ZERO
    final_tax_withheld: Decimal = ZERO


@dataclass(frozen=True)
class PercentageTaxData:
    income: IncomeSummary
    gross_receipts: Decimal
    percentage_tax_rate: Decimal
    percentage_tax_due: Decimal


# =========================================================================
# Annual information returns
# =========================================================================


@dataclass(frozen=True)
class AlphalistRow:
    employee_number: str
    tin: str
    last_name: str
    first_name: str
    total_compensation: Decimal
    total_withholding_tax: Decimal
    total_sss: Decimal
    total_philhealth: Decimal
    total_hdmf: Decimal
    net_pay: Decimal


@dataclass(frozen=True)
class AlphalistData:
    alphalist: tuple[AlphalistRow, ...]
    total_employees: int
    total_compensation: Decimal
    total_withholding_tax: Decimal


@dataclass(frozen=True)
class SupplierPaymentRow:
    name: str
    total_payments: Decimal
    count: int


@dataclass(frozen=True)
class SupplierPaymentsData:
    total_payments: Decimal
    supplier_count: int
    suppliers: tuple[SupplierPaymentRow, ...]


@dataclass(frozen=True)
class BooksOfAccountsData:
    vat: VatSummary
    income: IncomeSummary
    payroll: PayrollSummary


# =========================================================================
# Envelope
# =========================================================================


BirReportData = Union[
    WithholdingReturnData,
    WithholdingSummary,
    VatSummary,
    SalesListData,
    PurchaseListData,
    WithholdingCreditData,
    PercentageTaxData,
    IncomeSummary,
    AlphalistData,
    SupplierPaymentsData,
    BooksOfAccountsData,
]


@dataclass(frozen=True)
class BirCompany:
    """Company identity printed on the form.

    ``name`` is None for an unknown company; TIN and address fall back to
    empty strings.
    """

    name: str | None
    tin: str
    address: str


@dataclass(frozen=True)
class BirReport:
    form_code: str
    period: ReportPeriod
    company: BirCompany
    generated_at: str
    data: BirReportData
