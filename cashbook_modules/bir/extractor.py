"""
Pure BIR data extraction functions.

Each function projects already-fetched vouchers, payroll records or final
withholding incomes into one form's data shape.  ZERO I/O.

Listings emit one row per voucher in date order; blank counterparty fields
become empty strings so the rows can be written straight into a filing
template.  Amounts keep the store's two fractional digits; only derived
tax amounts are rounded (to centavos, half up).
"""

from __future__ import annotations

from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence
from uuid import UUID

from cashbook_kernel.domain.dtos import (
    FinalWithholdingIncomeInfo,
    PayrollRecordInfo,
    Voucher,
)
from cashbook_modules.bir.models import (
    AlphalistData,
    AlphalistRow,
    BooksOfAccountsData,
    IncomeSummary,
    PayrollSummary,
    PercentageTaxData,
    PurchaseListData,
    PurchaseListRow,
    PurchaseListSummary,
    SalesListData,
    SalesListRow,
    SalesListSummary,
    SupplierPaymentRow,
    SupplierPaymentsData,
    WithholdingCreditData,
    WithholdingCreditRow,
    WithholdingCreditSummary,
    WithholdingReturnData,
    WithholdingSummary,
)
from cashbook_modules.vat.books import build_vat_summary

ZERO = Decimal("0")
CENTAVO = Decimal("0.01")

UNKNOWN_SUPPLIER = "Unknown"


def _centavos(amount: Decimal) -> Decimal:
    return amount.quantize(CENTAVO, rounding=ROUND_HALF_UP)


def _by_date(vouchers: Iterable[Voucher]) -> list[Voucher]:
    return sorted(vouchers, key=lambda v: (v.voucher_date, v.number))


# =========================================================================
# Withholding and payroll
# =========================================================================


def summarize_payroll(records: Sequence[PayrollRecordInfo]) -> PayrollSummary:
    """Totals of a window's payroll records; employees counted once each."""
    def total(attr: str) -> Decimal:
        return sum((getattr(r, attr) for r in records), ZERO)

    sss_ee, ph_ee, hdmf_ee = total("sss_employee"), total("philhealth_employee"), total("hdmf_employee")
    sss_er, ph_er, hdmf_er = total("sss_employer"), total("philhealth_employer"), total("hdmf_employer")
    return PayrollSummary(
        period_count=len({r.period_id for r in records}),
        employee_count=len({r.employee.employee_id for r in records}),
        total_gross_compensation=total("gross_compensation"),
        total_withholding_tax=total("withholding_tax"),
        total_sss_employee=sss_ee,
        total_philhealth_employee=ph_ee,
        total_hdmf_employee=hdmf_ee,
        total_sss_employer=sss_er,
        total_philhealth_employer=ph_er,
        total_hdmf_employer=hdmf_er,
        total_employee_contributions=sss_ee + ph_ee + hdmf_ee,
        total_employer_contributions=sss_er + ph_er + hdmf_er,
    )


def build_withholding_summary(payroll: PayrollSummary) -> WithholdingSummary:
    compensation = payroll.total_withholding_tax
    return WithholdingSummary(
        compensation_withholding_tax=compensation,
        expanded_withholding_tax=ZERO,
        final_withholding_tax=ZERO,
        total_withholding_tax=compensation,
    )


def build_withholding_return(records: Sequence[PayrollRecordInfo]) -> WithholdingReturnData:
    payroll = summarize_payroll(records)
    return WithholdingReturnData(
        withholding=build_withholding_summary(payroll),
        payroll_summary=payroll,
    )


# =========================================================================
# Sales and purchases
# =========================================================================


def build_sales_list(receipts: Iterable[Voucher]) -> SalesListData:
    """Summary List of Sales: every receipt of the window plus the VAT split."""
    ordered = _by_date(receipts)
    rows = tuple(
        SalesListRow(
            voucher_date=r.voucher_date,
            crn=r.number,
            customer_tin=r.counterparty_tin or "",
            customer_name=r.counterparty_name or "",
            customer_address=r.counterparty_address or "",
            sales_amount=r.net_or_total,
            vat_amount=r.vat_amount,
            gross_amount=r.total_amount,
            is_vatable=r.is_vatable,
        )
        for r in ordered
    )
    vat = build_vat_summary(ordered, ())
    return SalesListData(
        transactions=rows,
        summary=SalesListSummary(
            total_sales=vat.total_sales,
            vatable_sales=vat.vatable_sales,
            zero_rated_sales=vat.zero_rated_sales,
            exempt_sales=vat.exempt_sales,
            total_output_vat=vat.output_vat,
            transaction_count=len(rows),
        ),
    )


def build_purchases_list(disbursements: Iterable[Voucher]) -> PurchaseListData:
    """Summary List of Purchases: every disbursement of the window."""
    ordered = _by_date(disbursements)
    rows = tuple(
        PurchaseListRow(
            voucher_date=d.voucher_date,
            cdn=d.number,
            supplier_tin=d.counterparty_tin or "",
            supplier_name=d.counterparty_name or "",
            supplier_address=d.counterparty_address or "",
            purchase_amount=d.net_or_total,
            vat_amount=d.vat_amount,
            gross_amount=d.total_amount,
            has_input_vat=d.has_input_vat,
        )
        for d in ordered
    )
    vat = build_vat_summary((), ordered)
    return PurchaseListData(
        transactions=rows,
        summary=PurchaseListSummary(
            total_purchases=sum((p.gross_amount for p in rows), ZERO),
            vatable_purchases=sum((p.purchase_amount for p in rows if p.has_input_vat), ZERO),
            total_input_vat=vat.input_vat,
            transaction_count=len(rows),
        ),
    )


def build_withholding_credits(receipts: Iterable[Voucher]) -> WithholdingCreditData:
    """Form 2307 credits: receipts from which the customer withheld tax."""
    rows = tuple(
        WithholdingCreditRow(
            voucher_date=r.voucher_date,
            crn=r.number,
            withholding_agent_tin=r.counterparty_tin or "",
            withholding_agent_name=r.counterparty_name or "",
            withholding_agent_address=r.counterparty_address or "",
            income_payment=r.net_or_total,
            tax_withheld=r.withholding_tax_amount,
            atc_code=r.atc_code or "",
        )
        for r in _by_date(receipts)
        if r.withholding_tax_amount > ZERO
    )
    return WithholdingCreditData(
        transactions=rows,
        summary=WithholdingCreditSummary(
            total_income_payments=sum((w.income_payment for w in rows), ZERO),
            total_tax_withheld=sum((w.tax_withheld for w in rows), ZERO),
            transaction_count=len(rows),
            withholding_agent_count=len({w.withholding_agent_tin for w in rows}),
        ),
    )


# =========================================================================
# Income
# =========================================================================


def build_income_summary(
    receipts: Iterable[Voucher],
    disbursements: Iterable[Voucher],
    tax_rate: Decimal,
    final_withholding_incomes: Sequence[FinalWithholdingIncomeInfo] = (),
) -> IncomeSummary:
    """
    Cash-basis income: receipts less disbursements, each at net (or total).

    ``tax_rate`` is a fraction (0.25).  Final withholding incomes are
    carried along for disclosure only.
    """
    gross_income = sum((r.net_or_total for r in receipts), ZERO)
    deductions = sum((d.net_or_total for d in disbursements), ZERO)
    taxable_income = gross_income - deductions
    return IncomeSummary(
        gross_income=gross_income,
        deductions=deductions,
        taxable_income=taxable_income,
        income_tax_rate=tax_rate,
        income_tax_due=_centavos(max(ZERO, taxable_income * tax_rate)),
        final_withholding_incomes=tuple(final_withholding_incomes),
        final_withholding_gross=sum((f.gross_amount for f in final_withholding_incomes), ZERO),
        final_tax_withheld=sum((f.tax_withheld for f in final_withholding_incomes), ZERO),
    )


def build_percentage_tax(income: IncomeSummary, rate: Decimal) -> PercentageTaxData:
    """2551-Q percentage tax: ``rate`` (a fraction) of gross receipts."""
    return PercentageTaxData(
        income=income,
        gross_receipts=income.gross_income,
        percentage_tax_rate=rate,
        percentage_tax_due=_centavos(income.gross_income * rate),
    )


# =========================================================================
# Annual information returns
# =========================================================================


def build_alphalist(records: Iterable[PayrollRecordInfo]) -> AlphalistData:
    """Per-employee annual totals, sorted by last name."""
    employees = {}
    totals: dict[UUID, dict[str, Decimal]] = defaultdict(lambda: defaultdict(lambda: ZERO))
    for r in records:
        emp_id = r.employee.employee_id
        employees[emp_id] = r.employee
        t = totals[emp_id]
        t["compensation"] += r.gross_compensation
        t["withholding"] += r.withholding_tax
        t["sss"] += r.sss_employee
        t["philhealth"] += r.philhealth_employee
        t["hdmf"] += r.hdmf_employee

    rows = []
    for emp_id, employee in employees.items():
        t = totals[emp_id]
        rows.append(
            AlphalistRow(
                employee_number=employee.employee_number,
                tin=employee.tin or "",
                last_name=employee.last_name,
                first_name=employee.first_name,
                total_compensation=t["compensation"],
                total_withholding_tax=t["withholding"],
                total_sss=t["sss"],
                total_philhealth=t["philhealth"],
                total_hdmf=t["hdmf"],
                net_pay=t["compensation"] - t["withholding"] - t["sss"] - t["philhealth"] - t["hdmf"],
            )
        )
    rows.sort(key=lambda row: (row.last_name.lower(), row.first_name.lower(), row.employee_number))
    return AlphalistData(
        alphalist=tuple(rows),
        total_employees=len(rows),
        total_compensation=sum((row.total_compensation for row in rows), ZERO),
        total_withholding_tax=sum((row.total_withholding_tax for row in rows), ZERO),
    )


def build_supplier_payments(disbursements: Iterable[Voucher]) -> SupplierPaymentsData:
    """Payments per payee, largest total first."""
    ordered = list(disbursements)
    payments: dict[str, list] = {}
    for d in ordered:
        name = (d.counterparty_name or "").strip() or UNKNOWN_SUPPLIER
        entry = payments.setdefault(name, [ZERO, 0])
        entry[0] += d.total_amount
        entry[1] += 1

    suppliers = sorted(
        (SupplierPaymentRow(name=name, total_payments=total, count=count)
         for name, (total, count) in payments.items()),
        key=lambda s: (-s.total_payments, s.name),
    )
    return SupplierPaymentsData(
        total_payments=sum((d.total_amount for d in ordered), ZERO),
        supplier_count=len(suppliers),
        suppliers=tuple(suppliers),
    )


def build_books_of_accounts(
    receipts: Sequence[Voucher],
    disbursements: Sequence[Voucher],
    records: Sequence[PayrollRecordInfo],
    tax_rate: Decimal,
    final_withholding_incomes: Sequence[FinalWithholdingIncomeInfo] = (),
) -> BooksOfAccountsData:
    return BooksOfAccountsData(
        vat=build_vat_summary(receipts, disbursements),
        income=build_income_summary(receipts, disbursements, tax_rate, final_withholding_incomes),
        payroll=summarize_payroll(records),
    )
