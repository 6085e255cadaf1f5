"""
Tests for the pure BIR extractor functions.

Covers:
- Payroll summary and the compensation withholding return
- Sales / purchases listings with blank counterparty fields
- 2307 withholding credits
- Cash-basis income summary and percentage tax
- Alphalist aggregation and ordering
- Supplier payment ranking
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

from cashbook_kernel.domain.dtos import (
    EmployeeInfo,
    FinalWithholdingIncomeInfo,
    IncomeType,
    PayrollRecordInfo,
    Voucher,
    VoucherKind,
)
from cashbook_modules.bir.extractor import (
    UNKNOWN_SUPPLIER,
    build_alphalist,
    build_books_of_accounts,
    build_income_summary,
    build_percentage_tax,
    build_purchases_list,
    build_sales_list,
    build_supplier_payments,
    build_withholding_credits,
    build_withholding_return,
    summarize_payroll,
)

D = Decimal
COMPANY_ID = uuid4()


def receipt(number, on, total, **fields) -> Voucher:
    return Voucher(uuid4(), COMPANY_ID, VoucherKind.RECEIPT, number, on, D(total), **fields)


def disbursement(number, on, total, **fields) -> Voucher:
    return Voucher(uuid4(), COMPANY_ID, VoucherKind.DISBURSEMENT, number, on, D(total), **fields)


def employee(number, first, last, tin=None) -> EmployeeInfo:
    return EmployeeInfo(uuid4(), number, first, last, tin)


def record(emp, period_id, period_end, gross, **amounts) -> PayrollRecordInfo:
    return PayrollRecordInfo(
        employee=emp,
        period_id=period_id,
        period_start=period_end.replace(day=1),
        period_end=period_end,
        gross_compensation=D(gross),
        **{k: D(v) for k, v in amounts.items()},
    )


JUAN = employee("E-001", "Juan", "Dela Cruz", "100-200-300-000")
MARIA = employee("E-002", "Maria", "Santos")
ANA = employee("E-003", "Ana", "de la Paz")


class TestPayroll:
    def test_employees_counted_once_across_periods(self):
        jan, feb = uuid4(), uuid4()
        records = [
            record(JUAN, jan, date(2024, 1, 31), "30000", withholding_tax="1500", sss_employee="1350",
                   sss_employer="2850", philhealth_employee="750", philhealth_employer="750",
                   hdmf_employee="200", hdmf_employer="200"),
            record(JUAN, feb, date(2024, 2, 29), "30000", withholding_tax="1500"),
            record(MARIA, feb, date(2024, 2, 29), "20000"),
        ]
        summary = summarize_payroll(records)

        assert summary.period_count == 2
        assert summary.employee_count == 2
        assert summary.total_gross_compensation == D("80000")
        assert summary.total_withholding_tax == D("3000")
        assert summary.total_employee_contributions == D("2300")
        assert summary.total_employer_contributions == D("3800")

    def test_withholding_return_tracks_compensation_only(self):
        data = build_withholding_return([record(JUAN, uuid4(), date(2024, 3, 31), "30000", withholding_tax="1500")])
        assert data.withholding.compensation_withholding_tax == D("1500")
        assert data.withholding.expanded_withholding_tax == D("0")
        assert data.withholding.final_withholding_tax == D("0")
        assert data.withholding.total_withholding_tax == D("1500")
        assert data.payroll_summary.employee_count == 1

    def test_empty_payroll(self):
        summary = summarize_payroll([])
        assert summary.employee_count == 0
        assert summary.total_gross_compensation == D("0")


class TestListings:
    def test_sales_list_every_receipt_in_date_order(self):
        receipts = [
            receipt("CR-2", date(2024, 1, 20), "1120", is_vatable=True, vat_amount=D("120"),
                    net_amount=D("1000"), counterparty_name="Bayani Store", counterparty_tin="111"),
            receipt("CR-1", date(2024, 1, 5), "500"),
        ]
        data = build_sales_list(receipts)

        assert [r.crn for r in data.transactions] == ["CR-1", "CR-2"]
        blank = data.transactions[0]
        assert (blank.customer_tin, blank.customer_name, blank.customer_address) == ("", "", "")
        assert blank.sales_amount == D("500")
        assert data.summary.vatable_sales == D("1000")
        assert data.summary.exempt_sales == D("500")
        assert data.summary.total_sales == D("1500")
        assert data.summary.total_output_vat == D("120")
        assert data.summary.transaction_count == 2

    def test_purchases_list(self):
        disbursements = [
            disbursement("CD-1", date(2024, 2, 1), "2240", has_input_vat=True, vat_amount=D("240"),
                         net_amount=D("2000"), counterparty_name="Luzon Supply Co."),
            disbursement("CD-2", date(2024, 2, 2), "300"),
        ]
        data = build_purchases_list(disbursements)

        assert data.transactions[0].supplier_name == "Luzon Supply Co."
        assert data.transactions[1].supplier_name == ""
        assert data.summary.total_purchases == D("2540")
        assert data.summary.vatable_purchases == D("2000")
        assert data.summary.total_input_vat == D("240")


class TestWithholdingCredits:
    def test_only_receipts_with_withholding(self):
        receipts = [
            receipt("CR-1", date(2024, 4, 1), "9800", net_amount=D("10000"), withholding_tax_amount=D("200"),
                    atc_code="WC158", counterparty_tin="222", counterparty_name="Acme Corp"),
            receipt("CR-2", date(2024, 4, 2), "4900", withholding_tax_amount=D("100"), counterparty_tin="222"),
            receipt("CR-3", date(2024, 4, 3), "1000"),
        ]
        data = build_withholding_credits(receipts)

        assert [r.crn for r in data.transactions] == ["CR-1", "CR-2"]
        assert data.transactions[0].income_payment == D("10000")
        assert data.transactions[0].atc_code == "WC158"
        assert data.transactions[1].atc_code == ""
        assert data.summary.total_tax_withheld == D("300")
        assert data.summary.total_income_payments == D("14900")
        assert data.summary.withholding_agent_count == 1


class TestIncome:
    def test_cash_basis_income(self):
        summary = build_income_summary(
            [receipt("CR-1", date(2024, 1, 1), "11200", net_amount=D("10000")),
             receipt("CR-2", date(2024, 1, 2), "5000")],
            [disbursement("CD-1", date(2024, 1, 3), "3000")],
            D("0.25"),
        )
        assert summary.gross_income == D("15000")
        assert summary.deductions == D("3000")
        assert summary.taxable_income == D("12000")
        assert summary.income_tax_due == D("3000.00")

    def test_loss_has_zero_tax(self):
        summary = build_income_summary([], [disbursement("CD-1", date(2024, 1, 3), "100")], D("0.25"))
        assert summary.taxable_income == D("-100")
        assert summary.income_tax_due == D("0.00")

    def test_final_withholding_is_disclosed_not_taxed(self):
        fwi = [
            FinalWithholdingIncomeInfo(2024, IncomeType.BANK_INTEREST, D("1000"), D("200"), quarter=1),
            FinalWithholdingIncomeInfo(2024, IncomeType.DIVIDENDS, D("500"), D("50"), quarter=1),
        ]
        summary = build_income_summary([receipt("CR-1", date(2024, 1, 1), "1000")], [], D("0.25"), fwi)
        assert summary.taxable_income == D("1000")
        assert summary.final_withholding_gross == D("1500")
        assert summary.final_tax_withheld == D("250")
        assert len(summary.final_withholding_incomes) == 2

    def test_percentage_tax(self):
        income = build_income_summary([receipt("CR-1", date(2024, 1, 1), "123456.78")], [], D("0.25"))
        data = build_percentage_tax(income, D("0.03"))
        assert data.gross_receipts == D("123456.78")
        assert data.percentage_tax_due == D("3703.70")


class TestAlphalist:
    def test_per_employee_totals_sorted_by_last_name(self):
        jan, feb = uuid4(), uuid4()
        records = [
            record(MARIA, jan, date(2024, 1, 31), "20000", withholding_tax="500", sss_employee="900"),
            record(JUAN, jan, date(2024, 1, 31), "30000", withholding_tax="1500"),
            record(JUAN, feb, date(2024, 2, 29), "30000", withholding_tax="1500", hdmf_employee="200"),
            record(ANA, feb, date(2024, 2, 29), "10000"),
        ]
        data = build_alphalist(records)

        # case-insensitive: "de la Paz" sorts with "Dela Cruz"
        assert [r.last_name for r in data.alphalist] == ["de la Paz", "Dela Cruz", "Santos"]
        juan = data.alphalist[1]
        assert juan.total_compensation == D("60000")
        assert juan.total_withholding_tax == D("3000")
        assert juan.net_pay == D("56800")
        assert juan.tin == "100-200-300-000"
        assert data.alphalist[2].tin == ""
        assert data.total_employees == 3
        assert data.total_compensation == D("90000")
        assert data.total_withholding_tax == D("3500")


class TestSupplierPayments:
    def test_ranked_by_total_then_name(self):
        disbursements = [
            disbursement("CD-1", date(2024, 1, 1), "500", counterparty_name="Meralco"),
            disbursement("CD-2", date(2024, 1, 2), "700", counterparty_name="Luzon Supply Co."),
            disbursement("CD-3", date(2024, 1, 3), "200", counterparty_name="Meralco"),
            disbursement("CD-4", date(2024, 1, 4), "50", counterparty_name="  "),
            disbursement("CD-5", date(2024, 1, 5), "50"),
        ]
        data = build_supplier_payments(disbursements)

        assert [(s.name, s.total_payments, s.count) for s in data.suppliers] == [
            ("Luzon Supply Co.", D("700"), 1),
            ("Meralco", D("700"), 2),
            (UNKNOWN_SUPPLIER, D("100"), 2),
        ]
        assert data.total_payments == D("1500")
        assert data.supplier_count == 3


class TestBooksOfAccounts:
    def test_combines_vat_income_and_payroll(self):
        data = build_books_of_accounts(
            [receipt("CR-1", date(2024, 1, 1), "1120", is_vatable=True, vat_amount=D("120"), net_amount=D("1000"))],
            [disbursement("CD-1", date(2024, 1, 2), "400")],
            [record(JUAN, uuid4(), date(2024, 1, 31), "30000")],
            D("0.25"),
        )
        assert data.vat.output_vat == D("120")
        assert data.income.taxable_income == D("600")
        assert data.payroll.employee_count == 1
