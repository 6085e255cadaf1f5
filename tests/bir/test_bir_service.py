"""
Integration tests for BirReportService.

Covers:
- Dispatch of every registered form code to its data shape
- Period validation ahead of the form lookup
- Company envelope, including an unknown company
- Window selection for monthly, quarterly and annual requests
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from cashbook_kernel.domain.dtos import IncomeType
from cashbook_kernel.exceptions import InvalidPeriodError, UnknownFormCodeError
from cashbook_kernel.models.tax_settings import FinalWithholdingIncome
from cashbook_modules.bir.forms import BIR_FORMS
from cashbook_modules.bir.models import (
    AlphalistData,
    BooksOfAccountsData,
    IncomeSummary,
    PercentageTaxData,
    PurchaseListData,
    SalesListData,
    SupplierPaymentsData,
    WithholdingCreditData,
    WithholdingReturnData,
    WithholdingSummary,
)
from cashbook_modules.bir.service import BirReportService
from cashbook_modules.tax.service import TaxService
from cashbook_modules.vat.models import VatSummary

D = Decimal

DATA_TYPES = {
    "1601-C": WithholdingReturnData,
    "1601-E": WithholdingReturnData,
    "1601-F": WithholdingReturnData,
    "2550-Q": VatSummary,
    "SLS": SalesListData,
    "SLP": PurchaseListData,
    "2307-Summary": WithholdingCreditData,
    "1702-Q": IncomeSummary,
    "2551-Q": PercentageTaxData,
    "1602-Q": WithholdingSummary,
    "1603-Q": WithholdingSummary,
    "1702-RT": IncomeSummary,
    "1604-C": AlphalistData,
    "1604-F": AlphalistData,
    "1709": SupplierPaymentsData,
    "BOA": BooksOfAccountsData,
}


@pytest.fixture
def service(session, clock):
    return BirReportService(session, clock=clock)


@pytest.fixture
def ledger(add_receipt, add_disbursement, add_employee, add_payroll):
    """A first quarter of trading plus a June payroll."""
    add_receipt(
        "CR-001", date(2024, 1, 15), "11200", lines=[("4000", "10000"), ("2100", "1200")],
        is_vatable=True, vat_amount=D("1200"), net_amount=D("10000"),
        payor_name="Bayani Store", counterparty_tin="111-111-111-000",
    )
    add_receipt(
        "CR-002", date(2024, 2, 10), "9800", lines=[("4100", "9800")],
        net_amount=D("10000"), withholding_tax_amount=D("200"), atc_code="WC158",
        payor_name="Acme Corp", counterparty_tin="222-222-222-000",
    )
    add_disbursement(
        "CD-001", date(2024, 2, 20), "2240", lines=[("5100", "2000"), ("1400", "240")],
        has_input_vat=True, vat_amount=D("240"), net_amount=D("2000"), payee_name="Luzon Supply Co.",
    )
    add_disbursement("CD-002", date(2024, 3, 5), "5000", lines=[("6100", "5000")], payee_name="Ayala Land")

    juan = add_employee("E-001", "Juan", "Dela Cruz", tin="100-200-300-000")
    maria = add_employee("E-002", "Maria", "Santos")
    add_payroll(date(2024, 1, 1), date(2024, 1, 31), {
        juan: {"gross_compensation": "30000", "withholding_tax": "1500"},
    })
    add_payroll(date(2024, 6, 1), date(2024, 6, 30), {
        juan: {"gross_compensation": "30000", "withholding_tax": "1500"},
        maria: {"gross_compensation": "20000", "withholding_tax": "500"},
    })


class TestDispatch:
    @pytest.mark.parametrize("form_code", sorted(BIR_FORMS))
    def test_every_form_builds_its_shape(self, service, company_id, ledger, form_code):
        report = service.get_report_data(form_code, company_id, 2024, quarter=1)
        assert report.form_code == form_code
        assert isinstance(report.data, DATA_TYPES[form_code])

    def test_unknown_form_code(self, service, company_id):
        with pytest.raises(UnknownFormCodeError):
            service.get_report_data("0000", company_id, 2024)

    def test_period_validated_before_form_code(self, service, company_id):
        with pytest.raises(InvalidPeriodError):
            service.get_report_data("0000", company_id, "twenty")

    @pytest.mark.parametrize(
        "kwargs",
        [{"year": None}, {"year": 2024, "quarter": 5}, {"year": 2024, "month": 13}, {"year": "2024x"}],
    )
    def test_invalid_periods(self, service, company_id, kwargs):
        with pytest.raises(InvalidPeriodError):
            service.get_report_data("2550-Q", company_id, **kwargs)

    def test_string_period_parameters_accepted(self, service, company_id, ledger):
        report = service.get_report_data("2550-Q", company_id, "2024", quarter="1")
        assert report.period.start_date == date(2024, 1, 1)
        assert report.period.end_date == date(2024, 3, 31)


class TestEnvelope:
    def test_company_identity(self, service, company_id, clock):
        report = service.get_report_data("BOA", company_id, 2024)
        assert report.company.name == "Sampaguita Trading Corp."
        assert report.company.tin == "123-456-789-000"
        assert report.company.address == "123 Ayala Ave, Makati City"
        assert report.generated_at == clock.now().isoformat()

    def test_unknown_company_still_builds(self, service):
        report = service.get_report_data("2550-Q", uuid4(), 2024, quarter=1)
        assert report.company.name is None
        assert report.company.tin == ""
        assert report.company.address == ""
        assert report.data.vat_payable == D("0")

    def test_logs_generation(self, service, company_id, captured_logs):
        service.get_report_data("SLS", company_id, 2024, month=2)
        records = [r for r in captured_logs() if r["message"] == "bir_report_generated"]
        assert len(records) == 1
        assert records[0]["form_code"] == "SLS"
        assert records[0]["start_date"] == "2024-02-01"


class TestWindows:
    def test_quarterly_vat(self, service, company_id, ledger):
        data = service.get_report_data("2550-Q", company_id, 2024, quarter=1).data
        assert data.vatable_sales == D("10000")
        assert data.exempt_sales == D("9800")
        assert data.vat_payable == D("960")

    def test_month_narrows_window(self, service, company_id, ledger):
        data = service.get_report_data("SLS", company_id, 2024, month=2).data
        assert [r.crn for r in data.transactions] == ["CR-002"]

    def test_monthly_withholding(self, service, company_id, ledger):
        data = service.get_report_data("1601-C", company_id, 2024, month=6).data
        assert data.payroll_summary.employee_count == 2
        assert data.withholding.compensation_withholding_tax == D("2000")

    def test_payroll_period_must_lie_inside_window(self, service, company_id, ledger, add_employee, add_payroll):
        pedro = add_employee("E-003", "Pedro", "Reyes")
        add_payroll(date(2024, 6, 16), date(2024, 7, 15), {
            pedro: {"gross_compensation": "12000", "withholding_tax": "300"},
        })

        june = service.get_report_data("1601-C", company_id, 2024, month=6).data
        july = service.get_report_data("1601-C", company_id, 2024, month=7).data
        assert june.payroll_summary.employee_count == 2
        assert july.payroll_summary.employee_count == 0
        year = service.get_report_data("1604-C", company_id, 2024).data
        assert "Reyes" in [r.last_name for r in year.alphalist]

    def test_alphalist_covers_whole_year(self, service, company_id, ledger):
        data = service.get_report_data("1604-C", company_id, 2024, quarter=1).data
        assert [r.last_name for r in data.alphalist] == ["Dela Cruz", "Santos"]
        assert data.alphalist[0].total_compensation == D("60000")

    def test_withholding_credits(self, service, company_id, ledger):
        data = service.get_report_data("2307-Summary", company_id, 2024, quarter=1).data
        assert [r.withholding_agent_name for r in data.transactions] == ["Acme Corp"]
        assert data.summary.total_income_payments == D("10000")
        assert data.summary.total_tax_withheld == D("200")

    def test_supplier_payments(self, service, company_id, ledger):
        data = service.get_report_data("1709", company_id, 2024).data
        assert [s.name for s in data.suppliers] == ["Ayala Land", "Luzon Supply Co."]


class TestIncomeForms:
    def test_quarterly_income_uses_default_rate(self, service, company_id, ledger):
        data = service.get_report_data("1702-Q", company_id, 2024, quarter=1).data
        # receipts 10000 + 10000 net, disbursements 2000 net + 5000
        assert data.gross_income == D("20000")
        assert data.deductions == D("7000")
        assert data.taxable_income == D("13000")
        assert data.income_tax_rate == D("0.25")
        assert data.income_tax_due == D("3250.00")

    def test_income_uses_stored_rate(self, session, clock, service, company_id, actor_id, ledger):
        TaxService(session, clock=clock).upsert_tax_settings(company_id, 2024, actor_id, tax_rate=D("20"))
        data = service.get_report_data("1702-RT", company_id, 2024).data
        assert data.income_tax_due == D("2600.00")

    def test_percentage_tax(self, service, company_id, ledger):
        data = service.get_report_data("2551-Q", company_id, 2024, quarter=1).data
        assert data.gross_receipts == D("20000")
        assert data.percentage_tax_due == D("600.00")

    def test_final_withholding_filtered_by_quarter_of_month(self, session, service, company_id, actor_id):
        for quarter, gross in ((1, "1000"), (2, "3000")):
            session.add(
                FinalWithholdingIncome(
                    company_id=company_id,
                    tax_year=2024,
                    quarter=quarter,
                    income_type=IncomeType.BANK_INTEREST.value,
                    gross_amount=D(gross),
                    tax_withheld=D(gross) / 5,
                    created_by_id=actor_id,
                )
            )
        session.flush()

        data = service.get_report_data("1702-Q", company_id, 2024, month=5).data
        assert data.final_withholding_gross == D("3000")
        assert data.final_tax_withheld == D("600")

        annual = service.get_report_data("1702-RT", company_id, 2024).data
        assert annual.final_withholding_gross == D("4000")
