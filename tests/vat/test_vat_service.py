"""
Integration tests for VatService over the SQL Ledger Source.
"""

from datetime import date
from decimal import Decimal

import pytest

from cashbook_kernel.exceptions import InvalidPeriodError, RequestError
from cashbook_modules.vat.service import VatService

D = Decimal


@pytest.fixture
def service(session, clock):
    return VatService(session, clock=clock)


@pytest.fixture
def march_vouchers(add_receipt, add_disbursement):
    add_receipt(
        "CR-001", date(2024, 3, 10), "11200",
        lines=[("4000", "10000"), ("2100", "1200")],
        is_vatable=True, vat_amount=D("1200"), net_amount=D("10000"),
        payor_name="Bayani Store", invoice_number="SI-0001",
    )
    add_disbursement(
        "CD-001", date(2024, 3, 15), "2240",
        lines=[("5100", "2000"), ("1400", "240")],
        has_input_vat=True, vat_amount=D("240"), net_amount=D("2000"),
        payee_name="Luzon Supply Co.",
    )
    add_receipt("CR-002", date(2024, 4, 1), "3000", is_zero_rated=True, net_amount=D("3000"))
    add_receipt("CR-003", date(2024, 4, 2), "450")


class TestVatTotals:
    def test_march_activity(self, service, company_id, march_vouchers):
        rows = service.get_vat_totals(company_id, 2024)

        assert len(rows) == 12
        march = rows[2]
        assert march.output_vat == D("1200")
        assert march.input_vat == D("240")
        assert march.net_vat == D("960")
        assert march.quarterly_output == D("1200")
        assert march.quarterly_input == D("240")
        assert march.quarterly_net == D("960")
        assert all(r.net_vat == 0 for i, r in enumerate(rows) if i != 2)

    def test_invalid_year(self, service, company_id):
        with pytest.raises(InvalidPeriodError):
            service.get_vat_totals(company_id, 10000)


class TestVatSummary:
    def test_first_half_split(self, service, company_id, march_vouchers):
        summary = service.get_vat_summary(company_id, date(2024, 1, 1), date(2024, 6, 30))

        assert summary.vatable_sales == D("10000")
        assert summary.zero_rated_sales == D("3000")
        assert summary.exempt_sales == D("450")
        assert summary.output_vat == D("1200")
        assert summary.input_vat == D("240")
        assert summary.vat_payable == D("960")

    def test_window_is_inclusive(self, service, company_id, march_vouchers):
        summary = service.get_vat_summary(company_id, date(2024, 3, 10), date(2024, 3, 10))
        assert summary.output_vat == D("1200")
        assert summary.input_vat == D("0")

    @pytest.mark.parametrize("method", ["get_vat_summary", "get_sales_book", "get_purchase_book"])
    def test_reversed_window_rejected(self, service, company_id, method):
        with pytest.raises(InvalidPeriodError) as exc_info:
            getattr(service, method)(company_id, date(2024, 3, 31), date(2024, 3, 1))
        assert isinstance(exc_info.value, RequestError)
        assert exc_info.value.field == "end_date"

    def test_logs_summary(self, service, company_id, march_vouchers, captured_logs):
        service.get_vat_summary(company_id, date(2024, 1, 1), date(2024, 3, 31))
        records = [r for r in captured_logs() if r["message"] == "vat_summary_computed"]
        assert len(records) == 1
        assert D(records[0]["vat_payable"]) == D("960")


class TestBooks:
    def test_sales_book(self, service, company_id, march_vouchers):
        rows = service.get_sales_book(company_id, date(2024, 1, 1), date(2024, 12, 31))
        assert [r.crn for r in rows] == ["CR-001"]
        assert rows[0].invoice_number == "SI-0001"
        assert rows[0].payor_name == "Bayani Store"

    def test_purchase_book(self, service, company_id, march_vouchers):
        rows = service.get_purchase_book(company_id, date(2024, 1, 1), date(2024, 12, 31))
        assert [r.cdn for r in rows] == ["CD-001"]
        assert rows[0].net_amount == D("2000")
