"""
Pytest fixtures for the cashbook test suite.

Provides:
- In-memory SQLite sessions with every cashbook table created
- A company seeded with the default PH SME chart of accounts
- Voucher and payroll factories
- Structured log capture

Environment Variables:
- DATABASE_URL: database URL for the DB-backed tests.  Defaults to an
  in-memory SQLite database, which is created fresh for every test.
"""

import json
import logging
import os
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO
from typing import Generator
from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from cashbook_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from cashbook_kernel.domain.clock import DeterministicClock
from cashbook_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from cashbook_kernel.models.payroll import Employee, PayrollPeriod, PayrollRecord
from cashbook_kernel.models.voucher import (
    CashDisbursement,
    CashDisbursementLine,
    CashReceipt,
    CashReceiptLine,
)
from cashbook_modules.company.service import CompanySetupService

# Test actor ID for all test operations
TEST_ACTOR_ID = uuid4()

DEFAULT_DATABASE_URL = "sqlite://"


def get_database_url() -> str:
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture cashbook logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, reporting_service):
            reporting_service.get_profit_loss(company_id, 2024)
            logs = captured_logs()
            assert any(r["message"] == "profit_loss_generated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("cashbook")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """A session over freshly created tables; rolled back and dropped after the test."""
    init_engine_from_url(get_database_url())
    create_tables()
    s = get_session()
    try:
        yield s
    finally:
        s.rollback()
        s.close()
        drop_tables()
        reset_engine()


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(datetime(2026, 2, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def actor_id():
    return TEST_ACTOR_ID


@pytest.fixture
def company(session):
    """A company with the default chart of accounts."""
    return CompanySetupService(session).create_company_with_defaults(
        name="Sampaguita Trading Corp.",
        actor_id=TEST_ACTOR_ID,
        tin="123-456-789-000",
        address="123 Ayala Ave, Makati City",
    )


@pytest.fixture
def company_id(company):
    return company.company.company_id


@pytest.fixture
def account_ids(company) -> dict[str, object]:
    """Account id by code for the seeded chart."""
    return {a.code: a.account_id for a in company.accounts}


# =============================================================================
# Voucher factories
# =============================================================================


@pytest.fixture
def add_receipt(session, company_id, account_ids):
    """
    Create a cash receipt.  ``lines`` are (account_code, amount) pairs.

    Usage::

        add_receipt("CR-001", date(2024, 3, 5), "1000.00", lines=[("4000", "1000.00")])
    """
    def _add(number, on: date, amount, lines=(), **fields) -> CashReceipt:
        receipt = CashReceipt(
            company_id=fields.pop("company_id", company_id),
            crn=number,
            voucher_date=on,
            cash_amount=Decimal(str(amount)),
            created_by_id=TEST_ACTOR_ID,
            **fields,
        )
        for i, (code, line_amount) in enumerate(lines):
            receipt.lines.append(
                CashReceiptLine(
                    account_id=account_ids[code],
                    line_no=i,
                    amount=Decimal(str(line_amount)),
                    created_by_id=TEST_ACTOR_ID,
                )
            )
        session.add(receipt)
        session.flush()
        return receipt

    return _add


@pytest.fixture
def add_disbursement(session, company_id, account_ids):
    """Create a cash disbursement.  ``lines`` are (account_code, amount) pairs."""

    def _add(number, on: date, amount, lines=(), **fields) -> CashDisbursement:
        disbursement = CashDisbursement(
            company_id=fields.pop("company_id", company_id),
            cdn=number,
            voucher_date=on,
            cash_amount=Decimal(str(amount)),
            created_by_id=TEST_ACTOR_ID,
            **fields,
        )
        for i, (code, line_amount) in enumerate(lines):
            disbursement.lines.append(
                CashDisbursementLine(
                    account_id=account_ids[code],
                    line_no=i,
                    amount=Decimal(str(line_amount)),
                    created_by_id=TEST_ACTOR_ID,
                )
            )
        session.add(disbursement)
        session.flush()
        return disbursement

    return _add


@pytest.fixture
def add_payroll(session, company_id):
    """
    Create one payroll period with records.

    ``records`` maps an Employee row to a dict of PayrollRecord amounts.
    """

    def _add(period_start: date, period_end: date, records: dict) -> PayrollPeriod:
        period = PayrollPeriod(
            company_id=company_id,
            period_start=period_start,
            period_end=period_end,
            created_by_id=TEST_ACTOR_ID,
        )
        for employee, amounts in records.items():
            period.records.append(
                PayrollRecord(
                    employee=employee,
                    created_by_id=TEST_ACTOR_ID,
                    **{k: Decimal(str(v)) for k, v in amounts.items()},
                )
            )
        session.add(period)
        session.flush()
        return period

    return _add


@pytest.fixture
def add_employee(session, company_id):
    def _add(number: str, first_name: str, last_name: str, tin: str | None = None) -> Employee:
        employee = Employee(
            company_id=company_id,
            employee_number=number,
            first_name=first_name,
            last_name=last_name,
            tin=tin,
            created_by_id=TEST_ACTOR_ID,
        )
        session.add(employee)
        session.flush()
        return employee

    return _add
