"""ORM models for the cashbook."""

from cashbook_kernel.models.account import Account
from cashbook_kernel.models.carryforward import McitCredit, NolcoEntry
from cashbook_kernel.models.company import Company
from cashbook_kernel.models.payroll import Employee, PayrollPeriod, PayrollRecord
from cashbook_kernel.models.tax_settings import FinalWithholdingIncome, TaxSettings
from cashbook_kernel.models.voucher import (
    CashDisbursement,
    CashDisbursementLine,
    CashReceipt,
    CashReceiptLine,
)

__all__ = [
    "Account",
    "CashDisbursement",
    "CashDisbursementLine",
    "CashReceipt",
    "CashReceiptLine",
    "Company",
    "Employee",
    "FinalWithholdingIncome",
    "McitCredit",
    "NolcoEntry",
    "PayrollPeriod",
    "PayrollRecord",
    "TaxSettings",
]
