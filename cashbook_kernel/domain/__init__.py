"""
Pure domain layer.

Immutable DTOs, the clock abstraction and workflow value objects, with no
dependency on the ORM or database.
"""

from cashbook_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from cashbook_kernel.domain.dtos import (
    AccountInfo,
    AccountType,
    CarryforwardEntry,
    CarryforwardKind,
    CompanyInfo,
    EmployeeInfo,
    FinalWithholdingIncomeInfo,
    IncomeType,
    PayrollRecordInfo,
    ReportCategory,
    TaxSettingsInfo,
    Voucher,
    VoucherKind,
    VoucherLine,
    VoucherStatus,
)
from cashbook_kernel.domain.workflow import Guard, Transition, Workflow

__all__ = [
    "AccountInfo",
    "AccountType",
    "CarryforwardEntry",
    "CarryforwardKind",
    "Clock",
    "CompanyInfo",
    "DeterministicClock",
    "EmployeeInfo",
    "FinalWithholdingIncomeInfo",
    "Guard",
    "IncomeType",
    "PayrollRecordInfo",
    "ReportCategory",
    "SystemClock",
    "TaxSettingsInfo",
    "Transition",
    "Voucher",
    "VoucherKind",
    "VoucherLine",
    "VoucherStatus",
    "Workflow",
]
