"""
Module: cashbook_kernel.models.payroll
Responsibility: ORM persistence for employees and per-period payroll
    records.  The cashbook does not compute payroll; these rows are read to
    build the compensation withholding summary and the employee alphalist.
Architecture position: Kernel > Models.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cashbook_kernel.db.base import TrackedBase
from cashbook_kernel.domain.dtos import EmployeeInfo, PayrollRecordInfo


class Employee(TrackedBase):
    __tablename__ = "employees"

    __table_args__ = (
        UniqueConstraint("company_id", "employee_number", name="uq_employee_company_number"),
    )

    company_id: Mapped[UUID] = mapped_column(ForeignKey("companies.id"), nullable=False)
    employee_number: Mapped[str] = mapped_column(String(30), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    tin: Mapped[str | None] = mapped_column(String(20), nullable=True)

    def to_dto(self) -> EmployeeInfo:
        return EmployeeInfo(
            employee_id=self.id,
            employee_number=self.employee_number,
            first_name=self.first_name,
            last_name=self.last_name,
            tin=self.tin,
        )


class PayrollPeriod(TrackedBase):
    __tablename__ = "payroll_periods"

    __table_args__ = (
        Index("idx_payroll_period_company_end", "company_id", "period_end"),
    )

    company_id: Mapped[UUID] = mapped_column(ForeignKey("companies.id"), nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)

    records: Mapped[list["PayrollRecord"]] = relationship(
        back_populates="period",
        cascade="all, delete-orphan",
    )


class PayrollRecord(TrackedBase):
    __tablename__ = "payroll_records"

    __table_args__ = (
        UniqueConstraint("period_id", "employee_id", name="uq_payroll_record_period_employee"),
    )

    period_id: Mapped[UUID] = mapped_column(ForeignKey("payroll_periods.id"), nullable=False)
    employee_id: Mapped[UUID] = mapped_column(ForeignKey("employees.id"), nullable=False)
    gross_compensation: Mapped[Decimal] = mapped_column(nullable=False)
    withholding_tax: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)
    sss_employee: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)
    sss_employer: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)
    philhealth_employee: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)
    philhealth_employer: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)
    hdmf_employee: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)
    hdmf_employer: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)

    period: Mapped["PayrollPeriod"] = relationship(back_populates="records")
    employee: Mapped["Employee"] = relationship()

    def to_dto(self) -> PayrollRecordInfo:
        return PayrollRecordInfo(
            employee=self.employee.to_dto(),
            period_id=self.period_id,
            period_start=self.period.period_start,
            period_end=self.period.period_end,
            gross_compensation=self.gross_compensation,
            withholding_tax=self.withholding_tax,
            sss_employee=self.sss_employee,
            sss_employer=self.sss_employer,
            philhealth_employee=self.philhealth_employee,
            philhealth_employer=self.philhealth_employer,
            hdmf_employee=self.hdmf_employee,
            hdmf_employer=self.hdmf_employer,
        )
