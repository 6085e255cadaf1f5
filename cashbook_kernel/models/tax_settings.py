"""
Module: cashbook_kernel.models.tax_settings
Responsibility: ORM persistence for per-year income tax settings and for
    income already subjected to final withholding tax.
Architecture position: Kernel > Models.

Invariants enforced:
    - One TaxSettings row per company per tax year (upserted, never
      duplicated).
    - Rates are stored as percentages (25.00 means 25%).
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cashbook_kernel.db.base import TrackedBase
from cashbook_kernel.domain.dtos import (
    FinalWithholdingIncomeInfo,
    IncomeType,
    TaxSettingsInfo,
)


class TaxSettings(TrackedBase):
    __tablename__ = "tax_settings"

    __table_args__ = (
        UniqueConstraint("company_id", "tax_year", name="uq_tax_settings_company_year"),
    )

    company_id: Mapped[UUID] = mapped_column(ForeignKey("companies.id"), nullable=False)
    tax_year: Mapped[int] = mapped_column(Integer, nullable=False)
    tax_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("25"), nullable=False)
    mcit_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("2"), nullable=False)
    is_mcit_applicable: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    credits_available: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)

    def to_dto(self) -> TaxSettingsInfo:
        return TaxSettingsInfo(
            tax_year=self.tax_year,
            tax_rate=self.tax_rate,
            mcit_rate=self.mcit_rate,
            is_mcit_applicable=self.is_mcit_applicable,
            credits_available=self.credits_available,
            company_id=self.company_id,
        )


class FinalWithholdingIncome(TrackedBase):
    """Bank interest, dividends, royalties and prizes taxed at source."""

    __tablename__ = "final_withholding_incomes"

    __table_args__ = (
        Index("idx_fwi_company_year", "company_id", "tax_year"),
    )

    company_id: Mapped[UUID] = mapped_column(ForeignKey("companies.id"), nullable=False)
    tax_year: Mapped[int] = mapped_column(Integer, nullable=False)
    quarter: Mapped[int | None] = mapped_column(Integer, nullable=True)
    income_type: Mapped[str] = mapped_column(String(30), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    gross_amount: Mapped[Decimal] = mapped_column(nullable=False)
    tax_withheld: Mapped[Decimal] = mapped_column(nullable=False)
    certificate_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    def to_dto(self) -> FinalWithholdingIncomeInfo:
        return FinalWithholdingIncomeInfo(
            tax_year=self.tax_year,
            income_type=IncomeType(self.income_type),
            gross_amount=self.gross_amount,
            tax_withheld=self.tax_withheld,
            quarter=self.quarter,
            description=self.description,
            certificate_number=self.certificate_number,
        )
