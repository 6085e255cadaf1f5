"""
Module: cashbook_kernel.models.carryforward
Responsibility: ORM persistence for the two expiring-credit ledgers: excess
    MCIT credits and NOLCO entries.
Architecture position: Kernel > Models.

Invariants enforced:
    - One row per company per origination year (unique constraints).
    - remaining_amount == original - used_amount; checked again when the row
      is converted to a CarryforwardEntry DTO.
    - Only used_amount / remaining_amount change after creation, and only
      through TaxService.apply_credits (rows are read FOR UPDATE there).
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cashbook_kernel.db.base import TrackedBase
from cashbook_kernel.domain.dtos import CarryforwardEntry, CarryforwardKind


class McitCredit(TrackedBase):
    """Excess of MCIT over regular tax, creditable for three following years."""

    __tablename__ = "mcit_credits"

    __table_args__ = (
        UniqueConstraint("company_id", "tax_year", name="uq_mcit_credit_company_year"),
        Index("idx_mcit_credit_company_expiry", "company_id", "expiry_year"),
    )

    company_id: Mapped[UUID] = mapped_column(ForeignKey("companies.id"), nullable=False)
    tax_year: Mapped[int] = mapped_column(Integer, nullable=False)
    excess_amount: Mapped[Decimal] = mapped_column(nullable=False)
    used_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)
    remaining_amount: Mapped[Decimal] = mapped_column(nullable=False)
    expiry_year: Mapped[int] = mapped_column(Integer, nullable=False)

    def to_dto(self) -> CarryforwardEntry:
        return CarryforwardEntry(
            kind=CarryforwardKind.MCIT,
            origin_year=self.tax_year,
            original_amount=self.excess_amount,
            used_amount=self.used_amount,
            remaining_amount=self.remaining_amount,
            expiry_year=self.expiry_year,
            entry_id=self.id,
            company_id=self.company_id,
        )

    @classmethod
    def from_dto(cls, dto: CarryforwardEntry, company_id: UUID, created_by_id: UUID) -> "McitCredit":
        return cls(
            company_id=company_id,
            tax_year=dto.origin_year,
            excess_amount=dto.original_amount,
            used_amount=dto.used_amount,
            remaining_amount=dto.remaining_amount,
            expiry_year=dto.expiry_year,
            created_by_id=created_by_id,
        )


class NolcoEntry(TrackedBase):
    """Net operating loss, deductible from taxable income until expiry."""

    __tablename__ = "nolco_entries"

    __table_args__ = (
        UniqueConstraint("company_id", "loss_year", name="uq_nolco_entry_company_year"),
        Index("idx_nolco_entry_company_expiry", "company_id", "expiry_year"),
    )

    company_id: Mapped[UUID] = mapped_column(ForeignKey("companies.id"), nullable=False)
    loss_year: Mapped[int] = mapped_column(Integer, nullable=False)
    original_amount: Mapped[Decimal] = mapped_column(nullable=False)
    used_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)
    remaining_amount: Mapped[Decimal] = mapped_column(nullable=False)
    expiry_year: Mapped[int] = mapped_column(Integer, nullable=False)

    def to_dto(self) -> CarryforwardEntry:
        return CarryforwardEntry(
            kind=CarryforwardKind.NOLCO,
            origin_year=self.loss_year,
            original_amount=self.original_amount,
            used_amount=self.used_amount,
            remaining_amount=self.remaining_amount,
            expiry_year=self.expiry_year,
            entry_id=self.id,
            company_id=self.company_id,
        )

    @classmethod
    def from_dto(cls, dto: CarryforwardEntry, company_id: UUID, created_by_id: UUID) -> "NolcoEntry":
        return cls(
            company_id=company_id,
            loss_year=dto.origin_year,
            original_amount=dto.original_amount,
            used_amount=dto.used_amount,
            remaining_amount=dto.remaining_amount,
            expiry_year=dto.expiry_year,
            created_by_id=created_by_id,
        )
