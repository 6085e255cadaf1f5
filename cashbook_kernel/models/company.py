"""
Module: cashbook_kernel.models.company
Responsibility: ORM persistence for the reporting entity (the taxpayer).
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from cashbook_kernel.db.base import TrackedBase
from cashbook_kernel.domain.dtos import CompanyInfo


class Company(TrackedBase):
    """
    A bookkeeping company.  Every account, voucher and tax ledger row
    belongs to exactly one company.
    """

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    tin: Mapped[str | None] = mapped_column(String(20), nullable=True)

    def to_dto(self) -> CompanyInfo:
        return CompanyInfo(
            company_id=self.id,
            name=self.name,
            tin=self.tin,
            address=self.address,
        )

    def __repr__(self) -> str:
        return f"<Company {self.name}>"
