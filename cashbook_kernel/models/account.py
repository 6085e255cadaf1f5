"""
Module: cashbook_kernel.models.account
Responsibility: ORM persistence for the Chart of Accounts -- the target of
    every voucher line.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - code is unique per company (uq_account_company_code); reports join
      rows on code, never on the surrogate id.
    - account_type is one of asset, liability, equity, revenue, cost,
      expense (stored as the AccountType enum value).

Audit relevance:
    Changing account_type after vouchers reference the account would move
    historical amounts between statements.  The cashbook does not block it;
    the application layer is expected to.
"""

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cashbook_kernel.db.base import TrackedBase
from cashbook_kernel.domain.dtos import AccountInfo, AccountType, ReportCategory


class Account(TrackedBase):
    """
    Chart of Accounts entry.

    Guarantees:
        - code is unique within the company and non-null.
        - report_category is balance_sheet or profit_loss.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint("company_id", "code", name="uq_account_company_code"),
        Index("idx_account_company", "company_id"),
        Index("idx_account_type", "account_type"),
    )

    company_id: Mapped[UUID] = mapped_column(
        ForeignKey("companies.id"),
        nullable=False,
    )

    # Human-readable code; the join key for report rows
    code: Mapped[str] = mapped_column(String(20), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    account_type: Mapped[str] = mapped_column(String(20), nullable=False)

    report_category: Mapped[str] = mapped_column(String(20), nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def to_dto(self) -> AccountInfo:
        return AccountInfo(
            account_id=self.id,
            code=self.code,
            name=self.name,
            account_type=AccountType(self.account_type),
            report_category=ReportCategory(self.report_category),
            is_active=self.is_active,
        )

    def __repr__(self) -> str:
        return f"<Account {self.code}: {self.name}>"
