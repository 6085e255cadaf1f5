"""
Module: cashbook_kernel.models.voucher
Responsibility: ORM persistence for the two voucher streams of the cash
    ledger -- cash receipts (CRN) and cash disbursements (CDN) -- and their
    account lines.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain DTOs only.

Invariants enforced:
    - number (CRN / CDN) is unique per company.
    - Lines are ordered by line_no and deleted with their voucher.
    - status stores the VoucherStatus value; new vouchers start in draft.

Non-goals:
    - sum(lines.amount) == cash_amount is NOT enforced.  Reports tolerate
      the divergence through classification fallback.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cashbook_kernel.db.base import TrackedBase
from cashbook_kernel.domain.dtos import (
    Voucher,
    VoucherKind,
    VoucherLine,
    VoucherStatus,
)


class _VoucherColumns:
    """Columns shared by receipts and disbursements."""

    company_id: Mapped[UUID] = mapped_column(
        ForeignKey("companies.id"),
        nullable=False,
    )
    voucher_date: Mapped[date] = mapped_column(Date, nullable=False)
    invoice_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    invoice_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    counterparty_tin: Mapped[str | None] = mapped_column(String(20), nullable=True)
    counterparty_address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    particulars: Mapped[str | None] = mapped_column(Text, nullable=True)

    cash_amount: Mapped[Decimal] = mapped_column(nullable=False)
    vat_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)
    net_amount: Mapped[Decimal | None] = mapped_column(nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        default=VoucherStatus.DRAFT.value,
        nullable=False,
    )
    prepared_by_id: Mapped[UUID | None] = mapped_column(nullable=True)
    approved_by_id: Mapped[UUID | None] = mapped_column(nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(nullable=True)


class _LineColumns:
    account_id: Mapped[UUID] = mapped_column(
        ForeignKey("accounts.id"),
        nullable=False,
    )
    line_no: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def to_dto(self) -> VoucherLine:
        return VoucherLine(
            account_id=self.account_id,
            amount=self.amount,
            description=self.description,
        )


# ---------------------------------------------------------------------------
# Cash receipts
# ---------------------------------------------------------------------------


class CashReceipt(_VoucherColumns, TrackedBase):
    """
    Cash receipt voucher (CRN): debit cash, credit the line accounts.

    VAT treatment is receipt-level: vatable, zero-rated, or (neither) exempt.
    """

    __tablename__ = "cash_receipts"

    __table_args__ = (
        UniqueConstraint("company_id", "crn", name="uq_cash_receipt_company_crn"),
        Index("idx_cash_receipt_company_date", "company_id", "voucher_date"),
    )

    crn: Mapped[str] = mapped_column(String(50), nullable=False)
    payor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_vatable: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_zero_rated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    withholding_tax_amount: Mapped[Decimal] = mapped_column(
        default=Decimal("0"),
        nullable=False,
    )
    atc_code: Mapped[str | None] = mapped_column(String(10), nullable=True)

    lines: Mapped[list["CashReceiptLine"]] = relationship(
        back_populates="receipt",
        cascade="all, delete-orphan",
        order_by="CashReceiptLine.line_no",
    )

    def to_dto(self) -> Voucher:
        return Voucher(
            voucher_id=self.id,
            company_id=self.company_id,
            kind=VoucherKind.RECEIPT,
            number=self.crn,
            voucher_date=self.voucher_date,
            total_amount=self.cash_amount,
            lines=tuple(line.to_dto() for line in self.lines),
            counterparty_name=self.payor_name,
            counterparty_tin=self.counterparty_tin,
            counterparty_address=self.counterparty_address,
            particulars=self.particulars,
            invoice_number=self.invoice_number,
            invoice_date=self.invoice_date,
            is_vatable=self.is_vatable,
            is_zero_rated=self.is_zero_rated,
            vat_amount=self.vat_amount,
            net_amount=self.net_amount,
            withholding_tax_amount=self.withholding_tax_amount,
            atc_code=self.atc_code,
            status=VoucherStatus(self.status),
        )

    def __repr__(self) -> str:
        return f"<CashReceipt {self.crn} {self.voucher_date} {self.cash_amount}>"


class CashReceiptLine(_LineColumns, TrackedBase):
    __tablename__ = "cash_receipt_lines"

    __table_args__ = (
        Index("idx_cash_receipt_line_receipt", "receipt_id"),
    )

    receipt_id: Mapped[UUID] = mapped_column(
        ForeignKey("cash_receipts.id"),
        nullable=False,
    )

    receipt: Mapped["CashReceipt"] = relationship(back_populates="lines")


# ---------------------------------------------------------------------------
# Cash disbursements
# ---------------------------------------------------------------------------


class CashDisbursement(_VoucherColumns, TrackedBase):
    """Cash disbursement voucher (CDN): credit cash, debit the line accounts."""

    __tablename__ = "cash_disbursements"

    __table_args__ = (
        UniqueConstraint("company_id", "cdn", name="uq_cash_disbursement_company_cdn"),
        Index("idx_cash_disbursement_company_date", "company_id", "voucher_date"),
    )

    cdn: Mapped[str] = mapped_column(String(50), nullable=False)
    payee_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    has_input_vat: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    lines: Mapped[list["CashDisbursementLine"]] = relationship(
        back_populates="disbursement",
        cascade="all, delete-orphan",
        order_by="CashDisbursementLine.line_no",
    )

    def to_dto(self) -> Voucher:
        return Voucher(
            voucher_id=self.id,
            company_id=self.company_id,
            kind=VoucherKind.DISBURSEMENT,
            number=self.cdn,
            voucher_date=self.voucher_date,
            total_amount=self.cash_amount,
            lines=tuple(line.to_dto() for line in self.lines),
            counterparty_name=self.payee_name,
            counterparty_tin=self.counterparty_tin,
            counterparty_address=self.counterparty_address,
            particulars=self.particulars,
            invoice_number=self.invoice_number,
            invoice_date=self.invoice_date,
            has_input_vat=self.has_input_vat,
            vat_amount=self.vat_amount,
            net_amount=self.net_amount,
            status=VoucherStatus(self.status),
        )

    def __repr__(self) -> str:
        return f"<CashDisbursement {self.cdn} {self.voucher_date} {self.cash_amount}>"


class CashDisbursementLine(_LineColumns, TrackedBase):
    __tablename__ = "cash_disbursement_lines"

    __table_args__ = (
        Index("idx_cash_disbursement_line_disbursement", "disbursement_id"),
    )

    disbursement_id: Mapped[UUID] = mapped_column(
        ForeignKey("cash_disbursements.id"),
        nullable=False,
    )

    disbursement: Mapped["CashDisbursement"] = relationship(back_populates="lines")
