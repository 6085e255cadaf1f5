"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the immutable records that flow from the Ledger Source into the
    calculation engines: accounts, vouchers and their lines, carryforward
    ledger entries, tax settings, final withholding incomes, and payroll
    records.  ORM models convert to these with ``to_dto()``.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Free of ORM dependencies.  Engines accept and return these, never
    ORM entities.

Invariants enforced:
    - All money fields are Decimal (two fractional digits when loaded from
      the store), NEVER float.
    - Carryforward entries satisfy remaining == original - used and
      0 <= used <= original (checked at construction).
    - A voucher's soft invariant sum(lines) == total_amount is NOT enforced;
      the engines tolerate divergence.

Failure modes:
    - ValueError on CarryforwardEntry construction with inconsistent amounts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

ZERO = Decimal("0")


# =========================================================================
# Enums
# =========================================================================


class AccountType(str, Enum):
    """Accounting type of a chart-of-accounts entry."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    COST = "cost"
    EXPENSE = "expense"

    @property
    def is_profit_loss(self) -> bool:
        return self in (AccountType.REVENUE, AccountType.COST, AccountType.EXPENSE)


class ReportCategory(str, Enum):
    """Which statement an account reports on."""

    BALANCE_SHEET = "balance_sheet"
    PROFIT_LOSS = "profit_loss"


class VoucherKind(str, Enum):
    """The two voucher streams of the cash ledger."""

    RECEIPT = "receipt"
    DISBURSEMENT = "disbursement"


class VoucherStatus(str, Enum):
    """Voucher lifecycle status.

    ``pending`` is a legal stored value but nothing in the cashbook sets it;
    it can only arrive through an external write.
    """

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"


class CarryforwardKind(str, Enum):
    """The two expiring-credit ledgers."""

    NOLCO = "nolco"
    MCIT = "mcit"


class IncomeType(str, Enum):
    """Kinds of income already subjected to final withholding tax."""

    BANK_INTEREST = "bank_interest"
    DIVIDENDS = "dividends"
    ROYALTIES = "royalties"
    PRIZES = "prizes"
    OTHER = "other"


# =========================================================================
# Chart of accounts
# =========================================================================


@dataclass(frozen=True)
class AccountInfo:
    """Read-only view of one chart-of-accounts entry."""

    account_id: UUID
    code: str
    name: str
    account_type: AccountType
    report_category: ReportCategory
    is_active: bool = True


@dataclass(frozen=True)
class CompanyInfo:
    """Company identity printed on BIR report envelopes."""

    company_id: UUID
    name: str
    tin: str | None = None
    address: str | None = None


# =========================================================================
# Vouchers
# =========================================================================


@dataclass(frozen=True)
class VoucherLine:
    """A voucher's allocation of part of its total to one account."""

    account_id: UUID
    amount: Decimal
    description: str | None = None


@dataclass(frozen=True)
class Voucher:
    """
    A cash receipt (CRN) or cash disbursement (CDN).

    Contract:
        Receipts debit cash and credit their lines' accounts; disbursements
        credit cash and debit their lines' accounts.  ``is_vatable`` and
        ``is_zero_rated`` are meaningful for receipts, ``has_input_vat``
        for disbursements.
    """

    voucher_id: UUID
    company_id: UUID
    kind: VoucherKind
    number: str
    voucher_date: date
    total_amount: Decimal
    lines: tuple[VoucherLine, ...] = ()
    counterparty_name: str | None = None
    counterparty_tin: str | None = None
    counterparty_address: str | None = None
    particulars: str | None = None
    invoice_number: str | None = None
    invoice_date: date | None = None
    is_vatable: bool = False
    is_zero_rated: bool = False
    has_input_vat: bool = False
    vat_amount: Decimal = ZERO
    net_amount: Decimal | None = None
    withholding_tax_amount: Decimal = ZERO
    atc_code: str | None = None
    status: VoucherStatus = VoucherStatus.DRAFT

    @property
    def is_receipt(self) -> bool:
        return self.kind == VoucherKind.RECEIPT

    @property
    def net_or_total(self) -> Decimal:
        """Net amount when present and non-zero, else the cash total."""
        if self.net_amount:
            return self.net_amount
        return self.total_amount

    @property
    def line_total(self) -> Decimal:
        return sum((line.amount for line in self.lines), ZERO)


# =========================================================================
# Tax year ledgers
# =========================================================================


@dataclass(frozen=True)
class CarryforwardEntry:
    """
    One NOLCO entry or one excess-MCIT credit.

    Contract:
        ``origin_year`` is the loss year (NOLCO) or tax year (MCIT).
        ``original_amount`` is fixed at creation; only ``used_amount`` and
        ``remaining_amount`` change afterwards.

    Guarantees:
        - remaining_amount == original_amount - used_amount
        - 0 <= used_amount <= original_amount
    """

    kind: CarryforwardKind
    origin_year: int
    original_amount: Decimal
    used_amount: Decimal
    remaining_amount: Decimal
    expiry_year: int
    entry_id: UUID | None = None
    company_id: UUID | None = None

    def __post_init__(self) -> None:
        if self.original_amount < 0:
            raise ValueError(
                f"{self.kind.value} original amount cannot be negative: "
                f"{self.original_amount}"
            )
        if self.used_amount < 0 or self.used_amount > self.original_amount:
            raise ValueError(
                f"{self.kind.value} used amount {self.used_amount} outside "
                f"[0, {self.original_amount}]"
            )
        if self.remaining_amount != self.original_amount - self.used_amount:
            raise ValueError(
                f"{self.kind.value} remaining {self.remaining_amount} != "
                f"original {self.original_amount} - used {self.used_amount}"
            )
        if self.expiry_year < self.origin_year:
            raise ValueError(
                f"{self.kind.value} expiry {self.expiry_year} precedes "
                f"origin year {self.origin_year}"
            )


@dataclass(frozen=True)
class TaxSettingsInfo:
    """Per company, per year tax rates.  Rates are percentages (25 = 25%)."""

    tax_year: int
    tax_rate: Decimal = Decimal("25")
    mcit_rate: Decimal = Decimal("2")
    is_mcit_applicable: bool = False
    credits_available: Decimal = ZERO
    company_id: UUID | None = None
    is_default: bool = False

    @property
    def tax_rate_fraction(self) -> Decimal:
        return self.tax_rate / Decimal("100")

    @property
    def mcit_rate_fraction(self) -> Decimal:
        return self.mcit_rate / Decimal("100")


@dataclass(frozen=True)
class FinalWithholdingIncomeInfo:
    """Income already taxed at source; excluded from regular taxable income."""

    tax_year: int
    income_type: IncomeType
    gross_amount: Decimal
    tax_withheld: Decimal
    quarter: int | None = None
    description: str | None = None
    certificate_number: str | None = None


# =========================================================================
# Payroll (read for withholding summaries and the alphalist)
# =========================================================================


@dataclass(frozen=True)
class EmployeeInfo:
    employee_id: UUID
    employee_number: str
    first_name: str
    last_name: str
    tin: str | None = None


@dataclass(frozen=True)
class PayrollRecordInfo:
    """One employee's pay for one payroll period."""

    employee: EmployeeInfo
    period_id: UUID
    period_start: date
    period_end: date
    gross_compensation: Decimal
    withholding_tax: Decimal = ZERO
    sss_employee: Decimal = ZERO
    sss_employer: Decimal = ZERO
    philhealth_employee: Decimal = ZERO
    philhealth_employer: Decimal = ZERO
    hdmf_employee: Decimal = ZERO
    hdmf_employer: Decimal = ZERO

    @property
    def employee_contributions(self) -> Decimal:
        return self.sss_employee + self.philhealth_employee + self.hdmf_employee

    @property
    def net_pay(self) -> Decimal:
        return self.gross_compensation - self.withholding_tax - self.employee_contributions
