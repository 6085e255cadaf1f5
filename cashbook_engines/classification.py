"""
Classification Resolver - map voucher lines to account types and apply the
fallback policy for vouchers with no qualifying line.

A receipt qualifies for the P&L through its revenue lines; a disbursement
through its cost or expense lines.  Line-level classification is optional
at data entry, so a voucher may have none.  Such a voucher gets a single
synthetic line for its net amount (total amount when net is missing or
zero) posted to a fallback account:

* receipts       -> the configured sales code (4000), else the lowest-coded
                    revenue account;
* disbursements  -> the configured miscellaneous expense code (6900), else
                    the lowest-coded expense account, else the lowest-coded
                    cost account.

If the chart has no account of the needed type the amount is dropped and
reported on the ClassifiedVoucher (a classification gap), never raised.

Pure functions with no I/O.  The chart arena is built once per aggregation
call and discarded with it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from cashbook_kernel.domain.dtos import AccountInfo, AccountType, Voucher
from cashbook_kernel.logging_config import get_logger

logger = get_logger("engines.classification")

ZERO = Decimal("0")

RECEIPT_PL_TYPES: frozenset[AccountType] = frozenset({AccountType.REVENUE})
DISBURSEMENT_PL_TYPES: frozenset[AccountType] = frozenset(
    {AccountType.COST, AccountType.EXPENSE}
)

UNKNOWN_ACCOUNT_NAME = "Unknown Account"


@dataclass(frozen=True)
class AccountCodes:
    """Named account codes the statements depend on."""

    cash: str = "1010"
    retained_earnings: str = "3200"
    sales_fallback: str = "4000"
    expense_fallback: str = "6900"

    def __post_init__(self) -> None:
        for name in ("cash", "retained_earnings", "sales_fallback", "expense_fallback"):
            if not getattr(self, name):
                raise ValueError(f"Account code '{name}' cannot be empty")


class AccountChart:
    """
    Strongly typed account arena for one aggregation call.

    Keyed by account id, with a secondary code index.  Inactive accounts are
    kept: historical vouchers may still reference them.
    """

    def __init__(self, accounts: Iterable[AccountInfo]):
        self._by_id: dict[UUID, AccountInfo] = {}
        self._by_code: dict[str, AccountInfo] = {}
        for account in accounts:
            self._by_id[account.account_id] = account
            self._by_code[account.code] = account

    @classmethod
    def from_accounts(cls, accounts: Iterable[AccountInfo]) -> AccountChart:
        return cls(accounts)

    def get(self, account_id: UUID) -> AccountInfo | None:
        return self._by_id.get(account_id)

    def by_code(self, code: str) -> AccountInfo | None:
        return self._by_code.get(code)

    def type_of(self, account_id: UUID) -> AccountType | None:
        account = self._by_id.get(account_id)
        return account.account_type if account is not None else None

    def name_for_code(self, code: str, default: str = UNKNOWN_ACCOUNT_NAME) -> str:
        account = self._by_code.get(code)
        return account.name if account is not None else default

    def first_of_type(self, account_type: AccountType) -> AccountInfo | None:
        """Lowest-coded account of the given type."""
        candidates = [a for a in self._by_id.values() if a.account_type == account_type]
        if not candidates:
            return None
        return min(candidates, key=lambda a: a.code)

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self):
        return iter(sorted(self._by_id.values(), key=lambda a: a.code))


@dataclass(frozen=True)
class ResolvedAccounts:
    """
    Named codes resolved against one company's chart.

    ``cash_code`` is always set: the cash row is kept even when the chart
    lacks the code.  The other three are None when nothing resolves.
    """

    cash_code: str
    retained_earnings: AccountInfo | None
    revenue_fallback: AccountInfo | None
    expense_fallback: AccountInfo | None


def resolve_accounts(chart: AccountChart, codes: AccountCodes) -> ResolvedAccounts:
    """Resolve the named codes once, at the start of an aggregation."""
    revenue_fallback = chart.by_code(codes.sales_fallback)
    if revenue_fallback is None or revenue_fallback.account_type != AccountType.REVENUE:
        revenue_fallback = chart.first_of_type(AccountType.REVENUE)

    expense_fallback = chart.by_code(codes.expense_fallback)
    if expense_fallback is None or expense_fallback.account_type not in DISBURSEMENT_PL_TYPES:
        expense_fallback = (
            chart.first_of_type(AccountType.EXPENSE)
            or chart.first_of_type(AccountType.COST)
        )

    resolved = ResolvedAccounts(
        cash_code=codes.cash,
        retained_earnings=chart.by_code(codes.retained_earnings),
        revenue_fallback=revenue_fallback,
        expense_fallback=expense_fallback,
    )
    logger.debug(
        "accounts_resolved",
        extra={
            "cash_code": resolved.cash_code,
            "cash_in_chart": chart.by_code(codes.cash) is not None,
            "retained_earnings": _code(resolved.retained_earnings),
            "revenue_fallback": _code(resolved.revenue_fallback),
            "expense_fallback": _code(resolved.expense_fallback),
        },
    )
    return resolved


def _code(account: AccountInfo | None) -> str | None:
    return account.code if account is not None else None


# =============================================================================
# Voucher classification
# =============================================================================


@dataclass(frozen=True)
class ClassifiedLine:
    """A voucher line (or synthetic fallback line) resolved to an account."""

    account: AccountInfo
    amount: Decimal
    is_fallback: bool = False

    @property
    def account_type(self) -> AccountType:
        return self.account.account_type

    @property
    def account_code(self) -> str:
        return self.account.code


@dataclass(frozen=True)
class ClassifiedVoucher:
    """
    A voucher with every line resolved against the chart.

    ``lines`` holds the voucher's own lines whose account is in the chart.
    ``pl_lines`` holds what the P&L receives: the qualifying lines, or the
    one synthetic fallback line.  ``dropped_amount`` is non-zero only for a
    classification gap.
    """

    voucher: Voucher
    lines: tuple[ClassifiedLine, ...]
    pl_lines: tuple[ClassifiedLine, ...]
    used_fallback: bool = False
    dropped_amount: Decimal = ZERO

    @property
    def pl_total(self) -> Decimal:
        return sum((line.amount for line in self.pl_lines), ZERO)

    def lines_of(self, *types: AccountType) -> tuple[ClassifiedLine, ...]:
        return tuple(line for line in self.lines if line.account_type in types)


def fallback_amount(voucher: Voucher) -> Decimal:
    """Net amount, or the total when net is absent or zero."""
    return voucher.net_or_total


def classify_voucher(
    voucher: Voucher,
    chart: AccountChart,
    resolved: ResolvedAccounts,
) -> ClassifiedVoucher:
    """Resolve a voucher's lines and select its P&L postings."""
    lines: list[ClassifiedLine] = []
    for line in voucher.lines:
        account = chart.get(line.account_id)
        if account is None:
            logger.debug(
                "voucher_line_account_unknown",
                extra={
                    "voucher_number": voucher.number,
                    "account_id": str(line.account_id),
                },
            )
            continue
        lines.append(ClassifiedLine(account=account, amount=line.amount))

    if voucher.is_receipt:
        wanted, fallback_account = RECEIPT_PL_TYPES, resolved.revenue_fallback
    else:
        wanted, fallback_account = DISBURSEMENT_PL_TYPES, resolved.expense_fallback

    pl_lines = tuple(line for line in lines if line.account_type in wanted)
    if pl_lines:
        return ClassifiedVoucher(voucher=voucher, lines=tuple(lines), pl_lines=pl_lines)

    amount = fallback_amount(voucher)
    if amount <= ZERO:
        return ClassifiedVoucher(voucher=voucher, lines=tuple(lines), pl_lines=())

    if fallback_account is None:
        logger.warning(
            "classification_gap",
            extra={
                "voucher_number": voucher.number,
                "voucher_kind": voucher.kind.value,
                "amount": str(amount),
            },
        )
        return ClassifiedVoucher(
            voucher=voucher,
            lines=tuple(lines),
            pl_lines=(),
            dropped_amount=amount,
        )

    synthetic = ClassifiedLine(account=fallback_account, amount=amount, is_fallback=True)
    return ClassifiedVoucher(
        voucher=voucher,
        lines=tuple(lines),
        pl_lines=(synthetic,),
        used_fallback=True,
    )


def classify_vouchers(
    vouchers: Iterable[Voucher],
    chart: AccountChart,
    resolved: ResolvedAccounts,
) -> tuple[ClassifiedVoucher, ...]:
    """Classify in date order; receipts before disbursements on the same day."""
    ordered = sorted(
        vouchers,
        key=lambda v: (v.voucher_date, 0 if v.is_receipt else 1, v.number),
    )
    return tuple(classify_voucher(v, chart, resolved) for v in ordered)
