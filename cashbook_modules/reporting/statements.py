"""
Pure financial statement transformation functions.

These functions turn classified vouchers into twelve-month statement rows.
ZERO I/O. ZERO side effects.

All monetary values are Decimal, quantized to centavos per month before
any rollup, so quarter and annual columns are exact sums (P&L) or exact
snapshots (balance sheet) of the displayed monthly figures.

Functions in this module follow the engine purity convention:
- No database access
- No clock access
- No file I/O
- Deterministic: same inputs always produce same outputs
"""

from __future__ import annotations

import dataclasses
from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Sequence
from uuid import UUID

from cashbook_engines.bucketing import (
    MONTH_NAMES,
    MonthlyBuckets,
    additive_rollup,
    is_quarter_end,
    month_index,
    quarter_of,
    quarter_sum,
    running_totals,
    snapshot_rollup,
)
from cashbook_engines.classification import (
    AccountChart,
    ClassifiedVoucher,
    ResolvedAccounts,
)
from cashbook_kernel.domain.dtos import AccountInfo, AccountType, Voucher, VoucherKind
from cashbook_modules.reporting.models import (
    BalanceSheetResult,
    FinancialSummary,
    JournalEntryRow,
    JournalMonthRow,
    ProfitLossSummary,
    StatementRow,
)

ZERO = Decimal("0")
CENTAVO = Decimal("0.01")


def to_centavos(amount: Decimal) -> Decimal:
    return amount.quantize(CENTAVO, rounding=ROUND_HALF_UP)


def _centavo_months(months: Sequence[Decimal]) -> tuple[Decimal, ...]:
    return tuple(to_centavos(m) for m in months)


# =========================================================================
# Profit & Loss
# =========================================================================


def build_profit_loss(
    classified: Iterable[ClassifiedVoucher],
    year: int,
) -> tuple[StatementRow, ...]:
    """
    One row per account code that received any P&L posting in ``year``.

    Receipts contribute their revenue lines (or fallback line), disbursements
    their cost / expense lines (or fallback line).  Amounts are positive in
    their natural direction: revenue rows show income, cost and expense rows
    show spending.  Quarter = sum of its three months; annual = sum of twelve.
    """
    buckets = MonthlyBuckets(year)
    accounts: dict[str, AccountInfo] = {}
    for cv in classified:
        for line in cv.pl_lines:
            if buckets.add(line.account_code, cv.voucher.voucher_date, line.amount):
                accounts.setdefault(line.account_code, line.account)

    rows: list[StatementRow] = []
    for code in sorted(buckets.keys()):
        months = _centavo_months(buckets.months(code))
        quarters, annual = additive_rollup(months)
        account = accounts[code]
        rows.append(
            StatementRow.build(
                code, account.name, account.account_type, months, quarters, annual,
            )
        )
    return tuple(rows)


def summarize_profit_loss(rows: Iterable[StatementRow]) -> ProfitLossSummary:
    """Annual revenue / cost / expense totals of P&L rows."""
    totals: dict[AccountType, Decimal] = defaultdict(lambda: ZERO)
    for row in rows:
        if row.account_type is not None:
            totals[row.account_type] += row.annual
    revenue = totals[AccountType.REVENUE]
    cost = totals[AccountType.COST]
    expenses = totals[AccountType.EXPENSE]
    gross_profit = revenue - cost
    return ProfitLossSummary(
        total_revenue=revenue,
        total_cost=cost,
        total_expenses=expenses,
        gross_profit=gross_profit,
        net_income=gross_profit - expenses,
    )


def _signed_pl_effect(cv: ClassifiedVoucher) -> Decimal:
    """Effect of one voucher on net income: + for receipts, - for disbursements."""
    total = cv.pl_total
    return total if cv.voucher.is_receipt else -total


def monthly_net_income(
    classified: Iterable[ClassifiedVoucher],
    year: int,
) -> tuple[Decimal, ...]:
    """Revenue minus cost minus expense per month, from the P&L postings."""
    months = [ZERO] * 12
    for cv in classified:
        m = month_index(cv.voucher.voucher_date, year)
        if m is not None:
            months[m - 1] += _signed_pl_effect(cv)
    return tuple(months)


# =========================================================================
# Balance Sheet
# =========================================================================


def build_balance_sheet(
    classified: Sequence[ClassifiedVoucher],
    chart: AccountChart,
    resolved: ResolvedAccounts,
    year: int,
    strict_balancing: bool = False,
) -> BalanceSheetResult:
    """
    Cumulative month-end balances per account for ``year``.

    1. Monthly net income is posted into retained earnings (when that
       account resolves).
    2. Receipts: cash + total amount; equity / liability lines + amount.
       Disbursements: cash - total amount; asset lines + amount; liability /
       equity lines - amount.  Cost / expense / revenue lines reach the
       balance sheet only through net income.
    3. Running totals per account, seeded at zero for the year.
    4. q1..q4 / annual are the Mar / Jun / Sep / Dec / Dec balances.

    With ``strict_balancing`` cash moves by the sum of what each voucher
    posted elsewhere instead of its total amount.
    """
    deltas = MonthlyBuckets(year)
    cash = resolved.cash_code
    net_income = [ZERO] * 12

    for cv in sorted(classified, key=lambda c: c.voucher.voucher_date):
        voucher = cv.voucher
        m = month_index(voucher.voucher_date, year)
        if m is None:
            continue
        pl_effect = _signed_pl_effect(cv)
        net_income[m - 1] += pl_effect

        posted = ZERO
        if voucher.is_receipt:
            for line in cv.lines_of(AccountType.EQUITY, AccountType.LIABILITY):
                deltas.add_to_month(line.account_code, m, line.amount)
                posted += line.amount
            cash_delta = posted + pl_effect if strict_balancing else voucher.total_amount
            deltas.add_to_month(cash, m, cash_delta)
        else:
            for line in cv.lines_of(AccountType.ASSET):
                deltas.add_to_month(line.account_code, m, line.amount)
                posted += line.amount
            for line in cv.lines_of(AccountType.LIABILITY, AccountType.EQUITY):
                deltas.add_to_month(line.account_code, m, -line.amount)
                posted += line.amount
            cash_delta = posted - pl_effect if strict_balancing else voucher.total_amount
            deltas.add_to_month(cash, m, -cash_delta)

    if resolved.retained_earnings is not None:
        for i, amount in enumerate(net_income):
            deltas.add_to_month(resolved.retained_earnings.code, i + 1, amount)

    rows: list[StatementRow] = []
    imbalance = [ZERO] * 12
    for code in sorted(deltas.keys()):
        cumulative = running_totals(_centavo_months(deltas.months(code)))
        account = chart.by_code(code)
        account_type = account.account_type if account is not None else None
        if code == cash and account_type is None:
            account_type = AccountType.ASSET
        sign = _balance_sign(account_type)
        for i, balance in enumerate(cumulative):
            imbalance[i] += sign * balance
        if sum(abs(b) for b in cumulative) == ZERO:
            continue
        quarters, annual = snapshot_rollup(cumulative)
        rows.append(
            StatementRow.build(
                code,
                chart.name_for_code(code),
                account_type,
                cumulative,
                quarters,
                annual,
            )
        )

    return BalanceSheetResult(
        rows=tuple(rows),
        imbalance=tuple(imbalance),
        strict_balancing=strict_balancing,
    )


def _balance_sign(account_type: AccountType | None) -> int:
    if account_type == AccountType.ASSET:
        return 1
    if account_type in (AccountType.LIABILITY, AccountType.EQUITY):
        return -1
    return 0


# =========================================================================
# Journal ledger
# =========================================================================


def build_journal_entries(vouchers: Iterable[Voucher]) -> tuple[JournalEntryRow, ...]:
    """Receipts as debits and disbursements as credits to cash, by date."""
    ordered = sorted(
        vouchers,
        key=lambda v: (v.voucher_date, 0 if v.is_receipt else 1, v.number),
    )
    return tuple(
        JournalEntryRow(
            entry_date=v.voucher_date,
            reference=v.number,
            kind=v.kind,
            counterparty=v.counterparty_name,
            particulars=v.particulars,
            debit=v.total_amount if v.is_receipt else ZERO,
            credit=ZERO if v.is_receipt else v.total_amount,
        )
        for v in ordered
    )


def build_journal_totals(vouchers: Iterable[Voucher], year: int) -> tuple[JournalMonthRow, ...]:
    """Monthly debit / credit totals with quarter totals on quarter-end months."""
    buckets = MonthlyBuckets(year)
    for v in vouchers:
        buckets.add(v.kind, v.voucher_date, v.total_amount)

    debits = _centavo_months(buckets.months(VoucherKind.RECEIPT))
    credits = _centavo_months(buckets.months(VoucherKind.DISBURSEMENT))
    rows: list[JournalMonthRow] = []
    for i in range(12):
        month = i + 1
        q_end = is_quarter_end(month)
        rows.append(
            JournalMonthRow(
                month=MONTH_NAMES[i],
                monthly_debit=debits[i],
                monthly_credit=credits[i],
                is_quarter_end=q_end,
                quarterly_debit=quarter_sum(debits, quarter_of(month)) if q_end else None,
                quarterly_credit=quarter_sum(credits, quarter_of(month)) if q_end else None,
            )
        )
    return tuple(rows)


def build_financial_summary(
    pl_rows: Iterable[StatementRow],
    year: int,
    receipt_count: int,
    disbursement_count: int,
) -> FinancialSummary:
    s = summarize_profit_loss(pl_rows)
    return FinancialSummary(
        year=year,
        total_revenue=s.total_revenue,
        total_cost=s.total_cost,
        total_expenses=s.total_expenses,
        gross_profit=s.gross_profit,
        net_income=s.net_income,
        receipt_count=receipt_count,
        disbursement_count=disbursement_count,
    )


# =========================================================================
# Rendering
# =========================================================================


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Handles:
    - Decimal -> str with exactly two fractional digits
    - UUID -> str
    - date -> ISO format string (YYYY-MM-DD)
    - Enum -> .value
    - Nested frozen dataclasses -> nested dicts
    - Tuples -> lists
    - None preserved
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(to_centavos(obj))
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(render_to_dict(k)): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
