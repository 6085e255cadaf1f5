"""
Temporal Bucketing Engine - assign vouchers to calendar months and roll
months up into quarters and the year.

Two rollups exist and must not be confused:

* additive   -- P&L, VAT and journal totals.  A quarter is the sum of its
                three months; the year is the sum of all twelve.
* snapshot   -- Balance sheet.  Monthly values are running balances, so a
                quarter column is the balance at the quarter's last month
                (Mar / Jun / Sep / Dec) and the annual column is December.

Pure functions with no I/O.

Usage:
    from cashbook_engines.bucketing import MonthlyBuckets, additive_rollup

    buckets = MonthlyBuckets(year=2024)
    buckets.add("4000", date(2024, 3, 15), Decimal("1000.00"))
    q, annual = additive_rollup(buckets.months("4000"))
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Hashable, Sequence

from cashbook_kernel.exceptions import InvalidPeriodError

ZERO = Decimal("0")

MONTH_NAMES: tuple[str, ...] = tuple(calendar.month_name[m] for m in range(1, 13))
MONTH_KEYS: tuple[str, ...] = (
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
)

# Month numbers (1-based) per quarter
QUARTER_MONTHS: dict[int, tuple[int, int, int]] = {
    1: (1, 2, 3),
    2: (4, 5, 6),
    3: (7, 8, 9),
    4: (10, 11, 12),
}

MIN_YEAR = 1900
MAX_YEAR = 9999


def year_window(year: int) -> tuple[date, date]:
    """Inclusive [Jan 1, Dec 31] window of ``year``."""
    return date(year, 1, 1), date(year, 12, 31)


def month_index(voucher_date: date, year: int) -> int | None:
    """Month number 1-12 of ``voucher_date`` within ``year``; None if outside."""
    if voucher_date.year != year:
        return None
    return voucher_date.month


def quarter_of(month: int) -> int:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be 1-12, got {month}")
    return (month - 1) // 3 + 1


def is_quarter_end(month: int) -> bool:
    return month % 3 == 0


class MonthlyBuckets:
    """
    Per-key twelve-slot accumulator for one year.

    Amounts dated outside the year are ignored and reported as rejected, so
    no amount can leak across years.  Keys keep their first-seen order.
    """

    def __init__(self, year: int):
        self.year = year
        self._buckets: dict[Hashable, list[Decimal]] = {}

    def add(self, key: Hashable, on: date, amount: Decimal) -> bool:
        month = month_index(on, self.year)
        if month is None:
            return False
        self.add_to_month(key, month, amount)
        return True

    def add_to_month(self, key: Hashable, month: int, amount: Decimal) -> None:
        slots = self._buckets.setdefault(key, [ZERO] * 12)
        slots[month - 1] += amount

    def keys(self) -> list[Hashable]:
        return list(self._buckets)

    def months(self, key: Hashable) -> tuple[Decimal, ...]:
        return tuple(self._buckets.get(key, [ZERO] * 12))

    def __contains__(self, key: Hashable) -> bool:
        return key in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)


def additive_rollup(months: Sequence[Decimal]) -> tuple[tuple[Decimal, ...], Decimal]:
    """Quarter sums and annual sum of twelve monthly amounts."""
    _check_twelve(months)
    quarters = tuple(quarter_sum(months, q) for q in range(1, 5))
    # Annual from the quarters so Dec is counted exactly once
    return quarters, sum(quarters, ZERO)


def quarter_sum(months: Sequence[Decimal], quarter: int) -> Decimal:
    """Sum of exactly the three months of ``quarter``."""
    _check_twelve(months)
    return sum((months[m - 1] for m in QUARTER_MONTHS[quarter]), ZERO)


def running_totals(deltas: Sequence[Decimal], opening: Decimal = ZERO) -> tuple[Decimal, ...]:
    """Month N balance = month N delta + month N-1 balance."""
    _check_twelve(deltas)
    out: list[Decimal] = []
    balance = opening
    for delta in deltas:
        balance += delta
        out.append(balance)
    return tuple(out)


def snapshot_rollup(cumulative: Sequence[Decimal]) -> tuple[tuple[Decimal, ...], Decimal]:
    """Quarter-end balances (Mar, Jun, Sep, Dec) and the December balance."""
    _check_twelve(cumulative)
    quarters = tuple(cumulative[QUARTER_MONTHS[q][-1] - 1] for q in range(1, 5))
    return quarters, cumulative[11]


def _check_twelve(values: Sequence[Decimal]) -> None:
    if len(values) != 12:
        raise ValueError(f"Expected 12 monthly values, got {len(values)}")


# =============================================================================
# Report periods
# =============================================================================


@dataclass(frozen=True)
class ReportPeriod:
    """Resolved reporting window.  ``quarter`` and ``month`` echo the request."""

    year: int
    start_date: date
    end_date: date
    quarter: int | None = None
    month: int | None = None

    def contains(self, d: date) -> bool:
        return self.start_date <= d <= self.end_date


def _coerce_int(field: str, value: object) -> int:
    if isinstance(value, bool):
        raise InvalidPeriodError(field, value, "must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise InvalidPeriodError(field, value, "must be an integer")


def resolve_period(
    year: object,
    quarter: object | None = None,
    month: object | None = None,
) -> ReportPeriod:
    """
    Resolve a request's year / quarter / month into a date window.

    A month wins over a quarter; with neither the window is the whole year.
    Raises InvalidPeriodError before any data is read.
    """
    if year is None or year == "":
        raise InvalidPeriodError("year", year, "is required")
    y = _coerce_int("year", year)
    if not MIN_YEAR <= y <= MAX_YEAR:
        raise InvalidPeriodError("year", year, f"must be between {MIN_YEAR} and {MAX_YEAR}")

    q = None if quarter in (None, "") else _coerce_int("quarter", quarter)
    if q is not None and not 1 <= q <= 4:
        raise InvalidPeriodError("quarter", quarter, "must be between 1 and 4")

    m = None if month in (None, "") else _coerce_int("month", month)
    if m is not None and not 1 <= m <= 12:
        raise InvalidPeriodError("month", month, "must be between 1 and 12")

    if m is not None:
        last_day = calendar.monthrange(y, m)[1]
        return ReportPeriod(y, date(y, m, 1), date(y, m, last_day), quarter=q, month=m)
    if q is not None:
        first, *_, last = QUARTER_MONTHS[q]
        last_day = calendar.monthrange(y, last)[1]
        return ReportPeriod(y, date(y, first, 1), date(y, last, last_day), quarter=q)
    start, end = year_window(y)
    return ReportPeriod(y, start, end)


def check_window(start_date: date, end_date: date) -> None:
    """Reject an inclusive date window whose end precedes its start."""
    if end_date < start_date:
        raise InvalidPeriodError("end_date", end_date, f"is before start_date {start_date}")
