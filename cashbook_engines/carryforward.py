"""
Carryforward Engine - the NOLCO and excess-MCIT credit ledgers.

Both ledgers hold one entry per origination year with a fixed original
amount and an expiry year.  An entry is *available* for a target year while
``expiry_year >= target_year`` and something remains.  Reading availability
is side-effect free; consuming credits is a separate, explicit operation
(``apply_carryforward``) that returns new entries instead of mutating.

Expiry rules:
    MCIT credit   tax_year + 3
    NOLCO         loss_year + 3, or + 5 for losses incurred in 2020 and 2021

Consumption order is oldest origination year first, so credits closest to
expiry are used before younger ones.

Pure functions with no I/O.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable

from cashbook_kernel.domain.dtos import CarryforwardEntry, CarryforwardKind
from cashbook_kernel.exceptions import (
    InsufficientCarryforwardError,
    InvalidCarryforwardAmountError,
)
from cashbook_kernel.logging_config import get_logger

logger = get_logger("engines.carryforward")

ZERO = Decimal("0")

MCIT_CARRYFORWARD_YEARS = 3
NOLCO_CARRYFORWARD_YEARS = 3
NOLCO_EXTENDED_CARRYFORWARD_YEARS = 5
# Losses of these years carry over for five years (Bayanihan to Recover As One Act)
NOLCO_EXTENDED_YEARS: frozenset[int] = frozenset({2020, 2021})


def mcit_expiry_year(tax_year: int) -> int:
    return tax_year + MCIT_CARRYFORWARD_YEARS


def nolco_expiry_year(
    loss_year: int,
    extended_years: frozenset[int] = NOLCO_EXTENDED_YEARS,
) -> int:
    if loss_year in extended_years:
        return loss_year + NOLCO_EXTENDED_CARRYFORWARD_YEARS
    return loss_year + NOLCO_CARRYFORWARD_YEARS


def new_mcit_credit(tax_year: int, excess_amount: Decimal) -> CarryforwardEntry:
    """A fresh, unused excess-MCIT credit for ``tax_year``."""
    if excess_amount < ZERO:
        raise InvalidCarryforwardAmountError(CarryforwardKind.MCIT.value, str(excess_amount))
    return CarryforwardEntry(
        kind=CarryforwardKind.MCIT,
        origin_year=tax_year,
        original_amount=excess_amount,
        used_amount=ZERO,
        remaining_amount=excess_amount,
        expiry_year=mcit_expiry_year(tax_year),
    )


def new_nolco_entry(
    loss_year: int,
    amount: Decimal,
    extended_years: frozenset[int] = NOLCO_EXTENDED_YEARS,
) -> CarryforwardEntry:
    """A fresh, unused NOLCO entry for a loss incurred in ``loss_year``."""
    if amount < ZERO:
        raise InvalidCarryforwardAmountError(CarryforwardKind.NOLCO.value, str(amount))
    return CarryforwardEntry(
        kind=CarryforwardKind.NOLCO,
        origin_year=loss_year,
        original_amount=amount,
        used_amount=ZERO,
        remaining_amount=amount,
        expiry_year=nolco_expiry_year(loss_year, extended_years),
    )


def is_available(entry: CarryforwardEntry, target_year: int) -> bool:
    return entry.expiry_year >= target_year and entry.remaining_amount > ZERO


def available_entries(
    entries: Iterable[CarryforwardEntry],
    target_year: int,
) -> tuple[CarryforwardEntry, ...]:
    """Available entries, oldest origination year first."""
    return tuple(
        sorted(
            (e for e in entries if is_available(e, target_year)),
            key=lambda e: e.origin_year,
        )
    )


def available_total(entries: Iterable[CarryforwardEntry], target_year: int) -> Decimal:
    return sum(
        (e.remaining_amount for e in entries if is_available(e, target_year)),
        ZERO,
    )


@dataclass(frozen=True)
class Allocation:
    """Amount taken from one entry by an application."""

    origin_year: int
    amount: Decimal
    remaining_after: Decimal


@dataclass(frozen=True)
class CarryforwardApplication:
    """
    Outcome of apply_carryforward.

    ``entries`` is the full input ledger with consumed entries replaced by
    their updated versions (same order as the input).
    """

    kind: CarryforwardKind
    target_year: int
    requested: Decimal
    applied: Decimal
    allocations: tuple[Allocation, ...]
    entries: tuple[CarryforwardEntry, ...]

    @property
    def changed(self) -> tuple[CarryforwardEntry, ...]:
        years = {a.origin_year for a in self.allocations}
        return tuple(e for e in self.entries if e.origin_year in years)


def apply_carryforward(
    entries: Iterable[CarryforwardEntry],
    amount: Decimal,
    target_year: int,
    kind: CarryforwardKind | None = None,
) -> CarryforwardApplication:
    """
    Consume ``amount`` from the available entries, oldest first.

    ``kind`` names the ledger when ``entries`` may be empty; otherwise it is
    taken from the entries.

    Raises:
        InvalidCarryforwardAmountError: amount is negative.
        InsufficientCarryforwardError: amount exceeds the available total.
        ValueError: entries mix NOLCO and MCIT, or differ from ``kind``.
    """
    t0 = time.monotonic()
    ledger = tuple(entries)
    kinds = {e.kind for e in ledger}
    if kind is not None:
        kinds.add(kind)
    if len(kinds) > 1:
        raise ValueError("Cannot apply credits across NOLCO and MCIT ledgers at once")
    kind = next(iter(kinds)) if kinds else CarryforwardKind.NOLCO

    if amount < ZERO:
        raise InvalidCarryforwardAmountError(kind.value, str(amount))

    available = available_total(ledger, target_year)
    if amount > available:
        raise InsufficientCarryforwardError(
            kind.value, str(amount), str(available), target_year,
        )

    logger.info(
        "carryforward_application_started",
        extra={
            "kind": kind.value,
            "target_year": target_year,
            "requested": str(amount),
            "available": str(available),
        },
    )

    outstanding = amount
    allocations: list[Allocation] = []
    updated: dict[int, CarryforwardEntry] = {}
    for entry in available_entries(ledger, target_year):
        if outstanding <= ZERO:
            break
        take = min(outstanding, entry.remaining_amount)
        new_entry = replace(
            entry,
            used_amount=entry.used_amount + take,
            remaining_amount=entry.remaining_amount - take,
        )
        updated[entry.origin_year] = new_entry
        allocations.append(Allocation(entry.origin_year, take, new_entry.remaining_amount))
        outstanding -= take

    result = CarryforwardApplication(
        kind=kind,
        target_year=target_year,
        requested=amount,
        applied=amount - outstanding,
        allocations=tuple(allocations),
        entries=tuple(updated.get(e.origin_year, e) for e in ledger),
    )

    logger.info(
        "carryforward_application_completed",
        extra={
            "kind": kind.value,
            "target_year": target_year,
            "applied": str(result.applied),
            "entries_touched": len(allocations),
            "duration_ms": round((time.monotonic() - t0) * 1000, 2),
        },
    )
    return result
