"""
Tax Service -- Orchestrates income tax operations via engines + kernel.

Responsibility:
    Thin glue layer that connects the pure income tax and carryforward
    engines to the stored tax settings and credit ledgers.  All tax
    arithmetic is delegated to ``cashbook_engines``; this service only
    loads inputs and writes ledger rows.

Architecture:
    cashbook_modules -- Thin glue (this layer).
    1. Reads the P&L summary through ``ReportingService`` so the tax base
       uses exactly the classification the statements use.
    2. Calls ``compute_tax`` (pure) with settings and available ledgers.
    3. Calls ``apply_carryforward`` (pure) and persists the updated
       entries for the explicit apply-credits operation.

Invariants:
    - Computing tax never changes a ledger.  Credits are consumed only by
      ``apply_credits``.
    - ``apply_credits`` reads the ledger rows ``FOR UPDATE``, so two
      concurrent applications cannot both spend the same balance.
    - One NOLCO entry / MCIT credit per company per origination year.
    - This service flushes but never commits: the caller owns the
      transaction boundary.
    - Amounts are ``Decimal`` throughout -- NEVER ``float``.

Failure modes:
    - Invalid year -> ``InvalidPeriodError`` before any query.
    - Second ledger entry for a year -> ``DuplicateCarryforwardError``.
    - Applying more than is available -> ``InsufficientCarryforwardError``;
      no row is changed.

Usage:
    service = TaxService(session, clock=clock)
    calc = service.compute_tax(company_id, 2024)
    with session.begin():
        service.apply_credits(company_id, 2024, CarryforwardKind.MCIT,
                              calc.available_mcit_credits, actor_id)
"""

from __future__ import annotations

import time
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from cashbook_engines.bucketing import resolve_period
from cashbook_engines.carryforward import (
    CarryforwardApplication,
    apply_carryforward,
    available_total,
    new_mcit_credit,
    new_nolco_entry,
)
from cashbook_engines.income_tax import TaxCalculation, TaxInputs, compute_tax
from cashbook_kernel.domain.clock import Clock, SystemClock
from cashbook_kernel.domain.dtos import (
    CarryforwardEntry,
    CarryforwardKind,
    FinalWithholdingIncomeInfo,
    TaxSettingsInfo,
)
from cashbook_kernel.exceptions import DuplicateCarryforwardError
from cashbook_kernel.logging_config import LogContext, get_logger
from cashbook_kernel.models.carryforward import McitCredit, NolcoEntry
from cashbook_kernel.models.tax_settings import TaxSettings
from cashbook_kernel.selectors.ledger_selector import LedgerSelector, LedgerSource
from cashbook_modules.reporting.config import ReportingConfig
from cashbook_modules.reporting.service import ReportingService
from cashbook_modules.tax.config import TaxConfig

logger = get_logger("modules.tax.service")

ZERO = Decimal("0")

_LEDGER_MODELS = {
    CarryforwardKind.MCIT: (McitCredit, McitCredit.tax_year),
    CarryforwardKind.NOLCO: (NolcoEntry, NolcoEntry.loss_year),
}


class TaxService:
    """
    Income tax settings, computation and credit ledgers for one company.

    Contract:
        Callers supply a ``Session`` and optionally a ``Clock``, the module
        configs, and a ``LedgerSource`` for reads.  Write methods add or
        update rows and flush; committing is the caller's decision.

    Guarantees:
        - ``compute_tax`` is read-only and repeatable.
        - ``apply_credits`` either applies the full amount or changes
          nothing.

    Non-goals:
        - This service does NOT create MCIT credits automatically from a
          computation; ``record_mcit_credit`` is called explicitly with the
          calculation's ``excess_mcit``.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: TaxConfig | None = None,
        reporting_config: ReportingConfig | None = None,
        source: LedgerSource | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or TaxConfig.with_defaults()
        self._source: LedgerSource = source or LedgerSelector(session)
        self._reporting = ReportingService(
            session,
            clock=self._clock,
            config=reporting_config,
            source=self._source,
        )

    @property
    def config(self) -> TaxConfig:
        return self._config

    # =========================================================================
    # Tax settings
    # =========================================================================

    def get_tax_settings(self, company_id: UUID, tax_year: int) -> TaxSettingsInfo:
        """Stored settings for the year, or unsaved defaults when there are none."""
        settings = self._source.get_tax_settings(company_id, tax_year)
        if settings is not None:
            return settings
        return TaxSettingsInfo(
            tax_year=tax_year,
            tax_rate=self._config.default_tax_rate,
            mcit_rate=self._config.default_mcit_rate,
            company_id=company_id,
            is_default=True,
        )

    def upsert_tax_settings(
        self,
        company_id: UUID,
        tax_year: int,
        actor_id: UUID,
        tax_rate: Decimal | None = None,
        mcit_rate: Decimal | None = None,
        is_mcit_applicable: bool | None = None,
        credits_available: Decimal | None = None,
    ) -> TaxSettingsInfo:
        """Create or update the settings row; omitted fields keep their value."""
        tax_year = resolve_period(tax_year).year
        row = self._session.scalars(
            select(TaxSettings).where(
                TaxSettings.company_id == company_id,
                TaxSettings.tax_year == tax_year,
            )
        ).one_or_none()

        created = row is None
        if row is None:
            row = TaxSettings(
                company_id=company_id,
                tax_year=tax_year,
                tax_rate=self._config.default_tax_rate,
                mcit_rate=self._config.default_mcit_rate,
                is_mcit_applicable=False,
                credits_available=ZERO,
                created_by_id=actor_id,
            )
            self._session.add(row)
        else:
            row.updated_by_id = actor_id

        if tax_rate is not None:
            row.tax_rate = tax_rate
        if mcit_rate is not None:
            row.mcit_rate = mcit_rate
        if is_mcit_applicable is not None:
            row.is_mcit_applicable = is_mcit_applicable
        if credits_available is not None:
            row.credits_available = credits_available

        self._session.flush()
        logger.info(
            "tax_settings_upserted",
            extra={
                "company_id": str(company_id),
                "tax_year": tax_year,
                "row_created": created,
                "tax_rate": str(row.tax_rate),
                "mcit_rate": str(row.mcit_rate),
            },
        )
        return row.to_dto()

    # =========================================================================
    # Computation
    # =========================================================================

    def compute_tax(
        self,
        company_id: UUID,
        tax_year: int,
        other_credits: Decimal | None = None,
    ) -> TaxCalculation:
        """
        Income tax due for ``tax_year`` from the year's P&L.

        NOLCO and MCIT credits available for the year are deducted; nothing
        is consumed. ``other_credits`` defaults to the credits stored in the
        year's tax settings.
        """
        t0 = time.monotonic()
        tax_year = resolve_period(tax_year).year
        with LogContext.bind(company_id=str(company_id)):
            summary = self._reporting.get_profit_loss_summary(company_id, tax_year)
            settings = self.get_tax_settings(company_id, tax_year)
            nolco = available_total(self._source.get_nolco_entries(company_id), tax_year)
            mcit_credits = available_total(self._source.get_mcit_credits(company_id), tax_year)
            if other_credits is None:
                other_credits = settings.credits_available

            calc = compute_tax(
                TaxInputs(
                    total_revenue=summary.total_revenue,
                    total_cost=summary.total_cost,
                    total_expenses=summary.total_expenses,
                    tax_rate=settings.tax_rate_fraction,
                    mcit_rate=settings.mcit_rate_fraction,
                    available_nolco=nolco,
                    available_mcit_credits=mcit_credits,
                    other_credits=other_credits,
                )
            )
            logger.info(
                "company_tax_computed",
                extra={
                    "tax_year": tax_year,
                    "settings_default": settings.is_default,
                    "available_nolco": str(nolco),
                    "available_mcit_credits": str(mcit_credits),
                    "final_tax_due": str(calc.final_tax_due),
                    "duration_ms": round((time.monotonic() - t0) * 1000, 2),
                },
            )
        return calc

    # =========================================================================
    # Carryforward ledgers
    # =========================================================================

    def _ensure_no_entry(self, kind: CarryforwardKind, company_id: UUID, origin_year: int) -> None:
        model, year_col = _LEDGER_MODELS[kind]
        exists = self._session.scalars(
            select(model.id).where(model.company_id == company_id, year_col == origin_year)
        ).first()
        if exists is not None:
            raise DuplicateCarryforwardError(kind.value, str(company_id), origin_year)

    def record_mcit_credit(
        self,
        company_id: UUID,
        tax_year: int,
        excess_amount: Decimal,
        actor_id: UUID,
    ) -> CarryforwardEntry:
        """Record the excess of MCIT over regular tax for ``tax_year``."""
        entry = new_mcit_credit(tax_year, excess_amount)
        self._ensure_no_entry(CarryforwardKind.MCIT, company_id, tax_year)
        row = McitCredit.from_dto(entry, company_id=company_id, created_by_id=actor_id)
        self._session.add(row)
        self._session.flush()
        logger.info(
            "mcit_credit_recorded",
            extra={
                "company_id": str(company_id),
                "tax_year": tax_year,
                "excess_amount": str(excess_amount),
                "expiry_year": entry.expiry_year,
            },
        )
        return row.to_dto()

    def record_nolco_entry(
        self,
        company_id: UUID,
        loss_year: int,
        amount: Decimal,
        actor_id: UUID,
    ) -> CarryforwardEntry:
        """Record a net operating loss incurred in ``loss_year``."""
        entry = new_nolco_entry(loss_year, amount, self._config.nolco_extended_years)
        self._ensure_no_entry(CarryforwardKind.NOLCO, company_id, loss_year)
        row = NolcoEntry.from_dto(entry, company_id=company_id, created_by_id=actor_id)
        self._session.add(row)
        self._session.flush()
        logger.info(
            "nolco_entry_recorded",
            extra={
                "company_id": str(company_id),
                "loss_year": loss_year,
                "amount": str(amount),
                "expiry_year": entry.expiry_year,
            },
        )
        return row.to_dto()

    def apply_credits(
        self,
        company_id: UUID,
        tax_year: int,
        kind: CarryforwardKind,
        amount: Decimal,
        actor_id: UUID,
    ) -> CarryforwardApplication:
        """
        Consume ``amount`` of a ledger against ``tax_year``, oldest entry first.

        Raises:
            InsufficientCarryforwardError: amount exceeds what is available.
            InvalidCarryforwardAmountError: amount is negative.
        """
        model, year_col = _LEDGER_MODELS[kind]
        rows = self._session.scalars(
            select(model)
            .where(model.company_id == company_id)
            .order_by(year_col)
            .with_for_update()
        ).all()
        entries = [row.to_dto() for row in rows]
        by_year = {entry.origin_year: row for entry, row in zip(entries, rows)}

        application = apply_carryforward(entries, amount, tax_year, kind=kind)

        for entry in application.changed:
            row = by_year[entry.origin_year]
            row.used_amount = entry.used_amount
            row.remaining_amount = entry.remaining_amount
            row.updated_by_id = actor_id
        self._session.flush()

        logger.info(
            "carryforward_credits_applied",
            extra={
                "company_id": str(company_id),
                "kind": kind.value,
                "tax_year": tax_year,
                "applied": str(application.applied),
                "origin_years": [a.origin_year for a in application.allocations],
            },
        )
        return application

    # =========================================================================
    # Final withholding income
    # =========================================================================

    def list_final_withholding_incomes(
        self,
        company_id: UUID,
        tax_year: int,
        quarter: int | None = None,
    ) -> tuple[FinalWithholdingIncomeInfo, ...]:
        period = resolve_period(tax_year, quarter=quarter)
        return self._source.get_final_withholding_incomes(company_id, period.year, period.quarter)
