"""
Service layer for company setup.

Creates a company together with its chart of accounts, seeded from the
default Philippine SME chart (``cashbook_config/defaults/ph_sme.yaml``)
or a caller-supplied chart template.

Returns CompanyInfo / AccountInfo DTOs instead of ORM entities.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from cashbook_config.loader import ChartSeed, default_chart
from cashbook_kernel.domain.dtos import AccountInfo, CompanyInfo
from cashbook_kernel.logging_config import get_logger
from cashbook_kernel.models.account import Account
from cashbook_kernel.models.company import Company

logger = get_logger("modules.company.service")


@dataclass(frozen=True)
class CompanySetupResult:
    company: CompanyInfo
    accounts: tuple[AccountInfo, ...]


class CompanySetupService:
    """
    Company onboarding.

    The caller owns the transaction; rows are flushed so their ids are
    available in the returned DTOs.
    """

    def __init__(self, session: Session):
        self._session = session

    def create_company_with_defaults(
        self,
        name: str,
        actor_id: UUID,
        tin: str | None = None,
        address: str | None = None,
        chart: Sequence[ChartSeed] | None = None,
    ) -> CompanySetupResult:
        """
        Persist a company and its chart of accounts.

        Args:
            chart: Chart template; the default PH SME chart when omitted.
        """
        if not name or not name.strip():
            raise ValueError("Company name cannot be empty")

        seeds = tuple(chart) if chart is not None else default_chart()

        company = Company(name=name.strip(), tin=tin, address=address, created_by_id=actor_id)
        self._session.add(company)
        self._session.flush()

        accounts = [
            Account(
                company_id=company.id,
                code=seed.code,
                name=seed.name,
                account_type=seed.account_type.value,
                report_category=seed.report_category.value,
                is_active=True,
                created_by_id=actor_id,
            )
            for seed in seeds
        ]
        self._session.add_all(accounts)
        self._session.flush()

        logger.info(
            "company_created_with_defaults",
            extra={
                "company_id": str(company.id),
                "account_count": len(accounts),
                "default_chart": chart is None,
            },
        )
        return CompanySetupResult(
            company=company.to_dto(),
            accounts=tuple(a.to_dto() for a in accounts),
        )
