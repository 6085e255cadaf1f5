"""Company setup: a new company with its default chart of accounts."""

from cashbook_modules.company.service import CompanySetupResult, CompanySetupService

__all__ = [
    "CompanySetupService",
    "CompanySetupResult",
]
