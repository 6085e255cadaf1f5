"""
Cashbook Modules.

Thin orchestration layers over the Cashbook Kernel and Engines.
Each module contains:
- Domain models (the report shapes)
- Pure builders (classified vouchers -> report rows)
- A session-backed service (fetch, then compute)
- Configuration schemas where the module has settings

Modules:
- Reporting: Profit & Loss, Balance Sheet, journal ledger, financial summary
- VAT: Sales and purchase books, output / input VAT, VAT payable
- Tax: Tax settings, income tax computation, NOLCO and MCIT credit ledgers
- BIR: Form registry and per-form data extracts
- Vouchers: Receipt / disbursement approval workflow
- Company: Company setup with the default chart of accounts

Actual processing logic lives in the engines.
"""

from cashbook_modules import (
    reporting,
    vat,
    tax,
    bir,
    vouchers,
    company,
)

__all__ = [
    "reporting",
    "vat",
    "tax",
    "bir",
    "vouchers",
    "company",
]
