"""
Income Tax Module (``cashbook_modules.tax``).

Responsibility
--------------
Per-year tax settings, corporate income tax computation (regular tax
versus MCIT, NOLCO deduction, excess-MCIT credits), the two carryforward
ledgers and the explicit apply-credits operation, and final withholding
income listings.

Architecture position
---------------------
**Modules layer** -- glue over ``cashbook_engines.income_tax`` and
``cashbook_engines.carryforward``.

Failure modes
-------------
* Duplicate ledger entry -> ``DuplicateCarryforwardError``.
* Over-application -> ``InsufficientCarryforwardError``.
"""

from cashbook_modules.tax.config import TaxConfig
from cashbook_modules.tax.service import TaxService

__all__ = [
    "TaxService",
    "TaxConfig",
]
