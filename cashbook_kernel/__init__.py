"""
Cashbook Kernel

Persistence and domain foundation for the single-entry cash ledger:
- Chart of accounts, vouchers and lines (cash receipts, cash disbursements)
- Expiring carryforward ledgers (NOLCO, excess MCIT)
- Read-only ledger source for the calculation engines
- Structured logging and typed exceptions
"""

__version__ = "0.1.0"
