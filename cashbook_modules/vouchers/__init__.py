"""
Voucher Lifecycle Module (``cashbook_modules.vouchers``).

The draft -> approved workflow shared by cash receipts and cash
disbursements, and the service that applies it.
"""

from cashbook_modules.vouchers.service import VoucherService
from cashbook_modules.vouchers.workflows import APPROVE, VOUCHER_WORKFLOW

__all__ = [
    "VoucherService",
    "VOUCHER_WORKFLOW",
    "APPROVE",
]
