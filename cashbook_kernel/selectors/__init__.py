"""Read-only selectors (the Ledger Source)."""

from cashbook_kernel.selectors.base import BaseSelector
from cashbook_kernel.selectors.ledger_selector import LedgerSelector, LedgerSource

__all__ = ["BaseSelector", "LedgerSelector", "LedgerSource"]
