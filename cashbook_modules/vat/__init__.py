"""
VAT Books Module (``cashbook_modules.vat``).

Sales and purchase books, the period VAT summary (vatable / zero-rated /
exempt sales, output and input VAT, VAT payable) and the monthly VAT
totals with quarter sums.  Read-only.
"""

from cashbook_modules.vat.books import (
    build_purchase_book,
    build_sales_book,
    build_vat_summary,
    build_vat_totals,
)
from cashbook_modules.vat.models import (
    PurchaseBookRow,
    SalesBookRow,
    VatMonthRow,
    VatSummary,
)
from cashbook_modules.vat.service import VatService

__all__ = [
    "VatService",
    "VatSummary",
    "VatMonthRow",
    "SalesBookRow",
    "PurchaseBookRow",
    "build_vat_summary",
    "build_vat_totals",
    "build_sales_book",
    "build_purchase_book",
]
