"""
VAT Book Domain Models (``cashbook_modules.vat.models``).

Responsibility
--------------
Frozen dataclass value objects for the VAT books: the period VAT summary,
the twelve monthly VAT total rows, and the sales / purchase book listings.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* ``VatMonthRow`` quarterly fields are None except on Mar / Jun / Sep / Dec.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class VatSummary:
    """
    Sales split and VAT position for one date window.

    ``vatable_sales``, ``zero_rated_sales`` and ``exempt_sales`` partition
    the window's receipts; a receipt lands in exactly one of them.
    """

    vatable_sales: Decimal
    zero_rated_sales: Decimal
    exempt_sales: Decimal
    output_vat: Decimal
    input_vat: Decimal
    vat_payable: Decimal

    @property
    def total_sales(self) -> Decimal:
        return self.vatable_sales + self.zero_rated_sales + self.exempt_sales


@dataclass(frozen=True)
class VatMonthRow:
    month: str
    output_vat: Decimal
    input_vat: Decimal
    net_vat: Decimal
    is_quarter_end: bool
    quarterly_output: Decimal | None = None
    quarterly_input: Decimal | None = None
    quarterly_net: Decimal | None = None


@dataclass(frozen=True)
class SalesBookRow:
    """One vatable receipt as it appears in the sales book."""

    crn: str
    voucher_date: date
    invoice_number: str | None
    invoice_date: date | None
    payor_name: str | None
    payor_tin: str | None
    net_amount: Decimal
    vat_amount: Decimal
    gross_amount: Decimal


@dataclass(frozen=True)
class PurchaseBookRow:
    """One input-VAT disbursement as it appears in the purchase book."""

    cdn: str
    voucher_date: date
    invoice_number: str | None
    invoice_date: date | None
    payee_name: str | None
    payee_tin: str | None
    net_amount: Decimal
    vat_amount: Decimal
    gross_amount: Decimal
