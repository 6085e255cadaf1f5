"""
Pure VAT book functions.

ZERO I/O.  Receipts are partitioned by their receipt-level flags
(vatable wins over zero-rated; anything else is exempt), disbursements by
``has_input_vat``.  There is no VAT split across the lines of one voucher.

Monthly totals use the same bucketing as the statements: a quarter is the
sum of its three months, never a separate query.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from cashbook_engines.bucketing import (
    MONTH_NAMES,
    MonthlyBuckets,
    is_quarter_end,
    quarter_of,
    quarter_sum,
)
from cashbook_kernel.domain.dtos import Voucher
from cashbook_modules.vat.models import (
    PurchaseBookRow,
    SalesBookRow,
    VatMonthRow,
    VatSummary,
)

ZERO = Decimal("0")

_OUTPUT = "output"
_INPUT = "input"


def is_output_vat_receipt(voucher: Voucher) -> bool:
    return voucher.is_receipt and voucher.is_vatable


def is_input_vat_disbursement(voucher: Voucher) -> bool:
    return not voucher.is_receipt and voucher.has_input_vat


def build_vat_summary(
    receipts: Iterable[Voucher],
    disbursements: Iterable[Voucher],
) -> VatSummary:
    """
    Vatable / zero-rated / exempt sales, output and input VAT, VAT payable.

    Vatable and zero-rated receipts contribute their net amount (a missing
    net counts as zero); exempt receipts contribute their cash total.
    """
    vatable = zero_rated = exempt = output_vat = ZERO
    for r in receipts:
        if r.is_vatable:
            vatable += r.net_amount or ZERO
            output_vat += r.vat_amount
        elif r.is_zero_rated:
            zero_rated += r.net_amount or ZERO
        else:
            exempt += r.total_amount

    input_vat = sum(
        (d.vat_amount for d in disbursements if d.has_input_vat),
        ZERO,
    )
    return VatSummary(
        vatable_sales=vatable,
        zero_rated_sales=zero_rated,
        exempt_sales=exempt,
        output_vat=output_vat,
        input_vat=input_vat,
        vat_payable=output_vat - input_vat,
    )


def build_vat_totals(vouchers: Iterable[Voucher], year: int) -> tuple[VatMonthRow, ...]:
    """Twelve monthly output / input / net VAT rows; quarter sums on quarter-end months."""
    buckets = MonthlyBuckets(year)
    for v in vouchers:
        if is_output_vat_receipt(v):
            buckets.add(_OUTPUT, v.voucher_date, v.vat_amount)
        elif is_input_vat_disbursement(v):
            buckets.add(_INPUT, v.voucher_date, v.vat_amount)

    output = buckets.months(_OUTPUT)
    input_ = buckets.months(_INPUT)
    rows: list[VatMonthRow] = []
    for i in range(12):
        month = i + 1
        if is_quarter_end(month):
            q = quarter_of(month)
            q_out = quarter_sum(output, q)
            q_in = quarter_sum(input_, q)
            rows.append(
                VatMonthRow(
                    month=MONTH_NAMES[i],
                    output_vat=output[i],
                    input_vat=input_[i],
                    net_vat=output[i] - input_[i],
                    is_quarter_end=True,
                    quarterly_output=q_out,
                    quarterly_input=q_in,
                    quarterly_net=q_out - q_in,
                )
            )
        else:
            rows.append(
                VatMonthRow(
                    month=MONTH_NAMES[i],
                    output_vat=output[i],
                    input_vat=input_[i],
                    net_vat=output[i] - input_[i],
                    is_quarter_end=False,
                )
            )
    return tuple(rows)


def build_sales_book(receipts: Iterable[Voucher]) -> tuple[SalesBookRow, ...]:
    """Vatable receipts in date order."""
    rows = [
        SalesBookRow(
            crn=r.number,
            voucher_date=r.voucher_date,
            invoice_number=r.invoice_number,
            invoice_date=r.invoice_date,
            payor_name=r.counterparty_name,
            payor_tin=r.counterparty_tin,
            net_amount=r.net_or_total,
            vat_amount=r.vat_amount,
            gross_amount=r.total_amount,
        )
        for r in receipts
        if is_output_vat_receipt(r)
    ]
    return tuple(sorted(rows, key=lambda row: (row.voucher_date, row.crn)))


def build_purchase_book(disbursements: Iterable[Voucher]) -> tuple[PurchaseBookRow, ...]:
    """Input-VAT disbursements in date order."""
    rows = [
        PurchaseBookRow(
            cdn=d.number,
            voucher_date=d.voucher_date,
            invoice_number=d.invoice_number,
            invoice_date=d.invoice_date,
            payee_name=d.counterparty_name,
            payee_tin=d.counterparty_tin,
            net_amount=d.net_or_total,
            vat_amount=d.vat_amount,
            gross_amount=d.total_amount,
        )
        for d in disbursements
        if is_input_vat_disbursement(d)
    ]
    return tuple(sorted(rows, key=lambda row: (row.voucher_date, row.cdn)))
