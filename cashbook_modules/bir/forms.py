"""
BIR form registry.

Each supported Bureau of Internal Revenue form is described once: its
number and name, filing frequency and deadline, the data fields a filer
needs, and the data shape the extractor produces for it.  Several forms
share a shape (the three 1601 returns all read the withholding summary).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from cashbook_kernel.exceptions import UnknownFormCodeError


class FilingFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


class ReportShape(str, Enum):
    """Data shapes the extractor knows how to build."""

    WITHHOLDING_WITH_PAYROLL = "withholding_with_payroll"
    WITHHOLDING_SUMMARY = "withholding_summary"
    VAT_SUMMARY = "vat_summary"
    SALES_LIST = "sales_list"
    PURCHASES_LIST = "purchases_list"
    WITHHOLDING_CREDITS = "withholding_credits"
    PERCENTAGE_TAX = "percentage_tax"
    INCOME_SUMMARY = "income_summary"
    ALPHALIST = "alphalist"
    SUPPLIER_PAYMENTS = "supplier_payments"
    BOOKS_OF_ACCOUNTS = "books_of_accounts"


@dataclass(frozen=True)
class BirFormDefinition:
    form_number: str
    form_name: str
    description: str
    frequency: FilingFrequency
    deadline: str
    data_fields: tuple[str, ...]
    shape: ReportShape


_FORMS: tuple[BirFormDefinition, ...] = (
    # Monthly withholding tax returns
    BirFormDefinition(
        "1601-C",
        "Monthly Remittance Return of Income Taxes Withheld on Compensation",
        "Withholding tax on employee salaries",
        FilingFrequency.MONTHLY,
        "10th of following month",
        ("employee_count", "gross_compensation", "taxable_compensation", "withholding_tax"),
        ReportShape.WITHHOLDING_WITH_PAYROLL,
    ),
    BirFormDefinition(
        "1601-E",
        "Monthly Remittance Return of Creditable Income Taxes Withheld (Expanded)",
        "Expanded withholding tax on payments to suppliers",
        FilingFrequency.MONTHLY,
        "10th of following month",
        ("payee_list", "payments_to_suppliers", "expanded_withholding_tax"),
        ReportShape.WITHHOLDING_WITH_PAYROLL,
    ),
    BirFormDefinition(
        "1601-F",
        "Monthly Remittance Return of Final Income Taxes Withheld",
        "Final withholding tax on passive income",
        FilingFrequency.MONTHLY,
        "10th of following month",
        ("interest_payments", "dividend_payments", "final_withholding_tax"),
        ReportShape.WITHHOLDING_WITH_PAYROLL,
    ),
    # Quarterly VAT and tax returns
    BirFormDefinition(
        "2550-Q",
        "Quarterly VAT Return",
        "Quarterly Value Added Tax return for VAT-registered taxpayers",
        FilingFrequency.QUARTERLY,
        "25th after quarter end",
        ("vatable_sales", "zero_rated_sales", "exempt_sales", "output_vat", "input_vat", "vat_payable"),
        ReportShape.VAT_SUMMARY,
    ),
    BirFormDefinition(
        "SLS",
        "Summary List of Sales",
        "Detailed list of all VAT sales transactions (attachment to 2550-Q)",
        FilingFrequency.QUARTERLY,
        "25th after quarter end",
        ("customer_tin", "customer_name", "sales_amount", "output_vat"),
        ReportShape.SALES_LIST,
    ),
    BirFormDefinition(
        "SLP",
        "Summary List of Purchases",
        "Detailed list of all VAT purchase transactions (attachment to 2550-Q)",
        FilingFrequency.QUARTERLY,
        "25th after quarter end",
        ("supplier_tin", "supplier_name", "purchase_amount", "input_vat"),
        ReportShape.PURCHASES_LIST,
    ),
    BirFormDefinition(
        "2307-Summary",
        "Summary of Creditable Withholding Tax (Form 2307)",
        "Creditable withholding taxes from customers, for tax credit claims",
        FilingFrequency.QUARTERLY,
        "With ITR filing",
        ("withholding_agent_tin", "withholding_agent_name", "income_payment", "tax_withheld", "period"),
        ReportShape.WITHHOLDING_CREDITS,
    ),
    BirFormDefinition(
        "1702-Q",
        "Quarterly Income Tax Return",
        "Corporate quarterly income tax",
        FilingFrequency.QUARTERLY,
        "60 days after quarter end",
        ("gross_income", "deductions", "taxable_income", "income_tax_due"),
        ReportShape.INCOME_SUMMARY,
    ),
    BirFormDefinition(
        "2551-Q",
        "Quarterly Percentage Tax Return",
        "For non-VAT registered businesses (3% percentage tax)",
        FilingFrequency.QUARTERLY,
        "25th after quarter end",
        ("gross_receipts", "percentage_tax_rate", "percentage_tax_due"),
        ReportShape.PERCENTAGE_TAX,
    ),
    BirFormDefinition(
        "1602-Q",
        "Quarterly Remittance Return of Final Income Taxes Withheld on Interest",
        "Final tax on interest paid on deposits",
        FilingFrequency.QUARTERLY,
        "Last day of following month",
        ("interest_paid", "final_tax_withheld"),
        ReportShape.WITHHOLDING_SUMMARY,
    ),
    BirFormDefinition(
        "1603-Q",
        "Quarterly Remittance Return of Final Income Taxes Withheld on Fringe Benefits",
        "Fringe benefit tax for managerial employees",
        FilingFrequency.QUARTERLY,
        "Last day of following month",
        ("fringe_benefits_value", "fringe_benefit_tax"),
        ReportShape.WITHHOLDING_SUMMARY,
    ),
    # Annual returns
    BirFormDefinition(
        "1702-RT",
        "Annual Income Tax Return (Regular)",
        "Annual corporate income tax return",
        FilingFrequency.ANNUAL,
        "April 15",
        ("annual_gross_income", "annual_deductions", "taxable_income", "income_tax_due", "tax_credits"),
        ReportShape.INCOME_SUMMARY,
    ),
    BirFormDefinition(
        "1604-C",
        "Annual Information Return of Income Taxes Withheld on Compensation",
        "Alphalist of employees with taxes withheld",
        FilingFrequency.ANNUAL,
        "January 31",
        ("employee_alphalist", "total_compensation", "total_tax_withheld"),
        ReportShape.ALPHALIST,
    ),
    BirFormDefinition(
        "1604-F",
        "Annual Information Return of Final Withholding Taxes",
        "Alphalist of payees subjected to final withholding",
        FilingFrequency.ANNUAL,
        "January 31",
        ("payee_alphalist", "total_payments", "total_final_tax"),
        ReportShape.ALPHALIST,
    ),
    BirFormDefinition(
        "1709",
        "Information Return on Related Party Transactions",
        "Transactions with related parties",
        FilingFrequency.ANNUAL,
        "With ITR (April 15)",
        ("related_party_transactions",),
        ReportShape.SUPPLIER_PAYMENTS,
    ),
    BirFormDefinition(
        "BOA",
        "Books of Accounts",
        "Annual registration of books of accounts",
        FilingFrequency.ANNUAL,
        "January 15-30",
        ("journal_entries", "ledger_balances"),
        ReportShape.BOOKS_OF_ACCOUNTS,
    ),
)

BIR_FORMS: dict[str, BirFormDefinition] = {form.form_number: form for form in _FORMS}


def get_form(form_code: str) -> BirFormDefinition:
    """Registry entry for ``form_code``; raises UnknownFormCodeError otherwise."""
    try:
        return BIR_FORMS[form_code]
    except KeyError:
        raise UnknownFormCodeError(form_code) from None


def list_forms(frequency: FilingFrequency | None = None) -> tuple[BirFormDefinition, ...]:
    """Registered forms in registry order, optionally of one frequency."""
    return tuple(f for f in _FORMS if frequency is None or f.frequency == frequency)
