"""
Property-based tests for the statement, tax and carryforward invariants.

Hypothesis generates whole years of vouchers and credit ledgers and checks
the laws every report relies on:

- P&L columns are additive: quarter = its three months, annual = all twelve
- Balance sheet columns are snapshots: quarter = its last month, annual = December
- Strict balancing always balances when retained earnings resolves
- P&L totals equal the classified postings, fallbacks included
- Regular tax wins ties with MCIT; tax due is never negative
- Credit application is all-or-nothing, oldest first, and never touches
  expired entries
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from cashbook_engines.carryforward import (
    apply_carryforward,
    available_total,
    is_available,
    new_mcit_credit,
    new_nolco_entry,
)
from cashbook_engines.classification import (
    AccountChart,
    AccountCodes,
    classify_vouchers,
    resolve_accounts,
)
from cashbook_engines.income_tax import TaxInputs, compute_tax
from cashbook_kernel.domain.dtos import (
    AccountInfo,
    AccountType,
    ReportCategory,
    Voucher,
    VoucherKind,
    VoucherLine,
)
from cashbook_modules.reporting.statements import build_balance_sheet, build_profit_loss
from cashbook_modules.vat.books import build_vat_totals

D = Decimal
YEAR = 2024
COMPANY_ID = uuid4()


def _account(code: str, account_type: AccountType) -> AccountInfo:
    category = ReportCategory.PROFIT_LOSS if account_type.is_profit_loss else ReportCategory.BALANCE_SHEET
    return AccountInfo(uuid4(), code, f"Account {code}", account_type, category)


CASH = _account("1010", AccountType.ASSET)
LINE_ACCOUNTS = (
    _account("1100", AccountType.ASSET),
    _account("1500", AccountType.ASSET),
    _account("2400", AccountType.LIABILITY),
    _account("3000", AccountType.EQUITY),
    _account("4000", AccountType.REVENUE),
    _account("4100", AccountType.REVENUE),
    _account("5100", AccountType.COST),
    _account("6100", AccountType.EXPENSE),
    _account("6900", AccountType.EXPENSE),
)
RETAINED = _account("3200", AccountType.EQUITY)
CHART = AccountChart.from_accounts((CASH, RETAINED) + LINE_ACCOUNTS)
RESOLVED = resolve_accounts(CHART, AccountCodes())

amounts = st.decimals(
    min_value=D("0.01"), max_value=D("1000000"), places=2, allow_nan=False, allow_infinity=False,
)


@st.composite
def vouchers(draw):
    lines = draw(st.lists(st.tuples(st.sampled_from(LINE_ACCOUNTS), amounts), max_size=4))
    vatable = draw(st.booleans())
    return Voucher(
        voucher_id=uuid4(),
        company_id=COMPANY_ID,
        kind=draw(st.sampled_from(list(VoucherKind))),
        number=f"V-{draw(st.integers(min_value=1, max_value=999999)):06d}",
        voucher_date=draw(st.dates(min_value=date(YEAR, 1, 1), max_value=date(YEAR, 12, 31))),
        total_amount=draw(amounts),
        lines=tuple(VoucherLine(account.account_id, amount) for account, amount in lines),
        net_amount=draw(st.none() | amounts),
        is_vatable=vatable,
        has_input_vat=vatable,
        vat_amount=draw(amounts) if vatable else D("0"),
    )


ledgers = st.lists(vouchers(), max_size=25)

PROPERTY_SETTINGS = settings(max_examples=100, suppress_health_check=[HealthCheck.too_slow], deadline=None)


class TestStatementLaws:
    @given(ledger=ledgers)
    @PROPERTY_SETTINGS
    def test_profit_loss_columns_are_additive(self, ledger):
        rows = build_profit_loss(classify_vouchers(ledger, CHART, RESOLVED), YEAR)
        for row in rows:
            months = row.months
            for q in range(4):
                assert row.quarters[q] == sum(months[q * 3:q * 3 + 3])
            assert row.annual == sum(row.quarters) == sum(months)

    @given(ledger=ledgers)
    @PROPERTY_SETTINGS
    def test_profit_loss_equals_classified_postings(self, ledger):
        classified = classify_vouchers(ledger, CHART, RESOLVED)
        rows = build_profit_loss(classified, YEAR)
        by_type = {t: D("0") for t in AccountType}
        for row in rows:
            by_type[row.account_type] += row.annual
        receipts = sum((cv.pl_total for cv in classified if cv.voucher.is_receipt), D("0"))
        spending = sum((cv.pl_total for cv in classified if not cv.voucher.is_receipt), D("0"))
        assert by_type[AccountType.REVENUE] == receipts
        assert by_type[AccountType.COST] + by_type[AccountType.EXPENSE] == spending

    @given(ledger=ledgers, strict=st.booleans())
    @PROPERTY_SETTINGS
    def test_balance_sheet_columns_are_snapshots(self, ledger, strict):
        result = build_balance_sheet(
            classify_vouchers(ledger, CHART, RESOLVED), CHART, RESOLVED, YEAR, strict_balancing=strict,
        )
        for row in result.rows:
            months = row.months
            assert row.quarters == (months[2], months[5], months[8], months[11])
            assert row.annual == months[11]

    @given(ledger=ledgers)
    @PROPERTY_SETTINGS
    def test_strict_balancing_always_balances(self, ledger):
        result = build_balance_sheet(
            classify_vouchers(ledger, CHART, RESOLVED), CHART, RESOLVED, YEAR, strict_balancing=True,
        )
        assert result.is_balanced, result.imbalance

    @given(ledger=ledgers)
    @PROPERTY_SETTINGS
    def test_order_of_input_does_not_matter(self, ledger):
        forward = build_profit_loss(classify_vouchers(ledger, CHART, RESOLVED), YEAR)
        backward = build_profit_loss(classify_vouchers(list(reversed(ledger)), CHART, RESOLVED), YEAR)
        assert forward == backward

    @given(ledger=ledgers)
    @PROPERTY_SETTINGS
    def test_vat_quarters_sum_their_months(self, ledger):
        rows = build_vat_totals(ledger, YEAR)
        for q in range(4):
            quarter_end = rows[q * 3 + 2]
            assert quarter_end.quarterly_net == sum(r.net_vat for r in rows[q * 3:q * 3 + 3])


rates = st.decimals(min_value=D("0"), max_value=D("0.5"), places=3, allow_nan=False, allow_infinity=False)


class TestTaxLaws:
    @given(revenue=amounts, cost=amounts, expenses=amounts, tax_rate=rates, mcit_rate=rates)
    @PROPERTY_SETTINGS
    def test_tax_due_is_larger_of_regular_and_mcit(self, revenue, cost, expenses, tax_rate, mcit_rate):
        calc = compute_tax(TaxInputs(revenue, cost, expenses, tax_rate, mcit_rate))

        assert calc.taxable_income >= 0
        assert calc.tax_due >= 0
        # the comparison runs before rounding, so rounded figures may tie
        if calc.is_mcit_applied:
            assert calc.mcit >= calc.regular_tax
            assert calc.tax_due == calc.mcit
            assert abs(calc.excess_mcit - (calc.mcit - calc.regular_tax)) <= D("0.01")
        else:
            assert calc.mcit <= calc.regular_tax
            assert calc.tax_due == calc.regular_tax
            assert calc.excess_mcit == 0

    @given(revenue=amounts, expenses=amounts, credits=amounts)
    @PROPERTY_SETTINGS
    def test_final_tax_due_never_negative(self, revenue, expenses, credits):
        calc = compute_tax(
            TaxInputs(revenue, D("0"), expenses, D("0.25"), D("0.02"), available_mcit_credits=credits)
        )
        assert calc.final_tax_due >= 0
        assert calc.final_tax_due <= calc.tax_due


@st.composite
def credit_ledgers(draw):
    years = draw(st.lists(st.integers(min_value=2015, max_value=2024), min_size=1, max_size=6, unique=True))
    factory = draw(st.sampled_from([new_nolco_entry, new_mcit_credit]))
    return [factory(year, draw(amounts)) for year in years]


class TestCarryforwardLaws:
    @given(entries=credit_ledgers(), target_year=st.integers(min_value=2016, max_value=2028), data=st.data())
    @PROPERTY_SETTINGS
    def test_application_conserves_balances(self, entries, target_year, data):
        available = available_total(entries, target_year)
        amount = data.draw(st.decimals(min_value=D("0"), max_value=available, places=2))

        result = apply_carryforward(entries, amount, target_year)

        assert result.applied == amount
        assert sum(a.amount for a in result.allocations) == amount
        assert available_total(result.entries, target_year) == available - amount
        for before, after in zip(entries, result.entries):
            assert after.remaining_amount == after.original_amount - after.used_amount
            if not is_available(before, target_year):
                assert after == before

    @given(entries=credit_ledgers(), target_year=st.integers(min_value=2016, max_value=2028), data=st.data())
    @PROPERTY_SETTINGS
    def test_oldest_entries_consumed_first(self, entries, target_year, data):
        available = available_total(entries, target_year)
        amount = data.draw(st.decimals(min_value=D("0"), max_value=available, places=2))

        result = apply_carryforward(entries, amount, target_year)

        years = [a.origin_year for a in result.allocations]
        assert years == sorted(years)
        # every allocation but the last drains its entry
        for allocation in result.allocations[:-1]:
            assert allocation.remaining_after == 0
