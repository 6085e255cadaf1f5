"""
Tests for the income tax engine.

Covers:
- Regular tax vs MCIT selection, including the tie
- NOLCO deduction and the zero floor on taxable income
- MCIT credits and other credits against tax due
- Centavo rounding of results
- Input validation
"""

from decimal import Decimal

import pytest

from cashbook_engines.income_tax import (
    TaxInputs,
    compute_tax,
    credit_consumption,
    to_centavos,
)

D = Decimal


def _inputs(**overrides) -> TaxInputs:
    values = dict(
        total_revenue=D("100000"),
        total_cost=D("0"),
        total_expenses=D("40000"),
        tax_rate=D("0.25"),
        mcit_rate=D("0.02"),
    )
    values.update(overrides)
    return TaxInputs(**values)


class TestRegularVersusMcit:
    """Tax due is the larger of regular tax and MCIT."""

    def test_regular_tax_scenario(self):
        result = compute_tax(_inputs())

        assert result.gross_income == D("100000.00")
        assert result.taxable_income == D("60000.00")
        assert result.regular_tax == D("15000.00")
        assert result.mcit == D("2000.00")
        assert result.tax_due == D("15000.00")
        assert result.is_mcit_applied is False
        assert result.excess_mcit == D("0.00")
        assert result.final_tax_due == D("15000.00")

    def test_mcit_applies_when_larger(self):
        # Thin margin: 1000 * 25% = 250 regular vs 100000 * 2% = 2000 MCIT
        result = compute_tax(_inputs(total_expenses=D("99000")))
        assert result.regular_tax == D("250.00")
        assert result.is_mcit_applied is True
        assert result.tax_due == D("2000.00")
        assert result.excess_mcit == D("1750.00")

    def test_tie_goes_to_regular_tax(self):
        # taxable 8000 * 25% = 2000 == 100000 * 2%
        result = compute_tax(_inputs(total_expenses=D("92000")))
        assert result.regular_tax == result.mcit == D("2000.00")
        assert result.is_mcit_applied is False
        assert result.tax_due == result.regular_tax
        assert result.excess_mcit == D("0.00")

    def test_gross_income_is_revenue_less_cost(self):
        result = compute_tax(_inputs(total_cost=D("30000"), total_expenses=D("10000")))
        assert result.gross_income == D("70000.00")
        assert result.taxable_income == D("60000.00")
        assert result.mcit == D("1400.00")

    def test_loss_year_has_zero_regular_tax(self):
        result = compute_tax(_inputs(total_expenses=D("150000")))
        assert result.taxable_income == D("0.00")
        assert result.regular_tax == D("0.00")
        assert result.is_mcit_applied is True

    def test_negative_gross_income_gives_negative_mcit_but_zero_due(self):
        result = compute_tax(_inputs(total_revenue=D("1000"), total_cost=D("5000")))
        assert result.mcit == D("-80.00")
        assert result.tax_due == D("0.00")
        assert result.is_mcit_applied is False
        assert result.final_tax_due == D("0.00")


class TestDeductionsAndCredits:
    def test_nolco_reduces_taxable_income(self):
        result = compute_tax(_inputs(available_nolco=D("20000")))
        assert result.taxable_income == D("40000.00")
        assert result.regular_tax == D("10000.00")
        assert result.available_nolco == D("20000.00")

    def test_nolco_cannot_push_taxable_income_below_zero(self):
        result = compute_tax(_inputs(available_nolco=D("500000")))
        assert result.taxable_income == D("0.00")

    def test_credits_reduce_final_tax_due(self):
        result = compute_tax(
            _inputs(available_mcit_credits=D("3000"), other_credits=D("2000"))
        )
        assert result.total_credits == D("5000.00")
        assert result.tax_due == D("15000.00")
        assert result.final_tax_due == D("10000.00")

    def test_final_tax_due_floors_at_zero(self):
        result = compute_tax(_inputs(other_credits=D("99999")))
        assert result.final_tax_due == D("0.00")


class TestRounding:
    def test_results_are_in_centavos(self):
        result = compute_tax(
            _inputs(total_revenue=D("1000.005"), total_expenses=D("0"), tax_rate=D("0.3"))
        )
        assert result.gross_income == D("1000.01")
        assert result.regular_tax == D("300.00")
        assert result.mcit.as_tuple().exponent == -2

    def test_to_centavos_rounds_half_up(self):
        assert to_centavos(D("0.125")) == D("0.13")
        assert to_centavos(D("-0.125")) == D("-0.13")


class TestValidation:
    @pytest.mark.parametrize("field", ["tax_rate", "mcit_rate"])
    def test_negative_rate_rejected(self, field):
        with pytest.raises(ValueError, match="negative"):
            _inputs(**{field: D("-0.01")})

    def test_percentage_passed_as_rate_rejected(self):
        with pytest.raises(ValueError, match="fractions"):
            _inputs(tax_rate=D("25"))

    @pytest.mark.parametrize("field", ["available_nolco", "available_mcit_credits", "other_credits"])
    def test_negative_credit_rejected(self, field):
        with pytest.raises(ValueError, match=field):
            _inputs(**{field: D("-1")})


class TestPurity:
    def test_identical_inputs_give_identical_results(self):
        inputs = _inputs(available_nolco=D("1234.56"), available_mcit_credits=D("78.9"))
        assert compute_tax(inputs) == compute_tax(inputs)

    def test_logs_start_and_completion(self, captured_logs):
        compute_tax(_inputs())
        messages = [r["message"] for r in captured_logs()]
        assert "tax_calculation_started" in messages
        assert "tax_calculation_completed" in messages


class TestCreditConsumption:
    def test_nolco_used_limited_to_income_before_nolco(self):
        calc = compute_tax(_inputs(available_nolco=D("80000")))
        used = credit_consumption(calc)
        assert used.nolco_used == D("60000.00")

    def test_mcit_credit_used_limited_to_tax_due(self):
        calc = compute_tax(_inputs(available_mcit_credits=D("20000")))
        used = credit_consumption(calc)
        assert used.mcit_credit_used == D("15000.00")
