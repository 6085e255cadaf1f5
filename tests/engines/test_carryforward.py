"""
Tests for the carryforward engine (NOLCO and excess-MCIT credit ledgers).

Covers:
- Expiry years, including the extended 2020/2021 NOLCO horizon
- Availability for a target year
- Oldest-first consumption without mutating the input
- Rejection of over-application, negative amounts and mixed ledgers
"""

from decimal import Decimal

import pytest

from cashbook_engines.carryforward import (
    apply_carryforward,
    available_entries,
    available_total,
    is_available,
    mcit_expiry_year,
    new_mcit_credit,
    new_nolco_entry,
    nolco_expiry_year,
)
from cashbook_kernel.domain.dtos import CarryforwardEntry, CarryforwardKind
from cashbook_kernel.exceptions import (
    CarryforwardError,
    InsufficientCarryforwardError,
    InvalidCarryforwardAmountError,
)

D = Decimal


class TestExpiry:
    def test_mcit_expires_after_three_years(self):
        assert mcit_expiry_year(2022) == 2025

    def test_regular_nolco_expires_after_three_years(self):
        assert nolco_expiry_year(2019) == 2022
        assert nolco_expiry_year(2022) == 2025

    @pytest.mark.parametrize("year", [2020, 2021])
    def test_pandemic_losses_expire_after_five_years(self, year):
        assert nolco_expiry_year(year) == year + 5

    def test_extended_years_are_configurable(self):
        assert nolco_expiry_year(2020, extended_years=frozenset()) == 2023

    def test_new_entries_are_unused(self):
        entry = new_nolco_entry(2021, D("50000"))
        assert entry.kind == CarryforwardKind.NOLCO
        assert entry.used_amount == D("0")
        assert entry.remaining_amount == D("50000")
        assert entry.expiry_year == 2026

        credit = new_mcit_credit(2023, D("1750"))
        assert credit.kind == CarryforwardKind.MCIT
        assert credit.expiry_year == 2026

    def test_negative_original_amount_rejected(self):
        with pytest.raises(InvalidCarryforwardAmountError):
            new_nolco_entry(2023, D("-1"))
        with pytest.raises(InvalidCarryforwardAmountError):
            new_mcit_credit(2023, D("-1"))


class TestEntryInvariants:
    def test_remaining_must_equal_original_less_used(self):
        with pytest.raises(ValueError, match="remaining"):
            CarryforwardEntry(CarryforwardKind.NOLCO, 2022, D("100"), D("30"), D("80"), 2025)

    def test_used_cannot_exceed_original(self):
        with pytest.raises(ValueError, match="used amount"):
            CarryforwardEntry(CarryforwardKind.MCIT, 2022, D("100"), D("130"), D("-30"), 2025)

    def test_expiry_cannot_precede_origin(self):
        with pytest.raises(ValueError, match="expiry"):
            CarryforwardEntry(CarryforwardKind.MCIT, 2022, D("1"), D("0"), D("1"), 2021)


class TestAvailability:
    """Available while expiry_year >= target year and something remains."""

    def test_expired_entry_excluded_even_with_balance(self):
        entry = new_nolco_entry(2019, D("10000"))  # expires 2022
        assert is_available(entry, 2022)
        assert not is_available(entry, 2023)
        assert available_total([entry], 2023) == D("0")

    def test_fully_used_entry_excluded(self):
        entry = CarryforwardEntry(CarryforwardKind.NOLCO, 2022, D("100"), D("100"), D("0"), 2025)
        assert not is_available(entry, 2023)

    def test_total_sums_remaining_of_available(self):
        entries = [
            new_nolco_entry(2019, D("1000")),  # expired for 2024
            new_nolco_entry(2021, D("2000")),  # 2026
            CarryforwardEntry(CarryforwardKind.NOLCO, 2022, D("500"), D("200"), D("300"), 2025),
        ]
        assert available_total(entries, 2024) == D("2300")

    def test_available_entries_oldest_first(self):
        entries = [new_mcit_credit(2023, D("1")), new_mcit_credit(2021, D("1")), new_mcit_credit(2022, D("1"))]
        assert [e.origin_year for e in available_entries(entries, 2024)] == [2021, 2022, 2023]


class TestApplyCarryforward:
    """Explicit consumption: oldest first, new entries returned, input untouched."""

    def test_consumes_oldest_first(self):
        older = new_mcit_credit(2021, D("1000"))
        newer = new_mcit_credit(2022, D("1000"))
        result = apply_carryforward([newer, older], D("1500"), 2024)

        assert result.kind == CarryforwardKind.MCIT
        assert result.applied == D("1500")
        assert [(a.origin_year, a.amount) for a in result.allocations] == [
            (2021, D("1000")),
            (2022, D("500")),
        ]
        by_year = {e.origin_year: e for e in result.entries}
        assert by_year[2021].remaining_amount == D("0")
        assert by_year[2022].used_amount == D("500")
        assert by_year[2022].remaining_amount == D("500")

    def test_input_entries_are_not_mutated(self):
        entry = new_nolco_entry(2022, D("800"))
        apply_carryforward([entry], D("800"), 2023)
        assert entry.remaining_amount == D("800")

    def test_entries_keep_input_order(self):
        entries = [new_mcit_credit(2022, D("5")), new_mcit_credit(2021, D("5"))]
        result = apply_carryforward(entries, D("1"), 2023)
        assert [e.origin_year for e in result.entries] == [2022, 2021]
        assert [e.origin_year for e in result.changed] == [2021]

    def test_expired_entries_are_skipped(self):
        expired = new_nolco_entry(2019, D("10000"))
        live = new_nolco_entry(2022, D("100"))
        result = apply_carryforward([expired, live], D("100"), 2024)
        assert [a.origin_year for a in result.allocations] == [2022]

    def test_over_application_rejected(self):
        entries = [new_nolco_entry(2022, D("100"))]
        with pytest.raises(InsufficientCarryforwardError) as exc_info:
            apply_carryforward(entries, D("100.01"), 2023)
        assert exc_info.value.available == "100"
        assert exc_info.value.target_year == 2023

    def test_negative_amount_rejected(self):
        with pytest.raises(InvalidCarryforwardAmountError):
            apply_carryforward([new_nolco_entry(2022, D("1"))], D("-1"), 2023)

    def test_zero_amount_changes_nothing(self):
        result = apply_carryforward([new_nolco_entry(2022, D("1"))], D("0"), 2023)
        assert result.allocations == ()
        assert result.changed == ()

    def test_mixed_ledgers_rejected(self):
        with pytest.raises(ValueError, match="NOLCO and MCIT"):
            apply_carryforward(
                [new_nolco_entry(2022, D("1")), new_mcit_credit(2022, D("1"))],
                D("1"),
                2023,
            )

    def test_kind_must_match_entries(self):
        with pytest.raises(ValueError):
            apply_carryforward([new_nolco_entry(2022, D("1"))], D("1"), 2023, kind=CarryforwardKind.MCIT)

    def test_empty_ledger_with_kind(self):
        with pytest.raises(InsufficientCarryforwardError) as exc_info:
            apply_carryforward([], D("1"), 2023, kind=CarryforwardKind.MCIT)
        assert exc_info.value.kind == "mcit"

    def test_errors_share_base_class(self):
        with pytest.raises(CarryforwardError):
            apply_carryforward([], D("1"), 2023)
