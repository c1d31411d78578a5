"""Tests for the fixed-point Money type."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from trip_ledger.exceptions import DivisionByZeroError
from trip_ledger.models import LedgerEntry
from trip_ledger.money import Money


class TestMoneyConstruction:
    """Test building Money from external values."""

    def test_from_string_and_decimal_are_equal(self):
        """Equal amounts compare equal regardless of input form."""
        assert Money.of("30") == Money.of("30.00") == Money.of(Decimal("30.0000"))
        assert Money.of(30) == Money.of("30")

    def test_stores_four_decimal_places(self):
        """Amounts are held as integer 1/10_000 units."""
        assert Money.of("12.3456").units == 123456
        assert Money.of("0.01").units == 100

    def test_extra_precision_rounds_half_away_from_zero(self):
        """Digits beyond the stored scale are rounded half away from zero."""
        assert Money.of("12.34565").units == 123457
        assert Money.of("-12.34565").units == -123457
        assert Money.of("12.34564").units == 123456

    def test_rejects_float(self):
        """Floats would reintroduce drift, so they are refused."""
        with pytest.raises(TypeError):
            Money.of(0.1)

    def test_rejects_bool(self):
        with pytest.raises(TypeError):
            Money.of(True)

    def test_rejects_garbage_string(self):
        with pytest.raises(ValueError, match="Invalid money amount"):
            Money.of("twelve")

    def test_rejects_non_finite(self):
        with pytest.raises(ValueError, match="finite"):
            Money.of("NaN")
        with pytest.raises(ValueError, match="finite"):
            Money.of("Infinity")

    def test_from_units_and_zero(self):
        assert Money.from_units(250) == Money.of("0.025")
        assert Money.zero().is_zero()


class TestMoneyArithmetic:
    """Test exact arithmetic and comparisons."""

    def test_add_and_subtract_are_exact(self):
        """0.1 + 0.2 is exactly 0.3, unlike floats."""
        total = Money.of("0.1") + Money.of("0.2")
        assert total == Money.of("0.3")
        assert total.subtract(Money.of("0.3")).is_zero()
        assert Money.of("1").add(Money.of("2")) == Money.of("3")

    def test_repeated_accumulation_has_no_drift(self):
        """A thousand additions of 0.01 give exactly 10.00."""
        total = Money.zero()
        for _ in range(1000):
            total += Money.of("0.01")
        assert total == Money.of("10.00")

    def test_negation_and_abs(self):
        assert -Money.of("5") == Money.of("-5")
        assert abs(Money.of("-5")) == Money.of("5")

    def test_comparisons_are_exact(self):
        """No epsilon is applied inside Money."""
        assert Money.from_units(1) > Money.zero()
        assert Money.of("10").greater_than(Money.of("9.9999"))
        assert Money.of("-0.0001").less_than(Money.zero())
        assert not Money.of("5").less_than(Money.of("5"))

    def test_adding_non_money_is_a_type_error(self):
        with pytest.raises(TypeError):
            Money.of("1") + 1  # type: ignore[operator]

    def test_sum_with_zero_start(self):
        values = [Money.of("1.10"), Money.of("2.20"), Money.of("3.30")]
        assert sum(values, Money.zero()) == Money.of("6.60")


class TestMoneyDivide:
    """Test division by participant counts."""

    def test_exact_division(self):
        assert Money.of("30.00").divide(3) == Money.of("10.00")

    def test_division_rounds_to_stored_scale(self):
        """100 / 3 keeps four places."""
        assert Money.of("100").divide(3) == Money.of("33.3333")
        assert Money.of("2").divide(3) == Money.of("0.6667")

    def test_half_rounds_away_from_zero(self):
        assert Money.from_units(5).divide(2) == Money.from_units(3)
        assert Money.from_units(-5).divide(2) == Money.from_units(-3)

    def test_divide_by_zero_raises(self):
        """Dividing by zero is a caller error."""
        with pytest.raises(DivisionByZeroError):
            Money.of("10").divide(0)

    def test_divide_by_zero_is_also_zero_division_error(self):
        with pytest.raises(ZeroDivisionError):
            Money.of("10").divide(0)

    def test_negative_divisor_rejected(self):
        with pytest.raises(ValueError, match="positive"):
            Money.of("10").divide(-2)


class TestMoneyAllocate:
    """Test remainder-preserving allocation."""

    def test_remainder_goes_to_first_parts(self):
        """10.00 / 3 -> 3.34, 3.33, 3.33."""
        parts = Money.of("10.00").allocate(3)
        assert parts == [Money.of("3.34"), Money.of("3.33"), Money.of("3.33")]

    def test_parts_always_sum_to_total(self):
        for amount in ["100", "0.01", "0.05", "161.88", "999.99", "7"]:
            for count in range(1, 8):
                parts = Money.of(amount).allocate(count)
                assert sum(parts, Money.zero()) == Money.of(amount)

    def test_sub_minor_leftover_goes_to_first_part(self):
        parts = Money.of("10.0001").allocate(3)
        assert parts[0] == Money.of("3.3401")
        assert sum(parts, Money.zero()) == Money.of("10.0001")

    def test_more_parts_than_cents(self):
        """0.02 over 3 people: 0.01, 0.01, 0.00."""
        parts = Money.of("0.02").allocate(3)
        assert parts == [Money.of("0.01"), Money.of("0.01"), Money.zero()]

    def test_negative_amount(self):
        parts = Money.of("-10").allocate(3)
        assert parts == [Money.of("-3.34"), Money.of("-3.33"), Money.of("-3.33")]

    def test_whole_unit_places(self):
        parts = Money.of("10").allocate(3, places=0)
        assert parts == [Money.of("4"), Money.of("3"), Money.of("3")]

    def test_invalid_count(self):
        with pytest.raises(ValueError, match="positive"):
            Money.of("10").allocate(0)

    def test_invalid_places(self):
        with pytest.raises(ValueError, match="places"):
            Money.of("10").allocate(2, places=5)


class TestMoneyRoundingAndDisplay:
    """Test rounding to minor units and display conversions."""

    def test_round_half_away_from_zero(self):
        assert Money.of("0.005").round() == Money.of("0.01")
        assert Money.of("-0.005").round() == Money.of("-0.01")
        assert Money.of("0.0049").round() == Money.zero()
        assert Money.of("33.3333").round() == Money.of("33.33")

    def test_str_shows_minor_units(self):
        assert str(Money.of("1234.5")) == "1234.50"
        assert str(Money.of("0.005")) == "0.01"
        assert str(Money.of("-3")) == "-3.00"

    def test_repr_shows_full_precision(self):
        assert repr(Money.of("90")) == "Money('90.0000')"

    def test_to_decimal_is_exact(self):
        assert Money.of("12.3456").to_decimal() == Decimal("12.3456")

    def test_to_float_for_display(self):
        assert Money.of("12.5").to_float() == 12.5

    def test_hashable(self):
        assert len({Money.of("1"), Money.of("1.00"), Money.of("2")}) == 2


class TestMoneyPydantic:
    """Test Money as a pydantic field type."""

    def make_entry(self, cost):
        return LedgerEntry(id="e1", cost=cost, payer_id="a", created_by="a")

    def test_accepts_strings_ints_and_money(self):
        assert self.make_entry("90.00").cost == Money.of("90")
        assert self.make_entry(90).cost == Money.of("90")
        assert self.make_entry(Money.of("90")).cost == Money.of("90")

    def test_json_number_goes_through_its_repr(self):
        """0.1 from JSON becomes exactly 0.1."""
        entry = LedgerEntry.model_validate_json(
            '{"id": "e1", "cost": 0.1, "payer_id": "a", "created_by": "a"}'
        )
        assert entry.cost == Money.of("0.1")

    def test_invalid_value_is_validation_error(self):
        with pytest.raises(ValidationError):
            self.make_entry("lots")
        with pytest.raises(ValidationError):
            self.make_entry([1, 2])

    def test_serializes_as_exact_string(self):
        data = self.make_entry("12.5").model_dump(mode="json")
        assert data["cost"] == "12.5000"
