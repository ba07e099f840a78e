"""Tests for declaration rounding."""

from decimal import Decimal

import pytest

from domain.models import Nutrient, NutrientValues
from domain.services.rounding import (
    apply_zero_rule,
    declare,
    format_display_value,
    round_value,
    round_values,
)


class TestZeroRule:
    """Test apply_zero_rule."""

    @pytest.mark.parametrize(
        "nutrient, value",
        [
            (Nutrient.ENERGY_KCAL, Decimal("4")),
            (Nutrient.CARBOHYDRATES, Decimal("0.5")),
            (Nutrient.PROTEINS, Decimal("0.49")),
            (Nutrient.SATURATED_FAT, Decimal("0.2")),
            (Nutrient.TRANS_FAT, Decimal("0.1")),
            (Nutrient.SODIUM, Decimal("5")),
        ],
    )
    def test_values_at_or_below_limit_become_zero(
        self,
        nutrient: Nutrient,
        value: Decimal,
    ) -> None:
        assert apply_zero_rule(value, nutrient) == Decimal("0")

    @pytest.mark.parametrize(
        "nutrient, value",
        [
            (Nutrient.ENERGY_KCAL, Decimal("4.01")),
            (Nutrient.SATURATED_FAT, Decimal("0.21")),
            (Nutrient.SODIUM, Decimal("5.1")),
        ],
    )
    def test_values_above_limit_pass(self, nutrient: Nutrient, value: Decimal) -> None:
        assert apply_zero_rule(value, nutrient) == value

    @pytest.mark.parametrize(
        "nutrient",
        [Nutrient.TOTAL_SUGARS, Nutrient.ADDED_SUGARS, Nutrient.ENERGY_KJ],
    )
    def test_nutrients_without_limit_pass_through(self, nutrient: Nutrient) -> None:
        assert apply_zero_rule(Decimal("0.1"), nutrient) == Decimal("0.1")

    def test_is_idempotent(self) -> None:
        once = apply_zero_rule(Decimal("0.15"), Nutrient.SATURATED_FAT)

        assert apply_zero_rule(once, Nutrient.SATURATED_FAT) == once


class TestRoundValue:
    """Test magnitude-tiered rounding."""

    @pytest.mark.parametrize(
        "value, unit, expected",
        [
            (Decimal("285.4"), "kcal", "285"),
            (Decimal("12.5"), "g", "13"),
            (Decimal("10"), "g", "10"),
            (Decimal("3.45"), "g", "3.5"),
            (Decimal("3.04"), "g", "3"),
            (Decimal("9.96"), "g", "10"),
            (Decimal("0.44"), "g", "0.4"),
            (Decimal("0.45"), "g", "0.5"),
            (Decimal("0.456"), "mg", "0.46"),
            (Decimal("0.404"), "mg", "0.4"),
            (Decimal("0.999"), "kcal", "1"),
            (Decimal("0"), "g", "0"),
        ],
    )
    def test_tiers(self, value: Decimal, unit: str, expected: str) -> None:
        assert round_value(value, unit) == Decimal(expected)

    def test_whole_results_have_no_fraction(self) -> None:
        assert format(round_value(Decimal("5.02"), "g"), "f") == "5"

    @pytest.mark.parametrize(
        "value, unit",
        [
            (Decimal("123.456"), "mg"),
            (Decimal("7.25"), "g"),
            (Decimal("0.333"), "g"),
            (Decimal("0.127"), "kcal"),
        ],
    )
    def test_is_idempotent(self, value: Decimal, unit: str) -> None:
        once = round_value(value, unit)

        assert round_value(once, unit) == once


class TestDisplay:
    """Test display strings."""

    def test_zero_renders_without_decimals(self) -> None:
        assert format_display_value(Decimal("0.00"), "g") == "0"

    def test_display_is_stable_on_second_pass(self) -> None:
        for value in (Decimal("0.456"), Decimal("3.45"), Decimal("12.5"), Decimal("1.0")):
            first = format_display_value(value, "mg")
            assert format_display_value(Decimal(first), "mg") == first

    def test_insignificant_saturated_fat_displays_zero(self) -> None:
        declared = declare(Decimal("0.15"), Nutrient.SATURATED_FAT)

        assert declared == Decimal("0")
        assert format_display_value(declared, "g") == "0"


class TestRoundValues:
    """Test round_values for a full basis."""

    def test_kj_follows_declared_kcal(self) -> None:
        values = NutrientValues(
            energy_kcal=Decimal("128.6"),
            energy_kj=Decimal("540.12"),
        )

        declared, display = round_values(values)

        assert declared.energy_kcal == Decimal("129")
        # 129 * 4.2 = 541.8
        assert declared.energy_kj == Decimal("542")
        assert display["energy_kj"] == "542"

    def test_display_has_every_nutrient(self) -> None:
        _, display = round_values(NutrientValues())

        assert set(display) == {n.value for n in Nutrient}
        assert all(text == "0" for text in display.values())

    def test_rounding_twice_changes_nothing(self) -> None:
        values = NutrientValues(
            energy_kcal=Decimal("57.3"),
            carbohydrates=Decimal("9.87"),
            proteins=Decimal("0.44"),
            total_fat=Decimal("1.96"),
            saturated_fat=Decimal("0.18"),
            sodium=Decimal("87.5"),
            total_sugars=Decimal("0.3"),
        )

        once, display_once = round_values(values)
        twice, display_twice = round_values(once)

        assert once == twice
        assert display_once == display_twice
