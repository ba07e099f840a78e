"""Tests for NutrientCalculator service."""

from decimal import Decimal

import pytest

from domain.exceptions import InvalidRecipeError
from domain.models import IngredientLine, NutrientValues
from domain.services.nutrient_calculator import NutrientCalculator


@pytest.fixture
def calculator() -> NutrientCalculator:
    """Create a NutrientCalculator instance."""
    return NutrientCalculator()


@pytest.fixture
def flour() -> IngredientLine:
    """250 g of wheat flour."""
    return IngredientLine(
        name="Farinha de trigo",
        quantity_g=Decimal("250"),
        nutrients_per_100g=NutrientValues(
            energy_kcal=Decimal("360"),
            carbohydrates=Decimal("75.1"),
            proteins=Decimal("9.8"),
            total_fat=Decimal("1.4"),
            saturated_fat=Decimal("0.3"),
            fiber=Decimal("2.3"),
            sodium=Decimal("1"),
        ),
    )


@pytest.fixture
def butter() -> IngredientLine:
    """50 g of salted butter."""
    return IngredientLine(
        name="Manteiga com sal",
        quantity_g=Decimal("50"),
        nutrients_per_100g=NutrientValues(
            total_fat=Decimal("82.4"),
            saturated_fat=Decimal("48.0"),
            trans_fat=Decimal("3.2"),
            sodium=Decimal("579"),
            proteins=Decimal("0.4"),
        ),
    )


def _atwater(values: NutrientValues) -> Decimal:
    return values.carbohydrates * 4 + values.proteins * 4 + values.total_fat * 9


class TestComputeTotals:
    """Test compute_totals method."""

    def test_empty_list_gives_zero_totals(self, calculator: NutrientCalculator) -> None:
        totals = calculator.compute_totals([], Decimal("0"))

        assert totals == NutrientValues()

    def test_empty_list_keeps_declared_added_sugars(
        self,
        calculator: NutrientCalculator,
    ) -> None:
        totals = calculator.compute_totals([], Decimal("12"))

        assert totals.added_sugars == Decimal("12")
        assert totals.energy_kcal == Decimal("0")

    def test_contributions_are_scaled_by_quantity(
        self,
        calculator: NutrientCalculator,
        flour: IngredientLine,
        butter: IngredientLine,
    ) -> None:
        totals = calculator.compute_totals([flour, butter], Decimal("0"))

        assert totals.carbohydrates == Decimal("187.75")
        assert totals.total_fat == Decimal("3.5") + Decimal("41.2")
        assert totals.saturated_fat == Decimal("0.75") + Decimal("24")
        assert totals.trans_fat == Decimal("1.6")
        assert totals.sodium == Decimal("2.5") + Decimal("289.5")

    def test_energy_is_derived_not_summed(
        self,
        calculator: NutrientCalculator,
        flour: IngredientLine,
    ) -> None:
        totals = calculator.compute_totals([flour], Decimal("0"))

        # Profile says 360 kcal/100 g; the label uses 4-4-9 instead
        assert totals.energy_kcal == _atwater(totals)
        assert totals.energy_kcal != Decimal("900")

    def test_added_sugars_equal_declared_amount(
        self,
        calculator: NutrientCalculator,
    ) -> None:
        chocolate = IngredientLine(
            name="Achocolatado",
            quantity_g=Decimal("100"),
            nutrients_per_100g=NutrientValues(
                carbohydrates=Decimal("90"),
                added_sugars=Decimal("70"),
            ),
        )

        totals = calculator.compute_totals([chocolate], Decimal("18.3"))

        assert totals.added_sugars == Decimal("18.3")

    def test_missing_nutrients_count_as_zero(self, calculator: NutrientCalculator) -> None:
        water = IngredientLine(name="Água", quantity_g=Decimal("500"))

        totals = calculator.compute_totals([water], Decimal("0"))

        assert totals == NutrientValues()

    def test_scenario_single_ingredient(self, calculator: NutrientCalculator) -> None:
        line = IngredientLine(
            name="Mistura",
            quantity_g=Decimal("100"),
            nutrients_per_100g=NutrientValues(
                carbohydrates=Decimal("50"),
                proteins=Decimal("10"),
                total_fat=Decimal("5"),
            ),
        )

        totals = calculator.compute_totals([line], Decimal("0"))
        per_100 = calculator.per_100g(totals, Decimal("100"))

        assert totals.energy_kcal == Decimal("285")
        assert totals.energy_kj == Decimal("1197")
        assert per_100.carbohydrates == Decimal("50")


class TestCalculateEnergy:
    """Test energy calculation."""

    def test_atwater_factors(self, calculator: NutrientCalculator) -> None:
        values = NutrientValues(
            carbohydrates=Decimal("10"),
            proteins=Decimal("5"),
            total_fat=Decimal("2"),
        )

        kcal, kj = calculator.calculate_energy(values)

        assert kcal == Decimal("78")
        assert kj == Decimal("327.6")

    def test_with_energy_overwrites_stale_energy(self, calculator: NutrientCalculator) -> None:
        values = NutrientValues(energy_kcal=Decimal("999"), proteins=Decimal("1"))

        result = calculator.with_energy(values)

        assert result.energy_kcal == Decimal("4")
        assert result.energy_kj == Decimal("16.8")


class TestPerPortionAndPer100g:
    """Test scaling to declaration bases."""

    def test_energy_invariant_holds_at_every_basis(
        self,
        calculator: NutrientCalculator,
        flour: IngredientLine,
        butter: IngredientLine,
    ) -> None:
        totals = calculator.compute_totals([flour, butter], Decimal("5"))
        portion = calculator.per_portion(totals, 7)
        per_100 = calculator.per_100g(totals, Decimal("270"))

        for values in (totals, portion, per_100):
            assert values.energy_kcal == _atwater(values)
            assert values.energy_kj == values.energy_kcal * Decimal("4.2")

    def test_per_portion_divides_totals(self, calculator: NutrientCalculator) -> None:
        totals = NutrientValues(proteins=Decimal("40"), sodium=Decimal("800"))

        portion = calculator.per_portion(totals, 4)

        assert portion.proteins == Decimal("10")
        assert portion.sodium == Decimal("200")

    def test_per_100g_uses_final_yield(self, calculator: NutrientCalculator) -> None:
        totals = NutrientValues(total_fat=Decimal("30"))

        # 600 g of dough bakes down to 500 g
        per_100 = calculator.per_100g(totals, Decimal("500"))

        assert per_100.total_fat == Decimal("6")

    @pytest.mark.parametrize("num_portions", [0, -2])
    def test_invalid_portion_count_raises(
        self,
        calculator: NutrientCalculator,
        num_portions: int,
    ) -> None:
        with pytest.raises(InvalidRecipeError):
            calculator.per_portion(NutrientValues(), num_portions)

    @pytest.mark.parametrize("final_yield", [Decimal("0"), Decimal("-1")])
    def test_invalid_yield_raises(
        self,
        calculator: NutrientCalculator,
        final_yield: Decimal,
    ) -> None:
        with pytest.raises(InvalidRecipeError):
            calculator.per_100g(NutrientValues(), final_yield)


class TestCalculatePerIngredient:
    """Test per-ingredient breakdown."""

    def test_one_entry_per_line(
        self,
        calculator: NutrientCalculator,
        flour: IngredientLine,
        butter: IngredientLine,
    ) -> None:
        contributions = calculator.calculate_per_ingredient([flour, butter])

        assert len(contributions) == 2
        assert contributions[1].saturated_fat == Decimal("24")
        assert contributions[0].energy_kcal == _atwater(contributions[0])
