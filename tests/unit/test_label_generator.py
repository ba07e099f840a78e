"""Tests for LabelGenerator service."""

from decimal import Decimal

import pytest

from domain.models import IngredientLine, NutrientValues, NutritionResult, ProductType, RecipeContext
from domain.services.label_generator import LabelGenerator, LabelRow
from domain.services.nutrition_engine import NutritionEngine


@pytest.fixture
def generator() -> LabelGenerator:
    """Create a LabelGenerator instance."""
    return LabelGenerator()


@pytest.fixture
def result() -> NutritionResult:
    """Bread: 500 g of dough, 400 g baked, 8 portions."""
    line = IngredientLine(
        name="Massa de pão",
        quantity_g=Decimal("500"),
        nutrients_per_100g=NutrientValues(
            carbohydrates=Decimal("50"),
            total_sugars=Decimal("4"),
            proteins=Decimal("8"),
            total_fat=Decimal("3"),
            saturated_fat=Decimal("1"),
            fiber=Decimal("2.3"),
            sodium=Decimal("480"),
        ),
    )
    context = RecipeContext(
        final_yield_g=Decimal("400"),
        num_portions=8,
        added_sugars_g=Decimal("10"),
    )
    return NutritionEngine().calculate([line], context)


class TestLabelRow:
    """Test LabelRow class."""

    def test_create_label_row(self) -> None:
        row = LabelRow(
            nutrient_name="Proteínas",
            per_portion="5 g",
            per_100="10 g",
            daily_value="10",
        )

        assert row.nutrient_name == "Proteínas"
        assert row.indent_level == 0
        assert "Proteínas" in repr(row)


class TestGenerateLabel:
    """Test generate_label method."""

    def test_row_order(self, generator: LabelGenerator, result: NutritionResult) -> None:
        rows = generator.generate_label(result)

        assert [row.nutrient_name for row in rows] == [
            "Valor energético",
            "Carboidratos",
            "Açúcares totais",
            "Açúcares adicionados",
            "Proteínas",
            "Gorduras totais",
            "Gorduras saturadas",
            "Gorduras trans",
            "Fibra alimentar",
            "Sódio",
        ]

    def test_energy_row_shows_kcal_and_kj(
        self,
        generator: LabelGenerator,
        result: NutritionResult,
    ) -> None:
        energy = generator.generate_label(result)[0]

        # per portion: 31.25 g carbs, 5 g protein, 1.875 g fat
        assert energy.per_portion == "162 kcal = 680 kJ"
        assert energy.daily_value == "8"

    def test_values_carry_units(self, generator: LabelGenerator, result: NutritionResult) -> None:
        rows = {row.nutrient_name: row for row in generator.generate_label(result)}

        assert rows["Carboidratos"].per_portion == "31 g"
        assert rows["Carboidratos"].per_100 == "63 g"
        assert rows["Sódio"].per_portion == "300 mg"
        assert rows["Sódio"].daily_value == "15"

    def test_total_sugars_have_no_daily_value(
        self,
        generator: LabelGenerator,
        result: NutritionResult,
    ) -> None:
        rows = {row.nutrient_name: row for row in generator.generate_label(result)}

        assert rows["Açúcares totais"].daily_value == "**"
        assert rows["Açúcares adicionados"].per_portion == "1.3 g"

    def test_sub_rows_are_indented(self, generator: LabelGenerator, result: NutritionResult) -> None:
        rows = {row.nutrient_name: row for row in generator.generate_label(result)}

        assert rows["Gorduras saturadas"].indent_level == 1
        assert rows["Gorduras totais"].indent_level == 0


class TestHeadings:
    """Test portion and per-100 headings."""

    def test_portion_header(self, generator: LabelGenerator) -> None:
        assert generator.portion_header(Decimal("50"), "1 fatia") == "Porção de 50 g (1 fatia)"

    def test_portion_header_liquid_without_measure(self, generator: LabelGenerator) -> None:
        header = generator.portion_header(Decimal("200.0"), "", ProductType.LIQUID)

        assert header == "Porção de 200 ml"

    def test_per_100_heading(self, generator: LabelGenerator) -> None:
        assert generator.per_100_heading(ProductType.SOLID) == "100 g"
        assert generator.per_100_heading(ProductType.LIQUID) == "100 ml"
