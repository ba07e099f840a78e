"""Label generation service.

Generates nutrition facts table data in the IN 75/2020 format. Works only
on the declared values and display strings of a NutritionResult; no
rounding happens here.
"""

from decimal import Decimal
from typing import List, Optional

from domain.models import Nutrient, NutritionResult, ProductType
from domain.services.daily_values import DailyValueCalculator


class LabelRow:
    """Represents a row in the nutrition facts table."""

    def __init__(
        self,
        nutrient_name: str,
        per_portion: str,
        per_100: str = "",
        daily_value: str = "",
        indent_level: int = 0,
    ) -> None:
        self.nutrient_name = nutrient_name
        self.per_portion = per_portion
        self.per_100 = per_100
        self.daily_value = daily_value
        self.indent_level = indent_level

    def __repr__(self) -> str:
        return (
            f"LabelRow({self.nutrient_name!r}, {self.per_portion!r}, "
            f"{self.per_100!r}, {self.daily_value!r})"
        )


# (label text, nutrient, indent level) in the order the regulation prescribes
_TABLE_LAYOUT = (
    ("Carboidratos", Nutrient.CARBOHYDRATES, 0),
    ("Açúcares totais", Nutrient.TOTAL_SUGARS, 1),
    ("Açúcares adicionados", Nutrient.ADDED_SUGARS, 1),
    ("Proteínas", Nutrient.PROTEINS, 0),
    ("Gorduras totais", Nutrient.TOTAL_FAT, 0),
    ("Gorduras saturadas", Nutrient.SATURATED_FAT, 1),
    ("Gorduras trans", Nutrient.TRANS_FAT, 1),
    ("Fibra alimentar", Nutrient.FIBER, 0),
    ("Sódio", Nutrient.SODIUM, 0),
)

TABLE_TITLE = "INFORMAÇÃO NUTRICIONAL"

FOOTNOTE = (
    "(*) % Valores Diários de referência com base em uma dieta de 2.000 kcal "
    "ou 8.400 kJ. Seus valores diários podem ser maiores ou menores dependendo "
    "de suas necessidades energéticas. (**) VD não estabelecido."
)


class LabelGenerator:
    """Generate Brazilian nutrition facts table rows."""

    def __init__(self, daily_values: Optional[DailyValueCalculator] = None) -> None:
        self._daily_values = daily_values or DailyValueCalculator()

    def generate_label(self, result: NutritionResult) -> List[LabelRow]:
        """Generate nutrition facts table rows.

        Args:
            result: Calculated nutrition for the recipe

        Returns:
            List of LabelRow objects, energy first

        Note:
            Energy is shown as "X kcal = Y kJ"; its %VD is based on kcal.
            Total sugars has no reference value and shows "**".
        """
        portion = result.display_per_portion
        per_100 = result.display_per_100g

        rows: List[LabelRow] = [
            LabelRow(
                nutrient_name="Valor energético",
                per_portion=f"{portion['energy_kcal']} kcal = {portion['energy_kj']} kJ",
                per_100=f"{per_100['energy_kcal']} kcal = {per_100['energy_kj']} kJ",
                daily_value=self._daily_value_text(result, Nutrient.ENERGY_KCAL),
            )
        ]

        for label, nutrient, indent in _TABLE_LAYOUT:
            rows.append(
                LabelRow(
                    nutrient_name=label,
                    per_portion=f"{portion[nutrient.value]} {nutrient.unit}",
                    per_100=f"{per_100[nutrient.value]} {nutrient.unit}",
                    daily_value=self._daily_value_text(result, nutrient),
                    indent_level=indent,
                )
            )

        return rows

    def portion_header(
        self,
        portion_g: Decimal,
        household_measure: str,
        product_type: ProductType = ProductType.SOLID,
    ) -> str:
        """Portion line, e.g. "Porção de 50 g (1 fatia)"."""
        unit = ProductType(product_type).unit
        amount = format(portion_g.normalize(), "f") if portion_g else "0"
        header = f"Porção de {amount} {unit}"
        if household_measure:
            header += f" ({household_measure})"
        return header

    def per_100_heading(self, product_type: ProductType = ProductType.SOLID) -> str:
        return f"100 {ProductType(product_type).unit}"

    def _daily_value_text(self, result: NutritionResult, nutrient: Nutrient) -> str:
        return self._daily_values.format(nutrient, result.daily_value(nutrient))
