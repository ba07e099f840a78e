"""Nutrient calculation service.

Aggregates ingredient contributions into recipe totals and scales them to
the per-portion and per-100 g bases. Pure business logic with no UI
dependencies.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Dict, List, Sequence

from config.constants import ATWATER_CARBOHYDRATE, ATWATER_FAT, ATWATER_PROTEIN, KCAL_TO_KJ
from domain.exceptions import InvalidRecipeError
from domain.models import IngredientLine, Nutrient, NutrientValues

# Summed from ingredient profiles. Energy is derived and added sugars are
# declared separately, so neither is summed.
_SUMMED_NUTRIENTS = (
    Nutrient.CARBOHYDRATES,
    Nutrient.TOTAL_SUGARS,
    Nutrient.PROTEINS,
    Nutrient.TOTAL_FAT,
    Nutrient.SATURATED_FAT,
    Nutrient.TRANS_FAT,
    Nutrient.FIBER,
    Nutrient.SODIUM,
)


class NutrientCalculator:
    """Calculate nutrient totals and derived values for recipes."""

    def compute_totals(
        self,
        ingredients: Sequence[IngredientLine],
        added_sugars_g: Decimal,
    ) -> NutrientValues:
        """Sum the weighted contributions of every ingredient.

        Args:
            ingredients: Ingredient lines with profiles per 100 g/ml
            added_sugars_g: Declared added sugars for the whole recipe

        Returns:
            Recipe totals with energy derived from the summed macronutrients

        Note:
            Ingredient profiles are per 100 units, so each amount is
            scaled by quantity/100. The ingredients' own energy and
            added-sugar fields are ignored. An empty list gives zero
            totals apart from the declared added sugars.
        """
        sums: Dict[str, Decimal] = {nutrient.value: Decimal("0") for nutrient in _SUMMED_NUTRIENTS}

        for line in ingredients:
            factor = line.quantity_g / Decimal("100")
            for nutrient in _SUMMED_NUTRIENTS:
                sums[nutrient.value] += line.nutrients_per_100g.get(nutrient) * factor

        totals = NutrientValues(added_sugars=added_sugars_g, **sums)
        return self.with_energy(totals)

    def calculate_per_ingredient(
        self,
        ingredients: Sequence[IngredientLine],
    ) -> List[NutrientValues]:
        """Absolute contribution of each ingredient line.

        Energy is derived from each line's own macronutrients; added sugars
        keep the profile's figure so the breakdown can show where they
        come from.
        """
        result: List[NutrientValues] = []
        for line in ingredients:
            contribution = line.nutrients_per_100g.scale(line.quantity_g / Decimal("100"))
            result.append(self.with_energy(contribution))
        return result

    def calculate_energy(self, values: NutrientValues) -> tuple[Decimal, Decimal]:
        """Calculate energy from macronutrients.

        Args:
            values: Amounts on any basis

        Returns:
            Tuple of (kcal, kJ)

        Note:
            Uses the 4-4-9 factors of IN 75/2020:
            - Carbohydrate: 4 kcal/g
            - Protein: 4 kcal/g
            - Fat: 9 kcal/g
            kJ is kcal * 4.2.
        """
        kcal = (
            values.carbohydrates * ATWATER_CARBOHYDRATE
            + values.proteins * ATWATER_PROTEIN
            + values.total_fat * ATWATER_FAT
        )
        return kcal, kcal * KCAL_TO_KJ

    def with_energy(self, values: NutrientValues) -> NutrientValues:
        """Return values with energy recomputed from their own macronutrients."""
        kcal, kj = self.calculate_energy(values)
        return replace(values, energy_kcal=kcal, energy_kj=kj)

    def per_portion(self, totals: NutrientValues, num_portions: int) -> NutrientValues:
        """Divide recipe totals into one portion.

        Raises:
            InvalidRecipeError: If num_portions is below 1
        """
        if num_portions < 1:
            raise InvalidRecipeError(f"Number of portions must be at least 1: {num_portions}")

        divisor = Decimal(num_portions)
        portion = NutrientValues(
            **{key: amount / divisor for key, amount in totals.as_dict().items()}
        )
        logging.debug("Split recipe totals into %s portions", num_portions)
        return self.with_energy(portion)

    def per_100g(self, totals: NutrientValues, final_yield_g: Decimal) -> NutrientValues:
        """Normalize recipe totals to 100 g (or ml) of finished product.

        Raises:
            InvalidRecipeError: If final_yield_g is not positive
        """
        if final_yield_g <= 0:
            raise InvalidRecipeError(f"Final yield must be positive: {final_yield_g}")

        per_100 = NutrientValues(
            **{
                key: (amount / final_yield_g) * Decimal("100")
                for key, amount in totals.as_dict().items()
            }
        )
        return self.with_energy(per_100)
