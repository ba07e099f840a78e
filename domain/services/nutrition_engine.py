"""Nutrition calculation engine.

Runs the full labeling calculation for one recipe: aggregation, %VD,
declaration rounding and front-label classification.
"""

import logging
from types import MappingProxyType
from typing import Optional, Sequence

from domain.models import IngredientLine, NutritionResult, RecipeContext
from domain.services import rounding
from domain.services.daily_values import DailyValueCalculator
from domain.services.front_label import FrontLabelClassifier
from domain.services.nutrient_calculator import NutrientCalculator


class NutritionEngine:
    """Produce the NutritionResult for a recipe.

    %VD and front-label flags are computed from full-precision values;
    rounding only feeds the declared numbers and display strings.
    """

    def __init__(
        self,
        calculator: Optional[NutrientCalculator] = None,
        daily_values: Optional[DailyValueCalculator] = None,
        classifier: Optional[FrontLabelClassifier] = None,
    ) -> None:
        self._calculator = calculator or NutrientCalculator()
        self._daily_values = daily_values or DailyValueCalculator()
        self._classifier = classifier or FrontLabelClassifier()

    def calculate(
        self,
        ingredients: Sequence[IngredientLine],
        context: RecipeContext,
    ) -> NutritionResult:
        """Calculate everything the label needs.

        Args:
            ingredients: Ingredient lines of the recipe
            context: Yield, portions, declared added sugars and product type

        Returns:
            Immutable NutritionResult

        Raises:
            InvalidRecipeError: If yield or portion count is not positive
        """
        totals = self._calculator.compute_totals(ingredients, context.added_sugars_g)
        raw_portion = self._calculator.per_portion(totals, context.num_portions)
        raw_100g = self._calculator.per_100g(totals, context.final_yield_g)

        daily_values = self._daily_values.compute(raw_portion)
        portion_rounded, portion_display = rounding.round_values(raw_portion)
        per_100g_rounded, per_100g_display = rounding.round_values(raw_100g)
        front_label = self._classifier.classify(raw_100g, context.product_type)

        logging.debug(
            "Calculated nutrition for %s ingredients: %s kcal/portion, front label %s",
            len(ingredients),
            portion_display["energy_kcal"],
            [nutrient.value for nutrient in front_label.triggered()],
        )

        return NutritionResult(
            totals=totals,
            raw_per_portion=raw_portion,
            raw_per_100g=raw_100g,
            per_portion=portion_rounded,
            per_100g=per_100g_rounded,
            daily_values=daily_values,
            display_per_portion=MappingProxyType(portion_display),
            display_per_100g=MappingProxyType(per_100g_display),
            front_label=front_label,
            product_type=context.product_type,
        )
