"""Application use cases.

Use cases orchestrate domain services and infrastructure to fulfill
business workflows.
"""

import logging
import threading
from pathlib import Path
from typing import List, Optional

from domain.exceptions import InvalidRecipeError
from domain.models import NutritionResult, Recipe
from domain.services.allergen_detector import AllergenDetector
from domain.services.nutrition_engine import NutritionEngine
from infrastructure.api.sugar_estimator import SugarEstimate, SugarEstimationService
from infrastructure.food_table.taco_repository import TacoFood, TacoFoodRepository
from infrastructure.persistence.excel_exporter import ExcelExporter
from infrastructure.persistence.json_repository import JSONRecipeRepository


class SearchFoodsUseCase:
    """Search for foods in the TACO table."""

    def __init__(self, food_table: TacoFoodRepository) -> None:
        self._food_table = food_table

    def execute(self, query: str, limit: int = 20) -> List[TacoFood]:
        return self._food_table.search(query, limit=limit)


class CalculateNutritionUseCase:
    """Calculate the nutrition label for a recipe."""

    def __init__(self, engine: NutritionEngine) -> None:
        self._engine = engine

    def execute(self, recipe: Recipe) -> NutritionResult:
        """Calculate nutrition.

        Args:
            recipe: Recipe to calculate

        Returns:
            NutritionResult for the current recipe state

        Raises:
            InvalidRecipeError: If the recipe has no ingredients or its
                yield or portion count is invalid
        """
        if recipe.is_empty():
            raise InvalidRecipeError(f"Recipe {recipe.name!r} has no ingredients")

        try:
            context = recipe.context
        except ValueError as exc:
            raise InvalidRecipeError(str(exc)) from exc

        logging.debug(
            "Calculating %r: %s ingredients, yield %s, %s portions",
            recipe.name,
            len(recipe.ingredients),
            context.final_yield_g,
            context.num_portions,
        )
        return self._engine.calculate(recipe.ingredients, context)


class EstimateAddedSugarsUseCase:
    """Suggest the recipe's added sugars and store it on the recipe."""

    def __init__(self, service: SugarEstimationService) -> None:
        self._service = service

    def execute(
        self,
        recipe: Recipe,
        cancel: Optional[threading.Event] = None,
    ) -> SugarEstimate:
        """Estimate added sugars.

        Args:
            recipe: Recipe to estimate (added_sugars_g updated in-place)
            cancel: Optional event that stops the estimation

        Returns:
            The estimate, with per-ingredient figures
        """
        estimate = self._service.estimate(recipe.ingredients, cancel=cancel)
        recipe.added_sugars_g = estimate.total_g
        return estimate


class DetectAllergensUseCase:
    """Suggest the allergens a recipe contains."""

    def __init__(self, detector: AllergenDetector) -> None:
        self._detector = detector

    def execute(self, recipe: Recipe) -> List[str]:
        """Infer allergens from ingredient names.

        Detected allergens are merged into the recipe's "contains" list;
        entries the user already declared are kept.
        """
        detected = self._detector.infer(recipe.ingredient_names)
        for allergen in detected:
            if allergen not in recipe.allergens_contains:
                recipe.allergens_contains.append(allergen)
        return detected


class SaveRecipeUseCase:
    """Save recipe to file."""

    def __init__(self, json_repository: JSONRecipeRepository) -> None:
        self._repository = json_repository

    def execute(
        self,
        recipe: Recipe,
        filename: str,
        result: Optional[NutritionResult] = None,
    ) -> Path:
        return self._repository.save(recipe, filename, result=result)


class LoadRecipeUseCase:
    """Load recipe from file."""

    def __init__(self, json_repository: JSONRecipeRepository) -> None:
        self._repository = json_repository

    def execute(self, filename: str) -> Recipe:
        return self._repository.load(filename)


class ExportLabelUseCase:
    """Export recipe and label to Excel."""

    def __init__(
        self,
        calculate: CalculateNutritionUseCase,
        exporter: ExcelExporter,
    ) -> None:
        self._calculate = calculate
        self._exporter = exporter

    def execute(
        self,
        recipe: Recipe,
        output_path: Path | str,
    ) -> NutritionResult:
        """Recalculate and export.

        Args:
            recipe: Recipe to export
            output_path: Output file path

        Returns:
            The result that was exported
        """
        result = self._calculate.execute(recipe)
        self._exporter.export_label(recipe, result, output_path)
        logging.debug("Exported label for %r to %s", recipe.name, output_path)
        return result
