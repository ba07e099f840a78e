"""JSON persistence for recipes.

Handles saving and loading recipes to/from JSON files, together with the
last calculated nutrition so a saved label can be listed without
recalculating it.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from domain.exceptions import InvalidRecipeFileError, RecipeNotFoundError
from domain.models import IngredientLine, NutrientValues, NutritionResult, Recipe


class JSONRecipeRepository:
    """Repository for persisting recipes as JSON files."""

    def __init__(self, base_directory: str = "saves") -> None:
        """Initialize repository.

        Args:
            base_directory: Base directory for saving recipes
        """
        self._base_dir = Path(base_directory)
        self._base_dir.mkdir(parents=True, exist_ok=True)

    def save(
        self,
        recipe: Recipe,
        filename: str,
        result: Optional[NutritionResult] = None,
    ) -> Path:
        """Save recipe to JSON file.

        Args:
            recipe: Recipe to save
            filename: Filename (without path)
            result: Calculated nutrition to store alongside the recipe

        Returns:
            Full path to saved file
        """
        file_path = self._base_dir / filename

        data = self._recipe_to_dict(recipe)
        if result is not None:
            data["nutrition"] = self._result_to_dict(result)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        return file_path

    def load(self, filename: str) -> Recipe:
        """Load recipe from JSON file.

        Raises:
            RecipeNotFoundError: If file doesn't exist
            InvalidRecipeFileError: If file is malformed
        """
        data = self._read(filename)
        try:
            return self._dict_to_recipe(data)
        except (KeyError, ValueError, TypeError, AttributeError) as exc:
            raise InvalidRecipeFileError(f"Invalid recipe file: {filename}") from exc

    def load_result(self, filename: str) -> Optional[Dict[str, Any]]:
        """Stored nutrition summary of a saved recipe, if any.

        Amounts come back as Decimal, keyed like NutrientValues fields.
        """
        data = self._read(filename)
        stored = data.get("nutrition")
        if stored is None:
            return None
        try:
            return {
                "totals": self._dict_to_values(stored["totals"]),
                "per_portion": self._dict_to_values(stored["per_portion"]),
                "per_100g": self._dict_to_values(stored["per_100g"]),
                "front_label": dict(stored.get("front_label", {})),
            }
        except (KeyError, ValueError, TypeError, AttributeError) as exc:
            raise InvalidRecipeFileError(f"Invalid nutrition data in: {filename}") from exc

    def list_files(self) -> List[str]:
        if not self._base_dir.exists():
            return []

        return sorted([f.name for f in self._base_dir.glob("*.json")])

    def delete(self, filename: str) -> None:
        """Delete a recipe file.

        Raises:
            RecipeNotFoundError: If file doesn't exist
        """
        file_path = self._base_dir / filename

        if not file_path.exists():
            raise RecipeNotFoundError(f"Recipe file not found: {filename}")

        file_path.unlink()

    def _read(self, filename: str) -> Dict[str, Any]:
        file_path = self._base_dir / filename

        if not file_path.exists():
            raise RecipeNotFoundError(f"Recipe file not found: {filename}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidRecipeFileError(f"Invalid recipe file: {filename}") from exc

        if not isinstance(data, dict):
            raise InvalidRecipeFileError(f"Invalid recipe file: {filename}")
        return data

    def _recipe_to_dict(self, recipe: Recipe) -> Dict[str, Any]:
        """Convert Recipe to dictionary."""
        return {
            "name": recipe.name,
            "category": recipe.category,
            "product_type": recipe.product_type.value,
            "final_yield_g": str(recipe.final_yield_g),
            "portion_g": str(recipe.portion_g),
            "household_measure": recipe.household_measure,
            "num_portions": recipe.num_portions,
            "added_sugars_g": str(recipe.added_sugars_g),
            "allergens": {
                "contains": list(recipe.allergens_contains),
                "may_contain": list(recipe.allergens_may_contain),
            },
            "ingredients": [
                {
                    "name": line.name,
                    "quantity_g": str(line.quantity_g),
                    "nutrients_per_100g": self._values_to_dict(line.nutrients_per_100g),
                }
                for line in recipe.ingredients
            ],
        }

    def _dict_to_recipe(self, data: Dict[str, Any]) -> Recipe:
        """Convert dictionary to Recipe."""
        allergens = data.get("allergens", {})
        recipe = Recipe(
            name=data["name"],
            category=data.get("category", "paes"),
            product_type=data.get("product_type", "solid"),
            final_yield_g=data.get("final_yield_g", "0"),
            portion_g=data.get("portion_g", "0"),
            household_measure=data.get("household_measure", ""),
            num_portions=int(data.get("num_portions", 1)),
            added_sugars_g=data.get("added_sugars_g", "0"),
            allergens_contains=list(allergens.get("contains", [])),
            allergens_may_contain=list(allergens.get("may_contain", [])),
        )

        for line_data in data.get("ingredients", []):
            recipe.add_ingredient(
                IngredientLine(
                    name=line_data["name"],
                    quantity_g=line_data["quantity_g"],
                    nutrients_per_100g=self._dict_to_values(
                        line_data.get("nutrients_per_100g", {})
                    ),
                )
            )

        return recipe

    def _result_to_dict(self, result: NutritionResult) -> Dict[str, Any]:
        flags = result.front_label
        return {
            "totals": self._values_to_dict(result.totals),
            "per_portion": self._values_to_dict(result.per_portion),
            "per_100g": self._values_to_dict(result.per_100g),
            "front_label": {
                "high_added_sugars": flags.high_added_sugars,
                "high_saturated_fat": flags.high_saturated_fat,
                "high_sodium": flags.high_sodium,
            },
        }

    @staticmethod
    def _values_to_dict(values: NutrientValues) -> Dict[str, str]:
        return {key: str(amount) for key, amount in values.as_dict().items()}

    @staticmethod
    def _dict_to_values(data: Dict[str, Any]) -> NutrientValues:
        return NutrientValues.from_mapping(data)
