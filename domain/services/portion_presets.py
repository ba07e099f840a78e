"""Reference portions by food category."""

from typing import List

from config.constants import PORTION_CATEGORIES, PortionPreset
from domain.exceptions import InvalidRecipeError
from domain.models import Recipe


def list_categories() -> List[str]:
    return list(PORTION_CATEGORIES)


def get_portion_preset(category: str) -> PortionPreset:
    """Reference portion and household measure for a category.

    Raises:
        InvalidRecipeError: If the category is unknown
    """
    key = (category or "").strip().lower()
    preset = PORTION_CATEGORIES.get(key)
    if preset is None:
        raise InvalidRecipeError(f"Unknown food category: {category!r}")
    return preset


def apply_portion_preset(recipe: Recipe, category: str) -> None:
    """Set the recipe's category, portion size and household measure."""
    preset = get_portion_preset(category)
    recipe.category = category.strip().lower()
    recipe.portion_g = preset.portion_g
    recipe.household_measure = preset.household_measure
