"""Tests for portion presets."""

from decimal import Decimal

import pytest

from domain.exceptions import InvalidRecipeError
from domain.models import Recipe
from domain.services.portion_presets import (
    apply_portion_preset,
    get_portion_preset,
    list_categories,
)


def test_list_categories() -> None:
    categories = list_categories()

    assert "paes" in categories
    assert "sucos" in categories
    assert len(categories) == 20


def test_get_portion_preset_is_case_insensitive() -> None:
    preset = get_portion_preset(" Biscoitos ")

    assert preset.portion_g == Decimal("30")
    assert preset.household_measure == "3 unidades"


def test_unknown_category_raises() -> None:
    with pytest.raises(InvalidRecipeError, match="Unknown food category"):
        get_portion_preset("pizza")


def test_apply_portion_preset() -> None:
    recipe = Recipe(name="Bolo de cenoura")

    apply_portion_preset(recipe, "sobremesas")

    assert recipe.category == "sobremesas"
    assert recipe.portion_g == Decimal("60")
    assert recipe.household_measure == "1 fatia pequena"
