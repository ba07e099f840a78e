"""Integration test for the label_report command line tool."""

import sys
from decimal import Decimal
from pathlib import Path

import pytest
from openpyxl import load_workbook

from domain.models import IngredientLine, NutrientValues, Recipe
from infrastructure.persistence.json_repository import JSONRecipeRepository
from tools.label_report import main


@pytest.fixture
def saved_recipe(tmp_path: Path) -> Path:
    recipe = Recipe(
        name="Pão de queijo",
        final_yield_g=Decimal("500"),
        num_portions=10,
        portion_g=Decimal("50"),
        household_measure="2 unidades",
        allergens_contains=["leite", "ovos"],
    )
    recipe.add_ingredient(
        IngredientLine(
            name="Polvilho",
            quantity_g=Decimal("300"),
            nutrients_per_100g=NutrientValues(carbohydrates=Decimal("86.8")),
        )
    )
    recipe.add_ingredient(
        IngredientLine(
            name="Queijo minas",
            quantity_g=Decimal("250"),
            nutrients_per_100g=NutrientValues(
                proteins=Decimal("17.4"),
                total_fat=Decimal("20.2"),
                saturated_fat=Decimal("12"),
                sodium=Decimal("346"),
            ),
        )
    )
    JSONRecipeRepository(str(tmp_path)).save(recipe, "pao.json")
    return tmp_path / "pao.json"


def test_prints_label(
    saved_recipe: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr(sys, "argv", ["label_report.py", str(saved_recipe)])

    assert main() == 0

    out = capsys.readouterr().out
    assert "Porção de 50 g (2 unidades)" in out
    assert "Valor energético" in out
    assert "ALTO EM GORDURAS SATURADAS" in out
    assert "ALÉRGICOS: CONTÉM LEITE, OVOS." in out


def test_exports_and_saves(
    saved_recipe: Path,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    output = tmp_path / "pao.xlsx"
    saves = tmp_path / "out"
    monkeypatch.setattr(
        sys,
        "argv",
        ["label_report.py", str(saved_recipe), "--export", str(output), "--saves", str(saves)],
    )

    assert main() == 0

    assert "Informação Nutricional" in load_workbook(output).sheetnames
    stored = JSONRecipeRepository(str(saves)).load_result("pao.json")
    assert stored is not None
    assert stored["front_label"]["high_saturated_fat"] is True


def test_missing_recipe_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["label_report.py", str(tmp_path / "nada.json")])

    assert main() == 1
