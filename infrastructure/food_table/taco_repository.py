"""TACO food composition table.

Reads the CSV export of the Brazilian Food Composition Table (TACO, 4th
edition) and, optionally, its fatty-acid table, and turns rows into
nutrient profiles per 100 g.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

import pandas as pd

from config.constants import TACO_COLUMNS, TACO_FATTY_ACID_COLUMNS, TACO_SEARCH_LIMIT
from domain.exceptions import FoodNotFoundError, FoodTableError, InvalidIngredientError
from domain.models import IngredientLine, NutrientValues
from domain.services.number_parser import parse_number_or_zero

_REQUIRED_COLUMNS = ("number", "category", "description")


@dataclass(frozen=True)
class TacoFood:
    """One food of the table with its profile per 100 g."""

    number: str
    category: str
    description: str
    nutrients: NutrientValues


class TacoFoodRepository:
    """Search and read foods from a local TACO export."""

    def __init__(
        self,
        csv_path: Path | str,
        fatty_acids_path: Optional[Path | str] = None,
    ) -> None:
        """Load the table.

        Args:
            csv_path: Main composition table (CSV)
            fatty_acids_path: Fatty-acid table (CSV), merged by food number

        Raises:
            FoodTableError: If a file cannot be read or lacks required columns
        """
        foods = self._read(csv_path, [TACO_COLUMNS[key] for key in _REQUIRED_COLUMNS])
        number_col = TACO_COLUMNS["number"]
        foods[number_col] = foods[number_col].str.strip()

        if fatty_acids_path is not None:
            fatty = self._read(fatty_acids_path, [number_col])
            fatty[number_col] = fatty[number_col].str.strip()
            keep = [number_col] + [
                col for col in TACO_FATTY_ACID_COLUMNS.values() if col in fatty.columns
            ]
            foods = foods.merge(
                fatty[keep].drop_duplicates(subset=number_col),
                on=number_col,
                how="left",
            ).fillna("")

        self._foods = foods
        logging.debug("Loaded %s foods from %s", len(foods), csv_path)

    @staticmethod
    def _read(path: Path | str, required: List[str]) -> pd.DataFrame:
        try:
            frame = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8")
        except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise FoodTableError(f"Cannot read food table {path}: {exc}") from exc

        missing = [col for col in required if col not in frame.columns]
        if missing:
            raise FoodTableError(f"Food table {path} is missing columns: {', '.join(missing)}")
        return frame

    def __len__(self) -> int:
        return len(self._foods)

    def search(self, query: str, limit: int = TACO_SEARCH_LIMIT) -> List[TacoFood]:
        """Foods whose description or category contains the query (case-insensitive)."""
        query = (query or "").strip()
        if not query:
            return []

        description = self._foods[TACO_COLUMNS["description"]]
        category = self._foods[TACO_COLUMNS["category"]]
        mask = description.str.contains(query, case=False, regex=False) | category.str.contains(
            query, case=False, regex=False
        )
        matches = self._foods[mask].head(limit)
        return [self._row_to_food(row) for _, row in matches.iterrows()]

    def get(self, number: str) -> TacoFood:
        """Food by its TACO number.

        Raises:
            FoodNotFoundError: If the number is not in the table
        """
        number_col = TACO_COLUMNS["number"]
        matches = self._foods[self._foods[number_col] == str(number).strip()]
        if matches.empty:
            raise FoodNotFoundError(f"Food not found in TACO table: {number}")
        return self._row_to_food(matches.iloc[0])

    def to_ingredient_line(self, food: TacoFood, quantity_g: Decimal) -> IngredientLine:
        """Ingredient line with a snapshot of the food's profile.

        Raises:
            InvalidIngredientError: If the quantity is not a positive number
        """
        try:
            return IngredientLine(
                name=food.description,
                quantity_g=quantity_g,
                nutrients_per_100g=food.nutrients,
            )
        except ValueError as exc:
            raise InvalidIngredientError(f"Invalid quantity for {food.description}: {quantity_g}") from exc

    def _row_to_food(self, row: pd.Series) -> TacoFood:
        def value(column: str) -> Decimal:
            return parse_number_or_zero(row.get(column, ""))

        # TACO reports trans isomers separately; the sum is scaled as in
        # the published fatty-acid sheet.
        trans = (
            value(TACO_FATTY_ACID_COLUMNS["trans_18_1"])
            + value(TACO_FATTY_ACID_COLUMNS["trans_18_2"])
        ) / Decimal("100")

        nutrients = NutrientValues(
            energy_kcal=value(TACO_COLUMNS["energy_kcal"]),
            carbohydrates=value(TACO_COLUMNS["carbohydrates"]),
            proteins=value(TACO_COLUMNS["proteins"]),
            total_fat=value(TACO_COLUMNS["total_fat"]),
            saturated_fat=value(TACO_FATTY_ACID_COLUMNS["saturated_fat"]),
            trans_fat=trans,
            fiber=value(TACO_COLUMNS["fiber"]),
            sodium=value(TACO_COLUMNS["sodium"]),
        )

        return TacoFood(
            number=str(row[TACO_COLUMNS["number"]]),
            category=str(row[TACO_COLUMNS["category"]]),
            description=str(row[TACO_COLUMNS["description"]]).strip(),
            nutrients=nutrients,
        )
