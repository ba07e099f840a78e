"""Excel export functionality.

Exports a recipe and its nutrition label to Excel with formatting.
"""

from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from config.constants import APP_NAME, REGULATORY_REFERENCES
from domain.exceptions import ExportError
from domain.models import Nutrient, NutritionResult, Recipe
from domain.services.allergen_detector import AllergenDetector
from domain.services.front_label import FrontLabelClassifier
from domain.services.label_generator import FOOTNOTE, TABLE_TITLE, LabelGenerator
from domain.services.nutrient_calculator import NutrientCalculator

_HEADER_FILL = PatternFill(start_color="000000", end_color="000000", fill_type="solid")
_HEADER_FONT = Font(bold=True, color="FFFFFF")
_WARNING_FILL = PatternFill(start_color="FFE5E5", end_color="FFE5E5", fill_type="solid")


class ExcelExporter:
    """Export nutrition labels to Excel format."""

    def __init__(
        self,
        label_generator: Optional[LabelGenerator] = None,
        classifier: Optional[FrontLabelClassifier] = None,
        allergen_detector: Optional[AllergenDetector] = None,
        calculator: Optional[NutrientCalculator] = None,
    ) -> None:
        self._label_generator = label_generator or LabelGenerator()
        self._classifier = classifier or FrontLabelClassifier()
        self._allergens = allergen_detector or AllergenDetector()
        self._calculator = calculator or NutrientCalculator()

    def export_label(
        self,
        recipe: Recipe,
        result: NutritionResult,
        output_path: Path | str,
    ) -> None:
        """Export recipe with its nutrition table to Excel.

        Args:
            recipe: Recipe the label belongs to
            result: Calculated nutrition for the recipe
            output_path: Path to save Excel file

        Raises:
            ExportError: If export fails
        """
        try:
            wb = Workbook()
            wb.remove(wb.active)  # Remove default sheet

            self._create_recipe_sheet(wb, recipe)
            self._create_nutrition_sheet(wb, recipe, result)
            self._create_composition_sheet(wb, recipe)
            self._create_front_label_sheet(wb, recipe, result)

            wb.save(output_path)

        except Exception as exc:
            raise ExportError(f"Failed to export to Excel: {exc}") from exc

    def _create_recipe_sheet(self, wb: Workbook, recipe: Recipe) -> None:
        """Recipe data and ingredient list."""
        ws = wb.create_sheet("Receita")
        unit = recipe.product_type.unit

        ws.append([APP_NAME, recipe.name])
        ws.append(["Categoria", recipe.category])
        ws.append(["Tipo", "Líquido" if recipe.product_type.value == "liquid" else "Sólido"])
        ws.append([f"Rendimento final ({unit})", float(recipe.final_yield_g)])
        ws.append([f"Porção ({unit})", float(recipe.portion_g)])
        ws.append(["Medida caseira", recipe.household_measure])
        ws.append(["Número de porções", recipe.num_portions])
        ws.append([])

        header_row = ws.max_row + 1
        ws.append(["Ingrediente", f"Quantidade ({unit})"])
        self._style_header(ws, header_row, 2)

        for line in recipe.ingredients:
            ws.append([line.name, float(line.quantity_g)])
        ws.append(["TOTAL", float(recipe.total_quantity_g)])

        self._autosize(ws, 50)

    def _create_nutrition_sheet(
        self,
        wb: Workbook,
        recipe: Recipe,
        result: NutritionResult,
    ) -> None:
        """Nutrition facts table as declared on the package."""
        ws = wb.create_sheet("Informação Nutricional")
        generator = self._label_generator

        ws.append([TABLE_TITLE])
        ws.append(
            [generator.portion_header(recipe.portion_g, recipe.household_measure, recipe.product_type)]
        )

        header_row = ws.max_row + 1
        ws.append(
            [
                "Nutriente",
                "Por porção",
                "%VD(*)",
                f"Por {generator.per_100_heading(recipe.product_type)}",
            ]
        )
        self._style_header(ws, header_row, 4)

        for row in generator.generate_label(result):
            ws.append(
                [
                    "    " * row.indent_level + row.nutrient_name,
                    row.per_portion,
                    row.daily_value,
                    row.per_100,
                ]
            )

        ws.append([])
        ws.append([FOOTNOTE])
        ws.cell(ws.max_row, 1).alignment = Alignment(wrap_text=True, vertical="top")

        self._autosize(ws, 40)

    def _create_composition_sheet(self, wb: Workbook, recipe: Recipe) -> None:
        """Per-ingredient nutrient breakdown of the whole recipe."""
        ws = wb.create_sheet("Composição")

        headers = ["Nutriente", "Unidade"]
        for line in recipe.ingredients:
            # Truncate long names
            name = line.name
            if len(name) > 20:
                name = name[:17] + "..."
            headers.append(name)
        headers.append("Total")
        ws.append(headers)
        self._style_header(ws, 1, len(headers))

        contributions = self._calculator.calculate_per_ingredient(recipe.ingredients)
        totals = self._calculator.compute_totals(recipe.ingredients, recipe.added_sugars_g)

        for nutrient in Nutrient:
            row: List[object] = [nutrient.value, nutrient.unit]
            for contribution in contributions:
                amount = contribution.get(nutrient)
                row.append(float(amount) if amount > 0 else "")
            total = totals.get(nutrient)
            row.append(float(total) if total > 0 else "")
            ws.append(row)

        self._autosize(ws, 30)

    def _create_front_label_sheet(
        self,
        wb: Workbook,
        recipe: Recipe,
        result: NutritionResult,
    ) -> None:
        """Front-label warnings, allergen statements and references."""
        ws = wb.create_sheet("Rotulagem Frontal")

        ws.append(["ROTULAGEM FRONTAL - LUPA"])
        self._style_header(ws, 1, 1)

        warnings = self._classifier.warning_texts(result.front_label)
        if warnings:
            for text in warnings:
                ws.append([text])
                ws.cell(ws.max_row, 1).fill = _WARNING_FILL
                ws.cell(ws.max_row, 1).font = Font(bold=True)
        else:
            ws.append(["Produto não requer rotulagem frontal"])

        ws.append([])
        statements = self._allergens.declaration_texts(
            recipe.allergens_contains,
            recipe.allergens_may_contain,
        )
        self._append_lines(ws, statements)

        ws.append([])
        ws.append([f"Baseado em: {', '.join(REGULATORY_REFERENCES)}"])
        ws.append([f"Gerado por {APP_NAME} em {date.today().strftime('%d/%m/%Y')}"])

        self._autosize(ws, 60)

    @staticmethod
    def _append_lines(ws: Worksheet, lines: Sequence[str]) -> None:
        for line in lines:
            ws.append([line])

    @staticmethod
    def _style_header(ws: Worksheet, row: int, columns: int) -> None:
        for col_num in range(1, columns + 1):
            cell = ws.cell(row, col_num)
            cell.fill = _HEADER_FILL
            cell.font = _HEADER_FONT
            cell.alignment = Alignment(horizontal="center", vertical="center")

    @staticmethod
    def _autosize(ws: Worksheet, max_width: int) -> None:
        for column in ws.columns:
            max_length = 0
            column_letter = get_column_letter(column[0].column)
            for cell in column:
                if cell.value:
                    max_length = max(max_length, len(str(cell.value)))
            ws.column_dimensions[column_letter].width = min(max_length + 2, max_width)
