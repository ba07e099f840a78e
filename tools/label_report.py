from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.constants import APP_NAME, APP_VERSION  # noqa: E402
from config.container import Container  # noqa: E402
from config.logging_config import configure_logging  # noqa: E402
from domain.exceptions import LabelingError  # noqa: E402


def _print_table(container: Container, recipe, result) -> None:
    generator = container.label_generator
    print(recipe.name)
    print(generator.portion_header(recipe.portion_g, recipe.household_measure, recipe.product_type))
    print(f"{'':<28}{'Porção':>16}{'%VD(*)':>8}{generator.per_100_heading(recipe.product_type):>16}")
    for row in generator.generate_label(result):
        name = "  " * row.indent_level + row.nutrient_name
        print(f"{name:<28}{row.per_portion:>16}{row.daily_value:>8}{row.per_100:>16}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Recalculate a saved recipe and print its nutrition label."
    )
    parser.add_argument("recipe", help="Saved recipe JSON file.")
    parser.add_argument(
        "--export",
        dest="export_path",
        help="Write the label to this .xlsx file.",
    )
    parser.add_argument(
        "--saves",
        dest="saves_dir",
        help="Also save the recipe with its recalculated nutrition in this directory.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log calculation details.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"{APP_NAME} {APP_VERSION}",
    )
    args = parser.parse_args()

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    recipe_path = Path(args.recipe)
    container = Container(saves_directory=str(recipe_path.parent))

    try:
        recipe = container.load_recipe.execute(recipe_path.name)
        result = container.calculate_nutrition.execute(recipe)
    except LabelingError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    _print_table(container, recipe, result)

    warnings = container.front_label_classifier.warning_texts(result.front_label)
    print()
    for text in warnings or ["Sem alerta de rotulagem frontal"]:
        print(text)
    for text in container.allergen_detector.declaration_texts(
        recipe.allergens_contains,
        recipe.allergens_may_contain,
    ):
        print(text)

    try:
        if args.saves_dir:
            saved = Container(saves_directory=args.saves_dir).save_recipe.execute(
                recipe, recipe_path.name, result=result
            )
            print(f"\nSaved to {saved}")
        if args.export_path:
            container.export_label.execute(recipe, args.export_path)
            print(f"Exported to {args.export_path}")
    except LabelingError as exc:
        logging.error("Output failed: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
