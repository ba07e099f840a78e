"""Domain models.

Core business entities that represent the problem domain.
These models are framework-agnostic and contain only business logic.
"""

from dataclasses import dataclass, field, fields
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


class Nutrient(str, Enum):
    """Nutrients declared in the Brazilian nutrition facts table."""

    ENERGY_KCAL = "energy_kcal"
    ENERGY_KJ = "energy_kj"
    CARBOHYDRATES = "carbohydrates"
    TOTAL_SUGARS = "total_sugars"
    ADDED_SUGARS = "added_sugars"
    PROTEINS = "proteins"
    TOTAL_FAT = "total_fat"
    SATURATED_FAT = "saturated_fat"
    TRANS_FAT = "trans_fat"
    FIBER = "fiber"
    SODIUM = "sodium"

    @property
    def unit(self) -> str:
        """Declared unit of the nutrient."""
        return _NUTRIENT_UNITS[self]


_NUTRIENT_UNITS = {
    Nutrient.ENERGY_KCAL: "kcal",
    Nutrient.ENERGY_KJ: "kJ",
    Nutrient.CARBOHYDRATES: "g",
    Nutrient.TOTAL_SUGARS: "g",
    Nutrient.ADDED_SUGARS: "g",
    Nutrient.PROTEINS: "g",
    Nutrient.TOTAL_FAT: "g",
    Nutrient.SATURATED_FAT: "g",
    Nutrient.TRANS_FAT: "g",
    Nutrient.FIBER: "g",
    Nutrient.SODIUM: "mg",
}


class ProductType(str, Enum):
    """Physical state that selects the front-label thresholds."""

    SOLID = "solid"
    LIQUID = "liquid"

    @property
    def unit(self) -> str:
        return "ml" if self is ProductType.LIQUID else "g"


def to_decimal(value: Any) -> Decimal:
    """Convert a numeric input to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Not a number: {value!r}") from exc


def _check_amount(label: str, amount: Decimal) -> None:
    if not amount.is_finite():
        raise ValueError(f"{label} must be finite: {amount}")
    if amount < 0:
        raise ValueError(f"{label} cannot be negative: {amount}")


@dataclass(frozen=True)
class NutrientValues:
    """Amounts for every declared nutrient.

    Immutable value object. Depending on context it holds a profile per
    100 g/ml of a food, the totals of a recipe, or the values of one
    portion. Fields left out default to zero.
    """

    energy_kcal: Decimal = Decimal("0")
    energy_kj: Decimal = Decimal("0")
    carbohydrates: Decimal = Decimal("0")
    total_sugars: Decimal = Decimal("0")
    added_sugars: Decimal = Decimal("0")
    proteins: Decimal = Decimal("0")
    total_fat: Decimal = Decimal("0")
    saturated_fat: Decimal = Decimal("0")
    trans_fat: Decimal = Decimal("0")
    fiber: Decimal = Decimal("0")
    sodium: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        """Coerce amounts to Decimal and validate them."""
        for f in fields(self):
            amount = to_decimal(getattr(self, f.name))
            _check_amount(f"Nutrient {f.name}", amount)
            object.__setattr__(self, f.name, amount)

    @classmethod
    def from_mapping(cls, data: Mapping[Any, Any]) -> "NutrientValues":
        """Build from a mapping keyed by nutrient name or Nutrient member.

        None values count as zero so partial nutrient data is accepted.
        """
        kwargs: Dict[str, Decimal] = {}
        for key, value in data.items():
            try:
                nutrient = Nutrient(key)
            except ValueError as exc:
                raise ValueError(f"Unknown nutrient: {key!r}") from exc
            if value is None:
                continue
            kwargs[nutrient.value] = to_decimal(value)
        return cls(**kwargs)

    def get(self, nutrient: Nutrient | str) -> Decimal:
        """Get the amount of a nutrient."""
        return getattr(self, Nutrient(nutrient).value)

    def scale(self, factor: Decimal) -> "NutrientValues":
        """Return a new NutrientValues with every amount multiplied by factor."""
        return NutrientValues(
            **{f.name: getattr(self, f.name) * factor for f in fields(self)}
        )

    def as_dict(self) -> Dict[str, Decimal]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class IngredientLine:
    """An ingredient of a recipe with its quantity.

    The nutrient profile is a snapshot taken when the ingredient was added.
    Lines are replaced wholesale, never edited in place.
    """

    name: str
    quantity_g: Decimal
    nutrients_per_100g: NutrientValues = field(default_factory=NutrientValues)

    def __post_init__(self) -> None:
        """Validate ingredient data."""
        if not self.name or not self.name.strip():
            raise ValueError("Ingredient name cannot be empty")
        quantity = to_decimal(self.quantity_g)
        if not quantity.is_finite() or quantity <= 0:
            raise ValueError(f"Ingredient quantity must be positive: {quantity}")
        object.__setattr__(self, "quantity_g", quantity)

    def nutrient_amount(self, nutrient: Nutrient | str) -> Decimal:
        """Amount of a nutrient contributed by this line's quantity."""
        return self.nutrients_per_100g.get(nutrient) * (self.quantity_g / Decimal("100"))


@dataclass(frozen=True)
class RecipeContext:
    """Recipe metadata the calculation depends on."""

    final_yield_g: Decimal
    num_portions: int
    added_sugars_g: Decimal = Decimal("0")
    product_type: ProductType = ProductType.SOLID

    def __post_init__(self) -> None:
        """Validate recipe metadata."""
        final_yield = to_decimal(self.final_yield_g)
        if not final_yield.is_finite() or final_yield <= 0:
            raise ValueError(f"Final yield must be positive: {final_yield}")
        if isinstance(self.num_portions, bool) or not isinstance(self.num_portions, int):
            raise ValueError(f"Number of portions must be an integer: {self.num_portions!r}")
        if self.num_portions < 1:
            raise ValueError(f"Number of portions must be at least 1: {self.num_portions}")
        added_sugars = to_decimal(self.added_sugars_g)
        _check_amount("Added sugars", added_sugars)

        object.__setattr__(self, "final_yield_g", final_yield)
        object.__setattr__(self, "added_sugars_g", added_sugars)
        object.__setattr__(self, "product_type", ProductType(self.product_type))


@dataclass
class Recipe:
    """A recipe being labeled.

    Mutable because the user edits it across the labeling workflow.
    """

    name: str
    category: str = "paes"
    product_type: ProductType = ProductType.SOLID
    final_yield_g: Decimal = Decimal("0")
    portion_g: Decimal = Decimal("0")
    household_measure: str = ""
    num_portions: int = 1
    added_sugars_g: Decimal = Decimal("0")
    ingredients: List[IngredientLine] = field(default_factory=list)
    allergens_contains: List[str] = field(default_factory=list)
    allergens_may_contain: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate recipe data."""
        if not self.name:
            raise ValueError("Recipe name cannot be empty")
        self.product_type = ProductType(self.product_type)
        self.final_yield_g = to_decimal(self.final_yield_g)
        self.portion_g = to_decimal(self.portion_g)
        self.added_sugars_g = to_decimal(self.added_sugars_g)

    @property
    def context(self) -> RecipeContext:
        """Calculation context for the current recipe state."""
        return RecipeContext(
            final_yield_g=self.final_yield_g,
            num_portions=self.num_portions,
            added_sugars_g=self.added_sugars_g,
            product_type=self.product_type,
        )

    @property
    def total_quantity_g(self) -> Decimal:
        """Sum of ingredient quantities before cooking losses."""
        return sum((line.quantity_g for line in self.ingredients), Decimal("0"))

    @property
    def ingredient_names(self) -> List[str]:
        return [line.name for line in self.ingredients]

    def add_ingredient(self, line: IngredientLine) -> None:
        self.ingredients.append(line)

    def replace_ingredient(self, index: int, line: IngredientLine) -> None:
        """Swap the line at index for a new one."""
        if 0 <= index < len(self.ingredients):
            self.ingredients[index] = line
        else:
            raise IndexError(f"Invalid ingredient index: {index}")

    def remove_ingredient(self, index: int) -> None:
        if 0 <= index < len(self.ingredients):
            del self.ingredients[index]
        else:
            raise IndexError(f"Invalid ingredient index: {index}")

    def is_empty(self) -> bool:
        return len(self.ingredients) == 0


@dataclass(frozen=True)
class FrontLabelFlags:
    """Which "ALTO EM" warnings the front of the package must carry."""

    high_added_sugars: bool = False
    high_saturated_fat: bool = False
    high_sodium: bool = False

    @property
    def requires_warning(self) -> bool:
        return self.high_added_sugars or self.high_saturated_fat or self.high_sodium

    def triggered(self) -> Tuple[Nutrient, ...]:
        """Nutrients whose warning is required, in label order."""
        flagged: List[Nutrient] = []
        if self.high_added_sugars:
            flagged.append(Nutrient.ADDED_SUGARS)
        if self.high_saturated_fat:
            flagged.append(Nutrient.SATURATED_FAT)
        if self.high_sodium:
            flagged.append(Nutrient.SODIUM)
        return tuple(flagged)


@dataclass(frozen=True)
class NutritionResult:
    """Everything computed for one recipe.

    ``per_portion`` and ``per_100g`` are rounded for declaration; the
    ``raw_*`` values and ``daily_values`` keep full precision.
    """

    totals: NutrientValues
    raw_per_portion: NutrientValues
    raw_per_100g: NutrientValues
    per_portion: NutrientValues
    per_100g: NutrientValues
    daily_values: Mapping[str, Decimal]
    display_per_portion: Mapping[str, str]
    display_per_100g: Mapping[str, str]
    front_label: FrontLabelFlags
    product_type: ProductType = ProductType.SOLID

    def daily_value(self, nutrient: Nutrient | str) -> Optional[Decimal]:
        """Unrounded %VD, or None where no reference is established."""
        return self.daily_values.get(Nutrient(nutrient).value)
