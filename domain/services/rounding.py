"""Declaration rounding rules (IN 75/2020, Annex IV).

Two stages are applied to every declared value: the zero rule, which
declares insignificant amounts as exactly zero, and then magnitude-tiered
rounding. Display strings are derived from the rounded numbers only.
"""

from __future__ import annotations

from dataclasses import fields
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Tuple

from config.constants import KCAL_TO_KJ, ZERO_LIMITS
from domain.models import Nutrient, NutrientValues

_ONE = Decimal("1")
_TENTH = Decimal("0.1")
_HUNDREDTH = Decimal("0.01")
_TEN = Decimal("10")

# Units whose sub-unit values keep two decimals.
_FINE_UNITS = {"mg", "kcal", "kj"}


def apply_zero_rule(value: Decimal, nutrient: Nutrient | str) -> Decimal:
    """Declare value as zero when it does not exceed the nutrient's limit.

    Nutrients without a limit (total and added sugars, kJ) pass through.
    """
    limit = ZERO_LIMITS.get(Nutrient(nutrient).value)
    if limit is not None and value <= limit:
        return Decimal("0")
    return value


def _collapse(value: Decimal) -> Decimal:
    """Drop the fractional digits of a whole number (5.0 -> 5)."""
    if value == value.to_integral_value():
        return value.quantize(_ONE)
    return value


def round_value(value: Decimal, unit: str) -> Decimal:
    """Round a declared value to the precision its magnitude allows.

    - >= 10: nearest integer
    - [1, 10): one decimal, whole results collapse to an integer
    - < 1: one decimal for grams; two decimals for mg, kcal and kJ,
      collapsing to one decimal when the second is zero
    """
    if value == 0:
        return Decimal("0")
    if value >= _TEN:
        return value.quantize(_ONE, rounding=ROUND_HALF_UP)
    if value >= _ONE:
        return _collapse(value.quantize(_TENTH, rounding=ROUND_HALF_UP))

    if unit.lower() in _FINE_UNITS:
        rounded = value.quantize(_HUNDREDTH, rounding=ROUND_HALF_UP)
        if rounded == rounded.quantize(_TENTH):
            rounded = rounded.quantize(_TENTH)
    else:
        rounded = value.quantize(_TENTH, rounding=ROUND_HALF_UP)
    return _collapse(rounded)


def format_display_value(value: Decimal, unit: str) -> str:
    """Render a declared value without its unit.

    Zero renders as "0" and whole numbers without a decimal point.
    """
    if value == 0:
        return "0"
    rounded = round_value(value, unit)
    if rounded == 0:
        return "0"
    return format(rounded, "f")


def declare(value: Decimal, nutrient: Nutrient | str) -> Decimal:
    """Zero rule followed by magnitude rounding."""
    nutrient = Nutrient(nutrient)
    return round_value(apply_zero_rule(value, nutrient), nutrient.unit)


def round_values(values: NutrientValues) -> Tuple[NutrientValues, Dict[str, str]]:
    """Round a full set of values for declaration.

    Args:
        values: Unrounded values on one basis (portion or 100 g)

    Returns:
        Tuple of (rounded values, display strings keyed by nutrient)

    Note:
        kJ is always derived from the declared kcal so the displayed pair
        stays consistent; a raw kJ figure is never rounded on its own.
    """
    rounded: Dict[str, Decimal] = {}
    for f in fields(values):
        if f.name == Nutrient.ENERGY_KJ.value:
            continue
        rounded[f.name] = declare(getattr(values, f.name), f.name)

    rounded[Nutrient.ENERGY_KJ.value] = round_value(
        rounded[Nutrient.ENERGY_KCAL.value] * KCAL_TO_KJ,
        Nutrient.ENERGY_KJ.unit,
    )

    declared = NutrientValues(**rounded)
    display = {
        nutrient.value: format_display_value(declared.get(nutrient), nutrient.unit)
        for nutrient in Nutrient
    }
    return declared, display
