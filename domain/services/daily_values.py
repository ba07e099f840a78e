"""Percent daily value (%VD) calculation.

Percentages are computed from unrounded per-portion values and are never
rounded here; rounding to an integer happens only when formatting.
"""

from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Mapping, Optional

from config.constants import DAILY_VALUE_NOT_ESTABLISHED, VDR_TABLE
from domain.models import Nutrient, NutrientValues


class DailyValueCalculator:
    """Express per-portion amounts as a share of the reference intake."""

    def __init__(self, reference: Mapping[str, Decimal] = VDR_TABLE) -> None:
        self._reference = reference

    def compute(self, per_portion: NutrientValues) -> Mapping[str, Decimal]:
        """Calculate %VD for every nutrient with a reference value.

        Args:
            per_portion: Unrounded values for one portion

        Returns:
            Read-only mapping of nutrient key to percentage. Total sugars
            has no reference and is absent.
        """
        percentages = {
            key: (per_portion.get(key) / reference) * Decimal("100")
            for key, reference in self._reference.items()
        }
        return MappingProxyType(percentages)

    def format(self, nutrient: Nutrient | str, percent: Optional[Decimal]) -> str:
        """Render a %VD for the nutrition table.

        Nutrients without a reference render as "**" (VD não estabelecido).
        """
        if percent is None or Nutrient(nutrient).value not in self._reference:
            return DAILY_VALUE_NOT_ESTABLISHED
        return format(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP), "f")
