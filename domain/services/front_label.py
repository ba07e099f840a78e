"""Front-of-package warning classification (RDC 429/2020)."""

from typing import List, Mapping

from config.constants import FRONT_LABEL_LIMITS, FRONT_LABEL_WARNINGS, FrontLabelThresholds
from domain.models import FrontLabelFlags, NutrientValues, ProductType


class FrontLabelClassifier:
    """Flag the "ALTO EM" warnings a product must carry.

    Stateless. Each flag is evaluated on its own against the per-100 g/ml
    limits of the product type, and a limit that is exactly met counts.
    """

    def __init__(
        self,
        limits: Mapping[str, FrontLabelThresholds] = FRONT_LABEL_LIMITS,
    ) -> None:
        self._limits = limits

    def thresholds_for(self, product_type: ProductType | str) -> FrontLabelThresholds:
        return self._limits[ProductType(product_type).value]

    def classify(
        self,
        per_100g: NutrientValues,
        product_type: ProductType | str,
    ) -> FrontLabelFlags:
        """Compare unrounded per-100 g values with the product's limits."""
        limits = self.thresholds_for(product_type)
        return FrontLabelFlags(
            high_added_sugars=per_100g.added_sugars >= limits.added_sugars_g,
            high_saturated_fat=per_100g.saturated_fat >= limits.saturated_fat_g,
            high_sodium=per_100g.sodium >= limits.sodium_mg,
        )

    def warning_texts(self, flags: FrontLabelFlags) -> List[str]:
        """Texts of the required magnifying-glass symbols, in label order."""
        return [FRONT_LABEL_WARNINGS[nutrient.value] for nutrient in flags.triggered()]
