"""Allergen inference from ingredient names (RDC 26/2015)."""

from __future__ import annotations

import unicodedata
from typing import Iterable, List, Mapping, Sequence, Tuple

from config.constants import ALLERGEN_DISPLAY_NAMES, ALLERGEN_KEYWORDS


def _fold(text: str) -> str:
    """Lowercase and strip accents so "Camarão" matches "camarao"."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


class AllergenDetector:
    """Suggest the allergens a recipe contains from its ingredient names.

    Matching is substring based, so the result is a suggestion the user
    confirms before it goes on the label.
    """

    def __init__(
        self,
        keywords: Mapping[str, Sequence[str]] = ALLERGEN_KEYWORDS,
        display_names: Mapping[str, str] = ALLERGEN_DISPLAY_NAMES,
    ) -> None:
        self._keywords: List[Tuple[str, Tuple[str, ...]]] = [
            (allergen, tuple(_fold(word) for word in words))
            for allergen, words in keywords.items()
        ]
        self._display_names = display_names

    def infer(self, ingredient_names: Iterable[str]) -> List[str]:
        """Allergen keys found in the names, in order of first detection."""
        found: List[str] = []
        for name in ingredient_names:
            folded = _fold(name)
            for allergen, words in self._keywords:
                if allergen in found:
                    continue
                if any(word in folded for word in words):
                    found.append(allergen)
        return found

    def display_name(self, allergen: str) -> str:
        return self._display_names.get(allergen, allergen.upper())

    def declaration_texts(
        self,
        contains: Sequence[str],
        may_contain: Sequence[str] = (),
    ) -> List[str]:
        """Allergen statements for the package.

        Example: ["ALÉRGICOS: CONTÉM LEITE, OVOS.", "ALÉRGICOS: PODE CONTER SOJA."]
        """
        texts: List[str] = []
        if contains:
            names = ", ".join(self.display_name(a) for a in contains)
            texts.append(f"ALÉRGICOS: CONTÉM {names}.")
        if may_contain:
            names = ", ".join(self.display_name(a) for a in may_contain)
            texts.append(f"ALÉRGICOS: PODE CONTER {names}.")
        return texts
