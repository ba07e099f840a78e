"""Added-sugar estimation.

The nutrition engine takes the recipe's added sugars as a declared figure.
This module produces a suggestion for that figure, either from the
ingredients' own profiles or by asking a hosted language model, ingredient
by ingredient.
"""

import logging
import os
import re
import threading
import unicodedata
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Sequence, Tuple

import requests
from dotenv import load_dotenv
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from config.constants import (
    API_CONNECT_TIMEOUT,
    API_MAX_RETRY_ATTEMPTS,
    API_READ_TIMEOUT,
    API_RETRY_BACKOFF_FACTOR,
    API_RETRY_STATUS_CODES,
    ESTIMATOR_API_KEY_ENV,
    ESTIMATOR_API_URL,
    ESTIMATOR_MAX_OUTPUT_TOKENS,
    ESTIMATOR_TEMPERATURE,
    PURE_SUGAR_KEYWORDS,
)
from domain.exceptions import (
    APIKeyMissingError,
    APIRateLimitError,
    APITimeoutError,
    EstimationCancelledError,
    EstimatorHTTPError,
)
from domain.models import IngredientLine
from domain.services.number_parser import parse_number
from infrastructure.api.cache import Cache, InMemoryCache

load_dotenv()

_NUMBER_PATTERN = re.compile(r"\d+(?:[.,]\d+)?")

_PROMPT_TEMPLATE = """Quantos gramas de açúcares adicionados (açúcar refinado, mel, xarope, etc.) existem em {quantity}g de {name}?
Responda APENAS com o número (sem unidade, sem texto adicional).
Exemplos:
- 100g de achocolatado em pó: 20
- 50g de açúcar refinado: 50
- 100g de arroz: 0
- 200g de refrigerante de cola: 22
- 100g de bolacha recheada: 25"""


def _fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text.lower().strip())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


_PURE_SUGAR_PATTERNS = tuple(
    re.compile(rf"^{re.escape(_fold(keyword))}\b") for keyword in PURE_SUGAR_KEYWORDS
)


def is_pure_sugar(name: str) -> bool:
    """True when the ingredient is itself an added sugar (sugar, honey, syrup)."""
    folded = _fold(name)
    return any(pattern.match(folded) for pattern in _PURE_SUGAR_PATTERNS)


@dataclass(frozen=True)
class SugarEstimate:
    """Suggested added sugars for a recipe."""

    total_g: Decimal
    per_ingredient: Tuple[Tuple[str, Decimal], ...] = ()


class AddedSugarEstimator(ABC):
    """Estimate the added sugars one ingredient line brings to a recipe."""

    @abstractmethod
    def estimate_line(self, line: IngredientLine) -> Decimal:
        """Grams of added sugars in the line's quantity."""


class ProfileSugarEstimator(AddedSugarEstimator):
    """Use the added-sugar figure stored in the ingredient's profile."""

    def estimate_line(self, line: IngredientLine) -> Decimal:
        return line.nutrient_amount("added_sugars")


class LanguageModelSugarEstimator(AddedSugarEstimator):
    """Ask a hosted generative language model for each ingredient."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        cache: Optional[Cache] = None,
        session: Optional[requests.Session] = None,
        api_url: str = ESTIMATOR_API_URL,
    ) -> None:
        """Initialize estimator.

        Args:
            api_key: Model API key (if None, reads GEMINI_API_KEY from environment)
            cache: Cache for answers (if None, uses InMemoryCache)
            session: HTTP session (if None, creates one with retries)
            api_url: generateContent endpoint
        """
        self._api_key = api_key or os.getenv(ESTIMATOR_API_KEY_ENV)
        if not self._api_key:
            raise APIKeyMissingError(
                f"{ESTIMATOR_API_KEY_ENV} not found. Set environment variable or pass to constructor."
            )
        self._api_url = api_url
        self._cache = cache if cache is not None else InMemoryCache()
        self._session = session if session is not None else self._create_session()

    def _create_session(self) -> requests.Session:
        """Create HTTP session that retries throttled and failed calls.

        Retry-After sent with a 429 or 503 is honored before the next attempt.
        """
        session = requests.Session()

        retries = Retry(
            total=API_MAX_RETRY_ATTEMPTS,
            connect=API_MAX_RETRY_ATTEMPTS,
            read=API_MAX_RETRY_ATTEMPTS,
            backoff_factor=API_RETRY_BACKOFF_FACTOR,
            status_forcelist=API_RETRY_STATUS_CODES,
            allowed_methods=("POST",),
            respect_retry_after_header=True,
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retries)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    def estimate_line(self, line: IngredientLine) -> Decimal:
        cache_key = (line.name.strip().lower(), line.quantity_g)
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached  # type: ignore[return-value]

        prompt = _PROMPT_TEMPLATE.format(
            quantity=format(line.quantity_g.normalize(), "f"),
            name=line.name.strip(),
        )
        reply = self._generate(prompt)
        grams = self._parse_grams(reply)

        if grams > line.quantity_g:
            logging.warning(
                "Model answered %sg of added sugars for %sg of %s; capping at quantity",
                grams,
                line.quantity_g,
                line.name,
            )
            grams = line.quantity_g

        self._cache.set(cache_key, grams)
        return grams

    def _generate(self, prompt: str) -> str:
        """Send one prompt and return the text of the first candidate."""
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": ESTIMATOR_TEMPERATURE,
                "maxOutputTokens": ESTIMATOR_MAX_OUTPUT_TOKENS,
            },
        }

        try:
            response = self._session.post(
                self._api_url,
                params={"key": self._api_key},
                json=body,
                timeout=(API_CONNECT_TIMEOUT, API_READ_TIMEOUT),
            )
            response.raise_for_status()

        except requests.Timeout as exc:
            raise APITimeoutError(f"Timeout calling language model API: {exc}") from exc

        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            if status == 429:
                raise APIRateLimitError(
                    "Language model API still throttling after retries",
                    status_code=status,
                ) from exc
            raise EstimatorHTTPError(
                f"HTTP error calling language model API: {exc}",
                status_code=status,
            ) from exc

        except requests.RequestException as exc:
            raise EstimatorHTTPError(f"Network error calling language model API: {exc}") from exc

        return self._extract_text(response.json())

    @staticmethod
    def _extract_text(payload: Dict[str, Any]) -> str:
        try:
            return payload["candidates"][0]["content"]["parts"][0]["text"] or ""
        except (KeyError, IndexError, TypeError):
            logging.debug("Language model reply without text: %s", payload)
            return ""

    @staticmethod
    def _parse_grams(reply: str) -> Decimal:
        """First number in the reply; an answer without a number counts as zero."""
        match = _NUMBER_PATTERN.search(reply or "")
        if match is None:
            return Decimal("0")
        grams = parse_number(match.group(0))
        return grams if grams is not None else Decimal("0")


class SugarEstimationService:
    """Run estimation batches for a recipe's ingredient list.

    Requests within a batch are sent one after another, never in parallel,
    so at most one request is in flight. Starting a new batch supersedes
    the one running: it stops before its next request.
    """

    def __init__(self, estimator: AddedSugarEstimator) -> None:
        self._estimator = estimator
        self._generation = 0
        self._generation_lock = threading.Lock()
        self._request_lock = threading.Lock()

    def estimate(
        self,
        ingredients: Sequence[IngredientLine],
        cancel: Optional[threading.Event] = None,
    ) -> SugarEstimate:
        """Estimate added sugars for every ingredient.

        Ingredients that are sugar themselves count with their whole
        quantity without consulting the estimator.

        Args:
            ingredients: Ingredient lines of the recipe
            cancel: Optional event that stops the batch when set

        Returns:
            SugarEstimate with the total rounded to 0.1 g

        Raises:
            EstimationCancelledError: If cancelled or superseded
        """
        with self._generation_lock:
            self._generation += 1
            generation = self._generation

        per_ingredient = []
        for line in ingredients:
            self._check_active(generation, cancel)
            if is_pure_sugar(line.name):
                grams = line.quantity_g
            else:
                with self._request_lock:
                    self._check_active(generation, cancel)
                    grams = self._estimator.estimate_line(line)
            logging.debug("Added sugars for %s (%sg): %sg", line.name, line.quantity_g, grams)
            per_ingredient.append((line.name, grams))

        total = sum((grams for _, grams in per_ingredient), Decimal("0"))
        return SugarEstimate(
            total_g=total.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP),
            per_ingredient=tuple(per_ingredient),
        )

    def _check_active(self, generation: int, cancel: Optional[threading.Event]) -> None:
        if cancel is not None and cancel.is_set():
            raise EstimationCancelledError("Added-sugar estimation cancelled")
        if generation != self._generation:
            raise EstimationCancelledError("Added-sugar estimation superseded by newer input")
