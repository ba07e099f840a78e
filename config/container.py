"""Dependency Injection container.

Provides centralized dependency management for the application.
"""

import os
from typing import Optional

from application.use_cases import (
    CalculateNutritionUseCase,
    DetectAllergensUseCase,
    EstimateAddedSugarsUseCase,
    ExportLabelUseCase,
    LoadRecipeUseCase,
    SaveRecipeUseCase,
    SearchFoodsUseCase,
)
from config.constants import ESTIMATE_CACHE_TTL, ESTIMATOR_API_KEY_ENV, SAVES_DIRECTORY
from domain.exceptions import FoodTableError
from domain.services.allergen_detector import AllergenDetector
from domain.services.front_label import FrontLabelClassifier
from domain.services.label_generator import LabelGenerator
from domain.services.nutrition_engine import NutritionEngine
from infrastructure.api.cache import Cache, InMemoryCache
from infrastructure.api.sugar_estimator import (
    AddedSugarEstimator,
    LanguageModelSugarEstimator,
    ProfileSugarEstimator,
    SugarEstimationService,
)
from infrastructure.food_table.taco_repository import TacoFoodRepository
from infrastructure.persistence.excel_exporter import ExcelExporter
from infrastructure.persistence.json_repository import JSONRecipeRepository


class Container:
    """Dependency injection container.

    Provides singleton instances of services and use cases.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        cache: Optional[Cache] = None,
        saves_directory: str = SAVES_DIRECTORY,
        food_table_path: Optional[str] = None,
        fatty_acids_path: Optional[str] = None,
    ) -> None:
        """Initialize container.

        Args:
            api_key: Language model API key (if None, reads from environment;
                without a key added sugars come from ingredient profiles)
            cache: Cache for estimation answers (if None, uses InMemoryCache)
            saves_directory: Directory for saved recipes
            food_table_path: TACO CSV (if None, reads TACO_CSV_PATH)
            fatty_acids_path: TACO fatty-acid CSV (if None, reads TACO_FATTY_ACIDS_PATH)
        """
        self._api_key = api_key or os.getenv(ESTIMATOR_API_KEY_ENV)
        self._cache = cache if cache is not None else InMemoryCache(ttl=ESTIMATE_CACHE_TTL)
        self._saves_directory = saves_directory
        self._food_table_path = food_table_path or os.getenv("TACO_CSV_PATH")
        self._fatty_acids_path = fatty_acids_path or os.getenv("TACO_FATTY_ACIDS_PATH")

        # Lazy-initialized singletons
        self._food_table: Optional[TacoFoodRepository] = None
        self._json_repository: Optional[JSONRecipeRepository] = None
        self._excel_exporter: Optional[ExcelExporter] = None
        self._sugar_estimator: Optional[AddedSugarEstimator] = None
        self._sugar_estimation_service: Optional[SugarEstimationService] = None

        self._nutrition_engine: Optional[NutritionEngine] = None
        self._allergen_detector: Optional[AllergenDetector] = None
        self._front_label_classifier: Optional[FrontLabelClassifier] = None
        self._label_generator: Optional[LabelGenerator] = None

        self._search_foods_use_case: Optional[SearchFoodsUseCase] = None
        self._calculate_nutrition_use_case: Optional[CalculateNutritionUseCase] = None
        self._estimate_added_sugars_use_case: Optional[EstimateAddedSugarsUseCase] = None
        self._detect_allergens_use_case: Optional[DetectAllergensUseCase] = None
        self._save_recipe_use_case: Optional[SaveRecipeUseCase] = None
        self._load_recipe_use_case: Optional[LoadRecipeUseCase] = None
        self._export_label_use_case: Optional[ExportLabelUseCase] = None

    # Infrastructure
    @property
    def food_table(self) -> TacoFoodRepository:
        """Get TACO food table."""
        if self._food_table is None:
            if not self._food_table_path:
                raise FoodTableError(
                    "TACO_CSV_PATH not set. Set environment variable or pass to constructor."
                )
            self._food_table = TacoFoodRepository(
                self._food_table_path,
                fatty_acids_path=self._fatty_acids_path,
            )
        return self._food_table

    @property
    def json_repository(self) -> JSONRecipeRepository:
        """Get JSON recipe repository."""
        if self._json_repository is None:
            self._json_repository = JSONRecipeRepository(base_directory=self._saves_directory)
        return self._json_repository

    @property
    def excel_exporter(self) -> ExcelExporter:
        """Get Excel exporter."""
        if self._excel_exporter is None:
            self._excel_exporter = ExcelExporter(
                label_generator=self.label_generator,
                classifier=self.front_label_classifier,
                allergen_detector=self.allergen_detector,
            )
        return self._excel_exporter

    @property
    def sugar_estimator(self) -> AddedSugarEstimator:
        """Get added-sugar estimator (language model when a key is configured)."""
        if self._sugar_estimator is None:
            if self._api_key:
                self._sugar_estimator = LanguageModelSugarEstimator(
                    api_key=self._api_key,
                    cache=self._cache,
                )
            else:
                self._sugar_estimator = ProfileSugarEstimator()
        return self._sugar_estimator

    @property
    def sugar_estimation_service(self) -> SugarEstimationService:
        if self._sugar_estimation_service is None:
            self._sugar_estimation_service = SugarEstimationService(self.sugar_estimator)
        return self._sugar_estimation_service

    # Domain Services
    @property
    def nutrition_engine(self) -> NutritionEngine:
        """Get nutrition engine."""
        if self._nutrition_engine is None:
            self._nutrition_engine = NutritionEngine(classifier=self.front_label_classifier)
        return self._nutrition_engine

    @property
    def allergen_detector(self) -> AllergenDetector:
        """Get allergen detector."""
        if self._allergen_detector is None:
            self._allergen_detector = AllergenDetector()
        return self._allergen_detector

    @property
    def front_label_classifier(self) -> FrontLabelClassifier:
        if self._front_label_classifier is None:
            self._front_label_classifier = FrontLabelClassifier()
        return self._front_label_classifier

    @property
    def label_generator(self) -> LabelGenerator:
        """Get nutrition table generator."""
        if self._label_generator is None:
            self._label_generator = LabelGenerator()
        return self._label_generator

    # Use Cases
    @property
    def search_foods(self) -> SearchFoodsUseCase:
        """Get search foods use case."""
        if self._search_foods_use_case is None:
            self._search_foods_use_case = SearchFoodsUseCase(self.food_table)
        return self._search_foods_use_case

    @property
    def calculate_nutrition(self) -> CalculateNutritionUseCase:
        """Get calculate nutrition use case."""
        if self._calculate_nutrition_use_case is None:
            self._calculate_nutrition_use_case = CalculateNutritionUseCase(self.nutrition_engine)
        return self._calculate_nutrition_use_case

    @property
    def estimate_added_sugars(self) -> EstimateAddedSugarsUseCase:
        """Get estimate added sugars use case."""
        if self._estimate_added_sugars_use_case is None:
            self._estimate_added_sugars_use_case = EstimateAddedSugarsUseCase(
                self.sugar_estimation_service
            )
        return self._estimate_added_sugars_use_case

    @property
    def detect_allergens(self) -> DetectAllergensUseCase:
        """Get detect allergens use case."""
        if self._detect_allergens_use_case is None:
            self._detect_allergens_use_case = DetectAllergensUseCase(self.allergen_detector)
        return self._detect_allergens_use_case

    @property
    def save_recipe(self) -> SaveRecipeUseCase:
        """Get save recipe use case."""
        if self._save_recipe_use_case is None:
            self._save_recipe_use_case = SaveRecipeUseCase(self.json_repository)
        return self._save_recipe_use_case

    @property
    def load_recipe(self) -> LoadRecipeUseCase:
        """Get load recipe use case."""
        if self._load_recipe_use_case is None:
            self._load_recipe_use_case = LoadRecipeUseCase(self.json_repository)
        return self._load_recipe_use_case

    @property
    def export_label(self) -> ExportLabelUseCase:
        """Get export label use case."""
        if self._export_label_use_case is None:
            self._export_label_use_case = ExportLabelUseCase(
                calculate=self.calculate_nutrition,
                exporter=self.excel_exporter,
            )
        return self._export_label_use_case
