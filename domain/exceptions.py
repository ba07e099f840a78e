"""Domain-specific exceptions.

Custom exceptions provide better error handling and clearer intent
than generic exceptions.
"""


class LabelingError(Exception):
    """Base exception for all application errors."""


# ============================================================================
# Domain Errors
# ============================================================================


class InvalidRecipeError(LabelingError):
    """Raised when recipe data violates a calculation precondition."""


class InvalidIngredientError(LabelingError):
    """Raised when ingredient data is invalid."""


# ============================================================================
# Infrastructure Errors
# ============================================================================


class EstimatorError(LabelingError):
    """Base exception for added-sugar estimation errors."""


class EstimatorHTTPError(EstimatorError):
    """HTTP error with status code context."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class APIKeyMissingError(EstimatorError):
    """Raised when the language model API key is not configured."""


class APITimeoutError(EstimatorError):
    """Raised when an estimation request times out."""


class APIRateLimitError(EstimatorHTTPError):
    """Raised when throttling persists after all retries."""


class EstimationCancelledError(EstimatorError):
    """Raised when an estimation batch is cancelled or superseded."""


class FoodTableError(LabelingError):
    """Raised when the food composition table cannot be read."""


class FoodNotFoundError(FoodTableError):
    """Raised when a food number is not in the table."""


# ============================================================================
# Persistence Errors
# ============================================================================


class PersistenceError(LabelingError):
    """Base exception for persistence-related errors."""


class RecipeNotFoundError(PersistenceError):
    """Raised when recipe file is not found."""


class InvalidRecipeFileError(PersistenceError):
    """Raised when recipe file is malformed."""


class ExportError(PersistenceError):
    """Raised when export operation fails."""
