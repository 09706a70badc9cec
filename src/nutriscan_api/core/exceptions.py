"""Custom exception classes for the API."""

from typing import Any


class APIError(Exception):
    """Base exception for API errors."""

    kind: str = "api"

    def __init__(self, message: str, status_code: int = 400, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(APIError):
    """Validation error (e.g. missing meal name, non-image upload)."""

    kind = "validation"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message=message, status_code=422, details=details)


class AuthenticationError(APIError):
    """Missing, invalid or rejected credentials."""

    kind = "authentication"

    def __init__(self, message: str = "Invalid token", details: Any = None):
        super().__init__(message=message, status_code=401, details=details)


class PersistenceError(APIError):
    """The meal store rejected a read or write."""

    kind = "persistence"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message=message, status_code=500, details=details)


# =============================================================================
# Food analysis pipeline errors
# =============================================================================


class FoodAnalysisError(APIError):
    """
    Failure of one stage of the food analysis pipeline.

    Every stage error is reported as 502: the upstream service (or the
    content it produced) was unusable. The caller decides whether to retry.
    """

    kind = "analysis"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message=message, status_code=502, details=details)


class UploadError(FoodAnalysisError):
    """Image host unreachable or it rejected the upload."""

    kind = "upload"


class ModelError(FoodAnalysisError):
    """Vision endpoint unreachable, non-success status or empty reply."""

    kind = "model"


class ExtractionError(FoodAnalysisError):
    """No parseable JSON object found in the model reply."""

    kind = "extraction"

    def __init__(self, message: str, excerpt: str = ""):
        super().__init__(message=message, details={"excerpt": excerpt})
        self.excerpt = excerpt


class SchemaError(FoodAnalysisError):
    """JSON parsed but the food_items array is missing or malformed."""

    kind = "schema"
