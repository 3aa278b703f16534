"""
Error taxonomy shared by the store, services and HTTP layer.

Validation and not-found errors are raised before any state is touched.
ExternalServiceError never leaves the AI assistant; it is caught there and
turned into fallback content.
"""
from typing import Any, Dict, List, Optional


class FinanceTrackerError(Exception):
    """Base class for every error raised on purpose by fintrack."""

    message: str = "Finance tracker error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(FinanceTrackerError):
    message = "Invalid data"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, detail: str, message: Optional[str] = None) -> "ValidationError":
        return cls(message or detail, errors=[{"field": field, "message": detail}])


class NotFoundError(FinanceTrackerError):
    def __init__(self, kind: str, entity_id: Any) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} not found")


class ExternalServiceError(FinanceTrackerError):
    message = "External service failure"


class InternalError(FinanceTrackerError):
    message = "Internal server error"
