"""
Base domain exceptions.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional


class CineShareException(Exception):
    """
    Base exception for all CineShare domain errors.

    Attributes:
        message: Human readable description
        code: Stable machine readable error code
    """

    def __init__(self, message: str, code: str = "CINESHARE_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code


class EntityNotFoundError(CineShareException):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}", code="NOT_FOUND")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(CineShareException):
    """Raised when an action duplicates one already performed."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


@dataclass(frozen=True)
class FieldError:
    """Single failing input field."""

    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class ValidationError(CineShareException):
    """
    Raised when an input payload fails validation.

    Carries every failing field rather than only the first one.
    """

    def __init__(
        self,
        errors: Iterable[FieldError],
        message: Optional[str] = None,
    ):
        self.errors: List[FieldError] = list(errors)
        if message is None:
            fields = ", ".join(e.field for e in self.errors) or "payload"
            message = f"Validation failed for: {fields}"
        super().__init__(message, code="VALIDATION_ERROR")

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        """Build a validation error for one field."""
        return cls([FieldError(field=field, message=message)], message=message)

    def to_list(self) -> List[dict]:
        return [e.to_dict() for e in self.errors]
