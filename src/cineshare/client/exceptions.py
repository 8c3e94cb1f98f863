"""
Client-side exceptions.
"""

from typing import List, Optional

from cineshare.domain.exceptions import CineShareException


class ApiError(CineShareException):
    """
    Non-2xx response from the CineShare API.

    Attributes:
        status_code: HTTP status of the response
        errors: Field errors reported by the server, if any
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: str = "API_ERROR",
        errors: Optional[List[dict]] = None,
    ):
        super().__init__(message, code=code)
        self.status_code = status_code
        self.errors = errors or []


class SessionExpiredError(CineShareException):
    """Raised when the session cannot be refreshed and was cleared."""

    def __init__(self, message: str = "Session expired. Please log in."):
        super().__init__(message, code="SESSION_EXPIRED")
