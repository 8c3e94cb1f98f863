"""
API middleware and exception handlers.
"""

from cineshare.presentation.api.middleware.error_handler import (
    cineshare_exception_handler,
    request_validation_exception_handler,
)

__all__ = [
    "cineshare_exception_handler",
    "request_validation_exception_handler",
]
