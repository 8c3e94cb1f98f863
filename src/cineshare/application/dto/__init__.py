"""
Application DTOs.
"""

from cineshare.application.dto.auth_dto import AuthResult
from cineshare.application.dto.review_dto import ReviewView

__all__ = [
    "AuthResult",
    "ReviewView",
]
