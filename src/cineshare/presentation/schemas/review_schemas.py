"""
Review API schemas.
"""

from typing import Optional

from pydantic import BaseModel


class ReportReviewRequest(BaseModel):
    """Report payload. `reason` is checked against the allowed reasons."""

    reason: str
    details: Optional[str] = None


class ReportResponse(BaseModel):
    id: str
    userId: str
    reviewId: str
    reason: str
    details: Optional[str] = None
    createdAt: str


class ReviewResponse(BaseModel):
    id: str
    authorId: str
    movieId: int
    title: Optional[str] = None
    content: str
    rating: int
    createdAt: str
    reportedByMe: Optional[bool] = None
