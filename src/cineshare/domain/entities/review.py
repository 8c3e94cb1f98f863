"""
Review and review report entities.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4

from cineshare.domain.clock import utc_now
from cineshare.domain.value_objects import ReportReason


@dataclass
class Review:
    """Movie review written by a user."""

    author_id: str
    movie_id: int
    content: str
    rating: int
    title: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "authorId": self.author_id,
            "movieId": self.movie_id,
            "title": self.title,
            "content": self.content,
            "rating": self.rating,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class ReviewReport:
    """A user's report against a review. One per (user, review)."""

    user_id: str
    review_id: str
    reason: ReportReason
    details: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "reviewId": self.review_id,
            "reason": self.reason.value,
            "details": self.details,
            "createdAt": self.created_at.isoformat(),
        }
