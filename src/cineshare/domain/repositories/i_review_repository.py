"""
Review and review report repository interfaces.
"""

from abc import ABC, abstractmethod
from typing import Optional

from cineshare.domain.entities import Review, ReviewReport


class IReviewRepository(ABC):
    """Read access to reviews owned by the review CRUD module."""

    @abstractmethod
    async def get_by_id(self, review_id: str) -> Optional[Review]:
        """Get review by ID."""

    @abstractmethod
    async def create(self, review: Review) -> Review:
        """Persist a review."""


class IReviewReportRepository(ABC):
    """Interface for review report persistence operations."""

    @abstractmethod
    async def create(self, report: ReviewReport) -> ReviewReport:
        """
        Persist a report.

        Raises:
            ConflictError: If the user already reported this review
        """

    @abstractmethod
    async def get_by_user_and_review(
        self, user_id: str, review_id: str
    ) -> Optional[ReviewReport]:
        """Get the report a user filed against a review, if any."""
