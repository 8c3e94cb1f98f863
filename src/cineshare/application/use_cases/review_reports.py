"""
Review report use cases.
"""

from dataclasses import dataclass
from typing import Optional

from cineshare.application.dto import ReviewView
from cineshare.domain.entities import ReviewReport
from cineshare.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ValidationError,
)
from cineshare.domain.repositories import IReviewReportRepository, IReviewRepository
from cineshare.domain.value_objects import ReportReason

DETAILS_MAX_LENGTH = 500


@dataclass
class ReportReviewCommand:
    """Command to report a review."""

    user_id: str
    review_id: str
    reason: str
    details: Optional[str] = None


class ReportReview:
    """
    Use case for reporting a review.

    A user can report a given review once.
    """

    def __init__(
        self,
        review_repository: IReviewRepository,
        report_repository: IReviewReportRepository,
    ):
        """
        Initialize use case.

        Args:
            review_repository: Review repository
            report_repository: Review report repository
        """
        self.review_repository = review_repository
        self.report_repository = report_repository

    async def execute(self, command: ReportReviewCommand) -> ReviewReport:
        """
        Report review.

        Raises:
            ValidationError: Unknown reason or details too long
            EntityNotFoundError: If the review does not exist
            ConflictError: If the user already reported this review
        """
        try:
            reason = ReportReason(command.reason)
        except ValueError:
            allowed = ", ".join(r.value for r in ReportReason)
            raise ValidationError.single("reason", f"Reason must be one of: {allowed}")

        details = (command.details or "").strip() or None
        if details and len(details) > DETAILS_MAX_LENGTH:
            raise ValidationError.single(
                "details", f"Details must be at most {DETAILS_MAX_LENGTH} characters"
            )

        review = await self.review_repository.get_by_id(command.review_id)
        if not review:
            raise EntityNotFoundError("Review", command.review_id)

        existing = await self.report_repository.get_by_user_and_review(
            command.user_id, command.review_id
        )
        if existing:
            raise ConflictError("You have already reported this review")

        return await self.report_repository.create(
            ReviewReport(
                user_id=command.user_id,
                review_id=command.review_id,
                reason=reason,
                details=details,
            )
        )


class GetReview:
    """Loads a review, flagging whether the caller reported it."""

    def __init__(
        self,
        review_repository: IReviewRepository,
        report_repository: IReviewReportRepository,
    ):
        self.review_repository = review_repository
        self.report_repository = report_repository

    async def execute(self, review_id: str, user_id: Optional[str] = None) -> ReviewView:
        review = await self.review_repository.get_by_id(review_id)
        if not review:
            raise EntityNotFoundError("Review", review_id)

        if user_id is None:
            return ReviewView(review=review)

        report = await self.report_repository.get_by_user_and_review(user_id, review_id)
        return ReviewView(review=review, reported_by_me=report is not None)
