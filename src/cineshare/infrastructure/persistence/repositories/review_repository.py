"""
Review and review report repository implementations.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cineshare.domain.entities import Review, ReviewReport
from cineshare.domain.exceptions import ConflictError
from cineshare.domain.repositories import (
    IReviewReportRepository,
    IReviewRepository,
)
from cineshare.domain.value_objects import ReportReason
from cineshare.infrastructure.persistence.models import (
    ReviewModel,
    ReviewReportModel,
)


class ReviewRepository(IReviewRepository):
    """SQLAlchemy implementation of review repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, review_id: str) -> Optional[Review]:
        stmt = select(ReviewModel).where(ReviewModel.id == review_id)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._to_entity(model) if model else None

    async def create(self, review: Review) -> Review:
        model = ReviewModel(
            id=review.id,
            author_id=review.author_id,
            movie_id=review.movie_id,
            title=review.title,
            content=review.content,
            rating=review.rating,
            created_at=review.created_at,
        )

        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)

        return self._to_entity(model)

    def _to_entity(self, model: ReviewModel) -> Review:
        return Review(
            id=model.id,
            author_id=model.author_id,
            movie_id=model.movie_id,
            title=model.title,
            content=model.content,
            rating=model.rating,
            created_at=model.created_at,
        )


class ReviewReportRepository(IReviewReportRepository):
    """SQLAlchemy implementation of review report repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, report: ReviewReport) -> ReviewReport:
        model = ReviewReportModel(
            id=report.id,
            user_id=report.user_id,
            review_id=report.review_id,
            reason=report.reason.value,
            details=report.details,
            created_at=report.created_at,
        )

        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError:
            raise ConflictError("You have already reported this review")
        await self.session.refresh(model)

        return self._to_entity(model)

    async def get_by_user_and_review(
        self, user_id: str, review_id: str
    ) -> Optional[ReviewReport]:
        stmt = select(ReviewReportModel).where(
            ReviewReportModel.user_id == user_id,
            ReviewReportModel.review_id == review_id,
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._to_entity(model) if model else None

    def _to_entity(self, model: ReviewReportModel) -> ReviewReport:
        return ReviewReport(
            id=model.id,
            user_id=model.user_id,
            review_id=model.review_id,
            reason=ReportReason(model.reason),
            details=model.details,
            created_at=model.created_at,
        )
