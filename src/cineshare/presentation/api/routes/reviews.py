"""
Review API routes.

Only the parts of the review surface the realtime service owns:
reading a review with the caller's report flag, and reporting it.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cineshare.application.use_cases import ReportReviewCommand
from cineshare.di import Container
from cineshare.domain.auth import AuthenticatedUser
from cineshare.presentation.api.dependencies import (
    get_container,
    get_db_session,
    optional_user,
    require_user,
)
from cineshare.presentation.schemas.review_schemas import (
    ReportResponse,
    ReportReviewRequest,
    ReviewResponse,
)

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get(
    "/{review_id}",
    response_model=ReviewResponse,
    response_model_exclude_none=True,
)
async def get_review(
    review_id: str,
    current_user: Optional[AuthenticatedUser] = Depends(optional_user),
    session: AsyncSession = Depends(get_db_session),
    container: Container = Depends(get_container),
) -> ReviewResponse:
    """Review details; `reportedByMe` is present for signed-in callers."""
    use_case = container.get_review_use_case(session)
    view = await use_case.execute(
        review_id, user_id=current_user.id if current_user else None
    )
    return ReviewResponse(**view.to_response())


@router.post(
    "/{review_id}/report",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def report_review(
    review_id: str,
    request: ReportReviewRequest,
    current_user: AuthenticatedUser = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
    container: Container = Depends(get_container),
) -> ReportResponse:
    """
    Report a review.

    Raises:
        ValidationError: 422 for an unknown reason
        EntityNotFoundError: 404 if the review does not exist
        ConflictError: 409 if already reported by the caller
    """
    use_case = container.get_report_review_use_case(session)
    report = await use_case.execute(
        ReportReviewCommand(
            user_id=current_user.id,
            review_id=review_id,
            reason=request.reason,
            details=request.details,
        )
    )
    return ReportResponse(**report.to_dict())
