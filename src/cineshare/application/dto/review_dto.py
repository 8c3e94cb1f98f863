"""
Review read DTOs.
"""

from dataclasses import dataclass
from typing import Optional

from cineshare.domain.entities import Review


@dataclass
class ReviewView:
    """
    Review as seen by a caller.

    `reported_by_me` is None for anonymous callers.
    """

    review: Review
    reported_by_me: Optional[bool] = None

    def to_response(self) -> dict:
        data = self.review.to_dict()
        if self.reported_by_me is not None:
            data["reportedByMe"] = self.reported_by_me
        return data
