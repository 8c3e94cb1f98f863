"""
Feed activity entity.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict
from uuid import uuid4

from cineshare.domain.clock import utc_now


@dataclass
class Activity:
    """Activity pushed on the feed channel (new review, new follow, ...)."""

    type: str
    actor_id: str
    payload: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    def to_event(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "actorId": self.actor_id,
            "payload": self.payload,
            "createdAt": self.created_at.isoformat(),
        }
