"""
Presence entry entity.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Set

from cineshare.domain.clock import utc_now
from cineshare.domain.value_objects import PresenceStatus


@dataclass
class PresenceEntry:
    """
    Presence state of one connected user.

    An entry exists only while the user holds at least one connection.
    """

    user_id: str
    status: PresenceStatus = PresenceStatus.ONLINE
    connection_ids: Set[str] = field(default_factory=set)
    last_seen_connection_id: Optional[str] = None
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def connection_count(self) -> int:
        return len(self.connection_ids)
