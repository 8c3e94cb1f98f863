"""
Presence registry.

Process-wide map of user -> presence status, updated on connect,
disconnect and explicit status changes. Every mutation runs under one
asyncio lock, so a connect and a disconnect for the same user can never
interleave. Change events are queued under the lock and sent after it is
released, in the order they happened.
"""

import asyncio
from collections import deque
from datetime import datetime
from typing import Awaitable, Callable, Deque, Dict, List, Optional, Tuple

from shared.reporter import Emoji, SystemReporter

from cineshare.domain.clock import utc_now
from cineshare.domain.entities import PresenceEntry
from cineshare.domain.events.base import server_event
from cineshare.domain.events.presence import PRESENCE_CHANGE
from cineshare.domain.exceptions import ValidationError
from cineshare.domain.services import IPresenceMirror
from cineshare.domain.value_objects import PresenceStatus

PresenceBroadcaster = Callable[[dict], Awaitable[None]]


class PresenceRegistry:
    """
    Presence state machine per user.

    offline -> online   first connection
    online <-> away     explicit status change
    * -> offline        last connection closes

    Attributes:
        entries: Presence entries of connected users
        last_seen: Last disconnect time of users that went offline
    """

    def __init__(
        self,
        broadcaster: Optional[PresenceBroadcaster] = None,
        mirror: Optional[IPresenceMirror] = None,
        reporter: Optional[SystemReporter] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.entries: Dict[str, PresenceEntry] = {}
        self.last_seen: Dict[str, datetime] = {}
        self._broadcaster = broadcaster
        self._mirror = mirror
        self._reporter = reporter
        self._clock = clock
        self._lock = asyncio.Lock()
        self._outbox: Deque[Tuple[str, PresenceStatus, datetime]] = deque()
        self._flushing = False

    async def connect(self, user_id: str, connection_id: str) -> PresenceStatus:
        """
        Register a connection for a user.

        The first connection moves the user to online and broadcasts it.

        Returns:
            Status of the user after the connection
        """
        async with self._lock:
            entry = self.entries.get(user_id)
            is_first = entry is None

            if is_first:
                entry = PresenceEntry(user_id=user_id, status=PresenceStatus.ONLINE)
                self.entries[user_id] = entry

            entry.connection_ids.add(connection_id)
            entry.last_seen_connection_id = connection_id
            entry.updated_at = self._clock()

            if is_first:
                self._log(f"{Emoji.MESSAGE.PRESENCE} User {user_id} is now online")
                self._outbox.append((user_id, PresenceStatus.ONLINE, entry.updated_at))
            else:
                self._log(
                    f"User {user_id} opened another connection "
                    f"({entry.connection_count} active)",
                    verbose_level=2,
                )
            status = entry.status

        await self._flush()
        return status

    async def disconnect(self, user_id: str, connection_id: str) -> PresenceStatus:
        """
        Unregister a connection.

        Closing the last connection moves the user to offline, evicts the
        entry and broadcasts the change.

        Returns:
            Status of the user after the disconnection
        """
        async with self._lock:
            entry = self.entries.get(user_id)
            if entry is None:
                return PresenceStatus.OFFLINE

            entry.connection_ids.discard(connection_id)

            if entry.connection_ids:
                self._log(
                    f"User {user_id} closed {connection_id}, "
                    f"{entry.connection_count} connection(s) remain",
                    verbose_level=2,
                )
                return entry.status

            del self.entries[user_id]
            now = self._clock()
            self.last_seen[user_id] = now

            self._log(f"User {user_id} is now offline")
            self._outbox.append((user_id, PresenceStatus.OFFLINE, now))

        await self._flush()
        return PresenceStatus.OFFLINE

    async def set_status(self, user_id: str, status) -> PresenceStatus:
        """
        Apply a user-chosen status.

        Args:
            user_id: Connected user
            status: "online" or "away"

        Raises:
            ValidationError: If status is not user-selectable or the user
                has no live connection
        """
        try:
            new_status = PresenceStatus(status)
        except ValueError:
            new_status = None

        if new_status not in PresenceStatus.user_settable():
            raise ValidationError.single(
                "status", "Status must be one of: online, away"
            )

        async with self._lock:
            entry = self.entries.get(user_id)
            if entry is None:
                raise ValidationError.single(
                    "userId", "Status can only be set while connected"
                )

            if entry.status == new_status:
                return entry.status

            entry.status = new_status
            entry.updated_at = self._clock()

            self._log(f"User {user_id} set status to {new_status.value}")
            self._outbox.append((user_id, new_status, entry.updated_at))

        await self._flush()
        return new_status

    def get_status(self, user_id: str) -> PresenceStatus:
        entry = self.entries.get(user_id)
        return entry.status if entry else PresenceStatus.OFFLINE

    def get_online_users(self) -> List[str]:
        """Snapshot of users holding at least one connection."""
        return list(self.entries.keys())

    async def check_statuses(self, user_ids: List[str]) -> List[dict]:
        """
        Status and last-seen time for each requested user.

        Users unknown to this process fall back to the mirror, if any.
        """
        results = []
        for user_id in user_ids:
            entry = self.entries.get(user_id)
            if entry is not None:
                results.append(
                    {
                        "userId": user_id,
                        "status": entry.status.value,
                        "lastSeen": entry.updated_at.isoformat(),
                    }
                )
                continue

            mirrored = await self._read_mirror(user_id)
            if mirrored is not None:
                results.append(
                    {
                        "userId": user_id,
                        "status": mirrored["status"].value,
                        "lastSeen": mirrored["lastSeen"],
                    }
                )
                continue

            last_seen = self.last_seen.get(user_id)
            results.append(
                {
                    "userId": user_id,
                    "status": PresenceStatus.OFFLINE.value,
                    "lastSeen": last_seen.isoformat() if last_seen else None,
                }
            )
        return results

    def counts(self) -> Dict[str, int]:
        """Number of users per status (offline counts users seen this run)."""
        counts = {status.value: 0 for status in PresenceStatus}
        for entry in self.entries.values():
            counts[entry.status.value] += 1
        counts[PresenceStatus.OFFLINE.value] = len(
            [u for u in self.last_seen if u not in self.entries]
        )
        return counts

    async def _flush(self) -> None:
        """
        Publish queued changes in the order they were made.

        Runs outside the state lock. Only one caller drains the queue at a
        time; changes queued meanwhile are sent by that caller.
        """
        if self._flushing:
            return

        self._flushing = True
        try:
            while self._outbox:
                await self._publish(*self._outbox.popleft())
        finally:
            self._flushing = False

    async def _publish(
        self, user_id: str, status: PresenceStatus, at: datetime
    ) -> None:
        await self._write_mirror(user_id, status, at)

        if self._broadcaster is None:
            return

        frame = server_event(
            PRESENCE_CHANGE,
            {"userId": user_id, "status": status.value, "timestamp": at.isoformat()},
        )
        try:
            await self._broadcaster(frame)
        except Exception as e:
            if self._reporter:
                self._reporter.error(
                    f"Presence broadcast failed for {user_id}: {type(e).__name__}: {e}",
                    context="PresenceRegistry",
                )

    async def _write_mirror(
        self, user_id: str, status: PresenceStatus, at: datetime
    ) -> None:
        if self._mirror is None:
            return
        try:
            await self._mirror.write(user_id, status, at)
        except Exception as e:
            if self._reporter:
                self._reporter.warning(
                    f"Presence mirror write failed for {user_id}: {e}",
                    context="PresenceRegistry",
                )

    async def _read_mirror(self, user_id: str) -> Optional[dict]:
        if self._mirror is None:
            return None
        try:
            return await self._mirror.read(user_id)
        except Exception as e:
            if self._reporter:
                self._reporter.warning(
                    f"Presence mirror read failed for {user_id}: {e}",
                    context="PresenceRegistry",
                )
            return None

    def _log(self, msg: str, verbose_level: int = 1) -> None:
        if self._reporter:
            self._reporter.info(msg, context="PresenceRegistry", verbose_level=verbose_level)
