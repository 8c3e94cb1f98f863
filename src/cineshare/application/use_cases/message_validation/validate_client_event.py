"""
Client event validation use case.

Parses raw WebSocket text into the event model of the channel it came
in on. Every failure is reported as a ValidationError listing the
failing fields.
"""

import json
from typing import Any, Dict, List

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from cineshare.domain.events import (
    FeedClientEvent,
    MessagingClientEvent,
    NotificationClientEvent,
    PresenceClientEvent,
)
from cineshare.domain.exceptions import FieldError, ValidationError
from cineshare.domain.value_objects import ChannelName


class ValidateClientEventUseCase:
    """
    Use case for validating client-to-server frames.

    Checks, in order: size, JSON syntax, top-level object, then the
    channel's tagged event union.
    """

    EVENT_SCHEMAS = {
        ChannelName.NOTIFICATIONS.value: TypeAdapter(NotificationClientEvent),
        ChannelName.PRESENCE.value: TypeAdapter(PresenceClientEvent),
        ChannelName.FEED.value: TypeAdapter(FeedClientEvent),
        ChannelName.MESSAGES.value: TypeAdapter(MessagingClientEvent),
    }

    def __init__(self, max_message_size: int = 65_536):
        """
        Initialize validator.

        Args:
            max_message_size: Maximum frame size in bytes
        """
        self.max_message_size = max_message_size

    def execute(self, channel: str, raw_message: str) -> Any:
        """
        Validate a frame.

        Args:
            channel: Channel the frame arrived on
            raw_message: Raw text frame

        Returns:
            Parsed event model (one of the channel's ClientEvent subclasses)

        Raises:
            ValidationError: If the frame is oversized, not JSON, not an
                object or does not match any event of the channel
        """
        size_bytes = len(raw_message.encode("utf-8"))
        if size_bytes > self.max_message_size:
            raise ValidationError.single(
                "message",
                f"Message size {size_bytes} bytes exceeds maximum allowed "
                f"{self.max_message_size} bytes",
            )

        try:
            frame = json.loads(raw_message)
        except json.JSONDecodeError as e:
            raise ValidationError.single("message", f"Invalid JSON: {e.msg}")

        if not isinstance(frame, dict):
            raise ValidationError.single("message", "Message must be a JSON object")

        adapter = self.EVENT_SCHEMAS[ChannelName(channel).value]
        try:
            return adapter.validate_python(frame)
        except PydanticValidationError as e:
            raise ValidationError(self._field_errors(e, frame))

    @staticmethod
    def _field_errors(
        error: PydanticValidationError, frame: Dict[str, Any]
    ) -> List[FieldError]:
        """Flatten pydantic errors, dropping the union tag from locations."""
        tag = frame.get("event")
        errors = []
        for item in error.errors():
            loc = list(item["loc"])
            if loc and loc[0] == tag:
                loc = loc[1:]
            field = ".".join(str(part) for part in loc) or "event"
            errors.append(FieldError(field=field, message=item["msg"]))
        return errors
