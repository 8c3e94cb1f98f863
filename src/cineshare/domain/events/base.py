"""
Base schemas for realtime events.

Every frame on the wire is a JSON object {"event": <name>, "data": <payload>}.
Inbound frames are parsed into one tagged model per event name.
"""

from typing import Annotated, Any, Dict

from pydantic import BaseModel, ConfigDict, StringConstraints

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ClientEvent(BaseModel):
    """
    Base class for client-to-server events.

    Subclasses narrow `event` to a Literal so that the per-channel union
    can be discriminated on it.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    event: str


def server_event(name: str, data: Any = None) -> Dict[str, Any]:
    """Build a server-to-client frame."""
    return {"event": name, "data": data}


def error_event(code: str, message: str, errors: Any = None) -> Dict[str, Any]:
    """Build an error frame sent back on the offending connection."""
    data: Dict[str, Any] = {"code": code, "message": message}
    if errors:
        data["errors"] = errors
    return server_event("error", data)
