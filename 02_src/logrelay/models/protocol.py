"""Subscriber wire protocol: inbound commands and outbound messages."""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from ..errors import UnknownSubscriberAction
from .events import Event


class RegisterCommand(BaseModel):
    """Start (or re-target) watching a session key."""

    action: Literal["register"]
    key: str = Field(min_length=1)


class ClearCommand(BaseModel):
    """Empty a session key's history and notify its subscribers."""

    action: Literal["clear"]
    key: str = Field(min_length=1)


Command = Annotated[Union[RegisterCommand, ClearCommand], Field(discriminator="action")]

_command_adapter: TypeAdapter[Command] = TypeAdapter(Command)

KNOWN_ACTIONS = ("register", "clear")


def parse_command(data: Any) -> RegisterCommand | ClearCommand:
    """Validate a decoded subscriber message.

    Raises:
        UnknownSubscriberAction: unrecognized action or missing/empty key.
    """
    if not isinstance(data, dict) or "action" not in data:
        raise UnknownSubscriberAction("Invalid message format")

    action = data["action"]
    if action not in KNOWN_ACTIONS:
        raise UnknownSubscriberAction(f"Unknown action: {action}")

    try:
        return _command_adapter.validate_python(data)
    except ValidationError:
        raise UnknownSubscriberAction("Key is required")


def log_message(event: Event) -> dict[str, Any]:
    return {"type": "log", **event.to_dict()}


def registered_message(key: str, events: list[Event]) -> dict[str, Any]:
    return {
        "type": "registered",
        "key": key,
        "bufferedLogs": [log_message(event) for event in events],
    }


def cleared_message() -> dict[str, Any]:
    return {"type": "cleared"}


def error_message(error: str) -> dict[str, Any]:
    return {"type": "error", "error": error}
