"""
Input Events
============

Pydantic models for input events streamed back from the display.

The set of event kinds is fixed by the server protocol, so InputEvent is a
closed union discriminated on the `kind` field rather than an open class
hierarchy.

Input Contract (PAYL of a streamed server message):
    {"kind": "tap", "x": 3, "y": 12, "source": 0}
    {"kind": "key", "key": 37, "down": true, "source": 0}
    {"kind": "status", "status": "online", "detail": null}

Example:
    event = parse_input_event({"kind": "key", "key": 38, "down": True})
    if isinstance(event, KeyEvent) and event.down:
        ...
"""

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class TapEvent(BaseModel):
    """
    A tap or click on a display coordinate.

    Attributes:
        x: Column that was touched
        y: Row that was touched
        source: Identifier of the client that produced the event
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["tap"] = "tap"
    x: int = Field(..., ge=0, description="Column of the tapped pixel")
    y: int = Field(..., ge=0, description="Row of the tapped pixel")
    source: int = Field(default=0, description="Originating client id")


class KeyEvent(BaseModel):
    """
    A key press or release.

    Attributes:
        key: JavaScript-style key code (e.g. 37 = left arrow)
        down: True on press, False on release
        source: Identifier of the client that produced the event
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["key"] = "key"
    key: int = Field(..., description="Key code")
    down: bool = Field(..., description="Whether the key went down")
    source: int = Field(default=0, description="Originating client id")


class StatusEvent(BaseModel):
    """A device status notification."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["status"] = "status"
    status: str = Field(..., min_length=1, description="Status keyword")
    detail: Optional[str] = Field(default=None, description="Free-form detail")


InputEvent = Annotated[
    Union[TapEvent, KeyEvent, StatusEvent],
    Field(discriminator="kind"),
]

_input_event_adapter: TypeAdapter = TypeAdapter(InputEvent)


def parse_input_event(payload: Dict[str, Any]) -> Union[TapEvent, KeyEvent, StatusEvent]:
    """
    Validate a decoded payload into one of the input event models.

    Raises:
        pydantic.ValidationError: If the payload matches no event kind
    """
    return _input_event_adapter.validate_python(payload)
