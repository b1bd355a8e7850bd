"""
Data Models
===========

Value types and wire schemas for the Lighthouse client.

Models:
    Color:
        - Color: immutable RGB value plus named constants

    Events:
        - TapEvent, KeyEvent, StatusEvent: input event kinds
        - InputEvent: discriminated union of the kinds above

    Messages:
        - ClientRequest: control request envelope
        - ServerMessage: reply / streamed message envelope
"""

from lighthouse_client.models.color import (
    BLACK,
    BLUE,
    CYAN,
    GREEN,
    MAGENTA,
    RED,
    WHITE,
    YELLOW,
    Color,
)
from lighthouse_client.models.events import (
    InputEvent,
    KeyEvent,
    StatusEvent,
    TapEvent,
    parse_input_event,
)
from lighthouse_client.models.messages import (
    AuthPayload,
    ClientRequest,
    ServerMessage,
    Verb,
)

__all__ = [
    # Color
    "Color",
    "BLACK",
    "WHITE",
    "RED",
    "GREEN",
    "BLUE",
    "YELLOW",
    "CYAN",
    "MAGENTA",
    # Events
    "InputEvent",
    "TapEvent",
    "KeyEvent",
    "StatusEvent",
    "parse_input_event",
    # Messages
    "Verb",
    "AuthPayload",
    "ClientRequest",
    "ServerMessage",
]
