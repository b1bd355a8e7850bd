"""
lighthouse-client
=================

Client library for the Lighthouse pixel display.

This package authenticates against the Lighthouse server, streams rendered
frames to the display and receives input events back over one connection.

Components:
    - display: PixelFrame and the binary FrameCodec
    - models: Color, input events and wire message schemas
    - protocol: Credentials, transport and the Connection state machine
    - stream: FrameSlot hand-off, PeriodicProducer and EventMultiplexer
    - apps: example applications (snake)

Example:
    from lighthouse_client import Connection, Credentials, PixelFrame, RED

    async with await Connection.connect(Credentials.from_env()) as conn:
        await conn.send_frame(PixelFrame.fill(RED))
"""

__version__ = "0.1.0"

from lighthouse_client.errors import (
    AuthError,
    BadLengthError,
    ConfigError,
    DecodeError,
    LighthouseError,
    ShapeError,
    ShapeMismatchError,
    SlotClosedError,
    StateError,
    TransportError,
)
from lighthouse_client.models import (
    BLACK,
    BLUE,
    CYAN,
    GREEN,
    MAGENTA,
    RED,
    WHITE,
    YELLOW,
    Color,
    InputEvent,
    KeyEvent,
    StatusEvent,
    TapEvent,
)
from lighthouse_client.display import (
    LIGHTHOUSE_COLS,
    LIGHTHOUSE_GEOMETRY,
    LIGHTHOUSE_ROWS,
    LIGHTHOUSE_SIZE,
    FrameCodec,
    Geometry,
    PixelFrame,
    decode_frame,
    encode_frame,
)
from lighthouse_client.protocol import (
    Connection,
    ConnectionState,
    Credentials,
    WebSocketTransport,
    connect,
)
from lighthouse_client.stream import (
    EventMultiplexer,
    FrameSlot,
    PeriodicProducer,
    StopReason,
)

__all__ = [
    "__version__",
    # Errors
    "LighthouseError",
    "ShapeError",
    "DecodeError",
    "BadLengthError",
    "ShapeMismatchError",
    "AuthError",
    "StateError",
    "TransportError",
    "ConfigError",
    "SlotClosedError",
    # Models
    "Color",
    "BLACK",
    "WHITE",
    "RED",
    "GREEN",
    "BLUE",
    "YELLOW",
    "CYAN",
    "MAGENTA",
    "InputEvent",
    "TapEvent",
    "KeyEvent",
    "StatusEvent",
    # Display
    "LIGHTHOUSE_ROWS",
    "LIGHTHOUSE_COLS",
    "LIGHTHOUSE_SIZE",
    "LIGHTHOUSE_GEOMETRY",
    "Geometry",
    "PixelFrame",
    "FrameCodec",
    "encode_frame",
    "decode_frame",
    # Protocol
    "Credentials",
    "Connection",
    "ConnectionState",
    "WebSocketTransport",
    "connect",
    # Stream
    "FrameSlot",
    "PeriodicProducer",
    "EventMultiplexer",
    "StopReason",
]
