"""
Errors
======

Exception hierarchy for the Lighthouse client.

All errors raised by this package derive from LighthouseError so callers
can catch the whole family at once. Failures are always raised, never
returned as sentinel values, with one exception: a cleanly closed
connection is reported by receive_input_event() returning None.

Hierarchy:
    LighthouseError
        ShapeError          - pixel count does not match the geometry
        DecodeError         - malformed frame payload
            BadLengthError      - length is not a multiple of 3
            ShapeMismatchError  - pixel count does not match the geometry
        AuthError           - handshake rejected by the server
        StateError          - operation invalid in the current state
        TransportError      - network failure, fatal to the connection
        ConfigError         - missing or invalid configuration
        SlotClosedError     - put() on a closed FrameSlot
"""


class LighthouseError(Exception):
    """Base class for all Lighthouse client errors."""


class ShapeError(LighthouseError, ValueError):
    """Raised when a pixel sequence does not match the display geometry."""


class DecodeError(LighthouseError):
    """Raised when a frame payload cannot be decoded."""


class BadLengthError(DecodeError):
    """Raised when a payload length is not a multiple of 3."""


class ShapeMismatchError(DecodeError):
    """Raised when a payload holds the wrong number of pixels."""


class AuthError(LighthouseError):
    """Raised when the server rejects the authentication handshake."""


class StateError(LighthouseError):
    """Raised when an operation is invoked in an invalid connection state."""


class TransportError(LighthouseError):
    """Raised when the underlying transport fails or closes unexpectedly."""


class ConfigError(LighthouseError):
    """Raised when required configuration is missing or invalid."""


class SlotClosedError(LighthouseError):
    """Raised when a frame is offered to a closed FrameSlot."""
