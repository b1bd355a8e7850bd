"""
Connection
==========

Authenticated channel to the Lighthouse server.

This module provides the Connection class which:
    - Performs the authentication handshake
    - Requests the input event stream
    - Uploads frames as binary messages
    - Receives and validates input events

State Machine:
    UNAUTHENTICATED -> AUTHENTICATING -> AUTHENTICATED -> CLOSED
    Any failure during the handshake goes straight to CLOSED.
    The event subscription flag is only meaningful while AUTHENTICATED.

Design Rules:
    - No frame upload or subscription before the handshake succeeded
    - send_frame and receive_input_event use opposite directions of the
      transport and may run concurrently; neither may run concurrently
      with itself
    - Transport failures are fatal: the connection closes and the error
      propagates to the caller, no retries
    - Malformed inbound control messages are logged and skipped
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError

from lighthouse_client.display.codec import FrameCodec
from lighthouse_client.display.frame import LIGHTHOUSE_GEOMETRY, Geometry, PixelFrame
from lighthouse_client.errors import AuthError, StateError, TransportError
from lighthouse_client.models.events import InputEvent, parse_input_event
from lighthouse_client.models.messages import (
    AuthPayload,
    ClientRequest,
    ServerMessage,
    Verb,
)
from lighthouse_client.protocol.credentials import Credentials
from lighthouse_client.protocol.transport import (
    DEFAULT_URL,
    Message,
    Transport,
    WebSocketTransport,
)


logger = logging.getLogger(__name__)

# Status codes that reject a subscription for lack of permission
_AUTH_REJECTION_CODES = frozenset({401, 403})


class ConnectionState(str, Enum):
    """Lifecycle states of a Connection."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    CLOSED = "closed"


class ConnectionMetrics:
    """Metrics for Connection observability."""

    __slots__ = (
        "frames_sent",
        "bytes_sent",
        "events_received",
        "messages_skipped",
    )

    def __init__(self) -> None:
        self.frames_sent: int = 0
        self.bytes_sent: int = 0
        self.events_received: int = 0
        self.messages_skipped: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "frames_sent": self.frames_sent,
            "bytes_sent": self.bytes_sent,
            "events_received": self.events_received,
            "messages_skipped": self.messages_skipped,
        }


class Connection:
    """
    Authenticated connection to one Lighthouse display.

    Attributes:
        credentials: Identity used for the handshake and every request
        codec: FrameCodec for the display geometry
        state: Current ConnectionState
        subscribed: Whether the input event stream was requested
        metrics: Operational metrics

    Example:
        async with await Connection.connect(credentials) as conn:
            await conn.request_event_stream()
            await conn.send_frame(PixelFrame.fill(RED))
            event = await conn.receive_input_event()
    """

    def __init__(
        self,
        transport: Transport,
        credentials: Credentials,
        geometry: Geometry = LIGHTHOUSE_GEOMETRY,
    ) -> None:
        """
        Wrap an already open transport. The connection starts unauthenticated.

        Args:
            transport: Open message transport
            credentials: Identity to authenticate with
            geometry: Display dimensions frames must match
        """
        self.credentials = credentials
        self.codec = FrameCodec(geometry)
        self.metrics = ConnectionMetrics()

        self._transport = transport
        self._state = ConnectionState.UNAUTHENTICATED
        self._subscribed: bool = False
        self._next_reid: int = 0
        self._stream_reid: Optional[int] = None
        self._sending: bool = False
        self._receiving: bool = False

    @classmethod
    async def connect(
        cls,
        credentials: Credentials,
        url: str = DEFAULT_URL,
        geometry: Geometry = LIGHTHOUSE_GEOMETRY,
        auth_timeout: Optional[float] = None,
        **transport_options: Any,
    ) -> "Connection":
        """
        Open a WebSocket transport and authenticate over it.

        Args:
            credentials: Identity to authenticate with
            url: WebSocket URL of the server
            geometry: Display dimensions
            auth_timeout: Optional bound on the handshake, None = wait forever
            **transport_options: Passed to WebSocketTransport.open

        Raises:
            TransportError: If the transport cannot be opened or fails
            AuthError: If the server rejects the credentials
        """
        transport = await WebSocketTransport.open(url, **transport_options)
        connection = cls(transport, credentials, geometry)
        await connection.authenticate(timeout=auth_timeout)
        return connection

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def subscribed(self) -> bool:
        return self._subscribed and self._state is ConnectionState.AUTHENTICATED

    @property
    def closed(self) -> bool:
        return self._state is ConnectionState.CLOSED

    # -------------------------------------------------------------------------
    # Handshake
    # -------------------------------------------------------------------------

    async def authenticate(self, timeout: Optional[float] = None) -> None:
        """
        Run the authentication handshake.

        Args:
            timeout: Optional bound in seconds, None = wait forever

        Raises:
            StateError: If the connection is not UNAUTHENTICATED
            AuthError: If the server rejects the handshake or replies
                with something that is not a valid handshake response
            TransportError: If the transport fails or ends mid-handshake
        """
        if self._state is not ConnectionState.UNAUTHENTICATED:
            raise StateError(
                f"authenticate requires an unauthenticated connection "
                f"(state: {self._state.value})"
            )

        self._state = ConnectionState.AUTHENTICATING
        request = self._build_request(Verb.AUTH)
        logger.info(f"Authenticating as {self.credentials.identifier}")

        succeeded = False
        try:
            await self._transport.send(request.to_json())
            reply = await asyncio.wait_for(
                self._await_reply(request.reid), timeout=timeout
            )
            if not reply.ok:
                raise AuthError(f"Authentication rejected: {reply.describe()}")
            succeeded = True
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"No handshake response within {timeout:.1f}s"
            ) from e
        finally:
            if not succeeded:
                await self._shutdown()

        self._state = ConnectionState.AUTHENTICATED
        logger.info(f"Authenticated as {self.credentials.identifier}")

    async def _await_reply(self, reid: int) -> ServerMessage:
        """Read messages until the reply to `reid` arrives."""
        while True:
            raw = await self._transport.recv()
            if raw is None:
                raise TransportError("Connection closed during handshake")
            if isinstance(raw, (bytes, bytearray)):
                raise AuthError("Malformed handshake response: unexpected binary message")
            try:
                reply = ServerMessage.model_validate_json(raw)
            except ValidationError as e:
                raise AuthError(f"Malformed handshake response: {e}") from e
            if reply.reid == reid:
                return reply
            self.metrics.messages_skipped += 1
            logger.warning(
                f"Ignoring message for request {reply.reid} during handshake"
            )

    # -------------------------------------------------------------------------
    # Outbound
    # -------------------------------------------------------------------------

    async def request_event_stream(self) -> None:
        """
        Ask the server to stream input events to this connection.

        Idempotent: once subscribed, further calls send nothing.

        Raises:
            StateError: If not authenticated (or already closed)
            TransportError: If the request cannot be sent
        """
        self._require_authenticated("request_event_stream")
        if self._subscribed:
            return

        request = self._build_request(Verb.STREAM)
        await self._send(request.to_json())
        self._stream_reid = request.reid
        self._subscribed = True
        logger.info("Requested input event stream")

    async def send_frame(self, frame: PixelFrame) -> None:
        """
        Encode and upload one frame.

        Raises:
            StateError: Before authentication, or if a send is in progress
            ShapeError: If the frame does not match the display geometry
            TransportError: If the connection is closed or the send fails
        """
        if self._state is ConnectionState.CLOSED:
            raise TransportError("Cannot send frame: connection is closed")
        self._require_authenticated("send_frame")
        if self._sending:
            raise StateError("send_frame is already in progress")

        payload = self.codec.encode(frame)
        self._sending = True
        try:
            await self._send(payload)
        finally:
            self._sending = False

        self.metrics.frames_sent += 1
        self.metrics.bytes_sent += len(payload)
        logger.debug(f"Sent frame #{self.metrics.frames_sent} ({len(payload)} bytes)")

    async def _send(self, message: Message) -> None:
        try:
            await self._transport.send(message)
        except TransportError as e:
            logger.error(f"Transport failure while sending: {e}")
            await self._shutdown()
            raise

    # -------------------------------------------------------------------------
    # Inbound
    # -------------------------------------------------------------------------

    async def receive_input_event(self) -> Optional[InputEvent]:
        """
        Wait for the next input event.

        Returns:
            The next InputEvent, or None once the connection is closed

        Raises:
            StateError: Before authentication, or if a receive is in progress
            AuthError: If the server rejects the event subscription
            TransportError: If the transport fails
        """
        if self._state is ConnectionState.CLOSED:
            return None
        self._require_authenticated("receive_input_event")
        if self._receiving:
            raise StateError("receive_input_event is already in progress")

        self._receiving = True
        try:
            while True:
                try:
                    raw = await self._transport.recv()
                except TransportError as e:
                    if self._state is ConnectionState.CLOSED:
                        return None
                    logger.error(f"Transport failure while receiving: {e}")
                    await self._shutdown()
                    raise

                if raw is None:
                    logger.info("Server closed the connection")
                    await self._shutdown()
                    return None

                try:
                    event = self._parse_inbound(raw)
                except AuthError:
                    await self._shutdown()
                    raise

                if event is not None:
                    self.metrics.events_received += 1
                    logger.debug(f"Received input event: {event!r}")
                    return event
        finally:
            self._receiving = False

    def _parse_inbound(self, raw: Message) -> Optional[InputEvent]:
        """
        Turn an inbound message into an event, or None if it carries none.

        Skipped messages are logged and counted.
        """
        if isinstance(raw, (bytes, bytearray)):
            self._skip(f"Ignoring unexpected binary message ({len(raw)} bytes)")
            return None

        try:
            message = ServerMessage.model_validate_json(raw)
        except ValidationError as e:
            self._skip(f"Invalid server message: {e}")
            return None

        if not message.ok:
            if (
                message.reid is not None
                and message.reid == self._stream_reid
                and message.rnum in _AUTH_REJECTION_CODES
            ):
                raise AuthError(
                    f"Event stream subscription rejected: {message.describe()}"
                )
            self._skip(f"Server reported {message.describe()} for request {message.reid}")
            return None

        for warning in message.warnings:
            logger.warning(f"Server warning: {warning}")

        if not message.is_input_event:
            self.metrics.messages_skipped += 1
            logger.debug(f"Acknowledgement for request {message.reid}: {message.describe()}")
            return None

        try:
            return parse_input_event(message.payload)
        except ValidationError as e:
            self._skip(f"Invalid input event payload: {e}")
            return None

    def _skip(self, reason: str) -> None:
        self.metrics.messages_skipped += 1
        logger.warning(reason)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._state is ConnectionState.CLOSED:
            return
        logger.info("Closing connection")
        await self._shutdown()

    async def _shutdown(self) -> None:
        if self._state is ConnectionState.CLOSED:
            return
        self._state = ConnectionState.CLOSED
        self._subscribed = False
        await self._transport.close()

    def _require_authenticated(self, operation: str) -> None:
        if self._state is not ConnectionState.AUTHENTICATED:
            raise StateError(
                f"{operation} requires an authenticated connection "
                f"(state: {self._state.value})"
            )

    def _build_request(self, verb: Verb) -> ClientRequest:
        reid = self._next_reid
        self._next_reid += 1
        return ClientRequest(
            reid=reid,
            verb=verb,
            path=["user", self.credentials.identifier, "model"],
            auth=AuthPayload(
                user=self.credentials.identifier,
                token=self.credentials.token,
            ),
        )

    async def __aenter__(self) -> "Connection":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args) -> None:
        """Async context manager exit."""
        await self.close()


async def connect(
    credentials: Credentials,
    url: str = DEFAULT_URL,
    geometry: Geometry = LIGHTHOUSE_GEOMETRY,
    **options: Any,
) -> Connection:
    """Open and authenticate a Connection. See Connection.connect."""
    return await Connection.connect(credentials, url=url, geometry=geometry, **options)
