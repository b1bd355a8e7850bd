"""
Transport
=========

Reliable, ordered, bidirectional message transport used by Connection.

Connection only relies on the Transport protocol below. The production
implementation runs over a WebSocket; tests substitute an in-memory pair
of queues.

Design Rules:
    - recv() returns None once the peer closed the stream cleanly
    - Every other failure surfaces as TransportError
    - Text messages carry JSON control traffic, binary messages carry frames
"""

import logging
from typing import Any, Optional, Protocol, Union

import websockets
from websockets.exceptions import (
    ConnectionClosedError,
    ConnectionClosedOK,
    WebSocketException,
)

from lighthouse_client.errors import TransportError


logger = logging.getLogger(__name__)

Message = Union[str, bytes]

DEFAULT_URL = "wss://lighthouse.uni-kiel.de/websocket"


class Transport(Protocol):
    """Minimal message transport contract."""

    async def send(self, message: Message) -> None:
        ...

    async def recv(self) -> Optional[Message]:
        ...

    async def close(self) -> None:
        ...


class WebSocketTransport:
    """
    Transport over a websockets client connection.

    Example:
        transport = await WebSocketTransport.open("wss://example.org/websocket")
        await transport.send(b"...")
        message = await transport.recv()
        await transport.close()
    """

    def __init__(self, websocket: Any, url: str = "") -> None:
        self._websocket = websocket
        self.url = url

    @classmethod
    async def open(
        cls,
        url: str = DEFAULT_URL,
        open_timeout: Optional[float] = 10.0,
        ping_interval: Optional[float] = 20.0,
        ping_timeout: Optional[float] = 10.0,
        close_timeout: Optional[float] = 5.0,
    ) -> "WebSocketTransport":
        """
        Open a WebSocket connection.

        Raises:
            TransportError: If the connection cannot be established
        """
        try:
            websocket = await websockets.connect(
                url,
                open_timeout=open_timeout,
                ping_interval=ping_interval,
                ping_timeout=ping_timeout,
                close_timeout=close_timeout,
                max_size=None,
            )
        except (WebSocketException, OSError, TimeoutError) as e:
            raise TransportError(f"Could not connect to {url}: {e}") from e

        logger.info(f"WebSocket connected: {url}")
        return cls(websocket, url)

    async def send(self, message: Message) -> None:
        try:
            await self._websocket.send(message)
        except (WebSocketException, OSError) as e:
            raise TransportError(f"Send failed: {e}") from e

    async def recv(self) -> Optional[Message]:
        try:
            return await self._websocket.recv()
        except ConnectionClosedOK:
            logger.info("WebSocket closed normally")
            return None
        except ConnectionClosedError as e:
            raise TransportError(f"Connection closed with error: {e}") from e
        except (WebSocketException, OSError) as e:
            raise TransportError(f"Receive failed: {e}") from e

    async def close(self) -> None:
        try:
            await self._websocket.close()
        except (WebSocketException, OSError) as e:
            logger.warning(f"Error while closing WebSocket: {e}")
