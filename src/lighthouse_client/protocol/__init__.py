"""
Protocol Module
===============

Authentication, transport and the connection state machine.

    - Credentials: identifier + secret token
    - Transport / WebSocketTransport: message transport
    - Connection: handshake, frame upload, input event stream

Example:
    from lighthouse_client.protocol import Connection, Credentials

    conn = await Connection.connect(Credentials.from_env())
    await conn.request_event_stream()
"""

from lighthouse_client.protocol.credentials import Credentials
from lighthouse_client.protocol.transport import (
    DEFAULT_URL,
    Transport,
    WebSocketTransport,
)
from lighthouse_client.protocol.connection import (
    Connection,
    ConnectionMetrics,
    ConnectionState,
    connect,
)


__all__ = [
    "Credentials",
    "DEFAULT_URL",
    "Transport",
    "WebSocketTransport",
    "Connection",
    "ConnectionMetrics",
    "ConnectionState",
    "connect",
]
