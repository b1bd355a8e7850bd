"""
Test Configuration
==================

Pytest fixtures and test configuration for lighthouse-client.
"""

import asyncio
import json
from typing import Callable, List, Optional, Union

import pytest

from lighthouse_client.display.frame import Geometry
from lighthouse_client.errors import TransportError
from lighthouse_client.protocol.connection import Connection
from lighthouse_client.protocol.credentials import Credentials


class FakeTransport:
    """
    In-memory transport.

    Inbound messages are queued with push*(); None in the queue means the
    peer ended the stream, an exception instance is raised from recv().
    Everything the client sends is recorded in `sent`.
    Setting `send_gate` holds send() until the event is set.
    """

    def __init__(self) -> None:
        self.sent: List[Union[str, bytes]] = []
        self.inbound: asyncio.Queue = asyncio.Queue()
        self.closed: bool = False
        self.fail_send: bool = False
        self.on_send: Optional[Callable[["FakeTransport", Union[str, bytes]], None]] = None
        self.send_gate: Optional[asyncio.Event] = None

    async def send(self, message: Union[str, bytes]) -> None:
        if self.closed:
            raise TransportError("transport closed")
        if self.fail_send:
            raise TransportError("simulated send failure")
        if self.send_gate is not None:
            await self.send_gate.wait()
        self.sent.append(message)
        if self.on_send is not None:
            self.on_send(self, message)

    async def recv(self) -> Optional[Union[str, bytes]]:
        if self.closed and self.inbound.empty():
            return None
        item = await self.inbound.get()
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.inbound.put_nowait(None)

    # Helpers

    def push(self, message: Union[str, bytes, dict, None, Exception]) -> None:
        if isinstance(message, dict):
            message = json.dumps(message)
        self.inbound.put_nowait(message)

    def push_reply(self, reid: int, rnum: int = 200, response: Optional[str] = None) -> None:
        self.push({"REID": reid, "RNUM": rnum, "RESPONSE": response})

    def push_event(self, payload: dict, reid: int = 1) -> None:
        self.push({"REID": reid, "RNUM": 200, "PAYL": payload})

    def push_end(self) -> None:
        self.push(None)

    @property
    def sent_json(self) -> List[dict]:
        return [json.loads(m) for m in self.sent if isinstance(m, str)]

    @property
    def sent_frames(self) -> List[bytes]:
        return [m for m in self.sent if isinstance(m, (bytes, bytearray))]


@pytest.fixture
def small_geometry():
    """2x2 display used by most scenarios."""
    return Geometry(rows=2, cols=2)


@pytest.fixture
def credentials():
    return Credentials("alice", "API-TOK_secret")


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def open_connection(transport, credentials, small_geometry):
    """Factory returning an authenticated Connection over the fake transport."""

    async def _open(geometry: Optional[Geometry] = None) -> Connection:
        transport.push_reply(0)
        connection = Connection(transport, credentials, geometry or small_geometry)
        await connection.authenticate()
        return connection

    return _open
