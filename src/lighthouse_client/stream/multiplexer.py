"""
Event Multiplexer
=================

Control loop merging locally produced frames with remote input events.

Two sources feed the loop:
    - local:  frames taken from a FrameSlot, forwarded to send_frame()
    - remote: input events from the Connection, forwarded to a handler

Each source has at most one outstanding wait task. Every iteration waits
for whichever finishes first, handles every task that has finished,
and re-arms only those. A pending wait is never cancelled between
iterations, so a source that is always ready cannot starve the other and
nothing read from either source is lost.

The frame side only waits for a frame to be pending; the frame stays in
the slot until it has been sent. While the loop is busy the producer is
therefore held in put(), and at most one untransmitted frame exists.

Termination:
    - the producer closes the slot         -> StopReason.PRODUCER_CLOSED
    - the connection reports it is closed  -> StopReason.CONNECTION_CLOSED
    - any error in send, receive or the handler propagates (fail-fast)

Unless the producer ended the loop, the frame slot is closed on exit so a
producer blocked in put() is released. The connection itself belongs to
the caller and is left open.
"""

import asyncio
import inspect
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from lighthouse_client.display.frame import PixelFrame
from lighthouse_client.models.events import InputEvent
from lighthouse_client.protocol.connection import Connection
from lighthouse_client.stream.buffer import FrameSlot


logger = logging.getLogger(__name__)

InputHandler = Callable[[InputEvent], Union[None, Awaitable[None]]]


class StopReason(str, Enum):
    """Why the multiplexer loop ended."""

    PRODUCER_CLOSED = "producer_closed"
    CONNECTION_CLOSED = "connection_closed"


class MultiplexerMetrics:
    """Metrics for EventMultiplexer observability."""

    __slots__ = (
        "iterations",
        "frames_forwarded",
        "events_dispatched",
    )

    def __init__(self) -> None:
        self.iterations: int = 0
        self.frames_forwarded: int = 0
        self.events_dispatched: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "iterations": self.iterations,
            "frames_forwarded": self.frames_forwarded,
            "events_dispatched": self.events_dispatched,
        }


class EventMultiplexer:
    """
    Fair merge of a frame slot and a connection's input events.

    Attributes:
        connection: Authenticated connection frames go out on
        frames: FrameSlot the producer offers frames through
        metrics: Operational metrics

    Example:
        mux = EventMultiplexer(conn, slot, on_input=handle_event)
        reason = await mux.run()
    """

    def __init__(
        self,
        connection: Connection,
        frames: FrameSlot,
        on_input: InputHandler,
    ) -> None:
        """
        Initialize multiplexer.

        Args:
            connection: Authenticated Connection
            frames: FrameSlot fed by the producer
            on_input: Sync or async callback receiving each InputEvent
        """
        self.connection = connection
        self.frames = frames
        self.metrics = MultiplexerMetrics()

        self._on_input = on_input
        self._running: bool = False

    @property
    def running(self) -> bool:
        return self._running

    async def run(self) -> StopReason:
        """
        Run the merge loop until one side ends.

        Returns:
            Which side ended the loop

        Raises:
            TransportError: If sending or receiving fails
            AuthError: If the server rejects the event subscription
            Exception: Whatever the input handler raises
        """
        self._running = True
        logger.info("Multiplexer started")

        frame_task: Optional[asyncio.Task] = None
        event_task: Optional[asyncio.Task] = None
        reason: Optional[StopReason] = None

        try:
            while reason is None:
                if frame_task is None:
                    frame_task = asyncio.create_task(
                        self.frames.wait_pending(), name="multiplexer_frame"
                    )
                if event_task is None:
                    event_task = asyncio.create_task(
                        self.connection.receive_input_event(),
                        name="multiplexer_event",
                    )

                done, _ = await asyncio.wait(
                    {frame_task, event_task},
                    return_when=asyncio.FIRST_COMPLETED,
                )
                self.metrics.iterations += 1

                if frame_task in done:
                    frame = frame_task.result()
                    frame_task = None
                    if frame is None:
                        reason = StopReason.PRODUCER_CLOSED
                    elif self.connection.closed:
                        # Nowhere to send it, the pending frame is dropped
                        reason = StopReason.CONNECTION_CLOSED
                    else:
                        await self._forward_frame(frame)

                if event_task in done:
                    event = event_task.result()
                    event_task = None
                    if event is None:
                        reason = reason or StopReason.CONNECTION_CLOSED
                    else:
                        await self._dispatch_event(event)
        finally:
            self._running = False
            await self._cancel(frame_task, event_task)
            if reason is not StopReason.PRODUCER_CLOSED:
                # Connection is gone, release a producer blocked in put()
                await self.frames.close()

        logger.info(
            f"Multiplexer stopped ({reason.value}): "
            f"{self.metrics.frames_forwarded} frames, "
            f"{self.metrics.events_dispatched} events"
        )
        return reason

    async def stop(self) -> None:
        """
        Request shutdown by closing the producer side.

        Must be awaited. A frame already pending is still sent before run()
        returns StopReason.PRODUCER_CLOSED.
        """
        await self.frames.close()

    async def _forward_frame(self, frame: PixelFrame) -> None:
        await self.connection.send_frame(frame)
        # Free the slot only once the frame is on the wire
        await self.frames.get()
        self.metrics.frames_forwarded += 1

    async def _dispatch_event(self, event: InputEvent) -> None:
        result = self._on_input(event)
        if inspect.isawaitable(result):
            await result
        self.metrics.events_dispatched += 1

    @staticmethod
    async def _cancel(*tasks: Optional[asyncio.Task]) -> None:
        pending = [t for t in tasks if t is not None and not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        for task in tasks:
            # Retrieve results of tasks that finished alongside a failure
            if task is not None and task.done() and not task.cancelled():
                task.exception()
