"""
Frame Slot
==========

Single-slot async hand-off between a frame producer and the multiplexer.

This module provides the FrameSlot class, the only channel through which
frames reach the connection.

Design Rules:
    - Capacity is exactly one frame
    - put() suspends while a frame is pending (backpressure, nothing dropped)
    - Frames leave in the order they were put
    - close() wakes every waiter; get() drains the pending frame first
    - wait_pending() peeks without freeing the slot
"""

import asyncio
import logging
from typing import Optional

from lighthouse_client.display.frame import PixelFrame
from lighthouse_client.errors import SlotClosedError


logger = logging.getLogger(__name__)


class FrameSlot:
    """
    Closable async hand-off with capacity one.

    Attributes:
        closed: Whether close() was called
        pending: Whether a frame is waiting to be taken
        total_put: Frames accepted so far
        total_get: Frames handed out so far

    Example:
        slot = FrameSlot()

        # Producer
        await slot.put(frame)

        # Consumer
        frame = await slot.get()
        if frame is None:
            ...  # producer finished
    """

    def __init__(self) -> None:
        self._frame: Optional[PixelFrame] = None
        self._closed: bool = False
        self._condition = asyncio.Condition()
        self._total_put: int = 0
        self._total_get: int = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> bool:
        return self._frame is not None

    @property
    def total_put(self) -> int:
        return self._total_put

    @property
    def total_get(self) -> int:
        return self._total_get

    async def put(self, frame: PixelFrame) -> None:
        """
        Offer a frame, waiting until the slot is free.

        Raises:
            SlotClosedError: If the slot is or becomes closed
        """
        async with self._condition:
            await self._condition.wait_for(
                lambda: self._frame is None or self._closed
            )
            if self._closed:
                raise SlotClosedError("Frame slot is closed")
            self._frame = frame
            self._total_put += 1
            self._condition.notify_all()

    async def get(self) -> Optional[PixelFrame]:
        """
        Take the pending frame, waiting for one if needed.

        Returns:
            The next frame, or None once closed and empty.
        """
        async with self._condition:
            await self._condition.wait_for(
                lambda: self._frame is not None or self._closed
            )
            frame = self._frame
            if frame is None:
                return None
            self._frame = None
            self._total_get += 1
            self._condition.notify_all()
            return frame

    async def wait_pending(self) -> Optional[PixelFrame]:
        """
        Wait until a frame is pending without taking it.

        The frame stays in the slot, so a producer keeps blocking in put()
        until the consumer calls get() after transmitting it.

        Returns:
            The pending frame, or None once closed and empty.
        """
        async with self._condition:
            await self._condition.wait_for(
                lambda: self._frame is not None or self._closed
            )
            return self._frame

    async def close(self) -> None:
        """Close the slot. Safe to call more than once."""
        async with self._condition:
            if self._closed:
                return
            self._closed = True
            self._condition.notify_all()
        logger.debug("Frame slot closed")

    def metrics(self) -> dict:
        """
        Get slot metrics for observability.

        Returns:
            Dict with pending, closed, total_put, total_get
        """
        return {
            "pending": self.pending,
            "closed": self._closed,
            "total_put": self._total_put,
            "total_get": self._total_get,
        }
