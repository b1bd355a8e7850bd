"""
Periodic Producer
=================

Timer-driven frame producer feeding a FrameSlot.

Each tick renders one frame and offers it to the slot. Because the slot
holds a single frame, a slow consumer slows the producer down instead of
building a backlog of stale frames.
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Union

from lighthouse_client.display.frame import PixelFrame
from lighthouse_client.errors import SlotClosedError
from lighthouse_client.stream.buffer import FrameSlot


logger = logging.getLogger(__name__)

RenderFn = Callable[[], Union[PixelFrame, Awaitable[PixelFrame]]]


class PeriodicProducer:
    """
    Renders a frame every `interval` seconds and hands it to a FrameSlot.

    Attributes:
        slot: Destination slot
        interval: Pause between frames in seconds
        frames_produced: Frames accepted by the slot

    Example:
        producer = PeriodicProducer(game.tick, slot, interval=1.0)
        task = asyncio.create_task(producer.run())
        ...
        producer.stop()
        await task
    """

    def __init__(self, render: RenderFn, slot: FrameSlot, interval: float = 1.0) -> None:
        """
        Initialize producer.

        Args:
            render: Sync or async callable returning the next frame
            slot: FrameSlot to offer frames to
            interval: Seconds to sleep after each frame. Must be >= 0.
        """
        if interval < 0:
            raise ValueError("interval must be >= 0")

        self.slot = slot
        self.interval = interval
        self.frames_produced: int = 0

        self._render = render
        self._stop_event = asyncio.Event()

    async def run(self) -> None:
        """
        Produce frames until stopped or until the slot is closed.

        The slot is closed on exit so the consumer sees the end of the
        sequence. Exceptions raised by `render` propagate.
        """
        self._stop_event.clear()
        logger.info(f"Producer started (interval={self.interval:.2f}s)")

        try:
            while not self._stop_event.is_set():
                frame = self._render()
                if inspect.isawaitable(frame):
                    frame = await frame

                try:
                    await self.slot.put(frame)
                except SlotClosedError:
                    logger.info("Frame slot closed, producer exiting")
                    break
                self.frames_produced += 1

                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
                except asyncio.TimeoutError:
                    pass
        finally:
            await self.slot.close()
            logger.info(f"Producer stopped after {self.frames_produced} frames")

    def stop(self) -> None:
        """Ask the run loop to finish after the current frame."""
        self._stop_event.set()
