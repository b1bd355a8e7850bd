"""
Stream Module
=============

Frame hand-off and the frame/event merge loop.

This module provides the runtime layer on top of a Connection:
    - FrameSlot: capacity-1 async hand-off (producer waits, nothing dropped)
    - PeriodicProducer: timer-driven frame producer feeding a FrameSlot
    - EventMultiplexer: fair merge of frames out and input events in

Example:
    from lighthouse_client.stream import EventMultiplexer, FrameSlot, PeriodicProducer

    slot = FrameSlot()
    producer = PeriodicProducer(render_next_frame, slot, interval=0.5)
    mux = EventMultiplexer(connection, slot, on_input=print)

    producer_task = asyncio.create_task(producer.run())
    reason = await mux.run()
"""

from lighthouse_client.stream.buffer import FrameSlot
from lighthouse_client.stream.producer import PeriodicProducer
from lighthouse_client.stream.multiplexer import (
    EventMultiplexer,
    MultiplexerMetrics,
    StopReason,
)


__all__ = [
    "FrameSlot",
    "PeriodicProducer",
    "EventMultiplexer",
    "MultiplexerMetrics",
    "StopReason",
]
