"""
Snake Demo
==========

Example application: a snake crawling across the display.

Architecture:
    Task 1 : PeriodicProducer -> steps the snake, renders, offers the frame
    Task 2 : EventMultiplexer -> uploads frames, dispatches key events

The snake is shared between the producer (step + render) and the input
handler (turn), so both go through one asyncio.Lock. "Step then render" is
a single critical section, so a frame never shows a half-moved snake.

Usage:
    LIGHTHOUSE_USERNAME=... LIGHTHOUSE_TOKEN=... lighthouse-snake
Controls: arrow keys or WASD on the Lighthouse web frontend
"""

import argparse
import asyncio
import logging
import random
import sys
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional

from lighthouse_client.config import Settings, load_config, setup_logging
from lighthouse_client.display.frame import LIGHTHOUSE_GEOMETRY, Geometry, PixelFrame
from lighthouse_client.errors import LighthouseError
from lighthouse_client.models.color import BLACK, GREEN
from lighthouse_client.models.events import InputEvent, KeyEvent
from lighthouse_client.protocol.connection import Connection
from lighthouse_client.protocol.credentials import Credentials
from lighthouse_client.stream import EventMultiplexer, FrameSlot, PeriodicProducer, StopReason


logger = logging.getLogger(__name__)


# =============================================================================
# Geometry helpers
# =============================================================================

@dataclass(frozen=True, slots=True)
class Vec2:
    """Integer 2D vector; x is the column, y the row."""

    x: int
    y: int

    @classmethod
    def random_pos(
        cls, geometry: Geometry = LIGHTHOUSE_GEOMETRY, rng: Optional[random.Random] = None
    ) -> "Vec2":
        rng = rng or random
        return cls(rng.randrange(geometry.cols), rng.randrange(geometry.rows))

    @classmethod
    def random_dir(cls, rng: Optional[random.Random] = None) -> "Vec2":
        rng = rng or random
        offset = 1 if rng.random() < 0.5 else -1
        if rng.random() < 0.5:
            return cls(0, offset)
        return cls(offset, 0)

    def pixel_index(self, geometry: Geometry = LIGHTHOUSE_GEOMETRY) -> int:
        return geometry.index(self.x, self.y)

    def add_wrapping(self, other: "Vec2", geometry: Geometry = LIGHTHOUSE_GEOMETRY) -> "Vec2":
        return Vec2(
            (self.x + other.x) % geometry.cols,
            (self.y + other.y) % geometry.rows,
        )

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)


LEFT = Vec2(-1, 0)
UP = Vec2(0, -1)
RIGHT = Vec2(1, 0)
DOWN = Vec2(0, 1)

# JavaScript key codes: arrows, then WASD
KEY_DIRECTIONS = {
    37: LEFT,
    38: UP,
    39: RIGHT,
    40: DOWN,
    65: LEFT,
    87: UP,
    68: RIGHT,
    83: DOWN,
}


# =============================================================================
# Game state
# =============================================================================

class Snake:
    """
    Snake body plus heading.

    Attributes:
        fields: Body cells, head first
        direction: Unit step applied to the head on every step()
    """

    def __init__(
        self,
        geometry: Geometry = LIGHTHOUSE_GEOMETRY,
        head: Optional[Vec2] = None,
        direction: Optional[Vec2] = None,
        length: int = 1,
    ) -> None:
        if length < 1:
            raise ValueError("length must be >= 1")
        self.geometry = geometry
        self.direction = direction or Vec2.random_dir()
        head = head or Vec2.random_pos(geometry)
        self.fields: Deque[Vec2] = deque([head])
        for _ in range(length - 1):
            self.fields.append(self.fields[-1].add_wrapping(-self.direction, geometry))

    @property
    def head(self) -> Vec2:
        return self.fields[0]

    def step(self) -> None:
        """Move one cell forward, wrapping around the display edges."""
        head = self.head
        self.fields.pop()
        self.fields.appendleft(head.add_wrapping(self.direction, self.geometry))

    def turn(self, direction: Vec2) -> bool:
        """
        Change heading. Turning back onto the body is ignored.

        Returns:
            True if the heading changed
        """
        if len(self.fields) > 1 and direction == -self.direction:
            return False
        changed = direction != self.direction
        self.direction = direction
        return changed

    def render(self) -> PixelFrame:
        """Green body on black background."""
        pixels = [BLACK] * self.geometry.size
        for field in self.fields:
            pixels[field.pixel_index(self.geometry)] = GREEN
        return PixelFrame(pixels, self.geometry)


class SnakeGame:
    """Snake shared between the frame producer and the input handler."""

    def __init__(self, snake: Snake) -> None:
        self.snake = snake
        self._lock = asyncio.Lock()

    async def tick(self) -> PixelFrame:
        """Advance the snake and render it as one atomic step."""
        async with self._lock:
            self.snake.step()
            return self.snake.render()

    async def handle_input(self, event: InputEvent) -> None:
        """Turn the snake on key presses; other events are only logged."""
        if isinstance(event, KeyEvent) and event.down:
            direction = KEY_DIRECTIONS.get(event.key)
            if direction is None:
                return
            async with self._lock:
                if self.snake.turn(direction):
                    logger.debug(f"Snake turned to {direction}")
        else:
            logger.debug(f"Unhandled input event: {event!r}")


# =============================================================================
# Wiring
# =============================================================================

async def run(credentials: Credentials, settings: Settings) -> StopReason:
    """
    Connect, stream the snake and react to key presses until one side ends.

    Raises:
        LighthouseError: On authentication or transport failure
    """
    geometry = settings.display.geometry
    game = SnakeGame(Snake(geometry))
    slot = FrameSlot()
    producer = PeriodicProducer(
        game.tick, slot, interval=settings.app.frame_interval_seconds
    )

    connection = await Connection.connect(
        credentials,
        url=settings.lighthouse.url,
        geometry=geometry,
        open_timeout=settings.lighthouse.open_timeout_seconds,
        ping_interval=settings.lighthouse.ping_interval_seconds,
    )
    logger.info("Connected to the Lighthouse server")

    async with connection:
        await connection.request_event_stream()

        producer_task = asyncio.create_task(producer.run(), name="snake_producer")
        multiplexer = EventMultiplexer(connection, slot, on_input=game.handle_input)
        try:
            return await multiplexer.run()
        finally:
            producer.stop()
            await slot.close()
            await producer_task


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Snake demo for the Lighthouse display")
    parser.add_argument("--config", help="Path to a YAML config file")
    parser.add_argument("--url", help="Override the server WebSocket URL")
    parser.add_argument("--interval", type=float, help="Seconds between frames")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, ...)")
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    """CLI entry point."""
    args = parse_args(argv)

    try:
        settings = load_config(args.config)
        if args.url:
            settings.lighthouse.url = args.url
        if args.interval is not None:
            settings.app.frame_interval_seconds = args.interval
        if args.log_level:
            settings.logging.level = args.log_level
        setup_logging(settings)
        credentials = settings.credentials()
    except LighthouseError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        reason = asyncio.run(run(credentials, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0
    except LighthouseError as e:
        logger.error(f"Snake stopped: {e}")
        return 1

    logger.info(f"Snake finished: {reason.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
