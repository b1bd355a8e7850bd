"""
Snake Demo Tests
================

Tests for the example application and its wiring.
"""

import asyncio
import random

import pytest

from lighthouse_client.apps import snake as snake_app
from lighthouse_client.apps.snake import (
    DOWN,
    LEFT,
    RIGHT,
    UP,
    Snake,
    SnakeGame,
    Vec2,
)
from lighthouse_client.config import Settings
from lighthouse_client.display.frame import LIGHTHOUSE_GEOMETRY, Geometry
from lighthouse_client.models.color import BLACK, GREEN
from lighthouse_client.models.events import KeyEvent, TapEvent
from lighthouse_client.protocol.connection import Connection
from lighthouse_client.stream.multiplexer import StopReason


class TestVec2:
    """Tests for the vector helper."""

    def test_add_wrapping(self):
        geometry = Geometry(rows=3, cols=4)
        assert Vec2(3, 0).add_wrapping(RIGHT, geometry) == Vec2(0, 0)
        assert Vec2(0, 0).add_wrapping(UP, geometry) == Vec2(0, 2)
        assert Vec2(1, 1).add_wrapping(DOWN, geometry) == Vec2(1, 2)

    def test_pixel_index(self):
        assert Vec2(3, 2).pixel_index() == 2 * 14 + 3

    def test_random_pos_in_bounds(self):
        rng = random.Random(7)
        for _ in range(50):
            pos = Vec2.random_pos(LIGHTHOUSE_GEOMETRY, rng)
            assert 0 <= pos.x < 14
            assert 0 <= pos.y < 28

    def test_random_dir_is_unit_step(self):
        rng = random.Random(3)
        for _ in range(50):
            d = Vec2.random_dir(rng)
            assert abs(d.x) + abs(d.y) == 1


class TestSnake:
    """Tests for snake movement and rendering."""

    def test_step_wraps(self):
        geometry = Geometry(rows=2, cols=3)
        snake = Snake(geometry, head=Vec2(2, 1), direction=RIGHT)
        snake.step()
        assert snake.head == Vec2(0, 1)

    def test_single_cell_step(self):
        snake = Snake(head=Vec2(5, 5), direction=UP)
        snake.step()
        assert list(snake.fields) == [Vec2(5, 4)]

    def test_step_keeps_length(self):
        snake = Snake(head=Vec2(5, 5), direction=DOWN, length=3)
        snake.step()
        assert list(snake.fields) == [Vec2(5, 6), Vec2(5, 5), Vec2(5, 4)]

    def test_render(self):
        geometry = Geometry(rows=2, cols=2)
        snake = Snake(geometry, head=Vec2(1, 0), direction=LEFT)
        frame = snake.render()
        assert list(frame) == [BLACK, GREEN, BLACK, BLACK]

    def test_turn_ignores_reversal(self):
        snake = Snake(head=Vec2(5, 5), direction=RIGHT, length=2)
        assert not snake.turn(LEFT)
        assert snake.direction == RIGHT
        assert snake.turn(UP)
        assert snake.direction == UP

    def test_single_cell_may_reverse(self):
        snake = Snake(head=Vec2(5, 5), direction=RIGHT)
        assert snake.turn(LEFT)


class TestSnakeGame:
    """Tests for the shared-state wrapper."""

    @pytest.mark.asyncio
    async def test_tick_steps_and_renders(self):
        geometry = Geometry(rows=2, cols=2)
        game = SnakeGame(Snake(geometry, head=Vec2(0, 0), direction=RIGHT))
        frame = await game.tick()
        assert frame.get(1, 0) == GREEN
        assert game.snake.head == Vec2(1, 0)

    @pytest.mark.asyncio
    async def test_arrow_keys_turn(self):
        game = SnakeGame(Snake(head=Vec2(0, 0), direction=RIGHT))
        await game.handle_input(KeyEvent(key=40, down=True))
        assert game.snake.direction == DOWN

    @pytest.mark.asyncio
    async def test_key_release_and_other_events_ignored(self):
        game = SnakeGame(Snake(head=Vec2(0, 0), direction=RIGHT))
        await game.handle_input(KeyEvent(key=40, down=False))
        await game.handle_input(KeyEvent(key=999, down=True))
        await game.handle_input(TapEvent(x=0, y=0))
        assert game.snake.direction == RIGHT


class TestRun:
    """End-to-end wiring over the fake transport."""

    @pytest.mark.asyncio
    async def test_run_until_server_closes(self, monkeypatch, transport, credentials):
        settings = Settings.model_validate(
            {"display": {"rows": 2, "cols": 2}, "app": {"frame_interval_seconds": 0}}
        )

        async def fake_connect(creds, url, geometry, **options):
            transport.push_reply(0)
            conn = Connection(transport, creds, geometry)
            await conn.authenticate()
            return conn

        def end_after_two_frames(t, message):
            if isinstance(message, bytes) and len(t.sent_frames) == 2:
                t.push_event({"kind": "key", "key": 38, "down": True}, reid=1)
                t.push_end()

        monkeypatch.setattr(Connection, "connect", fake_connect)
        transport.on_send = end_after_two_frames

        reason = await asyncio.wait_for(snake_app.run(credentials, settings), timeout=2.0)

        assert reason is StopReason.CONNECTION_CLOSED
        assert [m["VERB"] for m in transport.sent_json] == ["AUTH", "STREAM"]
        assert len(transport.sent_frames) >= 2
        assert all(len(p) == 12 for p in transport.sent_frames)
        assert transport.closed


class TestMain:
    """Tests for the CLI entry point."""

    def test_missing_credentials(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("LIGHTHOUSE_USERNAME", raising=False)
        monkeypatch.delenv("LIGHTHOUSE_TOKEN", raising=False)
        monkeypatch.setattr(snake_app, "setup_logging", lambda settings: None)

        assert snake_app.main([]) == 2

    def test_parse_args(self):
        args = snake_app.parse_args(["--interval", "0.2", "--url", "ws://x"])
        assert args.interval == 0.2
        assert args.url == "ws://x"
        assert args.config is None
