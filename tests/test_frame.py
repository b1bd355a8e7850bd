"""
Frame Tests
===========

Tests for Color, Geometry and PixelFrame.
"""

import numpy as np
import pytest

from lighthouse_client.display.frame import (
    LIGHTHOUSE_COLS,
    LIGHTHOUSE_GEOMETRY,
    LIGHTHOUSE_ROWS,
    LIGHTHOUSE_SIZE,
    Geometry,
    PixelFrame,
)
from lighthouse_client.errors import LighthouseError, ShapeError
from lighthouse_client.models.color import BLACK, BLUE, GREEN, RED, Color


class TestColor:
    """Tests for the Color value type."""

    def test_channels(self):
        color = Color(1, 2, 3)
        assert color.as_tuple() == (1, 2, 3)

    @pytest.mark.parametrize("channels", [(256, 0, 0), (0, -1, 0), (0, 0, 1000)])
    def test_out_of_range_rejected(self, channels):
        with pytest.raises(ValueError):
            Color(*channels)

    def test_non_int_rejected(self):
        with pytest.raises(ValueError):
            Color(True, 0, 0)
        with pytest.raises(ValueError):
            Color(1.5, 0, 0)

    def test_named_constants(self):
        assert RED == Color(255, 0, 0)
        assert GREEN == Color(0, 255, 0)
        assert BLUE == Color(0, 0, 255)
        assert BLACK == Color(0, 0, 0)

    def test_hashable(self):
        assert len({Color(1, 2, 3), Color(1, 2, 3), RED}) == 2

    def test_random_in_range(self):
        for _ in range(20):
            color = Color.random()
            assert all(0 <= c <= 255 for c in color.as_tuple())


class TestGeometry:
    """Tests for display dimensions."""

    def test_lighthouse_defaults(self):
        assert LIGHTHOUSE_ROWS == 28
        assert LIGHTHOUSE_COLS == 14
        assert LIGHTHOUSE_SIZE == 392
        assert LIGHTHOUSE_GEOMETRY.size == LIGHTHOUSE_SIZE

    def test_index_is_row_major(self):
        geometry = Geometry(rows=3, cols=4)
        assert geometry.index(0, 0) == 0
        assert geometry.index(3, 0) == 3
        assert geometry.index(0, 1) == 4
        assert geometry.index(3, 2) == 11

    def test_index_out_of_bounds(self):
        with pytest.raises(IndexError):
            Geometry(2, 2).index(2, 0)

    def test_invalid_dimensions(self):
        with pytest.raises(ValueError):
            Geometry(0, 5)


class TestPixelFrameConstruction:
    """Tests for PixelFrame constructors."""

    def test_new_with_exact_length(self, small_geometry):
        frame = PixelFrame([RED, GREEN, BLUE, BLACK], small_geometry)
        assert len(frame) == 4
        assert frame.pixels == (RED, GREEN, BLUE, BLACK)

    @pytest.mark.parametrize("count", [0, 3, 5])
    def test_new_with_wrong_length(self, small_geometry, count):
        with pytest.raises(ShapeError):
            PixelFrame([RED] * count, small_geometry)

    def test_shape_error_is_value_error(self):
        with pytest.raises(ValueError):
            PixelFrame([RED])
        assert issubclass(ShapeError, LighthouseError)

    def test_default_geometry(self):
        frame = PixelFrame([BLACK] * LIGHTHOUSE_SIZE)
        assert frame.geometry == LIGHTHOUSE_GEOMETRY

    def test_fill(self, small_geometry):
        frame = PixelFrame.fill(RED, small_geometry)
        assert list(frame) == [RED] * 4

    def test_generate_small_scenario(self, small_geometry):
        frame = PixelFrame.generate(lambda x, y: Color(x, y, 0), small_geometry)
        assert list(frame) == [
            Color(0, 0, 0),
            Color(1, 0, 0),
            Color(0, 1, 0),
            Color(1, 1, 0),
        ]

    def test_generate_matches_index_formula(self):
        frame = PixelFrame.generate(lambda x, y: Color(x, y, 7))
        for y in range(LIGHTHOUSE_ROWS):
            for x in range(LIGHTHOUSE_COLS):
                assert frame[y * LIGHTHOUSE_COLS + x] == Color(x, y, 7)

    def test_generate_call_order(self, small_geometry):
        calls = []

        def f(x, y):
            calls.append((x, y))
            return BLACK

        PixelFrame.generate(f, small_geometry)
        assert calls == [(0, 0), (1, 0), (0, 1), (1, 1)]


class TestPixelFrameValue:
    """Tests for equality, hashing and accessors."""

    def test_structural_equality(self, small_geometry):
        a = PixelFrame.fill(RED, small_geometry)
        b = PixelFrame([RED, RED, RED, RED], small_geometry)
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_inequality(self, small_geometry):
        a = PixelFrame.fill(RED, small_geometry)
        assert a != PixelFrame.fill(GREEN, small_geometry)
        assert a != PixelFrame.fill(RED, Geometry(1, 4))
        assert a != "not a frame"

    def test_get_and_with_pixel(self, small_geometry):
        frame = PixelFrame.fill(BLACK, small_geometry)
        updated = frame.with_pixel(1, 0, RED)
        assert updated.get(1, 0) == RED
        assert updated[1] == RED
        assert frame.get(1, 0) == BLACK

    def test_repr_is_compact(self):
        assert "distinct_colors=1" in repr(PixelFrame.fill(RED))


class TestPixelFrameArray:
    """Tests for numpy interop."""

    def test_to_array_shape(self, small_geometry):
        frame = PixelFrame.generate(lambda x, y: Color(x, y, 9), small_geometry)
        array = frame.to_array()
        assert array.shape == (2, 2, 3)
        assert array.dtype == np.uint8
        assert array[1, 0].tolist() == [0, 1, 9]

    def test_from_array(self):
        array = np.zeros((3, 5, 3), dtype=np.uint8)
        array[2, 4] = (10, 20, 30)
        frame = PixelFrame.from_array(array)
        assert frame.geometry == Geometry(rows=3, cols=5)
        assert frame.get(4, 2) == Color(10, 20, 30)
        assert PixelFrame.from_array(frame.to_array()) == frame

    def test_from_array_wrong_shape(self):
        with pytest.raises(ShapeError):
            PixelFrame.from_array(np.zeros((2, 2), dtype=np.uint8))
        with pytest.raises(ShapeError):
            PixelFrame.from_array(np.zeros((2, 2, 4), dtype=np.uint8))
        with pytest.raises(ShapeError):
            PixelFrame.from_array(np.zeros((2, 2, 3), dtype=np.float32))
