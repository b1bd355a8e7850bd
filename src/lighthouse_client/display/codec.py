"""
Frame Codec
===========

Binary codec between PixelFrame and the device's wire payload.

Wire format:
    3 * rows * cols bytes, one (red, green, blue) triple per pixel,
    pixels in row-major order (y outer, x inner). No header, no length
    prefix, no compression.

Design Rules:
    - Byte-exact: channel order and pixel order are fixed by the device
    - Decoding validates length and shape, never pads or truncates
    - This is the ONLY place frames are converted to or from bytes
"""

from typing import Union

import numpy as np

from lighthouse_client.display.frame import (
    LIGHTHOUSE_GEOMETRY,
    Geometry,
    PixelFrame,
)
from lighthouse_client.errors import BadLengthError, ShapeError, ShapeMismatchError
from lighthouse_client.models.color import Color


BYTES_PER_PIXEL = 3

BytesLike = Union[bytes, bytearray, memoryview]


class FrameCodec:
    """
    Encoder/decoder for one display geometry.

    Attributes:
        geometry: Display dimensions frames must match
        payload_size: Exact byte length of an encoded frame

    Example:
        codec = FrameCodec()
        payload = codec.encode(PixelFrame.fill(RED))
        assert codec.decode(payload) == PixelFrame.fill(RED)
    """

    def __init__(self, geometry: Geometry = LIGHTHOUSE_GEOMETRY) -> None:
        self.geometry = geometry

    @property
    def payload_size(self) -> int:
        return BYTES_PER_PIXEL * self.geometry.size

    def encode(self, frame: PixelFrame) -> bytes:
        """
        Encode a frame into its wire payload.

        Args:
            frame: Frame laid out for this codec's geometry

        Returns:
            payload_size bytes of interleaved R, G, B channels

        Raises:
            ShapeError: If the frame's geometry differs from the codec's
        """
        if frame.geometry != self.geometry:
            raise ShapeError(
                f"frame geometry {frame.geometry.cols}x{frame.geometry.rows} "
                f"does not match codec geometry "
                f"{self.geometry.cols}x{self.geometry.rows}"
            )
        channels = np.fromiter(
            (channel for color in frame for channel in color.as_tuple()),
            dtype=np.uint8,
            count=self.payload_size,
        )
        return channels.tobytes()

    def decode(self, payload: BytesLike) -> PixelFrame:
        """
        Decode a wire payload into a frame.

        Args:
            payload: Raw bytes received from the wire

        Returns:
            PixelFrame with this codec's geometry

        Raises:
            BadLengthError: If the length is not a multiple of 3
            ShapeMismatchError: If the pixel count differs from the geometry
        """
        length = len(payload)
        if length % BYTES_PER_PIXEL != 0:
            raise BadLengthError(
                f"{length} (length of byte array) is not a multiple of 3"
            )

        pixel_count = length // BYTES_PER_PIXEL
        if pixel_count != self.geometry.size:
            raise ShapeMismatchError(
                f"payload holds {pixel_count} pixels, "
                f"display requires {self.geometry.size}"
            )

        triples = np.frombuffer(payload, dtype=np.uint8).reshape(-1, 3).tolist()
        return PixelFrame(
            (Color(r, g, b) for r, g, b in triples), self.geometry
        )


def encode_frame(frame: PixelFrame) -> bytes:
    """Encode a frame using a codec for its own geometry."""
    return FrameCodec(frame.geometry).encode(frame)


def decode_frame(
    payload: BytesLike, geometry: Geometry = LIGHTHOUSE_GEOMETRY
) -> PixelFrame:
    """Decode a payload for the given geometry."""
    return FrameCodec(geometry).decode(payload)
