"""
Display Module
==============

Frame data type and its binary codec.

    - Geometry: display dimensions (defaults to the 28x14 Lighthouse)
    - PixelFrame: immutable grid of colors
    - FrameCodec: PixelFrame <-> R,G,B byte payload

Example:
    from lighthouse_client.display import FrameCodec, PixelFrame
    from lighthouse_client.models import RED

    payload = FrameCodec().encode(PixelFrame.fill(RED))
"""

from lighthouse_client.display.frame import (
    LIGHTHOUSE_COLS,
    LIGHTHOUSE_GEOMETRY,
    LIGHTHOUSE_ROWS,
    LIGHTHOUSE_SIZE,
    Geometry,
    PixelFrame,
)
from lighthouse_client.display.codec import (
    BYTES_PER_PIXEL,
    FrameCodec,
    decode_frame,
    encode_frame,
)


__all__ = [
    "LIGHTHOUSE_ROWS",
    "LIGHTHOUSE_COLS",
    "LIGHTHOUSE_SIZE",
    "LIGHTHOUSE_GEOMETRY",
    "Geometry",
    "PixelFrame",
    "BYTES_PER_PIXEL",
    "FrameCodec",
    "encode_frame",
    "decode_frame",
]
