"""One object bundling the conversions a viewer needs for a fixed frame size."""

from __future__ import annotations

from .demosaic import bayer_to_rgb24
from .jpeg import JpegDecoder
from .packed import grey_to_yuyv
from .rgb import yuyv_to_dib24, yuyv_to_rgb24


class FormatConverter:
    """Convert camera frames of one size into packed 24-bit RGB or BGR.

    The BGR outputs are stored bottom-up, row order reversed, as bitmaps expect.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"frame dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._decoder = JpegDecoder(width, height)

    def _take(self, data: bytes, size: int) -> bytes:
        frame = bytes(data)
        if len(frame) < size:
            raise ValueError(
                f"frame of {self.width}x{self.height} needs {size} bytes, got {len(frame)}"
            )
        return frame[:size]

    def yuyv_to_bgr(self, yuyv: bytes) -> bytes:
        """Convert a YUYV frame to bottom-up BGR."""
        return yuyv_to_dib24(yuyv, self.width, self.height)

    def jpeg_to_bgr(self, jpeg: bytes) -> bytes:
        """Decode a JPEG frame to bottom-up BGR."""
        return self.yuyv_to_bgr(self._decoder.decode(jpeg))

    def yuyv_to_rgb(self, yuyv: bytes) -> bytes:
        """Convert a YUYV frame to RGB."""
        return yuyv_to_rgb24(yuyv, self.width, self.height)

    def jpeg_to_rgb(self, jpeg: bytes) -> bytes:
        """Decode a JPEG frame to RGB."""
        return self.yuyv_to_rgb(self._decoder.decode(jpeg))

    def grey_to_rgb(self, grey: bytes) -> bytes:
        """Spread an 8-bit greyscale frame over all three RGB channels."""
        frame = self._take(grey, self.width * self.height)
        out = bytearray(len(frame) * 3)
        out[0::3] = frame
        out[1::3] = frame
        out[2::3] = frame
        return bytes(out)

    def grey_to_bgr(self, grey: bytes) -> bytes:
        """Convert an 8-bit greyscale frame to bottom-up BGR."""
        return self.yuyv_to_bgr(grey_to_yuyv(grey, self.width, self.height))

    def bayer_to_rgb(self, bayer: bytes, pix_order: int) -> bytes:
        """Demosaic a raw Bayer frame with the given pixel order to RGB."""
        return bayer_to_rgb24(bayer, self.width, self.height, pix_order)

    def bgr_to_rgb(self, bgr: bytes) -> bytes:
        """Swap the first and last channel of every pixel."""
        frame = self._take(bgr, self.width * self.height * 3)
        out = bytearray(frame)
        out[0::3] = frame[2::3]
        out[2::3] = frame[0::3]
        return bytes(out)