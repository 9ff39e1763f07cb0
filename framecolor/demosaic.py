"""Bilinear demosaicing of raw Bayer sensor frames.

``bayer_to_bgr`` interpolates the interior of a frame into packed BGR with
per-channel gains and leaves a one pixel black border. ``bayer_to_rgb24``
interpolates the whole frame, border included, into packed RGB.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum


class BayerCode(IntEnum):
    """Mosaic layouts named after the colours at positions (1, 1) and (1, 2)."""

    BG2BGR = 1
    GB2BGR = 2
    RG2BGR = 3
    GR2BGR = 4
    BG2RGB = 3
    GB2RGB = 4
    RG2RGB = 1
    GR2RGB = 2


class BayerOrder(IntEnum):
    """Mosaic layouts named after the first two rows, read from the top-left corner."""

    GBRG = 0
    GRBG = 1
    BGGR = 2
    RGGB = 3


# (starts with green, first line is a blue line) for each order
_ORDER_LAYOUT = {
    BayerOrder.GBRG: (True, False),
    BayerOrder.GRBG: (True, True),
    BayerOrder.BGGR: (False, False),
    BayerOrder.RGGB: (False, True),
}


def _source(bayer, size: int) -> bytes:
    frame = bytes(bayer)
    if len(frame) < size:
        raise ValueError(f"Bayer frame needs {size} bytes, got {len(frame)}")
    return frame[:size]


def bayer_to_bgr(
    bayer: bytes,
    width: int,
    height: int,
    code: int,
    gain_blue: float = 1.0,
    gain_green: float = 1.0,
    gain_red: float = 1.0,
) -> bytes:
    """Demosaic a Bayer frame to packed BGR, scaling each channel by its gain.

    The outermost rows and columns are left black. Scaled values are stored
    modulo 256, as an 8-bit sample would hold them.
    """
    code = BayerCode(code)
    if width < 2 or height < 2:
        raise ValueError(f"Bayer frame must be at least 2x2, got {width}x{height}")
    gains = (gain_blue, gain_green, gain_red)
    if any(gain < 0 for gain in gains):
        raise ValueError(f"gains must not be negative, got {gains}")
    src = _source(bayer, width * height)
    out = bytearray(width * height * 3)

    blue = -1 if code in (BayerCode.BG2BGR, BayerCode.GB2BGR) else 1
    at_green = code in (BayerCode.GB2BGR, BayerCode.GR2BGR)
    w = width

    for row in range(height - 2):
        for col in range(width - 2):
            p = row * w + col
            green_at = ((row + 1) * w + col + 1) * 3 + 1
            first, second = 1 - blue, 1 + blue
            if at_green:
                vertical = src[p + 1] + src[p + 2 * w + 1]
                horizontal = src[p + w] + src[p + w + 2]
                out[green_at - blue] = ((int(gains[first] * vertical) + 1) // 2) & 0xFF
                out[green_at] = int(gains[1] * src[p + w + 1]) & 0xFF
                out[green_at + blue] = ((int(gains[second] * horizontal) + 1) // 2) & 0xFF
            else:
                diagonal = src[p] + src[p + 2] + src[p + 2 * w] + src[p + 2 * w + 2]
                cross = src[p + 1] + src[p + w] + src[p + w + 2] + src[p + 2 * w + 1]
                out[green_at - blue] = ((int(gains[first] * diagonal) + 2) // 4) & 0xFF
                out[green_at] = ((int(gains[1] * cross) + 2) // 4) & 0xFF
                out[green_at + blue] = int(gains[second] * src[p + w + 1]) & 0xFF
            at_green = not at_green
        at_green = not at_green
        blue = -blue

    return bytes(out)


def _writer(out: bytearray, blue_line: bool) -> Callable[[int, int, int], None]:
    if blue_line:
        def put(first: int, green: int, last: int) -> None:
            out.extend((first, green, last))
    else:
        def put(first: int, green: int, last: int) -> None:
            out.extend((last, green, first))
    return put


def _border_line(
    src: bytes, line: int, adjacent: int, width: int,
    start_with_green: bool, blue_line: bool, out: bytearray,
) -> None:
    """Render a top or bottom line using the one line next to it."""
    put = _writer(out, blue_line)
    b = line
    a = adjacent
    remaining = width

    if start_with_green:
        put(src[b + 1], src[b], src[a])
        t0 = (src[b] + src[b + 2] + src[a + 1] + 1) // 3
        t1 = (src[a] + src[a + 2] + 1) >> 1
        put(src[b + 1], t0, t1)
        b += 1
        a += 1
        remaining -= 2
    else:
        t0 = (src[b + 1] + src[a] + 1) >> 1
        put(src[b], t0, src[a + 1])
        remaining -= 1

    while remaining > 2:
        t0 = (src[b] + src[b + 2] + 1) >> 1
        put(t0, src[b + 1], src[a + 1])
        b += 1
        a += 1
        t0 = (src[b] + src[b + 2] + src[a + 1] + 1) // 3
        t1 = (src[a] + src[a + 2] + 1) >> 1
        put(src[b + 1], t0, t1)
        b += 1
        a += 1
        remaining -= 2

    if remaining == 2:
        t0 = (src[b] + src[b + 2] + 1) >> 1
        put(t0, src[b + 1], src[a + 1])
        t0 = (src[b + 1] + src[a + 2] + 1) >> 1
        put(src[b + 2], t0, src[a + 1])
    else:
        put(src[b], src[b + 1], src[a + 1])


def bayer_to_rgb24(bayer: bytes, width: int, height: int, pix_order: int) -> bytes:
    """Demosaic a whole Bayer frame, borders included, to packed 24-bit RGB.

    An unknown ``pix_order`` is treated as ``BayerOrder.GBRG``.
    """
    if width < 4 or height < 2:
        raise ValueError(f"Bayer frame must be at least 4x2, got {width}x{height}")
    try:
        order = BayerOrder(pix_order)
    except ValueError:
        order = BayerOrder.GBRG
    start_with_green, blue_line = _ORDER_LAYOUT[order]

    src = _source(bayer, width * height)
    w = width
    out = bytearray()

    _border_line(src, 0, w, w, start_with_green, blue_line, out)

    p = 0
    for _ in range(height - 2):
        put = _writer(out, blue_line)
        end = p + (w - 2)

        if start_with_green:
            t0 = (src[p + 1] + src[p + 2 * w + 1] + 1) >> 1
            t1 = (src[p] + src[p + 2 * w] + src[p + w + 1] + 1) // 3
            put(t0, t1, src[p + w])
            t1 = (src[p + w] + src[p + w + 2] + 1) >> 1
            put(t0, src[p + w + 1], t1)
            p += 1
        else:
            t0 = (src[p] + src[p + 2 * w] + 1) >> 1
            put(t0, src[p + w], src[p + w + 1])

        while p <= end - 2:
            t0 = (src[p] + src[p + 2] + src[p + 2 * w] + src[p + 2 * w + 2] + 2) >> 2
            t1 = (src[p + 1] + src[p + w] + src[p + w + 2] + src[p + 2 * w + 1] + 2) >> 2
            put(t0, t1, src[p + w + 1])
            t0 = (src[p + 2] + src[p + 2 * w + 2] + 1) >> 1
            t1 = (src[p + w + 1] + src[p + w + 3] + 1) >> 1
            put(t0, src[p + w + 2], t1)
            p += 2

        if p < end:
            t0 = (src[p] + src[p + 2] + src[p + 2 * w] + src[p + 2 * w + 2] + 2) >> 2
            t1 = (src[p + 1] + src[p + w] + src[p + w + 2] + src[p + 2 * w + 1] + 2) >> 2
            put(t0, t1, src[p + w + 1])
            t0 = (src[p + 2] + src[p + 2 * w + 2] + 1) >> 1
            put(t0, src[p + w + 2], src[p + w + 1])
            p += 1
        else:
            t0 = (src[p] + src[p + 2 * w] + 1) >> 1
            t1 = (src[p + 1] + src[p + 2 * w + 1] + src[p + w] + 1) // 3
            put(t0, t1, src[p + w + 1])

        p += 2
        blue_line = not blue_line
        start_with_green = not start_with_green

    _border_line(src, p + w, p, w, not start_with_green, not blue_line, out)
    return bytes(out)