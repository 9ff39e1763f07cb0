"""Conversions between YUV frames and packed 24-bit RGB/BGR.

YUV to RGB uses the standard full-range coefficients
(R = Y + 1.402 V', G = Y - 0.34414 U' - 0.71414 V', B = Y + 1.772 U').
The ``dib24`` variants produce BGR with the rows stored bottom-up, as
bitmap (DIB) files expect.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .packed import _double_rows, _join
from .planar import (
    _blue_difference,
    _frame,
    _luma,
    _pairs,
    _red_difference,
    _rows,
    clip,
)


def _yuv_to_rgb(y: int, u: int, v: int) -> tuple[int, int, int]:
    red = clip(y + 1.402 * (v - 128))
    green = clip(y - 0.34414 * (u - 128) - 0.71414 * (v - 128))
    blue = clip(y + 1.772 * (u - 128))
    return red, green, blue


def _upsample(chroma: bytes) -> bytes:
    """Repeat every chroma sample so it covers two horizontal pixels."""
    return bytes(sample for value in chroma for sample in (value, value))


def _yu12_rows(data, width: int, height: int) -> Iterator[list[tuple[int, int, int]]]:
    """Yield each image row of a YU12 frame as a list of (R, G, B) pixels."""
    area = width * height
    frame = _frame(data, width, height, area * 3 // 2)
    quarter = area // 4
    half = width // 2
    luma_rows = _rows(frame[:area], width)
    u_rows = _rows(frame[area:area + quarter], half)
    v_rows = _rows(frame[area + quarter:], half)
    for index, row in enumerate(luma_rows):
        cb = _upsample(u_rows[index // 2])
        cr = _upsample(v_rows[index // 2])
        yield [_yuv_to_rgb(y, u, v) for y, u, v in zip(row, cb, cr)]


def _yuyv_rows(data, width: int, height: int) -> Iterator[list[tuple[int, int, int]]]:
    """Yield each image row of a YUYV frame as a list of (R, G, B) pixels."""
    frame = _frame(data, width, height, width * height * 2)
    for row in _rows(frame, width * 2):
        pixels = []
        for y0, u, y1, v in zip(row[0::4], row[1::4], row[2::4], row[3::4]):
            pixels.append(_yuv_to_rgb(y0, u, v))
            pixels.append(_yuv_to_rgb(y1, u, v))
        yield pixels


def _flatten(rows: Iterable[list[tuple[int, int, int]]], reverse_channels: bool) -> bytes:
    out = bytearray()
    for row in rows:
        for pixel in row:
            out += bytes(reversed(pixel)) if reverse_channels else bytes(pixel)
    return bytes(out)


def yu12_to_rgb24(data: bytes, width: int, height: int) -> bytes:
    """Convert planar YU12 to packed 24-bit RGB."""
    return _flatten(_yu12_rows(data, width, height), reverse_channels=False)


def yu12_to_dib24(data: bytes, width: int, height: int) -> bytes:
    """Convert planar YU12 to bottom-up packed 24-bit BGR."""
    rows = list(_yu12_rows(data, width, height))
    return _flatten(reversed(rows), reverse_channels=True)


def yu12_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert planar YU12 to packed YUYV 4:2:2, sharing chroma between row pairs."""
    area = width * height
    frame = _frame(data, width, height, area * 3 // 2)
    quarter = area // 4
    half = width // 2
    cb = _double_rows(frame[area:area + quarter], half)
    cr = _double_rows(frame[area + quarter:], half)
    return _join(frame[:area], cb, cr)


def yuyv_to_rgb24(data: bytes, width: int, height: int) -> bytes:
    """Convert packed YUYV to packed 24-bit RGB."""
    return _flatten(_yuyv_rows(data, width, height), reverse_channels=False)


def yuyv_to_dib24(data: bytes, width: int, height: int) -> bytes:
    """Convert packed YUYV to bottom-up packed 24-bit BGR."""
    rows = list(_yuyv_rows(data, width, height))
    return _flatten(reversed(rows), reverse_channels=True)


def _rgb_to_yuyv(data, width: int, height: int, red: int, blue: int) -> bytes:
    frame = _frame(data, width, height, width * height * 3)
    pixels = zip(frame[red::3], frame[1::3], frame[blue::3])
    out = bytearray()
    for left, right in _pairs(pixels):
        u = clip((_blue_difference(*left) + _blue_difference(*right)) / 2)
        v = clip((_red_difference(*left) + _red_difference(*right)) / 2)
        out += bytes((_luma(*left), u, _luma(*right), v))
    return bytes(out)


def rgb24_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert packed 24-bit RGB to packed YUYV."""
    return _rgb_to_yuyv(data, width, height, red=0, blue=2)


def bgr24_to_yuyv(data: bytes, width: int, height: int) -> bytes:
    """Convert packed 24-bit BGR to packed YUYV."""
    return _rgb_to_yuyv(data, width, height, red=2, blue=0)